"""
Unit Tests for Fact Extraction

Checks the pattern table and the OR-accumulation across reports.
"""
import re

import pytest

from tnbc_cds.core.clinical import ClinicalFacts, ClinicalReport, extract_facts
from tnbc_cds.core.clinical import patterns
from tnbc_cds.core.clinical.extractor import report_facts
from tnbc_cds.core.clinical.patterns import (
    FACT_PATTERNS,
    POST_NEO_STAGING_RE,
    RESIDUAL_STAGING_RE,
)
from conftest import (
    BRCA1_TEXT,
    BRCA2_TEXT,
    BRCA_BOTH_TEXT,
    BRCA_NEITHER_TEXT,
    PEMBRO_NOT_GIVEN_TEXT,
)


def _reports(*descriptions):
    return [ClinicalReport(description=d) for d in descriptions]


class TestPatternTable:
    """Tests for the staging regexes and pattern definitions."""

    @pytest.mark.parametrize("token", ["ypT1N0", "ypT2N1", "ypT3N3", "ypT4N2", "ypT0N1", "ypT0N3"])
    def test_residual_staging_tokens(self, token):
        assert RESIDUAL_STAGING_RE.search(f"Pathology: {token}.").group(0) == token

    @pytest.mark.parametrize("text", ["ypT0N0", "pT2N1", "ypt2n1", "ypT5N1", "ypT2N4", "T2N1"])
    def test_residual_staging_non_matches(self, text):
        assert RESIDUAL_STAGING_RE.search(text) is None

    def test_post_neo_pattern_includes_complete_response(self):
        assert POST_NEO_STAGING_RE.search("ypT0N0") is not None

    def test_every_pattern_names_a_fact(self):
        fact_names = set(ClinicalFacts.__dataclass_fields__)
        for pattern in FACT_PATTERNS:
            assert pattern.fact in fact_names
            assert (pattern.phrase is None) != (pattern.regex is None)

    def test_complete_response_matchers_live_in_fact_table(self):
        matchers = [p for p in FACT_PATTERNS if p.fact == "pathologic_complete_response"]

        assert [p.phrase for p in matchers if p.phrase] == ["pCR"]
        assert [p.regex.pattern for p in matchers if p.regex] == ["ypT0N0"]
        assert not hasattr(patterns, "COMPLETE_RESPONSE_PATTERNS")

    @pytest.mark.parametrize("regex", [POST_NEO_STAGING_RE, RESIDUAL_STAGING_RE])
    def test_staging_patterns_are_compiled(self, regex):
        assert isinstance(regex, re.Pattern)


class TestReportFacts:
    """Tests for single-report matching."""

    def test_brca1(self):
        assert report_facts(ClinicalReport(BRCA1_TEXT)) == {"brca1_detected"}

    def test_both_phrase_does_not_set_single_gene_facts(self):
        assert report_facts(ClinicalReport(BRCA_BOTH_TEXT)) == {"brca_both_detected"}

    def test_neither_phrase(self):
        assert report_facts(ClinicalReport(BRCA_NEITHER_TEXT)) == {"brca_neither_detected"}

    def test_matching_is_case_sensitive(self):
        assert report_facts(ClinicalReport(BRCA1_TEXT.upper())) == frozenset()
        assert report_facts(ClinicalReport("PCR negative")) == frozenset()

    def test_whitespace_is_not_collapsed(self):
        text = "A pathogenic variant was detected in the  BRCA1 gene."
        assert report_facts(ClinicalReport(text)) == frozenset()

    def test_complete_response_token(self):
        facts = report_facts(ClinicalReport("Final pathology ypT0N0."))
        assert facts == {"post_neo_status_detected", "pathologic_complete_response"}

    def test_pcr_marker(self):
        assert report_facts(ClinicalReport("Patient achieved pCR.")) == {"pathologic_complete_response"}

    def test_empty_description(self):
        assert report_facts(ClinicalReport()) == frozenset()


class TestExtractFacts:
    """Tests for request-level fact accumulation."""

    def test_no_reports(self):
        assert extract_facts([]) == ClinicalFacts()

    def test_empty_reports(self):
        assert extract_facts(_reports("", "")) == ClinicalFacts()

    def test_facts_accumulate_across_reports(self):
        facts = extract_facts(_reports(BRCA1_TEXT, BRCA2_TEXT, "ypT3N2"))

        assert facts.brca1_detected
        assert facts.brca2_detected
        assert not facts.brca_both_detected
        assert facts.brca_test_done
        assert facts.post_neo_status_detected

    def test_fact_stays_true_once_set(self):
        facts = extract_facts(_reports(BRCA1_TEXT, "unrelated note"))
        assert facts.brca1_detected

    @pytest.mark.parametrize("text", [BRCA1_TEXT, BRCA2_TEXT, BRCA_BOTH_TEXT, BRCA_NEITHER_TEXT])
    def test_any_brca_phrase_marks_test_done(self, text):
        assert extract_facts(_reports(text)).brca_test_done

    def test_no_brca_phrase_means_test_not_done(self):
        facts = extract_facts(_reports("ypT2N1"))
        assert not facts.brca_test_done
        assert facts.post_neo_status_detected

    def test_brca_variant_detected(self):
        assert extract_facts(_reports(BRCA_BOTH_TEXT)).brca_variant_detected
        assert not extract_facts(_reports(BRCA_NEITHER_TEXT)).brca_variant_detected

    def test_correlations_are_included(self):
        facts = extract_facts(_reports(f"ypT2N1. {PEMBRO_NOT_GIVEN_TEXT}"))

        assert facts.post_neo_and_pembro_not_given.detected
        assert facts.post_neo_and_pembro_not_given.staging == "ypT2N1"
        assert not facts.post_neo_and_pembro_given.detected
        assert not facts.staging_without_pembro_info.detected

    def test_extraction_is_deterministic(self):
        reports = _reports(BRCA1_TEXT, "ypT1N0", "pCR")
        assert extract_facts(reports) == extract_facts(reports)

    def test_true_facts(self):
        facts = extract_facts(_reports(BRCA2_TEXT, "ypT1N0"))
        assert facts.true_facts() == [
            "brca2_detected",
            "brca_test_done",
            "post_neo_status_detected",
            "staging_without_pembro_info",
        ]
