"""
Fact Extractor

Reduces a request's reports to a single ClinicalFacts value. Each report is
tested once against the FACT_PATTERNS table; a fact that fires for any
report stays true for the whole request.
"""
from __future__ import annotations

from dataclasses import replace
from functools import reduce
from typing import FrozenSet, Sequence

from .base import ClinicalFacts, ClinicalReport
from .correlator import correlate
from .patterns import BRCA_RESULT_FACTS, FACT_PATTERNS


def report_facts(report: ClinicalReport) -> FrozenSet[str]:
    """Names of the pattern facts that match one report."""
    text = report.description
    return frozenset(p.fact for p in FACT_PATTERNS if p.matches(text))


def _accumulate(facts: ClinicalFacts, report: ClinicalReport) -> ClinicalFacts:
    fired = report_facts(report)
    if not fired:
        return facts
    updates = {name: True for name in fired}
    if fired.intersection(BRCA_RESULT_FACTS):
        updates["brca_test_done"] = True
    return replace(facts, **updates)


def extract_facts(reports: Sequence[ClinicalReport]) -> ClinicalFacts:
    """
    Derive all facts for one request.

    Args:
        reports: Normalized reports, in request order.

    Returns:
        ClinicalFacts with the pattern facts OR-ed across reports and the
        same-report correlations filled in by the correlator.
    """
    facts = reduce(_accumulate, reports, ClinicalFacts())
    return replace(facts, **correlate(reports))
