"""
Cross-Report Correlator

Some facts only hold when two conditions appear in the *same* report: a
residual-disease staging token plus a statement about preoperative
pembrolizumab. A staging token in one document and the phrase in another
does not count.

Each correlation scans reports in order and stops at the first report that
satisfies it; later reports are never consulted.
"""
from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Dict, Sequence, Tuple

from .base import ClinicalReport, PairedFinding, NOT_FOUND
from .patterns import (
    PEMBRO_GIVEN_PHRASE,
    PEMBRO_NOT_GIVEN_PHRASE,
    RESIDUAL_STAGING_RE,
)


@dataclass(frozen=True)
class CorrelationRule:
    """
    Staging regex plus phrases that must (or must not) share its report.
    """
    fact: str
    staging: re.Pattern[str]
    required: Tuple[str, ...] = ()
    forbidden: Tuple[str, ...] = ()

    def match(self, text: str) -> str:
        """Return the staging token if ``text`` satisfies the rule, else ""."""
        if any(phrase not in text for phrase in self.required):
            return ""
        if any(phrase in text for phrase in self.forbidden):
            return ""
        staging = self.staging.search(text)
        return staging.group(0) if staging else ""


CORRELATION_RULES: Tuple[CorrelationRule, ...] = (
    CorrelationRule(
        fact="post_neo_and_pembro_not_given",
        staging=RESIDUAL_STAGING_RE,
        required=(PEMBRO_NOT_GIVEN_PHRASE,),
    ),
    CorrelationRule(
        fact="post_neo_and_pembro_given",
        staging=RESIDUAL_STAGING_RE,
        required=(PEMBRO_GIVEN_PHRASE,),
    ),
    CorrelationRule(
        fact="staging_without_pembro_info",
        staging=RESIDUAL_STAGING_RE,
        forbidden=(PEMBRO_GIVEN_PHRASE, PEMBRO_NOT_GIVEN_PHRASE),
    ),
)


def find_first(rule: CorrelationRule, reports: Sequence[ClinicalReport]) -> PairedFinding:
    """First report (in request order) satisfying ``rule``."""
    for index, report in enumerate(reports):
        token = rule.match(report.description)
        if token:
            return PairedFinding(detected=True, staging=token, report_index=index)
    return NOT_FOUND


def correlate(reports: Sequence[ClinicalReport]) -> Dict[str, PairedFinding]:
    """Evaluate every correlation rule; keys are ClinicalFacts field names."""
    return {rule.fact: find_first(rule, reports) for rule in CORRELATION_RULES}
