"""
TNBC Advisory Card Rules

Turns ClinicalFacts into CDS Hooks cards for post-neoadjuvant triple-negative
breast cancer, following the NCCN Breast Cancer guideline (adjuvant therapy
for residual disease, pg. 29):
  - residual disease + pathogenic germline BRCA variant → adjuvant olaparib
  - residual disease → adjuvant capecitabine
  - pembrolizumab given preoperatively → continue adjuvant pembrolizumab

Design principles:
  - Each rule function is pure: (ClinicalFacts, patient_id) → Optional[AdvisoryCard]
  - Rules are independent; each contributes at most one card.
  - CARD_RULES order is the order cards appear in the response. Reordering
    it, or the suggestions inside a card, changes the service's output.
"""
from __future__ import annotations

import logging
from typing import Dict, List, Optional, Tuple

from tnbc_cds.config import GUIDELINE_URL, UNKNOWN_PATIENT_ID
from .base import (
    AdvisoryCard,
    CardSource,
    ClinicalFacts,
    Indicator,
    Suggestion,
    SuggestionAction,
)

logger = logging.getLogger(__name__)

# ── Coding systems ────────────────────────────────────────────────────────────
RXNORM_SYSTEM = "http://www.nlm.nih.gov/research/umls/rxnorm"
LOINC_SYSTEM  = "http://loinc.org"

# ── Orderables ────────────────────────────────────────────────────────────────
OLAPARIB_RXNORM      = "1792776"
CAPECITABINE_RXNORM  = "205740"
PEMBROLIZUMAB_RXNORM = "1789221"
BRCA_PANEL_LOINC     = "81247-9"
BRCA_PANEL_DISPLAY   = "BRCA1 and BRCA2 gene analysis"

# ── Citations ─────────────────────────────────────────────────────────────────
NCCN_CPG_LABEL        = "NCCN CPG pg. 29"
NCCN_REGIMEN_LABEL    = "NCCN Regimen Criteria"
GENETIC_TESTING_LABEL = "Genetic Testing Recommendation"

# ── BRCA status phrases (summary, detail) ─────────────────────────────────────
BRCA_BOTH_STATUS = (
    "BRCA1 & BRCA2 Pathogenic Variants Detected",
    "Patient has pathogenic variants detected in both the BRCA1 and BRCA2 genes.",
)
BRCA1_STATUS = (
    "BRCA1 Pathogenic Variant Detected",
    "Patient has a pathogenic variant detected in the BRCA1 gene.",
)
BRCA2_STATUS = (
    "BRCA2 Pathogenic Variant Detected",
    "Patient has a pathogenic variant detected in the BRCA2 gene.",
)
BRCA_NEITHER_STATUS = (
    "No BRCA1 or BRCA2 Pathogenic Variants Detected",
    "No pathogenic variants detected in BRCA1 or BRCA2 genes.",
)
BRCA_NOT_TESTED_STATUS = (
    "BRCA Genetic Test Not Found",
    "No evidence of BRCA1/BRCA2 genetic testing found in the patient's records.",
)


def brca_status(facts: ClinicalFacts) -> Tuple[str, str]:
    """
    Pick the single (summary, detail) pair describing BRCA status.

    Priority: both-genes phrase > BRCA1 and BRCA2 reported separately >
    BRCA1 > BRCA2 > neither > no test found.
    """
    if facts.brca_both_detected:
        return BRCA_BOTH_STATUS
    if facts.brca1_detected and facts.brca2_detected:
        return BRCA_BOTH_STATUS
    if facts.brca1_detected:
        return BRCA1_STATUS
    if facts.brca2_detected:
        return BRCA2_STATUS
    if facts.brca_neither_detected:
        return BRCA_NEITHER_STATUS
    return BRCA_NOT_TESTED_STATUS


# ── Suggestion catalog ────────────────────────────────────────────────────────

def _subject(patient_id: str) -> Dict[str, str]:
    return {"reference": f"Patient/{patient_id or UNKNOWN_PATIENT_ID}"}


def _medication_order(label: str, uuid: str, display: str, rxnorm: str,
                      patient_id: str) -> Suggestion:
    return Suggestion(
        label=label,
        uuid=uuid,
        actions=[
            SuggestionAction(
                type="create",
                description=f"Add {display} (RxNorm {rxnorm}) to orders.",
                resource={
                    "resourceType": "MedicationRequest",
                    "status": "active",
                    "intent": "order",
                    "medicationCodeableConcept": {
                        "coding": [
                            {"system": RXNORM_SYSTEM, "code": rxnorm, "display": display}
                        ],
                        "text": display,
                    },
                    "subject": _subject(patient_id),
                },
            )
        ],
    )


def olaparib_suggestion(patient_id: str) -> Suggestion:
    return _medication_order(
        "Add Olaparib (Strongly Recommended)", "add-olaparib",
        "Olaparib", OLAPARIB_RXNORM, patient_id,
    )


def capecitabine_suggestion(patient_id: str) -> Suggestion:
    return _medication_order(
        "Add Capecitabine", "add-capecitabine",
        "Capecitabine", CAPECITABINE_RXNORM, patient_id,
    )


def pembrolizumab_suggestion(patient_id: str) -> Suggestion:
    return _medication_order(
        "Add Pembrolizumab", "add-pembrolizumab",
        "Pembrolizumab", PEMBROLIZUMAB_RXNORM, patient_id,
    )


def brca_test_order_suggestion(patient_id: str) -> Suggestion:
    return Suggestion(
        label="Order BRCA Genetic Test",
        uuid="order-brca-genetic-test",
        actions=[
            SuggestionAction(
                type="create",
                description="Order BRCA1/BRCA2 genetic testing.",
                resource={
                    "resourceType": "ServiceRequest",
                    "status": "active",
                    "intent": "order",
                    "code": {
                        "coding": [
                            {
                                "system": LOINC_SYSTEM,
                                "code": BRCA_PANEL_LOINC,
                                "display": BRCA_PANEL_DISPLAY,
                            }
                        ],
                        "text": BRCA_PANEL_DISPLAY,
                    },
                    "subject": _subject(patient_id),
                },
            )
        ],
    )


def dismiss_suggestion() -> Suggestion:
    return Suggestion(
        label="Dismiss",
        uuid="dismiss-card",
        actions=[
            SuggestionAction(type="delete", description="Dismiss this recommendation card.")
        ],
    )


def regimen_criteria_suggestion() -> Suggestion:
    return Suggestion(
        label="View Regimen Criteria",
        uuid="view-regimen-criteria",
        actions=[
            SuggestionAction(
                type="link",
                description="View NCCN regimen criteria.",
                url=GUIDELINE_URL,
            )
        ],
    )


def adjuvant_suggestions(facts: ClinicalFacts, patient_id: str,
                         include_pembrolizumab: bool) -> List[Suggestion]:
    """
    Adjuvant therapy options for residual disease, in display order:
    olaparib (BRCA variant only), capecitabine, pembrolizumab (optional), dismiss.
    """
    suggestions: List[Suggestion] = []
    if facts.brca_variant_detected:
        suggestions.append(olaparib_suggestion(patient_id))
    suggestions.append(capecitabine_suggestion(patient_id))
    if include_pembrolizumab:
        suggestions.append(pembrolizumab_suggestion(patient_id))
    suggestions.append(dismiss_suggestion())
    return suggestions


def _source(label: str) -> CardSource:
    return CardSource(label=label, url=GUIDELINE_URL)


# ── Rule 1: BRCA testing gap ──────────────────────────────────────────────────

def rule_brca_testing_gap(facts: ClinicalFacts, patient_id: str) -> Optional[AdvisoryCard]:
    """Post-neoadjuvant pathology on file but no BRCA result anywhere."""
    if facts.brca_test_done or not facts.post_neo_status_detected:
        return None

    return AdvisoryCard(
        card_id="brca-testing-gap",
        summary="BRCA Genetic Test Not Found",
        detail=(
            "No evidence of BRCA1/BRCA2 genetic testing found in the patient's records. "
            "Recommend ordering BRCA genetic testing."
        ),
        indicator=Indicator.INFO,
        source=_source(GENETIC_TESTING_LABEL),
        suggestions=[brca_test_order_suggestion(patient_id), dismiss_suggestion()],
    )


# ── Rule 2: Residual disease, pembrolizumab not given ─────────────────────────

def rule_residual_pembro_not_given(facts: ClinicalFacts, patient_id: str) -> Optional[AdvisoryCard]:
    finding = facts.post_neo_and_pembro_not_given
    if not finding.detected:
        return None

    gene_summary, gene_detail = brca_status(facts)
    return AdvisoryCard(
        card_id="residual-pembro-not-given",
        summary=f"{gene_summary}. Pathology: {finding.staging}",
        detail=(
            f"{gene_detail} Residual cancer after neoadjuvant therapy "
            f"(pathology: {finding.staging}), and did not receive a "
            f"pembrolizumab-containing regimen preoperatively."
        ),
        indicator=Indicator.WARNING,
        source=_source(NCCN_CPG_LABEL),
        suggestions=adjuvant_suggestions(facts, patient_id, include_pembrolizumab=False),
    )


# ── Rule 3: Residual disease, pembrolizumab given ─────────────────────────────

def rule_residual_pembro_given(facts: ClinicalFacts, patient_id: str) -> Optional[AdvisoryCard]:
    finding = facts.post_neo_and_pembro_given
    if not finding.detected:
        return None

    gene_summary, gene_detail = brca_status(facts)
    return AdvisoryCard(
        card_id="residual-pembro-given",
        summary=f"{gene_summary}. Pathology: {finding.staging}",
        detail=(
            f"{gene_detail} Residual cancer after neoadjuvant therapy "
            f"(pathology: {finding.staging}), and DID receive a "
            f"pembrolizumab-containing regimen preoperatively."
        ),
        indicator=Indicator.WARNING,
        source=_source(NCCN_CPG_LABEL),
        suggestions=adjuvant_suggestions(facts, patient_id, include_pembrolizumab=True),
    )


# ── Rule 4: Pathologic complete response ──────────────────────────────────────

def rule_complete_response(facts: ClinicalFacts, patient_id: str) -> Optional[AdvisoryCard]:
    """ypT0N0 or pCR in any report. Only ever one card, however many reports match."""
    if not facts.pathologic_complete_response:
        return None

    return AdvisoryCard(
        card_id="complete-response",
        summary="No Residual Cancer Detected (ypT0N0 or pCR)",
        detail=(
            "Pathology report indicates ypT0N0 status or pCR "
            "(no residual cancer after neoadjuvant therapy). "
        ),
        indicator=Indicator.INFO,
        source=_source(NCCN_REGIMEN_LABEL),
        suggestions=[
            dismiss_suggestion(),
            regimen_criteria_suggestion(),
            pembrolizumab_suggestion(patient_id),
        ],
    )


# ── Rule 5: Residual disease, pembrolizumab history unknown ───────────────────

def rule_missing_pembro_history(facts: ClinicalFacts, patient_id: str) -> Optional[AdvisoryCard]:
    finding = facts.staging_without_pembro_info
    if not finding.detected:
        return None

    _, gene_detail = brca_status(facts)
    return AdvisoryCard(
        card_id="missing-pembro-history",
        summary="Check Patient's Treatment History",
        detail=(
            f"Pathology report indicates residual cancer (pathology: {finding.staging}). "
            f"{gene_detail} Does not specify if pembrolizumab-containing regimen was "
            f"given preoperatively. Please check the patient's treatment history."
        ),
        indicator=Indicator.WARNING,
        source=_source(NCCN_CPG_LABEL),
        suggestions=adjuvant_suggestions(facts, patient_id, include_pembrolizumab=True),
    )


# ── Public interface ───────────────────────────────────────────────────────────

# All rules in response order.
CARD_RULES = [
    rule_brca_testing_gap,
    rule_residual_pembro_not_given,
    rule_residual_pembro_given,
    rule_complete_response,
    rule_missing_pembro_history,
]


def build_cards(facts: ClinicalFacts, patient_id: str = UNKNOWN_PATIENT_ID) -> List[AdvisoryCard]:
    """
    Evaluate every card rule against the request's facts.

    Returns:
        Cards in CARD_RULES order; rules that did not fire contribute nothing.
    """
    cards = []
    for rule in CARD_RULES:
        card = rule(facts, patient_id)
        if card is None:
            logger.debug(f"Card rule {rule.__name__}: not triggered")
            continue
        cards.append(card)
    return cards
