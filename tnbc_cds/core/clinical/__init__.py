"""
Clinical Decision Layer

Transforms prefetched pathology / genetics reports into CDS Hooks cards.

Usage:
    from tnbc_cds.core.clinical import AdvisoryEngine

    engine = AdvisoryEngine()
    response = engine.evaluate(request_body)   # {"cards": [...]}
"""
from .engine import AdvisoryEngine, assemble_response
from .base import (
    AdvisoryCard,
    ClinicalFacts,
    ClinicalReport,
    Indicator,
    PairedFinding,
    Suggestion,
    SuggestionAction,
)
from .cards import CARD_RULES, brca_status, build_cards
from .extractor import extract_facts
from .normalizer import normalize_reports

__all__ = [
    "AdvisoryEngine",
    "assemble_response",
    "AdvisoryCard",
    "ClinicalFacts",
    "ClinicalReport",
    "Indicator",
    "PairedFinding",
    "Suggestion",
    "SuggestionAction",
    "CARD_RULES",
    "brca_status",
    "build_cards",
    "extract_facts",
    "normalize_reports",
]
