"""
Clinical Decision Layer: Base Types

Data contracts shared by the normalizer, fact extractor, correlator and card
builder. Everything here is created fresh per request and never mutated
after construction, apart from the card lists the builder assembles.
"""
from __future__ import annotations

from dataclasses import dataclass, field, fields
from enum import Enum
from typing import Any, Dict, List, Optional


class Indicator(str, Enum):
    """
    Card severity as defined by CDS Hooks.

    INFO     – informational, no action strictly required
    WARNING  – clinician should review before continuing
    CRITICAL – clinician should act before continuing
    """
    INFO     = "info"
    WARNING  = "warning"
    CRITICAL = "critical"


@dataclass(frozen=True)
class ClinicalReport:
    """One normalized clinical document. Only ``description`` is inspected."""
    description: str = ""
    resource_id: Optional[str] = None     # e.g. "DocumentReference/abc"; logging only


@dataclass(frozen=True)
class PairedFinding:
    """
    Result of a same-report correlation.

    ``staging`` holds the literal staging token (e.g. "ypT2N1") from the
    first report that satisfied the pairing; ``report_index`` is that
    report's position in the request.
    """
    detected: bool = False
    staging: str = ""
    report_index: Optional[int] = None


NOT_FOUND = PairedFinding()


@dataclass(frozen=True)
class ClinicalFacts:
    """Facts derived from the report list of a single request."""
    # ── BRCA germline testing ─────────────────────────────────────────────
    brca1_detected: bool = False
    brca2_detected: bool = False
    brca_both_detected: bool = False
    brca_neither_detected: bool = False
    brca_test_done: bool = False

    # ── Post-neoadjuvant pathology ────────────────────────────────────────
    post_neo_status_detected: bool = False
    pathologic_complete_response: bool = False

    # ── Same-report correlations ──────────────────────────────────────────
    post_neo_and_pembro_not_given: PairedFinding = NOT_FOUND
    post_neo_and_pembro_given: PairedFinding = NOT_FOUND
    staging_without_pembro_info: PairedFinding = NOT_FOUND

    @property
    def brca_variant_detected(self) -> bool:
        """True when any pathogenic BRCA variant was reported."""
        return self.brca1_detected or self.brca2_detected or self.brca_both_detected

    def true_facts(self) -> List[str]:
        """Names of the facts that fired, for log messages."""
        names = []
        for f in fields(self):
            name, value = f.name, getattr(self, f.name)
            if isinstance(value, PairedFinding):
                if value.detected:
                    names.append(name)
            elif value:
                names.append(name)
        return names


@dataclass
class CardSource:
    """Citation shown under a card."""
    label: str
    url: str
    type: str = "absolute"

    def to_dict(self) -> Dict[str, Any]:
        return {"label": self.label, "type": self.type, "url": self.url}


@dataclass
class SuggestionAction:
    """A single action inside a suggestion (create / delete / link)."""
    type: str
    description: str
    resource: Optional[Dict[str, Any]] = None
    url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"type": self.type, "description": self.description}
        if self.resource is not None:
            data["resource"] = self.resource
        if self.url is not None:
            data["url"] = self.url
        return data


@dataclass
class Suggestion:
    """A selectable option on a card."""
    label: str
    uuid: str
    actions: List[SuggestionAction] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "label": self.label,
            "uuid": self.uuid,
            "actions": [a.to_dict() for a in self.actions],
        }


@dataclass
class AdvisoryCard:
    """
    One advisory card returned to the EHR.

    A single hook invocation can produce 0-5 cards, one per rule block,
    in the builder's fixed order.
    """
    # ── Core identity ─────────────────────────────────────────────────────
    card_id: str                             # rule block that built it, not serialised
    summary: str
    detail: str
    indicator: Indicator
    source: CardSource

    # ── Actions ───────────────────────────────────────────────────────────
    suggestions: List[Suggestion] = field(default_factory=list)
    selection_behavior: str = "at-most-one"

    # ── Serialisation ─────────────────────────────────────────────────────
    def to_dict(self) -> Dict[str, Any]:
        return {
            "summary": self.summary,
            "detail": self.detail,
            "indicator": self.indicator.value,
            "source": self.source.to_dict(),
            "suggestions": [s.to_dict() for s in self.suggestions],
            "selectionBehavior": self.selection_behavior,
        }
