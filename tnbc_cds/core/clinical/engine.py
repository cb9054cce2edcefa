"""
Advisory Engine

Entry point of the clinical decision layer. Takes a CDS Hooks request body
and returns the hook response: normalize reports → extract facts → build
cards → wrap as ``{"cards": [...]}``.

Usage:
    from tnbc_cds.core.clinical import AdvisoryEngine

    engine = AdvisoryEngine()
    response = engine.evaluate(request_body)
    for card in response["cards"]:
        print(card["summary"], card["indicator"])
"""
from __future__ import annotations

import logging
from dataclasses import fields
from typing import Any, Dict, List, Sequence

from .base import AdvisoryCard, ClinicalFacts, ClinicalReport, PairedFinding
from .cards import build_cards
from .extractor import extract_facts
from .normalizer import patient_id_from_request, reports_from_request

logger = logging.getLogger(__name__)


def assemble_response(cards: Sequence[AdvisoryCard]) -> Dict[str, List[Dict[str, Any]]]:
    """Wrap cards in the CDS Hooks response envelope, preserving order."""
    return {"cards": [card.to_dict() for card in cards]}


class AdvisoryEngine:
    """
    Evaluates order-select hook requests into advisory cards.

    Stateless; safe to call from multiple threads / concurrent requests.
    Never raises for missing or oddly shaped prefetch data; such input simply
    yields fewer facts.
    """

    def analyze(
        self,
        reports: Sequence[ClinicalReport],
        patient_id: str,
    ) -> List[AdvisoryCard]:
        """
        Run fact extraction and card rules over already-normalized reports.

        Returns:
            Cards in rule order. An empty list is the expected result when
            the reports contain nothing actionable.
        """
        facts = self.facts(reports)
        self._log_paired_sources(facts, reports)
        cards = build_cards(facts, patient_id)

        if cards:
            logger.info(
                f"AdvisoryEngine: {len(reports)} report(s) → "
                f"{len(cards)} card(s): " + ", ".join(c.card_id for c in cards)
            )
        else:
            logger.debug(f"AdvisoryEngine: {len(reports)} report(s) → no cards")
        return cards

    @staticmethod
    def facts(reports: Sequence[ClinicalReport]) -> ClinicalFacts:
        """Facts for a report list. Useful for testing rules in isolation."""
        facts = extract_facts(reports)
        logger.debug(f"AdvisoryEngine: facts fired = {facts.true_facts()}")
        return facts

    @staticmethod
    def _log_paired_sources(facts: ClinicalFacts, reports: Sequence[ClinicalReport]) -> None:
        """Name the report each same-report finding was taken from."""
        for f in fields(facts):
            finding = getattr(facts, f.name)
            if not isinstance(finding, PairedFinding) or not finding.detected:
                continue
            source = reports[finding.report_index]
            logger.debug(
                f"AdvisoryEngine: {f.name} ({finding.staging}) from report "
                f"#{finding.report_index} {source.resource_id or '<no id>'}"
            )

    def evaluate(self, body: Any) -> Dict[str, List[Dict[str, Any]]]:
        """
        Evaluate a full hook request body.

        Args:
            body: Parsed JSON request. ``context.patientId`` and
                  ``prefetch.geneticReport`` are read when present.

        Returns:
            ``{"cards": [...]}`` ready to serialise.
        """
        reports = reports_from_request(body)
        patient_id = patient_id_from_request(body)
        return assemble_response(self.analyze(reports, patient_id))
