"""
Report Normalizer

Turns the ``geneticReport`` prefetch value into an ordered list of
ClinicalReports. The prefetch may be a single FHIR resource, a Bundle of
resources, or missing altogether; none of these shapes is an error.
"""
from __future__ import annotations

from typing import Any, List, Mapping

from tnbc_cds.config import GENETIC_REPORT_PREFETCH_KEY, UNKNOWN_PATIENT_ID
from .base import ClinicalReport


def _as_mapping(value: Any) -> Mapping:
    return value if isinstance(value, Mapping) else {}


def _to_report(resource: Any) -> ClinicalReport:
    """Build a report from one resource; non-mapping resources become empty reports."""
    resource = _as_mapping(resource)
    description = resource.get("description")
    resource_type = resource.get("resourceType")
    resource_id = resource.get("id")
    return ClinicalReport(
        description=description if isinstance(description, str) else "",
        resource_id=f"{resource_type}/{resource_id}" if resource_type and resource_id else None,
    )


def is_bundle(value: Any) -> bool:
    """A Bundle is a mapping with resourceType "Bundle" and a list of entries."""
    return (
        isinstance(value, Mapping)
        and value.get("resourceType") == "Bundle"
        and isinstance(value.get("entry"), list)
    )


def normalize_reports(prefetch_value: Any) -> List[ClinicalReport]:
    """
    Normalize a prefetch value into reports.

    - absent / empty        → []
    - Bundle                → one report per entry, in entry order
    - anything else         → the value itself as a single report
    """
    if not prefetch_value:
        return []

    if is_bundle(prefetch_value):
        return [
            _to_report(_as_mapping(entry).get("resource"))
            for entry in prefetch_value["entry"]
        ]

    return [_to_report(prefetch_value)]


def reports_from_request(body: Any) -> List[ClinicalReport]:
    """Read ``prefetch.geneticReport`` from a hook request body."""
    prefetch = _as_mapping(_as_mapping(body).get("prefetch"))
    return normalize_reports(prefetch.get(GENETIC_REPORT_PREFETCH_KEY))


def patient_id_from_request(body: Any) -> str:
    """Read ``context.patientId``; any falsy id becomes the "unknown" sentinel."""
    patient_id = _as_mapping(_as_mapping(body).get("context")).get("patientId")
    if not patient_id:
        return UNKNOWN_PATIENT_ID
    return str(patient_id)
