"""
Pytest Configuration and Fixtures

Shared report texts and request builders for the CDS service tests.
"""
import pytest
from typing import Any, Dict, List, Optional


BRCA1_TEXT = "A pathogenic variant was detected in the BRCA1 gene."
BRCA2_TEXT = "A pathogenic variant was detected in the BRCA2 gene."
BRCA_BOTH_TEXT = "Pathogenic variants was detected in both the BRCA1 gene and the BRCA2 gene."
BRCA_NEITHER_TEXT = "A pathogenic variant was not detected in neither the BRCA1 gene nor the BRCA2 gene."
PEMBRO_NOT_GIVEN_TEXT = "A pembrolizumab-containing regimen was not given preoperatively."
PEMBRO_GIVEN_TEXT = "A pembrolizumab-containing regimen was given preoperatively."


def make_resource(description: Optional[str], resource_id: str = "r1") -> Dict[str, Any]:
    """A DocumentReference-like resource."""
    resource: Dict[str, Any] = {"resourceType": "DocumentReference", "id": resource_id}
    if description is not None:
        resource["description"] = description
    return resource


def make_bundle(*descriptions: Optional[str]) -> Dict[str, Any]:
    """A searchset Bundle with one entry per description."""
    return {
        "resourceType": "Bundle",
        "type": "searchset",
        "entry": [
            {"resource": make_resource(d, resource_id=f"r{i}")}
            for i, d in enumerate(descriptions, start=1)
        ],
    }


def make_request(genetic_report: Any = None, patient_id: Optional[str] = "pat-123") -> Dict[str, Any]:
    """An order-select hook request body."""
    body: Dict[str, Any] = {
        "hook": "order-select",
        "hookInstance": "d1577c69-dfbe-44ad-ba6d-3e05e953b2ea",
        "context": {},
        "prefetch": {},
    }
    if patient_id is not None:
        body["context"]["patientId"] = patient_id
    if genetic_report is not None:
        body["prefetch"]["geneticReport"] = genetic_report
    return body


def suggestion_uuids(card: Dict[str, Any]) -> List[str]:
    return [s["uuid"] for s in card["suggestions"]]


@pytest.fixture
def brca1_not_given_description() -> str:
    """Single report: BRCA1 variant, residual ypT2N1, pembrolizumab not given."""
    return (
        "Germline testing: a pathogenic variant was detected in the BRCA1 gene. "
        "Surgical pathology after neoadjuvant chemotherapy: ypT2N1. "
        "A pembrolizumab-containing regimen was not given preoperatively."
    )


@pytest.fixture
def patient_id() -> str:
    return "pat-123"
