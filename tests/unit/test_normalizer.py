"""
Unit Tests for the Report Normalizer

Prefetch shapes: absent, single resource, Bundle, and malformed values.
"""
import pytest

from tnbc_cds.core.clinical import ClinicalReport, normalize_reports
from tnbc_cds.core.clinical.normalizer import (
    is_bundle,
    patient_id_from_request,
    reports_from_request,
)
from conftest import make_bundle, make_request, make_resource


class TestNormalizeReports:
    """Tests for normalize_reports."""

    @pytest.mark.parametrize("value", [None, {}, [], ""])
    def test_absent_or_empty_prefetch(self, value):
        assert normalize_reports(value) == []

    def test_single_resource(self):
        reports = normalize_reports(make_resource("ypT2N1", resource_id="abc"))

        assert len(reports) == 1
        assert reports[0].description == "ypT2N1"
        assert reports[0].resource_id == "DocumentReference/abc"

    def test_bundle_preserves_entry_order(self):
        reports = normalize_reports(make_bundle("first", "second", "third"))
        assert [r.description for r in reports] == ["first", "second", "third"]

    def test_empty_bundle(self):
        assert normalize_reports(make_bundle()) == []

    def test_missing_description_is_empty(self):
        reports = normalize_reports(make_resource(None))
        assert reports == [ClinicalReport(description="", resource_id="DocumentReference/r1")]

    def test_non_string_description_is_empty(self):
        resource = make_resource(None)
        resource["description"] = 42
        assert normalize_reports(resource)[0].description == ""

    def test_bundle_entry_without_resource(self):
        bundle = {"resourceType": "Bundle", "entry": [{}, "junk", {"resource": {"description": "pCR"}}]}
        reports = normalize_reports(bundle)

        assert [r.description for r in reports] == ["", "", "pCR"]

    def test_bundle_without_entry_list_is_single_report(self):
        # Not a usable Bundle; treated as one (empty) document.
        reports = normalize_reports({"resourceType": "Bundle", "entry": "nope"})
        assert len(reports) == 1
        assert reports[0].description == ""

    def test_non_mapping_value_yields_one_empty_report(self):
        reports = normalize_reports("some text")
        assert reports == [ClinicalReport()]


class TestIsBundle:
    def test_bundle(self):
        assert is_bundle(make_bundle("x"))

    def test_resource(self):
        assert not is_bundle(make_resource("x"))

    def test_wrong_resource_type(self):
        assert not is_bundle({"resourceType": "DocumentReference", "entry": []})


class TestRequestAccessors:
    """Tests for reading prefetch and patient id out of a hook body."""

    def test_reports_from_request(self):
        body = make_request(make_bundle("a", "b"))
        assert [r.description for r in reports_from_request(body)] == ["a", "b"]

    @pytest.mark.parametrize("body", [
        {},
        {"prefetch": None},
        {"prefetch": "not-a-mapping"},
        {"prefetch": {"patient": {"resourceType": "Patient"}}},
        None,
        [],
    ])
    def test_reports_from_request_missing(self, body):
        assert reports_from_request(body) == []

    def test_patient_id(self):
        assert patient_id_from_request(make_request(patient_id="p-1")) == "p-1"

    @pytest.mark.parametrize("body", [
        {},
        {"context": None},
        {"context": {"patientId": ""}},
        {"context": {"patientId": False}},
        {"context": {"patientId": 0}},
        {"context": {"patientId": None}},
        make_request(patient_id=None),
    ])
    def test_patient_id_falls_back_to_unknown(self, body):
        assert patient_id_from_request(body) == "unknown"

    def test_numeric_patient_id_is_stringified(self):
        assert patient_id_from_request({"context": {"patientId": 1001}}) == "1001"
