"""Tests for the CRM client -- payloads and HTTP handling via httpx.MockTransport."""

import json

import httpx
import pytest

from wellness_roi.config.settings import Settings
from wellness_roi.integrations.crm import (
    CUSTOM_FIELD_KEYS,
    LEAD_TAG,
    CRMClient,
    build_contact_payload,
    build_opportunity_payload,
    profile_from_contact,
)


def make_client(settings, handler) -> CRMClient:
    http = httpx.AsyncClient(
        base_url=settings.crm_base_url, transport=httpx.MockTransport(handler)
    )
    return CRMClient(settings=settings, client=http)


class TestContactPayload:
    def test_identity_and_tags(self, hot_lead, profile_150, roi_150):
        payload = build_contact_payload(hot_lead, profile_150, roi_150, 100, location_id="loc-1")
        assert payload["firstName"] == "Jane"
        assert payload["lastName"] == "Smith"
        assert payload["email"] == "jane.smith@acme.co.uk"
        assert payload["companyName"] == "Acme Ltd"
        assert payload["source"] == "ROI Calculator"
        assert payload["locationId"] == "loc-1"
        assert payload["tags"] == [
            LEAD_TAG,
            "Timeline: Immediate",
            "Company Size: 1000+",
            "Lead Score: 100",
            "ROI: 370%",
        ]

    def test_custom_fields(self, hot_lead, profile_150, roi_150):
        payload = build_contact_payload(hot_lead, profile_150, roi_150, 100)
        fields = {f["key"]: f["field_value"] for f in payload["customFields"]}
        assert set(fields) == set(CUSTOM_FIELD_KEYS.values())
        assert fields["contact.employees"] == 150
        assert fields["contact.potential_savings"] == pytest.approx(1_111_153.85)
        assert fields["contact.calculated_roi"] == pytest.approx(370.33)
        assert fields["contact.program_cost"] == 315_000
        assert fields["contact.lead_score"] == 100
        assert fields["contact.payback_months"] == 1
        assert "locationId" not in payload


class TestOpportunityPayload:
    def test_fields(self, hot_lead, profile_150, roi_150, settings):
        payload = build_opportunity_payload("c-1", hot_lead, profile_150, roi_150, 100, settings)
        assert payload["name"] == "Acme Ltd - Corporate Wellness Program"
        assert payload["contactId"] == "c-1"
        assert payload["status"] == "open"
        assert payload["monetaryValue"] == 315_000
        assert payload["pipelineId"] == "pipe-1"
        assert payload["pipelineStageId"] == "stage-1"
        assert payload["assignedTo"] == "user-1"
        assert "Lead Score: 100/100" in payload["notes"]
        assert "Potential Annual Savings: £1,111,154" in payload["notes"]

    def test_optional_ids_omitted(self, hot_lead, profile_150, roi_150):
        settings = Settings(_env_file=None, crm_pipeline_id="pipe-1")
        payload = build_opportunity_payload("c-1", hot_lead, profile_150, roi_150, 50, settings)
        assert "pipelineStageId" not in payload
        assert "assignedTo" not in payload


class TestUpsertContact:
    @pytest.mark.asyncio
    async def test_created(self, settings, hot_lead, profile_150, roi_150):
        seen = {}

        def handler(request: httpx.Request) -> httpx.Response:
            seen["path"] = request.url.path
            seen["auth"] = request.headers["Authorization"]
            seen["version"] = request.headers["Version"]
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"new": True, "contact": {"id": "c-123"}})

        crm = make_client(settings, handler)
        outcome = await crm.upsert_contact(hot_lead, profile_150, roi_150, 100)

        assert outcome.success
        assert outcome.data == {"contactId": "c-123", "created": True}
        assert seen["path"] == "/contacts/upsert"
        assert seen["auth"] == "Bearer test-key"
        assert seen["version"] == "2021-07-28"
        assert seen["body"]["email"] == "jane.smith@acme.co.uk"

    @pytest.mark.asyncio
    async def test_updated(self, settings, hot_lead, profile_150, roi_150):
        crm = make_client(
            settings, lambda r: httpx.Response(200, json={"new": False, "contact": {"id": "c-9"}})
        )
        outcome = await crm.upsert_contact(hot_lead, profile_150, roi_150, 100)
        assert outcome.success
        assert outcome.message == "Contact updated"
        assert outcome.data["created"] is False

    @pytest.mark.asyncio
    async def test_unconfigured(self, hot_lead, profile_150, roi_150):
        def handler(request):
            raise AssertionError("no request expected")

        crm = make_client(Settings(_env_file=None, crm_api_key=""), handler)
        outcome = await crm.upsert_contact(hot_lead, profile_150, roi_150, 100)
        assert not outcome.success
        assert outcome.message == "CRM API key not configured"

    @pytest.mark.asyncio
    async def test_api_error(self, settings, hot_lead, profile_150, roi_150):
        crm = make_client(settings, lambda r: httpx.Response(422, text="bad email"))
        outcome = await crm.upsert_contact(hot_lead, profile_150, roi_150, 100)
        assert not outcome.success
        assert outcome.data["status_code"] == 422

    @pytest.mark.asyncio
    async def test_transport_error(self, settings, hot_lead, profile_150, roi_150):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        crm = make_client(settings, handler)
        outcome = await crm.upsert_contact(hot_lead, profile_150, roi_150, 100)
        assert not outcome.success
        assert "connection refused" in outcome.message

    @pytest.mark.asyncio
    async def test_missing_id(self, settings, hot_lead, profile_150, roi_150):
        crm = make_client(settings, lambda r: httpx.Response(200, text="<html>ok</html>"))
        outcome = await crm.upsert_contact(hot_lead, profile_150, roi_150, 100)
        assert not outcome.success
        assert outcome.message == "CRM response missing contact id"


class TestOpportunityAndNotes:
    @pytest.mark.asyncio
    async def test_create_opportunity(self, settings, hot_lead, profile_150, roi_150):
        def handler(request):
            assert request.url.path == "/opportunities/"
            return httpx.Response(201, json={"opportunity": {"id": "o-1"}})

        crm = make_client(settings, handler)
        outcome = await crm.create_opportunity("c-1", hot_lead, profile_150, roi_150, 100)
        assert outcome.success
        assert outcome.data["opportunityId"] == "o-1"

    @pytest.mark.asyncio
    async def test_opportunity_needs_pipeline(self, hot_lead, profile_150, roi_150):
        settings = Settings(_env_file=None, crm_api_key="k", crm_pipeline_id="")
        crm = make_client(settings, lambda r: httpx.Response(500))
        outcome = await crm.create_opportunity("c-1", hot_lead, profile_150, roi_150, 100)
        assert not outcome.success
        assert outcome.message == "CRM pipeline not configured"

    @pytest.mark.asyncio
    async def test_add_note(self, settings):
        seen = {}

        def handler(request):
            seen["path"] = request.url.path
            seen["body"] = json.loads(request.content)
            return httpx.Response(201, json={"note": {"id": "n-1"}})

        crm = make_client(settings, handler)
        outcome = await crm.add_note("c-1", "ROI: 370%")
        assert outcome.success
        assert seen["path"] == "/contacts/c-1/notes"
        assert seen["body"] == {"body": "ROI: 370%", "userId": "user-1"}


class TestGetContact:
    @pytest.mark.asyncio
    async def test_found(self, settings):
        crm = make_client(
            settings, lambda r: httpx.Response(200, json={"contact": {"id": "c-1", "email": "a@b.c"}})
        )
        outcome = await crm.get_contact("c-1")
        assert outcome.success
        assert outcome.data["contact"]["email"] == "a@b.c"

    @pytest.mark.asyncio
    async def test_not_found(self, settings):
        crm = make_client(settings, lambda r: httpx.Response(404, json={"message": "nope"}))
        outcome = await crm.get_contact("missing")
        assert not outcome.success
        assert outcome.message == "Contact not found"
        assert outcome.data["status_code"] == 404


class TestProfileFromContact:
    def test_round_trip_from_payload(self, hot_lead, profile_150, roi_150):
        payload = build_contact_payload(hot_lead, profile_150, roi_150, 100)
        contact = {
            "firstName": payload["firstName"],
            "lastName": payload["lastName"],
            "email": payload["email"],
            "phone": payload["phone"],
            "companyName": payload["companyName"],
            "customFields": [
                {"key": f["key"], "value": f["field_value"]} for f in payload["customFields"]
            ],
        }
        lead, profile = profile_from_contact(contact)
        assert lead == hot_lead
        assert profile == profile_150

    def test_fields_keyed_by_id(self):
        contact = {
            "firstName": "Jo",
            "email": "jo@x.com",
            "companyName": "X",
            "customFields": [{"id": "fld-1", "value": "300"}],
        }
        _, profile = profile_from_contact(contact, field_ids={"contact.employees": "fld-1"})
        assert profile.employee_count == 300

    def test_empty_contact_uses_defaults(self):
        lead, profile = profile_from_contact({})
        assert lead.full_name == ""
        assert profile.employee_count == 0
        assert profile.average_annual_salary == 35_000
