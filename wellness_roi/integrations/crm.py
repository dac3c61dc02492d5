"""CRM client -- upserts ROI calculator leads into HighLevel / LeadConnector."""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from wellness_roi.config.settings import Settings
from wellness_roi.engine.result import ROIResult
from wellness_roi.models.profiles import CompanyProfile, LeadProfile
from wellness_roi.report.formatting import format_currency

from .base import IntegrationOutcome

logger = logging.getLogger(__name__)

LEAD_SOURCE = "ROI Calculator"
LEAD_TAG = "ROI Calculator Lead"

# Maps our field names to CRM custom field keys.
CUSTOM_FIELD_KEYS: dict[str, str] = {
    "job_title": "contact.job_title",
    "industry": "contact.industry",
    "company_size": "contact.company_size",
    "current_initiatives": "contact.current_initiatives",
    "timeline": "contact.implementation_timeline",
    "employee_count": "contact.employees",
    "average_annual_salary": "contact.average_salary",
    "annual_sick_days_per_employee": "contact.sick_days",
    "turnover_rate_percent": "contact.turnover_rate",
    "healthcare_cost_per_employee": "contact.healthcare_cost",
    "current_wellness_spend": "contact.current_wellness_spend",
    "total_savings": "contact.potential_savings",
    "net_savings": "contact.net_benefit",
    "roi_percentage": "contact.calculated_roi",
    "annual_program_cost": "contact.program_cost",
    "after_tax_program_cost": "contact.after_tax_program_cost",
    "payback_months": "contact.payback_months",
    "lead_score": "contact.lead_score",
}

_PROFILE_FIELDS = (
    "employee_count",
    "average_annual_salary",
    "annual_sick_days_per_employee",
    "turnover_rate_percent",
    "healthcare_cost_per_employee",
    "current_wellness_spend",
)
_LEAD_FIELDS = ("job_title", "industry", "company_size", "current_initiatives", "timeline")


def _money(value: float) -> float:
    return round(value, 2)


def _json_body(resp: httpx.Response) -> dict[str, Any]:
    try:
        body = resp.json()
    except ValueError:
        logger.warning(f"CRM returned non-JSON body ({resp.status_code})")
        return {}
    return body if isinstance(body, dict) else {}


def build_custom_field_values(
    lead: LeadProfile, profile: CompanyProfile, roi: ROIResult, lead_score: int
) -> dict[str, Any]:
    """Every lead, profile and result value keyed by our field name."""
    values: dict[str, Any] = {name: getattr(lead, name) for name in _LEAD_FIELDS}
    values.update({name: getattr(profile, name) for name in _PROFILE_FIELDS})
    values.update(
        {
            "total_savings": _money(roi.total_savings),
            "net_savings": _money(roi.net_savings),
            "roi_percentage": _money(roi.roi_percentage),
            "annual_program_cost": _money(roi.annual_program_cost),
            "after_tax_program_cost": _money(roi.after_tax_program_cost),
            "payback_months": roi.payback_months if roi.payback_months is not None else "",
            "lead_score": lead_score,
        }
    )
    return values


def build_contact_payload(
    lead: LeadProfile,
    profile: CompanyProfile,
    roi: ROIResult,
    lead_score: int,
    location_id: str = "",
) -> dict[str, Any]:
    """Contact upsert body: identity, tags and one custom field per value."""
    custom_values = build_custom_field_values(lead, profile, roi, lead_score)
    payload: dict[str, Any] = {
        "firstName": lead.first_name,
        "lastName": lead.last_name,
        "name": lead.full_name.strip(),
        "email": lead.work_email,
        "phone": lead.phone or "",
        "companyName": lead.company_name,
        "source": LEAD_SOURCE,
        "tags": [
            LEAD_TAG,
            f"Timeline: {lead.timeline}",
            f"Company Size: {lead.company_size}",
            f"Lead Score: {lead_score}",
            f"ROI: {round(roi.roi_percentage)}%",
        ],
        "customFields": [
            {"key": CUSTOM_FIELD_KEYS[name], "field_value": value}
            for name, value in custom_values.items()
        ],
    }
    if location_id:
        payload["locationId"] = location_id
    return payload


def opportunity_notes(
    lead: LeadProfile, profile: CompanyProfile, roi: ROIResult, lead_score: int
) -> str:
    return "\n".join(
        [
            f"Lead Score: {lead_score}/100",
            f"Calculated ROI: {round(roi.roi_percentage)}%",
            f"Potential Annual Savings: {format_currency(roi.total_savings)}",
            f"Company Size: {profile.employee_count} employees",
            f"Timeline: {lead.timeline}",
            f"Current Initiatives: {lead.current_initiatives}",
        ]
    )


def build_opportunity_payload(
    contact_id: str,
    lead: LeadProfile,
    profile: CompanyProfile,
    roi: ROIResult,
    lead_score: int,
    settings: Settings,
) -> dict[str, Any]:
    """Opportunity body; its monetary value is the annual programme cost."""
    payload: dict[str, Any] = {
        "name": f"{lead.company_name} - Corporate Wellness Program",
        "contactId": contact_id,
        "status": "open",
        "monetaryValue": _money(roi.annual_program_cost),
        "pipelineId": settings.crm_pipeline_id,
        "source": LEAD_SOURCE,
        "notes": opportunity_notes(lead, profile, roi, lead_score),
    }
    if settings.crm_pipeline_stage_id:
        payload["pipelineStageId"] = settings.crm_pipeline_stage_id
    if settings.crm_default_user_id:
        payload["assignedTo"] = settings.crm_default_user_id
    if settings.crm_location_id:
        payload["locationId"] = settings.crm_location_id
    return payload


def profile_from_contact(
    contact: dict[str, Any],
    field_ids: Optional[dict[str, str]] = None,
) -> tuple[LeadProfile, CompanyProfile]:
    """Rebuild the lead and company profile stored on a CRM contact.

    Custom fields may come back keyed by ``key``/``fieldKey`` or by ``id``;
    ``field_ids`` maps CRM custom field keys to their ids for the latter.
    """
    key_by_id = {v: k for k, v in (field_ids or {}).items()}
    name_by_key = {v: k for k, v in CUSTOM_FIELD_KEYS.items()}

    values: dict[str, Any] = {}
    for entry in contact.get("customFields") or []:
        key = entry.get("key") or entry.get("fieldKey") or key_by_id.get(entry.get("id", ""))
        name = name_by_key.get(key or "")
        if name is None:
            continue
        values[name] = entry.get("value", entry.get("field_value"))

    full_name = " ".join(
        part for part in (contact.get("firstName") or "", contact.get("lastName") or "") if part
    )
    lead = LeadProfile(
        full_name=full_name or contact.get("name") or "",
        work_email=contact.get("email") or "",
        company_name=contact.get("companyName") or "",
        job_title=str(values.get("job_title") or ""),
        company_size=str(values.get("company_size") or ""),
        timeline=str(values.get("timeline") or ""),
        current_initiatives=str(values.get("current_initiatives") or ""),
        industry=str(values.get("industry") or ""),
        phone=contact.get("phone") or "",
    )
    profile = CompanyProfile.from_form({name: values.get(name) for name in _PROFILE_FIELDS})
    return lead, profile


class CRMClient:
    """Thin async wrapper over the CRM contacts / opportunities API."""

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self._settings = settings or Settings()
        self._client = client or httpx.AsyncClient(
            base_url=self._settings.crm_base_url,
            timeout=self._settings.crm_timeout_seconds,
        )

    @property
    def is_configured(self) -> bool:
        return bool(self._settings.crm_api_key)

    def _headers(self) -> dict[str, str]:
        return {
            "Authorization": f"Bearer {self._settings.crm_api_key}",
            "Version": self._settings.crm_api_version,
            "Accept": "application/json",
        }

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        return await self._client.request(method, path, headers=self._headers(), **kwargs)

    async def upsert_contact(
        self,
        lead: LeadProfile,
        profile: CompanyProfile,
        roi: ROIResult,
        lead_score: int,
    ) -> IntegrationOutcome:
        """Create or update the contact for this lead."""
        if not self.is_configured:
            logger.warning("CRM API key not configured - skipping CRM submission")
            return IntegrationOutcome.failed("CRM API key not configured")

        payload = build_contact_payload(
            lead, profile, roi, lead_score, location_id=self._settings.crm_location_id
        )
        try:
            resp = await self._request("POST", "/contacts/upsert", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"CRM contact upsert failed for {lead.work_email}: {e}")
            return IntegrationOutcome.failed(f"CRM request failed: {e}")

        if resp.status_code not in (200, 201):
            logger.error(f"CRM API error {resp.status_code}: {resp.text[:500]}")
            return IntegrationOutcome.failed(
                f"CRM returned {resp.status_code}", status_code=resp.status_code
            )

        body = _json_body(resp)
        contact = body.get("contact") or body
        contact_id = contact.get("id")
        if not contact_id:
            logger.error("CRM upsert response had no contact id")
            return IntegrationOutcome.failed("CRM response missing contact id")

        created = bool(body.get("new", False))
        logger.info(f"{'Created' if created else 'Updated'} CRM contact {contact_id}")
        return IntegrationOutcome.ok(
            "Contact created" if created else "Contact updated",
            contactId=contact_id,
            created=created,
        )

    async def create_opportunity(
        self,
        contact_id: str,
        lead: LeadProfile,
        profile: CompanyProfile,
        roi: ROIResult,
        lead_score: int,
    ) -> IntegrationOutcome:
        if not self.is_configured:
            return IntegrationOutcome.failed("CRM API key not configured")
        if not self._settings.crm_pipeline_id:
            logger.warning("CRM pipeline not configured - skipping opportunity")
            return IntegrationOutcome.failed("CRM pipeline not configured")

        payload = build_opportunity_payload(
            contact_id, lead, profile, roi, lead_score, self._settings
        )
        try:
            resp = await self._request("POST", "/opportunities/", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"CRM opportunity creation failed for {contact_id}: {e}")
            return IntegrationOutcome.failed(f"CRM request failed: {e}")

        if resp.status_code not in (200, 201):
            logger.error(f"CRM opportunity error {resp.status_code}: {resp.text[:500]}")
            return IntegrationOutcome.failed(
                f"CRM returned {resp.status_code}", status_code=resp.status_code
            )

        body = _json_body(resp)
        opportunity_id = (body.get("opportunity") or body).get("id")
        logger.info(f"Created CRM opportunity {opportunity_id} for contact {contact_id}")
        return IntegrationOutcome.ok("Opportunity created", opportunityId=opportunity_id)

    async def add_note(self, contact_id: str, body: str) -> IntegrationOutcome:
        if not self.is_configured:
            return IntegrationOutcome.failed("CRM API key not configured")

        payload: dict[str, Any] = {"body": body}
        if self._settings.crm_default_user_id:
            payload["userId"] = self._settings.crm_default_user_id
        try:
            resp = await self._request("POST", f"/contacts/{contact_id}/notes", json=payload)
        except httpx.HTTPError as e:
            logger.error(f"CRM note failed for {contact_id}: {e}")
            return IntegrationOutcome.failed(f"CRM request failed: {e}")

        if resp.status_code not in (200, 201):
            logger.error(f"CRM note error {resp.status_code}: {resp.text[:500]}")
            return IntegrationOutcome.failed(
                f"CRM returned {resp.status_code}", status_code=resp.status_code
            )
        return IntegrationOutcome.ok("Note added")

    async def get_contact(self, contact_id: str) -> IntegrationOutcome:
        """Fetch a contact; the contact body is returned under data['contact']."""
        if not self.is_configured:
            return IntegrationOutcome.failed("CRM API key not configured")

        try:
            resp = await self._request("GET", f"/contacts/{contact_id}")
        except httpx.HTTPError as e:
            logger.error(f"CRM contact fetch failed for {contact_id}: {e}")
            return IntegrationOutcome.failed(f"CRM request failed: {e}")

        if resp.status_code != 200:
            logger.warning(f"CRM contact {contact_id} not retrievable: {resp.status_code}")
            return IntegrationOutcome.failed(
                "Contact not found", status_code=resp.status_code
            )

        body = _json_body(resp)
        return IntegrationOutcome.ok("Contact found", contact=body.get("contact") or body)

    async def aclose(self) -> None:
        await self._client.aclose()
