"""Submission pipeline -- runs the ROI core, then fans out to CRM, PDF and email."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

from wellness_roi.config.settings import Settings
from wellness_roi.engine.calculator import ROIEngine
from wellness_roi.engine.result import ROIResult
from wellness_roi.integrations.base import IntegrationOutcome
from wellness_roi.integrations.crm import CRMClient, profile_from_contact
from wellness_roi.integrations.mailer import ReportMailer, report_subject
from wellness_roi.methodology.loader import get_default_benchmarks, load_benchmarks
from wellness_roi.methodology.schema import BenchmarkConstants
from wellness_roi.models.enums import EmailSequence
from wellness_roi.models.profiles import CompanyProfile, LeadProfile
from wellness_roi.report.pdf import PdfRenderer, PdfRenderError, report_filename
from wellness_roi.report.templates import ReportRenderer, TemplateRenderError
from wellness_roi.report.variables import assemble_report_variables
from wellness_roi.scoring.lead_score import assign_email_sequence, score_lead

logger = logging.getLogger(__name__)


def resolve_benchmarks(settings: Settings) -> BenchmarkConstants:
    """Benchmarks for the configured market, the bundled UK record by default."""
    if settings.benchmarks_path:
        return load_benchmarks(Path(settings.benchmarks_path))
    return get_default_benchmarks()


@dataclass
class GeneratedReport:
    pdf_bytes: bytes
    filename: str
    variables: dict[str, str]


@dataclass
class SubmissionResult:
    """Everything one lead submission produced.

    The core figures are always present; each collaborator reports its own
    outcome.
    """

    roi: ROIResult
    lead_score: int
    email_sequence: EmailSequence
    variables: dict[str, str]
    crm: IntegrationOutcome
    report: IntegrationOutcome
    email: IntegrationOutcome
    opportunity: Optional[IntegrationOutcome] = None
    warnings: list[str] = field(default_factory=list)

    @property
    def contact_id(self) -> Optional[str]:
        return self.crm.data.get("contactId")

    def to_dict(self) -> dict[str, Any]:
        crm = self.crm.to_dict()
        if self.opportunity is not None:
            crm["opportunity"] = self.opportunity.to_dict()
        return {
            "success": True,
            "message": "Lead submitted successfully",
            "calculations": self.roi.to_dict(),
            "leadScore": self.lead_score,
            "emailSequence": self.email_sequence.value,
            "crm": crm,
            "report": self.report.to_dict(),
            "email": self.email.to_dict(),
            "warnings": self.warnings,
        }


class SubmissionPipeline:
    """Coordinates one lead submission end to end.

    Steps:
    - ROI calculation and lead scoring (pure, cannot fail).
    - CRM contact upsert, an opportunity for new contacts, summary note.
    - Report rendering to PDF, then email delivery.
    A failing collaborator is logged and recorded; later steps still run.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        benchmarks: Optional[BenchmarkConstants] = None,
        crm: Optional[CRMClient] = None,
        renderer: Optional[ReportRenderer] = None,
        pdf_renderer: Optional[PdfRenderer] = None,
        mailer: Optional[ReportMailer] = None,
    ):
        self._settings = settings or Settings()
        self._benchmarks = benchmarks or resolve_benchmarks(self._settings)
        self._engine = ROIEngine(self._benchmarks)
        self._crm = crm or CRMClient(settings=self._settings)
        self._renderer = renderer or ReportRenderer(
            booking_url=self._settings.booking_url,
            benchmark_sources=self._benchmarks.benchmark_sources,
        )
        self._pdf = pdf_renderer or PdfRenderer(
            executable_path=self._settings.chromium_executable_path,
            timeout_ms=self._settings.pdf_render_timeout_ms,
        )
        self._mailer = mailer or ReportMailer(settings=self._settings)

    @property
    def benchmarks(self) -> BenchmarkConstants:
        return self._benchmarks

    @property
    def crm_configured(self) -> bool:
        return self._crm.is_configured

    async def aclose(self) -> None:
        await self._crm.aclose()

    def calculate(self, profile: CompanyProfile) -> ROIResult:
        return self._engine.calculate(profile)

    def report_variables(
        self, lead: LeadProfile, profile: CompanyProfile, roi: ROIResult, lead_score: int
    ) -> dict[str, str]:
        return assemble_report_variables(
            lead, profile, roi, lead_score, benchmarks=self._benchmarks
        )

    async def generate_pdf(
        self, lead: LeadProfile, profile: CompanyProfile
    ) -> GeneratedReport:
        """Render the PDF report for a lead.

        Raises TemplateRenderError or PdfRenderError.
        """
        roi = self.calculate(profile)
        lead_score = score_lead(lead, roi.roi_percentage)
        variables = self.report_variables(lead, profile, roi, lead_score)
        return await self._render_pdf(lead, variables)

    async def _render_pdf(
        self, lead: LeadProfile, variables: dict[str, str]
    ) -> GeneratedReport:
        html = self._renderer.render_document(variables)
        pdf_bytes = await self._pdf.render(html)
        return GeneratedReport(
            pdf_bytes=pdf_bytes,
            filename=report_filename(lead.company_name),
            variables=variables,
        )

    async def regenerate_from_contact(self, contact_id: str) -> Optional[GeneratedReport]:
        """Rebuild the report for a stored CRM contact, None if it can't be fetched.

        Raises TemplateRenderError or PdfRenderError.
        """
        outcome = await self._crm.get_contact(contact_id)
        if not outcome.success:
            return None
        lead, profile = profile_from_contact(
            outcome.data["contact"], field_ids=self._settings.crm_custom_field_ids
        )
        logger.info(f"Regenerating report for contact {contact_id}")
        return await self.generate_pdf(lead, profile)

    async def submit(
        self,
        lead: LeadProfile,
        profile: CompanyProfile,
        caller_lead_score: Optional[int] = None,
    ) -> SubmissionResult:
        logger.info(
            f"Received lead submission: company={lead.company_name!r} email={lead.work_email}"
        )
        warnings: list[str] = []

        roi = self.calculate(profile)
        lead_score = score_lead(lead, roi.roi_percentage)
        if caller_lead_score is not None and caller_lead_score != lead_score:
            logger.warning(
                f"Lead score mismatch for {lead.work_email}: "
                f"caller={caller_lead_score} computed={lead_score}"
            )
            warnings.append(
                f"Submitted lead score {caller_lead_score} replaced by computed {lead_score}"
            )
        sequence = assign_email_sequence(lead_score)
        variables = self.report_variables(lead, profile, roi, lead_score)

        crm, opportunity = await self._sync_crm(lead, profile, roi, lead_score, variables)
        report, pdf = await self._build_report(lead, variables)
        email = await self._send_report(lead, variables, pdf)

        logger.info(f"Assigned {lead.work_email} to {sequence.value} email sequence")

        return SubmissionResult(
            roi=roi,
            lead_score=lead_score,
            email_sequence=sequence,
            variables=variables,
            crm=crm,
            opportunity=opportunity,
            report=report,
            email=email,
            warnings=warnings,
        )

    async def _sync_crm(
        self,
        lead: LeadProfile,
        profile: CompanyProfile,
        roi: ROIResult,
        lead_score: int,
        variables: dict[str, str],
    ) -> tuple[IntegrationOutcome, Optional[IntegrationOutcome]]:
        contact = await self._crm.upsert_contact(lead, profile, roi, lead_score)
        if not contact.success:
            return contact, None

        contact_id = contact.data["contactId"]
        opportunity = None
        if contact.data.get("created"):
            opportunity = await self._crm.create_opportunity(
                contact_id, lead, profile, roi, lead_score
            )
        try:
            summary = self._renderer.render_text_summary(variables)
        except TemplateRenderError as e:
            logger.error(f"Could not render CRM note for {contact_id}: {e}")
            note = IntegrationOutcome.failed(f"Note rendering failed: {e}")
        else:
            note = await self._crm.add_note(contact_id, summary)
        contact.data["note"] = note.to_dict()
        return contact, opportunity

    async def _build_report(
        self, lead: LeadProfile, variables: dict[str, str]
    ) -> tuple[IntegrationOutcome, Optional[GeneratedReport]]:
        try:
            generated = await self._render_pdf(lead, variables)
        except (TemplateRenderError, PdfRenderError) as e:
            logger.exception(f"Report generation failed for {lead.company_name!r}")
            return IntegrationOutcome.failed(f"PDF generation failed: {e}"), None
        return (
            IntegrationOutcome.ok(
                "PDF generated",
                filename=generated.filename,
                sizeBytes=len(generated.pdf_bytes),
            ),
            generated,
        )

    async def _send_report(
        self,
        lead: LeadProfile,
        variables: dict[str, str],
        pdf: Optional[GeneratedReport],
    ) -> IntegrationOutcome:
        if pdf is None:
            return IntegrationOutcome.failed("No report to send")
        try:
            text_body, html_body = self._renderer.render_email(variables)
        except TemplateRenderError as e:
            logger.error(f"Email rendering failed: {e}")
            return IntegrationOutcome.failed(f"Email rendering failed: {e}")

        msg = self._mailer.build_message(
            to=lead.work_email,
            subject=report_subject(variables["COMPANY_NAME"]),
            text_body=text_body,
            html_body=html_body,
            pdf_bytes=pdf.pdf_bytes,
            pdf_filename=pdf.filename,
        )
        return await self._mailer.send(msg)
