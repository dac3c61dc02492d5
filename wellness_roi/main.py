"""FastAPI application for the wellness ROI calculator -- calculation, lead and report endpoints."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from functools import lru_cache
from typing import Optional, Union

from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, ConfigDict, Field

from wellness_roi.config.settings import Settings
from wellness_roi.models.profiles import CompanyProfile, LeadProfile
from wellness_roi.orchestrator.submission import GeneratedReport, SubmissionPipeline
from wellness_roi.report.pdf import PdfRenderError
from wellness_roi.report.templates import TemplateRenderError
from wellness_roi.report.variables import savings_breakdown_percentages

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

settings = Settings()


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    # Close the CRM connection pool only if a request ever built the pipeline.
    if get_pipeline.cache_info().currsize:
        await get_pipeline().aclose()
        get_pipeline.cache_clear()
        logger.info("Submission pipeline closed")


app = FastAPI(title="Wellness ROI API", version="0.1.0", lifespan=lifespan)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Form values arrive as numbers or as free text ("55,000"); parsing is lenient.
FormNumber = Optional[Union[float, str]]


class CalculatorData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    employees: FormNumber = None
    salary: FormNumber = None
    sick_days: FormNumber = Field(default=None, alias="sickDays")
    turnover_rate: FormNumber = Field(default=None, alias="turnoverRate")
    healthcare_cost: FormNumber = Field(default=None, alias="healthcareCost")
    current_wellness_cost: FormNumber = Field(default=None, alias="currentWellnessCost")


class ContactData(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    full_name: str = Field(alias="fullName", min_length=1)
    work_email: str = Field(alias="workEmail", min_length=1)
    company_name: str = Field(alias="companyName", min_length=1)
    job_title: str = Field(alias="jobTitle", min_length=1)
    company_size: str = Field(default="", alias="companySize")
    timeline: str = ""
    current_initiatives: str = Field(default="", alias="currentInitiatives")
    industry: str = ""
    phone: str = ""

    def to_lead(self) -> LeadProfile:
        return LeadProfile(**self.model_dump())


class CalculateRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    calculator_data: CalculatorData = Field(alias="calculatorData")


class LeadSubmission(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    calculator_data: CalculatorData = Field(alias="calculatorData")
    contact_data: ContactData = Field(alias="contactData")
    lead_score: Optional[int] = Field(default=None, alias="leadScore")


@lru_cache
def get_pipeline() -> SubmissionPipeline:
    return SubmissionPipeline(settings=settings)


def _profile(data: CalculatorData, pipeline: SubmissionPipeline) -> CompanyProfile:
    return CompanyProfile.from_form(
        data.model_dump(by_alias=True), defaults=pipeline.benchmarks.defaults
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"success": False, "message": message})


def _pdf_response(report: GeneratedReport) -> Response:
    return Response(
        content=report.pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'attachment; filename="{report.filename}"'},
    )


@app.post("/api/calculate")
async def calculate(body: CalculateRequest, pipeline: SubmissionPipeline = Depends(get_pipeline)):
    """Run the ROI engine on calculator input."""
    roi = pipeline.calculate(_profile(body.calculator_data, pipeline))
    result = roi.to_dict()
    result["savingsBreakdown"] = {
        category.value: share for category, share in savings_breakdown_percentages(roi).items()
    }
    return result


@app.post("/api/leads")
async def submit_lead(body: LeadSubmission, pipeline: SubmissionPipeline = Depends(get_pipeline)):
    """Score and store a lead, then deliver its report."""
    lead = body.contact_data.to_lead()
    try:
        result = await pipeline.submit(
            lead,
            _profile(body.calculator_data, pipeline),
            caller_lead_score=body.lead_score,
        )
    except Exception:
        logger.exception(f"Lead submission failed for {lead.work_email}")
        return _error(500, "Failed to process lead submission")
    return result.to_dict()


@app.post("/api/reports/pdf")
async def generate_report_pdf(
    body: LeadSubmission, pipeline: SubmissionPipeline = Depends(get_pipeline)
):
    """Render the report for the posted lead and return it as a PDF download."""
    try:
        report = await pipeline.generate_pdf(
            body.contact_data.to_lead(), _profile(body.calculator_data, pipeline)
        )
    except (TemplateRenderError, PdfRenderError) as e:
        logger.error(f"PDF generation failed: {e}")
        return _error(500, "Failed to generate PDF")
    return _pdf_response(report)


@app.get("/api/reports/{contact_id}/pdf")
async def download_report_pdf(
    contact_id: str, pipeline: SubmissionPipeline = Depends(get_pipeline)
):
    """Regenerate a stored lead's report from their CRM record."""
    if not pipeline.crm_configured:
        return _error(400, "CRM API key not configured")
    try:
        report = await pipeline.regenerate_from_contact(contact_id)
    except (TemplateRenderError, PdfRenderError) as e:
        logger.error(f"PDF regeneration failed for contact {contact_id}: {e}")
        return _error(500, "Failed to generate PDF")
    if report is None:
        return _error(404, "Contact not found")
    return _pdf_response(report)


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "ok"}
