"""Shared test fixtures for the wellness ROI test suite."""

from datetime import date
from unittest.mock import AsyncMock, MagicMock

import pytest

from wellness_roi.config.settings import Settings
from wellness_roi.engine.calculator import compute_roi
from wellness_roi.engine.result import ROIResult
from wellness_roi.integrations.base import IntegrationOutcome
from wellness_roi.integrations.crm import CRMClient
from wellness_roi.integrations.mailer import ReportMailer
from wellness_roi.models.profiles import CompanyProfile, LeadProfile
from wellness_roi.orchestrator.submission import SubmissionPipeline
from wellness_roi.report.pdf import PdfRenderer


@pytest.fixture
def report_date() -> date:
    return date(2026, 10, 18)


@pytest.fixture
def profile_150() -> CompanyProfile:
    """150-employee company, the reference scenario.

    Derived values (UK benchmarks):
      daily salary        55,000 / 260            = 211.5385
      sick days cost      150 * 7 * 211.5385      = 222,115.38
      turnover cost       150 * 0.15 * 41,250     = 928,125
      healthcare cost     150 * 2,000             = 300,000
      savings             55,528.85 + 185,625 + 45,000 + 825,000 = 1,111,153.85
      programme cost      150 * 175 * 12          = 315,000 (236,250 after tax)
      net savings                                 = 874,903.85
      ROI                                         = 370.33%
    """
    return CompanyProfile(
        employee_count=150,
        average_annual_salary=55_000,
        annual_sick_days_per_employee=7,
        turnover_rate_percent=15,
        healthcare_cost_per_employee=2_000,
        current_wellness_spend=0,
    )


@pytest.fixture
def expected_150() -> dict:
    """Pre-computed results for profile_150."""
    return {
        "sick_days_cost": 57_750_000 / 260,
        "turnover_cost": 928_125.0,
        "healthcare_cost": 300_000.0,
        "sick_days_reduction": 721_875 / 13,
        "turnover_reduction": 185_625.0,
        "healthcare_reduction": 45_000.0,
        "productivity_gain": 825_000.0,
        "total_savings": 14_445_000 / 13,
        "monthly_program_cost": 26_250.0,
        "annual_program_cost": 315_000.0,
        "after_tax_program_cost": 236_250.0,
        "net_savings": 11_373_750 / 13,
        "roi_percentage": 33_700 / 91,
        "payback_months": 1,
    }


@pytest.fixture
def hot_lead() -> LeadProfile:
    return LeadProfile(
        full_name="Jane Smith",
        work_email="jane.smith@acme.co.uk",
        company_name="Acme Ltd",
        job_title="HR Director",
        company_size="1000+",
        timeline="Immediate",
        current_initiatives="None",
        industry="Manufacturing",
        phone="+44 20 7946 0000",
    )


@pytest.fixture
def bare_lead() -> LeadProfile:
    """Only the required fields filled in."""
    return LeadProfile(
        full_name="Sam",
        work_email="sam@example.com",
        company_name="",
        job_title="",
    )


@pytest.fixture
def roi_150(profile_150) -> ROIResult:
    return compute_roi(profile_150)


@pytest.fixture
def settings() -> Settings:
    """Fully configured settings that never read the environment."""
    return Settings(
        _env_file=None,
        crm_api_key="test-key",
        crm_base_url="https://crm.test",
        crm_location_id="loc-1",
        crm_pipeline_id="pipe-1",
        crm_pipeline_stage_id="stage-1",
        crm_default_user_id="user-1",
        smtp_host="smtp.test",
        smtp_port=587,
        smtp_username="mailer",
        smtp_password="secret",
        email_from_address="reports@barn-gym.com",
        email_from_name="Barn Gym",
        booking_url="https://book.test/consult",
    )


@pytest.fixture
def calculator_form() -> dict:
    """Calculator step payload as the browser posts it."""
    return {
        "employees": "150",
        "salary": "55,000",
        "sickDays": "7",
        "turnoverRate": "15",
        "healthcareCost": "2000",
        "currentWellnessCost": "0",
    }


@pytest.fixture
def contact_form() -> dict:
    return {
        "fullName": "Jane Smith",
        "workEmail": "jane.smith@acme.co.uk",
        "companyName": "Acme Ltd",
        "jobTitle": "HR Director",
        "companySize": "1000+",
        "timeline": "Immediate",
        "currentInitiatives": "None",
        "industry": "Manufacturing",
        "phone": "+44 20 7946 0000",
    }


@pytest.fixture
def crm():
    mock = MagicMock(spec=CRMClient)
    mock.is_configured = True
    mock.upsert_contact = AsyncMock(
        return_value=IntegrationOutcome.ok("Contact created", contactId="c-1", created=True)
    )
    mock.create_opportunity = AsyncMock(
        return_value=IntegrationOutcome.ok("Opportunity created", opportunityId="o-1")
    )
    mock.add_note = AsyncMock(return_value=IntegrationOutcome.ok("Note added"))
    mock.get_contact = AsyncMock()
    return mock


@pytest.fixture
def pdf_renderer():
    mock = MagicMock(spec=PdfRenderer)
    mock.render = AsyncMock(return_value=b"%PDF-1.7 report")
    return mock


@pytest.fixture
def mailer(settings):
    real = ReportMailer(settings=settings)
    mock = MagicMock(spec=ReportMailer)
    mock.build_message.side_effect = real.build_message
    mock.send = AsyncMock(return_value=IntegrationOutcome.ok("Email sent", messageId="<m@x>"))
    return mock


@pytest.fixture
def pipeline(settings, crm, pdf_renderer, mailer):
    return SubmissionPipeline(
        settings=settings, crm=crm, pdf_renderer=pdf_renderer, mailer=mailer
    )
