"""Report data assembler -- flattens an ROI result into display strings.

The mapping returned here is the only thing the slide templates, the
email templates and the CRM notes see. Every value is already formatted;
templates never do arithmetic.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from wellness_roi.engine.result import ROIResult
from wellness_roi.methodology.loader import get_default_benchmarks
from wellness_roi.methodology.schema import BenchmarkConstants
from wellness_roi.models.enums import SavingsCategory
from wellness_roi.models.profiles import CompanyProfile, LeadProfile
from wellness_roi.report.formatting import (
    apportion_percentages,
    format_currency,
    format_decimal,
    format_long_date,
    format_number,
    format_payback,
    format_percentage,
)
from wellness_roi.scoring.lead_score import assign_email_sequence

# Shown instead of an empty value so no slide ever has a blank.
PRESENTATION_DEFAULTS: dict[str, str] = {
    "CONTACT_NAME": "Valued Partner",
    "COMPANY_NAME": "Your Company",
    "JOB_TITLE": "Manager",
    "INDUSTRY": "Not specified",
    "IMPLEMENTATION_TIMELINE": "To be confirmed",
    "COMPANY_SIZE": "Not specified",
    "CURRENT_INITIATIVES": "Not specified",
}

SAVINGS_CATEGORY_ORDER: list[SavingsCategory] = [
    SavingsCategory.SICK_DAYS,
    SavingsCategory.TURNOVER,
    SavingsCategory.HEALTHCARE,
    SavingsCategory.PRODUCTIVITY,
]


def _text(value: str, key: str) -> str:
    value = (value or "").strip()
    return value or PRESENTATION_DEFAULTS[key]


def savings_breakdown_percentages(roi: ROIResult) -> dict[SavingsCategory, int]:
    """Whole-number share of total savings per category, summing to 100."""
    amounts = {
        SavingsCategory.SICK_DAYS: roi.savings.sick_days_reduction,
        SavingsCategory.TURNOVER: roi.savings.turnover_reduction,
        SavingsCategory.HEALTHCARE: roi.savings.healthcare_reduction,
        SavingsCategory.PRODUCTIVITY: roi.savings.productivity_gain,
    }
    shares = apportion_percentages([amounts[c] for c in SAVINGS_CATEGORY_ORDER])
    return dict(zip(SAVINGS_CATEGORY_ORDER, shares))


def assemble_report_variables(
    lead: LeadProfile,
    profile: CompanyProfile,
    roi: ROIResult,
    lead_score: int,
    report_date: Optional[date] = None,
    benchmarks: Optional[BenchmarkConstants] = None,
) -> dict[str, str]:
    """Build the flat NAME -> display string mapping for one lead."""
    benchmarks = benchmarks or get_default_benchmarks()

    def money(amount: float) -> str:
        return format_currency(amount, benchmarks.currency)

    shares = savings_breakdown_percentages(roi)
    first_name = lead.first_name.strip()

    return {
        # Contact & company
        "CONTACT_NAME": _text(lead.full_name, "CONTACT_NAME"),
        "FIRST_NAME": first_name or PRESENTATION_DEFAULTS["CONTACT_NAME"],
        "COMPANY_NAME": _text(lead.company_name, "COMPANY_NAME"),
        "JOB_TITLE": _text(lead.job_title, "JOB_TITLE"),
        "INDUSTRY": _text(lead.industry, "INDUSTRY"),
        "IMPLEMENTATION_TIMELINE": _text(lead.timeline, "IMPLEMENTATION_TIMELINE"),
        "COMPANY_SIZE": _text(lead.company_size, "COMPANY_SIZE"),
        "CURRENT_INITIATIVES": _text(lead.current_initiatives, "CURRENT_INITIATIVES"),
        # Calculator inputs
        "EMPLOYEE_COUNT": format_number(profile.employee_count),
        "AVERAGE_SALARY": money(profile.average_annual_salary),
        "SICK_DAYS": format_decimal(profile.annual_sick_days_per_employee),
        "TURNOVER_RATE": format_decimal(profile.turnover_rate_percent),
        "HEALTHCARE_COST_PER_EMPLOYEE": money(profile.healthcare_cost_per_employee),
        "CURRENT_WELLNESS_SPEND": money(profile.current_wellness_spend),
        # Current costs
        "SICK_DAYS_COST": money(roi.costs.sick_days_cost),
        "TURNOVER_COST": money(roi.costs.turnover_cost),
        "HEALTHCARE_COST": money(roi.costs.healthcare_cost),
        "TOTAL_CURRENT_COSTS": money(roi.total_current_costs),
        # Savings breakdown
        "SICK_DAYS_SAVINGS": money(roi.savings.sick_days_reduction),
        "TURNOVER_SAVINGS": money(roi.savings.turnover_reduction),
        "HEALTHCARE_SAVINGS": money(roi.savings.healthcare_reduction),
        "PRODUCTIVITY_SAVINGS": money(roi.savings.productivity_gain),
        "SICK_DAYS_PERCENTAGE": str(shares[SavingsCategory.SICK_DAYS]),
        "TURNOVER_PERCENTAGE": str(shares[SavingsCategory.TURNOVER]),
        "HEALTHCARE_PERCENTAGE": str(shares[SavingsCategory.HEALTHCARE]),
        "PRODUCTIVITY_PERCENTAGE": str(shares[SavingsCategory.PRODUCTIVITY]),
        "TOTAL_PERCENTAGE": str(sum(shares.values())),
        # Financial results
        "TOTAL_SAVINGS": money(roi.total_savings),
        "MONTHLY_SAVINGS": money(roi.total_savings / 12),
        "NET_SAVINGS": money(roi.net_savings),
        "ROI_PERCENTAGE": format_percentage(roi.roi_percentage),
        "PAYBACK_PERIOD": format_payback(roi.payback_months),
        # Programme investment
        "PROGRAM_COST_PER_EMPLOYEE": money(benchmarks.program_cost_per_employee_month),
        "MONTHLY_PROGRAM_COST": money(roi.monthly_program_cost),
        "ANNUAL_PROGRAM_COST": money(roi.annual_program_cost),
        "AFTER_TAX_COST": money(roi.after_tax_program_cost),
        "TAX_RELIEF": money(roi.tax_relief_amount),
        "TAX_RELIEF_RATE": format_percentage(benchmarks.tax_relief_rate * 100),
        # Meta
        "LEAD_SCORE": str(lead_score),
        "EMAIL_SEQUENCE": assign_email_sequence(lead_score).value,
        "REPORT_DATE": format_long_date(report_date),
    }
