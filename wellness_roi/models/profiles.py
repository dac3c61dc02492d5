"""Request-scoped input value objects and lenient form parsing."""

from __future__ import annotations

import math
import re
from dataclasses import dataclass, replace
from typing import Any, Mapping, Optional

from wellness_roi.methodology.schema import InputDefaults

# Maps CompanyProfile field names to the keys the calculator form posts.
FORM_FIELD_MAP: dict[str, str] = {
    "employee_count": "employees",
    "average_annual_salary": "salary",
    "annual_sick_days_per_employee": "sickDays",
    "turnover_rate_percent": "turnoverRate",
    "healthcare_cost_per_employee": "healthcareCost",
    "current_wellness_spend": "currentWellnessCost",
}

_NUMBER_RE = re.compile(r"^-?\d+(?:\.\d*)?$|^-?\.\d+$")

# Largest accepted input. Products of three bounded inputs stay well inside
# float range, so no derived figure can overflow.
MAX_INPUT_VALUE = 1e12


def parse_amount(raw: Any, default: float) -> float:
    """Parse a form value into a finite, non-negative number.

    Handles:
      - 55000, 55000.0 -> 55000.0
      - "55000", " 55,000 ", "£55,000" -> 55000.0
      - "7.8" -> 7.8
      - None, "", "abc", "-5", "nan", "inf", 10**400, "1e308" -> default
    """
    if raw is None or isinstance(raw, bool):
        return default

    try:
        if isinstance(raw, (int, float)):
            value = float(raw)
        elif isinstance(raw, str):
            cleaned = raw.strip().replace(",", "").replace("£", "").replace("$", "").strip()
            if not _NUMBER_RE.match(cleaned):
                return default
            value = float(cleaned)
        else:
            return default
    except OverflowError:
        return default

    if not math.isfinite(value) or value < 0 or value > MAX_INPUT_VALUE:
        return default
    return value


def clamp_amount(value: float) -> float:
    """Bound an already-typed value to [0, MAX_INPUT_VALUE]; NaN becomes 0."""
    if value > MAX_INPUT_VALUE:
        return MAX_INPUT_VALUE
    if math.isnan(value) or value < 0:
        return 0.0
    return float(value)


def parse_count(raw: Any, default: int) -> int:
    """Parse a head count; fractional values are truncated."""
    return int(parse_amount(raw, float(default)))


@dataclass(frozen=True)
class CompanyProfile:
    """Company wellness metrics collected by the calculator step."""

    employee_count: int
    average_annual_salary: float
    annual_sick_days_per_employee: float
    turnover_rate_percent: float
    healthcare_cost_per_employee: float = 2_000.0
    current_wellness_spend: float = 0.0

    @classmethod
    def from_form(
        cls,
        raw: Mapping[str, Any],
        defaults: Optional[InputDefaults] = None,
    ) -> CompanyProfile:
        """Build a profile from raw calculator data, never failing.

        Accepts both the form's camelCase keys and the snake_case field names.
        """
        defaults = defaults or InputDefaults()

        def pick(field_name: str) -> Any:
            form_key = FORM_FIELD_MAP[field_name]
            if raw.get(form_key) is not None:
                return raw.get(form_key)
            return raw.get(field_name)

        return cls(
            employee_count=parse_count(pick("employee_count"), defaults.employee_count),
            average_annual_salary=parse_amount(
                pick("average_annual_salary"), defaults.average_annual_salary
            ),
            annual_sick_days_per_employee=parse_amount(
                pick("annual_sick_days_per_employee"),
                defaults.annual_sick_days_per_employee,
            ),
            turnover_rate_percent=parse_amount(
                pick("turnover_rate_percent"), defaults.turnover_rate_percent
            ),
            healthcare_cost_per_employee=parse_amount(
                pick("healthcare_cost_per_employee"),
                defaults.healthcare_cost_per_employee,
            ),
            current_wellness_spend=parse_amount(
                pick("current_wellness_spend"), defaults.current_wellness_spend
            ),
        )

    def bounded(self) -> CompanyProfile:
        """Copy with every field clamped to [0, MAX_INPUT_VALUE]."""
        return replace(
            self,
            employee_count=int(clamp_amount(self.employee_count)),
            average_annual_salary=clamp_amount(self.average_annual_salary),
            annual_sick_days_per_employee=clamp_amount(self.annual_sick_days_per_employee),
            turnover_rate_percent=clamp_amount(self.turnover_rate_percent),
            healthcare_cost_per_employee=clamp_amount(self.healthcare_cost_per_employee),
            current_wellness_spend=clamp_amount(self.current_wellness_spend),
        )

    def to_form(self) -> dict[str, Any]:
        """Return the profile keyed by the calculator form's field names."""
        return {
            form_key: getattr(self, field_name)
            for field_name, form_key in FORM_FIELD_MAP.items()
        }


@dataclass(frozen=True)
class LeadProfile:
    """Contact and qualification details collected by the email gate."""

    full_name: str
    work_email: str
    company_name: str
    job_title: str
    company_size: str = ""
    timeline: str = ""
    current_initiatives: str = ""
    industry: str = ""
    phone: str = ""

    @property
    def first_name(self) -> str:
        parts = self.full_name.split(None, 1)
        return parts[0] if parts else ""

    @property
    def last_name(self) -> str:
        parts = self.full_name.split(None, 1)
        return parts[1].strip() if len(parts) > 1 else ""
