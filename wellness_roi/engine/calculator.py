"""Core ROI calculation engine.

Takes a company profile + benchmark constants -> produces an ROIResult.
Every step is a pure calculation; no input can make it raise.
"""

from __future__ import annotations

import logging
import math
from typing import Optional

from wellness_roi.engine.result import CostBreakdown, ROIResult, SavingsProjection
from wellness_roi.methodology.loader import get_default_benchmarks
from wellness_roi.methodology.schema import BenchmarkConstants
from wellness_roi.models.profiles import CompanyProfile

logger = logging.getLogger(__name__)


class ROIEngine:
    """Stateless engine that runs wellness ROI calculations."""

    def __init__(self, benchmarks: Optional[BenchmarkConstants] = None):
        self._benchmarks = benchmarks or get_default_benchmarks()

    @property
    def benchmarks(self) -> BenchmarkConstants:
        return self._benchmarks

    def calculate(self, profile: CompanyProfile) -> ROIResult:
        """Run the full ROI calculation for one company."""
        b = self._benchmarks
        profile = profile.bounded()

        costs = self._current_costs(profile)
        savings = self._projected_savings(profile, costs)

        monthly_program_cost = profile.employee_count * b.program_cost_per_employee_month
        annual_program_cost = monthly_program_cost * 12
        after_tax_program_cost = annual_program_cost * b.after_tax_multiplier

        total_savings = (
            savings.sick_days_reduction
            + savings.turnover_reduction
            + savings.healthcare_reduction
            + savings.productivity_gain
        )
        net_savings = total_savings - after_tax_program_cost

        roi_percentage = 0.0
        if after_tax_program_cost > 0:
            roi_percentage = (net_savings / after_tax_program_cost) * 100

        payback_months = self._payback_months(
            monthly_program_cost * b.after_tax_multiplier, total_savings / 12
        )

        logger.debug(
            f"ROI for {profile.employee_count} employees: "
            f"savings={total_savings:.2f} roi={roi_percentage:.1f}% payback={payback_months}"
        )

        return ROIResult(
            costs=costs,
            savings=savings,
            monthly_program_cost=monthly_program_cost,
            annual_program_cost=annual_program_cost,
            after_tax_program_cost=after_tax_program_cost,
            total_savings=total_savings,
            net_savings=net_savings,
            roi_percentage=roi_percentage,
            payback_months=payback_months,
        )

    def _current_costs(self, profile: CompanyProfile) -> CostBreakdown:
        """Annual cost baseline. Productivity has no current cost."""
        b = self._benchmarks
        salary = profile.average_annual_salary
        daily_salary = salary / b.working_days_per_year

        return CostBreakdown(
            sick_days_cost=(
                profile.employee_count * profile.annual_sick_days_per_employee * daily_salary
            ),
            turnover_cost=(
                profile.employee_count
                * (profile.turnover_rate_percent / 100)
                * (salary * b.replacement_cost_fraction)
            ),
            healthcare_cost=profile.employee_count * profile.healthcare_cost_per_employee,
            productivity_baseline=0.0,
        )

    def _projected_savings(
        self, profile: CompanyProfile, costs: CostBreakdown
    ) -> SavingsProjection:
        b = self._benchmarks
        return SavingsProjection(
            sick_days_reduction=costs.sick_days_cost * b.sick_days_reduction_rate,
            turnover_reduction=costs.turnover_cost * b.turnover_reduction_rate,
            healthcare_reduction=costs.healthcare_cost * b.healthcare_reduction_rate,
            productivity_gain=(
                profile.employee_count * profile.average_annual_salary * b.productivity_gain_rate
            ),
        )

    @staticmethod
    def _payback_months(
        monthly_cost_after_tax: float, monthly_savings: float
    ) -> Optional[int]:
        """Months of savings needed to cover one month of programme cost.

        1 when savings cover the cost straight away, None when there are
        no savings at all.
        """
        if monthly_savings >= monthly_cost_after_tax:
            if monthly_savings == 0:
                return None
            return 1
        if monthly_savings <= 0:
            return None
        months = monthly_cost_after_tax / monthly_savings
        if not math.isfinite(months):
            return None
        return math.ceil(months)


def compute_roi(
    profile: CompanyProfile, benchmarks: Optional[BenchmarkConstants] = None
) -> ROIResult:
    """Convenience wrapper around ROIEngine.calculate."""
    return ROIEngine(benchmarks).calculate(profile)
