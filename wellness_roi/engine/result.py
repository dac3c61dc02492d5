"""Immutable ROI result data structures."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional


@dataclass(frozen=True)
class CostBreakdown:
    """Current annual cost baseline per category."""

    sick_days_cost: float
    turnover_cost: float
    healthcare_cost: float
    productivity_baseline: float = 0.0

    @property
    def total(self) -> float:
        return (
            self.sick_days_cost
            + self.turnover_cost
            + self.healthcare_cost
            + self.productivity_baseline
        )


@dataclass(frozen=True)
class SavingsProjection:
    """Projected annual savings (and new value) per category."""

    sick_days_reduction: float
    turnover_reduction: float
    healthcare_reduction: float
    productivity_gain: float

    @property
    def total(self) -> float:
        return (
            self.sick_days_reduction
            + self.turnover_reduction
            + self.healthcare_reduction
            + self.productivity_gain
        )


@dataclass(frozen=True)
class ROIResult:
    """Top-level result object for one ROI calculation.

    payback_months is None when there are no savings to pay the
    programme back with.
    """

    costs: CostBreakdown
    savings: SavingsProjection
    monthly_program_cost: float
    annual_program_cost: float
    after_tax_program_cost: float
    total_savings: float
    net_savings: float
    roi_percentage: float
    payback_months: Optional[int]

    @property
    def has_payback(self) -> bool:
        return self.payback_months is not None

    @property
    def total_current_costs(self) -> float:
        return self.costs.total

    @property
    def tax_relief_amount(self) -> float:
        return self.annual_program_cost - self.after_tax_program_cost

    def to_dict(self) -> dict[str, Any]:
        """Serialize to the camelCase shape the calculator form works with."""
        return {
            "currentCosts": {
                "sickDays": self.costs.sick_days_cost,
                "turnover": self.costs.turnover_cost,
                "healthcare": self.costs.healthcare_cost,
                "productivity": self.costs.productivity_baseline,
            },
            "projectedSavings": {
                "sickDaysReduction": self.savings.sick_days_reduction,
                "turnoverReduction": self.savings.turnover_reduction,
                "healthcareReduction": self.savings.healthcare_reduction,
                "productivityGain": self.savings.productivity_gain,
            },
            "monthlyProgramCost": self.monthly_program_cost,
            "annualProgramCost": self.annual_program_cost,
            "afterTaxProgramCost": self.after_tax_program_cost,
            "taxRelief": self.tax_relief_amount,
            "totalCurrentCosts": self.total_current_costs,
            "totalSavings": self.total_savings,
            "netSavings": self.net_savings,
            "roiPercentage": self.roi_percentage,
            "paybackMonths": self.payback_months,
            "yearlyProductivityGain": self.savings.productivity_gain,
        }
