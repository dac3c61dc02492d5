"""Pydantic models for benchmark constants validation."""

from __future__ import annotations

from pydantic import BaseModel, Field, model_validator


class InputDefaults(BaseModel):
    """Values substituted for absent or unparseable calculator inputs."""

    employee_count: int = Field(default=0, ge=0)
    average_annual_salary: float = Field(default=35_000, ge=0)
    annual_sick_days_per_employee: float = Field(default=7.8, ge=0)
    turnover_rate_percent: float = Field(default=15, ge=0, le=100)
    healthcare_cost_per_employee: float = Field(default=2_000, ge=0)
    current_wellness_spend: float = Field(default=0, ge=0)


class BenchmarkConstants(BaseModel):
    """Every policy constant the ROI engine uses, for one market."""

    model_config = {"frozen": True}

    id: str
    name: str
    version: str
    currency: str = Field(default="GBP", min_length=3, max_length=3)

    working_days_per_year: int = Field(gt=0, description="Divisor for daily salary")
    replacement_cost_fraction: float = Field(
        ge=0, le=2.0, description="Cost of replacing a leaver, as a fraction of salary"
    )

    sick_days_reduction_rate: float = Field(ge=0, le=1.0)
    turnover_reduction_rate: float = Field(ge=0, le=1.0)
    healthcare_reduction_rate: float = Field(ge=0, le=1.0)
    productivity_gain_rate: float = Field(
        ge=0, le=1.0, description="New value created, as a fraction of total payroll"
    )

    program_cost_per_employee_month: float = Field(ge=0)
    tax_relief_rate: float = Field(ge=0, lt=1.0)

    defaults: InputDefaults = Field(default_factory=InputDefaults)

    benchmark_sources: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def currency_is_upper(self) -> BenchmarkConstants:
        if self.currency != self.currency.upper():
            raise ValueError(f"currency must be an upper-case ISO code, got {self.currency}")
        return self

    @property
    def after_tax_multiplier(self) -> float:
        return 1.0 - self.tax_relief_rate
