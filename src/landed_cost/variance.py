# This module compares post-clearance declaration figures against pre-clearance estimates.
# Component variances use the calculator's rounded variance functions.
# The total variance is the plain sum of the rounded components, matching the figures already on record.

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from src.landed_cost.calculations import calculate_variance, calculate_variance_percentage

VARIANCE_COMPONENTS = ("fob", "freight", "insurance", "customs_duty", "sales_tax")


@dataclass(frozen=True)
class VarianceInputs:
    """Actual figures as stored on the declaration."""

    fob_value_jod: float
    freight_cost: float
    insurance_cost: float
    customs_duty: float
    sales_tax: float


@dataclass(frozen=True)
class VarianceEstimates:
    estimated_fob_value: float
    estimated_freight: float
    estimated_insurance: float
    estimated_customs_duty: float
    estimated_sales_tax: float

    def total(self) -> float:
        return (
            self.estimated_fob_value
            + self.estimated_freight
            + self.estimated_insurance
            + self.estimated_customs_duty
            + self.estimated_sales_tax
        )


@dataclass(frozen=True)
class VarianceResult:
    fob_variance: float
    freight_variance: float
    insurance_variance: float
    customs_duty_variance: float
    sales_tax_variance: float
    total_variance: float
    fob_variance_percent: float
    freight_variance_percent: float
    insurance_variance_percent: float
    customs_duty_variance_percent: float
    sales_tax_variance_percent: float
    total_variance_percent: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def component_variances(self) -> dict[str, float]:
        return {component: float(getattr(self, f"{component}_variance")) for component in VARIANCE_COMPONENTS}


def variance_direction(variance: float) -> str:
    if variance > 0:
        return "over_estimate"
    if variance < 0:
        return "under_estimate"
    return "on_estimate"


def analyze_variances(actual: VarianceInputs, estimates: VarianceEstimates) -> VarianceResult:
    fob_variance = calculate_variance(actual.fob_value_jod, estimates.estimated_fob_value)
    freight_variance = calculate_variance(actual.freight_cost, estimates.estimated_freight)
    insurance_variance = calculate_variance(actual.insurance_cost, estimates.estimated_insurance)
    customs_duty_variance = calculate_variance(actual.customs_duty, estimates.estimated_customs_duty)
    sales_tax_variance = calculate_variance(actual.sales_tax, estimates.estimated_sales_tax)
    total_variance = fob_variance + freight_variance + insurance_variance + customs_duty_variance + sales_tax_variance

    return VarianceResult(
        fob_variance=fob_variance,
        freight_variance=freight_variance,
        insurance_variance=insurance_variance,
        customs_duty_variance=customs_duty_variance,
        sales_tax_variance=sales_tax_variance,
        total_variance=total_variance,
        fob_variance_percent=calculate_variance_percentage(fob_variance, estimates.estimated_fob_value),
        freight_variance_percent=calculate_variance_percentage(freight_variance, estimates.estimated_freight),
        insurance_variance_percent=calculate_variance_percentage(
            insurance_variance, estimates.estimated_insurance
        ),
        customs_duty_variance_percent=calculate_variance_percentage(
            customs_duty_variance, estimates.estimated_customs_duty
        ),
        sales_tax_variance_percent=calculate_variance_percentage(
            sales_tax_variance, estimates.estimated_sales_tax
        ),
        total_variance_percent=calculate_variance_percentage(total_variance, estimates.total()),
    )
