# This file defines schemas for estimated-versus-actual variance analysis.
# Actual figures are the ones stored on the declaration; estimates come from the pre-clearance quote.

from __future__ import annotations

from pydantic import BaseModel, Field

from src.api.schemas.common import EnvelopeFields, RequestModel


class ActualFiguresRequest(RequestModel):
    fob_value_jod: float = Field(ge=0)
    freight_cost: float = Field(ge=0)
    insurance_cost: float = Field(ge=0)
    customs_duty: float = Field(ge=0)
    sales_tax: float = Field(ge=0)


class EstimatedFiguresRequest(RequestModel):
    estimated_fob_value: float = Field(ge=0)
    estimated_freight: float = Field(ge=0)
    estimated_insurance: float = Field(ge=0)
    estimated_customs_duty: float = Field(ge=0)
    estimated_sales_tax: float = Field(ge=0)


class VarianceRequest(RequestModel):
    actual: ActualFiguresRequest
    estimates: EstimatedFiguresRequest


class VarianceData(BaseModel):
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
    directions: dict[str, str]

    variance_notes: list[str] | None = None


class VarianceResponseV1(EnvelopeFields):
    data: VarianceData
