# This file defines request and response schemas for declaration cost endpoints.
# Field constraints carry the intake validation: amounts are nonnegative and the exchange rate is positive.
# The calculator itself never validates, so these models are the only gate in front of it.

from __future__ import annotations

from pydantic import BaseModel, Field

from src.api.schemas.common import EnvelopeFields, RequestModel


class DeclarationCostRequest(RequestModel):
    fob_value_foreign: float = Field(ge=0, description="Invoice value in the foreign currency.")
    exchange_rate: float = Field(gt=0, description="Local currency (JOD) per foreign unit.")
    freight_cost: float = Field(ge=0)
    insurance_cost: float = Field(ge=0)
    customs_duty: float | None = Field(
        default=None,
        ge=0,
        description="Assessed customs duty in JOD. When omitted, duty is estimated at the policy rate.",
    )
    additional_fees: float = Field(default=0.0, ge=0)
    customs_service_fee: float = Field(default=0.0, ge=0)
    penalties: float = Field(default=0.0, ge=0)
    tax_rate: float | None = Field(default=None, ge=0, le=1)


class DeclarationCostData(BaseModel):
    fob_value_jod: float
    freight_and_insurance: float
    taxable_value: float
    customs_duty: float
    customs_duty_estimated: bool
    tax_rate: float
    sales_tax: float
    total_customs_and_taxes: float
    total_landed_cost: float
    additional_expenses_ratio: float

    expenses_ratio_label: str | None = None
    expenses_ratio_note: str | None = None


class DeclarationCostResponseV1(EnvelopeFields):
    data: DeclarationCostData


class LineItemRequest(RequestModel):
    item_name: str = Field(min_length=1)
    quantity: float = Field(gt=0)
    unit_price_foreign: float = Field(gt=0)


class DeclarationBreakdownRequest(RequestModel):
    declaration: DeclarationCostRequest
    items: list[LineItemRequest] = Field(default_factory=list)


class AllocatedItemRowV1(BaseModel):
    item_name: str
    quantity: float
    unit_price_foreign: float
    total_price_foreign: float
    total_price_jod: float
    item_fob_value_jod: float
    item_value_percentage: float
    item_expenses_share: float
    item_total_cost: float
    unit_cost: float


class ReconciliationSummaryV1(BaseModel):
    passed: bool
    share_total: float
    expected_total: float
    difference: float
    percentage_total: float


class DeclarationBreakdownData(BaseModel):
    declaration: DeclarationCostData
    items: list[AllocatedItemRowV1]
    reconciliation: ReconciliationSummaryV1


class DeclarationBreakdownResponseV1(EnvelopeFields):
    data: DeclarationBreakdownData
