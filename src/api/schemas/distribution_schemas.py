# This file defines schemas for distributing declaration charges across line items.
# Weights and custom rates are keyed by item_id; ids missing from the map count as zero.

from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field, FiniteFloat

from src.api.schemas.common import EnvelopeFields, RequestModel

DistributionMethod = Literal["value", "weight", "quantity", "custom"]


class DistributionItemRequest(RequestModel):
    item_id: int
    item_name: str = Field(min_length=1)
    quantity: float = Field(ge=0)
    unit_price: float = Field(ge=0)
    total_price: float | None = Field(default=None, ge=0, description="Defaults to quantity * unit_price.")


class DistributionRequest(RequestModel):
    method: DistributionMethod | None = None
    total_customs_duty: float = Field(ge=0)
    total_sales_tax: float = Field(ge=0)
    total_additional_fees: float = Field(default=0.0, ge=0)
    items: list[DistributionItemRequest] = Field(min_length=1)
    weights: dict[int, FiniteFloat] | None = None
    rates: dict[int, FiniteFloat] | None = None


class DistributionRowV1(BaseModel):
    item_id: int
    item_name: str
    customs_duty: float
    sales_tax: float
    additional_fees: float
    total_charges: float
    per_unit_cost: float


class LandedUnitCostRowV1(BaseModel):
    item_id: int
    item_name: str
    unit_price: float
    charges_per_unit: float
    landed_unit_cost: float


class DistributionData(BaseModel):
    method: DistributionMethod
    distribution: list[DistributionRowV1]
    landed_unit_costs: list[LandedUnitCostRowV1]
    totals_reconciled: bool


class DistributionResponseV1(EnvelopeFields):
    data: DistributionData
