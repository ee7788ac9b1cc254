# This file defines schemas for costing one line item against its declaration's stored totals.

from __future__ import annotations

from pydantic import BaseModel, Field

from src.api.schemas.common import EnvelopeFields, RequestModel


class ItemCostRequest(RequestModel):
    item_name: str | None = None
    quantity: float = Field(gt=0)
    unit_price_foreign: float = Field(gt=0)
    exchange_rate: float = Field(gt=0)
    total_fob_value_jod: float = Field(ge=0, description="Declaration FOB value already stored in JOD.")
    total_customs_and_taxes: float = Field(ge=0, description="Declaration customs and taxes already stored in JOD.")


class ItemCostData(BaseModel):
    item_name: str | None = None
    quantity: float
    total_price_foreign: float
    total_price_jod: float
    item_fob_value_jod: float
    item_value_percentage: float
    item_expenses_share: float
    item_total_cost: float
    unit_cost: float

    unit_cost_note: str | None = None


class ItemCostResponseV1(EnvelopeFields):
    data: ItemCostData
