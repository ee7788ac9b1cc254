# This module computes customs-declaration cost breakdowns and item-level cost allocation.
# Every function is pure and total: zero denominators return 0 instead of raising.
# Orchestrators feed each step the already-rounded upstream value, so rounding compounds in a fixed order.
# Duty is part of the sales-tax base; that is customs policy and must stay as written.

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any

from src.landed_cost.rounding import CURRENCY_DECIMALS, PERCENT_DECIMALS, round_to_decimals

SALES_TAX_RATE = 0.16
DEFAULT_CUSTOMS_DUTY_RATE = 0.05


@dataclass(frozen=True)
class DeclarationCostInputs:
    fob_value_foreign: float
    exchange_rate: float
    freight_cost: float
    insurance_cost: float
    customs_duty: float
    additional_fees: float = 0.0
    customs_service_fee: float = 0.0
    penalties: float = 0.0
    tax_rate: float = SALES_TAX_RATE


@dataclass(frozen=True)
class DeclarationCostResult:
    fob_value_jod: float
    freight_and_insurance: float
    taxable_value: float
    sales_tax: float
    total_customs_and_taxes: float
    total_landed_cost: float
    additional_expenses_ratio: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ItemCostInputs:
    item_fob_value_foreign: float
    exchange_rate: float
    quantity: float
    total_fob_value_jod: float
    total_customs_and_taxes: float


@dataclass(frozen=True)
class ItemCostResult:
    item_fob_value_jod: float
    item_value_percentage: float
    item_expenses_share: float
    item_total_cost: float
    unit_cost: float

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def calculate_fob_value_jod(fob_value_foreign: float, exchange_rate: float) -> float:
    """Convert the foreign-currency invoice value to local currency."""

    return round_to_decimals(fob_value_foreign * exchange_rate)


def calculate_freight_and_insurance(freight_cost: float, insurance_cost: float) -> float:
    return round_to_decimals(freight_cost + insurance_cost)


def calculate_taxable_value(fob_value_jod: float, freight_and_insurance: float) -> float:
    """Taxable (CIF) value: FOB plus freight and insurance."""

    return round_to_decimals(fob_value_jod + freight_and_insurance)


def calculate_customs_duty_if_needed(
    taxable_value: float,
    customs_duty_rate: float = DEFAULT_CUSTOMS_DUTY_RATE,
) -> float:
    """Estimate customs duty as a flat rate of the taxable value when none was assessed."""

    return round_to_decimals(taxable_value * customs_duty_rate)


def calculate_sales_tax(
    taxable_value: float,
    customs_duty: float,
    tax_rate: float = SALES_TAX_RATE,
) -> float:
    """Sales tax charged on taxable value plus customs duty."""

    base_for_tax = round_to_decimals(taxable_value + customs_duty)
    return round_to_decimals(base_for_tax * tax_rate)


def calculate_total_customs_and_taxes(
    customs_duty: float,
    sales_tax: float,
    additional_fees: float = 0.0,
    customs_service_fee: float = 0.0,
    penalties: float = 0.0,
) -> float:
    return round_to_decimals(customs_duty + sales_tax + additional_fees + customs_service_fee + penalties)


def calculate_total_landed_cost(
    fob_value_jod: float,
    freight_and_insurance: float,
    total_customs_and_taxes: float,
) -> float:
    return round_to_decimals(fob_value_jod + freight_and_insurance + total_customs_and_taxes)


def calculate_additional_expenses_ratio(total_customs_and_taxes: float, fob_value_jod: float) -> float:
    """Customs and taxes as a percentage of the local FOB value."""

    if fob_value_jod == 0:
        return 0.0
    ratio = (total_customs_and_taxes / fob_value_jod) * 100
    return round_to_decimals(ratio, PERCENT_DECIMALS)


def calculate_item_value_percentage(item_value: float, total_fob_value: float) -> float:
    if total_fob_value == 0:
        return 0.0
    percentage = (item_value / total_fob_value) * 100
    return round_to_decimals(percentage, PERCENT_DECIMALS)


def calculate_item_expenses_share(item_value_percentage: float, total_customs_and_taxes: float) -> float:
    share = (item_value_percentage / 100) * total_customs_and_taxes
    return round_to_decimals(share, CURRENCY_DECIMALS)


def calculate_item_total_cost(item_fob_value_jod: float, item_expenses_share: float) -> float:
    return round_to_decimals(item_fob_value_jod + item_expenses_share)


def calculate_unit_cost(item_total_cost: float, quantity: float) -> float:
    if quantity == 0:
        return 0.0
    return round_to_decimals(item_total_cost / quantity)


def calculate_variance(actual_value: float, estimated_value: float) -> float:
    """Actual minus estimated; positive means the estimate was too low."""

    return round_to_decimals(actual_value - estimated_value)


def calculate_variance_percentage(variance: float, estimated_value: float) -> float:
    if estimated_value == 0:
        return 0.0
    percentage = (variance / estimated_value) * 100
    return round_to_decimals(percentage, PERCENT_DECIMALS)


def calculate_all_costs(inputs: DeclarationCostInputs) -> DeclarationCostResult:
    """Compute the full declaration breakdown from raw invoice, shipping and duty figures.

    Order is fixed: FOB in local currency, freight and insurance, taxable value, sales tax,
    total customs and taxes, landed cost, expenses ratio. Each step reads only the rounded
    results of earlier steps, never the raw inputs again.
    """

    fob_value_jod = calculate_fob_value_jod(inputs.fob_value_foreign, inputs.exchange_rate)
    freight_and_insurance = calculate_freight_and_insurance(inputs.freight_cost, inputs.insurance_cost)
    taxable_value = calculate_taxable_value(fob_value_jod, freight_and_insurance)
    sales_tax = calculate_sales_tax(taxable_value, inputs.customs_duty, inputs.tax_rate)
    total_customs_and_taxes = calculate_total_customs_and_taxes(
        inputs.customs_duty,
        sales_tax,
        inputs.additional_fees,
        inputs.customs_service_fee,
        inputs.penalties,
    )
    total_landed_cost = calculate_total_landed_cost(
        fob_value_jod,
        freight_and_insurance,
        total_customs_and_taxes,
    )
    additional_expenses_ratio = calculate_additional_expenses_ratio(total_customs_and_taxes, fob_value_jod)

    return DeclarationCostResult(
        fob_value_jod=fob_value_jod,
        freight_and_insurance=freight_and_insurance,
        taxable_value=taxable_value,
        sales_tax=sales_tax,
        total_customs_and_taxes=total_customs_and_taxes,
        total_landed_cost=total_landed_cost,
        additional_expenses_ratio=additional_expenses_ratio,
    )


def calculate_item_costs(inputs: ItemCostInputs) -> ItemCostResult:
    """Allocate the declaration's customs and taxes to one line item by value share."""

    item_fob_value_jod = calculate_fob_value_jod(inputs.item_fob_value_foreign, inputs.exchange_rate)
    item_value_percentage = calculate_item_value_percentage(item_fob_value_jod, inputs.total_fob_value_jod)
    item_expenses_share = calculate_item_expenses_share(item_value_percentage, inputs.total_customs_and_taxes)
    item_total_cost = calculate_item_total_cost(item_fob_value_jod, item_expenses_share)
    unit_cost = calculate_unit_cost(item_total_cost, inputs.quantity)

    return ItemCostResult(
        item_fob_value_jod=item_fob_value_jod,
        item_value_percentage=item_value_percentage,
        item_expenses_share=item_expenses_share,
        item_total_cost=item_total_cost,
        unit_cost=unit_cost,
    )
