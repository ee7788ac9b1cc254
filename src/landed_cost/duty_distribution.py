# This module distributes declaration-level duty, sales tax, and fees across line items.
# It exists for brokers who allocate charges by weight, quantity, or a negotiated rate instead of value.
# Ratios and charges are computed unrounded and only the output columns are rounded to two places.
# Invalid bases raise ValueError so the API layer can turn them into client errors.

from __future__ import annotations

import logging
import operator
from collections.abc import Iterable, Mapping
from functools import reduce

import pandas as pd

from src.landed_cost.rounding import round_to_decimals

logger = logging.getLogger(__name__)

DISTRIBUTION_METHODS = ("value", "weight", "quantity", "custom")
REQUIRED_ITEM_COLUMNS = ("item_id", "item_name", "quantity", "unit_price", "total_price")


def _round2(series: pd.Series) -> pd.Series:
    return series.astype(float).map(lambda value: round_to_decimals(value, 2))


def running_total(values: Iterable[float]) -> float:
    """Left-to-right float total, matching how stored distribution totals were summed."""

    return reduce(operator.add, (float(value) for value in values), 0.0)


def _validate_items(items: pd.DataFrame) -> None:
    missing = [column for column in REQUIRED_ITEM_COLUMNS if column not in items.columns]
    if missing:
        raise ValueError(f"Item frame is missing required columns: {', '.join(missing)}")


def _mapped_basis(items: pd.DataFrame, values: Mapping[int, float]) -> pd.Series:
    return items["item_id"].map(lambda item_id: float(values.get(item_id, 0.0))).astype(float)


def _basis_for_method(
    *,
    items: pd.DataFrame,
    method: str,
    weights: Mapping[int, float] | None,
    rates: Mapping[int, float] | None,
) -> tuple[pd.Series, float]:
    if method == "value":
        basis = items["total_price"].astype(float)
        total = running_total(basis.tolist())
        label = "Total item value"
    elif method == "weight":
        if weights is None:
            raise ValueError("Item weights are required for weight-based distribution")
        basis = _mapped_basis(items, weights)
        # Weights for ids outside the item list still count toward the total.
        total = running_total(weights.values())
        label = "Total weight"
    elif method == "quantity":
        basis = items["quantity"].astype(float)
        total = running_total(basis.tolist())
        label = "Total quantity"
    elif method == "custom":
        if rates is None:
            raise ValueError("Custom item rates are required for custom distribution")
        basis = _mapped_basis(items, rates)
        total = running_total(rates.values())
        label = "Sum of custom rates"
    else:
        raise ValueError(f"Unsupported distribution method: {method}")

    if total == 0:
        raise ValueError(f"{label} cannot be zero")
    return basis, total


def distribute_duties(
    *,
    items: pd.DataFrame,
    method: str,
    total_customs_duty: float,
    total_sales_tax: float,
    total_additional_fees: float,
    weights: Mapping[int, float] | None = None,
    rates: Mapping[int, float] | None = None,
) -> pd.DataFrame:
    """Split declaration charges across items proportionally to the chosen basis."""

    _validate_items(items)
    basis, total = _basis_for_method(items=items, method=method, weights=weights, rates=rates)
    ratio = basis / total

    customs_duty = float(total_customs_duty) * ratio
    sales_tax = float(total_sales_tax) * ratio
    additional_fees = float(total_additional_fees) * ratio
    total_charges = customs_duty + sales_tax + additional_fees

    quantity = items["quantity"].astype(float)
    per_unit_cost = (total_charges / quantity.where(quantity > 0)).fillna(0.0)

    distribution = pd.DataFrame(
        {
            "item_id": items["item_id"],
            "item_name": items["item_name"].astype(str),
            "customs_duty": _round2(customs_duty),
            "sales_tax": _round2(sales_tax),
            "additional_fees": _round2(additional_fees),
            "total_charges": _round2(total_charges),
            "per_unit_cost": _round2(per_unit_cost),
        },
        index=items.index,
    )
    logger.debug("distributed charges method=%s items=%d", method, len(distribution))
    return distribution.reset_index(drop=True)


def validate_distribution(
    distribution: pd.DataFrame,
    expected_customs_duty: float,
    expected_sales_tax: float,
    expected_additional_fees: float,
    *,
    tolerance: float = 0.01,
) -> bool:
    """Check that rounded columns still add up to the declaration totals."""

    customs_duty_total = running_total(distribution["customs_duty"].tolist())
    sales_tax_total = running_total(distribution["sales_tax"].tolist())
    additional_fees_total = running_total(distribution["additional_fees"].tolist())

    duties_match = abs(customs_duty_total - expected_customs_duty) < tolerance
    tax_match = abs(sales_tax_total - expected_sales_tax) < tolerance
    fees_match = abs(additional_fees_total - expected_additional_fees) < tolerance
    return duties_match and tax_match and fees_match


def calculate_landed_unit_costs(items: pd.DataFrame, distribution: pd.DataFrame) -> pd.DataFrame:
    """Per-unit price plus distributed charges for each item."""

    charges_by_item = dict(zip(distribution["item_id"], distribution["per_unit_cost"].astype(float)))
    rows: list[dict[str, object]] = []
    for _, item in items.iterrows():
        item_id = item["item_id"]
        if item_id not in charges_by_item:
            raise ValueError(f"No distribution found for item {item_id}")
        unit_price = float(item["unit_price"])
        charges_per_unit = charges_by_item[item_id]
        rows.append(
            {
                "item_id": item_id,
                "item_name": str(item["item_name"]),
                "unit_price": round_to_decimals(unit_price, 2),
                "charges_per_unit": round_to_decimals(charges_per_unit, 2),
                "landed_unit_cost": round_to_decimals(unit_price + charges_per_unit, 2),
            }
        )
    return pd.DataFrame(
        rows,
        columns=["item_id", "item_name", "unit_price", "charges_per_unit", "landed_unit_cost"],
    )


def redistribute_duties(
    *,
    items: pd.DataFrame,
    distribution: pd.DataFrame,
    method: str,
    weights: Mapping[int, float] | None = None,
    rates: Mapping[int, float] | None = None,
) -> pd.DataFrame:
    """Distribute the totals of an existing distribution again with a different method."""

    return distribute_duties(
        items=items,
        method=method,
        total_customs_duty=running_total(distribution["customs_duty"].tolist()),
        total_sales_tax=running_total(distribution["sales_tax"].tolist()),
        total_additional_fees=running_total(distribution["additional_fees"].tolist()),
        weights=weights,
        rates=rates,
    )
