# This module allocates a declaration's customs and taxes across all of its line items.
# It applies the single-item calculator row by row so batch and single-item results are identical.
# Reconciliation compares the allocated shares against the declaration total and reports drift as warnings.
# Drift comes from compounding rounding and is expected to stay within a small tolerance.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

import pandas as pd

from src.landed_cost.calculations import DeclarationCostResult, ItemCostInputs, calculate_item_costs
from src.landed_cost.rounding import round_to_decimals

logger = logging.getLogger(__name__)

REQUIRED_ITEM_COLUMNS = ("item_name", "quantity", "unit_price_foreign")
ITEM_RESULT_COLUMNS = (
    "item_fob_value_jod",
    "item_value_percentage",
    "item_expenses_share",
    "item_total_cost",
    "unit_cost",
)


@dataclass(frozen=True)
class AllocationCheckSummary:
    passed: bool
    share_total: float
    expected_total: float
    difference: float
    percentage_total: float
    warnings: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "passed": self.passed,
            "share_total": self.share_total,
            "expected_total": self.expected_total,
            "difference": self.difference,
            "percentage_total": self.percentage_total,
            "warnings": list(self.warnings),
        }


def allocate_items(
    *,
    items: pd.DataFrame,
    declaration: DeclarationCostResult,
    exchange_rate: float,
) -> pd.DataFrame:
    """Attach per-item landed cost columns to an item frame."""

    missing = [column for column in REQUIRED_ITEM_COLUMNS if column not in items.columns]
    if missing:
        raise ValueError(f"Item frame is missing required columns: {', '.join(missing)}")

    frame = items.copy()
    if frame.empty:
        for column in ("total_price_foreign", "total_price_jod", *ITEM_RESULT_COLUMNS):
            frame[column] = pd.Series(dtype=float)
        return frame

    frame["total_price_foreign"] = frame["quantity"].astype(float) * frame["unit_price_foreign"].astype(float)
    frame["total_price_jod"] = frame["total_price_foreign"] * float(exchange_rate)

    results: list[dict[str, Any]] = []
    for _, row in frame.iterrows():
        result = calculate_item_costs(
            ItemCostInputs(
                item_fob_value_foreign=float(row["total_price_foreign"]),
                exchange_rate=float(exchange_rate),
                quantity=float(row["quantity"]),
                total_fob_value_jod=declaration.fob_value_jod,
                total_customs_and_taxes=declaration.total_customs_and_taxes,
            )
        )
        results.append(result.to_dict())

    result_frame = pd.DataFrame(results, index=frame.index, columns=list(ITEM_RESULT_COLUMNS))
    for column in ITEM_RESULT_COLUMNS:
        frame[column] = result_frame[column].astype(float)
    return frame


def check_allocation_reconciliation(
    *,
    allocated: pd.DataFrame,
    declaration: DeclarationCostResult,
    tolerance: float = 0.01,
) -> AllocationCheckSummary:
    """Compare summed item shares with the declaration's total customs and taxes."""

    warnings: list[str] = []
    if allocated.empty:
        return AllocationCheckSummary(
            passed=True,
            share_total=0.0,
            expected_total=declaration.total_customs_and_taxes,
            difference=0.0,
            percentage_total=0.0,
            warnings=["Declaration has no items to allocate."],
        )

    share_total = round_to_decimals(float(allocated["item_expenses_share"].astype(float).sum()))
    percentage_total = round_to_decimals(float(allocated["item_value_percentage"].astype(float).sum()), 2)
    expected_total = declaration.total_customs_and_taxes
    difference = round_to_decimals(share_total - expected_total)

    passed = abs(difference) <= tolerance
    if not passed:
        warnings.append(
            f"Item expense shares total {share_total:.3f} but declaration customs and taxes are "
            f"{expected_total:.3f} (difference {difference:+.3f})."
        )
        logger.warning(
            "allocation drift share_total=%s expected_total=%s difference=%s",
            share_total,
            expected_total,
            difference,
        )
    if abs(percentage_total - 100.0) > 0.5:
        warnings.append(
            f"Item value percentages total {percentage_total:.2f}%, so items do not cover the full FOB value."
        )

    return AllocationCheckSummary(
        passed=passed,
        share_total=share_total,
        expected_total=expected_total,
        difference=difference,
        percentage_total=percentage_total,
        warnings=warnings,
    )
