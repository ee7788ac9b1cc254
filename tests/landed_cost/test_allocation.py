# This file tests batch allocation of declaration customs and taxes across line items.
# It checks that batch rows match the single-item calculator and that rounding drift is reported.

from __future__ import annotations

import numpy as np
import pandas as pd
import pytest

from src.landed_cost.allocation import allocate_items, check_allocation_reconciliation
from src.landed_cost.calculations import (
    DeclarationCostInputs,
    DeclarationCostResult,
    ItemCostInputs,
    calculate_all_costs,
    calculate_item_costs,
)


def _declaration(*, fob_value_jod: float, total_customs_and_taxes: float) -> DeclarationCostResult:
    return DeclarationCostResult(
        fob_value_jod=fob_value_jod,
        freight_and_insurance=0.0,
        taxable_value=fob_value_jod,
        sales_tax=0.0,
        total_customs_and_taxes=total_customs_and_taxes,
        total_landed_cost=fob_value_jod + total_customs_and_taxes,
        additional_expenses_ratio=0.0,
    )


def test_allocate_items_matches_single_item_calculator() -> None:
    declaration = calculate_all_costs(
        DeclarationCostInputs(
            fob_value_foreign=1000.0,
            exchange_rate=0.709,
            freight_cost=50.0,
            insurance_cost=10.0,
            customs_duty=100.0,
        )
    )
    items = pd.DataFrame(
        [
            {"item_name": "pump", "quantity": 10, "unit_price_foreign": 50.0},
            {"item_name": "valve", "quantity": 25, "unit_price_foreign": 20.0},
        ]
    )

    allocated = allocate_items(items=items, declaration=declaration, exchange_rate=0.709)

    assert list(allocated["total_price_foreign"]) == [500.0, 500.0]
    for _, row in allocated.iterrows():
        expected = calculate_item_costs(
            ItemCostInputs(
                item_fob_value_foreign=float(row["total_price_foreign"]),
                exchange_rate=0.709,
                quantity=float(row["quantity"]),
                total_fob_value_jod=declaration.fob_value_jod,
                total_customs_and_taxes=declaration.total_customs_and_taxes,
            )
        )
        assert row["item_expenses_share"] == expected.item_expenses_share
        assert row["unit_cost"] == expected.unit_cost

    assert list(allocated["item_value_percentage"]) == [50.0, 50.0]
    assert list(allocated["unit_cost"]) == [47.402, 18.961]

    summary = check_allocation_reconciliation(allocated=allocated, declaration=declaration)
    assert summary.passed is True
    assert summary.share_total == 239.04
    assert summary.warnings == []


def test_allocate_items_requires_columns() -> None:
    declaration = _declaration(fob_value_jod=100.0, total_customs_and_taxes=10.0)
    with pytest.raises(ValueError, match="unit_price_foreign"):
        allocate_items(
            items=pd.DataFrame([{"item_name": "x", "quantity": 1}]),
            declaration=declaration,
            exchange_rate=1.0,
        )


def test_allocate_items_empty_frame_has_result_columns() -> None:
    declaration = _declaration(fob_value_jod=0.0, total_customs_and_taxes=0.0)
    items = pd.DataFrame(columns=["item_name", "quantity", "unit_price_foreign"])

    allocated = allocate_items(items=items, declaration=declaration, exchange_rate=1.0)

    assert allocated.empty
    assert "item_expenses_share" in allocated.columns
    summary = check_allocation_reconciliation(allocated=allocated, declaration=declaration)
    assert summary.passed is True
    assert summary.warnings == ["Declaration has no items to allocate."]


def test_rounded_percentages_drift_is_reported() -> None:
    declaration = _declaration(fob_value_jod=300.0, total_customs_and_taxes=300.0)
    items = pd.DataFrame(
        [{"item_name": f"part-{index}", "quantity": 1, "unit_price_foreign": 100.0} for index in range(3)]
    )

    allocated = allocate_items(items=items, declaration=declaration, exchange_rate=1.0)
    summary = check_allocation_reconciliation(allocated=allocated, declaration=declaration)

    assert list(allocated["item_expenses_share"]) == [99.99, 99.99, 99.99]
    assert summary.passed is False
    assert summary.difference == -0.03
    assert len(summary.warnings) == 1
    assert "difference -0.030" in summary.warnings[0]


def test_partial_item_coverage_warns_about_percentages() -> None:
    declaration = _declaration(fob_value_jod=709.0, total_customs_and_taxes=239.04)
    items = pd.DataFrame([{"item_name": "pump", "quantity": 10, "unit_price_foreign": 50.0}])

    allocated = allocate_items(items=items, declaration=declaration, exchange_rate=0.709)
    summary = check_allocation_reconciliation(allocated=allocated, declaration=declaration)

    assert summary.passed is False
    assert summary.percentage_total == 50.0
    assert any("do not cover the full FOB value" in warning for warning in summary.warnings)


def test_shares_reconcile_when_percentages_total_one_hundred() -> None:
    rng = np.random.default_rng(20240611)

    for _ in range(200):
        item_count = int(rng.integers(1, 11))
        # Integer hundredths that sum to 10000 give exact 2dp percentages summing to 100.
        cuts = np.sort(rng.choice(np.arange(1, 10000), size=item_count - 1, replace=False))
        values = np.diff(np.concatenate(([0], cuts, [10000]))).astype(float)
        total_customs_and_taxes = round(float(rng.uniform(0.0, 50000.0)), 3)

        declaration = _declaration(fob_value_jod=10000.0, total_customs_and_taxes=total_customs_and_taxes)
        items = pd.DataFrame(
            {
                "item_name": [f"item-{index}" for index in range(item_count)],
                "quantity": np.ones(item_count),
                "unit_price_foreign": values,
            }
        )

        allocated = allocate_items(items=items, declaration=declaration, exchange_rate=1.0)
        summary = check_allocation_reconciliation(allocated=allocated, declaration=declaration)

        assert summary.percentage_total == 100.0
        assert abs(summary.share_total - total_customs_and_taxes) <= 0.01
        assert summary.passed is True
