# This test file pins the half-up double rounding used for every stored total.
# Python's round() would disagree on ties and on values like 2.675, so these cases guard the helper.

from __future__ import annotations

import math

import pytest

from src.landed_cost.rounding import CURRENCY_DECIMALS, PERCENT_DECIMALS, round_to_decimals


def test_rounds_half_up_at_third_decimal() -> None:
    assert round_to_decimals(1.2345, 3) == 1.235


def test_default_precision_is_three_places() -> None:
    assert round_to_decimals(709.00049) == 709.0
    assert round_to_decimals(139.0405) == 139.041


@pytest.mark.parametrize(
    ("value", "decimals", "expected"),
    [
        (2.5, 0, 3.0),
        (0.5, 0, 1.0),
        (-2.5, 0, -2.0),
        (-0.5, 0, -0.0),
        (1.005, 2, 1.0),
        (2.675, 2, 2.68),
        (33.7150916, 2, 33.72),
        (0.49999999999999994, 0, 0.0),
    ],
)
def test_matches_double_half_up_semantics(value: float, decimals: int, expected: float) -> None:
    assert round_to_decimals(value, decimals) == expected


def test_negative_zero_keeps_sign() -> None:
    result = round_to_decimals(-0.0004, 3)
    assert result == 0.0
    assert math.copysign(1.0, result) == -1.0


def test_non_finite_values_pass_through() -> None:
    assert math.isinf(round_to_decimals(float("inf")))
    assert math.isnan(round_to_decimals(float("nan")))


@pytest.mark.parametrize("value", [0.1234567, 98765.4321, 3.14159, 1e-7, 12.0])
def test_result_has_at_most_n_decimal_digits(value: float) -> None:
    for decimals in (2, 3):
        rounded = round_to_decimals(value, decimals)
        assert abs(rounded * 10**decimals - round(rounded * 10**decimals)) < 1e-6


def test_currency_and_percent_precisions() -> None:
    assert round_to_decimals(10.0005, CURRENCY_DECIMALS) == 10.001
    assert round_to_decimals(49.995, PERCENT_DECIMALS) == 50.0
