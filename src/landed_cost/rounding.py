# This module rounds monetary and percentage values the way persisted declaration totals were produced.
# Stored totals were scaled to an integer and rounded half up on the binary double before dividing back,
# so ties go toward positive infinity and 1.005 stays 1.0 at two places.
# Python's built-in round() uses banker's rounding and must not be used for these figures.

from __future__ import annotations

import math

CURRENCY_DECIMALS = 3
PERCENT_DECIMALS = 2


def _round_half_up(value: float) -> float:
    """Round to the nearest integer with ties toward +inf, preserving the sign of zero."""

    if not math.isfinite(value):
        return value
    floored = math.floor(value)
    # value - floor(value) is exact for doubles, unlike value + 0.5
    if value - floored >= 0.5:
        floored += 1
    return math.copysign(float(floored), value) if floored == 0 else float(floored)


def round_to_decimals(num: float, decimals: int = CURRENCY_DECIMALS) -> float:
    """Round `num` to `decimals` places using double-precision half-up semantics."""

    factor = math.pow(10, decimals)
    return _round_half_up(float(num) * factor) / factor
