# This file translates landed-cost figures into plain-language notes for brokers and importers.
# The wording is deterministic and tied directly to numeric thresholds so endpoints never disagree.

from __future__ import annotations

from src.landed_cost.variance import variance_direction


def expenses_ratio_label(additional_expenses_ratio: float) -> str:
    """Bucket customs-and-taxes-to-FOB ratio into coarse labels."""

    if additional_expenses_ratio <= 0:
        return "none"
    if additional_expenses_ratio < 20:
        return "low"
    if additional_expenses_ratio < 40:
        return "moderate"
    return "high"


def expenses_ratio_note(*, additional_expenses_ratio: float, total_customs_and_taxes: float) -> str:
    label = expenses_ratio_label(additional_expenses_ratio)
    if label == "none":
        return "No customs charges were added on top of the goods value."
    return (
        f"Customs and taxes of {total_customs_and_taxes:,.3f} JOD add {additional_expenses_ratio:.2f}% "
        f"to the goods value ({label} overhead)."
    )


def variance_note(*, component: str, variance: float, variance_percent: float) -> str:
    """Describe one variance component in a sentence."""

    label = component.replace("_", " ")
    direction = variance_direction(variance)
    if direction == "over_estimate":
        return f"Actual {label} exceeded the estimate by {variance:,.3f} JOD ({variance_percent:+.2f}%)."
    if direction == "under_estimate":
        return f"Actual {label} came in {abs(variance):,.3f} JOD below the estimate ({variance_percent:+.2f}%)."
    return f"Actual {label} matched the estimate."


def unit_cost_note(*, unit_cost: float, quantity: float) -> str:
    if quantity == 0:
        return "Unit cost is not defined for a zero quantity."
    return f"Each unit lands at {unit_cost:,.3f} JOD including its share of customs and taxes."
