# This file defines the customs policy surface for landed-cost calculations.
# It exists so the tax rate, default duty rate, and reconciliation tolerance are set in one reviewed place.
# The loader merges YAML defaults with LANDED_COST_* environment overrides and validates the result.
# Calculator functions keep their own defaults; this config only feeds the API layer.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any

import yaml

from src.landed_cost.calculations import DEFAULT_CUSTOMS_DUTY_RATE, SALES_TAX_RATE

VALID_DISTRIBUTION_METHODS = {"value", "weight", "quantity", "custom"}
DEFAULT_POLICY_PATH = "configs/landed_cost_policy.yaml"


def _load_yaml(path: str) -> dict[str, Any]:
    with open(path, encoding="utf-8") as handle:
        loaded = yaml.safe_load(handle) or {}
    if not isinstance(loaded, dict):
        raise ValueError(f"Config at {path} must be a mapping, got: {type(loaded).__name__}")
    return dict(loaded)


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return value.strip()


def _env_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None or value.strip() == "":
        return default
    return float(value)


@dataclass(frozen=True)
class LandedCostPolicy:
    policy_version: str
    sales_tax_rate: float
    default_customs_duty_rate: float
    reconciliation_tolerance: float
    default_distribution_method: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "policy_version": self.policy_version,
            "sales_tax_rate": self.sales_tax_rate,
            "default_customs_duty_rate": self.default_customs_duty_rate,
            "reconciliation_tolerance": self.reconciliation_tolerance,
            "default_distribution_method": self.default_distribution_method,
        }


def load_landed_cost_policy(*, config_path: str | None = None) -> LandedCostPolicy:
    """Load policy from YAML (path from LANDED_COST_POLICY_PATH when not given) plus env overrides."""

    path = config_path or _env_str("LANDED_COST_POLICY_PATH", DEFAULT_POLICY_PATH)
    cfg = _load_yaml(path) if os.path.exists(path) else {}

    policy_version = _env_str("LANDED_COST_POLICY_VERSION", str(cfg.get("policy_version", "lc1")))
    sales_tax_rate = _env_float("LANDED_COST_SALES_TAX_RATE", float(cfg.get("sales_tax_rate", SALES_TAX_RATE)))
    default_customs_duty_rate = _env_float(
        "LANDED_COST_DEFAULT_CUSTOMS_DUTY_RATE",
        float(cfg.get("default_customs_duty_rate", DEFAULT_CUSTOMS_DUTY_RATE)),
    )
    reconciliation_tolerance = _env_float(
        "LANDED_COST_RECONCILIATION_TOLERANCE",
        float(cfg.get("reconciliation_tolerance", 0.01)),
    )
    default_distribution_method = _env_str(
        "LANDED_COST_DEFAULT_DISTRIBUTION_METHOD",
        str(cfg.get("default_distribution_method", "value")),
    )

    if not (0 <= sales_tax_rate <= 1):
        raise ValueError("sales_tax_rate must be in [0, 1]")
    if not (0 <= default_customs_duty_rate <= 1):
        raise ValueError("default_customs_duty_rate must be in [0, 1]")
    if reconciliation_tolerance < 0:
        raise ValueError("reconciliation_tolerance must be nonnegative")
    if default_distribution_method not in VALID_DISTRIBUTION_METHODS:
        raise ValueError(
            "default_distribution_method must be one of "
            f"{sorted(VALID_DISTRIBUTION_METHODS)}, got {default_distribution_method}"
        )

    return LandedCostPolicy(
        policy_version=policy_version,
        sales_tax_rate=sales_tax_rate,
        default_customs_duty_rate=default_customs_duty_rate,
        reconciliation_tolerance=reconciliation_tolerance,
        default_distribution_method=default_distribution_method,
    )
