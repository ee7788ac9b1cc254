# This file provides shared helpers for API endpoint tests.
# Tests override the config, policy, and service dependencies instead of reading the environment.

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from fastapi.testclient import TestClient

from src.api.api_config import ApiConfig
from src.api.app import app
from src.api.dependencies import get_config, get_landed_cost_service, get_loaded_policy
from src.api.services.landed_cost_service import LandedCostService
from src.landed_cost.policy_config import LandedCostPolicy


def build_test_config(
    *,
    include_plain_language_fields: bool = True,
    max_items_per_request: int = 50,
) -> ApiConfig:
    """Create deterministic API config for tests."""

    return ApiConfig(
        api_name="Test Landed Cost API",
        api_version_path="/api/v1",
        schema_version="1.0.0",
        host="0.0.0.0",
        port=8000,
        environment="test",
        include_plain_language_fields=include_plain_language_fields,
        max_items_per_request=max_items_per_request,
        allowed_origins=[],
        app_version="0.1.0",
    )


def build_test_policy(**overrides: Any) -> LandedCostPolicy:
    values: dict[str, Any] = {
        "policy_version": "lc-test",
        "sales_tax_rate": 0.16,
        "default_customs_duty_rate": 0.05,
        "reconciliation_tolerance": 0.01,
        "default_distribution_method": "value",
    }
    values.update(overrides)
    return LandedCostPolicy(**values)


@contextmanager
def api_test_client(
    *,
    config: ApiConfig | None = None,
    policy: LandedCostPolicy | None = None,
    service: Any | None = None,
    policy_loaded: bool = True,
) -> Iterator[TestClient]:
    """Yield a TestClient with scoped dependency overrides."""

    resolved_config = config or build_test_config()
    resolved_policy = policy or build_test_policy()
    resolved_service = service or LandedCostService(config=resolved_config, policy=resolved_policy)

    app.dependency_overrides[get_config] = lambda: resolved_config
    app.dependency_overrides[get_landed_cost_service] = lambda: resolved_service
    app.dependency_overrides[get_loaded_policy] = lambda: resolved_policy if policy_loaded else None

    try:
        with TestClient(app) as client:
            yield client
    finally:
        app.dependency_overrides.clear()
