# This file tests API health, readiness, version, and metrics endpoints.
# It exists to validate operational contracts used by orchestration and monitoring.
# The tests confirm request IDs and version metadata are always returned.

from __future__ import annotations

import pytest

from src.api import dependencies as dependencies_module
from tests.api.support import api_test_client, build_test_config, build_test_policy


def test_health_endpoint_returns_expected_fields() -> None:
    config = build_test_config()
    with api_test_client(config=config) as client:
        response = client.get("/health")

    assert response.status_code == 200
    payload = response.json()
    assert payload["status"] == "ok"
    assert payload["environment"] == "test"
    assert payload["service_name"] == config.api_name
    assert payload["api_version"] == "v1"
    assert payload["schema_version"] == config.schema_version
    assert payload["request_id"]
    assert "timestamp" in payload


def test_request_id_header_is_echoed() -> None:
    with api_test_client() as client:
        response = client.get("/health", headers={"x-request-id": "req-abc"})

    assert response.headers["x-request-id"] == "req-abc"
    assert response.json()["request_id"] == "req-abc"
    assert "x-response-time-ms" in response.headers


def test_ready_endpoint_reports_loaded_policy() -> None:
    with api_test_client() as client:
        response = client.get("/ready")

    assert response.status_code == 200
    payload = response.json()
    assert payload["policy_loaded"] is True
    assert payload["policy_version"] == "lc-test"
    assert payload["ready"] is True


def test_ready_endpoint_reports_unloadable_policy() -> None:
    with api_test_client(policy_loaded=False) as client:
        response = client.get("/ready")

    assert response.status_code == 200
    payload = response.json()
    assert payload["policy_loaded"] is False
    assert payload["ready"] is False
    assert payload["policy_version"] is None


def test_loaded_policy_dependency_returns_none_for_invalid_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_policy() -> None:
        raise ValueError("sales_tax_rate must be in [0, 1]")

    monkeypatch.setattr(dependencies_module, "get_landed_cost_policy", broken_policy)

    assert dependencies_module.get_loaded_policy() is None


def test_loaded_policy_dependency_returns_policy(monkeypatch: pytest.MonkeyPatch) -> None:
    policy = build_test_policy()
    monkeypatch.setattr(dependencies_module, "get_landed_cost_policy", lambda: policy)

    assert dependencies_module.get_loaded_policy() is policy


def test_version_endpoint_returns_version_metadata() -> None:
    config = build_test_config()
    with api_test_client(config=config) as client:
        response = client.get("/version")

    assert response.status_code == 200
    payload = response.json()
    assert payload["api_version_path"] == "/api/v1"
    assert payload["schema_version"] == config.schema_version
    assert payload["app_version"] == config.app_version
    assert payload["project"] == config.api_name
    assert payload["version"] == config.app_version


def test_metrics_endpoint_exposes_request_counters() -> None:
    with api_test_client() as client:
        client.get("/health")
        response = client.get("/metrics")

    assert response.status_code == 200
    assert "landed_cost_http_requests_total" in response.text
