# This file defines liveness, readiness, and version endpoints for API operations.
# Readiness confirms the customs policy loads and validates, since every calculation depends on it.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_loaded_policy
from src.api.schema_versions import build_version_fields
from src.api.schemas.health_schemas import HealthResponse, ReadinessResponse, VersionResponse
from src.landed_cost.policy_config import LandedCostPolicy

router = APIRouter(tags=["health"])
ConfigDep = Annotated[ApiConfig, Depends(get_config)]
LoadedPolicyDep = Annotated[LandedCostPolicy | None, Depends(get_loaded_policy)]


def _utc_now() -> datetime:
    return datetime.now(tz=UTC)


@router.get("/health", response_model=HealthResponse)
def health(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "status": "ok",
        "environment": config.environment,
        "service_name": config.api_name,
        "timestamp": _utc_now(),
    }


@router.get("/ready", response_model=ReadinessResponse)
def ready(
    request: Request,
    config: ConfigDep,
    policy: LoadedPolicyDep,
) -> dict[str, object]:
    policy_loaded = policy is not None
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "policy_loaded": policy_loaded,
        "policy_version": policy.policy_version if policy is not None else None,
        "ready": policy_loaded,
        "timestamp": _utc_now(),
    }


@router.get("/version", response_model=VersionResponse)
def version(
    request: Request,
    config: ConfigDep,
) -> dict[str, object]:
    return {
        **build_version_fields(
            api_version_path=config.api_version_path,
            schema_version=config.schema_version,
        ),
        "request_id": request.state.request_id,
        "api_version_path": config.api_version_path,
        "app_version": config.app_version,
        "project": config.api_name,
        "version": config.app_version,
        "timestamp": _utc_now(),
    }
