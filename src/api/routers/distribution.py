# This file defines the charge distribution endpoint.
# Brokers post declaration-level duty, tax, and fees with an allocation basis and get per-item charges back.
# Bases that cannot be distributed (zero totals, missing weights or rates) return INVALID_DISTRIBUTION.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_landed_cost_service
from src.api.response_envelope import build_object_envelope
from src.api.schemas.distribution_schemas import DistributionRequest, DistributionResponseV1
from src.api.services.landed_cost_service import LandedCostService

router = APIRouter(prefix="/distribution", tags=["distribution"])
ServiceDep = Annotated[LandedCostService, Depends(get_landed_cost_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=DistributionResponseV1, response_model_exclude_none=True)
def distribute_charges(
    body: DistributionRequest,
    request: Request,
    service: ServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    service_result = service.distribute(body)
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        policy_version=service.policy.policy_version,
        data=service_result["row"],
        warnings=service_result.get("warnings"),
    )
