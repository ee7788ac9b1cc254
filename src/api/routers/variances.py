# This file defines the estimated-versus-actual variance endpoint.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_landed_cost_service
from src.api.response_envelope import build_object_envelope
from src.api.schemas.variance_schemas import VarianceRequest, VarianceResponseV1
from src.api.services.landed_cost_service import LandedCostService

router = APIRouter(prefix="/variances", tags=["variances"])
ServiceDep = Annotated[LandedCostService, Depends(get_landed_cost_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post("", response_model=VarianceResponseV1, response_model_exclude_none=True)
def calculate_variances(
    body: VarianceRequest,
    request: Request,
    service: ServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    service_result = service.calculate_variances(body)
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        policy_version=service.policy.policy_version,
        data=service_result["row"],
        warnings=service_result.get("warnings"),
    )
