# This file defines the single-item costing endpoint.
# The item-creation handler supplies the parent declaration's stored totals and persists the returned item costs.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_landed_cost_service
from src.api.response_envelope import build_object_envelope
from src.api.schemas.item_schemas import ItemCostRequest, ItemCostResponseV1
from src.api.services.landed_cost_service import LandedCostService

router = APIRouter(prefix="/items", tags=["items"])
ServiceDep = Annotated[LandedCostService, Depends(get_landed_cost_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post(
    "/costs",
    response_model=ItemCostResponseV1,
    response_model_exclude_none=True,
)
def item_costs(
    body: ItemCostRequest,
    request: Request,
    service: ServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    service_result = service.calculate_item(body)
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        policy_version=service.policy.policy_version,
        data=service_result["row"],
        warnings=service_result.get("warnings"),
    )
