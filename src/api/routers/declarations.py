# This file defines declaration costing endpoints under the versioned API path.
# The declaration-intake handler posts raw invoice, freight, and duty figures and persists the returned breakdown.
# The breakdown endpoint also allocates customs and taxes across line items and reports reconciliation drift.

from __future__ import annotations

from typing import Annotated

from fastapi import APIRouter, Depends, Request

from src.api.api_config import ApiConfig
from src.api.dependencies import get_config, get_landed_cost_service
from src.api.response_envelope import build_object_envelope
from src.api.schemas.declaration_schemas import (
    DeclarationBreakdownRequest,
    DeclarationBreakdownResponseV1,
    DeclarationCostRequest,
    DeclarationCostResponseV1,
)
from src.api.services.landed_cost_service import LandedCostService

router = APIRouter(prefix="/declarations", tags=["declarations"])
ServiceDep = Annotated[LandedCostService, Depends(get_landed_cost_service)]
ConfigDep = Annotated[ApiConfig, Depends(get_config)]


@router.post(
    "/costs",
    response_model=DeclarationCostResponseV1,
    response_model_exclude_none=True,
)
def declaration_costs(
    body: DeclarationCostRequest,
    request: Request,
    service: ServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    service_result = service.calculate_declaration(body)
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        policy_version=service.policy.policy_version,
        data=service_result["row"],
        warnings=service_result.get("warnings"),
    )


@router.post(
    "/breakdown",
    response_model=DeclarationBreakdownResponseV1,
    response_model_exclude_none=True,
)
def declaration_breakdown(
    body: DeclarationBreakdownRequest,
    request: Request,
    service: ServiceDep,
    config: ConfigDep,
) -> dict[str, object]:
    service_result = service.calculate_breakdown(body)
    return build_object_envelope(
        api_version_path=config.api_version_path,
        schema_version=config.schema_version,
        request_id=request.state.request_id,
        policy_version=service.policy.policy_version,
        data=service_result["row"],
        warnings=service_result.get("warnings"),
    )
