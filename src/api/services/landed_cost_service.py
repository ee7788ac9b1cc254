# This file implements the calculation services behind the declaration, item, variance, and distribution routes.
# Routers stay transport-focused while request mapping, policy defaults, and row shaping live here.
# Services return plain dictionaries plus warnings; envelope assembly happens in the routers.

from __future__ import annotations

import logging
from typing import Any

import pandas as pd

from src.api.api_config import ApiConfig
from src.api.error_handlers import APIError
from src.api.plain_language import expenses_ratio_label, expenses_ratio_note, unit_cost_note, variance_note
from src.api.schemas.declaration_schemas import DeclarationBreakdownRequest, DeclarationCostRequest
from src.api.schemas.distribution_schemas import DistributionRequest
from src.api.schemas.item_schemas import ItemCostRequest
from src.api.schemas.variance_schemas import VarianceRequest
from src.landed_cost.allocation import allocate_items, check_allocation_reconciliation
from src.landed_cost.calculations import (
    DeclarationCostInputs,
    DeclarationCostResult,
    ItemCostInputs,
    calculate_all_costs,
    calculate_customs_duty_if_needed,
    calculate_freight_and_insurance,
    calculate_fob_value_jod,
    calculate_item_costs,
    calculate_taxable_value,
)
from src.landed_cost.duty_distribution import (
    calculate_landed_unit_costs,
    distribute_duties,
    validate_distribution,
)
from src.landed_cost.policy_config import LandedCostPolicy
from src.landed_cost.variance import (
    VARIANCE_COMPONENTS,
    VarianceEstimates,
    VarianceInputs,
    analyze_variances,
    variance_direction,
)

logger = logging.getLogger(__name__)


class LandedCostService:
    """Maps validated API requests onto the landed-cost calculator."""

    def __init__(self, *, config: ApiConfig, policy: LandedCostPolicy) -> None:
        self.config = config
        self.policy = policy

    def _check_item_count(self, count: int) -> None:
        if count > self.config.max_items_per_request:
            raise APIError(
                status_code=400,
                error_code="TOO_MANY_ITEMS",
                message=f"At most {self.config.max_items_per_request} items are accepted per request.",
                details={"item_count": count},
            )

    def _declaration_costs(
        self, request: DeclarationCostRequest
    ) -> tuple[DeclarationCostResult, dict[str, Any], list[str]]:
        warnings: list[str] = []
        tax_rate = self.policy.sales_tax_rate if request.tax_rate is None else request.tax_rate

        customs_duty = request.customs_duty
        duty_estimated = customs_duty is None
        if customs_duty is None:
            # Estimated duty uses the same rounded taxable value the breakdown will report.
            fob_value_jod = calculate_fob_value_jod(request.fob_value_foreign, request.exchange_rate)
            freight_and_insurance = calculate_freight_and_insurance(request.freight_cost, request.insurance_cost)
            taxable_value = calculate_taxable_value(fob_value_jod, freight_and_insurance)
            customs_duty = calculate_customs_duty_if_needed(taxable_value, self.policy.default_customs_duty_rate)
            warnings.append(
                f"Customs duty was not provided and was estimated at "
                f"{self.policy.default_customs_duty_rate:.2%} of the taxable value."
            )

        result = calculate_all_costs(
            DeclarationCostInputs(
                fob_value_foreign=request.fob_value_foreign,
                exchange_rate=request.exchange_rate,
                freight_cost=request.freight_cost,
                insurance_cost=request.insurance_cost,
                customs_duty=customs_duty,
                additional_fees=request.additional_fees,
                customs_service_fee=request.customs_service_fee,
                penalties=request.penalties,
                tax_rate=tax_rate,
            )
        )

        row: dict[str, Any] = {
            **result.to_dict(),
            "customs_duty": customs_duty,
            "customs_duty_estimated": duty_estimated,
            "tax_rate": tax_rate,
        }
        if self.config.include_plain_language_fields:
            row["expenses_ratio_label"] = expenses_ratio_label(result.additional_expenses_ratio)
            row["expenses_ratio_note"] = expenses_ratio_note(
                additional_expenses_ratio=result.additional_expenses_ratio,
                total_customs_and_taxes=result.total_customs_and_taxes,
            )
        return result, row, warnings

    def calculate_declaration(self, request: DeclarationCostRequest) -> dict[str, Any]:
        _, row, warnings = self._declaration_costs(request)
        logger.info(
            "declaration costed landed_cost=%s ratio=%s",
            row["total_landed_cost"],
            row["additional_expenses_ratio"],
        )
        return {"row": row, "warnings": warnings}

    def calculate_breakdown(self, request: DeclarationBreakdownRequest) -> dict[str, Any]:
        self._check_item_count(len(request.items))
        result, declaration_row, warnings = self._declaration_costs(request.declaration)

        items = pd.DataFrame(
            [item.model_dump() for item in request.items],
            columns=["item_name", "quantity", "unit_price_foreign"],
        )
        allocated = allocate_items(
            items=items,
            declaration=result,
            exchange_rate=request.declaration.exchange_rate,
        )
        summary = check_allocation_reconciliation(
            allocated=allocated,
            declaration=result,
            tolerance=self.policy.reconciliation_tolerance,
        )
        warnings.extend(summary.warnings)

        item_rows = allocated.to_dict(orient="records")
        reconciliation = summary.to_dict()
        reconciliation.pop("warnings")
        return {
            "row": {
                "declaration": declaration_row,
                "items": item_rows,
                "reconciliation": reconciliation,
            },
            "warnings": warnings,
        }

    def calculate_item(self, request: ItemCostRequest) -> dict[str, Any]:
        total_price_foreign = request.quantity * request.unit_price_foreign
        result = calculate_item_costs(
            ItemCostInputs(
                item_fob_value_foreign=total_price_foreign,
                exchange_rate=request.exchange_rate,
                quantity=request.quantity,
                total_fob_value_jod=request.total_fob_value_jod,
                total_customs_and_taxes=request.total_customs_and_taxes,
            )
        )
        warnings: list[str] = []
        if result.item_value_percentage > 100:
            warnings.append("Item value exceeds the declaration FOB value; check the stored declaration totals.")

        row: dict[str, Any] = {
            "item_name": request.item_name,
            "quantity": request.quantity,
            "total_price_foreign": total_price_foreign,
            "total_price_jod": total_price_foreign * request.exchange_rate,
            **result.to_dict(),
        }
        if self.config.include_plain_language_fields:
            row["unit_cost_note"] = unit_cost_note(unit_cost=result.unit_cost, quantity=request.quantity)
        return {"row": row, "warnings": warnings}

    def calculate_variances(self, request: VarianceRequest) -> dict[str, Any]:
        result = analyze_variances(
            VarianceInputs(**request.actual.model_dump()),
            VarianceEstimates(**request.estimates.model_dump()),
        )
        components = result.component_variances()
        row: dict[str, Any] = {
            **result.to_dict(),
            "directions": {
                **{component: variance_direction(value) for component, value in components.items()},
                "total": variance_direction(result.total_variance),
            },
        }
        if self.config.include_plain_language_fields:
            row["variance_notes"] = [
                variance_note(
                    component=component,
                    variance=components[component],
                    variance_percent=float(getattr(result, f"{component}_variance_percent")),
                )
                for component in VARIANCE_COMPONENTS
            ]
        return {"row": row, "warnings": []}

    def distribute(self, request: DistributionRequest) -> dict[str, Any]:
        self._check_item_count(len(request.items))
        method = request.method or self.policy.default_distribution_method

        items = pd.DataFrame(
            [
                {
                    "item_id": item.item_id,
                    "item_name": item.item_name,
                    "quantity": item.quantity,
                    "unit_price": item.unit_price,
                    "total_price": (
                        item.total_price if item.total_price is not None else item.quantity * item.unit_price
                    ),
                }
                for item in request.items
            ]
        )
        if items["item_id"].duplicated().any():
            raise APIError(
                status_code=400,
                error_code="DUPLICATE_ITEM_ID",
                message="Each item_id may appear only once per distribution.",
            )

        try:
            distribution = distribute_duties(
                items=items,
                method=method,
                total_customs_duty=request.total_customs_duty,
                total_sales_tax=request.total_sales_tax,
                total_additional_fees=request.total_additional_fees,
                weights=request.weights,
                rates=request.rates,
            )
            landed = calculate_landed_unit_costs(items, distribution)
        except ValueError as exc:
            raise APIError(
                status_code=400,
                error_code="INVALID_DISTRIBUTION",
                message=str(exc),
            ) from exc

        reconciled = validate_distribution(
            distribution,
            request.total_customs_duty,
            request.total_sales_tax,
            request.total_additional_fees,
            tolerance=self.policy.reconciliation_tolerance,
        )
        warnings: list[str] = []
        if not reconciled:
            warnings.append("Rounded item charges do not add up to the declaration totals within tolerance.")

        return {
            "row": {
                "method": method,
                "distribution": distribution.to_dict(orient="records"),
                "landed_unit_costs": landed.to_dict(orient="records"),
                "totals_reconciled": reconciled,
            },
            "warnings": warnings,
        }
