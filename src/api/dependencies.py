# This file provides dependency factories for FastAPI routes.
# Services are created once and shared through dependency injection so endpoint tests can override them.

from __future__ import annotations

import logging
from functools import lru_cache

from src.api.api_config import ApiConfig, get_api_config
from src.api.services.landed_cost_service import LandedCostService
from src.landed_cost.policy_config import LandedCostPolicy, load_landed_cost_policy

logger = logging.getLogger(__name__)


@lru_cache(maxsize=1)
def get_landed_cost_policy() -> LandedCostPolicy:
    config = get_api_config()
    return load_landed_cost_policy(config_path=config.policy_path)


def get_loaded_policy() -> LandedCostPolicy | None:
    """Policy for readiness probes; None when the policy file cannot be loaded or validated."""

    try:
        return get_landed_cost_policy()
    except (OSError, ValueError) as exc:
        logger.warning("policy not loadable: %s", exc)
        return None


@lru_cache(maxsize=1)
def get_landed_cost_service() -> LandedCostService:
    config = get_api_config()
    return LandedCostService(config=config, policy=get_landed_cost_policy())


def get_config() -> ApiConfig:
    return get_api_config()
