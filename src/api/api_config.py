# This file defines runtime settings for the API layer in one place.
# It exists so versioning, plain-language output, and request limits can be configured without code edits.
# The config loader reads environment variables and applies safe defaults for local development.

from __future__ import annotations

import os
from functools import lru_cache

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field, field_validator


class ApiConfig(BaseModel):
    """Typed API runtime configuration."""

    model_config = ConfigDict(extra="ignore")

    api_name: str = "Customs Landed Cost API"
    api_version_path: str = "/api/v1"
    schema_version: str = "1.0.0"
    host: str = "0.0.0.0"
    port: int = 8000
    environment: str = "local"
    include_plain_language_fields: bool = True
    max_items_per_request: int = 500
    allowed_origins: list[str] = Field(default_factory=list)
    policy_path: str = "configs/landed_cost_policy.yaml"
    app_version: str = "0.1.0"

    @field_validator("api_version_path")
    @classmethod
    def validate_api_version_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("api_version_path must start with '/'.")
        parts = [part for part in value.split("/") if part]
        if len(parts) < 2 or parts[-1].startswith("v") is False:
            raise ValueError("api_version_path must look like '/api/v1'.")
        return value.rstrip("/")

    @field_validator("port", "max_items_per_request")
    @classmethod
    def validate_positive_ints(cls, value: int) -> int:
        if value <= 0:
            raise ValueError("Value must be greater than 0.")
        return value

    def api_version_label(self) -> str:
        return self.api_version_path.rstrip("/").split("/")[-1]


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    value = raw.strip().lower()
    if value in {"1", "true", "yes", "y", "on"}:
        return True
    if value in {"0", "false", "no", "n", "off"}:
        return False
    raise ValueError(f"{name} must be boolean-like, got {raw!r}")


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return int(raw)


def _env_list(name: str, default: list[str] | None = None) -> list[str]:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return list(default or [])
    return [item.strip() for item in raw.split(",") if item.strip()]


def load_api_config(*, load_env: bool = True) -> ApiConfig:
    """Load API configuration from `.env` and process environment."""

    if load_env:
        load_dotenv()

    config_values: dict[str, object] = {
        "api_name": os.getenv("API_NAME", "Customs Landed Cost API"),
        "api_version_path": os.getenv("API_VERSION_PATH", "/api/v1"),
        "schema_version": os.getenv("API_SCHEMA_VERSION", "1.0.0"),
        "host": os.getenv("API_HOST", "0.0.0.0"),
        "port": _env_int("API_PORT", 8000),
        "environment": os.getenv("ENV", "local"),
        "include_plain_language_fields": _env_bool("API_INCLUDE_PLAIN_LANGUAGE_FIELDS", True),
        "max_items_per_request": _env_int("API_MAX_ITEMS_PER_REQUEST", 500),
        "allowed_origins": _env_list("API_ALLOWED_ORIGINS", []),
        "policy_path": os.getenv("LANDED_COST_POLICY_PATH", "configs/landed_cost_policy.yaml"),
        "app_version": os.getenv("APP_VERSION", "0.1.0"),
    }

    return ApiConfig.model_validate(config_values)


@lru_cache(maxsize=1)
def get_api_config() -> ApiConfig:
    """Cached accessor for API config."""

    return load_api_config()
