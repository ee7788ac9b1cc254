# This file defines shared schema pieces reused by multiple API endpoints.
# Envelope metadata and error payloads stay consistent across every calculation route.

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, ConfigDict


class RequestModel(BaseModel):
    """Base for request bodies; Infinity and NaN are rejected before any calculation runs."""

    model_config = ConfigDict(allow_inf_nan=False)


class EnvelopeFields(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    generated_at: datetime
    policy_version: str | None = None
    warnings: list[str] | None = None


class ErrorResponse(BaseModel):
    error_code: str
    message: str
    details: Any | None = None
    request_id: str
    timestamp: datetime
