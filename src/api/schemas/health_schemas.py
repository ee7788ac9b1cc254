# This file defines response schemas for health, readiness, and version endpoints.
# The models include request tracing and version metadata for platform monitoring.

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class HealthResponse(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    status: str
    environment: str
    service_name: str
    timestamp: datetime


class ReadinessResponse(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    policy_loaded: bool
    policy_version: str | None = None
    ready: bool
    timestamp: datetime


class VersionResponse(BaseModel):
    api_version: str
    schema_version: str
    request_id: str
    api_version_path: str
    app_version: str
    project: str
    version: str
    timestamp: datetime
