# This file builds response envelopes for calculation endpoints in a consistent format.
# Downstream systems always receive version metadata, request tracing fields, and calculation warnings.
# The helpers return plain dictionaries that Pydantic response models validate at runtime.

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any

from src.api.schema_versions import build_version_fields


def utc_now_iso() -> datetime:
    """Return timezone-aware UTC timestamp for response generation."""

    return datetime.now(tz=UTC)


def build_object_envelope(
    *,
    api_version_path: str,
    schema_version: str,
    request_id: str,
    data: dict[str, Any] | list[dict[str, Any]] | None,
    policy_version: str | None = None,
    warnings: list[str] | None = None,
) -> dict[str, Any]:
    """Build standard response envelope."""

    return {
        **build_version_fields(api_version_path=api_version_path, schema_version=schema_version),
        "request_id": request_id,
        "generated_at": utc_now_iso(),
        "policy_version": policy_version,
        "data": data,
        "warnings": warnings or None,
    }
