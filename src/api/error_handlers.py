# This file defines consistent API error payloads and exception handlers.
# Every endpoint returns the same error shape with request trace fields.
# Validation, HTTP, and unexpected failures are translated into safe client messages;
# unexpected ones are logged with their traceback instead of being returned.

from __future__ import annotations

import logging
import math
from datetime import UTC, datetime
from typing import Any

from fastapi import FastAPI, HTTPException, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class APIError(Exception):
    """Domain error type with structured API details."""

    def __init__(
        self,
        *,
        status_code: int,
        error_code: str,
        message: str,
        details: Any | None = None,
    ) -> None:
        self.status_code = status_code
        self.error_code = error_code
        self.message = message
        self.details = details
        super().__init__(message)


def _request_id(request: Request) -> str:
    return str(getattr(request.state, "request_id", "unknown"))


def _json_safe_float(value: float) -> float | str:
    # Rejected Infinity/NaN inputs are echoed back in validation details as strings.
    return value if math.isfinite(value) else str(value)


def _error_body(
    *, request: Request, error_code: str, message: str, details: Any | None = None
) -> dict[str, Any]:
    return {
        "error_code": error_code,
        "message": message,
        "details": jsonable_encoder(details, custom_encoder={float: _json_safe_float}),
        "request_id": _request_id(request),
        "timestamp": datetime.now(tz=UTC).isoformat(),
    }


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers."""

    @app.exception_handler(APIError)
    async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
        logger.info(
            "api error request_id=%s code=%s status=%s",
            _request_id(request),
            exc.error_code,
            exc.status_code,
        )
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code=exc.error_code,
                message=exc.message,
                details=exc.details,
            ),
        )

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
        return JSONResponse(
            status_code=422,
            content=_error_body(
                request=request,
                error_code="VALIDATION_ERROR",
                message="Invalid request parameters.",
                details=exc.errors(),
            ),
        )

    @app.exception_handler(HTTPException)
    async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
        return JSONResponse(
            status_code=exc.status_code,
            content=_error_body(
                request=request,
                error_code="HTTP_ERROR",
                message=str(exc.detail),
            ),
        )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
        logger.exception("unhandled error request_id=%s", _request_id(request), exc_info=exc)
        return JSONResponse(
            status_code=500,
            content=_error_body(
                request=request,
                error_code="INTERNAL_SERVER_ERROR",
                message="The server encountered an unexpected error.",
            ),
        )
