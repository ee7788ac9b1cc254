# This file builds the FastAPI application and registers all API routers.
# Startup behavior, middleware, and error handling are configured in one place.
# The app adds request IDs, timing headers, and Prometheus request metrics for operations visibility.

from __future__ import annotations

import logging
import time
import uuid

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
from prometheus_client import CONTENT_TYPE_LATEST, Counter, Gauge, Histogram, generate_latest
from starlette.middleware.base import RequestResponseEndpoint

from src.api.api_config import get_api_config
from src.api.dependencies import get_landed_cost_policy
from src.api.error_handlers import register_error_handlers
from src.api.routers.declarations import router as declarations_router
from src.api.routers.distribution import router as distribution_router
from src.api.routers.health import router as health_router
from src.api.routers.items import router as items_router
from src.api.routers.variances import router as variances_router
from src.common.logging import configure_logging

logger = logging.getLogger(__name__)

API_HTTP_REQUESTS_TOTAL = Counter(
    "landed_cost_http_requests_total",
    "Total number of HTTP requests processed by the API.",
    ["method", "path", "status_code"],
)
API_HTTP_REQUEST_DURATION_SECONDS = Histogram(
    "landed_cost_http_request_duration_seconds",
    "API request duration in seconds.",
    ["method", "path"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1, 2.5, 5),
)
API_HTTP_INFLIGHT_REQUESTS = Gauge(
    "landed_cost_http_inflight_requests",
    "Number of API requests currently being processed.",
    ["method", "path"],
)


def create_app() -> FastAPI:
    """Create configured FastAPI application instance."""

    configure_logging()
    config = get_api_config()

    app = FastAPI(
        title=config.api_name,
        description=(
            "Versioned API for customs declaration landed-cost calculation, item cost allocation, "
            "charge distribution, and estimate variance analysis. All amounts are in JOD unless noted."
        ),
        version=config.app_version,
        openapi_tags=[
            {"name": "health", "description": "Service liveness, readiness, and version metadata."},
            {"name": "declarations", "description": "Declaration cost breakdowns and item allocation."},
            {"name": "items", "description": "Landed cost for a single line item."},
            {"name": "variances", "description": "Actual versus estimated cost variances."},
            {"name": "distribution", "description": "Charge distribution by value, weight, quantity, or rate."},
        ],
    )

    if config.allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=config.allowed_origins,
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    @app.middleware("http")
    async def request_context_middleware(
        request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        request.state.request_id = request_id

        method_label = request.method
        path_label = request.url.path
        started = time.perf_counter()
        status_code = 500
        API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).inc()
        try:
            response: Response = await call_next(request)
            status_code = response.status_code
            duration_ms = (time.perf_counter() - started) * 1000.0

            response.headers["x-request-id"] = request_id
            response.headers["x-response-time-ms"] = f"{duration_ms:.2f}"
            logger.debug(
                "request_id=%s %s %s -> %s in %.2fms",
                request_id,
                method_label,
                path_label,
                status_code,
                duration_ms,
            )
            return response
        finally:
            duration_s = time.perf_counter() - started
            API_HTTP_REQUESTS_TOTAL.labels(
                method=method_label,
                path=path_label,
                status_code=str(status_code),
            ).inc()
            API_HTTP_REQUEST_DURATION_SECONDS.labels(
                method=method_label,
                path=path_label,
            ).observe(duration_s)
            API_HTTP_INFLIGHT_REQUESTS.labels(method=method_label, path=path_label).dec()

    @app.get("/metrics", include_in_schema=False)
    def metrics() -> Response:
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)

    @app.on_event("startup")
    def startup_checks() -> None:
        try:
            policy = get_landed_cost_policy()
            app.state.policy_version_at_startup = policy.policy_version
            logger.info("landed cost policy loaded version=%s", policy.policy_version)
        except (OSError, ValueError):
            app.state.policy_version_at_startup = None
            logger.exception("landed cost policy failed to load")

    register_error_handlers(app)

    app.include_router(health_router)
    app.include_router(declarations_router, prefix=config.api_version_path)
    app.include_router(items_router, prefix=config.api_version_path)
    app.include_router(variances_router, prefix=config.api_version_path)
    app.include_router(distribution_router, prefix=config.api_version_path)

    return app


app = create_app()
