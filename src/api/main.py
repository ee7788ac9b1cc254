"""Command-line entrypoint that serves the landed-cost API with uvicorn."""

from __future__ import annotations

import argparse

import uvicorn

from src.common.settings import get_settings


def parse_args() -> argparse.Namespace:
    settings = get_settings()
    parser = argparse.ArgumentParser(description="Serve the customs landed-cost API")
    parser.add_argument("--host", default=settings.API_HOST)
    parser.add_argument("--port", type=int, default=settings.API_PORT)
    parser.add_argument("--reload", action="store_true", help="Reload on code changes (local development only)")
    return parser.parse_args()


def main() -> None:
    args = parse_args()
    settings = get_settings()
    uvicorn.run(
        "src.api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=settings.LOG_LEVEL.lower(),
    )


if __name__ == "__main__":
    main()
