"""
Logging configuration helpers.
The API configures process-wide logging once at startup; library modules only call `logging.getLogger`.
"""

from __future__ import annotations

import logging

from src.common.settings import get_settings

_LOGGING_CONFIGURED = False
LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging() -> None:
    """Configure process-wide logging from environment settings."""

    global _LOGGING_CONFIGURED
    if _LOGGING_CONFIGURED:
        return

    settings = get_settings()
    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)

    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger("src").setLevel(level)
    _LOGGING_CONFIGURED = True
