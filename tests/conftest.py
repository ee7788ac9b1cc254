"""
Shared test configuration.
Required environment variables are seeded before any application module is imported,
because `src.api.app` builds the FastAPI app (and configures logging) at import time.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path

import pytest

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

TEST_ENV_DEFAULTS = {
    "PROJECT_NAME": "test-project",
    "ENV": "test",
    "LOG_LEVEL": "INFO",
    "API_HOST": "0.0.0.0",
    "API_PORT": "8000",
    "LANDED_COST_POLICY_PATH": str(ROOT_DIR / "configs" / "landed_cost_policy.yaml"),
}

for _key, _value in TEST_ENV_DEFAULTS.items():
    os.environ.setdefault(_key, _value)


@pytest.fixture(autouse=True)
def base_test_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Ensure required environment variables are present during tests."""

    for key, value in TEST_ENV_DEFAULTS.items():
        if os.getenv(key) is None:
            monkeypatch.setenv(key, value)
