"""
Unit tests for process settings and the API config loader.
Both read the environment, so each test clears the cached accessor before loading.
"""

import pytest

from src.api import api_config as api_config_module
from src.common import settings as settings_module


def test_load_settings_success() -> None:
    settings_module.get_settings.cache_clear()
    settings = settings_module.get_settings()
    assert settings.PROJECT_NAME
    assert settings.API_PORT > 0
    assert settings.LANDED_COST_POLICY_PATH.endswith("landed_cost_policy.yaml")


def test_load_settings_missing_required(monkeypatch: pytest.MonkeyPatch) -> None:
    settings_module.get_settings.cache_clear()
    monkeypatch.delenv("PROJECT_NAME", raising=False)
    with pytest.raises(RuntimeError, match="Missing required environment variables"):
        settings_module.load_settings(load_env=False)


def test_log_level_is_normalized(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("LOG_LEVEL", " debug ")
    assert settings_module.load_settings(load_env=False).LOG_LEVEL == "DEBUG"

    monkeypatch.setenv("LOG_LEVEL", "chatty")
    with pytest.raises(RuntimeError, match="Invalid environment configuration"):
        settings_module.load_settings(load_env=False)


def test_api_config_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_VERSION_PATH", "/api/v2/")
    monkeypatch.setenv("API_INCLUDE_PLAIN_LANGUAGE_FIELDS", "off")
    monkeypatch.setenv("API_MAX_ITEMS_PER_REQUEST", "25")
    monkeypatch.setenv("API_ALLOWED_ORIGINS", "https://a.example, https://b.example")

    config = api_config_module.load_api_config(load_env=False)

    assert config.api_version_path == "/api/v2"
    assert config.api_version_label() == "v2"
    assert config.include_plain_language_fields is False
    assert config.max_items_per_request == 25
    assert config.allowed_origins == ["https://a.example", "https://b.example"]


def test_api_config_rejects_bad_values(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("API_INCLUDE_PLAIN_LANGUAGE_FIELDS", "sometimes")
    with pytest.raises(ValueError, match="boolean-like"):
        api_config_module.load_api_config(load_env=False)

    monkeypatch.delenv("API_INCLUDE_PLAIN_LANGUAGE_FIELDS")
    monkeypatch.setenv("API_MAX_ITEMS_PER_REQUEST", "0")
    with pytest.raises(ValueError):
        api_config_module.load_api_config(load_env=False)
