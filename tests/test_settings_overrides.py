from __future__ import annotations

import pytest

from cli.config import load_config
from settings import DEFAULT_BASE_URL, get_settings

_ENV_NAMES = (
    "WEATHERLINK_API_KEY",
    "WEATHERLINK_API_SECRET",
    "API_KEY",
    "API_SECRET",
    "WEATHERLINK_BASE_URL",
    "WEATHERLINK_TIMEOUT",
    "HISTORIC_WINDOW_SECONDS",
    "LOG_DIR",
    "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    for name in _ENV_NAMES:
        monkeypatch.delenv(name, raising=False)
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_without_environment() -> None:
    settings = get_settings()

    assert settings.api_key is None
    assert settings.api_secret is None
    assert settings.base_url == DEFAULT_BASE_URL
    assert settings.request_timeout == 30.0
    assert settings.window_seconds == 86_400
    assert settings.log_dir == "logs"
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch, tmp_path) -> None:
    monkeypatch.setenv("WEATHERLINK_API_KEY", " key ")
    monkeypatch.setenv("WEATHERLINK_API_SECRET", "secret")
    monkeypatch.setenv("WEATHERLINK_BASE_URL", "https://example.test/v2/")
    monkeypatch.setenv("WEATHERLINK_TIMEOUT", "5")
    monkeypatch.setenv("HISTORIC_WINDOW_SECONDS", "3600")
    monkeypatch.setenv("LOG_DIR", str(tmp_path))
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()

    assert settings.api_key == "key"
    assert settings.api_secret == "secret"
    assert settings.base_url == "https://example.test/v2"
    assert settings.request_timeout == 5.0
    assert settings.window_seconds == 3600
    assert settings.log_dir == str(tmp_path)
    assert settings.log_level == "DEBUG"


def test_legacy_credential_names_are_accepted(monkeypatch) -> None:
    monkeypatch.setenv("API_KEY", "old-key")
    monkeypatch.setenv("API_SECRET", "old-secret")
    monkeypatch.setenv("WEATHERLINK_API_KEY", "   ")

    settings = get_settings()

    assert settings.api_key == "old-key"
    assert settings.api_secret == "old-secret"


@pytest.mark.parametrize("raw", ["", "abc", "0", "-5"])
def test_invalid_numbers_fall_back_to_defaults(monkeypatch, raw: str) -> None:
    monkeypatch.setenv("HISTORIC_WINDOW_SECONDS", raw)
    monkeypatch.setenv("WEATHERLINK_TIMEOUT", raw)

    settings = get_settings()

    assert settings.window_seconds == 86_400
    assert settings.request_timeout == 30.0


def test_cli_options_take_precedence(monkeypatch) -> None:
    monkeypatch.setenv("WEATHERLINK_API_KEY", "env-key")
    monkeypatch.setenv("WEATHERLINK_API_SECRET", "env-secret")

    config = load_config(base_url="http://localhost:9000/", timeout=2.5, window_seconds=600)

    assert config.base_url == "http://localhost:9000"
    assert config.request_timeout == 2.5
    assert config.window_seconds == 600
    assert config.api_key == "env-key"
    assert config.has_credentials
