from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_API_KEY_ENVS = ("WEATHERLINK_API_KEY", "API_KEY")
_API_SECRET_ENVS = ("WEATHERLINK_API_SECRET", "API_SECRET")
_BASE_URL_ENV = "WEATHERLINK_BASE_URL"
_TIMEOUT_ENV = "WEATHERLINK_TIMEOUT"
_WINDOW_SECONDS_ENV = "HISTORIC_WINDOW_SECONDS"
_LOG_DIR_ENV = "LOG_DIR"
_LOG_LEVEL_ENV = "LOG_LEVEL"

DEFAULT_BASE_URL = "https://api.weatherlink.com/v2"
DEFAULT_WINDOW_SECONDS = 86_400


@dataclass(frozen=True)
class Settings:
    api_key: Optional[str]
    api_secret: Optional[str]
    base_url: str
    request_timeout: float
    window_seconds: int
    log_dir: str
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_first_env(names: tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = os.getenv(name)
        if value is None:
            continue
        candidate = value.strip()
        if candidate:
            return candidate
    return None


def _read_positive_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_positive_float(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed > 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        api_key=_read_first_env(_API_KEY_ENVS),
        api_secret=_read_first_env(_API_SECRET_ENVS),
        base_url=_read_str_env(_BASE_URL_ENV, DEFAULT_BASE_URL).rstrip("/"),
        request_timeout=_read_positive_float(_TIMEOUT_ENV, 30.0),
        window_seconds=_read_positive_int(_WINDOW_SECONDS_ENV, DEFAULT_WINDOW_SECONDS),
        log_dir=_read_str_env(_LOG_DIR_ENV, "logs"),
        log_level=_read_log_level("INFO"),
    )
