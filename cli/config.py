from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

from settings import get_settings


@dataclass(frozen=True)
class CLIConfig:
    api_key: Optional[str]
    api_secret: Optional[str]
    base_url: str
    request_timeout: float
    window_seconds: int

    @property
    def has_credentials(self) -> bool:
        return bool(self.api_key and self.api_secret)


def _positive_or(value: Optional[float], default: float) -> float:
    if value is None or value <= 0:
        return default
    return value


def load_config(
    base_url: Optional[str] = None,
    timeout: Optional[float] = None,
    window_seconds: Optional[int] = None,
    api_key: Optional[str] = None,
    api_secret: Optional[str] = None,
) -> CLIConfig:
    """Merge command-line overrides over environment-derived settings."""
    settings = get_settings()
    url = (base_url or settings.base_url).rstrip("/")
    return CLIConfig(
        api_key=api_key or settings.api_key,
        api_secret=api_secret or settings.api_secret,
        base_url=url,
        request_timeout=_positive_or(timeout, settings.request_timeout),
        window_seconds=int(_positive_or(window_seconds, settings.window_seconds)),
    )
