from __future__ import annotations

import asyncio
from typing import Any, Coroutine, NoReturn, TypeVar

import httpx
import typer
from pydantic import ValidationError

from cli.config import CLIConfig
from services.weatherlink import WeatherLinkClient

T = TypeVar("T")


def open_client(config: CLIConfig) -> WeatherLinkClient:
    """Build an API client from CLI configuration, insisting on credentials."""
    if not config.has_credentials:
        raise typer.BadParameter(
            "WEATHERLINK_API_KEY and WEATHERLINK_API_SECRET (or API_KEY / API_SECRET) must be set."
        )
    return WeatherLinkClient(
        api_key=config.api_key or "",
        api_secret=config.api_secret or "",
        base_url=config.base_url,
        timeout=config.request_timeout,
    )


def run(operation: Coroutine[Any, Any, T]) -> T:
    """Drive one async operation to completion, turning API failures into exit code 1."""
    try:
        return asyncio.run(operation)
    except httpx.HTTPStatusError as exc:
        _handle_http_error(exc)
    except httpx.TransportError as exc:
        typer.secho(f"Request failed: {exc}", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    except ValidationError as exc:
        typer.secho(
            f"Unexpected response payload: {exc.error_count()} validation error(s).",
            fg=typer.colors.RED,
            err=True,
        )
        raise typer.Exit(code=1)


def _handle_http_error(exc: httpx.HTTPStatusError) -> NoReturn:
    detail: str | None = None
    try:
        data = exc.response.json()
        if isinstance(data, dict):
            detail = data.get("message") or data.get("detail")
    except ValueError:
        detail = exc.response.text.strip()
    message = (
        f"Request failed with status {exc.response.status_code}: {detail or 'no detail provided.'}"
    )
    typer.secho(message, fg=typer.colors.RED, err=True)
    raise typer.Exit(code=1)
