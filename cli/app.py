from __future__ import annotations

import asyncio
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import List, Optional

import typer
from dotenv import load_dotenv

from cli.client import open_client, run
from cli.config import CLIConfig, load_config
from cli.render import (
    echo_heading,
    render_activity,
    render_historic_summary,
    render_nodes,
    render_row,
    render_sensors,
    render_stations,
)
from logging_config import configure_logging
from models.records import StationRef, station_ref
from services.flattener import flatten_current, flatten_historic
from services.historic import HistoricIterator
from services.windows import InvalidRangeError, to_seconds, validate_range
from settings import get_settings
from storage.row_log import RowSink, build_log_sink


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Query WeatherLink stations and flatten their sensor readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        typer.secho("CLI state is uninitialized.", fg=typer.colors.RED, err=True)
        raise typer.Exit(code=1)
    return state


def _parse_station(raw: str) -> StationRef:
    candidate = raw.strip()
    try:
        return station_ref(int(candidate) if candidate.isdigit() else candidate)
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="STATION") from exc


def _parse_time(raw: str, option: str) -> int:
    candidate = raw.strip()
    if candidate.lstrip("-").isdigit():
        return to_seconds(int(candidate))
    if candidate.endswith("Z"):
        candidate = candidate[:-1] + "+00:00"
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError as exc:
        raise typer.BadParameter(
            f"{raw!r} is neither an epoch timestamp nor an ISO-8601 date.", param_hint=option
        ) from exc
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return to_seconds(parsed)


async def stream_historic_rows(iterator: HistoricIterator, sink: Optional[RowSink] = None) -> int:
    """Flatten each yielded window, hand its rows to ``sink`` and return the row total."""
    total = 0
    async for payload in iterator:
        rows = flatten_historic(payload)
        if sink is not None:
            sink.write(rows)
        total += len(rows)
        typer.echo(f"window ending {iterator.cursor}: {len(rows)} rows")
    return total


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="API base URL (defaults to WEATHERLINK_BASE_URL env or https://api.weatherlink.com/v2).",
    ),
    timeout: Optional[float] = typer.Option(
        None,
        "--timeout",
        help="Per-request timeout in seconds.",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    load_dotenv()
    get_settings.cache_clear()
    configure_logging(log_level.upper() if log_level else None)
    ctx.obj = CLIState(config=load_config(base_url=base_url, timeout=timeout))


@app.command("stations")
def stations_command(
    ctx: typer.Context,
    station_ids: Optional[List[int]] = typer.Argument(
        None, help="Numeric station ids; lists every station when omitted."
    ),
) -> None:
    """List stations visible to the API key."""
    client = open_client(_get_state(ctx).config)

    async def _stations():
        async with client:
            if station_ids:
                return await client.get_stations_by_ids(*station_ids)
            return await client.get_stations()

    render_stations(run(_stations()))


@app.command("sensors")
def sensors_command(ctx: typer.Context) -> None:
    """List sensors attached to the account's stations."""
    client = open_client(_get_state(ctx).config)

    async def _sensors():
        async with client:
            return await client.get_sensors()

    render_sensors(run(_sensors()))


@app.command("nodes")
def nodes_command(ctx: typer.Context) -> None:
    """List WeatherLink Live / Console nodes."""
    client = open_client(_get_state(ctx).config)

    async def _nodes():
        async with client:
            return await client.get_nodes()

    render_nodes(run(_nodes()))


@app.command("activity")
def activity_command(ctx: typer.Context) -> None:
    """Show how long ago each sensor last pushed data."""
    client = open_client(_get_state(ctx).config)

    async def _activity():
        async with client:
            return await client.get_sensor_activity()

    render_activity(run(_activity()))


@app.command("current")
def current_command(
    ctx: typer.Context,
    station: str = typer.Argument(..., help="Numeric station id or station UUID."),
    log: Optional[str] = typer.Option(
        None, "--log", help="Append the flattened row to this JSON-lines file in LOG_DIR."
    ),
) -> None:
    """Fetch and flatten the most recent reading of every sensor."""
    handle = _parse_station(station)
    client = open_client(_get_state(ctx).config)

    async def _current():
        async with client:
            return await client.get_current(handle)

    payload = run(_current())
    if payload is None:
        typer.secho(
            "No current data available (unknown station or plan restriction).",
            fg=typer.colors.YELLOW,
        )
        return

    row = flatten_current(payload)
    render_row(row)
    if log:
        sink = build_log_sink(log)
        sink.write(row)
        typer.echo(f"Appended 1 row to {sink.path}")


@app.command("historic")
def historic_command(
    ctx: typer.Context,
    station: str = typer.Argument(..., help="Numeric station id or station UUID."),
    start: str = typer.Option(..., "--start", help="Range start: epoch seconds/ms or ISO-8601."),
    end: str = typer.Option(..., "--end", help="Range end (exclusive): epoch seconds/ms or ISO-8601."),
    window: Optional[int] = typer.Option(
        None, "--window", help="Seconds per request (defaults to HISTORIC_WINDOW_SECONDS or 86400)."
    ),
    log: Optional[str] = typer.Option(
        None, "--log", help="Write flattened rows to this JSON-lines file in LOG_DIR (truncated first)."
    ),
) -> None:
    """Page through historic data window by window and flatten each window into rows."""
    state = _get_state(ctx)
    start_ts = _parse_time(start, "--start")
    end_ts = _parse_time(end, "--end")
    try:
        validate_range(start_ts, end_ts)
    except InvalidRangeError as exc:
        raise typer.BadParameter(str(exc), param_hint="--end") from exc
    if window is not None and window <= 0:
        raise typer.BadParameter("must be a positive number of seconds", param_hint="--window")
    window_seconds = window if window is not None else state.config.window_seconds
    handle = _parse_station(station)

    client = open_client(state.config)
    iterator = client.iterate_historic(handle, start_ts, end_ts, window_seconds)
    log_file = build_log_sink(log) if log else None
    if log_file is not None:
        log_file.reset()

    async def _historic() -> int:
        async with client:
            return await stream_historic_rows(iterator, log_file)

    total_rows = run(_historic())
    if iterator.station_uuid is None:
        typer.secho(f"Station {station} could not be resolved.", fg=typer.colors.YELLOW)
        return
    render_historic_summary(
        windows=iterator.windows_fetched,
        unavailable=iterator.windows_unavailable,
        payloads=iterator.payloads_yielded,
        rows=total_rows,
    )
    if log_file is not None:
        typer.echo(f"Rows written to {log_file.path}")


@app.command("overview")
def overview_command(
    ctx: typer.Context,
    station: Optional[str] = typer.Argument(
        None, help="Station for the current reading; defaults to the first listed station."
    ),
) -> None:
    """Station metadata plus sensors, activity and the current reading fetched together."""
    requested = _parse_station(station) if station else None
    client = open_client(_get_state(ctx).config)

    async def _overview():
        async with client:
            stations = await client.get_stations()
            if not stations:
                return stations, None
            handle = requested if requested is not None else stations[0].station_id_uuid
            details = await asyncio.gather(
                client.get_sensors(),
                client.get_sensor_activity(),
                client.get_current(handle),
            )
            return stations, details

    stations, details = run(_overview())
    render_stations(stations)
    if details is None:
        return
    sensors, activity, current = details
    typer.echo()
    render_sensors(sensors)
    typer.echo()
    render_activity(activity)
    typer.echo()
    if current is None:
        echo_heading("Current Reading")
        typer.echo("None available.")
        return
    render_row(flatten_current(current))
