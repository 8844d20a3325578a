from __future__ import annotations

import time
from typing import Any, Iterable, Mapping, Optional, Sequence

import typer

from models.schemas import NodeInfo, SensorActivity, SensorInfo, StationInfo


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]], indent: str = "") -> None:
    for key, value in pairs:
        typer.echo(f"{indent}{key}: {value}")


def render_stations(stations: Sequence[StationInfo]) -> None:
    echo_heading("Stations")
    if not stations:
        typer.echo("No stations found. Check the API key.")
        return
    for station in stations:
        typer.echo(
            f"  - {station.station_id} {station.station_name} "
            f"[{station.subscription_type or 'unknown plan'}] uuid={station.station_id_uuid}"
        )


def render_sensors(sensors: Sequence[SensorInfo]) -> None:
    echo_heading("Sensors")
    if not sensors:
        typer.echo("No sensors found.")
        return
    for sensor in sensors:
        typer.echo(
            f"  - lsid={sensor.lsid} type={sensor.sensor_type} "
            f"{sensor.product_name or ''}".rstrip()
        )


def render_nodes(nodes: Sequence[NodeInfo]) -> None:
    echo_heading("Nodes")
    if not nodes:
        typer.echo("No nodes found.")
        return
    for node in nodes:
        typer.echo(f"  - {node.node_id} {node.node_name or ''}".rstrip())


def render_activity(activity: Sequence[SensorActivity], now: Optional[float] = None) -> None:
    echo_heading("Sensor Activity")
    if not activity:
        typer.echo("No sensor activity reported.")
        return
    reference = time.time() if now is None else now
    for item in activity:
        age_minutes = round((reference - item.time_received) / 60)
        typer.echo(f"  - lsid {item.lsid}: last push {age_minutes} min ago")


def render_row(row: Mapping[str, Any], heading: str = "Current Reading") -> None:
    echo_heading(heading)
    echo_key_values(sorted(row.items()))


def render_historic_summary(
    windows: int, unavailable: int, payloads: int, rows: int
) -> None:
    typer.echo()
    echo_heading("Historic Summary")
    echo_key_values(
        [
            ("windows", windows),
            ("unavailable_windows", unavailable),
            ("payloads", payloads),
            ("rows", rows),
        ]
    )
    if rows == 0 and unavailable and unavailable == windows:
        typer.secho(
            "Every window was refused; the subscription plan does not include historic data.",
            fg=typer.colors.YELLOW,
        )
