"""Flattening of per-sensor payload blocks into timestamp-keyed rows."""

from __future__ import annotations

import math
from typing import Dict, List

from models.records import FlatRow, SensorEntry, SensorValue
from models.schemas import StationPayload


def sensor_key(sensor_type: int, field: str) -> str:
    """Namespace a field by sensor type so equal field names from two sensors coexist."""
    return f"{sensor_type}_{field}"


def _is_timestamp(value: SensorValue) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return math.isfinite(value)


def flatten_current(payload: StationPayload) -> FlatRow:
    """Collapse a ``/current`` payload into one row using each block's latest sample."""
    out: FlatRow = {
        "station_id": payload.station_id,
        "station_uuid": payload.station_id_uuid,
        "generatedAt": payload.generated_at,
    }
    for block in payload.sensors:
        if not block.data or block.data[0] is None:
            continue
        latest: SensorEntry = block.data[0]
        for field, value in latest.items():
            out[sensor_key(block.sensor_type, field)] = value
    return out


def flatten_historic(payload: StationPayload) -> List[FlatRow]:
    """Merge every block's samples into one row per ``ts``, oldest first."""
    rows: Dict[float, FlatRow] = {}

    for block in payload.sensors:
        for entry in block.data or ():
            if entry is None:
                continue
            ts = entry.get("ts")
            if not _is_timestamp(ts):
                continue
            row = rows.get(ts)
            if row is None:
                row = {
                    "station_id": payload.station_id,
                    "station_uuid": payload.station_id_uuid,
                    "ts": ts,
                }
                rows[ts] = row
            for field, value in entry.items():
                if field == "ts":
                    continue
                row[sensor_key(block.sensor_type, field)] = value

    return [rows[ts] for ts in sorted(rows)]
