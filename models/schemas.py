"""Pydantic schemas for WeatherLink v2 response bodies."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from models.records import SensorEntry


class _Response(BaseModel):
    model_config = ConfigDict(extra="ignore", frozen=True)


class StationInfo(_Response):
    """One entry of the ``/stations`` listing."""

    station_id: int
    station_id_uuid: str
    station_name: str
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    elevation: Optional[float] = None
    time_zone: Optional[str] = None
    subscription_type: Optional[str] = Field(
        default=None, description="One of Basic, Pro or Pro+."
    )


class StationResponse(_Response):
    stations: List[StationInfo] = Field(default_factory=list)


class NodeInfo(_Response):
    node_id: int
    node_name: Optional[str] = None
    station_id: Optional[int] = None
    station_id_uuid: Optional[str] = None
    registered_date: Optional[int] = None
    firmware_version: Optional[int] = None


class NodeResponse(_Response):
    nodes: List[NodeInfo] = Field(default_factory=list)


class SensorInfo(_Response):
    lsid: int
    sensor_type: int
    sensor_id: Optional[int] = None
    station_id: Optional[int] = None
    station_id_uuid: Optional[str] = None
    product_name: Optional[str] = None
    data_structure_type: Optional[int] = None
    active: Optional[bool] = None


class SensorResponse(_Response):
    sensors: List[SensorInfo] = Field(default_factory=list)


class SensorActivity(_Response):
    lsid: int
    time_received: int
    time_recorded: int


class SensorActivityResponse(_Response):
    sensor_activity: List[SensorActivity] = Field(default_factory=list)


class SensorBlock(_Response):
    """Readings reported by one logical sensor.

    ``data`` is ``None`` when the service sent something other than a list.
    Entries that are not objects become ``None`` so every sample keeps its
    position; index 0 of a current payload is the latest reading.
    """

    lsid: int
    sensor_type: int
    data_structure_type: int
    data: Optional[List[Optional[SensorEntry]]] = None

    @field_validator("data", mode="before")
    @classmethod
    def _keep_entry_positions(cls, value: Any) -> Optional[List[Any]]:
        if not isinstance(value, list):
            return None
        return [entry if isinstance(entry, Mapping) else None for entry in value]


class StationPayload(_Response):
    """Body of ``/current`` and ``/historic``: one station, many sensor blocks."""

    station_id_uuid: str
    station_id: int
    generated_at: int
    sensors: List[SensorBlock] = Field(default_factory=list)

