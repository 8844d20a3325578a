"""Async client for the WeatherLink v2 REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Union

import httpx

from models.records import (
    UNAVAILABLE,
    NumericStationId,
    StationUuid,
    TimeWindow,
    Unavailable,
    station_ref,
)
from models.schemas import (
    NodeInfo,
    NodeResponse,
    SensorActivity,
    SensorActivityResponse,
    SensorInfo,
    SensorResponse,
    StationInfo,
    StationPayload,
    StationResponse,
)
from services.historic import HistoricIterator
from services.windows import DEFAULT_WINDOW_SECONDS, TimeLike, validate_range
from settings import DEFAULT_BASE_URL, Settings

logger = logging.getLogger(__name__)

StationHandle = Union[int, str, NumericStationId, StationUuid]


def _join_ids(ids: tuple[int, ...]) -> str:
    if not ids:
        raise ValueError("at least one id is required")
    return ",".join(str(int(value)) for value in ids)


class WeatherLinkClient:
    """Thin async wrapper over ``httpx.AsyncClient`` that attaches API credentials.

    Plan-gated calls (HTTP 403) come back as ``UNAVAILABLE`` or ``None``;
    every other failure is raised to the caller untouched.
    """

    def __init__(
        self,
        api_key: str,
        api_secret: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        http_client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        if not api_key or not api_secret:
            raise ValueError("Both an API key and an API secret are required.")
        self._params = {"api-key": api_key}
        self._headers = {"X-Api-Secret": api_secret}
        self._owns_client = http_client is None
        self._client = http_client or httpx.AsyncClient(
            base_url=base_url.rstrip("/"), timeout=timeout
        )

    @classmethod
    def from_settings(cls, settings: Settings) -> "WeatherLinkClient":
        return cls(
            api_key=settings.api_key or "",
            api_secret=settings.api_secret or "",
            base_url=settings.base_url,
            timeout=settings.request_timeout,
        )

    async def aclose(self) -> None:
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> "WeatherLinkClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def _get(self, path: str, params: Optional[Dict[str, Any]] = None) -> httpx.Response:
        query: Dict[str, Any] = dict(self._params)
        if params:
            query.update(params)
        return await self._client.get(path, params=query, headers=self._headers)

    async def _get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._get(path, params)
        response.raise_for_status()
        return response.json()

    async def _get_gated(
        self, path: str, params: Optional[Dict[str, Any]] = None, **context: Any
    ) -> Any:
        response = await self._get(path, params)
        if response.status_code == httpx.codes.FORBIDDEN:
            logger.warning(
                "Subscription plan does not permit this request",
                extra={"path": path, "status_code": response.status_code, **context},
            )
            return UNAVAILABLE
        response.raise_for_status()
        return response.json()

    async def get_stations(self) -> List[StationInfo]:
        body = await self._get_json("/stations")
        return StationResponse.model_validate(body).stations

    async def get_stations_by_ids(self, *station_ids: int) -> List[StationInfo]:
        body = await self._get_json(f"/stations/{_join_ids(station_ids)}")
        return StationResponse.model_validate(body).stations

    async def get_nodes(self) -> List[NodeInfo]:
        body = await self._get_json("/nodes")
        return NodeResponse.model_validate(body).nodes

    async def get_nodes_by_ids(self, *node_ids: int) -> List[NodeInfo]:
        body = await self._get_json(f"/nodes/{_join_ids(node_ids)}")
        return NodeResponse.model_validate(body).nodes

    async def get_sensors(self) -> List[SensorInfo]:
        body = await self._get_json("/sensors")
        return SensorResponse.model_validate(body).sensors

    async def get_sensors_by_ids(self, *sensor_ids: int) -> List[SensorInfo]:
        body = await self._get_json(f"/sensors/{_join_ids(sensor_ids)}")
        return SensorResponse.model_validate(body).sensors

    async def get_sensor_activity(self) -> List[SensorActivity]:
        body = await self._get_json("/sensor-activity")
        return SensorActivityResponse.model_validate(body).sensor_activity

    async def get_sensor_activity_by_ids(self, *lsids: int) -> List[SensorActivity]:
        body = await self._get_json(f"/sensor-activity/{_join_ids(lsids)}")
        return SensorActivityResponse.model_validate(body).sensor_activity

    async def get_sensor_catalog(self) -> Union[Dict[str, Any], List[Any]]:
        body = await self._get_json("/sensor-catalog")
        if not isinstance(body, (dict, list)):
            raise ValueError("Unexpected sensor catalog payload.")
        return body

    async def resolve_station(self, station: StationHandle) -> Optional[str]:
        """Return the station UUID, looking numeric ids up in the station listing."""
        ref = station_ref(station)
        if isinstance(ref, StationUuid):
            return ref.value
        for info in await self.get_stations():
            if info.station_id == ref.value:
                return info.station_id_uuid
        logger.warning("No station matches the numeric id", extra={"station": ref.value})
        return None

    async def fetch(
        self, station_uuid: str, window: Optional[TimeWindow] = None
    ) -> Union[StationPayload, Unavailable]:
        """Read ``/current`` (no window) or ``/historic`` for one window."""
        if window is None:
            body = await self._get_gated(
                f"/current/{station_uuid}", station_uuid=station_uuid
            )
        else:
            body = await self._get_gated(
                f"/historic/{station_uuid}",
                {"start-timestamp": window.start, "end-timestamp": window.end},
                station_uuid=station_uuid,
                window_start=window.start,
                window_end=window.end,
            )
        if body is UNAVAILABLE:
            return UNAVAILABLE
        return StationPayload.model_validate(body)

    async def get_current(self, station: StationHandle) -> Optional[StationPayload]:
        station_uuid = await self.resolve_station(station)
        if station_uuid is None:
            return None
        result = await self.fetch(station_uuid)
        return None if result is UNAVAILABLE else result

    async def get_historic(
        self, station: StationHandle, start: TimeLike, end: TimeLike
    ) -> Optional[StationPayload]:
        """Fetch a single historic window; the service caps how wide it may be."""
        window = TimeWindow(*validate_range(start, end))
        station_uuid = await self.resolve_station(station)
        if station_uuid is None:
            return None
        result = await self.fetch(station_uuid, window)
        return None if result is UNAVAILABLE else result

    def iterate_historic(
        self,
        station: StationHandle,
        start: TimeLike,
        end: TimeLike,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> HistoricIterator:
        return HistoricIterator(self, station, start, end, window_seconds)

    async def get_report_et(
        self, station: StationHandle, start: TimeLike, end: TimeLike
    ) -> Optional[Dict[str, Any]]:
        """Evapotranspiration report for a range; ``None`` when the plan excludes it."""
        start_ts, end_ts = validate_range(start, end)
        station_uuid = await self.resolve_station(station)
        if station_uuid is None:
            return None
        body = await self._get_gated(
            f"/report/et/{station_uuid}",
            {"start-timestamp": start_ts, "end-timestamp": end_ts},
            station_uuid=station_uuid,
            window_start=start_ts,
            window_end=end_ts,
        )
        if body is UNAVAILABLE:
            return None
        if not isinstance(body, dict):
            raise ValueError("Unexpected ET report payload.")
        return body
