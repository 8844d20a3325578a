"""Sequential, window-by-window iteration over the ``/historic`` endpoint."""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Optional, Union

from models.records import UNAVAILABLE, NumericStationId, StationUuid, TimeWindow, station_ref
from models.schemas import StationPayload
from services.windows import DEFAULT_WINDOW_SECONDS, TimeLike, TimeWindows

if TYPE_CHECKING:
    from services.weatherlink import WeatherLinkClient

logger = logging.getLogger(__name__)


class IteratorState(str, Enum):
    advancing = "advancing"
    done = "done"


class HistoricIterator:
    """Async iterator yielding one payload per window the account may read.

    Windows are fetched strictly in order and only when the consumer asks for
    the next item. Plan-gated windows are skipped and counted in
    ``windows_unavailable``; the iterator still runs to ``done``. A failed
    request propagates and also leaves the iterator ``done``. To start over,
    build a new iterator from the same arguments.
    """

    def __init__(
        self,
        client: "WeatherLinkClient",
        station: Union[int, str, NumericStationId, StationUuid],
        start: TimeLike,
        end: TimeLike,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> None:
        self._client = client
        self._station = station_ref(station)
        self.windows = TimeWindows(start, end, window_seconds)
        self.cursor = self.windows.start
        self.state = IteratorState.advancing
        self.station_uuid: Optional[str] = None
        self.windows_fetched = 0
        self.windows_unavailable = 0
        self.payloads_yielded = 0

    @property
    def done(self) -> bool:
        return self.state is IteratorState.done

    @property
    def window_count(self) -> int:
        return len(self.windows)

    def __aiter__(self) -> "HistoricIterator":
        return self

    async def __anext__(self) -> StationPayload:
        if self.done:
            raise StopAsyncIteration
        try:
            payload = await self._advance()
        except Exception:
            self.state = IteratorState.done
            raise
        if payload is None:
            self.state = IteratorState.done
            logger.debug(
                "Historic range exhausted after %d windows (%d unavailable)",
                self.windows_fetched,
                self.windows_unavailable,
                extra={"station_uuid": self.station_uuid},
            )
            raise StopAsyncIteration
        self.payloads_yielded += 1
        return payload

    async def _advance(self) -> Optional[StationPayload]:
        if self.station_uuid is None:
            self.station_uuid = await self._client.resolve_station(self._station)
            if self.station_uuid is None:
                return None

        end = self.windows.end
        while self.cursor < end:
            window = TimeWindow(self.cursor, min(self.cursor + self.windows.window_seconds, end))
            result = await self._client.fetch(self.station_uuid, window)
            self.windows_fetched += 1
            self.cursor = window.end
            if self.cursor >= end:
                self.state = IteratorState.done
            if result is UNAVAILABLE:
                self.windows_unavailable += 1
                continue
            return result
        return None
