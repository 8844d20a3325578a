"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

SensorValue = Union[bool, int, float, str, None]
SensorEntry = Dict[str, SensorValue]
FlatRow = Dict[str, SensorValue]


class InvalidRangeError(ValueError):
    """Raised when a time range does not satisfy ``end > start``."""


@dataclass(frozen=True, slots=True)
class TimeWindow:
    """Half-open interval ``[start, end)`` in whole epoch seconds."""

    start: int
    end: int

    def __post_init__(self) -> None:
        if self.end <= self.start:
            raise InvalidRangeError(
                f"window end ({self.end}) must be greater than start ({self.start})"
            )

    @property
    def seconds(self) -> int:
        return self.end - self.start


@dataclass(frozen=True, slots=True)
class NumericStationId:
    """A station id as shown in the station listing; needs resolving."""

    value: int

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True, slots=True)
class StationUuid:
    """The canonical station handle accepted by data endpoints."""

    value: str

    def __str__(self) -> str:
        return self.value


StationRef = Union[NumericStationId, StationUuid]


def station_ref(handle: Union[int, str, NumericStationId, StationUuid]) -> StationRef:
    if isinstance(handle, (NumericStationId, StationUuid)):
        return handle
    if isinstance(handle, bool):
        raise TypeError("station handle must be an int or a str, not bool")
    if isinstance(handle, int):
        return NumericStationId(handle)
    if isinstance(handle, str):
        candidate = handle.strip()
        if not candidate:
            raise ValueError("station handle must not be empty")
        return StationUuid(candidate)
    raise TypeError(f"unsupported station handle type: {type(handle).__name__}")


class Unavailable(Enum):
    token = "unavailable"

    def __repr__(self) -> str:
        return "UNAVAILABLE"

    def __bool__(self) -> bool:
        return False


# Returned in place of a payload when the account's plan does not cover a call.
UNAVAILABLE = Unavailable.token
