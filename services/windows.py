"""Splitting long time ranges into request-sized windows."""

from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import Iterator, Union

from models.records import InvalidRangeError, TimeWindow

DEFAULT_WINDOW_SECONDS = 86_400

# Larger epoch values are taken to be milliseconds (1e11 s is the year 5138).
_MILLISECOND_THRESHOLD = 1e11

TimeLike = Union[int, float, datetime]

__all__ = [
    "DEFAULT_WINDOW_SECONDS",
    "InvalidRangeError",
    "TimeWindows",
    "iter_windows",
    "to_seconds",
    "validate_range",
]


def to_seconds(value: TimeLike) -> int:
    """Convert a datetime, epoch seconds or epoch milliseconds to whole seconds."""
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return math.floor(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise TypeError(f"expected a datetime or epoch number, got {type(value).__name__}")
    if value > _MILLISECOND_THRESHOLD:
        return math.floor(value / 1000)
    return math.floor(value)


def validate_range(start: TimeLike, end: TimeLike) -> tuple[int, int]:
    start_ts = to_seconds(start)
    end_ts = to_seconds(end)
    if end_ts <= start_ts:
        raise InvalidRangeError(f"end ({end_ts}) must be greater than start ({start_ts})")
    return start_ts, end_ts


class TimeWindows:
    """Contiguous windows covering ``[start, end)``, each at most ``window_seconds`` wide.

    Iterating twice yields the same windows; nothing is computed until iterated.
    """

    def __init__(
        self,
        start: TimeLike,
        end: TimeLike,
        window_seconds: int = DEFAULT_WINDOW_SECONDS,
    ) -> None:
        if int(window_seconds) <= 0:
            raise ValueError("window_seconds must be a positive number of whole seconds")
        self.start, self.end = validate_range(start, end)
        self.window_seconds = int(window_seconds)

    def __iter__(self) -> Iterator[TimeWindow]:
        cursor = self.start
        while cursor < self.end:
            upper = min(cursor + self.window_seconds, self.end)
            yield TimeWindow(cursor, upper)
            cursor = upper

    def __len__(self) -> int:
        return -(-(self.end - self.start) // self.window_seconds)

    def __repr__(self) -> str:
        return (
            f"TimeWindows(start={self.start}, end={self.end}, "
            f"window_seconds={self.window_seconds})"
        )


def iter_windows(
    start: TimeLike,
    end: TimeLike,
    window_seconds: int = DEFAULT_WINDOW_SECONDS,
) -> Iterator[TimeWindow]:
    return iter(TimeWindows(start, end, window_seconds))
