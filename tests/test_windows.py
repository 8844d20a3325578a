"""Unit tests for splitting time ranges into request windows."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from models.records import TimeWindow
from services.windows import InvalidRangeError, TimeWindows, iter_windows, to_seconds


def test_windows_for_five_minutes_in_two_minute_steps() -> None:
    windows = list(iter_windows(1700000000, 1700000300, 120))

    assert windows == [
        TimeWindow(1700000000, 1700000120),
        TimeWindow(1700000120, 1700000240),
        TimeWindow(1700000240, 1700000300),
    ]


@pytest.mark.parametrize(
    ("start", "end", "window_seconds"),
    [
        (0, 1, 1),
        (0, 86_400, 86_400),
        (10, 86_411, 86_400),
        (1700000000, 1700604800, 86_400),
        (5, 1_000, 7),
        (100, 101, 3_600),
    ],
)
def test_windows_are_contiguous_and_bounded(start: int, end: int, window_seconds: int) -> None:
    plan = TimeWindows(start, end, window_seconds)
    windows = list(plan)

    assert windows[0].start == start
    assert windows[-1].end == end
    for previous, current in zip(windows, windows[1:]):
        assert previous.end == current.start
    assert all(0 < window.seconds <= window_seconds for window in windows)
    assert len(plan) == len(windows)


def test_default_window_is_one_day() -> None:
    windows = list(iter_windows(0, 3 * 86_400 + 1))

    assert len(windows) == 4
    assert windows[-1] == TimeWindow(3 * 86_400, 3 * 86_400 + 1)


def test_windows_can_be_iterated_again() -> None:
    plan = TimeWindows(0, 500, 200)

    assert list(plan) == list(plan)


@pytest.mark.parametrize(("start", "end"), [(100, 100), (200, 100)])
def test_end_must_follow_start(start: int, end: int) -> None:
    with pytest.raises(InvalidRangeError):
        TimeWindows(start, end, 60)


def test_invalid_range_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        list(iter_windows(10, 5))


@pytest.mark.parametrize("window_seconds", [0, -60, 0.5])
def test_window_size_must_be_positive(window_seconds) -> None:
    with pytest.raises(ValueError):
        TimeWindows(0, 100, window_seconds)


def test_time_window_rejects_empty_interval() -> None:
    with pytest.raises(InvalidRangeError):
        TimeWindow(5, 5)


def test_to_seconds_accepts_datetimes_and_milliseconds() -> None:
    moment = datetime(2023, 11, 14, 22, 13, 20, tzinfo=timezone.utc)

    assert to_seconds(moment) == 1700000000
    assert to_seconds(moment.replace(tzinfo=None)) == 1700000000
    assert to_seconds(1700000000000) == 1700000000
    assert to_seconds(1700000000.9) == 1700000000


def test_millisecond_range_produces_second_windows() -> None:
    windows = list(iter_windows(1700000000000, 1700000060000, 30))

    assert windows == [
        TimeWindow(1700000000, 1700000030),
        TimeWindow(1700000030, 1700000060),
    ]


def test_to_seconds_rejects_bool() -> None:
    with pytest.raises(TypeError):
        to_seconds(True)
