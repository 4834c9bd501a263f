"""Duration parsing and pacing calculations."""

from __future__ import annotations

from datetime import timedelta

import pytest

from jinja_rand.errors import SchedulerError
from jinja_rand.scheduler.timing import (
    deadline_from,
    format_duration,
    pacing_sleep_seconds,
    parse_iso8601_duration,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("PT1S", timedelta(seconds=1)),
        ("PT0.5S", timedelta(milliseconds=500)),
        ("PT1M30S", timedelta(seconds=90)),
        ("P1DT12H", timedelta(days=1, hours=12)),
        ("P2W", timedelta(days=14)),
        ("P1M", timedelta(days=30)),
        ("P1Y", timedelta(days=365)),
        ("pt2s", timedelta(seconds=2)),
        ("PT0,25S", timedelta(milliseconds=250)),
    ],
)
def test_parse_iso8601_duration(raw: str, expected: timedelta) -> None:
    assert parse_iso8601_duration(raw) == expected


@pytest.mark.parametrize("raw", ["", "P", "PT", "P1DT", "1S", "PT-1S", "soon", "10", "00:00:10"])
def test_parse_iso8601_duration_rejects_invalid(raw: str) -> None:
    with pytest.raises(SchedulerError, match="Invalid duration"):
        parse_iso8601_duration(raw)


def test_format_duration_round_trips_seconds() -> None:
    assert format_duration(timedelta(seconds=1)) == "PT1S"
    assert format_duration(timedelta(seconds=1.5)) == "PT1.5S"
    assert parse_iso8601_duration(format_duration(timedelta(minutes=2))) == timedelta(minutes=2)


def test_pacing_sleep_is_remaining_interval() -> None:
    assert pacing_sleep_seconds(timedelta(seconds=1), 0.25) == 0.75


def test_pacing_sleep_never_negative() -> None:
    assert pacing_sleep_seconds(timedelta(seconds=1), 3.0) == 0.0


def test_deadline_from() -> None:
    assert deadline_from(10.0, timedelta(seconds=5)) == 15.0
    assert deadline_from(10.0, None) is None


def test_parse_iso8601_duration_error_names_the_input() -> None:
    with pytest.raises(SchedulerError, match="'10'"):
        parse_iso8601_duration("10")
