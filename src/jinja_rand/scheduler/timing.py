"""Scheduler time calculation helpers."""

from __future__ import annotations

from datetime import timedelta

from pydantic import TypeAdapter, ValidationError

from jinja_rand.errors import SchedulerError

# pydantic reads ISO 8601 durations with fixed calendar lengths: Y = 365 days, M = 30 days
_DURATION_ADAPTER = TypeAdapter(timedelta)


def parse_iso8601_duration(raw_duration: str) -> timedelta:
    """Parse an ISO 8601 duration such as ``PT1S``, ``PT0.5S`` or ``P1DT12H``."""
    raw = raw_duration.strip().upper().replace(",", ".")
    # pydantic also accepts bare seconds and HH:MM:SS; only the P form is a duration here
    if not raw.startswith("P") or raw in {"P", "PT"} or raw.endswith("T"):
        raise _invalid_duration(raw_duration)
    try:
        duration = _DURATION_ADAPTER.validate_python(raw)
    except ValidationError as exc:
        raise _invalid_duration(raw_duration) from exc
    if duration < timedelta(0):
        raise _invalid_duration(raw_duration)
    return duration


def _invalid_duration(raw_duration: str) -> SchedulerError:
    return SchedulerError(
        f"Invalid duration '{raw_duration}'. Expected an ISO 8601 duration like PT1S, PT1M30S or P1D."
    )


def format_duration(duration: timedelta) -> str:
    """Render a duration back to ISO 8601 seconds form, e.g. ``PT1.5S``."""
    seconds = duration.total_seconds()
    if seconds == int(seconds):
        return f"PT{int(seconds)}S"
    return f"PT{seconds:g}S"


def pacing_sleep_seconds(batch_interval: timedelta, elapsed_seconds: float) -> float:
    """Return how long to wait so batches start one interval apart.

    The interval is a target cadence: a batch that overran it gets no sleep and
    the overrun is not made up later.
    """
    return max(0.0, batch_interval.total_seconds() - elapsed_seconds)


def deadline_from(started_at: float, time_limit: timedelta | None) -> float | None:
    if time_limit is None:
        return None
    return started_at + time_limit.total_seconds()
