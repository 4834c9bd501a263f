"""Scheduler contracts and helpers."""

from .run import ExecutionScheduler, run_schedule, validate_limits
from .timing import deadline_from, format_duration, pacing_sleep_seconds, parse_iso8601_duration

__all__ = [
    "ExecutionScheduler",
    "deadline_from",
    "format_duration",
    "pacing_sleep_seconds",
    "parse_iso8601_duration",
    "run_schedule",
    "validate_limits",
]
