"""Test-only utilities for deterministic scheduler assertions."""

from .time_control import ManualClock, SleepRecorder, TickingRenderer

__all__ = [
    "ManualClock",
    "SleepRecorder",
    "TickingRenderer",
]
