"""Batch, time and record limited execution of a renderer."""

from __future__ import annotations

from collections.abc import Callable
from datetime import timedelta
import time as time_module

from jinja_rand.errors import InvalidBatchArgumentsError, SchedulerError
from jinja_rand.logging import get_logger
from jinja_rand.models import BatchOutcome, ScheduleLimits, ScheduleRunResult, StopReason
from jinja_rand.render.base import Renderer
from jinja_rand.scheduler.timing import deadline_from, format_duration, pacing_sleep_seconds

EmitFn = Callable[[bytes], None]
MonotonicFn = Callable[[], float]
SleepFn = Callable[[float], None]
BatchObserver = Callable[[BatchOutcome], None]

logger = get_logger(__name__)


def validate_limits(limits: ScheduleLimits) -> None:
    """Reject limit combinations the scheduler cannot run."""
    if (limits.batch_size is None) != (limits.batch_interval is None):
        raise InvalidBatchArgumentsError()
    if limits.batch_size is not None and limits.batch_size <= 0:
        raise SchedulerError("batch_size must be > 0.")
    if limits.record_limit is not None and limits.record_limit < 0:
        raise SchedulerError("record_limit must be >= 0.")
    _require_non_negative(limits.batch_interval, name="batch_interval")
    _require_non_negative(limits.time_limit, name="time_limit")


class ExecutionScheduler:
    """Calls ``renderer.render()`` repeatedly until a record or time limit is hit.

    Each iteration produces one batch: a single record when unpaced, or up to
    ``batch_size`` records when paced, never more than the records remaining.
    Limits are checked only between batches, so a run may pass its time limit
    by up to one batch but never passes its record limit. With no limits at all
    the run is unbounded and ``run`` only returns by raising.
    """

    def __init__(
        self,
        renderer: Renderer,
        limits: ScheduleLimits,
        *,
        emit: EmitFn,
        monotonic_fn: MonotonicFn | None = None,
        sleep_fn: SleepFn | None = None,
        on_batch: BatchObserver | None = None,
    ) -> None:
        validate_limits(limits)
        self._renderer = renderer
        self._limits = limits
        self._emit = emit
        self._monotonic = monotonic_fn or time_module.monotonic
        self._sleep = sleep_fn or time_module.sleep
        self._on_batch = on_batch

    @property
    def limits(self) -> ScheduleLimits:
        return self._limits

    def run(self) -> ScheduleRunResult:
        limits = self._limits
        started_at = self._monotonic()
        deadline = deadline_from(started_at, limits.time_limit)
        records_remaining = limits.record_limit
        records_emitted = 0
        batches_completed = 0
        total_sleep = 0.0

        logger.info(
            "Run started: batch_size=%s batch_interval=%s record_limit=%s time_limit=%s",
            limits.batch_size,
            _describe(limits.batch_interval),
            limits.record_limit,
            _describe(limits.time_limit),
        )
        if not limits.bounded:
            logger.info("No record or time limit set; rendering until interrupted")

        while True:
            stop_reason = self._stop_reason(records_remaining, deadline)
            if stop_reason is not None:
                logger.info(
                    "Run stopped (%s) after %d record(s) in %d batch(es)",
                    stop_reason.value,
                    records_emitted,
                    batches_completed,
                )
                return ScheduleRunResult(
                    records_emitted=records_emitted,
                    batches_completed=batches_completed,
                    total_sleep_seconds=total_sleep,
                    stop_reason=stop_reason,
                )

            batch_started = self._monotonic()
            size = self._next_batch_size(records_remaining)
            for _ in range(size):
                self._emit(self._renderer.render())
            records_emitted += size
            if records_remaining is not None:
                records_remaining -= size

            elapsed = self._monotonic() - batch_started
            sleep_seconds = 0.0
            if limits.paced and not _exhausted(records_remaining):
                sleep_seconds = pacing_sleep_seconds(limits.batch_interval, elapsed)

            batches_completed += 1
            outcome = BatchOutcome(
                index=batches_completed,
                size=size,
                started_at=batch_started,
                elapsed_seconds=elapsed,
                sleep_seconds=sleep_seconds,
            )
            logger.debug(
                "Batch %d: %d record(s) in %.3fs, sleeping %.3fs",
                outcome.index,
                outcome.size,
                outcome.elapsed_seconds,
                outcome.sleep_seconds,
            )
            if self._on_batch is not None:
                self._on_batch(outcome)
            if sleep_seconds > 0:
                self._sleep(sleep_seconds)
                total_sleep += sleep_seconds

    def _next_batch_size(self, records_remaining: int | None) -> int:
        # batch_size is only ever set together with batch_interval
        size = self._limits.batch_size if self._limits.batch_size is not None else 1
        if records_remaining is not None:
            size = min(size, records_remaining)
        return size

    def _stop_reason(self, records_remaining: int | None, deadline: float | None) -> StopReason | None:
        record_limit_reached = _exhausted(records_remaining)
        time_limit_reached = deadline is not None and self._monotonic() >= deadline
        if record_limit_reached and time_limit_reached:
            return StopReason.BOTH
        if record_limit_reached:
            return StopReason.RECORD_LIMIT
        if time_limit_reached:
            return StopReason.TIME_LIMIT
        return None


def run_schedule(
    renderer: Renderer,
    limits: ScheduleLimits,
    *,
    emit: EmitFn,
    monotonic_fn: MonotonicFn | None = None,
    sleep_fn: SleepFn | None = None,
    on_batch: BatchObserver | None = None,
) -> ScheduleRunResult:
    """Validate ``limits`` and run the scheduler to completion."""
    scheduler = ExecutionScheduler(
        renderer,
        limits,
        emit=emit,
        monotonic_fn=monotonic_fn,
        sleep_fn=sleep_fn,
        on_batch=on_batch,
    )
    return scheduler.run()


def _exhausted(records_remaining: int | None) -> bool:
    return records_remaining is not None and records_remaining <= 0


def _require_non_negative(value: timedelta | None, *, name: str) -> None:
    if value is not None and value < timedelta(0):
        raise SchedulerError(f"{name} must not be negative.")


def _describe(value: timedelta | None) -> str:
    return format_duration(value) if value is not None else "none"
