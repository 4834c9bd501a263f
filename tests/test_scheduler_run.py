"""Batch pacing and record/time limit behavior of the execution scheduler."""

from __future__ import annotations

from datetime import timedelta

import pytest

from jinja_rand.errors import InvalidBatchArgumentsError, RenderError, SchedulerError
from jinja_rand.models import BatchOutcome, ScheduleLimits, StopReason
from jinja_rand.scheduler.run import ExecutionScheduler, run_schedule, validate_limits
from jinja_rand.testing.time_control import ManualClock, SleepRecorder, TickingRenderer


class _FailingRenderer:
    def __init__(self, fail_on: int) -> None:
        self.fail_on = fail_on
        self.calls = 0

    def render(self) -> bytes:
        self.calls += 1
        if self.calls == self.fail_on:
            raise RenderError("boom")
        return b"ok\n"


def _run(limits: ScheduleLimits, *, seconds_per_render: float = 0.0):
    clock = ManualClock()
    renderer = TickingRenderer(clock, seconds_per_render=seconds_per_render)
    sleeper = SleepRecorder(clock)
    emitted: list[bytes] = []
    batches: list[BatchOutcome] = []
    result = run_schedule(
        renderer,
        limits,
        emit=emitted.append,
        monotonic_fn=clock,
        sleep_fn=sleeper,
        on_batch=batches.append,
    )
    return result, renderer, sleeper, emitted, batches


def test_record_limit_renders_exactly_that_many() -> None:
    result, renderer, sleeper, emitted, batches = _run(ScheduleLimits(record_limit=5))

    assert renderer.calls == 5
    assert emitted == [b"x\n"] * 5
    assert result.records_emitted == 5
    assert result.batches_completed == 5
    assert result.stop_reason is StopReason.RECORD_LIMIT
    assert sleeper.calls == []
    assert [batch.size for batch in batches] == [1, 1, 1, 1, 1]


def test_zero_record_limit_renders_nothing() -> None:
    result, renderer, _sleeper, _emitted, _batches = _run(ScheduleLimits(record_limit=0))
    assert renderer.calls == 0
    assert result.stop_reason is StopReason.RECORD_LIMIT


def test_batches_are_truncated_to_remaining_records() -> None:
    limits = ScheduleLimits(batch_size=3, batch_interval=timedelta(seconds=1), record_limit=7)
    result, renderer, sleeper, _emitted, batches = _run(limits)

    assert [batch.size for batch in batches] == [3, 3, 1]
    assert renderer.calls == 7
    assert sleeper.calls == [1.0, 1.0]
    assert result.total_sleep_seconds == 2.0


def test_sleep_accounts_for_batch_elapsed_time() -> None:
    limits = ScheduleLimits(batch_size=2, batch_interval=timedelta(seconds=1), record_limit=6)
    _result, _renderer, sleeper, _emitted, batches = _run(limits, seconds_per_render=0.25)

    assert sleeper.calls == [0.5, 0.5]
    assert [batch.started_at for batch in batches] == [0.0, 1.0, 2.0]


def test_overrunning_batch_is_not_made_up_later() -> None:
    limits = ScheduleLimits(batch_size=2, batch_interval=timedelta(seconds=1), record_limit=6)
    _result, _renderer, sleeper, _emitted, batches = _run(limits, seconds_per_render=0.75)

    assert sleeper.calls == []
    assert [batch.sleep_seconds for batch in batches] == [0.0, 0.0, 0.0]
    assert [batch.started_at for batch in batches] == [0.0, 1.5, 3.0]


def test_time_limit_overshoots_by_at_most_one_batch() -> None:
    limits = ScheduleLimits(batch_size=4, batch_interval=timedelta(0), time_limit=timedelta(seconds=1))
    result, renderer, _sleeper, _emitted, batches = _run(limits, seconds_per_render=0.3)

    # the deadline passes mid-batch; the batch still completes
    assert len(batches) == 1
    assert renderer.calls == 4
    assert result.stop_reason is StopReason.TIME_LIMIT


def test_time_limit_without_batching_stops_between_records() -> None:
    limits = ScheduleLimits(time_limit=timedelta(seconds=1))
    result, renderer, _sleeper, _emitted, _batches = _run(limits, seconds_per_render=0.3)

    assert renderer.calls == 4
    assert result.stop_reason is StopReason.TIME_LIMIT


def test_both_limits_reached_together() -> None:
    limits = ScheduleLimits(record_limit=2, time_limit=timedelta(seconds=1))
    result, _renderer, _sleeper, _emitted, _batches = _run(limits, seconds_per_render=0.5)
    assert result.stop_reason is StopReason.BOTH


def test_no_sleep_after_final_batch() -> None:
    limits = ScheduleLimits(batch_size=2, batch_interval=timedelta(seconds=5), record_limit=2)
    result, _renderer, sleeper, _emitted, _batches = _run(limits)

    assert sleeper.calls == []
    assert result.batches_completed == 1


def test_paced_run_sleeps_until_time_limit() -> None:
    limits = ScheduleLimits(
        batch_size=1,
        batch_interval=timedelta(seconds=2),
        time_limit=timedelta(seconds=5),
    )
    result, renderer, sleeper, _emitted, _batches = _run(limits)

    assert renderer.calls == 3
    assert sleeper.calls == [2.0, 2.0, 2.0]
    assert result.stop_reason is StopReason.TIME_LIMIT


@pytest.mark.parametrize(
    "limits",
    [
        ScheduleLimits(batch_size=3, record_limit=5),
        ScheduleLimits(batch_interval=timedelta(seconds=1), record_limit=5),
    ],
)
def test_unpaired_batch_arguments_render_nothing(limits: ScheduleLimits) -> None:
    clock = ManualClock()
    renderer = TickingRenderer(clock)
    with pytest.raises(InvalidBatchArgumentsError, match="both or neither"):
        run_schedule(renderer, limits, emit=lambda _record: None, monotonic_fn=clock)
    assert renderer.calls == 0


@pytest.mark.parametrize(
    ("limits", "message"),
    [
        (ScheduleLimits(batch_size=0, batch_interval=timedelta(seconds=1)), "batch_size"),
        (ScheduleLimits(record_limit=-1), "record_limit"),
        (ScheduleLimits(time_limit=timedelta(seconds=-1)), "time_limit"),
        (ScheduleLimits(batch_size=1, batch_interval=timedelta(seconds=-1)), "batch_interval"),
    ],
)
def test_validate_limits_rejects_bad_values(limits: ScheduleLimits, message: str) -> None:
    with pytest.raises(SchedulerError, match=message):
        validate_limits(limits)


def test_render_failure_stops_the_run() -> None:
    renderer = _FailingRenderer(fail_on=3)
    emitted: list[bytes] = []
    with pytest.raises(RenderError, match="boom"):
        run_schedule(renderer, ScheduleLimits(record_limit=10), emit=emitted.append)
    assert emitted == [b"ok\n", b"ok\n"]


def test_scheduler_exposes_limits() -> None:
    limits = ScheduleLimits(record_limit=1)
    scheduler = ExecutionScheduler(TickingRenderer(ManualClock()), limits, emit=lambda _record: None)
    assert scheduler.limits is limits
    assert limits.bounded
    assert not limits.paced
