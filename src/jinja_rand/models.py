"""Data model contracts for cross-module use."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import timedelta
from enum import Enum
import ipaddress

IPV4_BITS = 32
IPV6_BITS = 128


@dataclass(frozen=True)
class CidrBlock:
    """A network prefix whose host bits are all zero."""

    address: int
    prefix_length: int
    bit_width: int

    def __str__(self) -> str:
        if self.bit_width == IPV4_BITS:
            text = str(ipaddress.IPv4Address(self.address))
        else:
            text = str(ipaddress.IPv6Address(self.address))
        return f"{text}/{self.prefix_length}"


@dataclass(frozen=True)
class ScheduleLimits:
    batch_size: int | None = None
    batch_interval: timedelta | None = None
    record_limit: int | None = None
    time_limit: timedelta | None = None

    @property
    def paced(self) -> bool:
        return self.batch_size is not None and self.batch_interval is not None

    @property
    def bounded(self) -> bool:
        return self.record_limit is not None or self.time_limit is not None


class StopReason(str, Enum):
    RECORD_LIMIT = "record_limit"
    TIME_LIMIT = "time_limit"
    BOTH = "both"


@dataclass(frozen=True)
class BatchOutcome:
    index: int
    size: int
    started_at: float
    elapsed_seconds: float
    sleep_seconds: float


@dataclass(frozen=True)
class ScheduleRunResult:
    records_emitted: int
    batches_completed: int
    total_sleep_seconds: float
    stop_reason: StopReason
