"""Template functions for booleans, characters, integers and floats.

Every bounded function accepts optional ``start`` and ``end`` arguments that
form a closed interval, so ``random_uint32(start=0, end=255)`` can yield 255.
Pass one of them to fill the other side from the type's domain, or neither to
sample the full domain.
"""

from __future__ import annotations

from collections.abc import Mapping
import math
import struct
from typing import Annotated, Any, Optional

from pydantic import Field

from jinja_rand.generators.common import (
    INT32,
    INT64,
    UINT32,
    UINT64,
    FunctionArgs,
    IntDomain,
    RandomSource,
    gen_value_in_range,
    parse_args,
    resolve_rng,
)

UNICODE_MAX = 0x10FFFF
SURROGATE_START = 0xD800
SURROGATE_COUNT = 0x800

FLOAT_DEFAULT_START = 0.0
FLOAT_DEFAULT_END = 1.0
FLOAT32_MAX = 3.4028234663852886e38
# weights k / 2**53 for k in [0, 2**53] include both interval ends
WEIGHT_STEPS = 1 << 53

UInt32Bound = Optional[Annotated[int, Field(strict=True, ge=UINT32.minimum, le=UINT32.maximum)]]
UInt64Bound = Optional[Annotated[int, Field(strict=True, ge=UINT64.minimum, le=UINT64.maximum)]]
Int32Bound = Optional[Annotated[int, Field(strict=True, ge=INT32.minimum, le=INT32.maximum)]]
Int64Bound = Optional[Annotated[int, Field(strict=True, ge=INT64.minimum, le=INT64.maximum)]]
FloatBound = Optional[Annotated[float, Field(strict=True, allow_inf_nan=False)]]
Float32Bound = Optional[
    Annotated[float, Field(strict=True, allow_inf_nan=False, ge=-FLOAT32_MAX, le=FLOAT32_MAX)]
]


class UInt32Args(FunctionArgs):
    start: UInt32Bound = None
    end: UInt32Bound = None


class UInt64Args(FunctionArgs):
    start: UInt64Bound = None
    end: UInt64Bound = None


class Int32Args(FunctionArgs):
    start: Int32Bound = None
    end: Int32Bound = None


class Int64Args(FunctionArgs):
    start: Int64Bound = None
    end: Int64Bound = None


class Float32Args(FunctionArgs):
    start: Float32Bound = None
    end: Float32Bound = None


class Float64Args(FunctionArgs):
    start: FloatBound = None
    end: FloatBound = None


def random_bool(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> bool:
    return resolve_rng(rng).getrandbits(1) == 1


def random_char(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> str:
    """Return one Unicode scalar value, uniformly over the whole code space."""
    return sample_char(resolve_rng(rng))


def sample_char(rng: RandomSource) -> str:
    # surrogates are not scalar values; skip over their block
    code_point = rng.randint(0, UNICODE_MAX - SURROGATE_COUNT)
    if code_point >= SURROGATE_START:
        code_point += SURROGATE_COUNT
    return chr(code_point)


def random_uint32(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> int:
    parsed = parse_args(UInt32Args, args, "random_uint32")
    return _sample_int(UINT32, parsed.start, parsed.end, rng)


def random_uint64(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> int:
    parsed = parse_args(UInt64Args, args, "random_uint64")
    return _sample_int(UINT64, parsed.start, parsed.end, rng)


def random_int32(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> int:
    parsed = parse_args(Int32Args, args, "random_int32")
    return _sample_int(INT32, parsed.start, parsed.end, rng)


def random_int64(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> int:
    parsed = parse_args(Int64Args, args, "random_int64")
    return _sample_int(INT64, parsed.start, parsed.end, rng)


def random_float32(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> float:
    """Return a single-precision float, by default in ``[0.0, 1.0]``.

    Bounds are narrowed to single precision before sampling, and the result is
    returned as the shortest decimal that narrows back to the same value.
    """
    parsed = parse_args(Float32Args, args, "random_float32")
    chooser = resolve_rng(rng)
    start = to_float32(parsed.start) if parsed.start is not None else None
    end = to_float32(parsed.end) if parsed.end is not None else None
    value = gen_value_in_range(
        start,
        end,
        FLOAT_DEFAULT_START,
        FLOAT_DEFAULT_END,
        sample_range=lambda low, high: _clamp(to_float32(_uniform(chooser, low, high)), low, high),
        sample_full=lambda: to_float32(chooser.random()),
    )
    return shortest_float32(value)


def random_float64(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> float:
    parsed = parse_args(Float64Args, args, "random_float64")
    chooser = resolve_rng(rng)
    return gen_value_in_range(
        parsed.start,
        parsed.end,
        FLOAT_DEFAULT_START,
        FLOAT_DEFAULT_END,
        sample_range=lambda low, high: _clamp(_uniform(chooser, low, high), low, high),
        sample_full=chooser.random,
    )


def to_float32(value: float) -> float:
    """Round a double to the nearest single-precision value."""
    return struct.unpack("<f", struct.pack("<f", value))[0]


def shortest_float32(value: float) -> float:
    """Return the shortest decimal whose single-precision rounding equals ``value``."""
    if not math.isfinite(value):
        return value
    for digits in range(1, 10):
        candidate = float(f"{value:.{digits}g}")
        if to_float32(candidate) == value:
            return candidate
    return value


def _sample_int(domain: IntDomain, start: int | None, end: int | None, rng: RandomSource | None) -> int:
    return domain.sample(resolve_rng(rng), start, end)


def _clamp(value: float, low: float, high: float) -> float:
    return min(max(value, low), high)


def _uniform(rng: RandomSource, low: float, high: float) -> float:
    # interpolating avoids overflow when high - low exceeds the float range
    weight = rng.randint(0, WEIGHT_STEPS) / WEIGHT_STEPS
    return low * (1.0 - weight) + high * weight
