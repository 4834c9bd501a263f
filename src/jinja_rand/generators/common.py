"""Argument parsing and optional-range sampling shared by every template function."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass
import random
from typing import Any, Optional, TypeVar

from pydantic import BaseModel, ConfigDict, ValidationError

from jinja_rand.errors import ArgumentParseError, InvalidRangeError

T = TypeVar("T")
ArgsT = TypeVar("ArgsT", bound="FunctionArgs")

RandomSource = random.Random


class FunctionArgs(BaseModel):
    """Typed view of the keyword arguments a template passes to a function.

    Unknown keys are ignored so templates stay forward compatible.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")


def parse_args(model: type[ArgsT], args: Mapping[str, Any] | None, function: str) -> ArgsT:
    """Validate a loosely-typed argument map into ``model`` once, at the boundary."""
    try:
        return model.model_validate(dict(args or {}))
    except ValidationError as exc:
        first = exc.errors()[0]
        parameter = ".".join(str(part) for part in first.get("loc", ())) or "arguments"
        raise ArgumentParseError(function, parameter, first.get("msg", str(exc))) from exc


def resolve_rng(rng: Optional[RandomSource]) -> RandomSource:
    return rng if rng is not None else random  # type: ignore[return-value]


def gen_value_in_range(
    lower: Optional[T],
    upper: Optional[T],
    default_lower: T,
    default_upper: T,
    *,
    sample_range: Callable[[T, T], T],
    sample_full: Callable[[], T],
) -> T:
    """Sample one value from a closed interval built out of optional bounds.

    A missing side of a partial bound pair is filled in from the defaults. When
    both sides are missing the defaults are not consulted at all: ``sample_full``
    draws from the type's natural generator instead. For integers that is the
    whole type domain; for floats it is ``[0.0, 1.0)``.
    """
    if lower is None and upper is None:
        return sample_full()

    start = default_lower if lower is None else lower
    end = default_upper if upper is None else upper
    if start > end:  # type: ignore[operator]
        raise InvalidRangeError(f"Range start {start!r} is greater than range end {end!r}.")
    return sample_range(start, end)


@dataclass(frozen=True)
class IntDomain:
    """A fixed-width two's complement (or unsigned) integer type."""

    bits: int
    signed: bool

    @property
    def minimum(self) -> int:
        return -(1 << (self.bits - 1)) if self.signed else 0

    @property
    def maximum(self) -> int:
        return (1 << (self.bits - 1)) - 1 if self.signed else (1 << self.bits) - 1

    def sample_full(self, rng: RandomSource) -> int:
        value = rng.getrandbits(self.bits)
        if self.signed and value > self.maximum:
            value -= 1 << self.bits
        return value

    def sample(self, rng: RandomSource, lower: Optional[int], upper: Optional[int]) -> int:
        return gen_value_in_range(
            lower,
            upper,
            self.minimum,
            self.maximum,
            sample_range=rng.randint,
            sample_full=lambda: self.sample_full(rng),
        )


UINT32 = IntDomain(bits=32, signed=False)
UINT64 = IntDomain(bits=64, signed=False)
INT32 = IntDomain(bits=32, signed=True)
INT64 = IntDomain(bits=64, signed=True)
UINT128 = IntDomain(bits=128, signed=False)
