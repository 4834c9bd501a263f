"""Random value template functions and their registry."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from functools import partial
from typing import Any

from jinja_rand.errors import ArgumentParseError
from jinja_rand.generators.common import RandomSource, gen_value_in_range
from jinja_rand.generators.file import LineCache, line_from_file, random_from_file
from jinja_rand.generators.net import (
    generate_cidr,
    mask_address,
    random_ipv4,
    random_ipv4_cidr,
    random_ipv6,
    random_ipv6_cidr,
)
from jinja_rand.generators.primitives import (
    random_bool,
    random_char,
    random_float32,
    random_float64,
    random_int32,
    random_int64,
    random_uint32,
    random_uint64,
)
from jinja_rand.generators.string import random_string
from jinja_rand.generators.uuids import random_uuid

GeneratorFn = Callable[..., Any]
TemplateFn = Callable[..., Any]

GENERATOR_FUNCTIONS: dict[str, GeneratorFn] = {
    "random_bool": random_bool,
    "random_char": random_char,
    "random_float32": random_float32,
    "random_float64": random_float64,
    "random_int32": random_int32,
    "random_int64": random_int64,
    "random_ipv4": random_ipv4,
    "random_ipv4_cidr": random_ipv4_cidr,
    "random_ipv6": random_ipv6,
    "random_ipv6_cidr": random_ipv6_cidr,
    "random_string": random_string,
    "random_uint32": random_uint32,
    "random_uint64": random_uint64,
    "random_uuid": random_uuid,
}

FILE_FUNCTIONS: dict[str, GeneratorFn] = {
    "line_from_file": line_from_file,
    "random_from_file": random_from_file,
}


def function_names() -> tuple[str, ...]:
    return tuple(sorted({*GENERATOR_FUNCTIONS, *FILE_FUNCTIONS}))


def build_functions(
    *,
    rng: RandomSource | None = None,
    line_cache: LineCache | None = None,
) -> dict[str, TemplateFn]:
    """Bind every template function to one random source and one line cache.

    The returned callables take keyword arguments, which is how Jinja passes
    ``{{ random_uint32(start=1, end=6) }}``.
    """
    cache = line_cache if line_cache is not None else LineCache()
    bound: dict[str, TemplateFn] = {}
    for name, function in GENERATOR_FUNCTIONS.items():
        bound[name] = _keyword_adapter(name, partial(function, rng=rng))
    for name, function in FILE_FUNCTIONS.items():
        bound[name] = _keyword_adapter(name, partial(function, rng=rng, cache=cache))
    return bound


def _keyword_adapter(name: str, function: Callable[[Mapping[str, Any]], Any]) -> TemplateFn:
    def _call(*args: Any, **kwargs: Any) -> Any:
        if args:
            raise ArgumentParseError(name, "arguments", "only keyword arguments are supported")
        return function(kwargs)

    return _call


__all__ = [
    "FILE_FUNCTIONS",
    "GENERATOR_FUNCTIONS",
    "LineCache",
    "build_functions",
    "function_names",
    "gen_value_in_range",
    "generate_cidr",
    "line_from_file",
    "mask_address",
    "random_bool",
    "random_char",
    "random_float32",
    "random_float64",
    "random_from_file",
    "random_int32",
    "random_int64",
    "random_ipv4",
    "random_ipv4_cidr",
    "random_ipv6",
    "random_ipv6_cidr",
    "random_string",
    "random_uint32",
    "random_uint64",
    "random_uuid",
]
