"""Template function for random strings."""

from __future__ import annotations

from collections.abc import Mapping
import string
from typing import Annotated, Any

from pydantic import Field, StrictStr

from jinja_rand.errors import UnsupportedArgumentError
from jinja_rand.generators.common import FunctionArgs, RandomSource, parse_args, resolve_rng
from jinja_rand.generators.primitives import sample_char

ALPHANUMERIC = string.ascii_uppercase + string.ascii_lowercase + string.digits
DEFAULT_LENGTH = 8
SPACE_ALPHANUMERIC = "alphanumeric"
SPACE_STANDARD = "standard"
VALID_SPACES = (SPACE_ALPHANUMERIC, SPACE_STANDARD)


class StringArgs(FunctionArgs):
    length: Annotated[int, Field(strict=True, ge=0)] = DEFAULT_LENGTH
    space: StrictStr = SPACE_ALPHANUMERIC


def random_string(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> str:
    """Return ``length`` characters drawn from the named character space.

    ``alphanumeric`` draws from ``[A-Za-z0-9]``; ``standard`` draws from every
    Unicode scalar value.
    """
    parsed = parse_args(StringArgs, args, "random_string")
    chooser = resolve_rng(rng)
    if parsed.space == SPACE_ALPHANUMERIC:
        return "".join(chooser.choice(ALPHANUMERIC) for _ in range(parsed.length))
    if parsed.space == SPACE_STANDARD:
        return "".join(sample_char(chooser) for _ in range(parsed.length))
    raise UnsupportedArgumentError("space", parsed.space)
