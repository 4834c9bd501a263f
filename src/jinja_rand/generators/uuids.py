"""Template function for random UUIDs."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any
import uuid

from jinja_rand.generators.common import RandomSource


def random_uuid(args: Mapping[str, Any] | None = None, *, rng: RandomSource | None = None) -> str:
    """Return a version 4 UUID in canonical hyphenated form.

    With an explicit ``rng`` the UUID is derived from it, so seeded runs repeat.
    """
    if rng is None:
        return str(uuid.uuid4())
    return str(uuid.UUID(int=rng.getrandbits(128), version=4))
