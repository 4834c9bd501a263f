"""Template functions that sample lines from text files."""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Annotated, Any, Optional

from pydantic import Field, StrictStr

from jinja_rand.errors import (
    EmptySampleFileError,
    FileAccessError,
    InternalInvariantError,
    MissingArgumentError,
)
from jinja_rand.generators.common import FunctionArgs, RandomSource, parse_args, resolve_rng
from jinja_rand.logging import get_logger

logger = get_logger(__name__)


class RandomFromFileArgs(FunctionArgs):
    path: Optional[StrictStr] = None


class LineFromFileArgs(FunctionArgs):
    path: Optional[StrictStr] = None
    line_num: Optional[Annotated[int, Field(strict=True, ge=0)]] = None


class LineCache:
    """Reads each file once and keeps its lines for the life of the process."""

    def __init__(self) -> None:
        self._lines: dict[str, tuple[str, ...]] = {}

    def __contains__(self, path: object) -> bool:
        return path in self._lines

    def __len__(self) -> int:
        return len(self._lines)

    def lines(self, path: str) -> tuple[str, ...]:
        if path not in self._lines:
            self._lines[path] = _read_lines(path)
            logger.debug("Cached %d line(s) from %s", len(self._lines[path]), path)
        try:
            return self._lines[path]
        except KeyError as exc:
            raise InternalInvariantError(f"File cache did not contain an entry for file {path}") from exc


def random_from_file(
    args: Mapping[str, Any] | None = None,
    *,
    rng: RandomSource | None = None,
    cache: LineCache | None = None,
) -> str:
    parsed = parse_args(RandomFromFileArgs, args, "random_from_file")
    if parsed.path is None:
        raise MissingArgumentError("random_from_file", "path")

    lines = (cache if cache is not None else LineCache()).lines(parsed.path)
    index = resolve_rng(rng).randrange(len(lines))
    return _line_at(parsed.path, lines, index)


def line_from_file(
    args: Mapping[str, Any] | None = None,
    *,
    rng: RandomSource | None = None,
    cache: LineCache | None = None,
) -> str:
    """Return the 0-based ``line_num`` line of ``path``."""
    parsed = parse_args(LineFromFileArgs, args, "line_from_file")
    if parsed.path is None:
        raise MissingArgumentError("line_from_file", "path")
    if parsed.line_num is None:
        raise MissingArgumentError("line_from_file", "line_num")

    lines = (cache if cache is not None else LineCache()).lines(parsed.path)
    return _line_at(parsed.path, lines, parsed.line_num)


def _line_at(path: str, lines: tuple[str, ...], index: int) -> str:
    if index >= len(lines):
        raise InternalInvariantError(
            f"Unable to sample value with line number {index} for file at path {path}"
        )
    return lines[index]


def _read_lines(path: str) -> tuple[str, ...]:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise FileAccessError(path, str(exc)) from exc

    # only "\n" and "\r\n" end a line; other Unicode separators stay in the value
    raw_lines = text.split("\n")
    if raw_lines[-1] == "":
        raw_lines.pop()
    lines = tuple(line.removesuffix("\r") for line in raw_lines)
    if not lines:
        raise EmptySampleFileError(path)
    return lines
