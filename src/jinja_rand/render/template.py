"""Jinja2 template rendering with the random functions registered as globals."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from jinja2 import Environment, StrictUndefined, Template, TemplateError

from jinja_rand.errors import FileAccessError, RenderError
from jinja_rand.generators import build_functions
from jinja_rand.generators.common import RandomSource
from jinja_rand.generators.file import LineCache

ENCODING = "utf-8"


def create_environment(
    *,
    rng: RandomSource | None = None,
    line_cache: LineCache | None = None,
) -> Environment:
    environment = Environment(
        undefined=StrictUndefined,
        keep_trailing_newline=True,
        autoescape=False,
        finalize=_finalize,
    )
    environment.globals.update(build_functions(rng=rng, line_cache=line_cache))
    return environment


def _finalize(value: Any) -> Any:
    # JSON spelling for booleans
    if isinstance(value, bool):
        return "true" if value else "false"
    return value


class TemplateRenderer:
    """Renders one compiled template; each call re-evaluates every random function."""

    def __init__(self, template: Template, *, name: str = "<string>") -> None:
        self._template = template
        self.name = name

    @classmethod
    def from_string(
        cls,
        source: str,
        *,
        environment: Environment | None = None,
        name: str = "<string>",
    ) -> TemplateRenderer:
        env = environment if environment is not None else create_environment()
        try:
            template = env.from_string(source)
        except TemplateError as exc:
            raise RenderError(f"Template '{name}' could not be compiled: {exc}") from exc
        return cls(template, name=name)

    @classmethod
    def from_file(
        cls,
        path: str | Path,
        *,
        environment: Environment | None = None,
    ) -> TemplateRenderer:
        template_path = Path(path)
        try:
            source = template_path.read_text(encoding=ENCODING)
        except (OSError, UnicodeDecodeError) as exc:
            raise FileAccessError(str(template_path), str(exc)) from exc
        return cls.from_string(source, environment=environment, name=str(template_path))

    def render(self) -> bytes:
        try:
            text = self._template.render()
        except TemplateError as exc:
            raise RenderError(f"Template '{self.name}' failed to render: {exc}") from exc
        return text.encode(ENCODING)
