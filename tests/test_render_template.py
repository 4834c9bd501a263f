"""Jinja2 template renderer with the random functions as globals."""

from __future__ import annotations

import json
from pathlib import Path
import random

import pytest

from jinja_rand.errors import ArgumentParseError, FileAccessError, InvalidRangeError, RenderError
from jinja_rand.generators import FILE_FUNCTIONS, GENERATOR_FUNCTIONS, function_names
from jinja_rand.generators.file import LineCache
from jinja_rand.render import TemplateRenderer, create_environment

RESOURCES = Path(__file__).parent / "resources"


def test_environment_registers_every_function() -> None:
    environment = create_environment()
    for name in function_names():
        assert name in environment.globals


def test_renders_json_template_from_file() -> None:
    renderer = TemplateRenderer.from_file(RESOURCES / "cpu_util.json")
    output = renderer.render()

    assert output.endswith(b"\n")
    record = json.loads(output)
    assert len(record["hostname"]) == 8
    assert 0 <= record["cpu_util"] <= 100


def test_each_render_re_evaluates_functions() -> None:
    environment = create_environment(rng=random.Random(3))
    renderer = TemplateRenderer.from_string("{{ random_uint64() }}", environment=environment)
    assert len({renderer.render() for _ in range(10)}) > 1


def test_seeded_environments_render_identically() -> None:
    source = "{{ random_string(length=5) }} {{ random_uuid() }} {{ random_ipv4_cidr() }}"
    first = TemplateRenderer.from_string(source, environment=create_environment(rng=random.Random(1)))
    second = TemplateRenderer.from_string(source, environment=create_environment(rng=random.Random(1)))
    assert first.render() == second.render()


def test_file_functions_share_the_environment_cache() -> None:
    cache = LineCache()
    environment = create_environment(line_cache=cache)
    path = RESOURCES / "days.txt"
    renderer = TemplateRenderer.from_string(
        f"{{{{ line_from_file(path='{path}', line_num=2) }}}}", environment=environment
    )
    assert renderer.render() == b"Wednesday"
    assert str(path) in cache


def test_output_is_utf8() -> None:
    renderer = TemplateRenderer.from_string("café {{ random_bool() }}")
    assert renderer.render().decode("utf-8").startswith("café ")


def test_syntax_error_is_a_render_error() -> None:
    with pytest.raises(RenderError, match="could not be compiled"):
        TemplateRenderer.from_string("{{ random_bool( }}")


def test_undefined_name_is_a_render_error() -> None:
    renderer = TemplateRenderer.from_string("{{ not_a_function() }}")
    with pytest.raises(RenderError, match="failed to render"):
        renderer.render()


def test_generator_errors_pass_through() -> None:
    renderer = TemplateRenderer.from_string("{{ random_uint32(start=5, end=1) }}")
    with pytest.raises(InvalidRangeError):
        renderer.render()


def test_missing_template_file(tmp_path: Path) -> None:
    with pytest.raises(FileAccessError):
        TemplateRenderer.from_file(tmp_path / "missing.j2")


def test_booleans_render_as_json_literals() -> None:
    renderer = TemplateRenderer.from_string('{"up": {{ random_bool() }}, "flag": {{ true }}}')
    record = json.loads(renderer.render())
    assert isinstance(record["up"], bool)
    assert record["flag"] is True


def test_positional_arguments_are_an_argument_error() -> None:
    renderer = TemplateRenderer.from_string("{{ random_uint32(1, 5) }}")
    with pytest.raises(ArgumentParseError, match="`arguments` in `random_uint32`"):
        renderer.render()


def test_registry_covers_generator_and_file_functions() -> None:
    assert set(function_names()) == {*GENERATOR_FUNCTIONS, *FILE_FUNCTIONS}
