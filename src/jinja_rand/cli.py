"""Typer CLI for jinja-rand."""

from __future__ import annotations

from datetime import timedelta
import json

import typer

from . import __version__
from .config import (
    RunConfig,
    config_to_dict,
    init_default_config,
    load_optional_runtime_config,
    load_runtime_config,
    resolve_config_path,
)
from .errors import ConfigError, JinjaRandError
from .generators import FILE_FUNCTIONS, function_names
from .logging import configure_logging, get_logger
from .models import ScheduleRunResult
from .render import TemplateRenderer, create_environment
from .scheduler import format_duration, parse_iso8601_duration, run_schedule

app = typer.Typer(help="Render a Jinja template of random values, paced and limited.")

config_app = typer.Typer(help="Config commands.")

app.add_typer(config_app, name="config")

logger = get_logger(__name__)


@app.command("run")
def run(
    ctx: typer.Context,
    file: str | None = typer.Option(
        None, "--file", "-f", help="Template file to render (defaults to configured run.template)."
    ),
    batch_size: int | None = typer.Option(
        None, "--batch-size", help="Records per batch; requires --batch-interval."
    ),
    batch_interval: str | None = typer.Option(
        None, "--batch-interval", help="ISO 8601 duration between batch starts, e.g. PT1S."
    ),
    time_limit: str | None = typer.Option(
        None, "--time-limit", "-t", help="ISO 8601 duration after which no new batch starts."
    ),
    record_limit: int | None = typer.Option(
        None, "--record-limit", "-r", help="Total number of records to render."
    ),
    path: str | None = typer.Option(
        None, "--path", help="Optional config TOML path (defaults to platform config dir)."
    ),
) -> None:
    try:
        config = load_optional_runtime_config(path)
        if config.app.debug and not _debug_requested(ctx):
            configure_logging(debug=True)
        run_config = config.run.with_overrides(
            template=file,
            batch_size=batch_size,
            batch_interval=parse_iso8601_duration(batch_interval) if batch_interval is not None else None,
            time_limit=parse_iso8601_duration(time_limit) if time_limit is not None else None,
            record_limit=record_limit,
        )
        result = _run_configured(run_config)
    except KeyboardInterrupt as exc:
        typer.secho("Run interrupted.", err=True, fg=typer.colors.YELLOW)
        raise typer.Exit(130) from exc
    except JinjaRandError as exc:
        typer.secho(f"Run failed: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1) from exc

    logger.debug(
        "Emitted %d record(s) in %d batch(es); slept %.3fs",
        result.records_emitted,
        result.batches_completed,
        result.total_sleep_seconds,
    )


@app.command("functions")
def functions(
    as_json: bool = typer.Option(False, "--json", help="Render the function list as JSON."),
) -> None:
    names = function_names()
    if as_json:
        payload = [{"name": name, "reads_files": name in FILE_FUNCTIONS} for name in names]
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return
    for name in names:
        typer.echo(name)


@config_app.command("init")
def config_init(
    path: str | None = typer.Option(
        None, "--path", help="Optional config TOML path (defaults to platform config dir)."
    ),
    force: bool = typer.Option(False, "--force", help="Overwrite existing config file."),
) -> None:
    try:
        written_path = init_default_config(path, force=force)
    except ConfigError as exc:
        typer.secho(f"Config init failed: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1) from exc

    typer.echo(f"Wrote default config to {written_path}")


@config_app.command("show")
def config_show(
    path: str | None = typer.Option(
        None, "--path", help="Optional config TOML path (defaults to platform config dir)."
    ),
    as_json: bool = typer.Option(False, "--json", help="Render resolved config as JSON."),
) -> None:
    resolved_path = resolve_config_path(path)
    try:
        config = load_runtime_config(path)
    except ConfigError as exc:
        typer.secho(f"Config show failed: {exc}", err=True, fg=typer.colors.RED)
        raise typer.Exit(1) from exc

    payload = {
        "path": str(resolved_path),
        "config": config_to_dict(config),
    }
    if as_json:
        typer.echo(json.dumps(payload, indent=2, sort_keys=True))
        return

    run_config = config.run
    typer.echo(f"Resolved config path: {payload['path']}")
    typer.echo(f"Debug: {config.app.debug}")
    typer.echo(f"Template: {run_config.template or '-'}")
    typer.echo(f"Batch size: {_or_dash(run_config.batch_size)}")
    typer.echo(f"Batch interval: {_duration_or_dash(run_config.batch_interval)}")
    typer.echo(f"Record limit: {_or_dash(run_config.record_limit)}")
    typer.echo(f"Time limit: {_duration_or_dash(run_config.time_limit)}")


@app.callback(invoke_without_command=True)
def main(
    ctx: typer.Context,
    version: bool = typer.Option(False, "--version", help="Show jinja-rand version and exit."),
    debug: bool = typer.Option(False, "--debug", help="Enable debug logging on stderr."),
) -> None:
    ctx.obj = {"debug": debug}
    configure_logging(debug=debug)
    if version:
        typer.echo(__version__)
        raise typer.Exit()
    if ctx.invoked_subcommand is None:
        typer.echo(ctx.get_help())


def _run_configured(run_config: RunConfig) -> ScheduleRunResult:
    if run_config.template is None:
        raise ConfigError("No template given. Pass --file PATH or set run.template in the config file.")

    environment = create_environment()
    renderer = TemplateRenderer.from_file(run_config.template, environment=environment)
    logger.debug("Loaded template %s", run_config.template)
    return run_schedule(renderer, run_config.limits(), emit=_emit)


def _emit(record: bytes) -> None:
    typer.echo(record, nl=False)


def _debug_requested(ctx: typer.Context) -> bool:
    parent = ctx.find_root()
    return bool(parent.obj and parent.obj.get("debug"))


def _or_dash(value: object) -> str:
    return "-" if value is None else str(value)


def _duration_or_dash(value: timedelta | None) -> str:
    return "-" if value is None else format_duration(value)
