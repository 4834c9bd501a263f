"""Configuration contracts and validation helpers for jinja-rand."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, replace
from datetime import timedelta
import os
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from .errors import ConfigError, SchedulerError
from .models import ScheduleLimits
from .scheduler.timing import format_duration, parse_iso8601_duration

CONFIG_ENV_VAR = "JINJA_RAND_CONFIG"
DEFAULT_CONFIG_FILENAME = "config.toml"

DEFAULT_CONFIG_TEMPLATE = """[app]
debug = false

[run]
# Template rendered by `jinja-rand run` when --file is omitted.
# template = "templates/cpu_util.json"

# batch_size and batch_interval must be set together.
# batch_size = 10
# batch_interval = "PT1S"

# The run stops at whichever limit is reached first.
# record_limit = 1000
# time_limit = "PT1M"
"""


@dataclass(frozen=True)
class AppConfig:
    debug: bool = False


@dataclass(frozen=True)
class RunConfig:
    template: str | None = None
    batch_size: int | None = None
    batch_interval: timedelta | None = None
    record_limit: int | None = None
    time_limit: timedelta | None = None

    def limits(self) -> ScheduleLimits:
        return ScheduleLimits(
            batch_size=self.batch_size,
            batch_interval=self.batch_interval,
            record_limit=self.record_limit,
            time_limit=self.time_limit,
        )

    def with_overrides(self, **overrides: Any) -> RunConfig:
        """Return a copy where every non-None override replaces the configured value."""
        return replace(self, **{key: value for key, value in overrides.items() if value is not None})


@dataclass(frozen=True)
class RuntimeConfig:
    app: AppConfig = field(default_factory=AppConfig)
    run: RunConfig = field(default_factory=RunConfig)


def default_config() -> RuntimeConfig:
    return RuntimeConfig()


def default_config_toml() -> str:
    return DEFAULT_CONFIG_TEMPLATE


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    if config_path:
        return Path(config_path).expanduser()

    env_value = os.getenv(CONFIG_ENV_VAR)
    if env_value:
        return Path(env_value).expanduser()

    config_dir = Path(user_config_dir("jinja-rand", appauthor=False))
    return config_dir / DEFAULT_CONFIG_FILENAME


def init_default_config(config_path: str | Path | None = None, force: bool = False) -> Path:
    path = _require_file_path(resolve_config_path(config_path))
    if path.exists() and not force:
        raise ConfigError(f"Config file already exists at '{path}'. Re-run with --force to overwrite.")
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(default_config_toml(), encoding="utf-8")
    except OSError as exc:
        raise ConfigError(f"Could not write config file at '{path}': {exc}.") from exc
    return path


def load_runtime_config(config_path: str | Path | None = None) -> RuntimeConfig:
    path = _require_file_path(resolve_config_path(config_path))
    if not path.exists():
        raise ConfigError(
            f"Config file not found at '{path}'. Run `jinja-rand config init --path \"{path}\"` to generate defaults."
        )
    return parse_runtime_config(_read_toml(path), source=str(path))


def load_optional_runtime_config(config_path: str | Path | None = None) -> RuntimeConfig:
    """Load an explicit config path, or the default one only when it exists."""
    if config_path is None and not resolve_config_path().exists():
        return default_config()
    return load_runtime_config(config_path)


def config_to_dict(config: RuntimeConfig) -> dict[str, Any]:
    payload = asdict(config)
    for key in ("batch_interval", "time_limit"):
        value = payload["run"][key]
        payload["run"][key] = format_duration(value) if value is not None else None
    return payload


def parse_runtime_config(data: dict[str, Any], *, source: str = "<config>") -> RuntimeConfig:
    """Build a ``RuntimeConfig`` from already-decoded TOML tables."""
    app_raw = _expect_table(data, "app", source=source)
    run_raw = _expect_table(data, "run", source=source)
    return RuntimeConfig(
        app=AppConfig(debug=_expect_bool(app_raw, "app.debug", default=False)),
        run=_parse_run_table(run_raw),
    )


def _require_file_path(path: Path) -> Path:
    if path.is_dir():
        raise ConfigError(
            f"Config path '{path}' is a directory; pass a file path ending in '{DEFAULT_CONFIG_FILENAME}'."
        )
    return path


def _read_toml(path: Path) -> dict[str, Any]:
    try:
        import tomllib  # Python 3.11+
    except ModuleNotFoundError:
        import tomli as tomllib  # type: ignore[no-redef]

    try:
        with path.open("rb") as handle:
            return tomllib.load(handle)
    except OSError as exc:
        raise ConfigError(f"Could not read config file '{path}': {exc}.") from exc
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(
            f"Config file '{path}' contains invalid TOML: {exc}. "
            "Fix the syntax or regenerate defaults with `jinja-rand config init --force`."
        ) from exc


def _parse_run_table(run_raw: dict[str, Any]) -> RunConfig:
    # batch pairing is checked by the scheduler after CLI overrides are applied
    return RunConfig(
        template=_expect_optional_string(run_raw, "run.template"),
        batch_size=_expect_optional_int(run_raw, "run.batch_size", minimum=1),
        batch_interval=_expect_optional_duration(run_raw, "run.batch_interval"),
        record_limit=_expect_optional_int(run_raw, "run.record_limit", minimum=0),
        time_limit=_expect_optional_duration(run_raw, "run.time_limit"),
    )


def _expect_table(data: dict[str, Any], key: str, *, source: str) -> dict[str, Any]:
    value = data.get(key, {})
    if not isinstance(value, dict):
        raise ConfigError(f"Invalid [{key}] table in {source}: expected table, got {type(value).__name__}.")
    return value


def _expect_bool(data: dict[str, Any], key: str, default: bool) -> bool:
    value = data.get(key.split(".")[-1], default)
    if not isinstance(value, bool):
        raise ConfigError(f"Invalid value for '{key}': expected boolean true/false.")
    return value


def _expect_optional_string(data: dict[str, Any], key: str) -> str | None:
    value = data.get(key.split(".")[-1])
    if value is None:
        return None
    if not isinstance(value, str) or not value.strip():
        raise ConfigError(f"Invalid value for '{key}': expected non-empty string.")
    return value


def _expect_optional_int(data: dict[str, Any], key: str, *, minimum: int) -> int | None:
    value = data.get(key.split(".")[-1])
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise ConfigError(f"Invalid value for '{key}': expected integer >= {minimum}.")
    return value


def _expect_optional_duration(data: dict[str, Any], key: str) -> timedelta | None:
    value = data.get(key.split(".")[-1])
    if value is None:
        return None
    if not isinstance(value, str):
        raise ConfigError(f"Invalid value for '{key}': expected ISO 8601 duration string like \"PT1S\".")
    try:
        return parse_iso8601_duration(value)
    except SchedulerError as exc:
        raise ConfigError(f"Invalid value for '{key}': {exc}") from exc
