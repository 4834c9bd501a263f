"""jinja_rand: render Jinja templates of random values on a schedule."""

from .config import (
    AppConfig,
    RunConfig,
    RuntimeConfig,
    config_to_dict,
    default_config,
    init_default_config,
    load_runtime_config,
    resolve_config_path,
)
from .models import CidrBlock, ScheduleLimits, ScheduleRunResult, StopReason

__all__ = [
    "AppConfig",
    "CidrBlock",
    "RunConfig",
    "RuntimeConfig",
    "ScheduleLimits",
    "ScheduleRunResult",
    "StopReason",
    "config_to_dict",
    "default_config",
    "init_default_config",
    "load_runtime_config",
    "resolve_config_path",
]

__version__ = "0.1.0"
