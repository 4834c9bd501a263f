"""Logging setup helpers for jinja-rand.

Rendered records own stdout, so log lines always go to stderr.
"""

from __future__ import annotations

import logging
import sys

LOGGER_NAME = "jinja_rand"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(debug: bool = False) -> None:
    logging.basicConfig(
        level=logging.DEBUG if debug else logging.WARNING,
        format=LOG_FORMAT,
        stream=sys.stderr,
    )
    get_logger().setLevel(logging.DEBUG if debug else logging.INFO)


def get_logger(name: str | None = None) -> logging.Logger:
    return logging.getLogger(name or LOGGER_NAME)
