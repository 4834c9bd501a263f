"""Render contracts and the Jinja2 template renderer."""

from __future__ import annotations

from jinja_rand.render.base import Renderer
from jinja_rand.render.template import TemplateRenderer, create_environment

__all__ = [
    "Renderer",
    "TemplateRenderer",
    "create_environment",
]
