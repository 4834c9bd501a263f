"""Rendering interfaces."""

from __future__ import annotations

from typing import Protocol


class Renderer(Protocol):
    def render(self) -> bytes:
        """Render one unit of output."""
