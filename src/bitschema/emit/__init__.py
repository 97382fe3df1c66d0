"""Source emitters for compiled decoder specs."""

from __future__ import annotations

from .python import build_unmarshaller, function_name, render_module, render_unmarshaller

__all__ = [
    "render_unmarshaller",
    "render_module",
    "build_unmarshaller",
    "function_name",
]
