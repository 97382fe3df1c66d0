"""Utility functions for bitschema."""

from __future__ import annotations

from .sizing import FieldPosition, field_layout, min_buffer_bytes, total_bits

__all__ = [
    "FieldPosition",
    "field_layout",
    "min_buffer_bytes",
    "total_bits",
]
