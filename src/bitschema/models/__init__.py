"""Pydantic message modeling for bitschema.

This module provides the BaseMessage class and field helpers for declaring
packed binary records.
"""

from __future__ import annotations

from .base import BaseMessage
from .fields import UInt8, UInt16, UInt32, UInt64

__all__ = [
    "BaseMessage",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
]
