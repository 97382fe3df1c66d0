"""Field helpers for packed integer fields.

Python has a single ``int`` type, so the wire kind of an integer field is
recorded in the field metadata. The decoder reads it back through
``MessageSchema.from_model``.
"""

from __future__ import annotations

from typing import Any, Optional, cast

from pydantic import Field
from pydantic.fields import FieldInfo

from ..codec.schema import ValueKind


def _uint_field(kind: ValueKind, length: Optional[int], kwargs: dict[str, Any]) -> FieldInfo:
    extra: dict[str, Any] = {"kind": kind.value}
    if length is not None:
        extra["length"] = length
    kwargs.setdefault("default", 0)
    kwargs.setdefault("ge", 0)
    kwargs.setdefault("le", (1 << kind.natural_width) - 1)
    return cast(FieldInfo, Field(json_schema_extra=extra, **kwargs))


def UInt8(*, length: Optional[int] = None, **kwargs: Any) -> FieldInfo:
    """Create an 8-bit unsigned integer field.

    Args:
        length: Wire width in bits when narrower than 8
        **kwargs: Additional Field() arguments (description, default, etc.)

    Returns:
        Pydantic FieldInfo suitable for use as a field default.
    """
    return _uint_field(ValueKind.UINT8, length, kwargs)


def UInt16(*, length: Optional[int] = None, **kwargs: Any) -> FieldInfo:
    """Create a 16-bit unsigned integer field."""
    return _uint_field(ValueKind.UINT16, length, kwargs)


def UInt32(*, length: Optional[int] = None, **kwargs: Any) -> FieldInfo:
    """Create a 32-bit unsigned integer field."""
    return _uint_field(ValueKind.UINT32, length, kwargs)


def UInt64(*, length: Optional[int] = None, **kwargs: Any) -> FieldInfo:
    """Create a 64-bit unsigned integer field.

    Example:
        >>> class Frame(BaseMessage):
        ...     # 48-bit timestamp, reassembled into a 64-bit value
        ...     timestamp: int = UInt64(length=48)
    """
    return _uint_field(ValueKind.UINT64, length, kwargs)
