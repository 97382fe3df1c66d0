"""Record size calculation utilities.

This module provides functions to inspect the packed layout of a message
without decoding anything.
"""

from __future__ import annotations

from typing import NamedTuple

from pydantic import BaseModel

from ..codec.layout import Layout, lay_out
from ..codec.schema import MessageSchema


class FieldPosition(NamedTuple):
    """Where a field lives in the packed buffer."""

    byte_offset: int
    bit_offset: int
    effective_bits: int


def _layout(message_or_class: BaseModel | type[BaseModel]) -> Layout:
    # Get the class if we were passed an instance
    if isinstance(message_or_class, BaseModel):
        message_class = type(message_or_class)
    else:
        message_class = message_or_class

    return lay_out(MessageSchema.from_model(message_class).fields)


def min_buffer_bytes(message_or_class: BaseModel | type[BaseModel]) -> int:
    """Calculate the minimum buffer length a message needs, in bytes.

    Args:
        message_or_class: Message instance or class

    Returns:
        Size in bytes (rounded up to nearest byte)

    Raises:
        SchemaError: If schema is invalid

    Example:
        >>> class Status(BaseMessage):
        ...     vehicle_id: int = UInt8()
        ...     active: bool = False
        >>> min_buffer_bytes(Status)
        2  # 8 bits + 1 bit = 9 bits = 2 bytes
    """
    return _layout(message_or_class).min_buffer_bytes


def total_bits(message_or_class: BaseModel | type[BaseModel]) -> int:
    """Calculate the number of bits consumed by all fields.

    Raises:
        SchemaError: If schema is invalid
    """
    return _layout(message_or_class).total_bits


def field_layout(message_or_class: BaseModel | type[BaseModel]) -> dict[str, FieldPosition]:
    """Get the position and effective width of each field.

    Args:
        message_or_class: Message instance or class to analyze

    Returns:
        Dictionary mapping field names to their FieldPosition

    Raises:
        SchemaError: If schema is invalid

    Example:
        >>> field_layout(Status)
        {'vehicle_id': FieldPosition(byte_offset=0, bit_offset=0, effective_bits=8),
         'active': FieldPosition(byte_offset=1, bit_offset=0, effective_bits=1)}
    """
    return {
        slot.name: FieldPosition(slot.byte_offset, slot.bit_offset, slot.effective_bits)
        for slot in _layout(message_or_class).fields
    }
