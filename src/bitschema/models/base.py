"""Base message class and bitschema-specific Pydantic configuration.

This module provides the BaseMessage class that all packed record types should inherit from.
"""

from __future__ import annotations

from typing import ClassVar

from pydantic import BaseModel, ConfigDict

from ..codec.schema import ByteOrder


class BaseMessage(BaseModel):
    """Base class for packed binary records.

    Fields are laid out in declaration order. Flags are plain ``bool`` fields;
    integers use the ``UInt8``..``UInt64`` helpers, optionally with a narrower
    ``length`` in bits.

    Example:
        >>> from typing import ClassVar
        >>> class Header(BaseMessage):
        ...     version: int = UInt8()
        ...     urgent: bool = False
        ...     ack: bool = False
        ...     sequence: int = UInt16()
        ...     timestamp: int = UInt64(length=48)
        ...
        ...     bitschema_byte_order: ClassVar[ByteOrder] = ByteOrder.LITTLE

    Attributes:
        bitschema_byte_order: Byte order for multi-byte integers (default big-endian)
    """

    model_config = ConfigDict(
        # Validate on assignment
        validate_assignment=True,
        # Forbid extra fields not defined in schema
        extra="forbid",
    )

    bitschema_byte_order: ClassVar[ByteOrder] = ByteOrder.BIG
