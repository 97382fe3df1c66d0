"""Runtime decoder for packed records.

This module interprets a DecoderSpec directly, without generating source.
"""

from __future__ import annotations

import functools
import logging
from typing import Any, Optional, Type, TypeVar, Union

from pydantic import BaseModel

from ..exceptions import DecodeError, TruncatedError
from .plan import DecoderSpec, compile_schema
from .schema import ByteOrder, MessageSchema

_logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)

Buffer = Union[bytes, bytearray, memoryview]


@functools.lru_cache(maxsize=128)
def _compile_model_cached(
    model_class: Type[BaseModel], byte_order: Optional[ByteOrder]
) -> DecoderSpec:
    return compile_schema(MessageSchema.from_model(model_class), byte_order)


def compile_model(
    model_class: Type[BaseModel], byte_order: Union[str, ByteOrder, None] = None
) -> DecoderSpec:
    """Compile (and cache) the DecoderSpec of a Pydantic message class.

    Args:
        model_class: Message class to compile
        byte_order: Byte order override, defaults to the class's
            ``bitschema_byte_order``

    Returns:
        DecoderSpec for the class

    Raises:
        SchemaError: If the class cannot be mapped to a packed schema
    """
    order = None if byte_order is None else ByteOrder.parse(byte_order)
    return _compile_model_cached(model_class, order)


def check_length(spec: DecoderSpec, data: Buffer) -> None:
    """Raise TruncatedError if ``data`` is shorter than ``spec.min_buffer_bytes``."""
    if len(data) < spec.min_buffer_bytes:
        raise TruncatedError(spec.min_buffer_bytes, len(data), spec.name)


def decode_fields(spec: DecoderSpec, data: Buffer) -> dict[str, Any]:
    """Extract every field of ``spec`` from ``data``.

    Args:
        spec: Compiled decoder spec
        data: Packed buffer, may be longer than required

    Returns:
        Mapping of field name to value, in declaration order

    Raises:
        TruncatedError: If data is shorter than ``spec.min_buffer_bytes``
    """
    check_length(spec, data)
    return {plan.name: plan.extract(data) for plan in spec.fields}


def unmarshal(record: T, data: Buffer, byte_order: Union[str, ByteOrder, None] = None) -> T:
    """Decode ``data`` into an existing message instance.

    All values are extracted and validated before the first attribute is
    assigned, so the record is left untouched when the buffer is truncated or
    the model rejects a value.

    Args:
        record: Message instance to update in place
        data: Packed buffer
        byte_order: Byte order override

    Returns:
        The same record, for chaining

    Raises:
        SchemaError: If the message class is not a valid packed schema
        TruncatedError: If data is too short
        DecodeError: If a decoded value is rejected by the model
    """
    spec = compile_model(type(record), byte_order)
    values = decode_fields(spec, data)
    try:
        validated = type(record).model_validate({**record.model_dump(), **values})
    except ValueError as e:
        raise DecodeError(f"Failed to assign decoded values to {spec.name}: {e}") from e

    for name in values:
        setattr(record, name, getattr(validated, name))
    return record


def decode(
    message_class: Type[T], data: Buffer, byte_order: Union[str, ByteOrder, None] = None
) -> T:
    """Decode ``data`` into a new message instance.

    Args:
        message_class: Message class to decode to
        data: Packed buffer
        byte_order: Byte order override

    Returns:
        Decoded message instance

    Raises:
        SchemaError: If the message class is not a valid packed schema
        TruncatedError: If data is too short
        DecodeError: If the decoded values are rejected by the model

    Example:
        >>> class Header(BaseMessage):
        ...     version: int = UInt8()
        ...     ack: bool = False
        >>> decode(Header, b"\\x02\\x80")
        Header(version=2, ack=True)
    """
    spec = compile_model(message_class, byte_order)
    values = decode_fields(spec, data)
    _logger.debug("decoded %s from %d bytes", spec.name, len(data))
    try:
        return message_class(**values)
    except ValueError as e:
        raise DecodeError(f"Failed to construct {message_class.__name__}: {e}") from e
