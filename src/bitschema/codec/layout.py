"""Bit layout engine.

Walks a field list once with a bit cursor, assigning every field its starting
position and the number of bits it consumes.

Packing rules:
    - Single-bit flags pack tightly, several flags share one byte.
    - A wider field starting mid-byte spends its declared width finishing the
      current byte and the bytes after it. Its effective width shrinks by the
      number of bits already claimed in its first byte instead of moving to
      the next byte boundary.

Example:
    ``[b1: uint8, b2: uint8, b3: bool, b4: bool, b5: uint8]`` places ``b5`` at
    byte 2 bit 2 with 6 effective bits, so the record fits in 3 bytes.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Tuple

from ..exceptions import SchemaError
from .schema import SchemaField

_logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LaidOutField:
    """Position of one field within the buffer.

    Attributes:
        field: The schema field
        byte_offset: Index of the byte where extraction starts
        bit_offset: Bit position inside that byte (0 is the most significant bit)
        effective_bits: Number of bits actually consumed from that position
    """

    field: SchemaField
    byte_offset: int
    bit_offset: int
    effective_bits: int

    @property
    def name(self) -> str:
        return self.field.name

    @property
    def start_bit(self) -> int:
        """Absolute bit position of the field's first bit."""
        return self.byte_offset * 8 + self.bit_offset

    @property
    def end_bit(self) -> int:
        """Absolute bit position immediately after the field."""
        return self.start_bit + self.effective_bits

    @property
    def byte_span(self) -> int:
        """Number of buffer bytes touched by the extraction."""
        return max(1, (self.effective_bits + 7) // 8)


@dataclass(frozen=True)
class Layout:
    """Result of laying out a whole schema."""

    fields: Tuple[LaidOutField, ...]
    total_bits: int

    @property
    def min_buffer_bytes(self) -> int:
        """Bytes every decode call must have available."""
        return (self.total_bits + 7) // 8

    @property
    def padding_bits(self) -> int:
        """Unused bits in the final byte."""
        return self.min_buffer_bytes * 8 - self.total_bits


def advance(cursor: int, width: int) -> int:
    """Return how far the cursor moves for a field of ``width`` bits.

    Args:
        cursor: Current bit cursor
        width: Declared width of the field in bits

    Returns:
        Number of bits the field consumes
    """
    misalignment = cursor % 8
    if misalignment and width > 1:
        return width - misalignment
    return width


def lay_out(fields: Iterable[SchemaField]) -> Layout:
    """Assign each field its bit position.

    Args:
        fields: Ordered schema fields

    Returns:
        Layout with one LaidOutField per input field, in the same order

    Raises:
        SchemaError: If a narrowed field starting mid-byte is not wider than
            the bits already used in that byte
    """
    cursor = 0
    laid_out = []

    for field in fields:
        width = field.declared_width
        step = advance(cursor, width)
        if step <= 0:
            raise SchemaError(
                f"Field {field.name}: {width}-bit field at bit {cursor % 8} of byte "
                f"{cursor // 8} leaves no bits to consume"
            )

        laid_out.append(
            LaidOutField(
                field=field,
                byte_offset=cursor // 8,
                bit_offset=cursor % 8,
                effective_bits=step,
            )
        )
        cursor += step

    layout = Layout(fields=tuple(laid_out), total_bits=cursor)
    _logger.debug(
        "laid out %d fields in %d bits (%d bytes)",
        len(layout.fields),
        layout.total_bits,
        layout.min_buffer_bytes,
    )
    return layout
