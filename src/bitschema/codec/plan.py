"""Extraction plans for laid-out fields.

For every field this module derives the bytes to read (some masked, some zero
padding) and how to turn them back into a value. The resulting DecoderSpec is
the input of both the runtime decoder and the source emitter.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from .layout import LaidOutField, lay_out
from .masks import bit_selector, low_bits_mask
from .schema import ByteOrder, MessageSchema, ValueKind

_logger = logging.getLogger(__name__)


class Reassembly(enum.Enum):
    """How the source bytes of a field become its value."""

    BYTE = "byte"  # single byte as an 8-bit unsigned integer
    INTEGER = "integer"  # 2/4/8 bytes in the configured byte order
    BIT_TEST = "bit_test"  # single bit, true when set


_REASSEMBLY_BY_KIND = {
    ValueKind.UINT8: Reassembly.BYTE,
    ValueKind.UINT16: Reassembly.INTEGER,
    ValueKind.UINT32: Reassembly.INTEGER,
    ValueKind.UINT64: Reassembly.INTEGER,
    ValueKind.BOOL: Reassembly.BIT_TEST,
}


@dataclass(frozen=True)
class ByteSource:
    """One byte of a field's reassembly input.

    Attributes:
        index: Buffer index to read, or None for a zero padding byte
        mask: Mask applied to the byte, or None to take it as is
    """

    index: Optional[int] = None
    mask: Optional[int] = None

    @property
    def is_padding(self) -> bool:
        return self.index is None

    def read(self, data: Union[bytes, bytearray, memoryview]) -> int:
        if self.index is None:
            return 0
        value = data[self.index]
        if self.mask is not None:
            value &= self.mask
        return value


ZERO_BYTE = ByteSource()


@dataclass(frozen=True)
class FieldPlan:
    """Complete extraction recipe for one field.

    Attributes:
        slot: Position of the field in the buffer
        sources: Bytes to reassemble, most significant first for big-endian
        reassembly: Reassembly rule for the field's kind
        byte_order: Byte order for INTEGER reassembly
        selector: Single-bit mask for BIT_TEST reassembly
    """

    slot: LaidOutField
    sources: Tuple[ByteSource, ...]
    reassembly: Reassembly
    byte_order: ByteOrder
    selector: Optional[int] = None

    @property
    def name(self) -> str:
        return self.slot.name

    @property
    def kind(self) -> ValueKind:
        return self.slot.field.kind

    @property
    def buffer_indices(self) -> Tuple[int, ...]:
        """Buffer indices read by this plan, in source order."""
        return tuple(source.index for source in self.sources if source.index is not None)

    def extract(self, data: Union[bytes, bytearray, memoryview]) -> Union[int, bool]:
        """Read the field's value out of ``data``.

        The caller is responsible for the length check.
        """
        if self.reassembly is Reassembly.BIT_TEST:
            return (data[self.slot.byte_offset] & self.selector) != 0
        if self.reassembly is Reassembly.BYTE:
            return self.sources[0].read(data)
        return int.from_bytes(
            bytes(source.read(data) for source in self.sources), self.byte_order.value
        )


@dataclass(frozen=True)
class DecoderSpec:
    """Everything a backend needs to decode one record type."""

    name: str
    byte_order: ByteOrder
    min_buffer_bytes: int
    fields: Tuple[FieldPlan, ...]

    @property
    def field_names(self) -> Tuple[str, ...]:
        return tuple(plan.name for plan in self.fields)

    def plan(self, name: str) -> FieldPlan:
        """Return the plan of the field called ``name``.

        Raises:
            KeyError: If no such field exists
        """
        for plan in self.fields:
            if plan.name == name:
                return plan
        raise KeyError(name)


def read_sources(slot: LaidOutField) -> Tuple[ByteSource, ...]:
    """Buffer bytes covering a field's effective bits.

    Only the first byte is masked, and only when the field starts mid-byte and
    spans more than one bit.
    """
    sources = []
    for i in range(0, slot.effective_bits, 8):
        index = slot.byte_offset + i // 8
        if i == 0 and slot.bit_offset > 0 and slot.effective_bits > 1:
            sources.append(ByteSource(index, low_bits_mask(slot.bit_offset)))
        else:
            sources.append(ByteSource(index))
    return tuple(sources)


def pad_sources(
    sources: Tuple[ByteSource, ...], width: int, byte_order: ByteOrder
) -> Tuple[ByteSource, ...]:
    """Zero-pad ``sources`` to ``width`` bytes at the high-order end."""
    padding = (ZERO_BYTE,) * max(0, width - len(sources))
    if byte_order is ByteOrder.LITTLE:
        return sources + padding
    return padding + sources


def build_field_plan(slot: LaidOutField, byte_order: ByteOrder) -> FieldPlan:
    """Derive the extraction plan of one laid-out field.

    Args:
        slot: Field position from the layout engine
        byte_order: Byte order for multi-byte integers

    Returns:
        FieldPlan for the field
    """
    kind = slot.field.kind
    reassembly = _REASSEMBLY_BY_KIND[kind]
    sources = read_sources(slot)

    if reassembly is Reassembly.BIT_TEST:
        return FieldPlan(
            slot=slot,
            sources=sources[:1],
            reassembly=reassembly,
            byte_order=byte_order,
            selector=bit_selector(slot.bit_offset),
        )

    return FieldPlan(
        slot=slot,
        sources=pad_sources(sources, kind.natural_bytes, byte_order),
        reassembly=reassembly,
        byte_order=byte_order,
    )


def compile_schema(
    schema: MessageSchema, byte_order: Union[str, ByteOrder, None] = None
) -> DecoderSpec:
    """Compile a schema into a DecoderSpec.

    Compilation is deterministic: the same schema and byte order always give
    equal specs.

    Args:
        schema: Schema to compile
        byte_order: Byte order override, defaults to the schema's own

    Returns:
        DecoderSpec for the schema

    Raises:
        SchemaError: If the schema cannot be laid out
    """
    order = schema.byte_order if byte_order is None else ByteOrder.parse(byte_order)
    layout = lay_out(schema.fields)
    plans = tuple(build_field_plan(slot, order) for slot in layout.fields)

    spec = DecoderSpec(
        name=schema.name,
        byte_order=order,
        min_buffer_bytes=layout.min_buffer_bytes,
        fields=plans,
    )
    _logger.debug(
        "compiled %s: %d fields, %d bytes, %s-endian",
        spec.name,
        len(plans),
        spec.min_buffer_bytes,
        order.value,
    )
    return spec
