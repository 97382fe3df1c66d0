"""Unit tests for the runtime decoder."""

from __future__ import annotations

from typing import ClassVar

import pytest

from bitschema import (
    BaseMessage,
    ByteOrder,
    DecodeError,
    SchemaError,
    Truncated,
    TruncatedError,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    compile_model,
    compile_schema,
    decode,
    decode_fields,
    unmarshal,
)
from bitschema.codec.decoder import _compile_model_cached


class T2(BaseMessage):
    b1: int = UInt8()
    b2: int = UInt8()


class T4(BaseMessage):
    b1: int = UInt8()
    b2: int = UInt8()
    b3: bool = False
    b4: bool = False


class T5(BaseMessage):
    b1: int = UInt8()
    b2: int = UInt8()
    b3: bool = False
    b4: bool = False
    b5: int = UInt8()


class T6(BaseMessage):
    b1: int = UInt8()
    b2: int = UInt8()
    b3: bool = False
    b4: bool = False
    b5: int = UInt16()


class T7(BaseMessage):
    b1: int = UInt8()
    b2: int = UInt8()
    b3: bool = False
    b4: bool = False
    b5: int = UInt64(length=48)


class LittleCounters(BaseMessage):
    """Record decoded little-endian by default."""

    short: int = UInt16()
    word: int = UInt32()

    bitschema_byte_order: ClassVar[ByteOrder] = ByteOrder.LITTLE


class Percent(BaseMessage):
    """Record whose model rejects part of the wire range."""

    value: int = UInt8(le=100)


class Pair(BaseMessage):
    """Record whose second field rejects part of the wire range."""

    first: int = UInt8()
    second: int = UInt8(le=100)


class TestDecode:
    """Test decoding into new message instances."""

    def test_two_bytes(self) -> None:
        msg = decode(T2, bytes([0x05, 0x09]))
        assert (msg.b1, msg.b2) == (5, 9)

    def test_flags(self) -> None:
        msg = decode(T4, bytes([0x00, 0x00, 0xC0]))
        assert msg.b3 is True
        assert msg.b4 is True

    def test_flags_declaration_order_from_msb(self) -> None:
        msg = decode(T4, bytes([0x00, 0x00, 0x40]))
        assert (msg.b3, msg.b4) == (False, True)

    def test_byte_after_flags(self) -> None:
        msg = decode(T5, bytes([0x00, 0x00, 0b11_010101]))
        assert msg.b3 and msg.b4
        assert msg.b5 == 21

    def test_uint16_after_flags(self) -> None:
        msg = decode(T6, bytes([0x00, 0x00, 0xFF, 0x02]))
        assert msg.b5 == 0x3F02

    def test_narrowed_uint64(self, t7_payload: bytes) -> None:
        msg = decode(T7, t7_payload)
        assert (msg.b1, msg.b2) == (1, 2)
        assert msg.b5 == 0x3F1122334455

    def test_narrowed_uint64_little_endian(self, t7_payload: bytes) -> None:
        msg = decode(T7, t7_payload, byte_order="little")
        assert msg.b5 == 0x55443322113F

    def test_class_byte_order(self) -> None:
        data = bytes([0x01, 0x02, 0x01, 0x00, 0x00, 0x00])
        msg = decode(LittleCounters, data)
        assert msg.short == 0x0201
        assert msg.word == 1

    def test_byte_order_override(self) -> None:
        data = bytes([0x01, 0x02, 0x00, 0x00, 0x00, 0x01])
        msg = decode(LittleCounters, data, byte_order=ByteOrder.BIG)
        assert msg.short == 0x0102
        assert msg.word == 1

    def test_trailing_bytes_ignored(self) -> None:
        msg = decode(T2, bytes([0x05, 0x09, 0xFF, 0xFF]))
        assert (msg.b1, msg.b2) == (5, 9)

    def test_bytearray_input(self) -> None:
        msg = decode(T2, bytearray([0x05, 0x09]))
        assert msg.b2 == 9


class TestDecodeErrors:
    """Test decoding error handling."""

    @pytest.mark.parametrize("model, size", [(T2, 2), (T4, 3), (T5, 3), (T6, 4), (T7, 8)])
    def test_one_byte_short(self, model: type[BaseMessage], size: int) -> None:
        with pytest.raises(TruncatedError) as excinfo:
            decode(model, bytes(size - 1))
        assert excinfo.value.needed == size
        assert excinfo.value.available == size - 1

    def test_truncated_is_decode_error(self) -> None:
        with pytest.raises(DecodeError, match="need 2 bytes, got 0"):
            decode(T2, b"")

    def test_truncated_alias(self) -> None:
        with pytest.raises(Truncated):
            decode(T2, b"\x01")

    def test_model_rejects_value(self) -> None:
        with pytest.raises(DecodeError, match="Percent"):
            decode(Percent, b"\xff")

    def test_invalid_schema(self) -> None:
        class Untyped(BaseMessage):
            count: int = 0

        with pytest.raises(SchemaError):
            decode(Untyped, b"\x00")


class TestUnmarshal:
    """Test decoding into an existing record."""

    def test_in_place(self) -> None:
        record = T5()
        result = unmarshal(record, bytes([0x05, 0x09, 0b10_000011]))
        assert result is record
        assert (record.b1, record.b2, record.b3, record.b4, record.b5) == (5, 9, True, False, 3)

    def test_truncation_leaves_record_untouched(self) -> None:
        record = T7()
        with pytest.raises(TruncatedError):
            unmarshal(record, bytes(range(1, 8)))
        assert record == T7()

    def test_truncation_keeps_previous_values(self) -> None:
        record = decode(T2, bytes([0x05, 0x09]))
        with pytest.raises(TruncatedError):
            unmarshal(record, b"\x01")
        assert (record.b1, record.b2) == (5, 9)

    def test_rejected_value_leaves_record_untouched(self) -> None:
        """A value the model rejects leaves every field at its previous value."""
        record = Pair(first=1, second=2)
        with pytest.raises(DecodeError, match="Pair"):
            unmarshal(record, bytes([7, 200]))
        assert record == Pair(first=1, second=2)

    def test_accepted_values_assigned(self) -> None:
        record = Pair()
        unmarshal(record, bytes([7, 100]))
        assert (record.first, record.second) == (7, 100)

class TestDecodeFields:
    """Test decoding straight from a compiled spec."""

    def test_mapping_in_declaration_order(self, reference_schema) -> None:
        spec = compile_schema(reference_schema("T5"))
        values = decode_fields(spec, bytes([5, 9, 0b01_000111]))
        assert list(values) == ["b1", "b2", "b3", "b4", "b5"]
        assert values == {"b1": 5, "b2": 9, "b3": False, "b4": True, "b5": 7}

    def test_truncated(self, reference_schema) -> None:
        spec = compile_schema(reference_schema("T6"))
        with pytest.raises(TruncatedError, match="T6"):
            decode_fields(spec, bytes(3))

    def test_compile_model_is_cached(self) -> None:
        assert compile_model(T7) is compile_model(T7)
        assert compile_model(T7) is not compile_model(T7, "little")

    def test_compile_model_cache_is_bounded(self) -> None:
        """Dynamically loaded classes are evicted once the cache fills up."""
        assert _compile_model_cached.cache_info().maxsize == 128

    def test_compile_model_matches_declarations(self, reference_schema) -> None:
        assert compile_model(T7).fields == compile_schema(reference_schema("T7")).fields
