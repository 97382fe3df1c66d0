"""End-to-end tests: record declaration to decoded values."""

from __future__ import annotations

import importlib.util
from pathlib import Path
from typing import ClassVar

import pytest

from bitschema import (
    BaseMessage,
    ByteOrder,
    TruncatedError,
    UInt8,
    UInt16,
    UInt32,
    UInt64,
    build_unmarshaller,
    compile_model,
    decode,
    field_layout,
    min_buffer_bytes,
    render_module,
    unmarshal,
)


class SensorFrame(BaseMessage):
    """Telemetry frame with a packed flag byte and a 48-bit timestamp."""

    version: int = UInt8(length=4)
    channel: int = UInt8()
    calibrated: bool = False
    low_battery: bool = False
    fault: bool = False
    reserved: bool = False
    sample_count: int = UInt8()
    sequence: int = UInt16()
    timestamp: int = UInt64(length=48)
    reading: int = UInt32()


class LittleSensorFrame(SensorFrame):
    """Same layout, little-endian integers."""

    bitschema_byte_order: ClassVar[ByteOrder] = ByteOrder.LITTLE


FRAME = bytes(
    [
        0x2A,  # version reads the whole byte, channel keeps the low nibble 0x0A
        0xA7,  # calibrated, fault, then 4 bits of sample_count
        0x12,
        0x34,
        0x00,
        0x00,
        0x01,
        0x02,
        0x03,
        0x04,
        0xDE,
        0xAD,
        0xBE,
        0xEF,
    ]
)


class TestSensorFrame:
    """Decode a realistic packed telemetry frame."""

    def test_layout(self) -> None:
        layout = field_layout(SensorFrame)
        assert layout["channel"] == (0, 4, 4)
        assert layout["reserved"] == (1, 3, 1)
        assert layout["sample_count"] == (1, 4, 4)
        assert layout["sequence"] == (2, 0, 16)
        assert layout["timestamp"] == (4, 0, 48)
        assert layout["reading"] == (10, 0, 32)
        assert min_buffer_bytes(SensorFrame) == 14

    def test_decode_big_endian(self) -> None:
        frame = decode(SensorFrame, FRAME)
        # Aligned narrow fields read their whole byte
        assert frame.version == 0x2A
        assert frame.channel == 0x0A
        assert (frame.calibrated, frame.low_battery, frame.fault, frame.reserved) == (
            True,
            False,
            True,
            False,
        )
        assert frame.sample_count == 0x07
        assert frame.sequence == 0x1234
        assert frame.timestamp == 0x000001020304
        assert frame.reading == 0xDEADBEEF

    def test_decode_little_endian(self) -> None:
        frame = decode(LittleSensorFrame, FRAME)
        assert frame.sequence == 0x3412
        assert frame.timestamp == 0x040302010000
        assert frame.reading == 0xEFBEADDE

    def test_generated_decoder_matches(self) -> None:
        unmarshal_frame = build_unmarshaller(compile_model(SensorFrame))
        generated = unmarshal_frame(SensorFrame(), FRAME)
        assert generated == decode(SensorFrame, FRAME)

    def test_unmarshal_truncated(self) -> None:
        record = decode(SensorFrame, FRAME)
        with pytest.raises(TruncatedError):
            unmarshal(record, FRAME[:-1])
        assert record == decode(SensorFrame, FRAME)

    def test_generated_module_on_disk(self, tmp_path: Path) -> None:
        path = tmp_path / "generated_frames.py"
        path.write_text(render_module([compile_model(SensorFrame)]))

        spec = importlib.util.spec_from_file_location("generated_frames", path)
        assert spec is not None and spec.loader is not None
        module = importlib.util.module_from_spec(spec)
        spec.loader.exec_module(module)

        record = module.unmarshal_sensor_frame(SensorFrame(), FRAME)
        assert record.reading == 0xDEADBEEF
        with pytest.raises(TruncatedError):
            module.unmarshal_sensor_frame(SensorFrame(), FRAME[:13])
