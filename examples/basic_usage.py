#!/usr/bin/env python3
"""Basic usage example for bitschema.

This example demonstrates:
1. Declaring a packed record with Pydantic
2. Inspecting its bit layout
3. Decoding a buffer at runtime
4. Generating a standalone Python decoder
"""

from __future__ import annotations

from bitschema import (
    BaseMessage,
    TruncatedError,
    UInt8,
    UInt16,
    UInt64,
    compile_model,
    decode,
    field_layout,
    min_buffer_bytes,
    render_unmarshaller,
)


class LinkHeader(BaseMessage):
    """Radio link header with packed flags and a 48-bit timestamp."""

    version: int = UInt8()
    sequence: int = UInt8()
    urgent: bool = False
    ack_requested: bool = False
    payload_length: int = UInt16()
    timestamp: int = UInt64(length=48)


def main() -> None:
    """Run the basic usage example."""
    print("=" * 60)
    print("bitschema Basic Usage Example")
    print("=" * 60)
    print()

    print("1. Field layout (byte, bit, effective bits)...")
    for name, position in field_layout(LinkHeader).items():
        print(f"   {name}: {tuple(position)}")
    print(f"   Minimum buffer length: {min_buffer_bytes(LinkHeader)} bytes")
    print()

    print("2. Decoding a packed header...")
    data = bytes([0x01, 0x2A, 0xC0, 0x40, 0x00, 0x00, 0x01, 0x8B, 0x5E, 0x21, 0x00])
    header = decode(LinkHeader, data)
    print(f"   {header!r}")
    print()

    print("3. Truncated buffers are rejected before anything is decoded...")
    try:
        decode(LinkHeader, data[:5])
    except TruncatedError as e:
        print(f"   {e}")
    print()

    print("4. Generated decoder source...")
    print(render_unmarshaller(compile_model(LinkHeader)))


if __name__ == "__main__":
    main()
