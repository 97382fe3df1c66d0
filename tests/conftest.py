"""Pytest configuration and shared fixtures."""

from __future__ import annotations

import pytest

from bitschema import MessageSchema

# Record shapes covering aligned bytes, packed flags, mid-byte integers and a
# narrowed 64-bit field.
REFERENCE_DECLARATIONS = {
    "T1": [("length", "uint8")],
    "T2": [("b1", "uint8"), ("b2", "uint8")],
    "T3": [("b1", "uint8"), ("b2", "uint8"), ("b3", "bool")],
    "T4": [("b1", "uint8"), ("b2", "uint8"), ("b3", "bool"), ("b4", "bool")],
    "T5": [("b1", "uint8"), ("b2", "uint8"), ("b3", "bool"), ("b4", "bool"), ("b5", "uint8")],
    "T6": [("b1", "uint8"), ("b2", "uint8"), ("b3", "bool"), ("b4", "bool"), ("b5", "uint16")],
    "T7": [
        ("b1", "uint8"),
        ("b2", "uint8"),
        ("b3", "bool"),
        ("b4", "bool"),
        ("b5", "uint64", 48),
    ],
}


@pytest.fixture
def reference_schema():
    """Factory building one of the reference schemas by name."""

    def build(name: str, byte_order: str = "big") -> MessageSchema:
        return MessageSchema.from_declarations(name, REFERENCE_DECLARATIONS[name], byte_order)

    return build


@pytest.fixture
def t7_payload() -> bytes:
    """Eight-byte buffer for the T7 record: both flags set, b5 = 0x3F1122334455."""
    return bytes([0x01, 0x02, 0xFF, 0x11, 0x22, 0x33, 0x44, 0x55])
