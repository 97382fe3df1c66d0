"""Packed-record decoding for bitschema.

This module lays out field schemas bit by bit, derives per-field extraction
plans and decodes buffers with them.
"""

from __future__ import annotations

from .decoder import compile_model, decode, decode_fields, unmarshal
from .layout import LaidOutField, Layout, lay_out
from .plan import ByteSource, DecoderSpec, FieldPlan, Reassembly, build_field_plan, compile_schema
from .schema import ByteOrder, MessageSchema, SchemaField, ValueKind

__all__ = [
    "decode",
    "decode_fields",
    "unmarshal",
    "compile_model",
    "compile_schema",
    "build_field_plan",
    "lay_out",
    "Layout",
    "LaidOutField",
    "ByteSource",
    "FieldPlan",
    "DecoderSpec",
    "Reassembly",
    "ByteOrder",
    "MessageSchema",
    "SchemaField",
    "ValueKind",
]
