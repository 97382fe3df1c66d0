"""bitschema: Packed Binary Record Decoder Compiler

Compiles an ordered list of typed fields (unsigned integers of 8/16/32/64 bits,
optionally narrowed, and single-bit flags) into a deterministic decoder for
tightly packed binary records such as protocol headers.

Key Features:
- Pydantic-based record modeling
- Tight packing of single-bit flags, narrowed integers (e.g. 48-bit timestamps)
- Big- or little-endian reassembly of multi-byte integers
- Runtime decoding or generated Python source

Quick Start:
    >>> from bitschema import BaseMessage, UInt8, UInt16, decode
    >>>
    >>> class Header(BaseMessage):
    ...     version: int = UInt8()
    ...     urgent: bool = False
    ...     ack: bool = False
    ...     sequence: int = UInt16()
    >>>
    >>> header = decode(Header, b"\\x01\\xc0\\x05")
"""

from __future__ import annotations

from .codec import (
    ByteOrder,
    DecoderSpec,
    FieldPlan,
    LaidOutField,
    Layout,
    MessageSchema,
    SchemaField,
    ValueKind,
    compile_model,
    compile_schema,
    decode,
    decode_fields,
    lay_out,
    unmarshal,
)
from .emit import build_unmarshaller, render_module, render_unmarshaller
from .exceptions import (
    BitschemaError,
    DecodeError,
    EmitError,
    InvalidSchema,
    SchemaError,
    Truncated,
    TruncatedError,
)
from .models import BaseMessage, UInt8, UInt16, UInt32, UInt64
from .utils import field_layout, min_buffer_bytes, total_bits

__version__ = "0.1.0"

__all__ = [
    # Core API
    "BaseMessage",
    "decode",
    "unmarshal",
    "decode_fields",
    "compile_model",
    "compile_schema",
    "lay_out",
    # Schema model
    "MessageSchema",
    "SchemaField",
    "ValueKind",
    "ByteOrder",
    "Layout",
    "LaidOutField",
    "FieldPlan",
    "DecoderSpec",
    # Field helpers
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    # Emitter
    "render_unmarshaller",
    "render_module",
    "build_unmarshaller",
    # Exceptions
    "BitschemaError",
    "SchemaError",
    "InvalidSchema",
    "DecodeError",
    "TruncatedError",
    "Truncated",
    "EmitError",
    # Sizing
    "min_buffer_bytes",
    "total_bits",
    "field_layout",
    # Version
    "__version__",
]
