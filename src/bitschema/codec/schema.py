"""Field schema model and ingestion.

This module defines the normalized representation of a packed record: an
ordered list of typed fields, each with a natural width implied by its kind
and an optional narrower wire width. Schemas can be built from Pydantic
models or from plain ``(name, kind, length)`` declarations.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Any, Iterable, Optional, Sequence, Tuple, Type, Union

from pydantic import BaseModel
from pydantic.fields import FieldInfo

from ..exceptions import SchemaError

_logger = logging.getLogger(__name__)


class ValueKind(enum.Enum):
    """Closed set of value kinds a field can hold."""

    UINT8 = "uint8"
    UINT16 = "uint16"
    UINT32 = "uint32"
    UINT64 = "uint64"
    BOOL = "bool"

    @property
    def natural_width(self) -> int:
        """Number of bits implied by the kind."""
        return _NATURAL_WIDTHS[self]

    @property
    def natural_bytes(self) -> int:
        """Number of bytes the reassembled value occupies (1 for bool)."""
        return max(1, self.natural_width // 8)

    @property
    def is_integer(self) -> bool:
        return self is not ValueKind.BOOL

    @classmethod
    def parse(cls, value: Union[str, ValueKind]) -> ValueKind:
        """Resolve a kind from its name.

        Raises:
            SchemaError: If the name is not a known value kind
        """
        if isinstance(value, ValueKind):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            known = ", ".join(kind.value for kind in cls)
            raise SchemaError(f"Unknown value kind {value!r} (known: {known})") from None


_NATURAL_WIDTHS = {
    ValueKind.UINT8: 8,
    ValueKind.UINT16: 16,
    ValueKind.UINT32: 32,
    ValueKind.UINT64: 64,
    ValueKind.BOOL: 1,
}


class ByteOrder(enum.Enum):
    """Byte order used to reassemble multi-byte integer fields."""

    BIG = "big"
    LITTLE = "little"

    @classmethod
    def parse(cls, value: Union[str, ByteOrder]) -> ByteOrder:
        """Resolve a byte order from ``"big"``/``"little"`` (also ``BigEndian``)."""
        if isinstance(value, ByteOrder):
            return value
        name = str(value).strip().lower()
        if name.endswith("endian"):
            name = name[: -len("endian")]
        try:
            return cls(name)
        except ValueError:
            raise SchemaError(
                f"Unknown byte order {value!r}, expected 'big' or 'little'"
            ) from None


@dataclass(frozen=True)
class SchemaField:
    """Schema information for a single field.

    Attributes:
        name: Field name, unique within its schema
        kind: Value kind
        declared_width: Bits the field occupies on the wire
    """

    name: str
    kind: ValueKind
    declared_width: int

    @property
    def natural_width(self) -> int:
        return self.kind.natural_width

    @property
    def is_narrowed(self) -> bool:
        """Whether the wire width is smaller than the natural width."""
        return self.declared_width < self.natural_width

    @classmethod
    def declare(
        cls, name: str, kind: Union[str, ValueKind], length: Optional[int] = None
    ) -> SchemaField:
        """Create a validated field from a declaration.

        Args:
            name: Field name
            kind: Value kind or its name (``"uint16"``)
            length: Optional wire width override in bits

        Returns:
            SchemaField instance

        Raises:
            SchemaError: If the declaration is invalid
        """
        if not name or not str(name).strip():
            raise SchemaError("Field name must not be empty")

        value_kind = ValueKind.parse(kind)
        if length is None:
            return cls(name=name, kind=value_kind, declared_width=value_kind.natural_width)

        if isinstance(length, bool) or not isinstance(length, int):
            raise SchemaError(f"Field {name}: length must be an integer, got {length!r}")

        if value_kind is ValueKind.BOOL:
            if length != 1:
                raise SchemaError(f"Field {name}: bool fields are always 1 bit, got length {length}")
            return cls(name=name, kind=value_kind, declared_width=1)

        if length <= 0:
            raise SchemaError(f"Field {name}: length must be positive, got {length}")

        if length > value_kind.natural_width:
            raise SchemaError(
                f"Field {name}: length {length} exceeds the {value_kind.natural_width}-bit "
                f"width of {value_kind.value} (widening is not supported)"
            )

        return cls(name=name, kind=value_kind, declared_width=length)


Declaration = Union[Tuple[str, Union[str, ValueKind]], Tuple[str, Union[str, ValueKind], Optional[int]]]


class MessageSchema:
    """Ordered field list of one packed record type.

    Example:
        >>> schema = MessageSchema.from_declarations(
        ...     "Header", [("version", "uint8"), ("ack", "bool"), ("seq", "uint16")]
        ... )
        >>> [field.declared_width for field in schema.fields]
        [8, 1, 16]
    """

    def __init__(
        self,
        name: str,
        fields: Iterable[SchemaField],
        byte_order: Union[str, ByteOrder] = ByteOrder.BIG,
    ) -> None:
        self.name = name
        self.fields: Tuple[SchemaField, ...] = tuple(fields)
        self.byte_order = ByteOrder.parse(byte_order)
        self._validate()

    def __repr__(self) -> str:
        return f"MessageSchema({self.name!r}, {len(self.fields)} fields, {self.byte_order.value})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, MessageSchema):
            return NotImplemented
        return (self.name, self.fields, self.byte_order) == (
            other.name,
            other.fields,
            other.byte_order,
        )

    def __hash__(self) -> int:
        return hash((self.name, self.fields, self.byte_order))

    def _validate(self) -> None:
        seen: set[str] = set()
        for field in self.fields:
            if field.name in seen:
                raise SchemaError(f"{self.name}: duplicate field name {field.name!r}")
            seen.add(field.name)

    @classmethod
    def from_declarations(
        cls,
        name: str,
        declarations: Sequence[Declaration],
        byte_order: Union[str, ByteOrder] = ByteOrder.BIG,
    ) -> MessageSchema:
        """Create a schema from ``(name, kind[, length])`` tuples.

        Raises:
            SchemaError: If any declaration is invalid
        """
        fields = []
        for declaration in declarations:
            if len(declaration) not in (2, 3):
                raise SchemaError(f"{name}: malformed declaration {declaration!r}")
            fields.append(SchemaField.declare(*declaration))
        return cls(name, fields, byte_order)

    @classmethod
    def from_model(cls, model_class: Type[BaseModel]) -> MessageSchema:
        """Create a schema from a Pydantic model.

        ``bool`` annotations become single-bit flags. ``int`` annotations must be
        declared with one of the ``UInt8``..``UInt64`` field helpers, which record
        the value kind and optional ``length`` override.

        Args:
            model_class: Pydantic model class

        Returns:
            MessageSchema instance

        Raises:
            SchemaError: If a field cannot be mapped to a value kind
        """
        fields = [
            cls._extract_field(name, field_info)
            for name, field_info in model_class.model_fields.items()
        ]
        byte_order = getattr(model_class, "bitschema_byte_order", ByteOrder.BIG)
        schema = cls(model_class.__name__, fields, byte_order)
        _logger.debug("ingested %r from %s", schema, model_class.__qualname__)
        return schema

    @staticmethod
    def _extract_field(name: str, field_info: FieldInfo) -> SchemaField:
        annotation = field_info.annotation
        if annotation is None:
            raise SchemaError(f"Field {name} has no type annotation")

        extra: dict[str, Any] = {}
        if isinstance(field_info.json_schema_extra, dict):
            extra = dict(field_info.json_schema_extra)

        kind = extra.get("kind")
        length = extra.get("length")

        if annotation is bool:
            return SchemaField.declare(name, ValueKind.BOOL, length)

        if annotation is int:
            if kind is None:
                raise SchemaError(
                    f"Field {name}: integer fields need a width, declare them with "
                    f"UInt8/UInt16/UInt32/UInt64"
                )
            if ValueKind.parse(kind) is ValueKind.BOOL:
                raise SchemaError(f"Field {name}: int annotation cannot carry kind 'bool'")
            return SchemaField.declare(name, kind, length)

        raise SchemaError(
            f"Field {name}: unsupported type {annotation}. Supported: bool, unsigned int."
        )

    def total_natural_bits(self) -> int:
        """Sum of the natural widths, ignoring overrides and packing."""
        return sum(field.natural_width for field in self.fields)
