"""Exception hierarchy for bitschema.

This module defines all custom exceptions used throughout the package.
All exceptions inherit from BitschemaError for easy catching of any bitschema-specific error.
"""

from __future__ import annotations


class BitschemaError(Exception):
    """Base exception for all bitschema errors."""

    pass


class SchemaError(BitschemaError):
    """Raised when a field schema is invalid.

    Examples:
        - Unknown value kind
        - Boolean field with a length override other than 1
        - Zero, negative or widening length override
        - Duplicate field names
        - A narrowed field that would move the bit cursor backwards
    """

    pass


# Name used by the error taxonomy of the layout engine
InvalidSchema = SchemaError


class DecodeError(BitschemaError):
    """Raised when decoding binary data fails."""

    pass


class TruncatedError(DecodeError):
    """Raised when a buffer is shorter than the schema's minimum length.

    The check runs before any field is extracted, so the target record is
    never partially updated.

    Attributes:
        needed: Minimum number of bytes the schema requires
        available: Number of bytes actually supplied
    """

    def __init__(self, needed: int, available: int, name: str | None = None) -> None:
        self.needed = needed
        self.available = available
        self.name = name
        target = f" for {name}" if name else ""
        super().__init__(f"Truncated data{target}: need {needed} bytes, got {available}")

    def __reduce__(self) -> tuple[type[TruncatedError], tuple[int, int, str | None]]:
        return (type(self), (self.needed, self.available, self.name))


Truncated = TruncatedError


class EmitError(BitschemaError):
    """Raised when a decoder spec cannot be rendered to source text."""

    pass
