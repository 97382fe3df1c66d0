"""Fixed lookup tables for isolating bits within a byte.

Bit positions count from the most significant bit: position 0 is ``0x80``.
"""

from __future__ import annotations

# Position i -> only bit i set.
BIT_SELECTORS: tuple[int, ...] = (0x80, 0x40, 0x20, 0x10, 0x08, 0x04, 0x02, 0x01)

# Position i -> keep the low (8 - i) bits, i.e. bit i and everything after it.
LOW_BIT_MASKS: tuple[int, ...] = (0xFF, 0x7F, 0x3F, 0x1F, 0x0F, 0x07, 0x03, 0x01)


def bit_selector(bit_offset: int) -> int:
    """Return the mask selecting the single bit at ``bit_offset``.

    Raises:
        ValueError: If bit_offset is outside 0-7
    """
    if not 0 <= bit_offset <= 7:
        raise ValueError(f"bit_offset must be 0-7, got {bit_offset}")
    return BIT_SELECTORS[bit_offset]


def low_bits_mask(bit_offset: int) -> int:
    """Return the mask keeping the bits from ``bit_offset`` to the end of the byte.

    Raises:
        ValueError: If bit_offset is outside 0-7
    """
    if not 0 <= bit_offset <= 7:
        raise ValueError(f"bit_offset must be 0-7, got {bit_offset}")
    return LOW_BIT_MASKS[bit_offset]
