"""Bit counting helpers."""

_MASK32 = 0xFFFFFFFF


def nlz32(x: int) -> int:
    """Return the number of leading zero bits of ``x`` as an unsigned 32-bit integer."""
    return 32 - (x & _MASK32).bit_length()