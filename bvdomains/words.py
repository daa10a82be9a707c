# bvdomains/words.py
"""
Fixed-width unsigned word helpers.

Words are plain Python ``int`` values in ``[0, 2**width)``.  Every helper
here takes the width explicitly; nothing is tied to a machine word size.
"""

from __future__ import annotations

from .errors import InvalidWidth, WidthMismatch


def mask(width: int) -> int:
    """All-ones word of the given width (0 for width 0)."""
    if width < 0:
        raise InvalidWidth(width, operation="mask", reason="width must be non-negative")
    return (1 << width) - 1


def check_width(width: int, *, operation: str, minimum: int = 0) -> int:
    """Reject widths below *minimum*; return the width unchanged."""
    if not isinstance(width, int) or isinstance(width, bool):
        raise InvalidWidth(width, operation=operation, reason="width must be an int")
    if width < minimum:
        if minimum == 0:
            reason = "width must be non-negative"
        else:
            reason = f"width must be at least {minimum}"
        raise InvalidWidth(width, operation=operation, reason=reason)
    return width


def check_same_width(left: int, right: int, *, operation: str) -> int:
    if left != right:
        raise WidthMismatch(left, right, operation=operation)
    return left


def to_signed(value: int, width: int) -> int:
    """Two's-complement reading of an unsigned *width*-bit word."""
    check_width(width, operation="to_signed", minimum=1)
    value &= mask(width)
    if value >> (width - 1):
        return value - (1 << width)
    return value


def from_signed(value: int, width: int) -> int:
    """Wrap a Python integer into an unsigned *width*-bit word."""
    return value & mask(width)


def popcount(word: int) -> int:
    return bin(word).count("1")


def clz(word: int, width: int) -> int:
    """Leading zeros of a *width*-bit word; ``width`` for the zero word."""
    word &= mask(width)
    return width - word.bit_length()


def ctz(word: int, width: int) -> int:
    """Trailing zeros of a *width*-bit word; ``width`` for the zero word."""
    word &= mask(width)
    if word == 0:
        return width
    return (word & -word).bit_length() - 1


def bit(word: int, index: int) -> int:
    return (word >> index) & 1


__all__ = [
    "mask",
    "check_width",
    "check_same_width",
    "to_signed",
    "from_signed",
    "popcount",
    "clz",
    "ctz",
    "bit",
]
