# bvdomains/rounding.py
"""
Bit-trick rounding primitives.

These round an arithmetic bound up to the nearest value that is also
admissible under the bitwise order ``≤b``:

    a ≤b b   ⟺   a & b == a          (every bit of a is set in b)

    ┌──────────────────────────────────────────────────────────────┐
    │  smear(v)                   fill at and below the top bit    │
    │  round_above(x, mask)       least z ≥ x   with  mask ≤b z    │
    │  round_between(x, lo, hi)   least z ≥ x   with  lo ≤b z ≤b hi│
    └──────────────────────────────────────────────────────────────┘

All three work on unsigned ``width``-bit words, use a constant number of
word operations (``smear`` is O(log width)) and never branch on data
beyond the single early exit in ``round_between``.  They require
``width >= 1``.
"""

from __future__ import annotations

from .words import check_width, mask as _mask


def smear(v: int, width: int) -> int:
    """
    Set every bit at or below the highest set bit of *v*.

    >>> bin(smear(0b0100_1000, 8))
    '0b1111111'
    >>> smear(0, 8)
    0
    """
    check_width(width, operation="smear", minimum=1)
    v &= _mask(width)
    shift = 1
    while shift < width:
        v |= v >> shift
        shift <<= 1
    return v


def round_above(x: int, mask: int, width: int) -> int:
    """
    Least ``z >= x`` (unsigned) with ``mask ≤b z``.

    ``q`` covers every position at or below the highest bit that *mask*
    requires but *x* lacks.  Above ``q`` the result keeps *x*; inside ``q``
    it takes exactly the bits of *mask*, which sets the offending bit and
    clears everything below it.  If *x* already has every bit of *mask*
    then ``q == 0`` and *x* is returned unchanged.

    The result always fits in *width* bits: ``mask`` does.

    >>> bin(round_above(0b0101, 0b1100, 4))
    '0b1100'
    """
    check_width(width, operation="round_above", minimum=1)
    m = _mask(width)
    x &= m
    mask &= m
    q = smear((x | mask) ^ x, width)
    return (x & ~q & m) | (mask & q)


def round_between(x: int, lomask: int, himask: int, width: int) -> int:
    """
    Least ``z >= x`` (unsigned) with ``lomask ≤b z ≤b himask``.

    Preconditions: ``lomask ≤b himask`` and ``lomask <= x <= himask``.
    Under them a result always exists (``himask`` itself qualifies).

    After rounding up for *lomask*, any bit the value carries outside
    *himask* must be cleared.  The highest such bit is cleared by adding
    it once more after filling every forbidden position with ones, so the
    carry ripples past forbidden bits and stops on the next allowed one.
    Everything below that position is then reset to *lomask*.

    >>> bin(round_between(0b0100, 0b0001, 0b1011, 4))
    '0b1001'
    """
    check_width(width, operation="round_between", minimum=1)
    m = _mask(width)
    x &= m
    lomask &= m
    himask &= m
    if lomask & ~himask:
        raise ValueError(
            f"round_between: lomask {lomask:#x} is not bitwise below himask {himask:#x}"
        )
    if not lomask <= x <= himask:
        raise ValueError(
            f"round_between: {x:#x} outside [{lomask:#x}, {himask:#x}]"
        )

    loup = round_above(x, lomask, width)
    r = loup & ~himask
    if r == 0:
        return loup

    rmask = smear(r, width)
    lowbits = rmask >> 1
    highbit = rmask ^ lowbits

    z = loup | (~himask & m)
    upper = (z + highbit) & himask
    return (upper & ~lowbits) | lomask


__all__ = ["smear", "round_above", "round_between"]
