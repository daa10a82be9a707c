# bvdomains/xor.py
"""
XOR-affine domain over ``width``-bit words.

An element is a coset of the subspace spanned by the ``unknown`` bits:

    γ(val, unknown) = { v | (v ^ val) & ~unknown == 0 }

Values are normalised so that ``unknown ≤b val`` (unknown positions are
stored as 1 in ``val``).  Membership ignores those positions, so the
normalisation never changes the denoted set, and it makes ``val`` the
largest member, which is what the bitwise conversion reads back.

AND with a constant, OR with a constant and XOR are exact here; AND of two
cosets is exact on the bitwise view of nonempty operands.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from .words import check_same_width, check_width, mask, popcount


@dataclass(frozen=True, slots=True)
class XorDomain:
    """
    Examples
    --------
    >>> x = XorDomain(4, 0b0100, 0b1000)
    >>> x
    Xor<4>(val=0xc, unknown=0x8)
    >>> sorted(x.members())
    [4, 12]
    """
    width: int
    val: int
    unknown: int

    def __post_init__(self) -> None:
        check_width(self.width, operation="XorDomain")
        m = mask(self.width)
        unknown = self.unknown & m
        object.__setattr__(self, "unknown", unknown)
        object.__setattr__(self, "val", (self.val | unknown) & m)

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def top(cls, width: int) -> XorDomain:
        return cls(width, mask(width), mask(width))

    @classmethod
    def singleton(cls, width: int, value: int) -> XorDomain:
        return cls(width, value, 0)

    # ---- Queries ---------------------------------------------------------

    def mem(self, x: int) -> bool:
        if not 0 <= x <= mask(self.width):
            return False
        return (x ^ self.val) & ~self.unknown == 0

    def __contains__(self, x: object) -> bool:
        return isinstance(x, int) and self.mem(x)

    def nonempty(self) -> bool:
        return True

    def is_singleton(self) -> bool:
        return self.unknown == 0

    def size(self) -> int:
        return 1 << popcount(self.unknown)

    def members(self) -> Iterator[int]:
        base = self.val & ~self.unknown
        sub = 0
        while True:
            yield base | sub
            if sub == self.unknown:
                return
            sub = (sub - self.unknown) & self.unknown

    # ---- Abstract operations ---------------------------------------------

    def band(self, other: XorDomain) -> XorDomain:
        check_same_width(self.width, other.width, operation="band")
        h = self.val & other.val
        return XorDomain(self.width, h, h & (self.unknown | other.unknown))

    def bxor(self, other: XorDomain) -> XorDomain:
        check_same_width(self.width, other.width, operation="bxor")
        u = self.unknown | other.unknown
        return XorDomain(self.width, (self.val ^ other.val) | u, u)

    def band_scalar(self, c: int) -> XorDomain:
        c &= mask(self.width)
        return XorDomain(self.width, self.val & c, self.unknown & c)

    def bor_scalar(self, c: int) -> XorDomain:
        c &= mask(self.width)
        return XorDomain(self.width, self.val | c, self.unknown & ~c)

    def bxor_scalar(self, c: int) -> XorDomain:
        c &= mask(self.width)
        return XorDomain(self.width, (self.val ^ c) | self.unknown, self.unknown)

    __and__ = band
    __xor__ = bxor

    def __repr__(self) -> str:
        return f"Xor<{self.width}>(val=0x{self.val:x}, unknown=0x{self.unknown:x})"


__all__ = ["XorDomain"]
