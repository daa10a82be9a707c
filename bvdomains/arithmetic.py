# bvdomains/arithmetic.py
"""
Cyclic interval domain over ``width``-bit words.

An element is a run of ``sz`` consecutive values starting at ``lo`` and
wrapping modulo ``2**width``:

    γ(lo, sz) = { (lo + i) mod 2**width  |  0 ≤ i < sz }      1 ≤ sz ≤ 2**width

The run is never empty; ``sz == 2**width`` is ⊤.  Only the accessors the
conversion and overlap layers consume are part of the contract
(:class:`bvdomains.interfaces.ArithmeticLike`): ``range``, ``unknowns``,
``lo`` and ``mem``.  The rest is convenience for callers and tests.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator, Tuple

from .words import check_same_width, check_width, mask


@dataclass(frozen=True, slots=True)
class ArithmeticDomain:
    """
    Examples
    --------
    >>> a = ArithmeticDomain.range(4, 14, 1)
    >>> list(a.members())
    [14, 15, 0, 1]
    >>> bin(a.unknowns())
    '0b1111'
    """
    width: int
    lo: int
    sz: int

    def __post_init__(self) -> None:
        check_width(self.width, operation="ArithmeticDomain")
        object.__setattr__(self, "lo", self.lo & mask(self.width))
        if not 1 <= self.sz <= 1 << self.width:
            raise ValueError(
                f"ArithmeticDomain: size {self.sz} outside [1, 2**{self.width}]"
            )

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def top(cls, width: int) -> ArithmeticDomain:
        return cls(width, 0, 1 << width)

    @classmethod
    def singleton(cls, width: int, value: int) -> ArithmeticDomain:
        return cls(width, value, 1)

    @classmethod
    def range(cls, width: int, lo: int, hi: int) -> ArithmeticDomain:
        """Smallest run from *lo* up to *hi* inclusive, wrapping if ``hi < lo``."""
        m = mask(width)
        lo &= m
        hi &= m
        return cls(width, lo, ((hi - lo) & m) + 1)

    # ---- Queries ---------------------------------------------------------

    @property
    def hi(self) -> int:
        """Last member of the run."""
        return (self.lo + self.sz - 1) & mask(self.width)

    def mem(self, x: int) -> bool:
        if not 0 <= x <= mask(self.width):
            return False
        return (x - self.lo) & mask(self.width) < self.sz

    def __contains__(self, x: object) -> bool:
        return isinstance(x, int) and self.mem(x)

    def nonempty(self) -> bool:
        return True

    def is_singleton(self) -> bool:
        return self.sz == 1

    def is_top(self) -> bool:
        return self.sz == 1 << self.width

    def wraps(self) -> bool:
        return self.lo + self.sz - 1 > mask(self.width)

    def unknowns(self) -> int:
        """Bit positions that are not constant across the run."""
        diff = self.lo ^ (self.lo + self.sz - 1)
        return ((1 << diff.bit_length()) - 1) & mask(self.width)

    def ubounds(self) -> Tuple[int, int]:
        if self.wraps():
            return 0, mask(self.width)
        return self.lo, self.hi

    def members(self) -> Iterator[int]:
        m = mask(self.width)
        for i in range(self.sz):
            yield (self.lo + i) & m

    def leq(self, other: ArithmeticDomain) -> bool:
        """Set inclusion."""
        check_same_width(self.width, other.width, operation="leq")
        if other.is_top():
            return True
        offset = (self.lo - other.lo) & mask(self.width)
        return offset + self.sz <= other.sz

    def __repr__(self) -> str:
        if self.is_top():
            return f"Arith<{self.width}>(⊤)"
        return f"Arith<{self.width}>([0x{self.lo:x}, 0x{self.hi:x}])"


__all__ = ["ArithmeticDomain"]
