# bvdomains/bitwise.py
"""
Masked-interval ("bitwise") domain for fixed-width bitvectors.

A domain element is a pair of ``width``-bit words ``(lomask, himask)``
denoting every value between them under the bitwise order:

    γ(lomask, himask) = { x | lomask ≤b x ≤b himask }
    a ≤b b   ⟺   a & b == a

Bits set in ``lomask`` are known to be 1, bits clear in ``himask`` are
known to be 0, everything else is unknown.  ``lomask ≤b himask`` fails
exactly when some bit is required to be both 1 and 0; such a pair is a
valid encoding of the empty set ⊥ rather than an error.

    ⊥:   any pair with  lomask & ~himask != 0   (canonical: lo = all ones, hi = 0)
    ⊤:   lomask = 0, himask = all ones
    {v}: lomask = himask = v

Every operation below is sound: concrete results of members are members
of the abstract result.  ``band``, ``bor``, ``bxor``, ``bnot``, the
shifts, rotations, extensions and extractions are also exact on
singletons.  ``intersection`` is exact for all inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from functools import reduce
from typing import Iterable, Iterator, Optional, Tuple

from .errors import InvalidWidth
from .words import bit, check_same_width, check_width, mask, popcount, to_signed


# abstract rotation amounts with at most this many members are enumerated
_ROTATION_ENUM_LIMIT = 1 << 12


def bitle(a: int, b: int) -> bool:
    """Bitwise order ``a ≤b b``: every bit set in *a* is set in *b*."""
    return a & b == a


@dataclass(frozen=True, slots=True)
class BitwiseDomain:
    """
    Bitwise abstract domain over ``width``-bit words.

    Examples
    --------
    >>> d = BitwiseDomain(4, 0b0100, 0b1101)
    >>> sorted(d.members())
    [4, 5, 12, 13]
    >>> d.mem(0b0101), d.mem(0b0110)
    (True, False)
    >>> d & BitwiseDomain.singleton(4, 0b0110)
    Bitwise<4>(0x4)
    """
    width: int
    lomask: int
    himask: int

    def __post_init__(self) -> None:
        check_width(self.width, operation="BitwiseDomain")
        m = mask(self.width)
        object.__setattr__(self, "lomask", self.lomask & m)
        object.__setattr__(self, "himask", self.himask & m)

    # ---- Constructors ----------------------------------------------------

    @classmethod
    def top(cls, width: int) -> BitwiseDomain:
        return cls(width, 0, mask(width))

    @classmethod
    def singleton(cls, width: int, value: int) -> BitwiseDomain:
        return cls(width, value, value)

    @classmethod
    def empty(cls, width: int) -> BitwiseDomain:
        """Canonical ⊥.  At width 0 no bit can conflict, so there is none."""
        if width == 0:
            raise InvalidWidth(
                width, operation="empty", reason="the 0-bit domain cannot be empty"
            )
        return cls(width, mask(width), 0)

    @classmethod
    def from_bits(cls, width: int, known_zero: int, known_one: int) -> BitwiseDomain:
        """Build from the sets of bits known to be 0 and known to be 1."""
        return cls(width, known_one, ~known_zero)

    @classmethod
    def from_values(cls, width: int, values: Iterable[int]) -> BitwiseDomain:
        """
        Smallest domain containing every value, ⊥ for no values.

        Width 0 has no ⊥, so an empty *values* raises ``InvalidWidth`` there.
        """
        m = mask(width)
        lo, hi = m, 0
        seen = False
        for v in values:
            lo &= v
            hi |= v
            seen = True
        if not seen:
            if width == 0:
                raise InvalidWidth(
                    width,
                    operation="from_values",
                    reason="no values given and the 0-bit domain cannot be empty",
                )
            return cls.empty(width)
        return cls(width, lo & m, hi & m)

    # ---- Predicates and queries ------------------------------------------

    def mem(self, x: int) -> bool:
        if not 0 <= x <= mask(self.width):
            return False
        return bitle(self.lomask, x) and bitle(x, self.himask)

    def __contains__(self, x: object) -> bool:
        return isinstance(x, int) and self.mem(x)

    def nonempty(self) -> bool:
        return bitle(self.lomask, self.himask)

    def is_empty(self) -> bool:
        return not self.nonempty()

    def is_singleton(self) -> bool:
        return self.lomask == self.himask

    def is_top(self) -> bool:
        return self.lomask == 0 and self.himask == mask(self.width)

    def const_value(self) -> Optional[int]:
        return self.lomask if self.is_singleton() else None

    def unknowns(self) -> int:
        """Positions not fixed across the members."""
        return self.lomask ^ self.himask

    def size(self) -> int:
        """Number of members."""
        if not self.nonempty():
            return 0
        return 1 << popcount(self.unknowns())

    def members(self) -> Iterator[int]:
        """Members in ascending order.  Only practical for few unknowns."""
        if not self.nonempty():
            return
        u = self.unknowns()
        sub = 0
        while True:
            yield self.lomask | sub
            if sub == u:
                return
            sub = (sub - u) & u

    def leq(self, other: BitwiseDomain) -> bool:
        """Set inclusion  γ(self) ⊆ γ(other)."""
        check_same_width(self.width, other.width, operation="leq")
        if not self.nonempty():
            return True
        if not other.nonempty():
            return False
        return bitle(other.lomask, self.lomask) and bitle(self.himask, other.himask)

    def test_bit(self, index: int) -> Optional[bool]:
        """``True``/``False`` if bit *index* is fixed in every member, else ``None``."""
        if not 0 <= index < self.width:
            raise IndexError(f"bit {index} out of range for width {self.width}")
        if bit(self.lomask, index):
            return True
        if not bit(self.himask, index):
            return False
        return None

    def ubounds(self) -> Optional[Tuple[int, int]]:
        """Unsigned (min, max) of the members, ``None`` when empty."""
        if not self.nonempty():
            return None
        return self.lomask, self.himask

    def sbounds(self) -> Optional[Tuple[int, int]]:
        """Signed (min, max) of the members, ``None`` when empty."""
        if not self.nonempty():
            return None
        if self.width == 0:
            return 0, 0
        sign = 1 << (self.width - 1)
        lo = self.lomask | (self.himask & sign)
        hi = self.himask & ~(sign & ~self.lomask)
        return to_signed(lo, self.width), to_signed(hi, self.width)

    # ---- Lattice operations ----------------------------------------------

    def intersection(self, other: BitwiseDomain) -> BitwiseDomain:
        check_same_width(self.width, other.width, operation="intersection")
        return BitwiseDomain(
            self.width, self.lomask | other.lomask, self.himask & other.himask
        )

    def union(self, other: BitwiseDomain) -> BitwiseDomain:
        check_same_width(self.width, other.width, operation="union")
        if not self.nonempty():
            return other
        if not other.nonempty():
            return self
        return BitwiseDomain(
            self.width, self.lomask & other.lomask, self.himask | other.himask
        )

    def overlap(self, other: BitwiseDomain) -> bool:
        return self.intersection(other).nonempty()

    # ---- Abstract bitwise operations -------------------------------------

    def bnot(self) -> BitwiseDomain:
        m = mask(self.width)
        return BitwiseDomain(self.width, ~self.himask & m, ~self.lomask & m)

    def band(self, other: BitwiseDomain) -> BitwiseDomain:
        check_same_width(self.width, other.width, operation="band")
        return BitwiseDomain(
            self.width, self.lomask & other.lomask, self.himask & other.himask
        )

    def bor(self, other: BitwiseDomain) -> BitwiseDomain:
        check_same_width(self.width, other.width, operation="bor")
        return BitwiseDomain(
            self.width, self.lomask | other.lomask, self.himask | other.himask
        )

    def bxor(self, other: BitwiseDomain) -> BitwiseDomain:
        check_same_width(self.width, other.width, operation="bxor")
        u = self.unknowns() | other.unknowns()
        hi = (self.lomask ^ other.lomask) | u
        return BitwiseDomain(self.width, hi ^ u, hi)

    __and__ = band
    __or__ = bor
    __xor__ = bxor
    __invert__ = bnot

    # ---- Shifts and rotations by a known amount --------------------------

    def _amount(self, k: int, operation: str) -> int:
        if k < 0:
            raise ValueError(f"{operation}: negative shift amount {k}")
        return min(k, self.width)

    def shl(self, k: int) -> BitwiseDomain:
        k = self._amount(k, "shl")
        return BitwiseDomain(self.width, self.lomask << k, self.himask << k)

    def lshr(self, k: int) -> BitwiseDomain:
        k = self._amount(k, "lshr")
        return BitwiseDomain(self.width, self.lomask >> k, self.himask >> k)

    def ashr(self, k: int) -> BitwiseDomain:
        check_width(self.width, operation="ashr", minimum=1)
        k = self._amount(k, "ashr")
        return BitwiseDomain(
            self.width,
            to_signed(self.lomask, self.width) >> k,
            to_signed(self.himask, self.width) >> k,
        )

    def _rotl_word(self, w: int, k: int) -> int:
        return (w << k) | (w >> (self.width - k))

    def rol(self, k: int) -> BitwiseDomain:
        if self.width == 0:
            return self
        k %= self.width
        return BitwiseDomain(
            self.width, self._rotl_word(self.lomask, k), self._rotl_word(self.himask, k)
        )

    def ror(self, k: int) -> BitwiseDomain:
        if self.width == 0:
            return self
        return self.rol(-k % self.width)

    # ---- Shifts and rotations by an abstract amount ----------------------
    #
    #  Each admissible amount is applied separately and the results are
    #  joined.  Shift amounts are clamped to the width, rotation amounts
    #  reduced modulo the width, so at most ``width + 1`` cases arise.

    def _shift_amounts(self, amount: BitwiseDomain) -> Iterator[int]:
        for k in range(self.width):
            if amount.mem(k):
                yield k
        if amount.nonempty() and amount.himask >= self.width:
            yield self.width

    def _rotation_amounts(self, amount: BitwiseDomain) -> Iterable[int]:
        n = self.width
        if amount.size() <= n:
            return sorted({v % n for v in amount.members()})
        if n & (n - 1) == 0:
            low = amount.trunc(n.bit_length() - 1)
            return list(low.members())
        if amount.size() <= _ROTATION_ENUM_LIMIT:
            return sorted({v % n for v in amount.members()})
        return range(n)

    def _join_all(self, results: Iterable[BitwiseDomain]) -> BitwiseDomain:
        results = list(results)
        if not results:
            return BitwiseDomain.empty(self.width) if self.width else self
        return reduce(BitwiseDomain.union, results)

    def shl_by(self, amount: BitwiseDomain) -> BitwiseDomain:
        return self._join_all(self.shl(k) for k in self._shift_amounts(amount))

    def lshr_by(self, amount: BitwiseDomain) -> BitwiseDomain:
        return self._join_all(self.lshr(k) for k in self._shift_amounts(amount))

    def ashr_by(self, amount: BitwiseDomain) -> BitwiseDomain:
        check_width(self.width, operation="ashr", minimum=1)
        return self._join_all(self.ashr(k) for k in self._shift_amounts(amount))

    def rol_by(self, amount: BitwiseDomain) -> BitwiseDomain:
        if self.width == 0:
            return self
        return self._join_all(self.rol(k) for k in self._rotation_amounts(amount))

    def ror_by(self, amount: BitwiseDomain) -> BitwiseDomain:
        if self.width == 0:
            return self
        return self._join_all(self.ror(k) for k in self._rotation_amounts(amount))

    # ---- Width changes ---------------------------------------------------

    def zero_ext(self, width: int) -> BitwiseDomain:
        if width < self.width:
            raise InvalidWidth(
                width, operation="zero_ext", reason=f"cannot extend {self.width} bits to fewer"
            )
        return BitwiseDomain(width, self.lomask, self.himask)

    def sign_ext(self, width: int) -> BitwiseDomain:
        check_width(self.width, operation="sign_ext", minimum=1)
        if width < self.width:
            raise InvalidWidth(
                width, operation="sign_ext", reason=f"cannot extend {self.width} bits to fewer"
            )
        return BitwiseDomain(
            width, to_signed(self.lomask, self.width), to_signed(self.himask, self.width)
        )

    def concat(self, low: BitwiseDomain) -> BitwiseDomain:
        """``self`` supplies the most significant bits, *low* the rest."""
        shift = low.width
        return BitwiseDomain(
            self.width + low.width,
            (self.lomask << shift) | low.lomask,
            (self.himask << shift) | low.himask,
        )

    def select(self, index: int, width: int) -> BitwiseDomain:
        """Bits ``[index, index + width)``, counted from the least significant bit."""
        if index < 0 or width < 0 or index + width > self.width:
            raise InvalidWidth(
                width,
                operation="select",
                reason=f"bits [{index}, {index + width}) outside a {self.width}-bit domain",
            )
        return BitwiseDomain(width, self.lomask >> index, self.himask >> index)

    def slice(self, start: int, width: int) -> BitwiseDomain:
        """*width* bits starting *start* bits below the most significant end."""
        return self.select(self.width - (start + width), width)

    def shrink(self, width: int) -> BitwiseDomain:
        """Keep the top *width* bits."""
        return self.select(self.width - width, width)

    def trunc(self, width: int) -> BitwiseDomain:
        """Keep the bottom *width* bits."""
        return self.select(0, width)

    def __repr__(self) -> str:
        if not self.nonempty():
            return f"Bitwise<{self.width}>(⊥)"
        if self.is_singleton():
            return f"Bitwise<{self.width}>(0x{self.lomask:x})"
        return f"Bitwise<{self.width}>(lo=0x{self.lomask:x}, hi=0x{self.himask:x})"


__all__ = ["BitwiseDomain", "bitle"]
