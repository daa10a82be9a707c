# bvdomains/interfaces.py
"""
Narrow interfaces through which the conversion and overlap layers see the
arithmetic and XOR domains.

Nothing in :mod:`bvdomains.conversions` or :mod:`bvdomains.overlap`
touches more than what is declared here, so any implementation of the
two peer domains with these members plugs in.  The reference
implementations are :class:`bvdomains.arithmetic.ArithmeticDomain` and
:class:`bvdomains.xor.XorDomain`.
"""

from __future__ import annotations

from typing import Protocol, TypeVar, runtime_checkable

A = TypeVar("A", bound="ArithmeticLike")
X = TypeVar("X", bound="XorLike")


@runtime_checkable
class ArithmeticLike(Protocol):
    """A cyclic run of consecutive values modulo ``2**width``."""

    width: int
    lo: int

    @classmethod
    def range(cls: type[A], width: int, lo: int, hi: int) -> A:
        """Smallest run covering *lo* .. *hi* inclusive, cyclically."""
        ...

    def unknowns(self) -> int:
        """Positions not constant across every member."""
        ...

    def mem(self, x: int) -> bool:
        ...


@runtime_checkable
class XorLike(Protocol):
    """A coset ``val ⊕ span(unknown)``, with ``unknown ≤b val``."""

    width: int
    val: int
    unknown: int

    def band(self: X, other: X) -> X:
        ...

    def bxor(self: X, other: X) -> X:
        ...

    def band_scalar(self: X, c: int) -> X:
        ...

    def mem(self, x: int) -> bool:
        ...


__all__ = ["ArithmeticLike", "XorLike"]
