# bvdomains/transfer.py
"""
Transfer functions for the bit-counting intrinsics.

Popcount is monotone along ``≤b`` and leading/trailing-zero counts are
antitone, so the extreme results over a bitwise domain are reached at its
two masks.  Results are arithmetic domains of the input width (a count
never exceeds ``width``, which always fits).
"""

from __future__ import annotations

from typing import Type

from . import words
from .arithmetic import ArithmeticDomain
from .bitwise import BitwiseDomain
from .interfaces import ArithmeticLike


def popcnt(
    b: BitwiseDomain, arith_cls: Type[ArithmeticLike] = ArithmeticDomain
) -> ArithmeticLike:
    return arith_cls.range(b.width, words.popcount(b.lomask), words.popcount(b.himask))


def clz(
    b: BitwiseDomain, arith_cls: Type[ArithmeticLike] = ArithmeticDomain
) -> ArithmeticLike:
    # more admissible ones, fewer leading zeros
    return arith_cls.range(
        b.width, words.clz(b.himask, b.width), words.clz(b.lomask, b.width)
    )


def ctz(
    b: BitwiseDomain, arith_cls: Type[ArithmeticLike] = ArithmeticDomain
) -> ArithmeticLike:
    return arith_cls.range(
        b.width, words.ctz(b.himask, b.width), words.ctz(b.lomask, b.width)
    )


__all__ = ["popcnt", "clz", "ctz"]
