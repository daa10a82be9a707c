# bvdomains/conversions.py
"""
Width-preserving conversions between the three domain representations.

    ┌──────────────┬──────────────┬──────────────────────────────────────┐
    │ from → to    │ exactness    │ definition                           │
    ├──────────────┼──────────────┼──────────────────────────────────────┤
    │ arith → bw   │ sound        │ hi = lo | u,  lo = hi ^ u            │
    │ bw → arith   │ sound        │ range(lomask, himask)                │
    │ bw → xor     │ exact        │ val = himask, unknown = lo ^ hi      │
    │ xor → bw     │ exact        │ lo = val ^ unknown, hi = val         │
    │ arith → xor  │ sound        │ val = lo | u, unknown = u            │
    │ xor → arith  │ sound        │ via bw                               │
    └──────────────┴──────────────┴──────────────────────────────────────┘

    (u = unknowns(arith))

Sound conversions may widen the denoted set but never narrow it.  The
two exact ones are mutually inverse on nonempty bitwise domains.

The arithmetic and XOR sides are reached only through the members listed
in :mod:`bvdomains.interfaces`; the target types default to the reference
implementations and can be overridden with ``arith_cls`` / ``xor_cls``.
"""

from __future__ import annotations

from typing import Type

from .arithmetic import ArithmeticDomain
from .bitwise import BitwiseDomain
from .interfaces import ArithmeticLike, XorLike
from .xor import XorDomain


def arith_to_bitwise(a: ArithmeticLike) -> BitwiseDomain:
    u = a.unknowns()
    hi = a.lo | u
    return BitwiseDomain(a.width, hi ^ u, hi)


def bitwise_to_arith(
    b: BitwiseDomain, arith_cls: Type[ArithmeticLike] = ArithmeticDomain
) -> ArithmeticLike:
    return arith_cls.range(b.width, b.lomask, b.himask)


def bitwise_to_xor(b: BitwiseDomain, xor_cls: Type[XorLike] = XorDomain) -> XorLike:
    return xor_cls(b.width, b.himask, b.lomask ^ b.himask)


def xor_to_bitwise(x: XorLike) -> BitwiseDomain:
    return BitwiseDomain(x.width, x.val ^ x.unknown, x.val)


def arith_to_xor(a: ArithmeticLike, xor_cls: Type[XorLike] = XorDomain) -> XorLike:
    u = a.unknowns()
    return xor_cls(a.width, a.lo | u, u)


def xor_to_arith(
    x: XorLike, arith_cls: Type[ArithmeticLike] = ArithmeticDomain
) -> ArithmeticLike:
    return bitwise_to_arith(xor_to_bitwise(x), arith_cls)


__all__ = [
    "arith_to_bitwise",
    "bitwise_to_arith",
    "bitwise_to_xor",
    "xor_to_bitwise",
    "arith_to_xor",
    "xor_to_arith",
]
