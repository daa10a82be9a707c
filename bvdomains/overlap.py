# bvdomains/overlap.py
"""
Overlap oracle: decide whether two domains share a value and produce one.

No search is performed.  For each pair of representations a handful of
candidate values is guaranteed to contain a common member whenever one
exists, so testing membership of each candidate in both operands decides
overlap and yields the witness at the same time.

    ┌────────────────────┬───────────────────────────────────────────────┐
    │ bitwise × bitwise  │ lo_a | lo_b                                   │
    │ arith × arith      │ a.lo, b.lo                                    │
    │ arith × bitwise    │ b.lomask, b.himask,                           │
    │                    │ round_between(a.lo, b.lomask, b.himask)       │
    └────────────────────┴───────────────────────────────────────────────┘

Why the mixed row suffices: walk upward (cyclically) from ``a.lo``.  The
first bitwise member met is ``round_between(a.lo, …)`` when
``lomask <= a.lo <= himask`` and ``lomask`` otherwise.  The arithmetic run
is a prefix of that walk, so if it holds any bitwise member it holds the
first one.

XOR operands are converted to bitwise first; that conversion is exact.
An empty bitwise operand has no candidates and never overlaps.
"""

from __future__ import annotations

from typing import List, Optional, Union

from .bitwise import BitwiseDomain
from .conversions import xor_to_bitwise
from .interfaces import ArithmeticLike, XorLike
from .rounding import round_between
from .words import check_same_width

Domain = Union[BitwiseDomain, ArithmeticLike, XorLike]


def _as_bitwise_or_arith(d: Domain) -> Union[BitwiseDomain, ArithmeticLike]:
    if isinstance(d, BitwiseDomain):
        return d
    if isinstance(d, XorLike):
        return xor_to_bitwise(d)
    if isinstance(d, ArithmeticLike):
        return d
    raise TypeError(f"not a bitvector domain: {type(d).__name__}")


def _mixed_candidates(a: ArithmeticLike, b: BitwiseDomain) -> List[int]:
    if not b.nonempty():
        return []
    result = [b.lomask, b.himask]
    if b.width and b.lomask <= a.lo <= b.himask:
        result.append(round_between(a.lo, b.lomask, b.himask, b.width))
    return result


def candidates(a: Domain, b: Domain) -> List[int]:
    """Candidate witnesses for the pair; order is not significant."""
    a = _as_bitwise_or_arith(a)
    b = _as_bitwise_or_arith(b)
    check_same_width(a.width, b.width, operation="overlap")
    a_bw = isinstance(a, BitwiseDomain)
    b_bw = isinstance(b, BitwiseDomain)

    if a_bw and b_bw:
        if not (a.nonempty() and b.nonempty()):
            return []
        return [a.lomask | b.lomask]
    if not a_bw and not b_bw:
        return [a.lo, b.lo]
    if a_bw:
        return _mixed_candidates(b, a)
    return _mixed_candidates(a, b)


def find_witness(a: Domain, b: Domain) -> Optional[int]:
    """A value in both *a* and *b*, or ``None`` if they are disjoint."""
    for c in candidates(a, b):
        if a.mem(c) and b.mem(c):
            return c
    return None


def domains_overlap(a: Domain, b: Domain) -> bool:
    return find_witness(a, b) is not None


__all__ = ["Domain", "candidates", "find_witness", "domains_overlap"]
