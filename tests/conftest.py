# tests/conftest.py
"""
Shared fixtures and Hypothesis strategies for the bvdomains test-suite.
"""

from __future__ import annotations

from typing import Optional

import pytest
from hypothesis import strategies as st

from bvdomains import ArithmeticDomain, BitwiseDomain
from bvdomains.words import mask

WIDE = [32, 64]


def words(width: int) -> st.SearchStrategy[int]:
    return st.integers(min_value=0, max_value=mask(width))


@st.composite
def bitwise_with_member(draw, width: int):
    """A nonempty bitwise domain together with one of its members."""
    x = draw(words(width))
    unknown = draw(words(width))
    return BitwiseDomain(width, x & ~unknown, x | unknown), x


@st.composite
def arith_with_member(draw, width: int):
    lo = draw(words(width))
    sz = draw(st.integers(min_value=1, max_value=1 << width))
    offset = draw(st.integers(min_value=0, max_value=sz - 1))
    return ArithmeticDomain(width, lo, sz), (lo + offset) & mask(width)


def reference_round_between(x: int, lomask: int, himask: int, width: int) -> Optional[int]:
    """
    Least member >= x by direct search over the bit where the answer first
    exceeds x.  Independent of the carry trick in ``round_between``.
    """
    if lomask & ~x == 0 and x & ~himask == 0:
        return x
    for p in range(width):
        if (x >> p) & 1 or not (himask >> p) & 1:
            continue
        above = mask(width) & ~((1 << (p + 1)) - 1)
        high = x & above
        if lomask & above & ~high or high & ~himask:
            continue
        return high | (1 << p) | (lomask & ((1 << p) - 1))
    return None


@pytest.fixture
def nibble():
    """The 4-bit domain {4, 5, 12, 13} used across the unit tests."""
    return BitwiseDomain(4, 0b0100, 0b1101)
