# tests/test_transfer.py
"""
Tests for the popcount / clz / ctz transfer functions.
"""

import pytest

from bvdomains import ArithmeticDomain, BitwiseDomain, clz, ctz, popcnt
from bvdomains import words
from bvdomains.laws import enumerate_bitwise


class TestExamples:

    def test_popcnt(self):
        r = popcnt(BitwiseDomain(4, 0b0110, 0b1110))
        assert r == ArithmeticDomain(4, 2, 2)
        assert list(r.members()) == [2, 3]
        assert popcnt(BitwiseDomain.top(4)) == ArithmeticDomain(4, 0, 5)

    def test_clz(self):
        assert clz(BitwiseDomain(4, 0b0001, 0b0111)) == ArithmeticDomain(4, 1, 3)
        assert clz(BitwiseDomain.singleton(4, 0)) == ArithmeticDomain.singleton(4, 4)

    def test_ctz(self):
        assert ctz(BitwiseDomain(4, 0b1000, 0b1100)) == ArithmeticDomain(4, 2, 2)
        assert ctz(BitwiseDomain.top(8)) == ArithmeticDomain.range(8, 0, 8)

    def test_zero_width(self):
        assert list(popcnt(BitwiseDomain.top(0)).members()) == [0]

    def test_custom_result_class(self):
        class Counted(ArithmeticDomain):
            __slots__ = ()

        assert type(popcnt(BitwiseDomain.top(4), arith_cls=Counted)) is Counted


@pytest.mark.parametrize("width", [1, 2, 3, 4])
@pytest.mark.parametrize(
    "abstract, concrete",
    [
        (popcnt, lambda x, n: words.popcount(x)),
        (clz, words.clz),
        (ctz, words.ctz),
    ],
    ids=["popcnt", "clz", "ctz"],
)
def test_result_is_the_hull_of_the_counts(width, abstract, concrete):
    for d in enumerate_bitwise(width):
        counts = [concrete(x, width) for x in d.members()]
        r = abstract(d)
        assert not r.wraps()
        assert (r.lo, r.hi) == (min(counts), max(counts))
