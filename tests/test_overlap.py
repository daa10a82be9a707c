# tests/test_overlap.py
"""
Tests for the candidate-based overlap oracle.
"""

import pytest

from bvdomains import (
    ArithmeticDomain,
    BitwiseDomain,
    WidthMismatch,
    XorDomain,
    candidates,
    domains_overlap,
    find_witness,
)
from bvdomains.words import mask


class Run:
    """Minimal non-wrapping interval written against the protocol only."""

    def __init__(self, width, lo, hi):
        self.width = width
        self.lo = lo
        self.hi = hi

    @classmethod
    def range(cls, width, lo, hi):
        return cls(width, lo, hi)

    def unknowns(self):
        return (1 << (self.lo ^ self.hi).bit_length()) - 1

    def mem(self, x):
        return self.lo <= x <= self.hi


class TestBitwisePairs:

    def test_shared_member(self):
        a = BitwiseDomain(4, 0b0100, 0b1101)
        b = BitwiseDomain(4, 0b0001, 0b0111)
        assert find_witness(a, b) == 0b0101

    def test_combined_required_bits_fall_outside(self):
        # {5, 7, 13, 15} minus bit 1 versus {3, 7, 11, 15} minus bit 2
        a = BitwiseDomain(4, 0b0101, 0b1101)
        b = BitwiseDomain(4, 0b0011, 0b1011)
        assert candidates(a, b) == [0b0111]
        assert not a.mem(0b0111)
        assert find_witness(a, b) is None
        assert not domains_overlap(a, b)

    def test_empty_operand(self):
        a = BitwiseDomain.empty(4)
        assert candidates(a, BitwiseDomain.top(4)) == []
        assert not domains_overlap(a, ArithmeticDomain.top(4))
        assert not domains_overlap(ArithmeticDomain.top(4), a)


class TestMixedPairs:

    def test_rounded_witness(self):
        a = ArithmeticDomain.range(4, 6, 10)
        b = BitwiseDomain(4, 0b0001, 0b1101)
        assert find_witness(a, b) == 9
        assert find_witness(b, a) == 9

    def test_gap_between_members(self):
        a = ArithmeticDomain.range(4, 6, 7)
        b = BitwiseDomain(4, 0b0001, 0b1101)
        assert find_witness(a, b) is None

    def test_quick_start_disjoint(self):
        assert not domains_overlap(
            ArithmeticDomain.range(4, 8, 11), BitwiseDomain(4, 0b0100, 0b1110)
        )

    def test_run_wraps_onto_lomask(self):
        a = ArithmeticDomain.range(4, 14, 5)
        b = BitwiseDomain(4, 0b0100, 0b0110)
        assert find_witness(a, b) == 4

    def test_xor_operand(self):
        x = XorDomain(4, 0b0100, 0b1000)
        assert find_witness(x, BitwiseDomain.singleton(4, 12)) == 12
        assert find_witness(x, ArithmeticDomain.range(4, 5, 11)) is None
        assert find_witness(ArithmeticDomain.range(4, 5, 12), x) == 12

    def test_protocol_implementation(self):
        b = BitwiseDomain(4, 0b0001, 0b1101)
        assert find_witness(Run(4, 6, 10), b) == 9
        assert find_witness(Run(4, 6, 7), b) is None


class TestArithmeticPairs:

    def test_wrapping_runs(self):
        a = ArithmeticDomain.range(4, 14, 2)
        b = ArithmeticDomain.range(4, 1, 3)
        assert find_witness(a, b) == 1

    def test_disjoint_runs(self):
        a = ArithmeticDomain.range(4, 2, 4)
        b = ArithmeticDomain.range(4, 5, 9)
        assert find_witness(a, b) is None


class TestErrors:

    def test_width_mismatch(self):
        with pytest.raises(WidthMismatch):
            find_witness(BitwiseDomain.top(4), ArithmeticDomain.top(5))

    def test_not_a_domain(self):
        with pytest.raises(TypeError):
            find_witness(3, BitwiseDomain.top(4))


@pytest.mark.parametrize("width", [1, 2, 3])
def test_witness_found_whenever_mixed_pair_shares_a_value(width):
    """Mixed pairs are the interesting case; the law catalogue covers the rest."""
    universe = range(mask(width) + 1)
    for lo in universe:
        for hi in universe:
            b = BitwiseDomain(width, lo, hi)
            for start in universe:
                for sz in range(1, (1 << width) + 1):
                    a = ArithmeticDomain(width, start, sz)
                    shared = any(a.mem(x) and b.mem(x) for x in universe)
                    w = find_witness(a, b)
                    assert (w is not None) == shared
                    if w is not None:
                        assert a.mem(w) and b.mem(w)
