# tests/test_rounding.py
"""
Tests for smear / round_above / round_between.

Minimality is checked by brute force: exhaustively at widths 1-4 and at
width 8 through the law catalogue, and against an independent reference
search at 32 and 64 bits.
"""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from bvdomains import InvalidWidth, round_above, round_between, smear
from bvdomains.bitwise import bitle
from bvdomains.laws import LAWS, check_law
from bvdomains.words import mask

from tests.conftest import WIDE, bitwise_with_member, reference_round_between, words


class TestSmear:

    def test_examples(self):
        assert smear(0b0100_1000, 8) == 0b0111_1111
        assert smear(0, 8) == 0
        assert smear(1, 8) == 1
        assert smear(1 << 63, 64) == mask(64)
        assert smear(1, 1) == 1

    def test_non_power_of_two_width(self):
        assert smear(1 << 12, 13) == mask(13)

    @pytest.mark.parametrize("width", [1, 2, 3, 5, 8])
    def test_matches_bit_length(self, width):
        for v in range(mask(width) + 1):
            assert smear(v, width) == (1 << v.bit_length()) - 1

    def test_zero_width_rejected(self):
        with pytest.raises(InvalidWidth):
            smear(0, 0)


class TestRoundAbove:

    def test_smallest_value_with_required_bits(self):
        # 12 is the least value >= 5 carrying bits 2 and 3
        assert round_above(0b0101, 0b1100, 4) == 0b1100

    def test_already_admissible(self):
        assert round_above(0b1110, 0b0110, 4) == 0b1110

    def test_examples(self):
        assert round_above(0b0101, 0b0010, 4) == 0b0110
        assert round_above(0b1010, 0b0101, 4) == 0b1101
        assert round_above(0, 0, 4) == 0

    @pytest.mark.parametrize("width", [1, 2, 3, 4])
    def test_exhaustive_minimality(self, width):
        values = range(mask(width) + 1)
        for m in values:
            for x in values:
                expected = min(z for z in values if z >= x and bitle(m, z))
                assert round_above(x, m, width) == expected

    def test_width_eight(self):
        result = check_law(LAWS["rounding.round_above"], 8, max_failures=1)
        assert result.status == "pass"

    def test_zero_width_rejected(self):
        with pytest.raises(InvalidWidth):
            round_above(0, 0, 0)

    @pytest.mark.parametrize("width", WIDE)
    @settings(max_examples=300, deadline=None)
    @given(data=st.data())
    def test_random_wide(self, width, data):
        x = data.draw(words(width))
        m = data.draw(words(width))
        got = round_above(x, m, width)
        # the all-ones word always qualifies, so the reference never gives up
        assert got == reference_round_between(x, m, mask(width), width)
        assert got >= x
        assert bitle(m, got)


class TestRoundBetween:

    def test_carry_skips_forbidden_bits(self):
        # admissible values are {1, 3, 9, 11}
        assert round_between(0b0100, 0b0001, 0b1011, 4) == 0b1001

    def test_carry_lands_on_top_bit(self):
        # admissible values are {0, 1, 8, 9}
        assert round_between(0b0010, 0b0000, 0b1001, 4) == 0b1000

    def test_required_bit_restored_after_carry(self):
        # admissible values are {1, 5, 9, 13}
        assert round_between(0b0110, 0b0001, 0b1101, 4) == 0b1001

    def test_already_admissible(self):
        assert round_between(0b0101, 0b0001, 0b1101, 4) == 0b0101

    def test_single_bit(self):
        assert round_between(0, 0, 1, 1) == 0
        assert round_between(1, 0, 1, 1) == 1
        assert round_between(1, 1, 1, 1) == 1

    @pytest.mark.parametrize("width", [1, 2, 3, 4])
    def test_exhaustive_minimality(self, width):
        values = range(mask(width) + 1)
        for hi in values:
            for lo in values:
                if not bitle(lo, hi):
                    continue
                members = [z for z in values if bitle(lo, z) and bitle(z, hi)]
                for x in range(lo, hi + 1):
                    expected = min(z for z in members if z >= x)
                    assert round_between(x, lo, hi, width) == expected, (x, lo, hi)

    def test_width_eight(self):
        result = check_law(LAWS["rounding.round_between"], 8, max_failures=1)
        assert result.status == "pass"

    def test_precondition_violations(self):
        with pytest.raises(ValueError, match="not bitwise below"):
            round_between(0b0100, 0b0010, 0b1100, 4)
        with pytest.raises(ValueError, match="outside"):
            round_between(0b1110, 0b0001, 0b1011, 4)
        with pytest.raises(InvalidWidth):
            round_between(0, 0, 0, 0)

    @pytest.mark.parametrize("width", WIDE)
    @settings(max_examples=300, deadline=None)
    @given(data=st.data())
    def test_random_wide(self, width, data):
        d, member = data.draw(bitwise_with_member(width))
        x = data.draw(st.integers(min_value=d.lomask, max_value=d.himask))
        got = round_between(x, d.lomask, d.himask, width)
        assert got >= x
        assert d.mem(got)
        assert got == reference_round_between(x, d.lomask, d.himask, width)
