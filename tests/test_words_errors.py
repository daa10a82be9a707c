# tests/test_words_errors.py
"""
Tests for the fixed-width word helpers and the error hierarchy.
"""

import pytest

from bvdomains import BitwiseDomain, BVDomainError, InvalidWidth, WidthMismatch
from bvdomains.words import (
    check_same_width,
    check_width,
    clz,
    ctz,
    from_signed,
    mask,
    popcount,
    to_signed,
)


class TestWords:

    def test_mask(self):
        assert mask(0) == 0
        assert mask(1) == 1
        assert mask(8) == 0xFF
        assert mask(64) == 2**64 - 1

    def test_negative_mask_width(self):
        with pytest.raises(InvalidWidth):
            mask(-1)

    def test_signed_roundtrip(self):
        assert to_signed(0b1101, 4) == -3
        assert to_signed(0b0111, 4) == 7
        assert to_signed(1, 1) == -1
        assert from_signed(-3, 4) == 0b1101

    def test_to_signed_needs_a_sign_bit(self):
        with pytest.raises(InvalidWidth):
            to_signed(0, 0)

    def test_counts(self):
        assert popcount(0b1011) == 3
        assert clz(0b0001, 4) == 3
        assert clz(0, 4) == 4
        assert clz(0b1000, 4) == 0
        assert ctz(0b1000, 4) == 3
        assert ctz(0, 4) == 4
        assert ctz(1, 64) == 0
        assert clz(0, 0) == 0

    def test_check_width(self):
        assert check_width(0, operation="op") == 0
        with pytest.raises(InvalidWidth, match="at least 1"):
            check_width(0, operation="op", minimum=1)
        with pytest.raises(InvalidWidth):
            check_width(True, operation="op")


class TestErrors:
    """Both error kinds are BVDomainError and ValueError."""

    def test_width_mismatch_fields(self):
        with pytest.raises(WidthMismatch) as info:
            check_same_width(4, 8, operation="band")
        err = info.value
        assert (err.left, err.right, err.operation) == (4, 8, "band")
        assert err.code == "BVD-0001"
        assert "band" in str(err) and "4 vs 8" in str(err)

    def test_invalid_width_fields(self):
        err = InvalidWidth(0, operation="ashr", reason="needs a sign bit")
        assert err.width == 0
        assert err.code == "BVD-0002"
        assert str(err) == "[BVD-0002] ashr: needs a sign bit (got 0)"

    def test_hierarchy(self):
        assert issubclass(WidthMismatch, BVDomainError)
        assert issubclass(WidthMismatch, ValueError)
        assert issubclass(InvalidWidth, BVDomainError)
        assert issubclass(InvalidWidth, ValueError)

    def test_binary_ops_never_coerce_widths(self):
        a = BitwiseDomain.top(4)
        b = BitwiseDomain.top(8)
        for op in (a.band, a.bor, a.bxor, a.intersection, a.union, a.leq):
            with pytest.raises(WidthMismatch):
                op(b)
