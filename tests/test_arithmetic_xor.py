# tests/test_arithmetic_xor.py
"""
Tests for the two peer domains: cyclic intervals and XOR cosets.
"""

import pytest

from bvdomains import ArithmeticDomain, ArithmeticLike, BitwiseDomain, XorDomain, XorLike
from bvdomains.laws import enumerate_arith, enumerate_xor


class TestArithmeticDomain:

    def test_wrapping_run(self):
        a = ArithmeticDomain.range(4, 14, 1)
        assert list(a.members()) == [14, 15, 0, 1]
        assert a.sz == 4 and a.hi == 1
        assert a.wraps()
        assert a.unknowns() == 0b1111
        assert a.ubounds() == (0, 15)

    def test_plain_run(self):
        a = ArithmeticDomain.range(4, 4, 5)
        assert a.unknowns() == 0b0001
        assert a.ubounds() == (4, 5)
        assert not a.wraps()
        assert 5 in a and 6 not in a

    def test_top_and_singleton(self):
        top = ArithmeticDomain.top(4)
        assert top.is_top() and top.sz == 16
        assert all(top.mem(x) for x in range(16))
        assert ArithmeticDomain.singleton(4, 7).is_singleton()
        assert ArithmeticDomain.top(0).is_singleton()

    def test_size_validated(self):
        with pytest.raises(ValueError):
            ArithmeticDomain(4, 0, 0)
        with pytest.raises(ValueError):
            ArithmeticDomain(4, 0, 17)

    def test_mem_out_of_range(self):
        assert not ArithmeticDomain.top(4).mem(16)
        assert not ArithmeticDomain.top(4).mem(-1)

    def test_leq(self):
        assert ArithmeticDomain.range(4, 14, 1).leq(ArithmeticDomain.range(4, 12, 3))
        assert not ArithmeticDomain.range(4, 0, 5).leq(ArithmeticDomain.range(4, 14, 1))
        assert ArithmeticDomain.range(4, 3, 2).leq(ArithmeticDomain.top(4))

    def test_repr(self):
        assert repr(ArithmeticDomain.range(4, 14, 1)) == "Arith<4>([0xe, 0x1])"
        assert repr(ArithmeticDomain.top(4)) == "Arith<4>(⊤)"

    @pytest.mark.parametrize("width", [1, 2, 3, 4])
    def test_unknowns_cover_every_varying_bit(self, width):
        for a in enumerate_arith(width):
            members = list(a.members())
            varying = 0
            for x in members:
                varying |= x ^ members[0]
            assert varying & ~a.unknowns() == 0

    def test_satisfies_protocol(self):
        assert isinstance(ArithmeticDomain.top(4), ArithmeticLike)
        assert not isinstance(ArithmeticDomain.top(4), XorLike)
        assert not isinstance(BitwiseDomain.top(4), ArithmeticLike)


class TestXorDomain:

    def test_normalised(self):
        x = XorDomain(4, 0b0100, 0b1000)
        assert (x.val, x.unknown) == (0b1100, 0b1000)
        assert sorted(x.members()) == [4, 12]
        assert x == XorDomain(4, 0b1100, 0b1000)
        assert repr(x) == "Xor<4>(val=0xc, unknown=0x8)"

    def test_top_and_singleton(self):
        assert XorDomain.top(4).size() == 16
        s = XorDomain.singleton(4, 9)
        assert s.is_singleton() and list(s.members()) == [9]

    def test_band(self):
        x = XorDomain(4, 0b0100, 0b1000)
        assert (x & XorDomain.singleton(4, 0b0110)) == XorDomain.singleton(4, 0b0100)

    def test_bxor(self):
        x = XorDomain(4, 0b0100, 0b1000)
        r = x ^ XorDomain.singleton(4, 0b0011)
        assert sorted(r.members()) == [7, 15]

    def test_scalar_ops(self):
        x = XorDomain(4, 0b0100, 0b1000)
        assert x.band_scalar(0b0111) == XorDomain.singleton(4, 4)
        assert x.bor_scalar(0b1000) == XorDomain.singleton(4, 12)
        assert sorted(x.bxor_scalar(1).members()) == [5, 13]

    @pytest.mark.parametrize("width", [1, 2, 3])
    def test_scalar_ops_exact(self, width):
        values = range(1 << width)
        for x in enumerate_xor(width):
            members = list(x.members())
            for c in values:
                assert set(x.band_scalar(c).members()) == {v & c for v in members}
                assert set(x.bor_scalar(c).members()) == {v | c for v in members}
                assert set(x.bxor_scalar(c).members()) == {v ^ c for v in members}

    @pytest.mark.parametrize("width", [1, 2, 3])
    def test_binary_ops_sound(self, width):
        doms = list(enumerate_xor(width))
        for a in doms:
            for b in doms:
                anded, xored = a.band(b), a.bxor(b)
                for x in a.members():
                    for y in b.members():
                        assert anded.mem(x & y)
                        assert xored.mem(x ^ y)

    def test_width_mismatch(self):
        with pytest.raises(ValueError):
            XorDomain.top(4).bxor(XorDomain.top(8))

    def test_satisfies_protocol(self):
        assert isinstance(XorDomain.top(4), XorLike)
        assert not isinstance(XorDomain.top(4), ArithmeticLike)
