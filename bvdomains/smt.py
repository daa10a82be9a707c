# bvdomains/smt.py
"""
SMT back end: prove domain laws for *every* domain of a width with Z3.

Enumeration in :mod:`bvdomains.laws` is complete only for small widths.
Here the masks, the concrete values and the competing rounding results
are free bit-vector variables, so an ``unsat`` answer for the negated law
is a proof at that width.  The abstract operations and the rounding
algorithms are re-modelled over ``z3.BitVec`` terms; the model follows
the same formulas as :mod:`bvdomains.bitwise` and :mod:`bvdomains.rounding`.

Requires the ``z3-solver`` distribution (``pip install bvdomains[smt]``).
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Tuple

from .words import check_width

logger = logging.getLogger(__name__)


@dataclass
class ProofResult:
    law: str
    width: int
    proved: bool
    model: Dict[str, int] = field(default_factory=dict)

    def __str__(self) -> str:
        if self.proved:
            return f"{self.law}@{self.width}: proved"
        assignment = ", ".join(f"{k}={v:#x}" for k, v in sorted(self.model.items()))
        return f"{self.law}@{self.width}: refuted ({assignment})"


class Z3Encoder:
    """Encodes bitwise domains, membership and rounding over Z3 bit-vectors."""

    def __init__(self, width: int):
        try:
            import z3
            self._z3 = z3
        except ImportError:
            raise ImportError("Z3 Python bindings ('z3-solver') required for Z3Encoder")
        self.width = check_width(width, operation="Z3Encoder", minimum=1)
        self._vars: Dict[str, Any] = {}

    # ---- Terms -----------------------------------------------------------

    def var(self, name: str):
        if name not in self._vars:
            self._vars[name] = self._z3.BitVec(name, self.width)
        return self._vars[name]

    def const(self, value: int):
        return self._z3.BitVecVal(value, self.width)

    def domain(self, name: str) -> Tuple[Any, Any]:
        return self.var(f"{name}_lo"), self.var(f"{name}_hi")

    # ---- Predicates ------------------------------------------------------

    def bitle(self, a, b):
        return a & b == a

    def nonempty(self, d):
        return self.bitle(d[0], d[1])

    def mem(self, d, x):
        return self._z3.And(self.bitle(d[0], x), self.bitle(x, d[1]))

    # ---- Abstract operations (lomask, himask) ----------------------------

    def band(self, a, b):
        return a[0] & b[0], a[1] & b[1]

    def bor(self, a, b):
        return a[0] | b[0], a[1] | b[1]

    def bxor(self, a, b):
        u = (a[0] ^ a[1]) | (b[0] ^ b[1])
        hi = (a[0] ^ b[0]) | u
        return hi ^ u, hi

    def bnot(self, a):
        return ~a[1], ~a[0]

    def intersection(self, a, b):
        return a[0] | b[0], a[1] & b[1]

    def _clamp(self, k: int) -> int:
        return min(k, self.width)

    def shl(self, a, k):
        k = self._clamp(k)
        return a[0] << k, a[1] << k

    def lshr(self, a, k):
        k = self._clamp(k)
        return self._z3.LShR(a[0], k), self._z3.LShR(a[1], k)

    def ashr(self, a, k):
        # z3 ``>>`` on bit-vectors is the arithmetic shift
        k = self._clamp(k)
        if k == self.width:
            k = self.width - 1
        return a[0] >> k, a[1] >> k

    def rol(self, a, k):
        k %= self.width
        return self._z3.RotateLeft(a[0], k), self._z3.RotateLeft(a[1], k)

    def ror(self, a, k):
        k %= self.width
        return self._z3.RotateRight(a[0], k), self._z3.RotateRight(a[1], k)

    # ---- Rounding --------------------------------------------------------

    def smear(self, v):
        shift = 1
        while shift < self.width:
            v = v | self._z3.LShR(v, shift)
            shift <<= 1
        return v

    def round_above(self, x, mask):
        q = self.smear((x | mask) ^ x)
        return (x & ~q) | (mask & q)

    def round_between(self, x, lomask, himask):
        z3 = self._z3
        loup = self.round_above(x, lomask)
        r = loup & ~himask
        rmask = self.smear(r)
        lowbits = z3.LShR(rmask, 1)
        highbit = rmask ^ lowbits
        upper = ((loup | ~himask) + highbit) & himask
        return z3.If(r == 0, loup, (upper & ~lowbits) | lomask)

    # ---- Solving ---------------------------------------------------------

    def prove(self, claim, *, timeout_ms: Optional[int] = None) -> Tuple[bool, Dict[str, int]]:
        """``(True, {})`` if *claim* holds for every assignment, else a model."""
        z3 = self._z3
        solver = z3.Solver()
        if timeout_ms is not None:
            solver.set("timeout", timeout_ms)
        solver.add(z3.Not(claim))
        verdict = solver.check()
        if verdict == z3.unsat:
            return True, {}
        if verdict == z3.unknown:
            raise TimeoutError(f"solver returned unknown: {solver.reason_unknown()}")
        model = solver.model()
        return False, {
            str(d): model[d].as_long() for d in model.decls()
        }


# ═══════════════════════════════════════════════════════════════════════════
#  LAW ENCODINGS
# ═══════════════════════════════════════════════════════════════════════════
#
#  Each builder returns the claim to be proved for all free variables.
#  Shift laws quantify over the concrete amount by building one claim per
#  amount 0 .. width + 1 and conjoining them.

def _sound_binary(op: str, concrete: Callable) -> Callable[[Z3Encoder], Any]:
    def build(enc: Z3Encoder):
        a, b = enc.domain("a"), enc.domain("b")
        x, y = enc.var("x"), enc.var("y")
        r = getattr(enc, op)(a, b)
        z3 = enc._z3
        return z3.Implies(
            z3.And(enc.mem(a, x), enc.mem(b, y)), enc.mem(r, concrete(x, y))
        )
    return build


def _sound_bnot(enc: Z3Encoder):
    a, x = enc.domain("a"), enc.var("x")
    return enc._z3.Implies(enc.mem(a, x), enc.mem(enc.bnot(a), ~x))


def _sound_shift(op: str, concrete: Callable) -> Callable[[Z3Encoder], Any]:
    def build(enc: Z3Encoder):
        z3 = enc._z3
        a, x = enc.domain("a"), enc.var("x")
        claims = []
        for k in range(enc.width + 2):
            r = getattr(enc, op)(a, k)
            claims.append(z3.Implies(enc.mem(a, x), enc.mem(r, concrete(enc, x, k))))
        return z3.And(*claims)
    return build


def _concrete_shl(enc, x, k):
    return enc.const(0) if k >= enc.width else x << k


def _concrete_lshr(enc, x, k):
    return enc.const(0) if k >= enc.width else enc._z3.LShR(x, k)


def _concrete_ashr(enc, x, k):
    return x >> min(k, enc.width - 1)


def _concrete_rol(enc, x, k):
    return enc._z3.RotateLeft(x, k % enc.width)


def _concrete_ror(enc, x, k):
    return enc._z3.RotateRight(x, k % enc.width)


def _exact_intersection(enc: Z3Encoder):
    z3 = enc._z3
    a, b, x = enc.domain("a"), enc.domain("b"), enc.var("x")
    return (z3.And(enc.mem(a, x), enc.mem(b, x))) == enc.mem(enc.intersection(a, b), x)


def _round_above_minimal(enc: Z3Encoder):
    z3 = enc._z3
    x, m, z = enc.var("x"), enc.var("mask"), enc.var("z")
    r = enc.round_above(x, m)
    return z3.And(
        z3.UGE(r, x),
        enc.bitle(m, r),
        z3.Implies(z3.And(z3.UGE(z, x), enc.bitle(m, z)), z3.ULE(r, z)),
    )


def _round_between_minimal(enc: Z3Encoder):
    z3 = enc._z3
    x, z = enc.var("x"), enc.var("z")
    lo, hi = enc.domain("d")
    r = enc.round_between(x, lo, hi)
    pre = z3.And(enc.bitle(lo, hi), z3.ULE(lo, x), z3.ULE(x, hi))
    admissible_z = z3.And(z3.UGE(z, x), enc.bitle(lo, z), enc.bitle(z, hi))
    return z3.Implies(
        pre,
        z3.And(
            z3.UGE(r, x),
            enc.bitle(lo, r),
            enc.bitle(r, hi),
            z3.Implies(admissible_z, z3.ULE(r, z)),
        ),
    )


def _identity_xor_ops(enc: Z3Encoder):
    z3 = enc._z3
    a, b = enc.domain("a"), enc.domain("b")

    def to_xor(d):
        unknown = d[0] ^ d[1]
        return d[1] | unknown, unknown

    def to_bitwise(val, unknown):
        return val ^ unknown, val

    (va, ua), (vb, ub) = to_xor(a), to_xor(b)
    u = ua | ub
    via_xor = to_bitwise((va ^ vb) | u, u)
    h = va & vb
    via_and = to_bitwise(h, h & u)
    direct_xor = enc.bxor(a, b)
    direct_and = enc.band(a, b)
    return z3.And(
        z3.And(direct_xor[0] == via_xor[0], direct_xor[1] == via_xor[1]),
        z3.Implies(
            z3.And(enc.nonempty(a), enc.nonempty(b)),
            z3.And(direct_and[0] == via_and[0], direct_and[1] == via_and[1]),
        ),
    )


SMT_LAWS: Dict[str, Callable[[Z3Encoder], Any]] = {
    "sound.band": _sound_binary("band", lambda x, y: x & y),
    "sound.bor": _sound_binary("bor", lambda x, y: x | y),
    "sound.bxor": _sound_binary("bxor", lambda x, y: x ^ y),
    "sound.bnot": _sound_bnot,
    "sound.shl": _sound_shift("shl", _concrete_shl),
    "sound.lshr": _sound_shift("lshr", _concrete_lshr),
    "sound.ashr": _sound_shift("ashr", _concrete_ashr),
    "sound.rol": _sound_shift("rol", _concrete_rol),
    "sound.ror": _sound_shift("ror", _concrete_ror),
    "exact.intersection": _exact_intersection,
    "rounding.round_above": _round_above_minimal,
    "rounding.round_between": _round_between_minimal,
    "identity.xor_ops": _identity_xor_ops,
}


def prove_law(name: str, width: int, *, timeout_ms: Optional[int] = None) -> ProofResult:
    """Prove law *name* for every domain of *width* bits."""
    try:
        build = SMT_LAWS[name]
    except KeyError:
        raise KeyError(f"no SMT encoding for law {name!r}") from None
    enc = Z3Encoder(width)
    proved, model = enc.prove(build(enc), timeout_ms=timeout_ms)
    logger.debug("%s at width %d: %s", name, width, "proved" if proved else "refuted")
    return ProofResult(name, width, proved, model)


__all__ = ["Z3Encoder", "ProofResult", "SMT_LAWS", "prove_law"]
