# bvdomains/laws.py
"""
Correctness laws of the domain library, checked by exhaustive enumeration.

Each law is a named predicate over every domain of a given (small) width
together with every concrete value.  ``check_law`` runs one law and
returns the counterexamples found; an empty list means the law holds at
that width.  The same operator tables are reused by the randomized tests
at large widths and by the SMT back end.

Families
--------
sound.*        concrete results of members are members of the abstract result
exact.*        singleton inputs give singleton (or exact) outputs; intersection is exact
rounding.*     round_above / round_between return the least admissible value
overlap.*      some candidate witnesses a shared value iff one exists
convert.*      conversions never lose members; bitwise ↔ xor loses nothing either way
identity.*     bitwise band/bxor agree with the detour through the xor domain

Cost grows as 9**width for the binary laws; widths up to 4 run in seconds.
"""

from __future__ import annotations

import bisect
import logging
import time
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional, Sequence, Tuple

from . import transfer
from .arithmetic import ArithmeticDomain
from .bitwise import BitwiseDomain, bitle
from .conversions import (
    arith_to_bitwise,
    arith_to_xor,
    bitwise_to_arith,
    bitwise_to_xor,
    xor_to_arith,
    xor_to_bitwise,
)
from .overlap import candidates
from .rounding import round_above, round_between
from .words import check_width, clz, ctz, mask, popcount, to_signed
from .xor import XorDomain

logger = logging.getLogger(__name__)


# ═══════════════════════════════════════════════════════════════════════════
#  PART 1 — OPERATOR TABLES  (abstract operation, concrete operation)
# ═══════════════════════════════════════════════════════════════════════════

def _rotl(x: int, k: int, n: int) -> int:
    if n == 0:
        return x
    k %= n
    return ((x << k) | (x >> (n - k))) & mask(n)


BINARY_OPS: Dict[str, Tuple[Callable, Callable[[int, int, int], int]]] = {
    "band": (BitwiseDomain.band, lambda x, y, n: x & y),
    "bor": (BitwiseDomain.bor, lambda x, y, n: x | y),
    "bxor": (BitwiseDomain.bxor, lambda x, y, n: x ^ y),
}

UNARY_OPS: Dict[str, Tuple[Callable, Callable[[int, int], int]]] = {
    "bnot": (BitwiseDomain.bnot, lambda x, n: ~x & mask(n)),
}

SHIFT_OPS: Dict[str, Tuple[Callable, Callable[[int, int, int], int]]] = {
    "shl": (BitwiseDomain.shl, lambda x, k, n: (x << min(k, n)) & mask(n)),
    "lshr": (BitwiseDomain.lshr, lambda x, k, n: x >> min(k, n)),
    "ashr": (
        BitwiseDomain.ashr,
        lambda x, k, n: (to_signed(x, n) >> min(k, n)) & mask(n),
    ),
    "rol": (BitwiseDomain.rol, lambda x, k, n: _rotl(x, k, n)),
    "ror": (BitwiseDomain.ror, lambda x, k, n: _rotl(x, -k, n)),
}

# (abstract, concrete, extra width)
EXTEND_OPS: Dict[str, Tuple[Callable, Callable[[int, int, int], int]]] = {
    "zero_ext": (BitwiseDomain.zero_ext, lambda x, n, m: x),
    "sign_ext": (BitwiseDomain.sign_ext, lambda x, n, m: to_signed(x, n) & mask(m)),
}

EXTRACT_OPS: Dict[str, Tuple[Callable, Callable[[int, int, int], int]]] = {
    "shrink": (BitwiseDomain.shrink, lambda x, n, m: x >> (n - m)),
    "trunc": (BitwiseDomain.trunc, lambda x, n, m: x & mask(m)),
}

COUNT_OPS: Dict[str, Tuple[Callable, Callable[[int, int], int]]] = {
    "popcnt": (transfer.popcnt, lambda x, n: popcount(x)),
    "clz": (transfer.clz, lambda x, n: clz(x, n)),
    "ctz": (transfer.ctz, lambda x, n: ctz(x, n)),
}

_NEEDS_SIGN_BIT = {"ashr", "sign_ext"}


# ═══════════════════════════════════════════════════════════════════════════
#  PART 2 — DOMAIN ENUMERATION
# ═══════════════════════════════════════════════════════════════════════════

def _submasks(m: int) -> Iterator[int]:
    sub = 0
    while True:
        yield sub
        if sub == m:
            return
        sub = (sub - m) & m


def enumerate_bitwise(width: int, *, include_empty: bool = False) -> Iterator[BitwiseDomain]:
    """Every bitwise domain of *width* bits (3**width nonempty ones)."""
    m = mask(width)
    for hi in range(m + 1):
        if include_empty:
            for lo in range(m + 1):
                yield BitwiseDomain(width, lo, hi)
        else:
            for lo in _submasks(hi):
                yield BitwiseDomain(width, lo, hi)


def enumerate_arith(width: int) -> Iterator[ArithmeticDomain]:
    """Every cyclic run of *width* bits (4**width of them, top counted per start)."""
    for lo in range(mask(width) + 1):
        for sz in range(1, (1 << width) + 1):
            yield ArithmeticDomain(width, lo, sz)


def enumerate_xor(width: int) -> Iterator[XorDomain]:
    m = mask(width)
    for unknown in range(m + 1):
        for base in _submasks(~unknown & m):
            yield XorDomain(width, base | unknown, unknown)


# ═══════════════════════════════════════════════════════════════════════════
#  PART 3 — LAW REGISTRY
# ═══════════════════════════════════════════════════════════════════════════

Finding = Tuple[Tuple, str]


@dataclass(frozen=True)
class Law:
    name: str
    description: str
    check: Callable[[int], Iterator[Finding]]
    min_width: int = 0
    smt: bool = False


@dataclass(frozen=True)
class Counterexample:
    law: str
    width: int
    inputs: Tuple
    message: str

    def __str__(self) -> str:
        args = ", ".join(repr(i) for i in self.inputs)
        return f"{self.law}@{self.width}: {self.message} [{args}]"


@dataclass
class LawResult:
    law: Law
    width: int
    counterexamples: List[Counterexample] = field(default_factory=list)
    skipped: bool = False
    elapsed: float = 0.0

    @property
    def status(self) -> str:
        if self.skipped:
            return "skip"
        return "fail" if self.counterexamples else "pass"


LAWS: Dict[str, Law] = {}


def _law(name: str, description: str, *, min_width: int = 0, smt: bool = False):
    def register(fn: Callable[[int], Iterator[Finding]]):
        LAWS[name] = Law(name, description, fn, min_width, smt)
        return fn
    return register


# ═══════════════════════════════════════════════════════════════════════════
#  PART 4 — SOUNDNESS
# ═══════════════════════════════════════════════════════════════════════════

def _register_binary(name: str) -> None:
    abstract, concrete = BINARY_OPS[name]

    def check(n: int) -> Iterator[Finding]:
        doms = list(enumerate_bitwise(n))
        for a in doms:
            for b in doms:
                r = abstract(a, b)
                for x in a.members():
                    for y in b.members():
                        z = concrete(x, y, n)
                        if not r.mem(z):
                            yield (a, b, x, y), f"{z:#x} not in {r!r}"

    _law(f"sound.{name}", f"{name} contains every concrete result", smt=True)(check)


def _register_unary(name: str) -> None:
    abstract, concrete = UNARY_OPS[name]

    def check(n: int) -> Iterator[Finding]:
        for a in enumerate_bitwise(n):
            r = abstract(a)
            for x in a.members():
                z = concrete(x, n)
                if not r.mem(z):
                    yield (a, x), f"{z:#x} not in {r!r}"

    _law(f"sound.{name}", f"{name} contains every concrete result", smt=True)(check)


def _register_shift(name: str) -> None:
    abstract, concrete = SHIFT_OPS[name]

    def check(n: int) -> Iterator[Finding]:
        for a in enumerate_bitwise(n):
            for k in range(n + 2):
                r = abstract(a, k)
                for x in a.members():
                    z = concrete(x, k, n)
                    if not r.mem(z):
                        yield (a, k, x), f"{z:#x} not in {r!r}"

    min_width = 1 if name in _NEEDS_SIGN_BIT else 0
    _law(
        f"sound.{name}",
        f"{name} by every amount up to width + 1 contains every concrete result",
        min_width=min_width,
        smt=True,
    )(check)


def _register_extend(name: str) -> None:
    abstract, concrete = EXTEND_OPS[name]

    def check(n: int) -> Iterator[Finding]:
        for a in enumerate_bitwise(n):
            for m in range(n, n + 3):
                r = abstract(a, m)
                for x in a.members():
                    z = concrete(x, n, m)
                    if not r.mem(z):
                        yield (a, m, x), f"{z:#x} not in {r!r}"

    min_width = 1 if name in _NEEDS_SIGN_BIT else 0
    _law(f"sound.{name}", f"{name} contains every concrete result", min_width=min_width)(check)


def _register_extract(name: str) -> None:
    abstract, concrete = EXTRACT_OPS[name]

    def check(n: int) -> Iterator[Finding]:
        for a in enumerate_bitwise(n):
            for m in range(n + 1):
                r = abstract(a, m)
                for x in a.members():
                    z = concrete(x, n, m)
                    if not r.mem(z):
                        yield (a, m, x), f"{z:#x} not in {r!r}"

    _law(f"sound.{name}", f"{name} contains every concrete result")(check)


def _register_count(name: str) -> None:
    abstract, concrete = COUNT_OPS[name]

    def check(n: int) -> Iterator[Finding]:
        for a in enumerate_bitwise(n):
            r = abstract(a)
            for x in a.members():
                z = concrete(x, n)
                if not r.mem(z):
                    yield (a, x), f"{z} not in {r!r}"

    _law(f"sound.{name}", f"{name} contains the count of every member")(check)


for _name in BINARY_OPS:
    _register_binary(_name)
for _name in UNARY_OPS:
    _register_unary(_name)
for _name in SHIFT_OPS:
    _register_shift(_name)
for _name in EXTEND_OPS:
    _register_extend(_name)
for _name in EXTRACT_OPS:
    _register_extract(_name)
for _name in COUNT_OPS:
    _register_count(_name)


@_law("sound.concat", "concat contains every concatenation of members")
def _sound_concat(n: int) -> Iterator[Finding]:
    highs = list(enumerate_bitwise(n))
    lows = list(enumerate_bitwise(max(n - 1, 0)))
    for a in highs:
        for b in lows:
            r = a.concat(b)
            for x in a.members():
                for y in b.members():
                    z = (x << b.width) | y
                    if not r.mem(z):
                        yield (a, b, x, y), f"{z:#x} not in {r!r}"


@_law("sound.union", "union contains every member of either operand")
def _sound_union(n: int) -> Iterator[Finding]:
    doms = list(enumerate_bitwise(n, include_empty=n <= 2))
    for a in doms:
        for b in doms:
            r = a.union(b)
            for x in list(a.members()) + list(b.members()):
                if not r.mem(x):
                    yield (a, b, x), f"{x:#x} not in {r!r}"


# ═══════════════════════════════════════════════════════════════════════════
#  PART 5 — EXACTNESS
# ═══════════════════════════════════════════════════════════════════════════

@_law("exact.singleton", "operations on singletons give the singleton of the concrete result")
def _exact_singleton(n: int) -> Iterator[Finding]:
    values = range(mask(n) + 1)
    single = BitwiseDomain.singleton
    for x in values:
        a = single(n, x)
        for name, (abstract, concrete) in UNARY_OPS.items():
            expected = single(n, concrete(x, n))
            if abstract(a) != expected:
                yield (name, x), f"{abstract(a)!r} != {expected!r}"
        for name, (abstract, concrete) in COUNT_OPS.items():
            got = abstract(a)
            if not (got.is_singleton() and got.lo == concrete(x, n)):
                yield (name, x), f"{got!r} is not the singleton {concrete(x, n)}"
        for name, (abstract, concrete) in SHIFT_OPS.items():
            if name in _NEEDS_SIGN_BIT and n == 0:
                continue
            for k in range(n + 2):
                expected = single(n, concrete(x, k, n))
                if abstract(a, k) != expected:
                    yield (name, x, k), f"{abstract(a, k)!r} != {expected!r}"
        for name, (abstract, concrete) in EXTEND_OPS.items():
            if name in _NEEDS_SIGN_BIT and n == 0:
                continue
            expected = single(n + 2, concrete(x, n, n + 2))
            if abstract(a, n + 2) != expected:
                yield (name, x), f"{abstract(a, n + 2)!r} != {expected!r}"
        for name, (abstract, concrete) in EXTRACT_OPS.items():
            for m in range(n + 1):
                expected = single(m, concrete(x, n, m))
                if abstract(a, m) != expected:
                    yield (name, x, m), f"{abstract(a, m)!r} != {expected!r}"
        for y in values:
            b = single(n, y)
            for name, (abstract, concrete) in BINARY_OPS.items():
                expected = single(n, concrete(x, y, n))
                if abstract(a, b) != expected:
                    yield (name, x, y), f"{abstract(a, b)!r} != {expected!r}"
            expected = single(2 * n, (x << n) | y)
            if a.concat(b) != expected:
                yield ("concat", x, y), f"{a.concat(b)!r} != {expected!r}"


@_law("exact.intersection", "x is in both operands iff x is in their intersection", smt=True)
def _exact_intersection(n: int) -> Iterator[Finding]:
    doms = list(enumerate_bitwise(n, include_empty=n <= 2))
    for a in doms:
        for b in doms:
            r = a.intersection(b)
            for x in range(mask(n) + 1):
                if (a.mem(x) and b.mem(x)) != r.mem(x):
                    yield (a, b, x), f"membership of {x:#x} disagrees with {r!r}"


# ═══════════════════════════════════════════════════════════════════════════
#  PART 6 — ROUNDING MINIMALITY  (brute force: sorted admissible values + bisect)
# ═══════════════════════════════════════════════════════════════════════════

@_law("rounding.round_above", "round_above is the least z >= x with mask <=b z", min_width=1, smt=True)
def _rounding_above(n: int) -> Iterator[Finding]:
    m = mask(n)
    values = range(m + 1)
    for msk in values:
        admissible = [z for z in values if bitle(msk, z)]
        for x in values:
            expected = admissible[bisect.bisect_left(admissible, x)]
            got = round_above(x, msk, n)
            if got != expected:
                yield (x, msk), f"got {got:#x}, least admissible is {expected:#x}"


@_law(
    "rounding.round_between",
    "round_between is the least z >= x with lo <=b z <=b hi",
    min_width=1,
    smt=True,
)
def _rounding_between(n: int) -> Iterator[Finding]:
    for d in enumerate_bitwise(n):
        admissible = list(d.members())
        for x in range(d.lomask, d.himask + 1):
            expected = admissible[bisect.bisect_left(admissible, x)]
            got = round_between(x, d.lomask, d.himask, n)
            if got != expected:
                yield (x, d.lomask, d.himask), f"got {got:#x}, least admissible is {expected:#x}"


# ═══════════════════════════════════════════════════════════════════════════
#  PART 7 — OVERLAP COMPLETENESS
# ═══════════════════════════════════════════════════════════════════════════

@_law("overlap.complete", "a candidate is a common member iff the domains share a value")
def _overlap_complete(n: int) -> Iterator[Finding]:
    doms: List = list(enumerate_bitwise(n, include_empty=n <= 2))
    doms += enumerate_arith(n)
    doms += enumerate_xor(n)
    universe = range(mask(n) + 1)
    sets = [frozenset(x for x in universe if d.mem(x)) for d in doms]
    for a, sa in zip(doms, sets):
        for b, sb in zip(doms, sets):
            shared = bool(sa & sb)
            witnessed = any(a.mem(c) and b.mem(c) for c in candidates(a, b))
            if shared != witnessed:
                yield (a, b), f"shared={shared} but witnessed={witnessed}"


# ═══════════════════════════════════════════════════════════════════════════
#  PART 8 — CONVERSIONS AND CROSS-REPRESENTATION IDENTITIES
# ═══════════════════════════════════════════════════════════════════════════

@_law("convert.sound", "every conversion keeps every member")
def _convert_sound(n: int) -> Iterator[Finding]:
    pairs: List[Tuple[str, Sequence, Callable]] = [
        ("bitwise_to_arith", list(enumerate_bitwise(n)), bitwise_to_arith),
        ("bitwise_to_xor", list(enumerate_bitwise(n)), bitwise_to_xor),
        ("arith_to_bitwise", list(enumerate_arith(n)), arith_to_bitwise),
        ("arith_to_xor", list(enumerate_arith(n)), arith_to_xor),
        ("xor_to_bitwise", list(enumerate_xor(n)), xor_to_bitwise),
        ("xor_to_arith", list(enumerate_xor(n)), xor_to_arith),
    ]
    universe = range(mask(n) + 1)
    for name, doms, convert in pairs:
        for d in doms:
            r = convert(d)
            for x in universe:
                if d.mem(x) and not r.mem(x):
                    yield (name, d, x), f"{x:#x} lost in {r!r}"


@_law("convert.xor_exact", "bitwise <-> xor conversions keep and add no member")
def _convert_xor_exact(n: int) -> Iterator[Finding]:
    universe = range(mask(n) + 1)
    for d in enumerate_bitwise(n):
        x = bitwise_to_xor(d)
        if xor_to_bitwise(x) != d:
            yield ("roundtrip", d), f"{xor_to_bitwise(x)!r} != {d!r}"
        for v in universe:
            if d.mem(v) != x.mem(v):
                yield ("bitwise_to_xor", d, v), f"membership of {v:#x} differs in {x!r}"
    for x in enumerate_xor(n):
        d = xor_to_bitwise(x)
        for v in universe:
            if d.mem(v) != x.mem(v):
                yield ("xor_to_bitwise", x, v), f"membership of {v:#x} differs in {d!r}"


@_law("identity.xor_ops", "bitwise band/bxor equal the xor-domain detour", smt=True)
def _identity_xor_ops(n: int) -> Iterator[Finding]:
    doms = list(enumerate_bitwise(n, include_empty=n <= 2))
    for a in doms:
        for b in doms:
            via = xor_to_bitwise(bitwise_to_xor(a).bxor(bitwise_to_xor(b)))
            if a.bxor(b) != via:
                yield ("bxor", a, b), f"{a.bxor(b)!r} != {via!r}"
            if a.nonempty() and b.nonempty():
                via = xor_to_bitwise(bitwise_to_xor(a).band(bitwise_to_xor(b)))
                if a.band(b) != via:
                    yield ("band", a, b), f"{a.band(b)!r} != {via!r}"


# ═══════════════════════════════════════════════════════════════════════════
#  PART 9 — DRIVER
# ═══════════════════════════════════════════════════════════════════════════

def check_law(law: Law, width: int, *, max_failures: Optional[int] = 10) -> LawResult:
    """Run *law* at *width*; stop after *max_failures* counterexamples."""
    check_width(width, operation="check_law")
    if width < law.min_width:
        logger.debug("skipping %s at width %d (needs %d)", law.name, width, law.min_width)
        return LawResult(law, width, skipped=True)

    result = LawResult(law, width)
    started = time.perf_counter()
    for inputs, message in law.check(width):
        cex = Counterexample(law.name, width, inputs, message)
        logger.warning("counterexample: %s", cex)
        result.counterexamples.append(cex)
        if max_failures is not None and len(result.counterexamples) >= max_failures:
            break
    result.elapsed = time.perf_counter() - started
    logger.debug("%s at width %d: %s (%.3fs)", law.name, width, result.status, result.elapsed)
    return result


def check_all(
    width: int,
    *,
    names: Optional[Sequence[str]] = None,
    max_failures: Optional[int] = 10,
) -> List[LawResult]:
    """Run the named laws (all by default) at *width*."""
    selected = [LAWS[n] for n in names] if names else list(LAWS.values())
    return [check_law(law, width, max_failures=max_failures) for law in selected]


__all__ = [
    "BINARY_OPS",
    "UNARY_OPS",
    "SHIFT_OPS",
    "EXTEND_OPS",
    "EXTRACT_OPS",
    "COUNT_OPS",
    "Law",
    "LawResult",
    "Counterexample",
    "LAWS",
    "check_law",
    "check_all",
    "enumerate_bitwise",
    "enumerate_arith",
    "enumerate_xor",
]
