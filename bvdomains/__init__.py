"""
bvdomains — Abstract Domains for Fixed-Width Bitvectors
=======================================================

Sound, cheap over-approximations of the values an ``n``-bit quantity may
take, for static analyzers, optimizers and symbolic-execution engines.

Core modules
------------
bitwise
    Masked-interval domain ``{x | lomask ≤b x ≤b himask}`` and its
    logical, shift, rotation, extension and extraction operations.
rounding
    Bit-trick primitives: ``smear``, ``round_above``, ``round_between``.
arithmetic
    Cyclic interval domain (a run of consecutive values modulo ``2**n``).
xor
    XOR-affine domain (a coset of the span of the unknown bits).
interfaces
    The narrow protocols through which the two peer domains are consumed.
conversions
    Sound, width-preserving mappings between the three representations.
overlap
    Candidate-based disjointness test with a concrete witness.
transfer
    Popcount / count-leading-zeros / count-trailing-zeros evaluators.
laws
    Correctness laws checked by exhaustive enumeration.
smt
    Z3-backed proofs of the laws (needs ``z3-solver``).

Quick start
-----------
>>> from bvdomains import BitwiseDomain, ArithmeticDomain, find_witness, domains_overlap
>>> a = BitwiseDomain(4, 0b0100, 0b1101)
>>> b = BitwiseDomain(4, 0b0001, 0b0111)
>>> find_witness(a, b)
5
>>> domains_overlap(ArithmeticDomain.range(4, 8, 11), BitwiseDomain(4, 0b0100, 0b1110))
False

Package layout
--------------
::

    bvdomains/
    ├── __init__.py            ← this file
    ├── __main__.py            ← ``python -m bvdomains`` law checker
    ├── errors.py
    ├── words.py
    ├── rounding.py
    ├── bitwise.py
    ├── arithmetic.py
    ├── xor.py
    ├── interfaces.py
    ├── conversions.py
    ├── overlap.py
    ├── transfer.py
    ├── laws.py
    └── smt.py
"""

from __future__ import annotations

import importlib
import sys
from typing import TYPE_CHECKING, List

# ---------------------------------------------------------------------------
# Package metadata
# ---------------------------------------------------------------------------

__version__ = "0.1.0"
__author__ = "bvdomains contributors"
__license__ = "MIT"
__all__: List[str] = []          # populated below

# ---------------------------------------------------------------------------
# Internal registry: (module_name, list_of_names_to_import)
# ---------------------------------------------------------------------------

_CORE_MODULES = {
    "errors": [
        "BVDomainError",
        "WidthMismatch",
        "InvalidWidth",
    ],
    "rounding": [
        "smear",
        "round_above",
        "round_between",
    ],
    "bitwise": [
        "BitwiseDomain",
        "bitle",
    ],
    "arithmetic": [
        "ArithmeticDomain",
    ],
    "xor": [
        "XorDomain",
    ],
    "interfaces": [
        "ArithmeticLike",
        "XorLike",
    ],
    "conversions": [
        "arith_to_bitwise",
        "bitwise_to_arith",
        "bitwise_to_xor",
        "xor_to_bitwise",
        "arith_to_xor",
        "xor_to_arith",
    ],
    "overlap": [
        "candidates",
        "find_witness",
        "domains_overlap",
    ],
    "transfer": [
        "popcnt",
        "clz",
        "ctz",
    ],
}


def _import_names(module_rel_name: str, names: List[str]) -> None:
    """Import *names* from a submodule and bind them in the package namespace."""
    fq_name = f"{__name__}.{module_rel_name}"
    try:
        mod = importlib.import_module(fq_name)
    except ImportError as exc:
        raise ImportError(
            f"bvdomains: required submodule '{module_rel_name}' "
            f"failed to import: {exc}"
        ) from exc

    current_module = sys.modules[__name__]
    for name in names:
        obj = getattr(mod, name, None)
        if obj is None:
            raise AttributeError(f"bvdomains.{module_rel_name} does not export '{name}'")
        setattr(current_module, name, obj)
        __all__.append(name)

    setattr(current_module, module_rel_name, mod)
    if module_rel_name not in __all__:
        __all__.append(module_rel_name)


for _mod, _names in _CORE_MODULES.items():
    _import_names(_mod, _names)

del _mod, _names


def list_submodules() -> List[str]:
    """Names of the re-exported submodules."""
    return sorted(_CORE_MODULES)


def library_info() -> dict:
    """Metadata about the installed library, for diagnostics."""
    return {
        "package": __name__,
        "version": __version__,
        "python": sys.version,
        "submodules": list_submodules(),
        "all_exports": list(__all__),
    }


__all__ += ["list_submodules", "library_info", "__version__"]

# ---------------------------------------------------------------------------
# Static re-exports for type checkers
# ---------------------------------------------------------------------------

if TYPE_CHECKING:
    from .errors import (
        BVDomainError as BVDomainError,
        WidthMismatch as WidthMismatch,
        InvalidWidth as InvalidWidth,
    )
    from .rounding import (
        smear as smear,
        round_above as round_above,
        round_between as round_between,
    )
    from .bitwise import BitwiseDomain as BitwiseDomain, bitle as bitle
    from .arithmetic import ArithmeticDomain as ArithmeticDomain
    from .xor import XorDomain as XorDomain
    from .interfaces import ArithmeticLike as ArithmeticLike, XorLike as XorLike
    from .conversions import (
        arith_to_bitwise as arith_to_bitwise,
        bitwise_to_arith as bitwise_to_arith,
        bitwise_to_xor as bitwise_to_xor,
        xor_to_bitwise as xor_to_bitwise,
        arith_to_xor as arith_to_xor,
        xor_to_arith as xor_to_arith,
    )
    from .overlap import (
        candidates as candidates,
        find_witness as find_witness,
        domains_overlap as domains_overlap,
    )
    from .transfer import popcnt as popcnt, clz as clz, ctz as ctz
