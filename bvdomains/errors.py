# bvdomains/errors.py
"""
Error types for the bitvector domain library.

Both error kinds are precondition violations, raised before any work is
done.  The empty domain (⊥) is an ordinary value and never an error.

Error Hierarchy:
────────────────
    BVDomainError (base)
    ├── WidthMismatch   - operands of a binary operation disagree on width
    └── InvalidWidth    - width is negative, zero where a sign bit or a
                          rounding word is required, or out of range for
                          an extension/extraction

Error Codes:
────────────
    BVD-0001  width mismatch
    BVD-0002  invalid width

Both subclasses also derive from ``ValueError`` so that callers which
only know about the builtin hierarchy still catch them.
"""

from __future__ import annotations

from typing import ClassVar, Optional


class BVDomainError(Exception):
    """Base class of every error raised by :mod:`bvdomains`."""

    code: ClassVar[str] = "BVD-0000"

    def __init__(self, message: str, *, operation: Optional[str] = None) -> None:
        self.operation = operation
        self.message = message
        super().__init__(self._format())

    def _format(self) -> str:
        if self.operation:
            return f"[{self.code}] {self.operation}: {self.message}"
        return f"[{self.code}] {self.message}"


class WidthMismatch(BVDomainError, ValueError):
    """Operands of a binary operation have different widths."""

    code: ClassVar[str] = "BVD-0001"

    def __init__(self, left: int, right: int, *, operation: Optional[str] = None) -> None:
        self.left = left
        self.right = right
        super().__init__(
            f"operand widths differ ({left} vs {right})", operation=operation
        )


class InvalidWidth(BVDomainError, ValueError):
    """A width is negative, zero where n >= 1 is required, or out of range."""

    code: ClassVar[str] = "BVD-0002"

    def __init__(
        self,
        width: int,
        *,
        operation: Optional[str] = None,
        reason: str = "unsupported width",
    ) -> None:
        self.width = width
        self.reason = reason
        super().__init__(f"{reason} (got {width})", operation=operation)


__all__ = ["BVDomainError", "WidthMismatch", "InvalidWidth"]
