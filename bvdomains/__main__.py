#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
bvdomains/__main__.py
=====================

Law checker for the bitvector domain library.

Usage
-----
    python -m bvdomains <command> [options]

Commands
--------
    list        Show every registered law
    check       Check laws by exhaustive enumeration at one or more widths
                (optionally also prove them with Z3 via ``--smt``)

Exit status
-----------
    0   every selected law holds
    1   at least one counterexample (or refutation) was found, or Z3
        gave up on a proof within the timeout
    2   internal error
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
import traceback
from typing import List, Optional, Sequence

from termcolor import colored

from . import __version__
from .laws import LAWS, LawResult, check_law

logger = logging.getLogger(__name__)

_STATUS_COLORS = {"pass": "green", "fail": "red", "skip": "yellow"}


class _Painter:
    """Colours output unless disabled."""

    def __init__(self, enabled: bool) -> None:
        self.enabled = enabled

    def __call__(self, text: str, color: str, bold: bool = False) -> str:
        if not self.enabled:
            return text
        return colored(text, color, attrs=["bold"] if bold else None)


def _select_laws(names: Optional[Sequence[str]]) -> List[str]:
    if not names:
        return list(LAWS)
    selected = []
    for pattern in names:
        matched = [n for n in LAWS if n == pattern or n.startswith(pattern.rstrip("*"))]
        if not matched:
            raise KeyError(pattern)
        selected.extend(m for m in matched if m not in selected)
    return selected


def cmd_list(args: argparse.Namespace) -> int:
    """Handle the 'list' command."""
    paint = _Painter(not args.no_color)
    for law in LAWS.values():
        tags = []
        if law.min_width:
            tags.append(f"width >= {law.min_width}")
        if law.smt:
            tags.append("smt")
        suffix = f"  [{', '.join(tags)}]" if tags else ""
        print(f"{paint(law.name, 'cyan', bold=True)}  {law.description}{suffix}")
    return 0


def _report(result: LawResult, paint: _Painter, verbose: bool) -> None:
    status = result.status
    label = paint(status.upper().ljust(4), _STATUS_COLORS[status], bold=True)
    timing = f" ({result.elapsed:.2f}s)" if verbose and not result.skipped else ""
    print(f"{label} {result.law.name} @ width {result.width}{timing}")
    for cex in result.counterexamples:
        print(f"     {paint('-->', 'blue', bold=True)} {cex}")


def cmd_check(args: argparse.Namespace) -> int:
    """Handle the 'check' command."""
    paint = _Painter(not args.no_color)
    try:
        names = _select_laws(args.law)
    except KeyError as exc:
        sys.stderr.write(f"{paint('error', 'red', bold=True)}: unknown law {exc}\n")
        return 1

    failed = 0
    for width in args.width:
        for name in names:
            result = check_law(LAWS[name], width, max_failures=args.max_failures)
            _report(result, paint, args.verbose)
            if result.status == "fail":
                failed += 1

    if args.smt:
        from .smt import prove_law

        for width in args.width:
            if width < 1:
                continue
            for name in names:
                if not LAWS[name].smt:
                    continue
                try:
                    proof = prove_law(name, width, timeout_ms=args.timeout)
                except ImportError as exc:
                    sys.stderr.write(f"{paint('error', 'red', bold=True)}: {exc}\n")
                    return 1
                except TimeoutError as exc:
                    label = paint("UNKNOWN", _STATUS_COLORS["skip"], bold=True)
                    print(f"{label} {name}@{width}: {exc}")
                    failed += 1
                    continue
                if proof.proved:
                    label = paint("PROVED", _STATUS_COLORS["pass"], bold=True)
                else:
                    label = paint("REFUTED", _STATUS_COLORS["fail"], bold=True)
                print(f"{label} {proof}")
                if not proof.proved:
                    failed += 1

    if failed:
        print(paint(f"{failed} law check(s) failed", "red", bold=True))
        return 1
    if not args.quiet:
        print(paint("all laws hold", "green", bold=True))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bvdomains",
        description="Check the correctness laws of the bitvector domain library.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              %(prog)s list
              %(prog)s check --width 4
              %(prog)s check --width 1 2 3 --law rounding.
              %(prog)s check --width 8 --law sound.band --smt
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--no-color",
        action="store_true",
        help="Disable coloured output",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="store_true",
        help="Show timings and debug logging",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only report failures",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    p_list = subparsers.add_parser("list", help="Show every registered law")
    p_list.set_defaults(func=cmd_list)

    p_check = subparsers.add_parser(
        "check",
        help="Check laws exhaustively at the given widths",
        description=(
            "Enumerate every domain and every value of each width and report "
            "counterexamples.  Cost grows quickly; widths above 4 are slow."
        ),
    )
    p_check.add_argument(
        "-w", "--width",
        type=int,
        nargs="+",
        default=[3],
        help="Bit widths to check (default: 3)",
    )
    p_check.add_argument(
        "-l", "--law",
        nargs="+",
        metavar="NAME",
        help="Law names or name prefixes (default: all)",
    )
    p_check.add_argument(
        "--max-failures",
        type=int,
        default=5,
        help="Counterexamples to collect per law (default: 5)",
    )
    p_check.add_argument(
        "--smt",
        action="store_true",
        help="Also prove laws with an SMT encoding using Z3",
    )
    p_check.add_argument(
        "--timeout",
        type=int,
        default=None,
        metavar="MS",
        help="Z3 timeout per law in milliseconds",
    )
    p_check.set_defaults(func=cmd_check)

    return parser


def _configure_logging(args: argparse.Namespace) -> None:
    if args.verbose:
        level = logging.DEBUG
    elif args.quiet:
        level = logging.ERROR
    else:
        level = logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Main entry point.  Returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args)

    if args.command is None:
        parser.print_help()
        return 0

    try:
        return args.func(args)
    except KeyboardInterrupt:
        sys.stderr.write("\nInterrupted.\n")
        return 130
    except Exception as e:
        logger.debug("unhandled error", exc_info=True)
        sys.stderr.write(f"\nInternal error: {e}\n")
        traceback.print_exc()
        return 2


if __name__ == "__main__":
    sys.exit(main())
