#!/usr/bin/env python3
"""regsynth/main.py: CLI entry-point for the register-machine tools.

Usage examples
--------------
    # Run a program written in R1-=>2,3 notation on inputs 3 and 5
    python -m regsynth run multiply.rm 3 5

    # Bound execution (minimization may legitimately diverge)
    python -m regsynth run search.rm 7 --max-steps 100000

    # Parse and validate a program, report its size and footprint
    python -m regsynth check multiply.rm

    # Re-print canonically, or as an S-expression
    python -m regsynth fmt multiply.rm --numbered
    python -m regsynth dump-sexp multiply.rm

    # Print a synthesized prelude program (add, mul, factorial, ...)
    python -m regsynth show factorial

    # Evaluate the built-in demonstration scenarios
    python -m regsynth demo

Exit codes
----------
    0   Success.
    1   Parse or validation error in the user's program or inputs.
    2   Infrastructure failure (missing file, bad arguments).
    3   Step limit reached before the program halted.
"""

from __future__ import annotations

import argparse
import logging
import sys
import textwrap
import time
from pathlib import Path
from typing import Callable, List, Optional, Sequence, Tuple

from regsynth import __version__
from regsynth import prelude as P
from regsynth.combinators import compose
from regsynth.errors import RegsynthError, StepLimitExceeded
from regsynth.instructions import Program
from regsynth.machine import Machine, MachineConfig
from regsynth.prelude import PRELUDE
from regsynth.sexp import dumps_program, loads_program
from regsynth.syntax import format_program, parse_program

_log = logging.getLogger("regsynth")

# Exit codes ----------------------------------------------------------------

EXIT_OK: int = 0
EXIT_ERROR: int = 1
EXIT_INFRA: int = 2
EXIT_STEP_LIMIT: int = 3


# ===========================================================================
# Utility helpers
# ===========================================================================

def _configure_logging(verbosity: int) -> None:
    """Set up the root ``regsynth`` logger.

    Parameters
    ----------
    verbosity:
        0 → WARNING, 1 → INFO, 2+ → DEBUG.
    """
    level = logging.WARNING
    if verbosity == 1:
        level = logging.INFO
    elif verbosity >= 2:
        level = logging.DEBUG

    root = logging.getLogger("regsynth")
    root.setLevel(level)
    if not root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(
            logging.Formatter(
                fmt="%(asctime)s [%(levelname)-5.5s] %(name)s: %(message)s",
                datefmt="%H:%M:%S",
            )
        )
        root.addHandler(handler)


def _resolve_path(raw: str, label: str = "file") -> Path:
    """Resolve *raw* to an absolute ``Path``, raising on missing files."""
    p = Path(raw).expanduser().resolve()
    if not p.exists():
        _log.error("%s not found: %s", label, p)
        raise SystemExit(EXIT_INFRA)
    return p


def _load_program(args: argparse.Namespace) -> Program:
    """Read the program named by ``args.program_file``.

    Files ending in ``.sexp`` (or any file with ``--sexp``) are read as
    S-expressions; everything else uses the ``R1-=>2,3`` notation.
    """
    path = _resolve_path(args.program_file, "program file")
    source = path.read_text(encoding="utf-8")
    if getattr(args, "sexp", False) or path.suffix == ".sexp":
        program = loads_program(source)
    else:
        program = parse_program(source)
    _log.info("loaded %s: %d instructions, footprint %d",
              path.name, len(program), program.footprint)
    return program


def _machine_config(args: argparse.Namespace) -> MachineConfig:
    return MachineConfig(
        max_steps=args.max_steps,
        accelerate=not args.no_accelerate,
    )


# ===========================================================================
# Sub-command implementations
# ===========================================================================

def cmd_run(args: argparse.Namespace) -> int:
    """Execute a program and print register 1."""
    program = _load_program(args)
    machine = Machine(program, _machine_config(args))
    t0 = time.perf_counter()
    result = machine.run({i: v for i, v in enumerate(args.inputs, start=1)})
    elapsed = time.perf_counter() - t0
    _log.info("halted after %d steps in %.3fs", result.steps, elapsed)
    print(result.value)
    if args.registers:
        for index, value in sorted(result.registers.items()):
            if value:
                print(f"R{index} = {value}")
    return EXIT_OK


def cmd_check(args: argparse.Namespace) -> int:
    """Parse and validate a program without running it."""
    program = _load_program(args)
    print(
        f"{args.program_file}: {len(program)} instructions, "
        f"footprint {program.footprint}, halt label {program.halt}"
    )
    return EXIT_OK


def cmd_fmt(args: argparse.Namespace) -> int:
    """Re-print a program in canonical notation."""
    program = _load_program(args)
    sys.stdout.write(format_program(program, numbered=args.numbered))
    return EXIT_OK


def cmd_dump_sexp(args: argparse.Namespace) -> int:
    """Print a program's S-expression form."""
    program = _load_program(args)
    print(dumps_program(program, pretty=True))
    return EXIT_OK


def cmd_show(args: argparse.Namespace) -> int:
    """Print a prelude program."""
    program = PRELUDE[args.name]()
    if args.sexp:
        print(dumps_program(program, pretty=True))
    else:
        sys.stdout.write(format_program(program, numbered=args.numbered))
    return EXIT_OK


def demo_scenarios() -> List[Tuple[str, Callable[[], Program], Sequence[int], int]]:
    """(label, builder, inputs, expected) for the demonstration run."""
    return [
        ("succ(zero())", lambda: compose(P.succ(), P.zero()), [], 1),
        ("add(3, 4)", P.add, [3, 4], 7),
        ("mul(3, 4)", P.mul, [3, 4], 12),
        ("multiply(3, 5)", P.multiply, [3, 5], 15),
        ("factorial(7)", P.factorial, [7], 5040),
        ("div(24, 3)", P.div, [24, 3], 8),
    ]


def cmd_demo(args: argparse.Namespace) -> int:
    """Evaluate the demonstration scenarios and print the results."""
    config = _machine_config(args)
    failures = 0
    for label, build, inputs, expected in demo_scenarios():
        program = build()
        result = Machine(program, config).run(
            {i: v for i, v in enumerate(inputs, start=1)}
        )
        status = "ok" if result.value == expected else f"FAIL (expected {expected})"
        failures += result.value != expected
        print(f"{label:<16} = {result.value:<6} "
              f"[{len(program)} instr, {result.steps} steps] {status}")
    return EXIT_ERROR if failures else EXIT_OK


# ===========================================================================
# Argument parser
# ===========================================================================

def _build_parser() -> argparse.ArgumentParser:
    """Construct the full CLI argument parser with subcommands."""

    # --- Top-level parser --------------------------------------------------
    parser = argparse.ArgumentParser(
        prog="regsynth",
        description=(
            "regsynth: register-machine programs and the combinators that\n"
            "synthesize them (composition, primitive recursion, minimization)."
        ),
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=textwrap.dedent("""\
            examples:
              regsynth run multiply.rm 3 5
              regsynth check multiply.rm
              regsynth show add --numbered
              regsynth demo
        """),
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (-v info, -vv debug).",
    )

    subparsers = parser.add_subparsers(
        dest="command",
        title="commands",
        metavar="<command>",
    )

    # Shared argument groups (reusable) ------------------------------------

    def _add_program_args(p: argparse.ArgumentParser) -> None:
        p.add_argument(
            "program_file",
            metavar="PROGRAM",
            help="Program file (R1-=>2,3 notation, or .sexp).",
        )
        p.add_argument(
            "--sexp",
            action="store_true",
            help="Read the program as an S-expression.",
        )

    def _add_runtime_args(p: argparse.ArgumentParser) -> None:
        g = p.add_argument_group("execution")
        g.add_argument(
            "--max-steps",
            type=int,
            default=None,
            metavar="N",
            help="Stop after N steps (default: unbounded).",
        )
        g.add_argument(
            "--no-accelerate",
            action="store_true",
            help="Single-step transfer loops instead of batching them.",
        )

    # --- run ---------------------------------------------------------------
    p_run = subparsers.add_parser(
        "run",
        help="Run a program and print register 1.",
    )
    _add_program_args(p_run)
    p_run.add_argument(
        "inputs",
        nargs="*",
        type=int,
        metavar="N",
        help="Initial values for registers 1, 2, ...",
    )
    p_run.add_argument(
        "--registers",
        action="store_true",
        help="Also print every nonzero register.",
    )
    _add_runtime_args(p_run)
    p_run.set_defaults(func=cmd_run)

    # --- check -------------------------------------------------------------
    p_check = subparsers.add_parser(
        "check",
        help="Parse and validate a program.",
    )
    _add_program_args(p_check)
    p_check.set_defaults(func=cmd_check)

    # --- fmt ---------------------------------------------------------------
    p_fmt = subparsers.add_parser(
        "fmt",
        help="Print a program in canonical notation.",
    )
    _add_program_args(p_fmt)
    p_fmt.add_argument("--numbered", action="store_true",
                       help="Annotate each line with its address.")
    p_fmt.set_defaults(func=cmd_fmt)

    # --- dump-sexp ---------------------------------------------------------
    p_sexp = subparsers.add_parser(
        "dump-sexp",
        help="Print a program as an S-expression.",
    )
    _add_program_args(p_sexp)
    p_sexp.set_defaults(func=cmd_dump_sexp)

    # --- show --------------------------------------------------------------
    p_show = subparsers.add_parser(
        "show",
        help="Print a prelude program.",
    )
    p_show.add_argument("name", choices=sorted(PRELUDE), help="Prelude program.")
    p_show.add_argument("--sexp", action="store_true",
                        help="Print as an S-expression.")
    p_show.add_argument("--numbered", action="store_true",
                        help="Annotate each line with its address.")
    p_show.set_defaults(func=cmd_show)

    # --- demo --------------------------------------------------------------
    p_demo = subparsers.add_parser(
        "demo",
        help="Evaluate the built-in demonstration scenarios.",
    )
    _add_runtime_args(p_demo)
    p_demo.set_defaults(func=cmd_demo)

    return parser


# ===========================================================================
# Main
# ===========================================================================

def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the regsynth CLI.

    Parameters
    ----------
    argv:
        Command-line arguments.  ``None`` → ``sys.argv[1:]``.

    Returns
    -------
    int
        Exit code (see module docstring for semantics).
    """
    parser = _build_parser()
    args = parser.parse_args(argv)

    _configure_logging(args.verbose)

    # No subcommand given → print help.
    if not hasattr(args, "func"):
        parser.print_help(sys.stderr)
        return EXIT_INFRA

    try:
        return args.func(args)
    except StepLimitExceeded as exc:
        _log.error("%s", exc)
        return EXIT_STEP_LIMIT
    except RegsynthError as exc:
        _log.error("%s", exc)
        return EXIT_ERROR
    except KeyboardInterrupt:
        _log.info("Interrupted by user.")
        return 130  # Standard UNIX convention for SIGINT
    except SystemExit as exc:
        return exc.code if isinstance(exc.code, int) else EXIT_INFRA


if __name__ == "__main__":
    raise SystemExit(main())
