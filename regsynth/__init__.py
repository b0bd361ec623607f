"""regsynth: register-machine program synthesis.

This package models an unlimited register machine (increment and
decrement-or-branch instructions) and synthesizes new machine programs
from existing ones with the classical recursion-theoretic operators:
composition, primitive recursion and unbounded minimization.

Submodules
----------
instructions
    ``Inc`` / ``Dec`` instructions and the validated ``Program`` type.

zones, splice
    Register-zone allocation, relabeling of spliced blocks and the
    move / copy-via-scratch transfer micro-programs.

combinators
    ``compose``, ``primrec`` and ``minimize``.

machine
    The interpreter (``Machine``, ``MachineConfig``, ``compute``).

syntax, sexp
    ``R1-=>2,3`` text notation (parsimonious) and an S-expression form
    (sexpdata).

prelude
    zero / succ / proj and arithmetic built from them.

main
    CLI entry-point: ``run``, ``check``, ``fmt``, ``dump-sexp``, ``demo``.

Usage
-----
Programmatic::

    from regsynth import compose, primrec, compute, prelude

    add = primrec(prelude.proj(1), compose(prelude.succ(), prelude.proj(2)))
    compute(add, [3, 4])        # -> 7

Command-line::

    python -m regsynth run multiply.rm 3 5
"""

from __future__ import annotations

from regsynth.combinators import compose, minimize, primrec
from regsynth.errors import (
    ArityError,
    MalformedLabelError,
    ParseError,
    RegsynthError,
    StepLimitExceeded,
    ValidationError,
)
from regsynth.instructions import EMPTY, Dec, Inc, Program
from regsynth.machine import Machine, MachineConfig, compute

__version__: str = "0.1.0"
__all__: list[str] = [
    "__version__",
    "Inc",
    "Dec",
    "Program",
    "EMPTY",
    "compose",
    "primrec",
    "minimize",
    "Machine",
    "MachineConfig",
    "compute",
    "RegsynthError",
    "ParseError",
    "ValidationError",
    "ArityError",
    "MalformedLabelError",
    "StepLimitExceeded",
]
