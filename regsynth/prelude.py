# regsynth/prelude.py
"""
Standard library of register-machine programs.

The three basic programs (:func:`zero`, :func:`succ`, :func:`proj`) are
written by hand; everything else is synthesized from them with
:mod:`regsynth.combinators` only.  Builders are cached since programs
are immutable.
"""

from __future__ import annotations

from functools import lru_cache

from regsynth.combinators import compose, minimize, primrec
from regsynth.errors import ErrorCodes, ValidationError
from regsynth.instructions import EMPTY, Dec, Inc, Program
from regsynth.splice import clear, move, sequence
from regsynth.syntax import parse_program


# ── Basic programs ─────────────────────────────────────────────────

def zero() -> Program:
    """``zero(...) = 0``"""
    return Program((Dec(1, 1, 2),))


def succ() -> Program:
    """``succ(x) = x + 1``"""
    return Program((Inc(1, 2),))


def identity() -> Program:
    """The empty program: returns its first argument unchanged."""
    return EMPTY


def proj(i: int) -> Program:
    """``proj(i)(x1, ..., xk) = xi``"""
    if isinstance(i, bool) or not isinstance(i, int) or i < 1:
        raise ValidationError(f"projection index must be >= 1, got {i!r}",
                              code=ErrorCodes.BAD_FIELD)
    if i == 1:
        return EMPTY
    return sequence(clear(1), move(i, [1]))


# ── Synthesized arithmetic ─────────────────────────────────────────

@lru_cache(maxsize=None)
def add() -> Program:
    """``add(y, x) = y + x``"""
    return primrec(proj(1), compose(succ(), proj(2)))


@lru_cache(maxsize=None)
def mul() -> Program:
    """``mul(y, x) = y * x``"""
    return primrec(zero(), compose(add(), proj(2), proj(3)))


@lru_cache(maxsize=None)
def pred() -> Program:
    """``pred(0) = 0``, ``pred(y + 1) = y``"""
    return primrec(zero(), proj(1))


@lru_cache(maxsize=None)
def sub() -> Program:
    """Truncated subtraction: ``sub(x, y) = max(x - y, 0)``."""
    # recursion runs on the first argument, so build (y, x) -> x - y first
    rsub = primrec(proj(1), compose(pred(), proj(2)))
    return compose(rsub, proj(2), proj(1))


@lru_cache(maxsize=None)
def factorial() -> Program:
    """``factorial(0) = 1``, ``factorial(y + 1) = (y + 1) * factorial(y)``"""
    one = compose(succ(), zero())
    step = compose(mul(), compose(succ(), proj(1)), proj(2))
    return primrec(one, step)


@lru_cache(maxsize=None)
def div() -> Program:
    """``div(x, d)``: least ``y`` with ``x - y * d <= 0`` (ceiling division)."""
    return minimize(compose(sub(), proj(2), compose(mul(), proj(1), proj(3))))


# ── Hand-written literal ───────────────────────────────────────────

MULTIPLY_SOURCE = """\
# R1 := R1 * R2, using R3 as accumulator and R4 to restore R2
R1-=>2,7
R2-=>3,5
R3+=>4
R4+=>2
R4-=>6,1
R2+=>5
R3-=>8,9
R1+=>7
"""


@lru_cache(maxsize=None)
def multiply() -> Program:
    return parse_program(MULTIPLY_SOURCE)


PRELUDE = {
    "zero": zero,
    "succ": succ,
    "identity": identity,
    "add": add,
    "mul": mul,
    "pred": pred,
    "sub": sub,
    "factorial": factorial,
    "div": div,
    "multiply": multiply,
}


__all__ = [
    "zero",
    "succ",
    "identity",
    "proj",
    "add",
    "mul",
    "pred",
    "sub",
    "factorial",
    "div",
    "multiply",
    "MULTIPLY_SOURCE",
    "PRELUDE",
]
