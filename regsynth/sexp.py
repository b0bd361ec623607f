# regsynth/sexp.py
"""S-expression form of a program.

::

    (program
      (dec 1 2 3)
      (inc 2 1))

Labels are kept exactly as written, so the form is lossless for any
well-formed :class:`~regsynth.instructions.Program`.
"""

from __future__ import annotations

from typing import Any, List

import sexpdata
from sexpdata import Symbol

from regsynth.errors import ErrorCodes, ParseError, ValidationError
from regsynth.instructions import Dec, Inc, Instruction, Program

_PROGRAM = Symbol("program")
_INC = Symbol("inc")
_DEC = Symbol("dec")


def _as_int(s: Any) -> int:
    if isinstance(s, int) and not isinstance(s, bool):
        return s
    raise ParseError(
        f"Expected integer, got {type(s).__name__}: {s!r}", code=ErrorCodes.BAD_SEXP
    )


def _parse_form(form: Any) -> Instruction:
    if not isinstance(form, list) or not form:
        raise ParseError(f"Expected (inc ...) or (dec ...), got: {form!r}",
                         code=ErrorCodes.BAD_SEXP)
    head, args = form[0], form[1:]
    try:
        if head == _INC and len(args) == 2:
            return Inc(*(_as_int(a) for a in args))
        if head == _DEC and len(args) == 3:
            return Dec(*(_as_int(a) for a in args))
    except ValidationError as exc:
        raise ParseError(exc.message, code=ErrorCodes.BAD_SEXP) from exc
    raise ParseError(f"Unknown instruction form: {sexpdata.dumps(form)}",
                     code=ErrorCodes.BAD_SEXP)


def loads_program(text: str) -> Program:
    """Parse ``(program ...)`` text into a :class:`Program`."""
    try:
        tree = sexpdata.loads(text, nil=None, true=None, false=None)
    except Exception as exc:
        raise ParseError(f"unreadable S-expression: {exc}", code=ErrorCodes.BAD_SEXP) from exc
    if not isinstance(tree, list) or not tree or tree[0] != _PROGRAM:
        raise ParseError("Expected (program ...)", code=ErrorCodes.BAD_SEXP)
    return Program(tuple(_parse_form(f) for f in tree[1:]))


def to_sexp(program: Program) -> List[Any]:
    forms: List[Any] = [_PROGRAM]
    for instr in program:
        if isinstance(instr, Inc):
            forms.append([_INC, instr.register, instr.next])
        else:
            forms.append([_DEC, instr.register, instr.next, instr.else_next])
    return forms


def dumps_program(program: Program, pretty: bool = False) -> str:
    """Render ``program`` as an S-expression string."""
    if not pretty:
        return sexpdata.dumps(to_sexp(program))
    body = "".join(f"\n  {sexpdata.dumps(f)}" for f in to_sexp(program)[1:])
    return f"(program{body})"


__all__ = ["loads_program", "dumps_program", "to_sexp"]
