# regsynth/syntax.py
"""
Textual instruction notation.

::

    R<i>+=><n>         increment register i, continue at n
    R<i>-=><n>,<m>     if register i > 0 decrement it and continue at n, else m

A program is one instruction per line.  Blank lines and ``#`` comments
are ignored; anything else that does not match the notation is a
:class:`~regsynth.errors.ParseError` tagged with its 1-based line.
"""

from __future__ import annotations

import logging
from typing import List, Optional

from parsimonious.exceptions import ParseError as PegParseError
from parsimonious.grammar import Grammar
from parsimonious.nodes import NodeVisitor

from regsynth.errors import ParseError, ValidationError
from regsynth.instructions import Dec, Inc, Instruction, Program

logger = logging.getLogger(__name__)

_SHAPE_HINT = "expected R<i>+=><n> or R<i>-=><n>,<m>"
_FIELD_HINT = "registers and labels start at 1"


# ═══════════════════════════════════════════════════════════════════
#  Grammar (Parsimonious PEG)
# ═══════════════════════════════════════════════════════════════════

INSTRUCTION_GRAMMAR = Grammar(r'''
    line        = ws statement? ws comment?
    single      = ws statement ws
    statement   = dec / inc
    inc         = "R" number "+=>" number
    dec         = "R" number "-=>" number "," number
    number      = ~"[0-9]+"
    comment     = ~"#.*"
    ws          = ~"[ \t]*"
''')


class InstructionBuilder(NodeVisitor):
    """Transforms a Parsimonious parse tree into instruction objects."""

    unwrapped_exceptions = (ParseError,)

    def generic_visit(self, node, visited_children):
        return visited_children or node

    def visit_number(self, node, visited_children):
        return int(node.text)

    def visit_inc(self, node, visited_children):
        _, register, _, target = visited_children
        return self._build(node.text, Inc, register, target)

    def visit_dec(self, node, visited_children):
        _, register, _, target, _, other = visited_children
        return self._build(node.text, Dec, register, target, other)

    def visit_statement(self, node, visited_children):
        return visited_children[0]

    def visit_single(self, node, visited_children):
        _, statement, _ = visited_children
        return statement

    def visit_line(self, node, visited_children):
        _, statement, _, _ = visited_children
        if isinstance(statement, list) and statement:
            return statement[0]
        return None

    @staticmethod
    def _build(text, cls, *fields):
        try:
            return cls(*fields)
        except ValidationError as exc:
            raise ParseError(f"{text!r}: {exc.message}", text=text) from exc


_BUILDER = InstructionBuilder()


# ═══════════════════════════════════════════════════════════════════
#  Parsing
# ═══════════════════════════════════════════════════════════════════

def parse_instruction(text: str) -> Instruction:
    """Parse a single instruction such as ``R1-=>2,3``."""
    try:
        tree = INSTRUCTION_GRAMMAR["single"].parse(text)
    except PegParseError as exc:
        raise ParseError(
            f"not an instruction: {text!r}", text=text, hint=_SHAPE_HINT
        ) from exc
    return _BUILDER.visit(tree)


def parse_lines(text: str) -> List[Instruction]:
    """Parse program text into a list of instructions (labels untouched)."""
    instrs: List[Instruction] = []
    for lineno, raw in enumerate(text.splitlines(), start=1):
        try:
            tree = INSTRUCTION_GRAMMAR["line"].parse(raw)
        except PegParseError as exc:
            raise ParseError(
                f"not an instruction: {raw.strip()!r}", text=raw, line=lineno,
                hint=_SHAPE_HINT,
            ) from exc
        try:
            instr: Optional[Instruction] = _BUILDER.visit(tree)
        except ParseError as exc:
            exc.line = lineno
            raise exc.with_hint(_FIELD_HINT)
        if instr is not None:
            instrs.append(instr)
    return instrs


def parse_program(text: str, clamp_halt: bool = True) -> Program:
    """
    Parse program text.

    With ``clamp_halt`` (the default) every label past the last
    instruction is rewritten to the canonical halt label ``len + 1``.
    """
    instrs = parse_lines(text)
    logger.debug("parsed %d instructions", len(instrs))
    return Program.from_instructions(instrs, clamp_halt=clamp_halt)


# ═══════════════════════════════════════════════════════════════════
#  Printing
# ═══════════════════════════════════════════════════════════════════

def format_instruction(instr: Instruction) -> str:
    if isinstance(instr, Inc):
        return f"R{instr.register}+=>{instr.next}"
    return f"R{instr.register}-=>{instr.next},{instr.else_next}"


def format_program(program: Program, numbered: bool = False) -> str:
    """Render ``program`` one instruction per line."""
    lines = []
    for address, instr in enumerate(program, start=1):
        text = format_instruction(instr)
        lines.append(f"{text:<16}# {address}" if numbered else text)
    return "\n".join(lines) + ("\n" if lines else "")


__all__ = [
    "INSTRUCTION_GRAMMAR",
    "InstructionBuilder",
    "parse_instruction",
    "parse_lines",
    "parse_program",
    "format_instruction",
    "format_program",
]
