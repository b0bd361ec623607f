# regsynth/errors.py
"""
Register-machine error types.

Error Hierarchy:
────────────────
    RegsynthError (base)
    ├── ParseError            - instruction text does not match the notation
    ├── ValidationError       - bad register values / malformed instruction fields
    ├── ArityError            - combinator called with the wrong number of programs
    ├── StepLimitExceeded     - execution stopped by a caller-imposed step bound
    └── MalformedLabelError   - a label outside [1, len+1] (internal contract)

Error Codes:
────────────
Each error carries a code of the form ``RM-NNNN``:
  - 1000-1999: Syntax errors
  - 2000-2999: Validation errors
  - 3000-3999: Synthesis errors
  - 5000-5999: Execution errors
  - 9000-9999: Internal errors

Every error is raised synchronously. Synthesis and validation are pure
computations, so nothing here is ever retried.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, unique
from typing import Dict, Optional


@unique
class ErrorPhase(Enum):
    """Pipeline phase in which an error was detected."""

    SYNTAX = "syntax"
    VALIDATION = "validation"
    SYNTHESIS = "synthesis"
    EXECUTION = "execution"
    INTERNAL = "internal"


@dataclass(frozen=True)
class ErrorCode:
    """A structured error code, rendered as ``RM-NNNN``."""

    number: int
    phase: ErrorPhase
    summary: str = ""

    @property
    def code(self) -> str:
        return f"RM-{self.number:04d}"

    def __str__(self) -> str:
        return self.code


class ErrorCodes:
    """Predefined error codes."""

    # ═══════════════════════════════════════════════════════════════════
    # SYNTAX ERRORS (1000-1999)
    # ═══════════════════════════════════════════════════════════════════

    BAD_INSTRUCTION = ErrorCode(1000, ErrorPhase.SYNTAX, "malformed instruction")
    BAD_SEXP = ErrorCode(1001, ErrorPhase.SYNTAX, "malformed S-expression")

    # ═══════════════════════════════════════════════════════════════════
    # VALIDATION ERRORS (2000-2999)
    # ═══════════════════════════════════════════════════════════════════

    BAD_REGISTER_VALUE = ErrorCode(2000, ErrorPhase.VALIDATION, "invalid register value")
    BAD_REGISTER_INDEX = ErrorCode(2001, ErrorPhase.VALIDATION, "invalid register index")
    BAD_FIELD = ErrorCode(2002, ErrorPhase.VALIDATION, "invalid instruction field")

    # ═══════════════════════════════════════════════════════════════════
    # SYNTHESIS ERRORS (3000-3999)
    # ═══════════════════════════════════════════════════════════════════

    ARITY = ErrorCode(3000, ErrorPhase.SYNTHESIS, "wrong number of sub-programs")

    # ═══════════════════════════════════════════════════════════════════
    # EXECUTION ERRORS (5000-5999)
    # ═══════════════════════════════════════════════════════════════════

    STEP_LIMIT = ErrorCode(5000, ErrorPhase.EXECUTION, "step limit exceeded")

    # ═══════════════════════════════════════════════════════════════════
    # INTERNAL ERRORS (9000-9999)
    # ═══════════════════════════════════════════════════════════════════

    MALFORMED_LABEL = ErrorCode(9000, ErrorPhase.INTERNAL, "label out of range")
    UNCLASSIFIED = ErrorCode(9999, ErrorPhase.INTERNAL, "unclassified error")


class RegsynthError(Exception):
    """
    Base exception for all register-machine errors.

    Carries a structured :class:`ErrorCode`, the 1-based source line when
    the error came from program text, and an optional hint.
    """

    default_code: ErrorCode = ErrorCodes.UNCLASSIFIED

    def __init__(
        self,
        message: str,
        code: Optional[ErrorCode] = None,
        line: Optional[int] = None,
        hint: str = "",
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.default_code
        self.line = line
        self.hint = hint

    @property
    def phase(self) -> ErrorPhase:
        return self.code.phase

    def with_hint(self, hint: str) -> "RegsynthError":
        """Attach a hint to this error."""
        self.hint = hint
        return self

    def __str__(self) -> str:
        where = f"line {self.line}: " if self.line is not None else ""
        text = f"{self.code}: {where}{self.message}"
        if self.hint:
            text += f" (hint: {self.hint})"
        return text


class ParseError(RegsynthError):
    """An instruction string does not match the required shape."""

    default_code = ErrorCodes.BAD_INSTRUCTION

    def __init__(self, message: str, text: str = "", **kwargs) -> None:
        super().__init__(message, **kwargs)
        self.text = text


class ValidationError(RegsynthError):
    """A register or instruction field holds an illegal value."""

    default_code = ErrorCodes.BAD_REGISTER_VALUE


class ArityError(RegsynthError):
    """A combinator was invoked with an unsupported number of programs."""

    default_code = ErrorCodes.ARITY


class MalformedLabelError(RegsynthError):
    """
    A label falls outside ``[1, len + 1]``.

    Combinators must never produce one; seeing this from synthesized code
    means there is a bug in the splicing logic.
    """

    default_code = ErrorCodes.MALFORMED_LABEL


class StepLimitExceeded(RegsynthError):
    """Execution ran past the caller's step bound without halting."""

    default_code = ErrorCodes.STEP_LIMIT

    def __init__(
        self,
        steps: int,
        registers: Optional[Dict[int, int]] = None,
        pc: int = 0,
    ) -> None:
        super().__init__(
            f"program did not halt within {steps} steps (pc={pc})",
            hint="raise max_steps if the program is expected to halt",
        )
        self.steps = steps
        self.registers = dict(registers or {})
        self.pc = pc


__all__ = [
    "ErrorPhase",
    "ErrorCode",
    "ErrorCodes",
    "RegsynthError",
    "ParseError",
    "ValidationError",
    "ArityError",
    "MalformedLabelError",
    "StepLimitExceeded",
]
