# regsynth/instructions.py
"""
Instruction and program model for the unlimited register machine.

Two instruction shapes exist:

* ``Inc(register, next)``: increment ``register`` and continue at ``next``.
* ``Dec(register, next, else_next)``: if ``register`` is nonzero,
  decrement it and continue at ``next``; otherwise continue at
  ``else_next`` leaving the register untouched.

Addresses are 1-based positions in a :class:`Program`.  The address
``len(program) + 1`` is the program's **halt** label; a program is only
well-formed when every label lies in ``[1, halt]``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable, Iterator, Tuple, Union

from regsynth.errors import ErrorCodes, MalformedLabelError, ValidationError


def _check_positive(value: object, what: str) -> None:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(
            f"{what} must be an int, got {type(value).__name__}: {value!r}",
            code=ErrorCodes.BAD_FIELD,
        )
    if value < 1:
        raise ValidationError(
            f"{what} must be >= 1, got {value}",
            code=ErrorCodes.BAD_FIELD,
        )


# ═══════════════════════════════════════════════════════════════════════
#  Instructions
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True, slots=True)
class Inc:
    """Increment ``register`` and continue at ``next``."""

    register: int
    next: int

    def __post_init__(self) -> None:
        _check_positive(self.register, "register")
        _check_positive(self.next, "label")

    def labels(self) -> Tuple[int, ...]:
        return (self.next,)

    def relabel(self, fn: Callable[[int], int]) -> "Inc":
        return Inc(self.register, fn(self.next))

    def shifted(self, delta: int) -> "Inc":
        return Inc(self.register + delta, self.next)


@dataclass(frozen=True, slots=True)
class Dec:
    """Decrement-or-branch on ``register``."""

    register: int
    next: int
    else_next: int

    def __post_init__(self) -> None:
        _check_positive(self.register, "register")
        _check_positive(self.next, "label")
        _check_positive(self.else_next, "label")

    def labels(self) -> Tuple[int, ...]:
        return (self.next, self.else_next)

    def relabel(self, fn: Callable[[int], int]) -> "Dec":
        return Dec(self.register, fn(self.next), fn(self.else_next))

    def shifted(self, delta: int) -> "Dec":
        return Dec(self.register + delta, self.next, self.else_next)


Instruction = Union[Inc, Dec]


# ═══════════════════════════════════════════════════════════════════════
#  Program
# ═══════════════════════════════════════════════════════════════════════

@dataclass(frozen=True)
class Program:
    """
    An immutable, validated sequence of instructions.

    Construction fails with :class:`MalformedLabelError` if any label
    points outside ``[1, halt]``.  Use :meth:`from_instructions` for
    hand-written programs that jump "anywhere past the end" to stop.
    """

    instructions: Tuple[Instruction, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        instrs = tuple(self.instructions)
        object.__setattr__(self, "instructions", instrs)
        halt = len(instrs) + 1
        for address, instr in enumerate(instrs, start=1):
            if not isinstance(instr, (Inc, Dec)):
                raise ValidationError(
                    f"address {address}: not an instruction: {instr!r}",
                    code=ErrorCodes.BAD_FIELD,
                )
            for label in instr.labels():
                if label > halt:
                    raise MalformedLabelError(
                        f"address {address}: label {label} is beyond the halt label {halt}"
                    )

    @classmethod
    def from_instructions(
        cls, instrs: Iterable[Instruction], clamp_halt: bool = True
    ) -> "Program":
        """Build a program, rewriting any label past the end to the halt label."""
        instrs = list(instrs)
        if not clamp_halt:
            return cls(tuple(instrs))
        halt = len(instrs) + 1
        return cls(tuple(i.relabel(lambda n: min(n, halt)) for i in instrs))

    @property
    def halt(self) -> int:
        """The halt label, ``len + 1``."""
        return len(self.instructions) + 1

    @property
    def footprint(self) -> int:
        """Highest register index referenced (at least 1)."""
        return max((i.register for i in self.instructions), default=1)

    @property
    def is_empty(self) -> bool:
        return not self.instructions

    def at(self, address: int) -> Instruction:
        """Return the instruction at 1-based ``address``."""
        if not 1 <= address <= len(self.instructions):
            raise IndexError(f"address {address} outside [1, {len(self.instructions)}]")
        return self.instructions[address - 1]

    def __len__(self) -> int:
        return len(self.instructions)

    def __iter__(self) -> Iterator[Instruction]:
        return iter(self.instructions)

    def __getitem__(self, index):
        return self.instructions[index]

    def __repr__(self) -> str:
        return f"Program(<{len(self)} instructions, footprint {self.footprint}>)"


EMPTY = Program()


__all__ = ["Inc", "Dec", "Instruction", "Program", "EMPTY"]
