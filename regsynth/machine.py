# regsynth/machine.py
"""
Fetch-execute interpreter for register-machine programs.

* ``MachineConfig``   – execution bounds and switches
* ``Machine``         – runs one program against a register assignment
* ``RunResult``       – final registers and step count
* ``compute``         – convenience entry point: inputs in, register 1 out

Execution starts at address 1 and stops when control reaches the
program's halt label.  A program may legitimately run forever; callers
that need a bound set ``max_steps`` and get :class:`StepLimitExceeded`.

Transfer loops
--------------
A ``Dec S`` whose success branch runs a chain of ``Inc`` instructions
(none on ``S``) straight back to the ``Dec`` drains ``S`` into the chain's
registers.  With ``accelerate`` on, such a loop runs as one macro-step
(``D += k * S; S = 0``) charged the exact number of steps the plain loop
would take, so results and step bounds are unchanged.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Sequence, Tuple

from regsynth.errors import ErrorCodes, StepLimitExceeded, ValidationError
from regsynth.instructions import Dec, Inc, Program

logger = logging.getLogger(__name__)


# ===================================================================== #
#  Configuration                                                         #
# ===================================================================== #

@dataclass
class MachineConfig:
    """Tuning knobs for program execution."""
    max_steps: Optional[int] = None
    accelerate: bool = True

    def validate(self) -> List[str]:
        """Return a list of validation warnings (empty if valid)."""
        warnings: List[str] = []
        if self.max_steps is not None and self.max_steps <= 0:
            warnings.append("max_steps must be positive")
        return warnings


@dataclass
class RunResult:
    registers: Dict[int, int] = field(default_factory=dict)
    steps: int = 0

    def register(self, index: int) -> int:
        return self.registers.get(index, 0)

    @property
    def value(self) -> int:
        """Register 1, the conventional result."""
        return self.register(1)


@dataclass(frozen=True)
class TransferLoop:
    source: int
    targets: Tuple[Tuple[int, int], ...]
    length: int
    exit: int

    def cost(self, value: int) -> int:
        """Steps the plain loop takes to drain ``value`` units."""
        return value * (1 + self.length) + 1


# ===================================================================== #
#  Validation                                                            #
# ===================================================================== #

def validate_registers(registers: Mapping[int, int]) -> None:
    """Reject register indices below 1 and values that are not naturals."""
    for index, value in registers.items():
        if isinstance(index, bool) or not isinstance(index, int) or index < 1:
            raise ValidationError(
                f"register index must be a positive int, got {index!r}",
                code=ErrorCodes.BAD_REGISTER_INDEX,
            )
        if isinstance(value, bool) or not isinstance(value, int):
            raise ValidationError(
                f"R{index} must hold an int, got {type(value).__name__}: {value!r}",
            )
        if value < 0:
            raise ValidationError(f"R{index} must be non-negative, got {value}")


def find_transfer_loops(program: Program) -> Dict[int, TransferLoop]:
    """Map each ``Dec`` address that heads a transfer loop to its summary."""
    loops: Dict[int, TransferLoop] = {}
    size = len(program)
    for address, instr in enumerate(program, start=1):
        if not isinstance(instr, Dec):
            continue
        counts: Dict[int, int] = {}
        pc, length = instr.next, 0
        while pc != address:
            if pc > size or length > size:
                break
            step = program.at(pc)
            if not isinstance(step, Inc) or step.register == instr.register:
                break
            counts[step.register] = counts.get(step.register, 0) + 1
            length += 1
            pc = step.next
        else:
            loops[address] = TransferLoop(
                instr.register, tuple(counts.items()), length, instr.else_next
            )
    return loops


# ===================================================================== #
#  Machine                                                               #
# ===================================================================== #

class Machine:
    """
    Interpreter bound to one program.

    Usage::

        machine = Machine(program, MachineConfig(max_steps=1_000_000))
        machine.compute([3, 4])          # -> register 1
        machine.run({1: 3, 2: 4}).steps  # -> full result
    """

    def __init__(self, program: Program, config: Optional[MachineConfig] = None) -> None:
        self._program = program
        self._config = config or MachineConfig()
        for w in self._config.validate():
            logger.warning("MachineConfig: %s", w)
        self._loops = find_transfer_loops(program) if self._config.accelerate else {}

    @property
    def program(self) -> Program:
        return self._program

    @property
    def config(self) -> MachineConfig:
        return self._config

    def run(self, registers: Mapping[int, int]) -> RunResult:
        """Execute from address 1 with the given register assignment."""
        validate_registers(registers)
        size = max([self._program.footprint] + list(registers))
        regs = [0] * (size + 1)
        for index, value in registers.items():
            regs[index] = value

        code = self._program.instructions
        halt = len(code) + 1
        loops = self._loops
        limit = self._config.max_steps
        pc, steps = 1, 0

        while pc != halt:
            loop = loops.get(pc)
            if loop is not None:
                value = regs[loop.source]
                cost = loop.cost(value)
                if limit is None or steps + cost <= limit:
                    if value:
                        for target, k in loop.targets:
                            regs[target] += k * value
                        regs[loop.source] = 0
                    steps += cost
                    pc = loop.exit
                    continue
            if limit is not None and steps >= limit:
                raise StepLimitExceeded(steps, _as_dict(regs), pc)
            steps += 1
            instr = code[pc - 1]
            if type(instr) is Inc:
                regs[instr.register] += 1
                pc = instr.next
            elif regs[instr.register]:
                regs[instr.register] -= 1
                pc = instr.next
            else:
                pc = instr.else_next

        logger.debug("halted after %d steps", steps)
        return RunResult(registers=_as_dict(regs), steps=steps)

    def compute(self, inputs: Sequence[int]) -> int:
        """Load ``inputs`` into registers ``1..k``, run, return register 1."""
        return self.run({i: v for i, v in enumerate(inputs, start=1)}).value


def _as_dict(regs: List[int]) -> Dict[int, int]:
    return {i: v for i, v in enumerate(regs) if i}


def compute(
    program: Program,
    inputs: Sequence[int] = (),
    max_steps: Optional[int] = None,
    accelerate: bool = True,
) -> int:
    """Run ``program`` on ``inputs`` and return register 1."""
    config = MachineConfig(max_steps=max_steps, accelerate=accelerate)
    return Machine(program, config).compute(inputs)


__all__ = [
    "MachineConfig",
    "RunResult",
    "TransferLoop",
    "Machine",
    "validate_registers",
    "find_transfer_loops",
    "compute",
]
