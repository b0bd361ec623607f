# tests/conftest.py
"""
Shared helpers, fixtures and program sources for the regsynth test-suite.
"""

import pytest

from regsynth import prelude as P
from regsynth.instructions import Program
from regsynth.machine import Machine, MachineConfig, RunResult


# ── Program sources ─────────────────────────────────────────────────

MULTIPLY_RM = P.MULTIPLY_SOURCE

ADD_TWO_RM = """\
R1+=>2
R1+=>3
"""

CLEAR_RM = "R1-=>1,2\n"

COMMENTED_RM = """
# add R2 onto R1

R2-=>2,99   # any label past the end halts
R1+=>1
"""

BAD_LINE_RM = """\
R1+=>2
R1 += 2
"""

ZERO_REGISTER_RM = "R0+=>2\n"


# ── Helpers ─────────────────────────────────────────────────────────

def run(program: Program, *inputs: int, max_steps=None, accelerate=True) -> int:
    """Run ``program`` on ``inputs`` and return register 1."""
    return run_result(program, *inputs, max_steps=max_steps, accelerate=accelerate).value


def run_result(program: Program, *inputs: int, max_steps=None, accelerate=True) -> RunResult:
    machine = Machine(program, MachineConfig(max_steps=max_steps, accelerate=accelerate))
    return machine.run({i: v for i, v in enumerate(inputs, start=1)})


def assert_well_formed(program: Program) -> None:
    """Every label must point at an instruction or at the halt label."""
    halt = len(program) + 1
    for address, instr in enumerate(program, start=1):
        for label in instr.labels():
            assert 1 <= label <= halt, f"address {address}: label {label} outside [1, {halt}]"


# ── Fixtures ────────────────────────────────────────────────────────

@pytest.fixture
def multiply():
    return P.multiply()


@pytest.fixture
def bounded_config():
    return MachineConfig(max_steps=10_000)
