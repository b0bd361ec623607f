# tests/test_machine.py
"""
Tests for the interpreter: validation, halting, step bounds and
transfer-loop acceleration.
"""

import pytest

from regsynth.errors import StepLimitExceeded, ValidationError
from regsynth.instructions import EMPTY, Dec, Inc, Program
from regsynth.machine import (
    Machine,
    MachineConfig,
    compute,
    find_transfer_loops,
    validate_registers,
)
from regsynth.splice import clear, copy
from regsynth.syntax import parse_program
from tests.conftest import ADD_TWO_RM, COMMENTED_RM, run, run_result


class TestValidation:

    @pytest.mark.parametrize("registers", [
        {1: -1},
        {1: 1.5},
        {1: "3"},
        {1: True},
        {0: 1},
        {-2: 1},
    ])
    def test_rejected(self, registers):
        with pytest.raises(ValidationError):
            validate_registers(registers)

    def test_accepted(self):
        validate_registers({1: 0, 2: 10**30})

    def test_compute_rejects_negative_input(self, multiply):
        with pytest.raises(ValidationError):
            compute(multiply, [3, -5])


class TestCompute:

    def test_multiply(self, multiply):
        assert compute(multiply, [3, 5]) == 15

    @pytest.mark.parametrize("a, b", [(0, 0), (0, 4), (4, 0), (1, 1), (6, 7)])
    def test_multiply_table(self, multiply, a, b):
        assert compute(multiply, [a, b]) == a * b

    def test_empty_program_returns_first_input(self):
        assert compute(EMPTY, [9, 1]) == 9

    def test_no_inputs(self):
        assert compute(parse_program(ADD_TWO_RM)) == 2

    def test_registers_are_reset(self, multiply):
        m = Machine(multiply)
        assert m.compute([2, 3]) == 6
        assert m.compute([2, 3]) == 6

    def test_inputs_beyond_footprint_kept(self):
        res = Machine(Program((Inc(1, 2),))).run({5: 3})
        assert res.register(5) == 3
        assert res.value == 1

    def test_commented_program(self):
        assert run(parse_program(COMMENTED_RM), 2, 5) == 7


class TestStepLimit:

    def test_infinite_loop(self):
        spin = Program((Inc(1, 1),))
        with pytest.raises(StepLimitExceeded) as exc_info:
            compute(spin, [], max_steps=100)
        assert exc_info.value.steps == 100
        assert exc_info.value.registers[1] == 100

    @pytest.mark.parametrize("accelerate", [True, False])
    def test_bound_is_exact(self, accelerate):
        # clearing 10 takes 10 decrements plus the final test
        assert run(clear(1), 10, max_steps=11, accelerate=accelerate) == 0
        with pytest.raises(StepLimitExceeded):
            run(clear(1), 10, max_steps=10, accelerate=accelerate)

    def test_unbounded_by_default(self):
        assert MachineConfig().max_steps is None

    def test_config_warnings(self):
        assert MachineConfig(max_steps=0).validate() == ["max_steps must be positive"]
        assert MachineConfig(max_steps=5).validate() == []


class TestAcceleration:

    def test_detects_copy_loops(self):
        loops = find_transfer_loops(copy(1, [2], 3))
        assert set(loops) == {1, 4}
        assert loops[1].source == 1
        assert dict(loops[1].targets) == {2: 1, 3: 1}
        assert loops[1].exit == 4

    def test_detects_clear_loop(self):
        loops = find_transfer_loops(clear(1))
        assert loops[1].length == 0

    def test_ignores_non_loops(self):
        p = Program((Dec(1, 2, 3), Dec(2, 1, 3)))
        assert find_transfer_loops(p) == {}

    def test_chain_touching_source_is_not_accelerated(self):
        p = Program((Dec(1, 2, 3), Inc(1, 1)))
        assert find_transfer_loops(p) == {}

    def test_repeated_target(self):
        p = Program((Dec(1, 2, 4), Inc(2, 3), Inc(2, 1)))
        loops = find_transfer_loops(p)
        assert dict(loops[1].targets) == {2: 2}
        assert run_result(p, 5).register(2) == 10

    @pytest.mark.parametrize("inputs", [(0, 0), (3, 5), (7, 2)])
    def test_same_result_and_steps(self, multiply, inputs):
        fast = run_result(multiply, *inputs, accelerate=True)
        slow = run_result(multiply, *inputs, accelerate=False)
        assert fast.registers == slow.registers
        assert fast.steps == slow.steps
