# tests/test_properties.py
"""
Seeded random-program checks: combinator output stays well-formed and
obeys the composition, recursion and search laws against direct runs of
the sub-programs; acceleration never changes an observable result.
"""

import random

import pytest

from regsynth.combinators import compose, minimize, primrec
from regsynth.errors import StepLimitExceeded
from regsynth.instructions import Dec, Inc, Program
from tests.conftest import assert_well_formed, run, run_result

SEEDS = range(100)

# Bound for direct runs of the small random programs.
SUB_STEPS = 2_000
# Bound for the synthesized program once every direct run halted.
SYNTH_STEPS = 10_000_000


def random_program(rng, max_len=4, max_register=3):
    """A program of up to ``max_len`` instructions with in-range labels."""
    length = rng.randint(0, max_len)
    halt = length + 1
    instrs = []
    for _ in range(length):
        register = rng.randint(1, max_register)
        if rng.random() < 0.5:
            instrs.append(Inc(register, rng.randint(1, halt)))
        else:
            instrs.append(Dec(register, rng.randint(1, halt), rng.randint(1, halt)))
    return Program(tuple(instrs))


def halting(program, *inputs):
    """Register 1 after a bounded run, or ``None`` if it did not halt."""
    try:
        return run(program, *inputs, max_steps=SUB_STEPS)
    except StepLimitExceeded:
        return None


def random_inputs(rng, count):
    return [rng.randint(0, 3) for _ in range(count)]


def outcome(program, inputs, limit, accelerate):
    """Comparable summary of a bounded run, halted or not."""
    try:
        res = run_result(program, *inputs, max_steps=limit, accelerate=accelerate)
    except StepLimitExceeded as exc:
        return ("limit", exc.registers, exc.steps, exc.pc)
    return ("halted", res.registers, res.steps)


class TestComposeLaw:

    @pytest.mark.parametrize("seed", SEEDS)
    def test_against_direct_runs(self, seed):
        rng = random.Random(seed)
        h = random_program(rng)
        gs = [random_program(rng) for _ in range(rng.randint(1, 3))]
        f = compose(h, *gs)
        assert_well_formed(f)

        xs = random_inputs(rng, 3)
        inner = [halting(g, *xs) for g in gs]
        if None in inner:
            return
        expected = halting(h, *inner)
        if expected is None:
            return
        assert run(f, *xs, max_steps=SYNTH_STEPS) == expected


class TestPrimrecLaw:

    @pytest.mark.parametrize("seed", SEEDS)
    def test_against_direct_runs(self, seed):
        rng = random.Random(seed)
        g, h = random_program(rng), random_program(rng)
        f = primrec(g, h)
        assert_well_formed(f)

        y = rng.randint(0, 3)
        xs = random_inputs(rng, 2)
        value = halting(g, *xs)
        for depth in range(y):
            if value is None:
                return
            value = halting(h, depth, value, *xs)
        if value is None:
            return
        assert run(f, y, *xs, max_steps=SYNTH_STEPS) == value


class TestMinimizeLaw:

    @pytest.mark.parametrize("seed", SEEDS)
    def test_against_direct_search(self, seed):
        rng = random.Random(seed)
        h = random_program(rng)
        f = minimize(h)
        assert_well_formed(f)

        xs = random_inputs(rng, 2)
        for y in range(6):
            value = halting(h, y, *xs)
            if value is None:
                return
            if value == 0:
                break
        else:
            return
        assert run(f, *xs, max_steps=SYNTH_STEPS) == y


class TestAccelerationAgreement:

    @pytest.mark.parametrize("seed", range(300))
    def test_random_program(self, seed):
        rng = random.Random(seed)
        program = random_program(rng, max_len=6)
        inputs = random_inputs(rng, 3)
        limit = rng.choice([1, 5, 40, 300])
        assert outcome(program, inputs, limit, True) == outcome(program, inputs, limit, False)

    @pytest.mark.parametrize("seed", range(50))
    def test_combinator_output(self, seed):
        rng = random.Random(seed)
        f = primrec(random_program(rng), random_program(rng))
        inputs = random_inputs(rng, 3)
        assert outcome(f, inputs, 20_000, True) == outcome(f, inputs, 20_000, False)
