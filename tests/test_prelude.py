# tests/test_prelude.py
"""
Tests for the prelude: hand-written basics and the synthesized
arithmetic built from them.
"""

import pytest

from regsynth import prelude as P
from regsynth.combinators import compose
from regsynth.errors import ValidationError
from regsynth.instructions import EMPTY
from regsynth.syntax import parse_program
from tests.conftest import assert_well_formed, run


class TestBasics:

    @pytest.mark.parametrize("x", [0, 1, 9])
    def test_zero(self, x):
        assert run(P.zero(), x) == 0

    @pytest.mark.parametrize("x", [0, 1, 9])
    def test_succ(self, x):
        assert run(P.succ(), x) == x + 1

    def test_identity_is_empty(self):
        assert P.identity() == EMPTY
        assert run(P.identity(), 4) == 4

    @pytest.mark.parametrize("i", [1, 2, 3])
    def test_proj(self, i):
        assert run(P.proj(i), 10, 20, 30) == 10 * i

    def test_proj_one_is_empty(self):
        assert P.proj(1) == EMPTY

    @pytest.mark.parametrize("i", [0, -1, True, "2"])
    def test_proj_rejects_bad_index(self, i):
        with pytest.raises(ValidationError):
            P.proj(i)


class TestScenarios:

    def test_succ_of_zero(self):
        assert run(compose(P.succ(), P.zero())) == 1

    def test_add(self):
        assert run(P.add(), 3, 4) == 7

    def test_mul(self):
        assert run(P.mul(), 3, 4) == 12

    def test_multiply(self):
        assert run(P.multiply(), 3, 5) == 15

    def test_factorial_seven(self):
        assert run(P.factorial(), 7) == 5040

    def test_div(self):
        assert run(P.div(), 24, 3) == 8


class TestTables:

    @pytest.mark.parametrize("x, y", [(0, 0), (5, 0), (0, 5), (5, 3), (3, 5), (4, 4)])
    def test_sub(self, x, y):
        assert run(P.sub(), x, y) == max(x - y, 0)

    @pytest.mark.parametrize("y", range(6))
    def test_factorial(self, y):
        expected = 1
        for k in range(2, y + 1):
            expected *= k
        assert run(P.factorial(), y) == expected

    @pytest.mark.parametrize("x, d, expected", [(0, 3, 0), (6, 3, 2), (7, 2, 4), (1, 5, 1)])
    def test_div_rounds_up(self, x, d, expected):
        assert run(P.div(), x, d) == expected

    @pytest.mark.parametrize("a, b", [(0, 3), (2, 0), (2, 5)])
    def test_mul_agrees_with_multiply(self, a, b):
        assert run(P.mul(), a, b) == run(P.multiply(), a, b) == a * b


class TestRegistry:

    @pytest.mark.parametrize("name", sorted(P.PRELUDE))
    def test_well_formed(self, name):
        assert_well_formed(P.PRELUDE[name]())

    def test_builders_cached(self):
        assert P.add() is P.add()
        assert P.multiply() is P.multiply()

    def test_multiply_source(self):
        assert P.multiply() == parse_program(P.MULTIPLY_SOURCE)
        assert len(P.multiply()) == 8
