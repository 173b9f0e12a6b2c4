import random

import pytest

from winecorp.core.economy import (
    expectation_multiplier,
    interest_multiplier,
    next_economy_phase,
    sales_multipliers,
)
from winecorp.domain.economy import EconomyPhase


@pytest.mark.parametrize(
    "roll, expected",
    [(0.10, EconomyPhase.RECESSION), (0.30, EconomyPhase.EXPANSION), (0.80, EconomyPhase.STABLE)],
)
def test_middle_phase_transitions(fixed_random, roll, expected):
    assert next_economy_phase(EconomyPhase.STABLE, fixed_random(roll)) == expected


def test_crash_cannot_go_lower(fixed_random):
    assert next_economy_phase(EconomyPhase.CRASH, fixed_random(0.10)) == EconomyPhase.CRASH
    assert next_economy_phase(EconomyPhase.CRASH, fixed_random(0.50)) == EconomyPhase.RECESSION
    assert next_economy_phase(EconomyPhase.CRASH, fixed_random(0.90)) == EconomyPhase.CRASH


def test_boom_moves_back_towards_center(fixed_random):
    assert next_economy_phase(EconomyPhase.BOOM, fixed_random(0.10)) == EconomyPhase.EXPANSION
    assert next_economy_phase(EconomyPhase.BOOM, fixed_random(0.90)) == EconomyPhase.BOOM


def test_seeded_transitions_are_reproducible():
    a = [next_economy_phase(EconomyPhase.STABLE, random.Random(7)) for _ in range(3)]
    b = [next_economy_phase(EconomyPhase.STABLE, random.Random(7)) for _ in range(3)]
    assert a == b


def test_multipliers():
    assert interest_multiplier(EconomyPhase.CRASH) > interest_multiplier(EconomyPhase.BOOM)
    assert expectation_multiplier(EconomyPhase.STABLE) == 1.0
    assert sales_multipliers(EconomyPhase.BOOM)["frequency"] == 1.5
