"""
Tests for attack and heal rolls.
"""

import random

import pytest
from duel_arena.combat.damage import (
    apply_critical,
    apply_guard,
    roll_attack_damage,
    roll_counter,
    roll_heal_amount,
)
from duel_arena.core.constants import BASE_ATTACK, COUNTER_DAMAGE, HEAL_AMOUNT


@pytest.mark.parametrize(
    "raw, expected",
    [(18, 27), (19, 28), (20, 30), (21, 31), (22, 33)],
)
def test_critical_rounds_down(raw, expected):
    assert apply_critical(raw) == expected


@pytest.mark.parametrize(
    "raw, expected",
    [(18, 8), (20, 8), (22, 9), (27, 11), (30, 12), (33, 14)],
)
def test_guard_rounds_up(raw, expected):
    assert apply_guard(raw) == expected


def test_attack_rolls_stay_in_range():
    rng = random.Random(1234)
    for _ in range(500):
        damage, is_critical = roll_attack_damage(BASE_ATTACK, rng)
        if is_critical:
            assert 27 <= damage <= 33
        else:
            assert 18 <= damage <= 22


def test_heal_rolls_stay_in_range():
    rng = random.Random(4321)
    amounts = {roll_heal_amount(HEAL_AMOUNT, rng) for _ in range(500)}
    assert amounts == {8, 9, 10, 11, 12}


def test_scripted_attack_roll(rng):
    rng.ints = [-2]
    rng.floats = [0.1]
    assert roll_attack_damage(BASE_ATTACK, rng) == (27, True)


def test_counter_roll(rng):
    rng.floats = [0.29, 0.3]
    assert roll_counter(rng) == COUNTER_DAMAGE
    assert roll_counter(rng) == 0
