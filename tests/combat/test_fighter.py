"""
Tests for the Fighter record.
"""

import pytest
from duel_arena.combat.fighter import Fighter
from duel_arena.core.constants import BASE_ATTACK, HEAL_AMOUNT, MAX_HEALTH
from pydantic import ValidationError


def test_new_fighter_defaults():
    fighter = Fighter(name="Ana")
    assert fighter.health == MAX_HEALTH
    assert fighter.base_attack == BASE_ATTACK
    assert fighter.heal_amount == HEAL_AMOUNT
    assert fighter.can_attack
    assert fighter.can_heal
    assert not fighter.is_guarding
    assert not fighter.is_controlled_by_ai


def test_health_outside_range_is_rejected():
    with pytest.raises(ValidationError):
        Fighter(name="Ana", health=MAX_HEALTH + 1)
    with pytest.raises(ValidationError):
        Fighter(name="Ana", health=-1)


def test_blank_name_is_rejected():
    with pytest.raises(ValueError):
        Fighter(name="   ")


def test_take_damage_never_goes_below_zero():
    fighter = Fighter(name="Ana", health=15)
    assert fighter.take_damage(10) == 10
    assert fighter.health == 5
    assert fighter.take_damage(30) == 5
    assert fighter.health == 0
    assert fighter.is_dead()
    assert not fighter.is_alive()


def test_negative_damage_does_not_heal():
    fighter = Fighter(name="Ana", health=50)
    assert fighter.take_damage(-10) == 0
    assert fighter.health == 50


def test_restore_health_is_capped():
    fighter = Fighter(name="Ana", health=95)
    assert fighter.restore_health(12) == 5
    assert fighter.health == MAX_HEALTH


def test_guard_blocks_attack_until_reset():
    fighter = Fighter(name="Ana")
    fighter.enter_guard()
    assert fighter.is_guarding
    assert not fighter.can_attack
    fighter.reset_turn_state()
    assert not fighter.is_guarding
    assert fighter.can_attack


def test_fighters_compare_by_identity():
    first = Fighter(name="Twin")
    second = Fighter(name="Twin")
    assert first != second
    assert first == first
    assert len({first, second}) == 2
