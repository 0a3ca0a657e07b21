"""
Damage module for the duel arena.

Handles the randomized rolls of attacks and heals, and the value objects that
describe how an action was resolved.
"""

import math
import random

from pydantic import BaseModel, Field

from duel_arena.core.constants import (
    COUNTER_CHANCE,
    COUNTER_DAMAGE,
    CRIT_CHANCE,
    CRIT_MULTIPLIER,
    GUARD_DAMAGE_FACTOR,
    VARIANCE,
)


class AttackResult(BaseModel):
    """Describes how a single attack was resolved."""

    raw_damage: int = Field(
        description="Damage after variance and critical hit, before the guard.",
    )
    is_critical: bool = Field(
        default=False,
        description="Whether the attack was a critical hit.",
    )
    guarded: bool = Field(
        default=False,
        description="Whether the defender was guarding.",
    )
    damage: int = Field(
        description="Damage applied to the defender's health.",
    )
    counter_damage: int = Field(
        default=0,
        description="Damage dealt back to the attacker by a counter.",
    )

    @property
    def countered(self) -> bool:
        return self.counter_damage > 0


class HealResult(BaseModel):
    """Describes how a single heal was resolved."""

    amount: int = Field(
        description="The rolled heal amount.",
    )
    restored: int = Field(
        description="Health actually gained by the caster.",
    )
    drained: int = Field(
        default=0,
        description="Health actually drained from the opponent.",
    )


def roll_variance(rng: random.Random) -> int:
    """Returns a uniform integer in [-VARIANCE, VARIANCE]."""
    return rng.randint(-VARIANCE, VARIANCE)


def roll_attack_damage(base_attack: int, rng: random.Random) -> tuple[int, bool]:
    """
    Rolls the damage of an attack before any guard is taken into account.

    Args:
        base_attack (int):
            The attacker's base attack.
        rng (random.Random):
            The random source used for variance and critical checks.

    Returns:
        tuple[int, bool]:
            The damage and whether it was a critical hit.

    """
    damage = base_attack + roll_variance(rng)
    is_critical = rng.random() < CRIT_CHANCE
    if is_critical:
        damage = apply_critical(damage)
    return damage, is_critical


def apply_critical(damage: int) -> int:
    return math.floor(damage * CRIT_MULTIPLIER)


def apply_guard(damage: int) -> int:
    """Reduces damage going through a guard, rounding up."""
    return math.ceil(damage * GUARD_DAMAGE_FACTOR)


def roll_counter(rng: random.Random) -> int:
    """
    Rolls whether a guarding defender strikes back.

    Returns:
        int: COUNTER_DAMAGE when the counter triggers, 0 otherwise.

    """
    return COUNTER_DAMAGE if rng.random() < COUNTER_CHANCE else 0


def roll_heal_amount(heal_amount: int, rng: random.Random) -> int:
    return heal_amount + roll_variance(rng)
