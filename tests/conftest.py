"""
Shared fixtures for the duel arena tests.
"""

import random

import pytest
from duel_arena.combat.combat_engine import CombatEngine
from duel_arena.combat.fighter import Fighter


class ScriptedRandom(random.Random):
    """
    Random source that replays queued values.

    `randint` pops from `ints` and `random` pops from `floats`; once a queue is
    empty the defaults are returned: no variance, no critical hit, no counter,
    and an AI that attacks an unguarded opponent.
    """

    def __init__(
        self,
        ints: list[int] | None = None,
        floats: list[float] | None = None,
        default_int: int = 0,
        default_float: float = 0.99,
    ) -> None:
        super().__init__(0)
        self.ints = list(ints or [])
        self.floats = list(floats or [])
        self.default_int = default_int
        self.default_float = default_float

    def randint(self, a: int, b: int) -> int:
        value = self.ints.pop(0) if self.ints else self.default_int
        assert a <= value <= b, f"scripted {value} outside [{a}, {b}]"
        return value

    def random(self) -> float:
        return self.floats.pop(0) if self.floats else self.default_float


@pytest.fixture
def rng():
    return ScriptedRandom()


@pytest.fixture
def attacker():
    return Fighter(name="Attacker")


@pytest.fixture
def defender():
    return Fighter(name="Defender")


@pytest.fixture
def engine(attacker, defender, rng):
    return CombatEngine([attacker, defender], rng=rng)


@pytest.fixture
def machine():
    return Fighter(name="CPU", is_controlled_by_ai=True)


@pytest.fixture
def ai_engine(attacker, machine, rng):
    return CombatEngine([attacker, machine], rng=rng)
