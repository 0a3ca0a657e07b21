"""
Fighter module for the duel arena.

Defines the Fighter record mutated by the combat engine: its health, its
constant attack and heal values, and the gates that decide which actions it
may take.
"""

from typing import Any

from pydantic import BaseModel, Field

from duel_arena.core.constants import BASE_ATTACK, HEAL_AMOUNT, MAX_HEALTH


class Fighter(BaseModel):
    """
    One of the two combatants of a match.

    Health is only changed through `take_damage` and `restore_health`, which
    keep it clamped between 0 and MAX_HEALTH.
    """

    name: str = Field(
        description="The name of the fighter.",
    )
    health: int = Field(
        default=MAX_HEALTH,
        ge=0,
        le=MAX_HEALTH,
        description="Current health, always within [0, MAX_HEALTH].",
    )
    base_attack: int = Field(
        default=BASE_ATTACK,
        description="Damage dealt by an attack before variance and modifiers.",
    )
    heal_amount: int = Field(
        default=HEAL_AMOUNT,
        description="Health restored by a heal before variance.",
    )
    is_controlled_by_ai: bool = Field(
        default=False,
        description="Whether the fighter's actions are chosen by the AI.",
    )
    can_attack: bool = Field(
        default=True,
        description="False while the fighter is guarding.",
    )
    can_heal: bool = Field(
        default=True,
        description="False while the heal is on cooldown.",
    )
    is_guarding: bool = Field(
        default=False,
        description="Whether incoming attacks are reduced this round.",
    )

    def model_post_init(self, _: Any) -> None:
        """Validates fields after model initialization."""
        if not self.name or not self.name.strip():
            raise ValueError("name must be a non-empty string")

    def __hash__(self) -> int:
        return id(self)

    def __eq__(self, other: object) -> bool:
        return self is other

    def is_alive(self) -> bool:
        return self.health > 0

    def is_dead(self) -> bool:
        return self.health <= 0

    def take_damage(self, amount: int) -> int:
        """
        Removes health from the fighter, never going below zero.

        Args:
            amount (int): The damage to apply.

        Returns:
            int: The health actually lost.

        """
        previous = self.health
        self.health = max(0, self.health - max(0, amount))
        return previous - self.health

    def restore_health(self, amount: int) -> int:
        """
        Adds health to the fighter, never going above MAX_HEALTH.

        Args:
            amount (int): The health to restore.

        Returns:
            int: The health actually gained.

        """
        previous = self.health
        self.health = min(MAX_HEALTH, self.health + max(0, amount))
        return self.health - previous

    def enter_guard(self) -> None:
        """Raises the guard, giving up the next attack."""
        self.is_guarding = True
        self.can_attack = False

    def reset_turn_state(self) -> None:
        """Drops the guard at the start of the fighter's turn."""
        self.is_guarding = False
        self.can_attack = True

    @property
    def colored_name(self) -> str:
        color = "bold magenta" if self.is_controlled_by_ai else "bold blue"
        return f"[{color}]{self.name}[/]"

    def __str__(self) -> str:
        return f"{self.name} ({self.health}/{MAX_HEALTH})"
