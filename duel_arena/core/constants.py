"""
Constants and enumerations for the duel arena.

Defines the rule constants of the combat engine, the timing of deferred
events, and the enumerations for actions and fighter states used throughout
the game.
"""

from enum import Enum

# =============================================================================
# Fighter rules
# =============================================================================

MAX_HEALTH = 100
BASE_ATTACK = 20
HEAL_AMOUNT = 10

# Both attack and heal rolls vary uniformly in [-VARIANCE, +VARIANCE].
VARIANCE = 2

CRIT_CHANCE = 0.15
CRIT_MULTIPLIER = 1.5

# Fraction of the damage that goes through a guard.
GUARD_DAMAGE_FACTOR = 0.4
COUNTER_CHANCE = 0.3
COUNTER_DAMAGE = 10

# =============================================================================
# Timing (seconds of engine time)
# =============================================================================

HEAL_COOLDOWN = 5.0
AI_TURN_DELAY = 1.2

# =============================================================================
# AI policy
# =============================================================================

AI_LOW_HEALTH = 35
AI_HEAL_WHILE_GUARDED_BELOW = 80
AI_ATTACK_GUARDED_CHANCE = 0.4
AI_DEFEND_CHANCE = 0.15

# =============================================================================
# Display
# =============================================================================

HEALTH_WARNING = 50
HEALTH_CRITICAL = 20


class NiceEnum(Enum):
    """An enumeration that provides a nicer string representation."""

    def __str__(self) -> str:
        return self.name

    @property
    def display_name(self) -> str:
        return self.name.lower().replace("_", " ").capitalize()


class ActionType(NiceEnum):
    """Defines the three actions a fighter can choose on its turn."""

    ATTACK = "ATTACK"
    HEAL = "HEAL"
    DEFEND = "DEFEND"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this action."""
        return {
            ActionType.ATTACK: "⚔️",
            ActionType.HEAL: "🩸",
            ActionType.DEFEND: "🛡️",
        }.get(self, "❔")

    @property
    def color(self) -> str:
        """Returns the color string associated with this action."""
        return {
            ActionType.ATTACK: "bold red",
            ActionType.HEAL: "bold green",
            ActionType.DEFEND: "bold cyan",
        }.get(self, "dim white")

    @property
    def resolution_delay(self) -> float:
        """Seconds the presentation needs before the turn can pass."""
        return {
            ActionType.ATTACK: 0.6,
            ActionType.HEAL: 0.6,
            ActionType.DEFEND: 0.4,
        }[self]

    @property
    def colored_name(self) -> str:
        return self.colorize(self.display_name)

    def colorize(self, message: str) -> str:
        """Applies action color formatting to a message."""
        return f"[{self.color}]{message}[/]"


class FighterStatus(NiceEnum):
    """Derived state of a fighter within its turn cycle."""

    IDLE = "IDLE"
    GUARDING = "GUARDING"
    ATTACK_PENDING = "ATTACK_PENDING"
    HEAL_COOLDOWN = "HEAL_COOLDOWN"

    @property
    def emoji(self) -> str:
        """Returns the emoji associated with this status."""
        return {
            FighterStatus.GUARDING: "🛡️",
            FighterStatus.ATTACK_PENDING: "💥",
            FighterStatus.HEAL_COOLDOWN: "⏳",
        }.get(self, "")


def health_color(health: int) -> str:
    """
    Returns the color of a health bar for the given health value.

    Args:
        health (int): The current health.

    Returns:
        str: A rich color string.

    """
    if health < HEALTH_CRITICAL:
        return "bold red"
    if health < HEALTH_WARNING:
        return "bold yellow"
    return "bold green"
