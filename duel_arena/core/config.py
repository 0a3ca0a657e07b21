"""
Match configuration for the duel arena.

The only inputs the game needs are the two fighter names and whether the
second fighter is controlled by the machine. An optional seed makes a match
reproducible.
"""

from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_PLAYER_ONE = "Player 1"
DEFAULT_PLAYER_TWO = "Player 2"
DEFAULT_MACHINE_NAME = "CPU"


class MatchConfig(BaseModel):
    """Settings collected by the setup screen before a match starts."""

    player_one_name: str = Field(
        default=DEFAULT_PLAYER_ONE,
        description="Name of the first fighter.",
    )
    player_two_name: str = Field(
        default=DEFAULT_PLAYER_TWO,
        description="Name of the second fighter, ignored against the machine.",
    )
    vs_machine: bool = Field(
        default=False,
        description="Whether the second fighter is controlled by the AI.",
    )
    machine_name: str = Field(
        default=DEFAULT_MACHINE_NAME,
        description="Name given to the AI-controlled fighter.",
    )
    seed: int | None = Field(
        default=None,
        description="Seed for the random source, None for a random match.",
    )

    @field_validator("player_one_name", mode="before")
    @classmethod
    def _default_player_one(cls, value: Any) -> Any:
        return _name_or_default(value, DEFAULT_PLAYER_ONE)

    @field_validator("player_two_name", mode="before")
    @classmethod
    def _default_player_two(cls, value: Any) -> Any:
        return _name_or_default(value, DEFAULT_PLAYER_TWO)

    @field_validator("machine_name", mode="before")
    @classmethod
    def _default_machine_name(cls, value: Any) -> Any:
        return _name_or_default(value, DEFAULT_MACHINE_NAME)

    @property
    def second_fighter_name(self) -> str:
        """Returns the name the second fighter will actually use."""
        return self.machine_name if self.vs_machine else self.player_two_name


def _name_or_default(value: Any, default: str) -> Any:
    """
    Strips a name and replaces blank values with the default.

    Args:
        value (Any): The raw value received by the model.
        default (str): The name used when the value is blank.

    Returns:
        Any: The cleaned value, left untouched if it is not a string.

    """
    if value is None:
        return default
    if isinstance(value, str):
        value = value.strip()
        return value or default
    return value
