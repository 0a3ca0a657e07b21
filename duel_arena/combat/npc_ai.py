"""
Decision policy of the AI-controlled fighter.

The policy favours healing when its own health is low, meets a guarding
opponent with either a heal or a guard of its own, and otherwise mostly
attacks.
"""

import random

from duel_arena.combat.fighter import Fighter
from duel_arena.core.constants import (
    AI_ATTACK_GUARDED_CHANCE,
    AI_DEFEND_CHANCE,
    AI_HEAL_WHILE_GUARDED_BELOW,
    AI_LOW_HEALTH,
    ActionType,
)
from duel_arena.core.logging import log_debug


def decide_ai_action(
    npc: Fighter,
    opponent: Fighter,
    rng: random.Random,
) -> ActionType:
    """
    Chooses the action of an AI-controlled fighter.

    Args:
        npc (Fighter):
            The fighter whose action is being chosen.
        opponent (Fighter):
            The fighter it is facing.
        rng (random.Random):
            The random source used for the probabilistic choices.

    Returns:
        ActionType:
            The chosen action.

    """
    if npc.health < AI_LOW_HEALTH and npc.can_heal:
        choice = ActionType.HEAL
    elif opponent.is_guarding:
        if npc.can_heal and npc.health < AI_HEAL_WHILE_GUARDED_BELOW:
            choice = ActionType.HEAL
        elif rng.random() < AI_ATTACK_GUARDED_CHANCE:
            choice = ActionType.ATTACK
        else:
            choice = ActionType.DEFEND
    elif rng.random() < AI_DEFEND_CHANCE:
        choice = ActionType.DEFEND
    else:
        choice = ActionType.ATTACK

    log_debug(
        f"{npc.name} decides to {choice.display_name.lower()}",
        {"health": npc.health, "opponent_guarding": opponent.is_guarding},
    )
    return choice
