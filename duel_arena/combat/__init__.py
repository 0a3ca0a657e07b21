"""
Combat system module for the duel arena.

This module handles the combat rules: fighters, damage and heal rolls, the
event bus, the scheduler of deferred events, the AI policy and the engine
that ties them together.
"""

from .combat_engine import CombatEngine
from .damage import AttackResult, HealResult
from .events import CombatEvent, EventBus, EventType
from .fighter import Fighter
from .npc_ai import decide_ai_action
from .scheduler import ScheduledEvent, Scheduler

__all__ = [
    "AttackResult",
    "CombatEngine",
    "CombatEvent",
    "EventBus",
    "EventType",
    "Fighter",
    "HealResult",
    "ScheduledEvent",
    "Scheduler",
    "decide_ai_action",
]
