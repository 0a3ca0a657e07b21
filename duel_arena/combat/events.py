"""
Event system module for the duel arena.

Defines the events emitted by the combat engine and the bus the presentation
layer subscribes to. The engine never touches the UI directly: every visible
consequence of an action is published here.
"""

from collections import defaultdict
from enum import Enum
from typing import Any, Callable

from pydantic import BaseModel, Field

from duel_arena.core.constants import ActionType
from duel_arena.core.logging import log_debug


class EventType(Enum):
    """Enumeration of available event types."""

    MATCH_STARTED = "match_started"  # When the engine starts the match
    DAMAGE_DEALT = "damage_dealt"  # When an attack lands
    HEAL_APPLIED = "heal_applied"  # When a fighter heals
    COUNTER = "counter"  # When a guarding fighter strikes back
    GUARD_ENTERED = "guard_entered"  # When a fighter defends
    COOLDOWN_EXPIRED = "cooldown_expired"  # When the heal is available again
    TURN_CHANGED = "turn_changed"  # When a new fighter is up
    MATCH_OVER = "match_over"  # When a fighter is defeated
    ACTION_UNAVAILABLE = "action_unavailable"  # When an intent is ignored


class CombatEvent(BaseModel):
    """Base class for all combat events."""

    event_type: EventType = Field(
        description="The type of the event.",
    )
    actor: Any = Field(
        default=None,
        description="The fighter the event is about.",
    )
    time: float = Field(
        default=0.0,
        description="Engine time at which the event was published.",
    )


class MatchStartedEvent(CombatEvent):
    """Event data for MATCH_STARTED."""

    event_type: EventType = EventType.MATCH_STARTED
    fighters: list[Any] = Field(
        default_factory=list,
        description="The two fighters, in turn order.",
    )

    def __str__(self) -> str:
        names = " vs ".join(f.name for f in self.fighters)
        return f"MatchStartedEvent({names})"


class DamageDealtEvent(CombatEvent):
    """Event data for DAMAGE_DEALT."""

    event_type: EventType = EventType.DAMAGE_DEALT
    target: Any = Field(description="The fighter that was hit.")
    amount: int = Field(description="Health removed from the target.")
    is_critical: bool = Field(default=False, description="Critical hit flag.")
    guarded: bool = Field(default=False, description="Whether the target guarded.")

    def __str__(self) -> str:
        return (
            f"DamageDealtEvent({self.actor.name} on {self.target.name}, "
            f"amount={self.amount}, critical={self.is_critical}, "
            f"guarded={self.guarded})"
        )


class HealAppliedEvent(CombatEvent):
    """Event data for HEAL_APPLIED."""

    event_type: EventType = EventType.HEAL_APPLIED
    opponent: Any = Field(description="The fighter the heal drains from.")
    amount: int = Field(description="The rolled heal amount.")
    drained: int = Field(default=0, description="Health drained from the opponent.")

    def __str__(self) -> str:
        return (
            f"HealAppliedEvent({self.actor.name}, amount={self.amount}, "
            f"drained={self.drained} from {self.opponent.name})"
        )


class CounterEvent(CombatEvent):
    """Event data for COUNTER. The actor is the guarding fighter."""

    event_type: EventType = EventType.COUNTER
    target: Any = Field(description="The attacker hit by the counter.")
    amount: int = Field(description="Counter damage dealt.")

    def __str__(self) -> str:
        return (
            f"CounterEvent({self.actor.name} on {self.target.name}, "
            f"amount={self.amount})"
        )


class GuardEnteredEvent(CombatEvent):
    """Event data for GUARD_ENTERED."""

    event_type: EventType = EventType.GUARD_ENTERED

    def __str__(self) -> str:
        return f"GuardEnteredEvent({self.actor.name})"


class CooldownExpiredEvent(CombatEvent):
    """Event data for COOLDOWN_EXPIRED."""

    event_type: EventType = EventType.COOLDOWN_EXPIRED
    action: ActionType = Field(
        default=ActionType.HEAL,
        description="The action that became available again.",
    )

    def __str__(self) -> str:
        return f"CooldownExpiredEvent({self.actor.name}, action={self.action})"


class TurnChangedEvent(CombatEvent):
    """Event data for TURN_CHANGED. The actor is the fighter now up."""

    event_type: EventType = EventType.TURN_CHANGED
    turn_index: int = Field(description="Index of the fighter now acting.")
    turn_number: int = Field(default=1, description="Turns played so far, plus one.")

    def __str__(self) -> str:
        return f"TurnChangedEvent({self.actor.name}, turn={self.turn_number})"


class MatchOverEvent(CombatEvent):
    """Event data for MATCH_OVER. The winner is None on a double knockout."""

    event_type: EventType = EventType.MATCH_OVER
    winner: Any | None = Field(default=None, description="The winning fighter.")

    def __str__(self) -> str:
        winner = self.winner.name if self.winner else None
        return f"MatchOverEvent(winner={winner})"


class ActionUnavailableEvent(CombatEvent):
    """Event data for ACTION_UNAVAILABLE, a notice that an intent was ignored."""

    event_type: EventType = EventType.ACTION_UNAVAILABLE
    action: ActionType | None = Field(
        default=None,
        description="The action that was attempted.",
    )
    reason: str = Field(description="Why the action was ignored.")

    def __str__(self) -> str:
        name = self.actor.name if self.actor else None
        return (
            f"ActionUnavailableEvent({name}, action={self.action}, "
            f"reason={self.reason})"
        )


EventSubscriber = Callable[[CombatEvent], None]


class EventBus:
    """Publisher-subscriber bus between the engine and its presentation."""

    def __init__(self) -> None:
        self._subscribers: dict[EventType, list[EventSubscriber]] = defaultdict(list)
        self._universal_subscribers: list[EventSubscriber] = []
        self.history: list[CombatEvent] = []

    def subscribe(self, event_type: EventType, subscriber: EventSubscriber) -> None:
        """
        Subscribe to events of a specific type.

        Args:
            event_type (EventType): The type of events to subscribe to.
            subscriber (EventSubscriber): Callback invoked with each event.

        """
        self._subscribers[event_type].append(subscriber)

    def subscribe_all(self, subscriber: EventSubscriber) -> None:
        """Subscribe to every event published on the bus."""
        self._universal_subscribers.append(subscriber)

    def unsubscribe(
        self,
        subscriber: EventSubscriber,
        event_type: EventType | None = None,
    ) -> None:
        """
        Removes a subscriber, from a single event type or from everything.

        Args:
            subscriber (EventSubscriber): The callback to remove.
            event_type (EventType | None): The type to remove it from, None
                to remove it everywhere.

        """
        if event_type is not None:
            if subscriber in self._subscribers[event_type]:
                self._subscribers[event_type].remove(subscriber)
            return
        for subscribers in self._subscribers.values():
            if subscriber in subscribers:
                subscribers.remove(subscriber)
        if subscriber in self._universal_subscribers:
            self._universal_subscribers.remove(subscriber)

    def publish(self, event: CombatEvent) -> None:
        """
        Delivers an event to its type subscribers, then to universal ones.

        Args:
            event (CombatEvent): The event to deliver.

        """
        log_debug(str(event))
        self.history.append(event)
        for subscriber in list(self._subscribers[event.event_type]):
            subscriber(event)
        for subscriber in list(self._universal_subscribers):
            subscriber(event)

    def events_of(self, event_type: EventType) -> list[CombatEvent]:
        """Returns the published events of the given type, oldest first."""
        return [e for e in self.history if e.event_type == event_type]
