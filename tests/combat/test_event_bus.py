"""
Tests for the event bus between the engine and its presentation.
"""

import pytest
from duel_arena.combat.events import (
    EventBus,
    EventType,
    GuardEnteredEvent,
    MatchOverEvent,
)
from duel_arena.combat.fighter import Fighter


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def fighter():
    return Fighter(name="Ana")


def test_subscribers_receive_their_type(bus, fighter):
    guards, overs = [], []
    bus.subscribe(EventType.GUARD_ENTERED, guards.append)
    bus.subscribe(EventType.MATCH_OVER, overs.append)
    bus.publish(GuardEnteredEvent(actor=fighter))
    assert len(guards) == 1
    assert guards[0].actor is fighter
    assert overs == []


def test_universal_subscribers_receive_everything(bus, fighter):
    received = []
    bus.subscribe_all(received.append)
    bus.publish(GuardEnteredEvent(actor=fighter))
    bus.publish(MatchOverEvent(winner=fighter))
    assert [e.event_type for e in received] == [
        EventType.GUARD_ENTERED,
        EventType.MATCH_OVER,
    ]


def test_unsubscribe(bus, fighter):
    received = []
    bus.subscribe(EventType.GUARD_ENTERED, received.append)
    bus.subscribe_all(received.append)
    bus.unsubscribe(received.append)
    bus.publish(GuardEnteredEvent(actor=fighter))
    assert received == []


def test_unsubscribe_from_one_type(bus, fighter):
    received = []
    bus.subscribe(EventType.GUARD_ENTERED, received.append)
    bus.subscribe(EventType.MATCH_OVER, received.append)
    bus.unsubscribe(received.append, EventType.GUARD_ENTERED)
    bus.publish(GuardEnteredEvent(actor=fighter))
    bus.publish(MatchOverEvent(winner=fighter))
    assert [e.event_type for e in received] == [EventType.MATCH_OVER]


def test_history_keeps_every_event(bus, fighter):
    bus.publish(GuardEnteredEvent(actor=fighter))
    bus.publish(MatchOverEvent(winner=None))
    assert len(bus.history) == 2
    assert len(bus.events_of(EventType.MATCH_OVER)) == 1
    assert str(bus.history[1]) == "MatchOverEvent(winner=None)"
