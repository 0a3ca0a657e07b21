"""
Tests for the turn orchestration: perform_action, deferred resolution and the
machine's turns.
"""

import random

import pytest
from duel_arena.combat.combat_engine import CombatEngine
from duel_arena.combat.events import EventType
from duel_arena.combat.fighter import Fighter
from duel_arena.core.constants import MAX_HEALTH, ActionType, FighterStatus


def test_start_announces_the_first_turn(engine, attacker):
    engine.start()
    engine.start()
    assert len(engine.events.events_of(EventType.MATCH_STARTED)) == 1
    turn = engine.events.events_of(EventType.TURN_CHANGED)
    assert len(turn) == 1
    assert turn[0].actor is attacker
    assert turn[0].turn_number == 1


def test_turn_passes_after_resolution_delay(engine, attacker, defender):
    engine.start()
    assert engine.perform_action(0, ActionType.ATTACK)
    assert defender.health == 80
    assert engine.is_resolving
    assert engine.fighter_status(attacker) is FighterStatus.ATTACK_PENDING
    assert engine.current_fighter is attacker

    engine.advance(0.6)
    assert not engine.is_resolving
    assert engine.current_fighter is defender
    assert engine.fighter_status(attacker) is FighterStatus.IDLE


def test_out_of_turn_action_is_ignored(engine, defender):
    engine.start()
    assert not engine.perform_action(1, ActionType.ATTACK)
    assert defender.health == 100
    notice = engine.events.events_of(EventType.ACTION_UNAVAILABLE)[-1]
    assert notice.actor is defender
    assert "turn" in notice.reason


def test_one_action_at_a_time(engine, attacker, defender):
    engine.start()
    engine.perform_action(0, ActionType.ATTACK)
    assert not engine.perform_action(0, ActionType.ATTACK)
    assert defender.health == 80


def test_invalid_index_raises(engine):
    with pytest.raises(ValueError):
        engine.perform_action(2, ActionType.ATTACK)


def test_heal_on_cooldown_keeps_the_turn(engine, attacker, defender):
    engine.start()
    attacker.health = 50
    engine.perform_action(0, ActionType.HEAL)
    engine.advance(0.6)
    engine.perform_action(1, ActionType.DEFEND)
    engine.advance(0.4)

    assert engine.current_fighter is attacker
    assert not engine.perform_action(0, ActionType.HEAL)
    assert engine.current_fighter is attacker
    assert "heal" in engine.events.events_of(EventType.ACTION_UNAVAILABLE)[-1].reason
    assert engine.perform_action(0, ActionType.ATTACK)
    assert defender.health == 90 - 8


def test_defend_resolves_faster(engine, defender):
    engine.start()
    engine.perform_action(0, ActionType.DEFEND)
    engine.advance(0.4)
    assert engine.current_fighter is defender


def test_end_turn_settles_a_resolving_action(engine, attacker, defender):
    engine.start()
    engine.perform_action(0, ActionType.ATTACK)
    engine.end_turn()
    assert engine.current_fighter is defender
    assert not engine.is_resolving

    engine.advance(0.6)
    assert engine.current_fighter is defender
    assert engine.turn_number == 2


def test_next_fighter_acts_right_after_end_turn(engine, attacker, defender):
    engine.start()
    engine.perform_action(0, ActionType.ATTACK)
    engine.end_turn()
    assert engine.perform_action(1, ActionType.ATTACK)
    assert attacker.health == 80

    engine.advance(0.6)
    assert engine.current_fighter is attacker
    assert engine.turn_number == 3
    assert not engine.events.events_of(EventType.ACTION_UNAVAILABLE)


def test_winning_blow_ends_the_match_at_once(engine, attacker, defender):
    engine.start()
    defender.health = 10
    assert engine.perform_action(0, ActionType.ATTACK)
    assert engine.is_over
    assert engine.winner is attacker
    assert not engine.is_resolving
    engine.advance(5.0)
    assert engine.current_fighter is attacker


def test_machine_plays_after_its_delay(ai_engine, attacker, machine):
    ai_engine.start()
    ai_engine.perform_action(0, ActionType.ATTACK)
    ai_engine.advance(0.6)
    assert ai_engine.current_fighter is machine
    assert ai_engine.is_waiting_for_ai

    ai_engine.advance(1.0)
    assert attacker.health == MAX_HEALTH

    ai_engine.advance(0.5)
    assert attacker.health == 80
    assert ai_engine.is_resolving

    ai_engine.advance(1.0)
    assert ai_engine.current_fighter is attacker
    assert not ai_engine.is_waiting_for_ai


def test_match_end_cancels_the_machine_turn(ai_engine, attacker):
    ai_engine.start()
    ai_engine.perform_action(0, ActionType.ATTACK)
    ai_engine.advance(0.6)
    assert ai_engine.is_waiting_for_ai

    attacker.health = 0
    ai_engine.check_winner()
    assert not ai_engine.is_waiting_for_ai
    ai_engine.advance(5.0)
    assert len(ai_engine.events.events_of(EventType.DAMAGE_DEALT)) == 1


def _machine_duel(seed: int) -> CombatEngine:
    engine = CombatEngine(
        [
            Fighter(name="Red", is_controlled_by_ai=True),
            Fighter(name="Blue", is_controlled_by_ai=True),
        ],
        rng=random.Random(seed),
    )
    return engine


@pytest.mark.parametrize("seed", range(10))
def test_machine_duel_respects_the_rules(seed):
    engine = _machine_duel(seed)
    allowed_damage = set(range(18, 23)) | set(range(27, 34)) | {8, 9, 11, 12, 13, 14}

    def check(event):
        for fighter in engine.fighters:
            assert 0 <= fighter.health <= MAX_HEALTH
        if event.event_type is EventType.DAMAGE_DEALT:
            assert event.amount in allowed_damage
        if event.event_type is EventType.HEAL_APPLIED:
            assert 8 <= event.amount <= 12

    engine.events.subscribe_all(check)
    engine.start()
    engine.scheduler.run_until_idle(limit=10_000)

    assert engine.is_over
    assert engine.scheduler.pending == 0
    if engine.winner is not None:
        assert engine.winner.is_alive()
        assert engine.opponent_of(engine.winner).is_dead()


def test_same_seed_same_match():
    first = _machine_duel(99)
    second = _machine_duel(99)
    for engine in (first, second):
        engine.start()
        engine.scheduler.run_until_idle(limit=10_000)
    assert [str(e) for e in first.events.history] == [
        str(e) for e in second.events.history
    ]
    assert [f.health for f in first.fighters] == [f.health for f in second.fighters]


def test_machine_defends_when_its_choice_is_refused(
    ai_engine, attacker, machine, monkeypatch
):
    ai_engine.start()
    ai_engine.perform_action(0, ActionType.ATTACK)
    ai_engine.advance(0.6)
    assert ai_engine.current_fighter is machine

    machine.can_heal = False
    monkeypatch.setattr(
        ai_engine, "decide_ai_action", lambda npc, opponent: ActionType.HEAL
    )
    ai_engine.advance(1.5)

    notice = ai_engine.events.events_of(EventType.ACTION_UNAVAILABLE)[-1]
    assert notice.actor is machine
    assert notice.action is ActionType.HEAL
    assert machine.is_guarding
    assert ai_engine.events.events_of(EventType.GUARD_ENTERED)[-1].actor is machine
    assert ai_engine.is_resolving
