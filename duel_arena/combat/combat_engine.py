"""
Combat engine for the duel arena.

The engine owns the two fighters, the turn index and the game-over flag. It
resolves the three actions, alternates turns, drives the AI-controlled
fighter and detects the winner. Every visible consequence is published on an
EventBus and every delay is an entry on a Scheduler, so the engine can be
driven by a terminal loop in real time or by a test in virtual time.
"""

import random

from catchery import log_warning

from duel_arena.combat.damage import (
    AttackResult,
    HealResult,
    apply_guard,
    roll_attack_damage,
    roll_counter,
    roll_heal_amount,
)
from duel_arena.combat.events import (
    ActionUnavailableEvent,
    CombatEvent,
    CooldownExpiredEvent,
    CounterEvent,
    DamageDealtEvent,
    EventBus,
    GuardEnteredEvent,
    HealAppliedEvent,
    MatchOverEvent,
    MatchStartedEvent,
    TurnChangedEvent,
)
from duel_arena.combat.fighter import Fighter
from duel_arena.combat.npc_ai import decide_ai_action
from duel_arena.combat.scheduler import ScheduledEvent, Scheduler
from duel_arena.core.config import MatchConfig
from duel_arena.core.constants import (
    AI_TURN_DELAY,
    HEAL_COOLDOWN,
    MAX_HEALTH,
    ActionType,
    FighterStatus,
)
from duel_arena.core.logging import log_debug, log_info


class CombatEngine:
    """Manages a single match between two fighters.

    The low-level operations (`attack`, `heal`, `defend`, `end_turn`,
    `check_winner`) apply the rules directly. `perform_action` is the entry
    point used by the presentation and by the AI: it checks whose turn it is,
    resolves the action, and passes the turn once the action's resolution
    delay has elapsed on the scheduler.

    Attributes:
        fighters (list[Fighter]):
            The two fighters, in turn order.
        current_turn_index (int):
            Index of the fighter whose turn it is.
        is_over (bool):
            Whether the match has ended.
        winner (Fighter | None):
            The winner once the match is over, None on a double knockout.
        turn_number (int):
            The number of the current turn, starting at 1.

    """

    def __init__(
        self,
        fighters: list[Fighter],
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        events: EventBus | None = None,
    ) -> None:
        if len(fighters) != 2 or fighters[0] is fighters[1]:
            log_warning(
                "A match needs exactly two distinct fighters",
                {"fighters": [str(f) for f in fighters], "context": "engine_setup"},
            )
            raise ValueError("A match needs exactly two distinct fighters")

        self.fighters: list[Fighter] = list(fighters)
        self.rng: random.Random = rng or random.Random()
        self.scheduler: Scheduler = scheduler or Scheduler()
        self.events: EventBus = events or EventBus()

        self.current_turn_index: int = 0
        self.turn_number: int = 1
        self.is_over: bool = False
        self.winner: Fighter | None = None
        self.started: bool = False

        # The fighter whose action is waiting for its resolution delay.
        self._resolving: Fighter | None = None
        self._pending_action: ActionType | None = None
        self._turn_completion: ScheduledEvent | None = None
        self._ai_turn: ScheduledEvent | None = None

    @classmethod
    def from_config(
        cls,
        config: MatchConfig,
        rng: random.Random | None = None,
        scheduler: Scheduler | None = None,
        events: EventBus | None = None,
    ) -> "CombatEngine":
        """
        Creates an engine with the fighters described by a MatchConfig.

        Args:
            config (MatchConfig): The match settings.
            rng (random.Random | None): Overrides the random source seeded
                from the config.
            scheduler (Scheduler | None): The scheduler to use.
            events (EventBus | None): The event bus to use.

        Returns:
            CombatEngine: The new engine, not yet started.

        """
        fighters = [
            Fighter(name=config.player_one_name),
            Fighter(
                name=config.second_fighter_name,
                is_controlled_by_ai=config.vs_machine,
            ),
        ]
        return cls(
            fighters,
            rng=rng or random.Random(config.seed),
            scheduler=scheduler,
            events=events,
        )

    # ============================================================================
    # STATE
    # ============================================================================

    @property
    def now(self) -> float:
        return self.scheduler.now

    @property
    def current_fighter(self) -> Fighter:
        return self.fighters[self.current_turn_index]

    @property
    def is_resolving(self) -> bool:
        """True while an action waits for its resolution delay."""
        return self._resolving is not None

    @property
    def is_waiting_for_ai(self) -> bool:
        return self._ai_turn is not None and self._ai_turn.is_pending

    def opponent_of(self, fighter: Fighter) -> Fighter:
        self._require_fighters(fighter)
        return self.fighters[1] if fighter is self.fighters[0] else self.fighters[0]

    def index_of(self, fighter: Fighter) -> int:
        self._require_fighters(fighter)
        return 0 if fighter is self.fighters[0] else 1

    def fighter_status(self, fighter: Fighter) -> FighterStatus:
        """
        Returns the derived state of a fighter.

        Args:
            fighter (Fighter): One of the two fighters of the match.

        Returns:
            FighterStatus: ATTACK_PENDING while its attack resolves, then
                GUARDING, HEAL_COOLDOWN or IDLE.

        """
        self._require_fighters(fighter)
        if self._resolving is fighter and self._pending_action is ActionType.ATTACK:
            return FighterStatus.ATTACK_PENDING
        if fighter.is_guarding:
            return FighterStatus.GUARDING
        if not fighter.can_heal:
            return FighterStatus.HEAL_COOLDOWN
        return FighterStatus.IDLE

    def unavailable_reason(self, fighter: Fighter, action: ActionType) -> str | None:
        """
        Tells why a fighter cannot take an action right now.

        Turn order is not considered here, see `perform_action`.

        Returns:
            str | None: The reason, or None if the action is available.

        """
        if self.is_over:
            return "the match is over"
        if fighter.is_dead():
            return f"{fighter.name} is defeated"
        if action is ActionType.ATTACK and not fighter.can_attack:
            return f"{fighter.name} is guarding and cannot attack"
        if action is ActionType.HEAL and not fighter.can_heal:
            return f"{fighter.name} cannot heal yet"
        return None

    # ============================================================================
    # ACTIONS
    # ============================================================================

    def attack(self, attacker: Fighter, defender: Fighter) -> AttackResult | None:
        """
        Resolves an attack.

        The damage is the base attack plus variance, multiplied on a critical
        hit. A guarding defender only takes a fraction of it and may counter.

        Args:
            attacker (Fighter): The fighter attacking.
            defender (Fighter): The fighter being attacked.

        Returns:
            AttackResult | None: The resolution, None if the attack was
                ignored.

        """
        self._require_opponents(attacker, defender)
        reason = self.unavailable_reason(attacker, ActionType.ATTACK)
        if reason:
            self._notice(attacker, ActionType.ATTACK, reason)
            return None

        raw_damage, is_critical = roll_attack_damage(attacker.base_attack, self.rng)
        damage = raw_damage
        guarded = defender.is_guarding
        counter_damage = 0
        if guarded:
            damage = apply_guard(raw_damage)
            counter_damage = roll_counter(self.rng)
            if counter_damage:
                attacker.take_damage(counter_damage)

        defender.take_damage(damage)

        result = AttackResult(
            raw_damage=raw_damage,
            is_critical=is_critical,
            guarded=guarded,
            damage=damage,
            counter_damage=counter_damage,
        )
        log_debug(
            f"{attacker.name} attacks {defender.name}",
            result.model_dump(),
        )
        self._publish(
            DamageDealtEvent(
                actor=attacker,
                target=defender,
                amount=damage,
                is_critical=is_critical,
                guarded=guarded,
            )
        )
        if counter_damage:
            self._publish(
                CounterEvent(actor=defender, target=attacker, amount=counter_damage)
            )
        return result

    def heal(self, caster: Fighter, opponent: Fighter) -> HealResult | None:
        """
        Resolves a life-drain heal.

        The caster gains the rolled amount, capped at full health. When the
        caster was hurt before healing, the opponent loses the same rolled
        amount. The heal then goes on cooldown.

        Args:
            caster (Fighter): The fighter healing.
            opponent (Fighter): The fighter the heal drains from.

        Returns:
            HealResult | None: The resolution, None if the heal was ignored.

        """
        self._require_opponents(caster, opponent)
        reason = self.unavailable_reason(caster, ActionType.HEAL)
        if reason:
            self._notice(caster, ActionType.HEAL, reason)
            return None

        amount = roll_heal_amount(caster.heal_amount, self.rng)
        was_hurt = caster.health < MAX_HEALTH
        restored = caster.restore_health(amount)
        drained = opponent.take_damage(amount) if was_hurt else 0

        caster.can_heal = False
        self.scheduler.schedule(
            HEAL_COOLDOWN,
            lambda: self._expire_heal_cooldown(caster),
            name=f"heal cooldown of {caster.name}",
        )

        result = HealResult(amount=amount, restored=restored, drained=drained)
        log_debug(f"{caster.name} heals", result.model_dump())
        self._publish(
            HealAppliedEvent(
                actor=caster,
                opponent=opponent,
                amount=amount,
                drained=drained,
            )
        )
        return result

    def defend(self, fighter: Fighter) -> bool:
        """
        Puts a fighter on guard until the start of its next turn.

        Returns:
            bool: True if the guard was raised.

        """
        self._require_fighters(fighter)
        reason = self.unavailable_reason(fighter, ActionType.DEFEND)
        if reason:
            self._notice(fighter, ActionType.DEFEND, reason)
            return False
        fighter.enter_guard()
        log_debug(f"{fighter.name} raises the guard")
        self._publish(GuardEnteredEvent(actor=fighter))
        return True

    def decide_ai_action(self, npc: Fighter, opponent: Fighter) -> ActionType:
        """Chooses the action of an AI-controlled fighter with the engine's rng."""
        self._require_opponents(npc, opponent)
        return decide_ai_action(npc, opponent, self.rng)

    # ============================================================================
    # TURN FLOW
    # ============================================================================

    def start(self) -> None:
        """Announces the match and the first turn."""
        if self.started:
            return
        self.started = True
        log_info(
            "The battle begins",
            {"fighters": " vs ".join(f.name for f in self.fighters)},
        )
        self._publish(MatchStartedEvent(fighters=self.fighters))
        self._begin_turn()

    def end_turn(self) -> None:
        """
        Passes the turn to the other fighter, dropping its guard.

        An action still waiting on its resolution delay is settled now, its
        scheduled completion is cancelled so the turn only passes once. A
        pending AI turn of the fighter stepping down is cancelled too.
        """
        if self.is_over:
            return
        if self._turn_completion is not None:
            self.scheduler.cancel(self._turn_completion)
            self._turn_completion = None
        if self._ai_turn is not None:
            self.scheduler.cancel(self._ai_turn)
            self._ai_turn = None
        self._resolving = None
        self._pending_action = None
        self.current_turn_index = 1 - self.current_turn_index
        self.turn_number += 1
        self._begin_turn()

    def perform_action(self, fighter_index: int, action: ActionType) -> bool:
        """
        Resolves the action chosen by the fighter at the given index.

        The intent is ignored, with an ActionUnavailableEvent notice, when the
        match is over, when it is not that fighter's turn, when a previous
        action is still resolving, or when the action is gated.

        Args:
            fighter_index (int): 0 or 1.
            action (ActionType): The chosen action.

        Returns:
            bool: True if the action was resolved.

        """
        if fighter_index not in (0, 1):
            log_warning(
                f"Invalid fighter index: {fighter_index}",
                {"action": str(action), "context": "perform_action"},
            )
            raise ValueError(f"Invalid fighter index: {fighter_index}")

        fighter = self.fighters[fighter_index]
        opponent = self.fighters[1 - fighter_index]

        if self.is_over:
            self._notice(fighter, action, "the match is over")
            return False
        if fighter_index != self.current_turn_index:
            self._notice(fighter, action, f"it is not {fighter.name}'s turn")
            return False
        if self.is_resolving:
            self._notice(fighter, action, "another action is still resolving")
            return False
        reason = self.unavailable_reason(fighter, action)
        if reason:
            self._notice(fighter, action, reason)
            return False

        if action is ActionType.ATTACK:
            self.attack(fighter, opponent)
        elif action is ActionType.HEAL:
            self.heal(fighter, opponent)
        else:
            self.defend(fighter)

        self.check_winner()
        if self.is_over:
            return True

        self._resolving = fighter
        self._pending_action = action
        self._turn_completion = self.scheduler.schedule(
            action.resolution_delay,
            self._complete_turn,
            name=f"{action.display_name.lower()} of {fighter.name}",
        )
        return True

    def advance(self, seconds: float) -> int:
        """Moves engine time forward, firing the deferred events that come due."""
        return self.scheduler.advance(seconds)

    def check_winner(self) -> Fighter | None:
        """
        Ends the match once a fighter has no health left.

        Every pending deferred event is cancelled when the match ends.

        Returns:
            Fighter | None: The fighter still standing, None while the match
                goes on or after a double knockout.

        """
        if self.is_over:
            return self.winner
        if not any(f.is_dead() for f in self.fighters):
            return None

        self.is_over = True
        standing = [f for f in self.fighters if f.is_alive()]
        self.winner = standing[0] if standing else None
        self._resolving = None
        self._pending_action = None
        self._ai_turn = None
        self._turn_completion = None
        cancelled = self.scheduler.cancel_all()
        log_info(
            "The battle is over",
            {
                "winner": self.winner.name if self.winner else None,
                "turn": self.turn_number,
                "cancelled_events": cancelled,
            },
        )
        self._publish(MatchOverEvent(actor=self.winner, winner=self.winner))
        return self.winner

    # ============================================================================
    # DEFERRED EVENTS
    # ============================================================================

    def _begin_turn(self) -> None:
        fighter = self.current_fighter
        fighter.reset_turn_state()
        self._publish(
            TurnChangedEvent(
                actor=fighter,
                turn_index=self.current_turn_index,
                turn_number=self.turn_number,
            )
        )
        if fighter.is_controlled_by_ai:
            self._ai_turn = self.scheduler.schedule(
                AI_TURN_DELAY,
                self._take_ai_turn,
                name=f"turn of {fighter.name}",
            )

    def _complete_turn(self) -> None:
        self._turn_completion = None
        self._resolving = None
        self._pending_action = None
        self.check_winner()
        if not self.is_over:
            self.end_turn()

    def _take_ai_turn(self) -> None:
        self._ai_turn = None
        if self.is_over:
            return
        npc = self.current_fighter
        if not npc.is_controlled_by_ai:
            return
        action = self.decide_ai_action(npc, self.opponent_of(npc))
        if not self.perform_action(self.current_turn_index, action):
            log_warning(
                f"{npc.name} could not {action.display_name.lower()}, defending",
                {"health": npc.health, "context": "npc_ai_decision"},
            )
            self.perform_action(self.current_turn_index, ActionType.DEFEND)

    def _expire_heal_cooldown(self, caster: Fighter) -> None:
        if self.is_over or caster.is_dead():
            return
        caster.can_heal = True
        self._publish(CooldownExpiredEvent(actor=caster, action=ActionType.HEAL))

    # ============================================================================
    # HELPERS
    # ============================================================================

    def _publish(self, event: CombatEvent) -> None:
        event.time = self.now
        self.events.publish(event)

    def _notice(self, fighter: Fighter, action: ActionType, reason: str) -> None:
        log_debug(
            f"Ignored {action.display_name.lower()} of {fighter.name}: {reason}"
        )
        self._publish(ActionUnavailableEvent(actor=fighter, action=action, reason=reason))

    def _require_fighters(self, *fighters: Fighter) -> None:
        for fighter in fighters:
            if not any(fighter is f for f in self.fighters):
                log_warning(
                    f"{fighter} is not part of this match",
                    {
                        "fighters": [f.name for f in self.fighters],
                        "context": "fighter_validation",
                    },
                )
                raise ValueError(f"{fighter} is not part of this match")

    def _require_opponents(self, actor: Fighter, other: Fighter) -> None:
        self._require_fighters(actor, other)
        if actor is other:
            log_warning(
                f"{actor.name} cannot target itself",
                {"context": "fighter_validation"},
            )
            raise ValueError(f"{actor.name} cannot target itself")
