"""
User interface module for the duel arena.

Provides the console front end of a match: the setup prompts, the fighter
cards, the battle log fed by engine events, and the action menu. Uses rich
for rendering and prompt_toolkit for input.
"""

from typing import Any

from prompt_toolkit import ANSI, PromptSession
from rich.panel import Panel
from rich.table import Table

from duel_arena.combat.combat_engine import CombatEngine
from duel_arena.combat.events import (
    ActionUnavailableEvent,
    CombatEvent,
    CooldownExpiredEvent,
    CounterEvent,
    DamageDealtEvent,
    GuardEnteredEvent,
    HealAppliedEvent,
    MatchOverEvent,
    MatchStartedEvent,
    TurnChangedEvent,
)
from duel_arena.combat.fighter import Fighter
from duel_arena.core.config import MatchConfig
from duel_arena.core.constants import (
    MAX_HEALTH,
    ActionType,
    FighterStatus,
    health_color,
)
from duel_arena.core.utils import ccapture, cprint, crule, make_bar

# Menu order of the actions, the digit shown is the index plus one.
ACTION_MENU = [ActionType.ATTACK, ActionType.HEAL, ActionType.DEFEND]


class PlayerInterface:
    """
    Command-line interface for the players of a match.

    Renders the fighters with rich tables, prints the battle log as engine
    events arrive, and reads choices through a prompt_toolkit session with
    numeric shortcuts.
    """

    def __init__(self, session: Any = None) -> None:
        """
        Initialize the PlayerInterface.

        Args:
            session (Any): An object with a `prompt` method. A prompt_toolkit
                PromptSession is created on first use when None.

        """
        self._session = session

    @property
    def session(self) -> Any:
        if self._session is None:
            # one session keeps history
            self._session = PromptSession(erase_when_done=True)
        return self._session

    # ============================================================================
    # SETUP
    # ============================================================================

    def ask_match_setup(self, seed: int | None = None) -> MatchConfig:
        """
        Asks for the names of the fighters and whether to face the machine.

        Blank answers keep the default names.

        Args:
            seed (int | None): Seed passed through to the configuration.

        Returns:
            MatchConfig: The validated configuration.

        """
        crule("Duel Arena", style="bold green")
        player_one = self.session.prompt("Name of the first fighter > ")
        vs_machine = self.ask_yes_no("Fight against the machine? [y/N] > ")
        player_two = ""
        if not vs_machine:
            player_two = self.session.prompt("Name of the second fighter > ")
        return MatchConfig(
            player_one_name=player_one,
            player_two_name=player_two,
            vs_machine=vs_machine,
            seed=seed,
        )

    def ask_yes_no(self, prompt: str) -> bool:
        answer = self.session.prompt(prompt)
        return isinstance(answer, str) and answer.strip().lower() in ("y", "yes")

    # ============================================================================
    # RENDERING
    # ============================================================================

    def fighter_table(self, engine: CombatEngine) -> Table:
        """
        Builds the table of fighter cards.

        Args:
            engine (CombatEngine): The engine whose fighters are shown.

        Returns:
            Table: One row per fighter, the active one marked.

        """
        table = Table(title=f"Turn {engine.turn_number}", pad_edge=False)
        table.add_column("", no_wrap=True)
        table.add_column("Fighter", style="bold")
        table.add_column("Health", no_wrap=True)
        table.add_column("HP", justify="right")
        table.add_column("Status")
        for index, fighter in enumerate(engine.fighters):
            active = index == engine.current_turn_index and not engine.is_over
            color = health_color(fighter.health)
            table.add_row(
                "▶" if active else "",
                fighter.colored_name,
                make_bar(fighter.health, MAX_HEALTH, length=20, color=color),
                f"[{color}]{fighter.health}[/]",
                self.status_label(engine, fighter),
            )
        return table

    @staticmethod
    def status_label(engine: CombatEngine, fighter: Fighter) -> str:
        if fighter.is_dead():
            return "[dim]defeated[/]"
        labels = []
        status = engine.fighter_status(fighter)
        if status is not FighterStatus.IDLE:
            labels.append(f"{status.emoji} {status.display_name.lower()}")
        if status is not FighterStatus.HEAL_COOLDOWN and not fighter.can_heal:
            labels.append(f"{FighterStatus.HEAL_COOLDOWN.emoji} heal cooldown")
        return ", ".join(labels)

    def render_fighters(self, engine: CombatEngine) -> None:
        cprint(self.fighter_table(engine))

    def announce_winner(self, engine: CombatEngine) -> None:
        """Prints the victory panel once the match is over."""
        if not engine.is_over:
            return
        if engine.winner is None:
            message = "Both fighters fell at the same time."
            title = "DRAW"
        else:
            message = (
                f"{engine.winner.colored_name} has conquered the arena "
                "with honor and strategy."
            )
            title = "VICTORY!"
        cprint(Panel(message, title=f"[bold yellow]{title}[/]", expand=False))

    # ============================================================================
    # BATTLE LOG
    # ============================================================================

    def on_event(self, event: CombatEvent) -> None:
        """Prints the battle log line of an engine event."""
        for line in self.format_event(event):
            cprint(f"> {line}")

    @staticmethod
    def format_event(event: CombatEvent) -> list[str]:
        """
        Turns an engine event into battle log lines.

        Args:
            event (CombatEvent): The event to describe.

        Returns:
            list[str]: The lines to print, possibly empty.

        """
        if isinstance(event, MatchStartedEvent):
            return ["[bold]The battle begins![/]"]
        if isinstance(event, DamageDealtEvent):
            lines = []
            if event.is_critical:
                lines.append(f"[bold red]💥 CRITICAL HIT from {event.actor.name}![/]")
            if event.guarded:
                lines.append(
                    f"[cyan]🛡️ {event.target.name} absorbed most of the impact.[/]"
                )
            lines.append(
                f"[red]{event.actor.name} hit {event.target.name} "
                f"for {event.amount} damage![/]"
            )
            return lines
        if isinstance(event, CounterEvent):
            return [
                f"[bold red]⚡ COUNTER! {event.actor.name} strikes back "
                f"for {event.amount} damage.[/]"
            ]
        if isinstance(event, HealAppliedEvent):
            if event.drained:
                return [
                    f"[green]🩸 {event.actor.name} drained {event.amount} health "
                    f"from {event.opponent.name}.[/]"
                ]
            return [f"[green]{event.actor.name} healed for {event.amount}.[/]"]
        if isinstance(event, GuardEnteredEvent):
            return [f"[cyan]{event.actor.name} entered guard mode.[/]"]
        if isinstance(event, CooldownExpiredEvent):
            return [f"✨ {event.actor.name} can heal again."]
        if isinstance(event, TurnChangedEvent):
            return [f"Turn of: [bold]{event.actor.name}[/]"]
        if isinstance(event, MatchOverEvent):
            if event.winner is None:
                return ["[bold yellow]🏆 BATTLE OVER! It is a draw.[/]"]
            return [
                f"[bold yellow]🏆 BATTLE OVER! The winner is {event.winner.name}.[/]"
            ]
        if isinstance(event, ActionUnavailableEvent):
            return [f"[dim]{event.reason.capitalize()}.[/]"]
        return []

    # ============================================================================
    # ACTION MENU
    # ============================================================================

    def choose_action(
        self,
        engine: CombatEngine,
        fighter: Fighter,
        exit_entry: str | None = "Quit",
    ) -> ActionType | None:
        """Choose the action of a fighter.

        Unavailable actions are shown dimmed but can still be picked, the
        engine then reports them as ignored.

        Args:
            engine (CombatEngine): The running engine.
            fighter (Fighter): The fighter choosing.
            exit_entry (str | None): Text for the exit option.

        Returns:
            ActionType | None: The chosen action, None to quit the match.

        """
        table = Table(title=f"{fighter.name}'s move", pad_edge=False)
        table.add_column("#", style="cyan")
        table.add_column("Action", style="bold")
        for i, action in enumerate(ACTION_MENU, 1):
            name = f"{action.emoji} {action.colored_name}"
            if engine.unavailable_reason(fighter, action):
                name = f"[dim]{action.emoji} {action.display_name}[/]"
            table.add_row(str(i), name)
        if exit_entry:
            table.add_row()
            table.add_row("q", exit_entry)
        prompt = "\n" + ccapture(table) + "\nAction > "
        while True:
            answer = self.session.prompt(ANSI(prompt))

            # Keep asking until the user provides a valid input.
            if not answer:
                continue

            index = self.get_digit_choice(answer) - 1
            if 0 <= index < len(ACTION_MENU):
                return ACTION_MENU[index]

            if exit_entry and isinstance(answer, str) and answer.lower() == "q":
                return None

    @staticmethod
    def get_digit_choice(answer: str) -> int:
        """
        Convert a single digit string input to its integer value.

        Args:
            answer (str): User input string to parse.

        Returns:
            int: The integer value of the digit (0-9), or -1 if invalid input.

        """
        if not isinstance(answer, str):
            return -1
        answer = answer.strip()
        if len(answer) == 1 and answer.isdigit():
            return int(answer)
        return -1
