"""
Main entry point for the Duel Arena.

Collects the match configuration, from the command line or from the setup
prompts, then runs the match in the terminal. The host loop feeds real
elapsed time to the engine so heal cooldowns and the machine's turns follow
the wall clock.
"""

import argparse
import logging
import time
from typing import Callable

from duel_arena.combat.combat_engine import CombatEngine
from duel_arena.combat.fighter import Fighter
from duel_arena.core.config import MatchConfig
from duel_arena.core.logging import setup_logging
from duel_arena.core.utils import cprint
from duel_arena.ui.cli_interface import PlayerInterface

# Longest nap of the host loop while waiting on deferred events.
IDLE_SLEEP = 0.1


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="duel-arena",
        description="Turn-based duel: attack, heal or defend until one fighter falls.",
    )
    parser.add_argument("--player-one", help="Name of the first fighter.")
    parser.add_argument("--player-two", help="Name of the second fighter.")
    parser.add_argument(
        "--vs-machine",
        action="store_true",
        help="The second fighter is controlled by the machine.",
    )
    parser.add_argument("--seed", type=int, help="Seed for a reproducible match.")
    parser.add_argument("--debug", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def config_from_args(args: argparse.Namespace) -> MatchConfig | None:
    """
    Builds the configuration from the command line.

    Returns:
        MatchConfig | None: None when no fighter option was given, meaning the
            setup prompts should be used.

    """
    if args.player_one is None and args.player_two is None and not args.vs_machine:
        return None
    return MatchConfig(
        player_one_name=args.player_one,
        player_two_name=args.player_two,
        vs_machine=args.vs_machine,
        seed=args.seed,
    )


def run_match(
    engine: CombatEngine,
    ui: PlayerInterface,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], None] = time.sleep,
) -> Fighter | None:
    """
    Runs a match until it is over or a player quits.

    Args:
        engine (CombatEngine): The engine, not yet started.
        ui (PlayerInterface): The interface used for rendering and input.
        clock (Callable[[], float]): Source of real time in seconds.
        sleep (Callable[[float], None]): Used to wait on deferred events.

    Returns:
        Fighter | None: The winner, None on a draw or if a player quit.

    """
    engine.events.subscribe_all(ui.on_event)
    engine.start()
    last = clock()

    def catch_up() -> None:
        nonlocal last
        now = clock()
        engine.advance(max(0.0, now - last))
        last = now

    while not engine.is_over:
        catch_up()
        if engine.is_over:
            break

        fighter = engine.current_fighter
        if engine.is_resolving or fighter.is_controlled_by_ai:
            wait = engine.scheduler.time_until_next()
            sleep(IDLE_SLEEP if wait is None else min(wait, IDLE_SLEEP))
            continue

        ui.render_fighters(engine)
        action = ui.choose_action(engine, fighter)
        if action is None:
            cprint("[dim]Match abandoned.[/]")
            return None
        # Cooldowns may have expired while the player was thinking.
        catch_up()
        engine.perform_action(engine.current_turn_index, action)

    ui.render_fighters(engine)
    ui.announce_winner(engine)
    return engine.winner


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    setup_logging(logging.DEBUG if args.debug else logging.WARNING)

    ui = PlayerInterface()
    try:
        config = config_from_args(args) or ui.ask_match_setup(seed=args.seed)
        engine = CombatEngine.from_config(config)
        run_match(engine, ui)
    except (KeyboardInterrupt, EOFError):
        cprint("\n[dim]Bye![/]")
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
