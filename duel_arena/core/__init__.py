"""
Core system module for the duel arena.

This module contains the rule constants, the match configuration, logging
setup and the console helpers shared by the rest of the game.
"""

from .config import MatchConfig
from .constants import (
    ActionType,
    FighterStatus,
    NiceEnum,
    health_color,
)
from .logging import get_logger, log_debug, log_info, setup_logging
from .utils import ccapture, cprint, crule, make_bar

__all__ = [
    # Import from config.py
    "MatchConfig",
    # Import from constants.py
    "ActionType",
    "FighterStatus",
    "NiceEnum",
    "health_color",
    # Import from logging.py
    "get_logger",
    "log_debug",
    "log_info",
    "setup_logging",
    # Import from utils.py
    "ccapture",
    "cprint",
    "crule",
    "make_bar",
]
