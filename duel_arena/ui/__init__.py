"""
User interface module for the duel arena.

This module provides the terminal front end: the setup screen, the fighter
cards, the battle log and the action menu.
"""
