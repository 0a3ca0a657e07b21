"""
Duel Arena package.

A turn-based duel between two fighters, or a fighter and the machine: each
turn a fighter attacks, heals or defends until one of them falls.
"""

__version__ = "0.1.0"
