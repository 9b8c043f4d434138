"""
Pig Dice.

Turn engine, scripted opponent, and persisted scoreboard for the
two-player dice game Pig.
"""

from pigdice.app import create_game
from pigdice.engine.game import PigGame

__all__ = ["PigGame", "create_game"]
