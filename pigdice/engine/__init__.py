"""
Pig Dice Game Engine.

Rules, scripted opponent, and the match session. The rules and policy
are pure Python with no storage dependencies.
"""

from pigdice.engine.base import (
    Action,
    Actor,
    DiceRoll,
    GameConfig,
    MatchState,
    Mode,
    Side,
    TurnOutcome,
)
from pigdice.engine.pig import PigEngine
from pigdice.engine.policy import Decision, HoldAtThreshold, OpponentPolicy
from pigdice.engine.scheduler import ManualScheduler, Scheduler, ThreadingScheduler

__all__ = [
    # Data Classes
    "DiceRoll",
    "GameConfig",
    "MatchState",
    # Enums
    "Action",
    "Actor",
    "Decision",
    "Mode",
    "Side",
    "TurnOutcome",
    # Rules and opponent
    "PigEngine",
    "OpponentPolicy",
    "HoldAtThreshold",
    # Schedulers
    "Scheduler",
    "ManualScheduler",
    "ThreadingScheduler",
]
