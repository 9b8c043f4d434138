"""
Pig Dice - Game Engine Base Classes

This module defines the foundational data structures and enums used throughout
the game engine. Rolls, configuration and match snapshots are immutable
(frozen dataclasses); the owning game replaces its snapshot on every
transition instead of mutating it in place.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import Enum, auto

from pigdice.engine.validators import (
    validate_delay,
    validate_die_value,
    validate_hold_threshold,
    validate_score,
    validate_target_score,
)

DIE_FACES = 6
PIG_OUT_FACE = 1
WINNING_SCORE = 100
DEFAULT_HOLD_THRESHOLD = 20
DEFAULT_PACING_DELAY = 0.5


class Side(Enum):
    """A player slot at the table, not a person."""
    FIRST = "first"
    SECOND = "second"

    @property
    def default_label(self) -> str:
        return "Player 1" if self is Side.FIRST else "Player 2"

    @property
    def other(self) -> Side:
        return Side.SECOND if self is Side.FIRST else Side.FIRST


class Mode(Enum):
    """Who controls the second side."""
    SOLO = "solo"    # one human vs. the scripted opponent
    DUEL = "duel"    # two humans


class Action(Enum):
    """Moves a side can make during its turn."""
    ROLL = auto()
    HOLD = auto()


class Actor(Enum):
    """Origin of an action request."""
    HUMAN = auto()
    OPPONENT = auto()


class TurnOutcome(Enum):
    """Result of applying a single action to a match."""
    CONTINUE = auto()   # rolled 2-6, same side keeps rolling
    PIG_OUT = auto()    # rolled a 1, turn total lost, turn passed
    BANKED = auto()     # held without winning, turn passed
    WON = auto()        # held and reached the winning score


@dataclass(frozen=True)
class DiceRoll:
    """
    A single D6 roll.

    Attributes:
        value: Face value (1-6)
    """
    value: int

    def __post_init__(self) -> None:
        validate_die_value(self.value, DIE_FACES)

    @property
    def is_pig_out(self) -> bool:
        """Returns True if the roll forfeits the turn."""
        return self.value == PIG_OUT_FACE


@dataclass(frozen=True)
class GameConfig:
    """
    Rule parameters for a game session.

    Attributes:
        winning_score: Banked score that ends the match
        hold_threshold: Turn total at which the scripted opponent banks
        pacing_delay: Seconds between scripted opponent steps
    """
    winning_score: int = WINNING_SCORE
    hold_threshold: int = DEFAULT_HOLD_THRESHOLD
    pacing_delay: float = DEFAULT_PACING_DELAY

    def __post_init__(self) -> None:
        validate_target_score(self.winning_score)
        validate_hold_threshold(self.hold_threshold)
        validate_delay(self.pacing_delay)


@dataclass(frozen=True)
class MatchState:
    """
    Snapshot of a match in progress.

    Attributes:
        score_first: Banked score of the first side
        score_second: Banked score of the second side
        turn_total: Points accumulated this turn (not yet banked)
        current_side: Side whose turn it is
        last_roll: Most recent face rolled, None at match start
        is_over: Whether a side has reached the winning score
        winner: Winning side once the match is over
        opponent_acting: Whether the scripted opponent owns the turn
    """
    score_first: int = 0
    score_second: int = 0
    turn_total: int = 0
    current_side: Side = Side.FIRST
    last_roll: int | None = None
    is_over: bool = False
    winner: Side | None = None
    opponent_acting: bool = False

    def __post_init__(self) -> None:
        validate_score(self.score_first)
        validate_score(self.score_second)
        validate_score(self.turn_total)
        if self.last_roll is not None:
            validate_die_value(self.last_roll, DIE_FACES)
        if self.is_over and self.winner is None:
            raise ValueError("A finished match must have a winner.")

    def score_for(self, side: Side) -> int:
        return self.score_first if side is Side.FIRST else self.score_second

    def with_score(self, side: Side, score: int) -> MatchState:
        """Return a copy with one side's banked score replaced."""
        if side is Side.FIRST:
            return replace(self, score_first=score)
        return replace(self, score_second=score)

    @property
    def banked(self) -> int:
        """Banked score of the side whose turn it is."""
        return self.score_for(self.current_side)

    @property
    def projected(self) -> int:
        """Score the current side would have if it held now."""
        return self.banked + self.turn_total
