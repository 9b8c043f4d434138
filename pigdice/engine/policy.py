"""
Pig Dice - Scripted Opponent Policy

Decision rules for the computer-controlled side. A policy looks at the
banked score and the current turn total and answers roll or hold.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto

from pigdice.engine.base import DEFAULT_HOLD_THRESHOLD, WINNING_SCORE
from pigdice.engine.validators import validate_hold_threshold, validate_target_score


class Decision(Enum):
    ROLL = auto()
    HOLD = auto()


class OpponentPolicy(ABC):
    """Abstract base class for scripted opponent strategies."""

    @abstractmethod
    def decide(self, banked: int, turn_total: int) -> Decision:
        """Given the side's banked score and turn total, roll or hold.

        Args:
            banked: Score already banked by the acting side
            turn_total: Points accumulated this turn

        Returns:
            The decision for the next step
        """


@dataclass(frozen=True)
class HoldAtThreshold(OpponentPolicy):
    """Roll until the turn total reaches a threshold or the win is in hand.

    Holds when ``banked + turn_total`` reaches the winning score, or when
    the turn total reaches ``hold_threshold``. Never holds an empty turn,
    so a threshold of 0 still rolls once per turn.
    """
    hold_threshold: int = DEFAULT_HOLD_THRESHOLD
    winning_score: int = WINNING_SCORE

    def __post_init__(self) -> None:
        validate_hold_threshold(self.hold_threshold)
        validate_target_score(self.winning_score)

    def decide(self, banked: int, turn_total: int) -> Decision:
        if turn_total <= 0:
            return Decision.ROLL
        if banked + turn_total >= self.winning_score:
            return Decision.HOLD
        if turn_total >= self.hold_threshold:
            return Decision.HOLD
        return Decision.ROLL
