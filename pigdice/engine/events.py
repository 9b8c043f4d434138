"""
Pig Dice - Game Event Definitions

Event types and payloads delivered to observers after each state change.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, auto
from typing import TYPE_CHECKING, Any

from pigdice.engine.base import MatchState, Side

if TYPE_CHECKING:
    from pigdice.storage.models import ScoreboardRecord


class GameEvent(Enum):
    """Events that can occur during a game."""

    MATCH_RESET = auto()
    DICE_ROLLED = auto()
    PIGGED_OUT = auto()
    TURN_BANKED = auto()
    TURN_ADVANCED = auto()
    GAME_WON = auto()
    OPPONENT_STARTED = auto()
    OPPONENT_FINISHED = auto()
    SCOREBOARD_UPDATED = auto()
    NAMES_UPDATED = auto()


@dataclass(frozen=True)
class EventPayload:
    """Snapshot handed to observers alongside the event."""

    event: GameEvent
    state: MatchState
    scoreboard: ScoreboardRecord
    side: Side | None = None
    data: dict[str, Any] = field(default_factory=dict)
