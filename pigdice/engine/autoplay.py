"""
Pig Dice - Autoplay Controller

Plays the scripted opponent's turn as a paced sequence of rolls ending in
a hold or a pig out. The controller is a small state machine:

    IDLE ──start──▶ AWAITING_PACE ──timer──▶ THINKING ──roll 2-6──▶ AWAITING_PACE
                                                │
                                                └─hold / pig out / abort / error──▶ IDLE

There is no explicit cancel. After every pacing wait the controller checks
that the match is still the one it started on and that the turn still
belongs to the scripted side; otherwise it stops.
"""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import TYPE_CHECKING

from pigdice.engine.base import Action, Actor, TurnOutcome
from pigdice.engine.events import GameEvent
from pigdice.engine.policy import Decision, OpponentPolicy
from pigdice.engine.scheduler import Scheduler
from pigdice.engine.validators import validate_delay

if TYPE_CHECKING:
    from pigdice.engine.game import PigGame

logger = logging.getLogger(__name__)


class AutoplayState(Enum):
    IDLE = auto()
    THINKING = auto()
    AWAITING_PACE = auto()


class AutoplayController:
    """Drives the scripted side of a PigGame.

    At most one sequence runs at a time; start requests made while a
    sequence is in flight are ignored.
    """

    def __init__(
        self,
        game: PigGame,
        scheduler: Scheduler,
        policy: OpponentPolicy,
        pacing_delay: float,
    ) -> None:
        self._game = game
        self._scheduler = scheduler
        self.policy = policy
        self.pacing_delay = validate_delay(pacing_delay)
        self._state = AutoplayState.IDLE
        self._generation: int | None = None
        self.steps_taken = 0

    @property
    def state(self) -> AutoplayState:
        return self._state

    @property
    def is_running(self) -> bool:
        return self._state is not AutoplayState.IDLE

    def start_if_needed(self) -> bool:
        """Begin a sequence if the scripted side is up and none is running.

        Returns:
            True if a new sequence was started
        """
        game = self._game
        with game.lock:
            if self.is_running or not game.opponent_turn_active():
                return False

            self._generation = game.generation
            self.steps_taken = 0
            self._state = AutoplayState.AWAITING_PACE
            game._set_opponent_acting(True)
            logger.debug("Opponent turn started (match %d)", self._generation)
            game._emit(GameEvent.OPPONENT_STARTED, side=game.opponent_side)
            self._scheduler.call_later(self.pacing_delay, self._step)
            return True

    def _should_abort(self) -> bool:
        game = self._game
        return self._generation != game.generation or not game.opponent_turn_active()

    def _step(self) -> None:
        game = self._game
        with game.lock:
            if self._state is not AutoplayState.AWAITING_PACE:
                return
            self._state = AutoplayState.THINKING

            if self._should_abort():
                logger.debug("Opponent turn aborted")
                self._finish()
                return

            try:
                keep_rolling = self._act()
            except Exception:
                logger.error("Opponent step failed; releasing the turn")
                self._finish()
                raise

            if not keep_rolling:
                self._finish()
                return

            self._state = AutoplayState.AWAITING_PACE
            self._scheduler.call_later(self.pacing_delay, self._step)

    def _act(self) -> bool:
        """Take one decision and apply it. Returns True to roll again."""
        game = self._game
        state = game.state
        decision = self.policy.decide(state.banked, state.turn_total)
        self.steps_taken += 1
        logger.debug(
            "Opponent decides %s (banked=%d, turn_total=%d)",
            decision.name, state.banked, state.turn_total,
        )

        if decision is Decision.HOLD:
            game._dispatch(Action.HOLD, Actor.OPPONENT)
            return False

        outcome = game._dispatch(Action.ROLL, Actor.OPPONENT)
        return outcome is TurnOutcome.CONTINUE and not self._should_abort()

    def _finish(self) -> None:
        game = self._game
        stale = self._generation != game.generation
        self._state = AutoplayState.IDLE
        self._generation = None
        if not stale:
            game._set_opponent_acting(False)
            game._emit(GameEvent.OPPONENT_FINISHED, side=game.opponent_side)
        # The turn may have become the scripted side's again while a stale
        # sequence was winding down.
        self.start_if_needed()
