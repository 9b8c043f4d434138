"""
Pig Dice - Game Session

PigGame owns the live match: it applies PigEngine transitions to the
current MatchState, enforces who may act, records results on the
scoreboard, starts the scripted opponent when its turn comes up, and
notifies observers after every change.

Manual and scripted moves go through the same dispatch entry point under
one re-entrant lock, so timer-driven opponent steps never interleave with
caller actions. Moves that are not allowed right now (match over, the
scripted side's turn, an empty hold) are silent no-ops; presentation is
expected to disable those controls rather than rely on an error.
"""

from __future__ import annotations

import logging
import random
import threading
from dataclasses import replace
from typing import Callable

from pigdice.engine.autoplay import AutoplayController
from pigdice.engine.base import (
    Action,
    Actor,
    GameConfig,
    MatchState,
    Mode,
    Side,
    TurnOutcome,
)
from pigdice.engine.events import EventPayload, GameEvent
from pigdice.engine.pig import PigEngine
from pigdice.engine.policy import HoldAtThreshold, OpponentPolicy
from pigdice.engine.scheduler import Scheduler, ThreadingScheduler
from pigdice.storage.models import ScoreboardRecord
from pigdice.storage.names import PlayerNameStore
from pigdice.storage.scoreboard import ScoreboardStore

logger = logging.getLogger(__name__)

OPPONENT_SIDE = Side.SECOND
OPPONENT_LABEL = "Computer"

Listener = Callable[[EventPayload], None]


class PigGame:
    """A two-sided Pig match plus the lifetime scoreboard."""

    opponent_side = OPPONENT_SIDE

    def __init__(
        self,
        scoreboard_store: ScoreboardStore,
        *,
        names: PlayerNameStore | None = None,
        config: GameConfig | None = None,
        mode: Mode = Mode.SOLO,
        scheduler: Scheduler | None = None,
        policy: OpponentPolicy | None = None,
        rng: random.Random | None = None,
    ) -> None:
        self.config = config or GameConfig()
        self._store = scoreboard_store
        self._names = names
        self._rng = rng or random.Random()
        self._lock = threading.RLock()
        self._listeners: list[Listener] = []

        self._mode = mode
        self._state = PigEngine.initial_state()
        self._generation = 0
        self._scoreboard = scoreboard_store.load()

        if policy is None:
            policy = HoldAtThreshold(
                hold_threshold=self.config.hold_threshold,
                winning_score=self.config.winning_score,
            )
        self.autoplay = AutoplayController(
            self,
            scheduler if scheduler is not None else ThreadingScheduler(),
            policy,
            self.config.pacing_delay,
        )

    # -- Observation -----------------------------------------------------

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    @property
    def state(self) -> MatchState:
        return self._state

    @property
    def mode(self) -> Mode:
        return self._mode

    @property
    def scoreboard(self) -> ScoreboardRecord:
        return self._scoreboard

    @property
    def generation(self) -> int:
        """Counter bumped on every reset, identifying the current match."""
        return self._generation

    @property
    def can_roll(self) -> bool:
        with self._lock:
            return self._accepts(Actor.HUMAN)

    @property
    def can_hold(self) -> bool:
        with self._lock:
            return self._accepts(Actor.HUMAN) and self._state.turn_total > 0

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a callback invoked after every change.

        Callbacks run while the game lock is held, possibly on a timer
        thread. They must not block.

        Returns:
            A function that removes the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def is_scripted(self, side: Side) -> bool:
        return self._mode is Mode.SOLO and side is OPPONENT_SIDE

    def opponent_turn_active(self) -> bool:
        """True while the scripted side is up in an unfinished match."""
        state = self._state
        return self.is_scripted(state.current_side) and not state.is_over

    # -- Match lifecycle ---------------------------------------------------

    def reset(self, mode: Mode | None = None) -> None:
        """Start a new match, optionally switching mode. Scoreboard untouched."""
        with self._lock:
            if mode is not None:
                self._mode = mode
            self._generation += 1
            self._state = PigEngine.initial_state()
            logger.info("Match %d started in %s mode", self._generation, self._mode.name)
            self._emit(GameEvent.MATCH_RESET, mode=self._mode)
            self.autoplay.start_if_needed()

    def set_mode(self, mode: Mode) -> None:
        """Change mode. Always starts a new match."""
        self.reset(mode)

    def replay(self) -> None:
        """Start a new match in the current mode."""
        self.reset()

    # -- Turn actions ------------------------------------------------------

    def roll(self) -> TurnOutcome | None:
        """Roll for the human side whose turn it is.

        Returns:
            The outcome, or None if rolling is not allowed right now
        """
        return self._dispatch(Action.ROLL, Actor.HUMAN)

    def hold(self) -> TurnOutcome | None:
        """Bank the turn total for the human side whose turn it is.

        Returns:
            The outcome, or None if holding is not allowed right now
        """
        return self._dispatch(Action.HOLD, Actor.HUMAN)

    def start_opponent_turn_if_needed(self) -> bool:
        return self.autoplay.start_if_needed()

    def _accepts(self, actor: Actor) -> bool:
        state = self._state
        if state.is_over:
            return False
        scripted = self.is_scripted(state.current_side)
        if actor is Actor.HUMAN:
            return not scripted
        return scripted and self.autoplay.is_running

    def _dispatch(self, action: Action, actor: Actor) -> TurnOutcome | None:
        with self._lock:
            if not self._accepts(actor):
                logger.debug("Ignoring %s from %s", action.name, actor.name)
                return None
            if action is Action.ROLL:
                return self._apply_roll()
            return self._apply_hold()

    def _apply_roll(self) -> TurnOutcome:
        side = self._state.current_side
        roll = PigEngine.roll_die(self._rng)
        self._state, outcome = PigEngine.apply_roll(self._state, roll)
        logger.debug("%s rolled %d", side.name, roll.value)

        if outcome is TurnOutcome.PIG_OUT:
            self._emit(GameEvent.PIGGED_OUT, side=side, roll=roll.value)
            self._after_turn_switch()
        else:
            self._emit(GameEvent.DICE_ROLLED, side=side, roll=roll.value)
        return outcome

    def _apply_hold(self) -> TurnOutcome | None:
        state = self._state
        if state.turn_total <= 0:
            logger.debug("Ignoring HOLD with an empty turn total")
            return None

        side = state.current_side
        banked = state.turn_total
        self._state, outcome = PigEngine.apply_hold(state, self.config.winning_score)

        if outcome is TurnOutcome.WON:
            logger.info(
                "%s wins %d-%d",
                side.name, self._state.score_for(side), self._state.score_for(side.other),
            )
            self._update_scoreboard(self._scoreboard.record_win(side))
            self._emit(GameEvent.GAME_WON, side=side, banked=banked)
        else:
            self._emit(GameEvent.TURN_BANKED, side=side, banked=banked)
            self._after_turn_switch()
        return outcome

    def _after_turn_switch(self) -> None:
        self._emit(GameEvent.TURN_ADVANCED, side=self._state.current_side)
        self.autoplay.start_if_needed()

    def _set_opponent_acting(self, acting: bool) -> None:
        with self._lock:
            if self._state.opponent_acting != acting:
                self._state = replace(self._state, opponent_acting=acting)

    # -- Scoreboard --------------------------------------------------------

    def _update_scoreboard(self, record: ScoreboardRecord) -> None:
        self._scoreboard = record
        self._store.save(record)
        self._emit(GameEvent.SCOREBOARD_UPDATED)

    def reset_scoreboard(self) -> None:
        """Zero the lifetime tally and persist it."""
        with self._lock:
            self._scoreboard = self._store.reset_all()
            logger.info("Scoreboard reset")
            self._emit(GameEvent.SCOREBOARD_UPDATED)

    # -- Names -------------------------------------------------------------

    def name_for(self, side: Side) -> str:
        """Display name for a side."""
        if self.is_scripted(side):
            return OPPONENT_LABEL
        if self._names is None:
            return side.default_label
        return self._names.resolve(side)

    @property
    def current_side_name(self) -> str:
        return self.name_for(self._state.current_side)

    @property
    def winner_name(self) -> str | None:
        winner = self._state.winner
        return self.name_for(winner) if winner is not None else None

    def set_player_name(self, side: Side, name: str) -> None:
        if self._names is None:
            return
        self._names.set(side, name)
        with self._lock:
            self._emit(GameEvent.NAMES_UPDATED, side=side)

    # -- Events ------------------------------------------------------------

    def _emit(self, event: GameEvent, side: Side | None = None, **data) -> None:
        payload = EventPayload(
            event=event,
            state=self._state,
            scoreboard=self._scoreboard,
            side=side,
            data=data,
        )
        for listener in list(self._listeners):
            try:
                listener(payload)
            except Exception:
                logger.exception("Listener failed on %s", event.name)
