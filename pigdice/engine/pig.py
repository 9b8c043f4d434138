"""
Pig Dice - Pig Engine

Single-die push-your-luck rules. Roll a D6: 2-6 adds face value to the
turn total, rolling 1 = pig out (lose the turn total, pass the turn).
Hold to bank the turn total. First side to the winning score wins.

All methods are stateless class methods operating on immutable data.
"""

import random
from dataclasses import replace

from pigdice.engine.base import (
    DIE_FACES,
    WINNING_SCORE,
    DiceRoll,
    MatchState,
    Side,
    TurnOutcome,
)


class PigEngine:
    """
    Stateless engine for the Pig rules.

    All methods are class methods operating on immutable data.
    State is passed in and returned, never stored.
    """

    @classmethod
    def initial_state(cls) -> MatchState:
        """Fresh match: zero scores, first side to act."""
        return MatchState()

    @classmethod
    def roll_die(cls, rng: random.Random | None = None) -> DiceRoll:
        """Roll a single D6.

        Args:
            rng: Optional random source (defaults to the module generator)

        Returns:
            DiceRoll with a uniform value in 1-6
        """
        source = rng if rng is not None else random
        return DiceRoll(value=source.randint(1, DIE_FACES))

    @classmethod
    def switch_turn(cls, state: MatchState) -> MatchState:
        """Pass the turn to the other side with an empty turn total and no die showing."""
        return replace(
            state,
            turn_total=0,
            last_roll=None,
            current_side=state.current_side.other,
        )

    @classmethod
    def check_winner(
        cls, state: MatchState, winning_score: int = WINNING_SCORE
    ) -> Side | None:
        """Return the side that has reached the winning score, if any."""
        for side in (Side.FIRST, Side.SECOND):
            if state.score_for(side) >= winning_score:
                return side
        return None

    @classmethod
    def apply_roll(
        cls, state: MatchState, roll: DiceRoll
    ) -> tuple[MatchState, TurnOutcome]:
        """Apply a roll to the current side's turn.

        Args:
            state: Match before the roll
            roll: The die that was rolled

        Returns:
            Tuple of (new_state, outcome). On a pig out the turn has
            already passed to the other side and ``last_roll`` is cleared;
            the face is only reported through the outcome.
        """
        state = replace(state, last_roll=roll.value)

        if roll.is_pig_out:
            return (cls.switch_turn(state), TurnOutcome.PIG_OUT)

        return (
            replace(state, turn_total=state.turn_total + roll.value),
            TurnOutcome.CONTINUE,
        )

    @classmethod
    def apply_hold(
        cls, state: MatchState, winning_score: int = WINNING_SCORE
    ) -> tuple[MatchState, TurnOutcome]:
        """Bank the turn total and either end the match or pass the turn.

        The win check runs before the turn switch, so only the side that
        just banked can cross the threshold and a finished match keeps
        its current side.

        Args:
            state: Match before the hold
            winning_score: Banked score that ends the match

        Returns:
            Tuple of (new_state, outcome)
        """
        side = state.current_side
        state = state.with_score(side, state.score_for(side) + state.turn_total)

        winner = cls.check_winner(state, winning_score)
        if winner is not None:
            return (
                replace(state, turn_total=0, is_over=True, winner=winner),
                TurnOutcome.WON,
            )

        return (cls.switch_turn(state), TurnOutcome.BANKED)
