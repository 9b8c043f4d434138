"""
Pig Dice - Autoplay Controller Tests

Scripted opponent sequences driven on virtual time with ManualScheduler,
plus one live run on ThreadingScheduler.
"""

import random
import threading

import pytest
from pigdice.engine.autoplay import AutoplayState
from pigdice.engine.base import GameConfig, MatchState, Mode, Side
from pigdice.engine.events import GameEvent
from pigdice.engine.game import PigGame
from pigdice.engine.policy import Decision, OpponentPolicy
from pigdice.engine.scheduler import ThreadingScheduler
from pigdice.storage.models import ScoreboardRecord


def hand_turn_to_opponent(game, dice):
    """Human pigs out on the first roll, passing the turn to the opponent."""
    dice.push(1)
    game.roll()


class FailsOncePolicy(OpponentPolicy):
    """Raises on the first decision, then holds any non-empty turn."""

    def __init__(self):
        self.calls = 0

    def decide(self, banked, turn_total):
        self.calls += 1
        if self.calls == 1:
            raise RuntimeError("policy bug")
        return Decision.HOLD if turn_total else Decision.ROLL


class TestStart:
    def test_pig_out_hands_turn_to_opponent(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)

        assert solo_game.state.current_side is Side.SECOND
        assert solo_game.state.opponent_acting is True
        assert solo_game.autoplay.state is AutoplayState.AWAITING_PACE
        assert scheduler.pending == 1

    def test_human_hold_hands_turn_to_opponent(self, make_game, scheduler):
        game = make_game(Mode.SOLO, state=MatchState(turn_total=8))
        game.hold()
        assert game.state.opponent_acting is True
        assert scheduler.pending == 1

    def test_ignored_on_human_turn(self, solo_game, scheduler):
        assert solo_game.start_opponent_turn_if_needed() is False
        assert scheduler.pending == 0

    def test_ignored_in_duel(self, make_game, scheduler):
        game = make_game(Mode.DUEL, state=MatchState(current_side=Side.SECOND))
        assert game.start_opponent_turn_if_needed() is False
        assert game.state.opponent_acting is False
        assert scheduler.pending == 0

    def test_ignored_when_over(self, make_game, scheduler):
        over = MatchState(score_first=100, current_side=Side.SECOND, is_over=True, winner=Side.FIRST)
        game = make_game(Mode.SOLO, state=over)
        assert game.start_opponent_turn_if_needed() is False

    def test_only_one_sequence_at_a_time(self, make_game, scheduler):
        game = make_game(Mode.SOLO, state=MatchState(current_side=Side.SECOND))
        assert game.start_opponent_turn_if_needed() is True
        assert game.start_opponent_turn_if_needed() is False
        assert scheduler.pending == 1

    def test_first_step_waits_one_pacing_interval(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)
        dice.push(4)

        scheduler.advance(0.4)
        assert solo_game.state.turn_total == 0
        scheduler.advance(0.1)
        assert solo_game.state.turn_total == 4


class TestManualInputWhileOpponentActs:
    def test_roll_and_hold_rejected(self, solo_game, dice):
        hand_turn_to_opponent(solo_game, dice)
        dice.push(5)
        before = solo_game.state

        assert solo_game.roll() is None
        assert solo_game.hold() is None
        assert solo_game.state == before
        assert dice.faces == [5]

    def test_rejected_between_opponent_rolls(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)
        dice.push(4)
        scheduler.advance(0.5)
        dice.push(6)

        assert solo_game.roll() is None
        assert solo_game.state.turn_total == 4
        assert dice.faces == [6]


class TestSequence:
    def test_rolls_until_threshold_then_holds(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)
        dice.push(6, 6, 6, 2)

        scheduler.run_until_idle()

        state = solo_game.state
        assert state.score_second == 20
        assert state.turn_total == 0
        assert state.current_side is Side.FIRST
        assert state.opponent_acting is False
        assert solo_game.autoplay.state is AutoplayState.IDLE
        assert solo_game.autoplay.steps_taken == 5
        assert scheduler.now == pytest.approx(2.5)
        assert dice.faces == []

    def test_pig_out_returns_turn(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)
        dice.push(4, 1)

        scheduler.run_until_idle()

        state = solo_game.state
        assert state.score_second == 0
        assert state.turn_total == 0
        assert state.current_side is Side.FIRST
        assert state.last_roll is None
        assert state.opponent_acting is False
        assert solo_game.can_roll is True

    def test_opponent_auto_hold_for_win(self, make_game, dice, scheduler, scoreboard_store):
        """Banked 85, threshold 20: holds at a turn total of 15."""
        game = make_game(Mode.SOLO, state=MatchState(score_second=85, current_side=Side.SECOND))
        game.start_opponent_turn_if_needed()
        dice.push(5, 5, 5)

        scheduler.run_until_idle()

        state = game.state
        assert state.score_second == 100
        assert state.is_over is True
        assert state.winner is Side.SECOND
        assert state.opponent_acting is False
        assert game.autoplay.steps_taken == 4
        assert game.scoreboard == ScoreboardRecord(wins_second=1, losses_first=1)
        assert scoreboard_store.load() == game.scoreboard

    def test_custom_threshold(self, make_game, dice, scheduler):
        game = make_game(Mode.SOLO, config=GameConfig(hold_threshold=5), state=MatchState(current_side=Side.SECOND))
        game.start_opponent_turn_if_needed()
        dice.push(3, 3)

        scheduler.run_until_idle()
        assert game.state.score_second == 6

    def test_custom_pacing_delay(self, make_game, dice, scheduler):
        game = make_game(Mode.SOLO, config=GameConfig(pacing_delay=2.0), state=MatchState(current_side=Side.SECOND))
        game.start_opponent_turn_if_needed()
        dice.push(1)

        scheduler.run_until_idle()
        assert scheduler.now == pytest.approx(2.0)

    def test_events(self, solo_game, dice, scheduler):
        events = []
        solo_game.subscribe(events.append)
        hand_turn_to_opponent(solo_game, dice)
        dice.push(3, 1)
        scheduler.run_until_idle()

        assert [p.event for p in events] == [
            GameEvent.PIGGED_OUT,
            GameEvent.TURN_ADVANCED,
            GameEvent.OPPONENT_STARTED,
            GameEvent.DICE_ROLLED,
            GameEvent.PIGGED_OUT,
            GameEvent.TURN_ADVANCED,
            GameEvent.OPPONENT_FINISHED,
        ]
        started = events[2]
        assert started.side is Side.SECOND
        assert started.state.opponent_acting is True
        assert events[-1].state.opponent_acting is False


class TestAbort:
    def test_reset_mid_sequence(self, solo_game, dice, scheduler):
        events = []
        hand_turn_to_opponent(solo_game, dice)
        dice.push(4)
        scheduler.advance(0.5)
        assert solo_game.state.turn_total == 4

        solo_game.reset()
        solo_game.subscribe(events.append)
        assert solo_game.state == MatchState()

        scheduler.run_until_idle()
        assert solo_game.state == MatchState()
        assert solo_game.autoplay.state is AutoplayState.IDLE
        assert events == []

    def test_mode_change_mid_sequence(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)
        solo_game.set_mode(Mode.DUEL)

        scheduler.run_until_idle()
        assert solo_game.state == MatchState()
        assert solo_game.autoplay.is_running is False

    def test_stale_sequence_hands_over_to_fresh_one(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)
        solo_game.reset()

        # Opponent is up again before the stale sequence has woken.
        hand_turn_to_opponent(solo_game, dice)
        assert solo_game.state.current_side is Side.SECOND

        scheduler.advance(0.5)
        assert solo_game.autoplay.state is AutoplayState.AWAITING_PACE
        assert solo_game.state.opponent_acting is True

        dice.push(3, 1)
        scheduler.run_until_idle()
        assert solo_game.state.current_side is Side.FIRST
        assert solo_game.state.opponent_acting is False
        assert dice.faces == []


class TestStepErrors:
    def test_policy_error_releases_turn(self, solo_game, dice, scheduler):
        solo_game.autoplay.policy = FailsOncePolicy()
        hand_turn_to_opponent(solo_game, dice)

        with pytest.raises(RuntimeError, match="policy bug"):
            scheduler.advance(0.5)

        # A fresh sequence picks the turn back up.
        assert solo_game.autoplay.state is AutoplayState.AWAITING_PACE
        assert solo_game.state.opponent_acting is True
        assert scheduler.pending == 1

        dice.push(4)
        scheduler.run_until_idle()
        assert solo_game.state.score_second == 4
        assert solo_game.state.current_side is Side.FIRST
        assert solo_game.state.opponent_acting is False
        assert solo_game.autoplay.state is AutoplayState.IDLE

    def test_roll_error_releases_turn(self, solo_game, dice, scheduler):
        hand_turn_to_opponent(solo_game, dice)

        with pytest.raises(AssertionError, match="ran out of faces"):
            scheduler.advance(0.5)
        assert solo_game.state.turn_total == 0
        assert solo_game.autoplay.state is AutoplayState.AWAITING_PACE

        dice.push(3, 1)
        scheduler.run_until_idle()
        assert solo_game.state.current_side is Side.FIRST
        assert solo_game.state.opponent_acting is False


class TestFullSoloMatch:
    """Whole matches against the scripted opponent always finish."""

    @pytest.mark.parametrize("seed", range(5))
    def test_match_terminates(self, make_game, scheduler, seed):
        game = make_game(Mode.SOLO, rng=random.Random(seed))

        for _ in range(5000):
            state = game.state
            if state.is_over:
                break
            if game.can_roll:
                if state.turn_total >= 10:
                    game.hold()
                else:
                    game.roll()
            else:
                assert scheduler.pending > 0
                scheduler.run_until_idle()
        else:
            pytest.fail("match did not finish")

        assert game.autoplay.state is AutoplayState.IDLE
        assert game.state.opponent_acting is False
        assert game.scoreboard.total_wins == game.scoreboard.total_losses == 1


class TestThreadingScheduler:
    def test_live_opponent_turn(self, scoreboard_store, dice):
        finished = threading.Event()
        scheduler = ThreadingScheduler()
        game = PigGame(
            scoreboard_store,
            config=GameConfig(pacing_delay=0.01),
            scheduler=scheduler,
            rng=dice,
        )
        game.subscribe(
            lambda p: finished.set() if p.event is GameEvent.OPPONENT_FINISHED else None
        )

        dice.push(1, 6, 1)
        game.roll()

        try:
            assert finished.wait(timeout=5)
            with game.lock:
                assert game.state.current_side is Side.FIRST
                assert game.state.score_second == 0
                assert game.state.opponent_acting is False
        finally:
            scheduler.shutdown()
