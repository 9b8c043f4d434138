"""
Pig Dice - Test Configuration and Fixtures

Common fixtures and test doubles for all test modules.
"""

import random
from typing import Callable

import pytest

from pigdice.engine.base import GameConfig, MatchState, Mode
from pigdice.engine.game import PigGame
from pigdice.engine.scheduler import ManualScheduler
from pigdice.storage.backends import MemoryStorage
from pigdice.storage.names import PlayerNameStore
from pigdice.storage.scoreboard import ScoreboardStore


class ScriptedRandom(random.Random):
    """Random source that returns queued die faces from randint()."""

    def __init__(self, faces=()) -> None:
        super().__init__(0)
        self.faces = list(faces)

    def push(self, *faces: int) -> None:
        self.faces.extend(faces)

    def randint(self, a: int, b: int) -> int:
        if not self.faces:
            raise AssertionError("ScriptedRandom ran out of faces")
        return self.faces.pop(0)


class FailingStorage:
    """Storage backend whose every call raises."""

    def read(self, key: str) -> str | None:
        raise OSError("disk on fire")

    def write(self, key: str, value: str) -> None:
        raise OSError("disk on fire")


# =============================================================================
# STORAGE FIXTURES
# =============================================================================

@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def failing_storage() -> FailingStorage:
    return FailingStorage()


@pytest.fixture
def scoreboard_store(storage) -> ScoreboardStore:
    return ScoreboardStore(storage)


@pytest.fixture
def name_store(storage) -> PlayerNameStore:
    return PlayerNameStore(storage)


# =============================================================================
# GAME FIXTURES
# =============================================================================

@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def dice() -> ScriptedRandom:
    return ScriptedRandom()


@pytest.fixture
def make_game(scoreboard_store, name_store, scheduler, dice) -> Callable[..., PigGame]:
    """Factory for games on shared in-memory storage and virtual time."""

    def factory(
        mode: Mode = Mode.SOLO,
        state: MatchState | None = None,
        config: GameConfig | None = None,
        rng: random.Random | None = None,
    ) -> PigGame:
        game = PigGame(
            scoreboard_store,
            names=name_store,
            config=config,
            mode=mode,
            scheduler=scheduler,
            rng=rng if rng is not None else dice,
        )
        if state is not None:
            game._state = state
        return game

    return factory


@pytest.fixture
def solo_game(make_game) -> PigGame:
    return make_game(Mode.SOLO)


@pytest.fixture
def duel_game(make_game) -> PigGame:
    return make_game(Mode.DUEL)
