"""Pig Dice - Application Factory."""

from __future__ import annotations

import logging
import random

from pigdice.config.settings import Settings, configure_logging, get_settings
from pigdice.engine.game import PigGame
from pigdice.engine.scheduler import Scheduler
from pigdice.storage.backends import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    SupabaseStorage,
)
from pigdice.storage.names import PlayerNameStore
from pigdice.storage.scoreboard import ScoreboardStore

logger = logging.getLogger(__name__)


def create_storage(settings: Settings) -> KeyValueStorage:
    """Build the storage backend named in settings."""
    if settings.storage_backend == "memory":
        return MemoryStorage()
    if settings.storage_backend == "supabase":
        from pigdice.storage.client import get_supabase_client

        return SupabaseStorage(get_supabase_client(), table=settings.supabase_table)
    return JsonFileStorage(settings.storage_path)


def create_game(
    settings: Settings | None = None,
    *,
    scheduler: Scheduler | None = None,
    storage: KeyValueStorage | None = None,
    rng: random.Random | None = None,
) -> PigGame:
    """Wire settings, logging, storage and the engine into a ready game."""
    settings = settings or get_settings()
    configure_logging(settings)

    if storage is None:
        storage = create_storage(settings)
    logger.info("Using %s storage", type(storage).__name__)

    return PigGame(
        ScoreboardStore(storage),
        names=PlayerNameStore(storage),
        config=settings.game_config(),
        scheduler=scheduler,
        rng=rng,
    )
