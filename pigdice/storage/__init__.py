"""
Pig Dice Storage Layer.

Storage port, backends, and the scoreboard and player-name stores.
"""

from pigdice.storage.backends import (
    JsonFileStorage,
    KeyValueStorage,
    MemoryStorage,
    SupabaseStorage,
)
from pigdice.storage.models import ScoreboardRecord
from pigdice.storage.names import PlayerNameStore
from pigdice.storage.scoreboard import ScoreboardStore

__all__ = [
    "JsonFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "PlayerNameStore",
    "ScoreboardRecord",
    "ScoreboardStore",
    "SupabaseStorage",
]
