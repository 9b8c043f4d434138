"""
Pig Dice - Scoreboard Store

Loads and saves the lifetime win/loss record through a storage port.
Nothing here raises: unreadable data loads as an empty record and failed
writes are logged while the caller keeps its in-memory copy.
"""

import logging

from pigdice.storage.backends import KeyValueStorage
from pigdice.storage.models import ScoreboardRecord

logger = logging.getLogger(__name__)

SCOREBOARD_KEY = "scoreboard"


class ScoreboardStore:
    """Persists a ScoreboardRecord as a JSON blob under a single key."""

    def __init__(self, storage: KeyValueStorage, key: str = SCOREBOARD_KEY) -> None:
        self.storage = storage
        self.key = key

    def load(self) -> ScoreboardRecord:
        """Return the stored record, or an all-zero record if none is usable."""
        try:
            blob = self.storage.read(self.key)
        except Exception:
            logger.exception("Could not read scoreboard from storage")
            return ScoreboardRecord()

        if not blob:
            return ScoreboardRecord()

        try:
            return ScoreboardRecord.from_json(blob)
        except ValueError as exc:
            logger.warning("Discarding malformed scoreboard blob: %s", exc)
            return ScoreboardRecord()

    def save(self, record: ScoreboardRecord) -> bool:
        """Best-effort write.

        Returns:
            True if the record was persisted
        """
        try:
            self.storage.write(self.key, record.to_json())
        except Exception:
            logger.exception("Could not persist scoreboard")
            return False
        return True

    def reset_all(self) -> ScoreboardRecord:
        """Zero every counter and persist the empty record."""
        record = ScoreboardRecord()
        self.save(record)
        return record
