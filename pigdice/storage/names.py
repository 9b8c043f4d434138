"""
Pig Dice - Player Name Store

Display names for the two sides, persisted independently. An empty stored
name is valid and resolves to the side's default label.
"""

import logging

from pigdice.engine.base import Side
from pigdice.storage.backends import KeyValueStorage

logger = logging.getLogger(__name__)

NAME_KEYS: dict[Side, str] = {
    Side.FIRST: "playerFirstName",
    Side.SECOND: "playerSecondName",
}


class PlayerNameStore:
    """Reads and writes the freeform display name of each side."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage

    def get(self, side: Side) -> str:
        """Stored name exactly as saved, empty string if unset or unreadable."""
        try:
            value = self.storage.read(NAME_KEYS[side])
        except Exception:
            logger.exception("Could not read name for %s", side.name)
            return ""
        return value or ""

    def set(self, side: Side, name: str) -> bool:
        try:
            self.storage.write(NAME_KEYS[side], name)
        except Exception:
            logger.exception("Could not persist name for %s", side.name)
            return False
        return True

    def resolve(self, side: Side) -> str:
        """Name to display: the stored name, or the default label when empty."""
        return self.get(side) or side.default_label
