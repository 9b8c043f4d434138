"""
Pig Dice - Key/Value Storage Backends

The engine persists small string blobs by key through a storage port.
Backends raise on I/O failure; the stores above them decide what to
tolerate.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Protocol

from supabase import Client

logger = logging.getLogger(__name__)


class KeyValueStorage(Protocol):
    """Port for durable string values addressed by key."""

    def read(self, key: str) -> str | None:
        ...

    def write(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Process-local storage. Lost on exit."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self.values: dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.values.get(key)

    def write(self, key: str, value: str) -> None:
        self.values[key] = value


class JsonFileStorage:
    """All keys in one JSON object on disk.

    A missing file reads as empty. A corrupt file also reads as empty and
    is replaced on the next write.
    """

    def __init__(self, path: str | os.PathLike[str]) -> None:
        self.path = Path(path)

    def _load(self) -> dict[str, str]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return {}
        except UnicodeDecodeError:
            logger.warning("Ignoring undecodable storage file %s", self.path)
            return {}

        try:
            data = json.loads(text)
        except json.JSONDecodeError:
            logger.warning("Ignoring corrupt storage file %s", self.path)
            return {}

        if not isinstance(data, dict):
            logger.warning("Ignoring storage file %s: not a JSON object", self.path)
            return {}
        return {k: v for k, v in data.items() if isinstance(v, str)}

    def read(self, key: str) -> str | None:
        return self._load().get(key)

    def write(self, key: str, value: str) -> None:
        data = self._load()
        data[key] = value

        self.path.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                json.dump(data, fh, indent=2, sort_keys=True)
            os.replace(tmp_name, self.path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise


class SupabaseStorage:
    """Rows of ``{key, value}`` in a Supabase table."""

    def __init__(self, client: Client, table: str = "preferences") -> None:
        self.client = client
        self.table = client.table(table)

    def read(self, key: str) -> str | None:
        data = (
            self.table
            .select("value")
            .eq("key", key)
            .execute()
        )
        if data.data:
            return data.data[0].get("value")
        return None

    def write(self, key: str, value: str) -> None:
        (
            self.table
            .upsert({"key": key, "value": value})
            .execute()
        )
