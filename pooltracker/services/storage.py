"""Key-value storage used to persist tournaments.

Two namespaces exist: the personal slot (``my-tournament``), holding the
tournament this installation last worked on, and the shared namespace
(``tournament:<id>``), readable by anyone who knows the tournament id.
"""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Protocol

from pooltracker.db.repositories import KeyValueRepository
from pooltracker.exceptions import StorageError

logger = logging.getLogger(__name__)

PERSONAL_KEY = "my-tournament"
SHARED_KEY_PREFIX = "tournament:"


def shared_key(tournament_id: str) -> str:
    return f"{SHARED_KEY_PREFIX}{tournament_id}"


@dataclass(frozen=True)
class StoredValue:
    value: str


class KeyValueStore(Protocol):
    def get(self, key: str, shared: bool = False) -> StoredValue | None: ...

    def set(self, key: str, value: str, shared: bool = False) -> None: ...


class SqliteKeyValueStore:
    """Key-value store backed by the ``kv_store`` table."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._repo = KeyValueRepository(connection)

    def get(self, key: str, shared: bool = False) -> StoredValue | None:
        try:
            row = self._repo.get(key, shared=shared)
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to read '{key}': {exc}") from exc
        if row is None:
            return None
        return StoredValue(value=str(row["value"]))

    def set(self, key: str, value: str, shared: bool = False) -> None:
        try:
            self._repo.upsert(key, value, shared=shared)
        except sqlite3.Error as exc:
            raise StorageError(f"Failed to write '{key}': {exc}") from exc
        logger.debug("Stored %s (shared=%s, %d bytes)", key, shared, len(value))


class MemoryKeyValueStore:
    """Process-local store, handy for tests and throwaway sessions."""

    def __init__(self) -> None:
        self._data: dict[tuple[str, bool], str] = {}

    def get(self, key: str, shared: bool = False) -> StoredValue | None:
        value = self._data.get((key, shared))
        if value is None:
            return None
        return StoredValue(value=value)

    def set(self, key: str, value: str, shared: bool = False) -> None:
        self._data[(key, shared)] = value
