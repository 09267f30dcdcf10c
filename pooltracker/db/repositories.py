"""SQLite repositories for stored tournament records."""

from __future__ import annotations

import sqlite3
from typing import Any


def _row_to_dict(row: sqlite3.Row | None) -> dict[str, Any] | None:
    if row is None:
        return None
    return dict(row)


class KeyValueRepository:
    """Repository for the key-value records behind tournament saves."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def get(self, key: str, *, shared: bool = False) -> dict[str, Any] | None:
        row = self._connection.execute(
            "SELECT * FROM kv_store WHERE key = ? AND shared = ?",
            (key, int(shared)),
        ).fetchone()
        return _row_to_dict(row)

    def upsert(self, key: str, value: str, *, shared: bool = False) -> None:
        self._connection.execute(
            """
            INSERT INTO kv_store (key, shared, value)
            VALUES (?, ?, ?)
            ON CONFLICT (key, shared) DO UPDATE
            SET value = excluded.value,
                updated_at = CURRENT_TIMESTAMP
            """,
            (key, int(shared), value),
        )
        self._connection.commit()
