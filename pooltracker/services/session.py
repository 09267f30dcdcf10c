from __future__ import annotations

import sqlite3
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from pooltracker.db.database import get_connection
from pooltracker.domain.schedule import get_variant
from pooltracker.services.audit_log import AuditLogService
from pooltracker.services.storage import SqliteKeyValueStore
from pooltracker.services.tournament_store import TournamentStore
from pooltracker.settings import get_database_path, get_share_origin, get_variant_name


@dataclass
class TrackerSession:
    connection: sqlite3.Connection
    tournaments: TournamentStore
    audit: AuditLogService

    def share_link(self) -> str:
        return self.tournaments.share_link(get_share_origin())

    def close(self) -> None:
        self.connection.close()


def open_session(
    db_path: str | Path | None = None,
    *,
    variant: str | None = None,
    confirm: Callable[[str], bool] | None = None,
) -> TrackerSession:
    """Open the database and build a store for the configured variant.

    The returned store is still loading; call ``tournaments.load()``.
    """
    config = get_variant(variant or get_variant_name())
    connection = get_connection(db_path or get_database_path())
    audit = AuditLogService(connection)
    options = {"confirm": confirm} if confirm is not None else {}
    tournaments = TournamentStore(
        SqliteKeyValueStore(connection),
        config,
        audit=audit,
        **options,
    )
    return TrackerSession(connection=connection, tournaments=tournaments, audit=audit)
