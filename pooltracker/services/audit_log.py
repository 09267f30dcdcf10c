from __future__ import annotations

import json
import sqlite3
from dataclasses import dataclass
from pathlib import Path

LOAD_TOURNAMENT = "LOAD_TOURNAMENT"
NEW_TOURNAMENT = "NEW_TOURNAMENT"
RESET_TOURNAMENT = "RESET_TOURNAMENT"
IMPORT_FILE = "IMPORT_FILE"
EXPORT_FILE = "EXPORT_FILE"
ERROR = "ERROR"

EVENT_TYPES = [
    LOAD_TOURNAMENT,
    NEW_TOURNAMENT,
    RESET_TOURNAMENT,
    IMPORT_FILE,
    EXPORT_FILE,
    ERROR,
]


@dataclass(frozen=True)
class AuditEvent:
    id: int
    event_type: str
    tournament_id: str | None
    message: str
    level: str
    context: dict[str, object]
    created_at: str


class AuditLogService:
    """Persistent history of what happened to tournaments on this machine."""

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    def record(
        self,
        event_type: str,
        message: str,
        *,
        tournament_id: str | None = None,
        level: str = "info",
        context: dict[str, object] | None = None,
    ) -> int:
        with self._connection:
            cursor = self._connection.execute(
                """
                INSERT INTO audit_log (event_type, tournament_id, message, level, context_json)
                VALUES (?, ?, ?, ?, ?)
                """,
                (
                    event_type,
                    tournament_id,
                    message,
                    level,
                    json.dumps(context or {}, ensure_ascii=False),
                ),
            )
        return int(cursor.lastrowid)

    def events(
        self,
        *,
        event_type: str | None = None,
        tournament_id: str | None = None,
    ) -> list[AuditEvent]:
        """Return matching events, newest first."""
        clauses: list[str] = []
        params: list[object] = []
        if event_type:
            clauses.append("event_type = ?")
            params.append(event_type)
        if tournament_id:
            clauses.append("tournament_id = ?")
            params.append(tournament_id)

        where_sql = ""
        if clauses:
            where_sql = "WHERE " + " AND ".join(clauses)

        rows = self._connection.execute(
            f"SELECT * FROM audit_log {where_sql} ORDER BY id DESC",
            params,
        ).fetchall()
        return [_to_event(row) for row in rows]

    def export_txt(self, path: str | Path, *, tournament_id: str | None = None) -> Path:
        output_path = Path(path)
        lines = []
        for event in self.events(tournament_id=tournament_id):
            lines.append(
                f"[{event.created_at}] {event.level.upper()} {event.event_type}"
                f" {event.tournament_id or '-'} | {event.message}"
            )
        output_path.write_text("\n".join(lines), encoding="utf-8")
        return output_path


def _to_event(row: sqlite3.Row) -> AuditEvent:
    try:
        context = json.loads(row["context_json"] or "{}")
    except json.JSONDecodeError:
        context = {}

    return AuditEvent(
        id=int(row["id"]),
        event_type=str(row["event_type"]),
        tournament_id=row["tournament_id"],
        message=str(row["message"] or ""),
        level=str(row["level"] or "info"),
        context=context if isinstance(context, dict) else {},
        created_at=str(row["created_at"]),
    )
