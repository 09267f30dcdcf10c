"""Database schema definitions."""

from __future__ import annotations

import sqlite3

KV_STORE_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS kv_store (
    key TEXT NOT NULL,
    shared INTEGER NOT NULL DEFAULT 0,
    value TEXT NOT NULL,
    updated_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
    PRIMARY KEY (key, shared),
    CHECK (shared IN (0, 1))
);
"""

AUDIT_LOG_TABLE_SQL = """
CREATE TABLE IF NOT EXISTS audit_log (
    id INTEGER PRIMARY KEY AUTOINCREMENT,
    event_type TEXT NOT NULL,
    tournament_id TEXT,
    message TEXT,
    level TEXT NOT NULL DEFAULT 'info',
    context_json TEXT,
    created_at TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP
);
"""

AUDIT_LOG_INDEXES_SQL = [
    "CREATE INDEX IF NOT EXISTS idx_audit_log_event_type ON audit_log (event_type);",
    "CREATE INDEX IF NOT EXISTS idx_audit_log_tournament ON audit_log (tournament_id);",
]


SCHEMA_SQL = [
    KV_STORE_TABLE_SQL,
    AUDIT_LOG_TABLE_SQL,
    *AUDIT_LOG_INDEXES_SQL,
]


def initialize_schema(connection: sqlite3.Connection) -> None:
    """Initialize database schema if needed."""
    with connection:
        for statement in SCHEMA_SQL:
            connection.execute(statement)
