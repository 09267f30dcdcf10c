"""JSON snapshots of a tournament, used for saves, exports and imports."""

from __future__ import annotations

import json
from datetime import datetime
from pathlib import Path
from typing import Any

from pooltracker.domain.models import Game, Tournament
from pooltracker.exceptions import SnapshotError


def snapshot_filename(tournament_id: str) -> str:
    return f"pool-tournament-{tournament_id}.json"


def to_saved_record(tournament: Tournament, saved_at: datetime) -> str:
    data = tournament.to_dict()
    data["lastUpdated"] = saved_at.isoformat()
    return json.dumps(data, ensure_ascii=False)


def to_export_text(tournament: Tournament, exported_at: datetime | None = None) -> str:
    data = tournament.to_dict()
    if exported_at is not None:
        data["exportDate"] = exported_at.isoformat()
    return json.dumps(data, ensure_ascii=False, indent=2)


def parse_snapshot(text: str | bytes, *, tournament_id: str | None = None) -> Tournament:
    """Parse snapshot JSON into a :class:`Tournament`.

    Only the outer shape is checked: a JSON object with a ``players`` list
    and a ``games`` list of objects. Field values are accepted as they are.
    ``tournament_id`` overrides the id stored in the snapshot.
    """
    try:
        data = json.loads(text)
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Snapshot is not valid JSON: {exc}") from exc
    if not isinstance(data, dict):
        raise SnapshotError("Snapshot must be a JSON object.")

    players = data.get("players")
    games = data.get("games")
    if not isinstance(players, list):
        raise SnapshotError("Snapshot has no 'players' list.")
    if not isinstance(games, list) or not all(isinstance(item, dict) for item in games):
        raise SnapshotError("Snapshot has no 'games' list.")

    return Tournament(
        id=tournament_id if tournament_id is not None else data.get("tournamentId"),
        players=players,
        games=[Game.from_dict(item) for item in games],
        last_updated=_parse_timestamp(data.get("lastUpdated")),
    )


def read_snapshot_file(path: str | Path) -> Tournament:
    try:
        text = Path(path).read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as exc:
        raise SnapshotError(f"Cannot read snapshot file {path}: {exc}") from exc
    return parse_snapshot(text)


def _parse_timestamp(value: Any) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError:
        return None
