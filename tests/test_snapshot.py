import json
from datetime import datetime, timezone
from pathlib import Path

import pytest

from pooltracker.domain.models import Game, Tournament
from pooltracker.exceptions import SnapshotError
from pooltracker.services.snapshot import (
    parse_snapshot,
    read_snapshot_file,
    snapshot_filename,
    to_export_text,
    to_saved_record,
)


def _tournament() -> Tournament:
    return Tournament(
        id="pool-1700000000000-abc1234",
        players=["Jonte", "Sammy", "Gitai"],
        games=[
            Game(id=1, day=1, order=(0, 1, 2), winner=2),
            Game(id=2, day=1, order=(1, 2, 0), winner=None),
        ],
    )


def test_export_text_uses_snapshot_field_names() -> None:
    exported_at = datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)
    data = json.loads(to_export_text(_tournament(), exported_at=exported_at))

    assert data == {
        "players": ["Jonte", "Sammy", "Gitai"],
        "games": [
            {"id": 1, "day": 1, "order": [0, 1, 2], "winner": 2},
            {"id": 2, "day": 1, "order": [1, 2, 0], "winner": None},
        ],
        "tournamentId": "pool-1700000000000-abc1234",
        "exportDate": "2025-03-01T12:00:00+00:00",
    }


def test_saved_record_carries_last_updated() -> None:
    saved_at = datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)
    record = to_saved_record(_tournament(), saved_at)

    parsed = parse_snapshot(record)
    assert parsed.last_updated == saved_at
    assert json.loads(record)["lastUpdated"] == "2025-03-01T12:30:00+00:00"


def test_parse_accepts_browser_timestamps() -> None:
    text = json.dumps(
        {"players": [], "games": [], "tournamentId": "x", "lastUpdated": "2025-03-01T12:30:00.000Z"}
    )
    assert parse_snapshot(text).last_updated == datetime(2025, 3, 1, 12, 30, tzinfo=timezone.utc)


def test_parse_keeps_unvalidated_values() -> None:
    text = json.dumps(
        {
            "players": ["Only"],
            "games": [{"id": 5, "day": 99, "order": [7, 8], "winner": 42}],
            "tournamentId": "imported",
        }
    )

    tournament = parse_snapshot(text)

    assert tournament.id == "imported"
    assert tournament.games == [Game(id=5, day=99, order=(7, 8), winner=42)]


def test_parse_overrides_id() -> None:
    text = to_export_text(_tournament())
    assert parse_snapshot(text, tournament_id="shared-id").id == "shared-id"


@pytest.mark.parametrize(
    "text",
    [
        "not json",
        "[1, 2, 3]",
        '{"games": []}',
        '{"players": [], "games": "none"}',
        '{"players": [], "games": [1, 2]}',
    ],
)
def test_parse_rejects_malformed_snapshots(text: str) -> None:
    with pytest.raises(SnapshotError):
        parse_snapshot(text)


def test_read_snapshot_file(tmp_path: Path) -> None:
    path = tmp_path / snapshot_filename("pool-1")
    path.write_text(to_export_text(_tournament()), encoding="utf-8")

    assert read_snapshot_file(path).players == ["Jonte", "Sammy", "Gitai"]
    assert path.name == "pool-tournament-pool-1.json"

    with pytest.raises(SnapshotError):
        read_snapshot_file(tmp_path / "missing.json")
