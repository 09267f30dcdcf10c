"""In-memory tournament state mirrored to a key-value store.

The store starts in the ``loading`` state. :meth:`TournamentStore.load`
resolves the tournament (shared slot, then personal slot, then a fresh
schedule) and moves it to ``ready``. From then on every mutation is applied
synchronously and immediately written to both the personal slot and the
shared slot of the tournament id. Writes are best effort: a failure only
changes :attr:`TournamentStore.status`.

The status text describes the last action and stays until the next one
replaces it. Callers that show it briefly call
:meth:`TournamentStore.clear_status` once it has been displayed.
"""

from __future__ import annotations

import logging
import secrets
import sqlite3
import string
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable

from pooltracker.domain import standings
from pooltracker.domain.models import Game, Tournament
from pooltracker.domain.schedule import ScheduleConfig, default_player_names, generate_schedule
from pooltracker.domain.standings import Standing
from pooltracker.exceptions import SnapshotError, StorageError, TournamentNotReadyError
from pooltracker.services import audit_log
from pooltracker.services.audit_log import AuditLogService
from pooltracker.services.export_service import ExportService
from pooltracker.services.snapshot import (
    parse_snapshot,
    read_snapshot_file,
    snapshot_filename,
    to_export_text,
    to_saved_record,
)
from pooltracker.services.storage import PERSONAL_KEY, KeyValueStore, shared_key

logger = logging.getLogger(__name__)

LOADING = "loading"
READY = "ready"

RESET_PROMPT = "Reset entire tournament?"

STATUS_LOADED_SHARED = "Loaded shared tournament"
STATUS_LOADED_SAVED = "Loaded saved tournament"
STATUS_CREATED = "New tournament created"
STATUS_SAVED = "✓ Saved"
STATUS_SAVE_ERROR = "Error saving"
STATUS_RESET = "Tournament reset"
STATUS_IMPORTED = "✓ Imported"
STATUS_IMPORT_ERROR = "Import failed"
STATUS_EXPORTED = "✓ Exported"
STATUS_LINK = "✓ Link ready"

ID_ALPHABET = string.digits + string.ascii_lowercase


def generate_tournament_id(now: datetime) -> str:
    """Return an id like ``pool-1718000000000-k3j9x0a``."""
    millis = int(now.timestamp() * 1000)
    suffix = "".join(secrets.choice(ID_ALPHABET) for _ in range(7))
    return f"pool-{millis}-{suffix}"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _always_confirm(message: str) -> bool:
    return True


class TournamentStore:
    def __init__(
        self,
        store: KeyValueStore,
        config: ScheduleConfig,
        *,
        players: list[str] | None = None,
        clock: Callable[[], datetime] = _utcnow,
        id_factory: Callable[[], str] | None = None,
        confirm: Callable[[str], bool] = _always_confirm,
        audit: AuditLogService | None = None,
        exporter: ExportService | None = None,
    ) -> None:
        config.validate()
        self._store = store
        self._config = config
        self._default_players = list(players) if players is not None else default_player_names(config.player_count)
        self._clock = clock
        self._id_factory = id_factory or (lambda: generate_tournament_id(self._clock()))
        self._confirm = confirm
        self._audit = audit
        self._exporter = exporter or ExportService()
        self._tournament: Tournament | None = None
        self.state = LOADING
        self.status = ""

    # ------------------------------------------------------------------
    # State

    @property
    def config(self) -> ScheduleConfig:
        return self._config

    @property
    def tournament(self) -> Tournament:
        self._require_ready()
        return self._tournament

    @property
    def tournament_id(self) -> str | None:
        return self._tournament.id if self._tournament else None

    @property
    def players(self) -> list[str]:
        return list(self._tournament.players) if self._tournament else list(self._default_players)

    @property
    def games(self) -> list[Game]:
        return list(self._tournament.games) if self._tournament else []

    @property
    def last_updated(self) -> datetime | None:
        return self._tournament.last_updated if self._tournament else None

    # ------------------------------------------------------------------
    # Loading

    def load(self, tournament_id: str | None = None) -> Tournament:
        """Resolve the tournament to work on and make the store ready.

        With ``tournament_id`` the shared slot is tried first. A missing or
        unreadable record falls back to the personal slot; if that is also
        missing a new tournament is created. A record that cannot be parsed
        always ends in a new tournament.
        """
        try:
            tournament, status = self._load_existing(tournament_id)
        except SnapshotError as exc:
            logger.warning("Stored tournament is corrupt, starting a new one: %s", exc)
            self._record_event(audit_log.ERROR, f"Stored tournament unreadable: {exc}", level="warning")
            tournament, status = None, None

        if tournament is None:
            tournament = self._new_tournament(self.players)
            status = STATUS_CREATED
            self._record_event(audit_log.NEW_TOURNAMENT, status, tournament_id=tournament.id)
        else:
            self._record_event(audit_log.LOAD_TOURNAMENT, status, tournament_id=tournament.id)

        logger.info("%s: %s", status, tournament.id)
        self._tournament = tournament
        self.state = READY
        self._changed(status)
        return tournament

    def _load_existing(self, tournament_id: str | None) -> tuple[Tournament | None, str | None]:
        if tournament_id:
            stored = self._read(shared_key(tournament_id), shared=True)
            if stored is not None:
                return parse_snapshot(stored, tournament_id=tournament_id), STATUS_LOADED_SHARED
            logger.info("Shared tournament %s not found, trying personal slot", tournament_id)

        stored = self._read(PERSONAL_KEY)
        if stored is not None:
            return parse_snapshot(stored), STATUS_LOADED_SAVED
        return None, None

    def _read(self, key: str, shared: bool = False) -> str | None:
        try:
            stored = self._store.get(key, shared=shared)
        except StorageError as exc:
            logger.warning("Could not read %s: %s", key, exc)
            return None
        return stored.value if stored is not None else None

    def _new_tournament(self, players: list[str]) -> Tournament:
        return Tournament(
            id=self._id_factory(),
            players=list(players),
            games=generate_schedule(self._config),
        )

    # ------------------------------------------------------------------
    # Mutations

    def record_winner(self, game_id: int, player_index: int | None) -> None:
        """Set the winner of ``game_id``; ``None`` clears it."""
        tournament = self.tournament
        tournament.games = [
            game.with_winner(player_index) if game.id == game_id else game
            for game in tournament.games
        ]
        self._changed()

    def rename_player(self, index: int, name: str) -> None:
        tournament = self.tournament
        tournament.players[index] = name
        self._changed()

    def reset(self) -> bool:
        """Start over with a new id and an empty schedule, if confirmed."""
        previous = self.tournament
        if not self._confirm(RESET_PROMPT):
            return False

        self._tournament = self._new_tournament(previous.players)
        logger.info("Tournament %s reset as %s", previous.id, self._tournament.id)
        self._record_event(
            audit_log.RESET_TOURNAMENT,
            STATUS_RESET,
            tournament_id=self._tournament.id,
            context={"previous_id": previous.id},
        )
        self._changed(STATUS_RESET)
        return True

    def import_snapshot(self, text: str | bytes) -> bool:
        """Replace the whole tournament with the snapshot in ``text``.

        Returns False and keeps the current state if the text is not a
        snapshot. Field values are not validated.
        """
        self._require_ready()
        try:
            tournament = parse_snapshot(text)
        except SnapshotError as exc:
            return self._import_failed(exc)
        return self._replace(tournament)

    def import_file(self, path: str | Path) -> bool:
        self._require_ready()
        try:
            tournament = read_snapshot_file(path)
        except SnapshotError as exc:
            return self._import_failed(exc)
        return self._replace(tournament, source=str(path))

    def _replace(self, tournament: Tournament, source: str | None = None) -> bool:
        self._tournament = tournament
        logger.info("Imported tournament %s", tournament.id)
        self._record_event(
            audit_log.IMPORT_FILE,
            STATUS_IMPORTED,
            tournament_id=tournament.id,
            context={"source": source} if source else None,
        )
        self._changed(STATUS_IMPORTED)
        return True

    def _import_failed(self, exc: SnapshotError) -> bool:
        logger.warning("Import failed: %s", exc)
        self.status = STATUS_IMPORT_ERROR
        self._record_event(audit_log.ERROR, f"Import failed: {exc}", level="warning")
        return False

    # ------------------------------------------------------------------
    # Persistence

    def auto_save(self) -> bool:
        """Write the tournament to the personal and the shared slot.

        Nothing is written before the store is ready or while the tournament
        has no games or no id. Returns whether both writes succeeded.
        """
        tournament = self._tournament
        if self.state != READY or tournament is None or not tournament.games or not tournament.id:
            return False

        saved_at = self._clock()
        record = to_saved_record(tournament, saved_at)
        try:
            self._store.set(PERSONAL_KEY, record)
            self._store.set(shared_key(tournament.id), record, shared=True)
        except StorageError as exc:
            logger.warning("Auto-save of %s failed: %s", tournament.id, exc)
            self.status = STATUS_SAVE_ERROR
            self._record_event(audit_log.ERROR, f"Save failed: {exc}", tournament_id=tournament.id, level="error")
            return False

        tournament.last_updated = saved_at
        return True

    def clear_status(self) -> None:
        self.status = ""

    def _changed(self, status: str = STATUS_SAVED) -> None:
        # auto_save replaces the status when the write fails.
        self.status = status
        self.auto_save()

    # ------------------------------------------------------------------
    # Export and sharing

    def export(self) -> str:
        """Return the snapshot JSON of the current tournament."""
        return to_export_text(self.tournament, exported_at=self._clock())

    def export_to_file(self, directory: str | Path) -> Path:
        tournament = self.tournament
        path = Path(directory) / snapshot_filename(str(tournament.id))
        path.write_text(self.export(), encoding="utf-8")
        self._record_event(
            audit_log.EXPORT_FILE,
            f"Exported snapshot to {path.name}",
            tournament_id=tournament.id,
            context={"path": str(path)},
        )
        self.status = STATUS_EXPORTED
        return path

    def export_standings(self, path: str | Path) -> Path:
        tournament = self.tournament
        output_path = self._exporter.export_standings_xlsx(path, tournament)
        self._record_event(
            audit_log.EXPORT_FILE,
            f"Exported standings to {output_path.name}",
            tournament_id=tournament.id,
            context={"path": str(output_path)},
        )
        self.status = STATUS_EXPORTED
        return output_path

    def share_link(self, origin: str) -> str:
        """Return the link other viewers open to load this tournament."""
        link = f"{origin.rstrip('/')}?tournament={self.tournament.id}"
        self.status = STATUS_LINK
        return link

    # ------------------------------------------------------------------
    # Queries

    def win_count(self, player_index: int) -> int:
        return standings.win_count(self.games, player_index)

    def day_games(self, day: int) -> list[Game]:
        return standings.day_games(self.games, day)

    def leaderboard(self) -> list[Standing]:
        return standings.leaderboard(self.players, self.games)

    @property
    def total_games(self) -> int:
        return len(self.games)

    @property
    def completed_games(self) -> int:
        return standings.completed_games(self.games)

    # ------------------------------------------------------------------

    def _require_ready(self) -> None:
        if self.state != READY or self._tournament is None:
            raise TournamentNotReadyError("Tournament is still loading.")

    def _record_event(
        self,
        event_type: str,
        message: str,
        *,
        tournament_id: str | None = None,
        level: str = "info",
        context: dict[str, object] | None = None,
    ) -> None:
        if self._audit is None:
            return
        try:
            self._audit.record(
                event_type,
                message,
                tournament_id=tournament_id,
                level=level,
                context=context,
            )
        except sqlite3.Error as exc:
            logger.warning("Audit log write failed for %s: %s", event_type, exc)
