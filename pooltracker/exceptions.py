"""Exceptions raised by the tournament tracker."""

from __future__ import annotations


class PoolTrackerError(Exception):
    """Base class for tracker errors."""


class StorageError(PoolTrackerError):
    """Key-value store read or write failed."""


class SnapshotError(PoolTrackerError):
    """Snapshot text could not be parsed into tournament state."""


class TournamentNotReadyError(PoolTrackerError):
    """A mutation was requested before the tournament finished loading."""
