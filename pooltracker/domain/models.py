from __future__ import annotations

from dataclasses import dataclass, field, replace
from datetime import datetime
from typing import Any


@dataclass(frozen=True)
class Game:
    """One scheduled game: who breaks first, second and so on, and who won."""

    id: int
    day: int
    order: tuple[int, ...]
    winner: int | None = None

    def with_winner(self, winner: int | None) -> "Game":
        return replace(self, winner=winner)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "day": self.day,
            "order": list(self.order) if isinstance(self.order, tuple) else self.order,
            "winner": self.winner,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "Game":
        # Values are taken as stored; imported files are not validated.
        order = data.get("order")
        return cls(
            id=data.get("id"),
            day=data.get("day"),
            order=tuple(order) if isinstance(order, (list, tuple)) else order,
            winner=data.get("winner"),
        )


@dataclass
class Tournament:
    id: str
    players: list[str]
    games: list[Game] = field(default_factory=list)
    last_updated: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "players": list(self.players),
            "games": [game.to_dict() for game in self.games],
            "tournamentId": self.id,
        }
