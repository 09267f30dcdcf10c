from __future__ import annotations

from dataclasses import dataclass
from typing import Sequence

from pooltracker.domain.models import Game


@dataclass(frozen=True)
class Standing:
    index: int
    name: str
    wins: int


def win_count(games: Sequence[Game], player_index: int) -> int:
    """Return the number of games won by ``player_index``."""
    return sum(1 for game in games if game.winner == player_index)


def day_games(games: Sequence[Game], day: int) -> list[Game]:
    return [game for game in games if game.day == day]


def completed_games(games: Sequence[Game]) -> int:
    return sum(1 for game in games if game.winner is not None)


def leaderboard(players: Sequence[str], games: Sequence[Game]) -> list[Standing]:
    """Players ordered by wins, most first; ties keep player order."""
    standings = [
        Standing(index=index, name=name, wins=win_count(games, index))
        for index, name in enumerate(players)
    ]
    standings.sort(key=lambda standing: -standing.wins)
    return standings
