"""Round-robin schedule generation.

A schedule is a flat list of games, ``games_per_day`` for each of
``total_days`` days. Every game carries a rotation: the order in which the
players take their turns. Rotations are drawn from a fixed table so that
over the tournament each player breaks first, second, ... equally often.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, Mapping, Sequence

from pooltracker.domain.models import Game

CYCLIC = "cyclic"
BALANCED = "balanced"
ROTATION_SCHEMES = (CYCLIC, BALANCED)

SCOPE_DAY = "day"
SCOPE_TOURNAMENT = "tournament"
ROTATION_SCOPES = (SCOPE_DAY, SCOPE_TOURNAMENT)

DEFAULT_PLAYER_NAMES = ("Jonte", "Sammy", "Gitai")


@dataclass(frozen=True)
class ScheduleConfig:
    player_count: int
    total_days: int
    games_per_day: int
    rotation_scheme: str = CYCLIC
    rotation_scope: str = SCOPE_DAY

    @property
    def total_games(self) -> int:
        return self.total_days * self.games_per_day

    def validate(self) -> None:
        if self.player_count < 2:
            raise ValueError("A tournament needs at least two players.")
        if self.total_days < 1:
            raise ValueError("total_days must be a positive integer.")
        if self.games_per_day < 1:
            raise ValueError("games_per_day must be a positive integer.")
        if self.rotation_scheme not in ROTATION_SCHEMES:
            raise ValueError(f"Unknown rotation scheme: {self.rotation_scheme}")
        if self.rotation_scope not in ROTATION_SCOPES:
            raise ValueError(f"Unknown rotation scope: {self.rotation_scope}")


VARIANTS: Mapping[str, ScheduleConfig] = {
    "three-player": ScheduleConfig(
        player_count=3,
        total_days=4,
        games_per_day=7,
        rotation_scheme=CYCLIC,
        rotation_scope=SCOPE_DAY,
    ),
    "four-player": ScheduleConfig(
        player_count=4,
        total_days=4,
        games_per_day=7,
        rotation_scheme=BALANCED,
        rotation_scope=SCOPE_TOURNAMENT,
    ),
    "four-player-long": ScheduleConfig(
        player_count=4,
        total_days=4,
        games_per_day=10,
        rotation_scheme=BALANCED,
        rotation_scope=SCOPE_TOURNAMENT,
    ),
}


def get_variant(name: str) -> ScheduleConfig:
    try:
        return VARIANTS[name]
    except KeyError:
        known = ", ".join(sorted(VARIANTS))
        raise ValueError(f"Unknown tournament variant '{name}'. Known variants: {known}.") from None


def default_player_names(player_count: int) -> list[str]:
    names = list(DEFAULT_PLAYER_NAMES[:player_count])
    names.extend(f"Player {index + 1}" for index in range(len(names), player_count))
    return names


def cyclic_rotations(player_count: int) -> list[tuple[int, ...]]:
    """Return the ``player_count`` cyclic shifts of ``0..player_count-1``."""
    seats = list(range(player_count))
    return [tuple(seats[shift:] + seats[:shift]) for shift in range(player_count)]


def balanced_rotations(player_count: int) -> list[tuple[int, ...]]:
    """Return ``n * (n - 1)`` rotations where every player holds every seat equally often.

    For each starting player the remaining players follow in each of their
    cyclic orders. Within the block of one starter every other player visits
    seats 2..n once, so across the whole table each player sits in each seat
    exactly ``n - 1`` times.
    """
    rotations: list[tuple[int, ...]] = []
    for start in range(player_count):
        rest = [(start + offset) % player_count for offset in range(1, player_count)]
        for shift in range(len(rest)):
            rotations.append((start, *rest[shift:], *rest[:shift]))
    return rotations


def rotation_table(config: ScheduleConfig) -> list[tuple[int, ...]]:
    if config.rotation_scheme == BALANCED:
        return balanced_rotations(config.player_count)
    return cyclic_rotations(config.player_count)


def generate_schedule(config: ScheduleConfig) -> list[Game]:
    """Build the full list of games for ``config``, winners unset."""
    config.validate()
    rotations = rotation_table(config)

    games: list[Game] = []
    game_number = 1
    for day in range(1, config.total_days + 1):
        for game_in_day in range(config.games_per_day):
            if config.rotation_scope == SCOPE_TOURNAMENT:
                rotation_index = (game_number - 1) % len(rotations)
            else:
                rotation_index = game_in_day % len(rotations)
            games.append(Game(id=game_number, day=day, order=rotations[rotation_index]))
            game_number += 1
    return games


def turn_order_distribution(games: Iterable[Game], player_count: int) -> list[list[int]]:
    """Count how often each player took each seat.

    ``result[player][seat]`` is the number of games in which ``player`` played
    at position ``seat`` of the turn order. Indices outside ``player_count``
    are ignored.
    """
    counts = [[0] * player_count for _ in range(player_count)]
    for game in games:
        order: Sequence[int] = game.order if isinstance(game.order, (list, tuple)) else ()
        for seat, player in enumerate(order):
            if isinstance(player, int) and 0 <= player < player_count and seat < player_count:
                counts[player][seat] += 1
    return counts
