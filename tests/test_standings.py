from pooltracker.domain.models import Game
from pooltracker.domain.standings import completed_games, day_games, leaderboard, win_count


def _games(*winners):
    return [
        Game(id=index, day=(index - 1) // 2 + 1, order=(0, 1, 2), winner=winner)
        for index, winner in enumerate(winners, start=1)
    ]


def test_win_count_matches_winner_tally() -> None:
    games = _games(0, 2, 2, None, 1, 2)

    assert [win_count(games, index) for index in range(3)] == [1, 1, 3]
    assert win_count(games, 7) == 0


def test_completed_games_ignores_unplayed() -> None:
    assert completed_games(_games(None, 0, None, 1)) == 2
    assert completed_games([]) == 0


def test_day_games_filters_by_day() -> None:
    games = _games(None, None, None, None, None)

    assert [game.id for game in day_games(games, 2)] == [3, 4]
    assert day_games(games, 9) == []


def test_leaderboard_sorts_by_wins_and_keeps_ties_in_player_order() -> None:
    games = _games(1, 2, 1, 2, 0)

    board = leaderboard(["Jonte", "Sammy", "Gitai"], games)

    assert [(standing.name, standing.wins) for standing in board] == [
        ("Sammy", 2),
        ("Gitai", 2),
        ("Jonte", 1),
    ]
    assert [standing.index for standing in board] == [1, 2, 0]


def test_leaderboard_with_no_results() -> None:
    board = leaderboard(["A", "B"], _games(None, None))

    assert [standing.wins for standing in board] == [0, 0]
    assert [standing.name for standing in board] == ["A", "B"]
