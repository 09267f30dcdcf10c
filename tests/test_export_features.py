from pathlib import Path

from openpyxl import load_workbook

from pooltracker.domain.models import Game, Tournament
from pooltracker.domain.schedule import get_variant
from pooltracker.services.export_service import ExportService
from pooltracker.services.storage import MemoryKeyValueStore
from pooltracker.services.tournament_store import TournamentStore
from tests.helpers.fakes import SequenceIds, StepClock


def _tournament() -> Tournament:
    return Tournament(
        id="pool-42",
        players=["Jonte", "Sammy", "Gitai"],
        games=[
            Game(id=1, day=1, order=(0, 1, 2), winner=1),
            Game(id=2, day=1, order=(1, 2, 0), winner=1),
            Game(id=3, day=1, order=(2, 0, 1), winner=0),
            Game(id=4, day=2, order=(0, 1, 2), winner=None),
            Game(id=5, day=2, order=(1, 2, 7), winner=7),
        ],
    )


def test_standings_workbook_lists_leaderboard(tmp_path: Path) -> None:
    path = ExportService().export_standings_xlsx(tmp_path / "standings.xlsx", _tournament())

    workbook = load_workbook(path)
    sheet = workbook["Standings"]
    assert sheet.cell(row=2, column=1).value == "Tournament: pool-42"
    assert sheet.cell(row=4, column=1).value == "Games played: 4 / 5"
    assert [sheet.cell(row=5, column=column).value for column in (1, 2, 3)] == ["Place", "Player", "Wins"]
    assert [sheet.cell(row=6, column=column).value for column in (1, 2, 3)] == [1, "Sammy", 2]
    assert [sheet.cell(row=8, column=column).value for column in (1, 2, 3)] == [3, "Gitai", 0]


def test_games_sheet_names_players_and_unknown_seats(tmp_path: Path) -> None:
    path = ExportService().export_standings_xlsx(tmp_path / "standings.xlsx", _tournament())

    sheet = load_workbook(path)["Games"]
    assert [sheet.cell(row=1, column=column).value for column in range(1, 5)] == [
        "Game",
        "Day",
        "Order",
        "Winner",
    ]
    assert sheet.cell(row=2, column=3).value == "Jonte → Sammy → Gitai"
    assert sheet.cell(row=2, column=4).value == "Sammy"
    assert sheet.cell(row=5, column=4).value is None
    assert sheet.cell(row=6, column=4).value == "#7"
    assert sheet.max_row == 6


def test_store_exports_standings(tmp_path: Path) -> None:
    store = TournamentStore(
        MemoryKeyValueStore(),
        get_variant("four-player"),
        clock=StepClock(),
        id_factory=SequenceIds(),
    )
    store.load()
    store.record_winner(1, 3)

    path = store.export_standings(tmp_path / "out.xlsx")

    sheet = load_workbook(path)["Standings"]
    assert sheet.cell(row=6, column=2).value == "Player 4"
    assert load_workbook(path)["Games"].max_row == 29


def test_games_sheet_writes_unchecked_orders_as_text(tmp_path: Path) -> None:
    tournament = Tournament(
        id="pool-odd",
        players=["Jonte", "Sammy", "Gitai"],
        games=[
            Game(id=None, day=1, order=None, winner=None),
            Game(id=2, day=1, order="012", winner=0),
            Game(id=3, day=[2], order=5, winner=None),
        ],
    )

    path = ExportService().export_standings_xlsx(tmp_path / "odd.xlsx", tournament)

    sheet = load_workbook(path)["Games"]
    assert [sheet.cell(row=row, column=3).value for row in (2, 3, 4)] == [None, "012", "5"]
    assert sheet.cell(row=2, column=1).value is None
    assert sheet.cell(row=3, column=4).value == "Jonte"
    assert sheet.cell(row=4, column=2).value == "[2]"
