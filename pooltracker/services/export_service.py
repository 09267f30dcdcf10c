from __future__ import annotations

import json
from datetime import date
from pathlib import Path
from typing import Iterable, Sequence

from openpyxl import Workbook
from openpyxl.styles import Alignment, Font, PatternFill
from openpyxl.utils import get_column_letter
from openpyxl.worksheet.worksheet import Worksheet

from pooltracker.domain.models import Tournament
from pooltracker.domain.standings import completed_games, leaderboard

HEADER_FILL = PatternFill(start_color="14532D", end_color="14532D", fill_type="solid")
MAX_COLUMN_WIDTH = 60


class ExportService:
    def export_standings_xlsx(self, path: str | Path, tournament: Tournament) -> Path:
        """Write the leaderboard and the full game list to an ``.xlsx`` workbook."""
        output_path = Path(path)
        workbook = Workbook()

        standings_sheet = workbook.active
        standings_sheet.title = "Standings"
        played = completed_games(tournament.games)
        self._write_table(
            standings_sheet,
            header_lines=[
                "Pool Tournament",
                f"Tournament: {tournament.id}",
                f"Date: {self.format_date_label()}",
                f"Games played: {played} / {len(tournament.games)}",
            ],
            columns=["Place", "Player", "Wins"],
            rows=[
                [place, standing.name, standing.wins]
                for place, standing in enumerate(
                    leaderboard(tournament.players, tournament.games), start=1
                )
            ],
        )

        games_sheet = workbook.create_sheet("Games")
        self._write_table(
            games_sheet,
            header_lines=[],
            columns=["Game", "Day", "Order", "Winner"],
            rows=[
                [
                    game.id,
                    game.day,
                    self._order_label(tournament.players, game.order),
                    None if game.winner is None else self._player_name(tournament.players, game.winner),
                ]
                for game in tournament.games
            ],
        )

        workbook.save(output_path)
        return output_path

    def _write_table(
        self,
        sheet: Worksheet,
        header_lines: Iterable[str],
        columns: Sequence[str],
        rows: Sequence[Sequence[object]],
    ) -> None:
        current_row = 1
        for line in header_lines:
            sheet.cell(row=current_row, column=1, value=line)
            current_row += 1

        header_row = current_row
        for column, header_text in enumerate(columns, start=1):
            cell = sheet.cell(row=header_row, column=column, value=header_text)
            cell.font = Font(bold=True, color="FFFFFF")
            cell.alignment = Alignment(horizontal="center", vertical="center")
            cell.fill = HEADER_FILL

        alignment = Alignment(horizontal="left", vertical="top")
        for row in rows:
            current_row += 1
            for column, value in enumerate(row, start=1):
                cell = sheet.cell(row=current_row, column=column, value=_cell_value(value))
                cell.alignment = alignment

        sheet.freeze_panes = f"A{header_row + 1}"

        for column_index, header_text in enumerate(columns, start=1):
            widest = max(
                [len(str(header_text))]
                + [
                    len(str(row[column_index - 1]))
                    for row in rows
                    if len(row) >= column_index and row[column_index - 1] is not None
                ]
            )
            sheet.column_dimensions[get_column_letter(column_index)].width = min(widest + 2, MAX_COLUMN_WIDTH)

    @classmethod
    def _order_label(cls, players: Sequence[str], order: object) -> str | None:
        if order is None:
            return None
        if not isinstance(order, (list, tuple)):
            return str(order)
        return " → ".join(cls._player_name(players, index) for index in order)

    @staticmethod
    def _player_name(players: Sequence[str], index: object) -> str:
        # Imported snapshots may reference seats that have no player.
        if isinstance(index, int) and 0 <= index < len(players):
            return str(players[index])
        return f"#{index}"

    @staticmethod
    def format_date_label() -> str:
        return date.today().strftime("%d.%m.%Y")


def _cell_value(value: object) -> object:
    # Imported games can carry JSON values a cell cannot hold.
    if value is None or isinstance(value, (bool, int, float, str)):
        return value
    return json.dumps(value, ensure_ascii=False)
