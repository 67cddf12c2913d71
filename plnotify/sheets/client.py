from __future__ import annotations

import logging
from typing import Iterable, Protocol

import gspread
from google.oauth2.service_account import Credentials
from gspread.utils import DateTimeOption, ValueRenderOption, rowcol_to_a1

from .cells import EMPTY, Cell, to_cell, to_date_cell

logger = logging.getLogger(__name__)

SCOPES = ["https://www.googleapis.com/auth/spreadsheets"]


class BucketNotFoundError(LookupError):
    def __init__(self, bucket_id: str) -> None:
        super().__init__(f"Worksheet '{bucket_id}' not found.")
        self.bucket_id = bucket_id


class Grid(Protocol):
    def get_cells(
        self,
        bucket_id: str,
        row_start: int,
        col_start: int,
        row_count: int | None,
        col_count: int,
        date_rows: Iterable[int] = (),
        date_columns: Iterable[int] = (),
    ) -> list[list[Cell]]: ...


def a1_range(row_start: int, col_start: int, row_count: int | None, col_count: int) -> str:
    """Build an A1 range; ``row_count=None`` leaves the range open to the last row."""
    start = rowcol_to_a1(row_start, col_start)
    end_col = col_start + col_count - 1
    if row_count is None:
        column = rowcol_to_a1(1, end_col).rstrip("0123456789")
        return f"{start}:{column}"
    return f"{start}:{rowcol_to_a1(row_start + row_count - 1, end_col)}"


def pad_rows(
    values: list[list[object]],
    row_count: int | None,
    col_count: int,
    date_rows: Iterable[int] = (),
    date_columns: Iterable[int] = (),
) -> list[list[Cell]]:
    """Tag and pad raw API values into a ``row_count`` x ``col_count`` block.

    ``date_rows`` and ``date_columns`` are zero-based offsets inside the block
    whose numeric values are date serials.
    """
    date_rows = set(date_rows)
    date_columns = set(date_columns)
    rows = [list(row) for row in values]
    if row_count is not None:
        rows = rows[:row_count] + [[] for _ in range(max(0, row_count - len(rows)))]
    grid: list[list[Cell]] = []
    for row_index, row in enumerate(rows):
        cells = [
            to_date_cell(value)
            if row_index in date_rows or col_index in date_columns
            else to_cell(value)
            for col_index, value in enumerate(row[:col_count])
        ]
        cells.extend([EMPTY] * (col_count - len(cells)))
        grid.append(cells)
    return grid


class SheetsClient:
    def __init__(self, spreadsheet_id: str, service_account_file: str) -> None:
        credentials = Credentials.from_service_account_file(service_account_file, scopes=SCOPES)
        self._client = gspread.authorize(credentials)
        self._spreadsheet = self._client.open_by_key(spreadsheet_id)

    def get_cells(
        self,
        bucket_id: str,
        row_start: int,
        col_start: int,
        row_count: int | None,
        col_count: int,
        date_rows: Iterable[int] = (),
        date_columns: Iterable[int] = (),
    ) -> list[list[Cell]]:
        worksheet = self._get_worksheet(bucket_id)
        cell_range = a1_range(row_start, col_start, row_count, col_count)
        logger.debug("Reading %s!%s", bucket_id, cell_range)
        values = worksheet.get(
            cell_range,
            value_render_option=ValueRenderOption.unformatted,
            date_time_render_option=DateTimeOption.serial_number,
        )
        return pad_rows(values, row_count, col_count, date_rows, date_columns)

    def append_row(self, bucket_id: str, row: list[object], create: bool = False) -> None:
        try:
            worksheet = self._get_worksheet(bucket_id)
        except BucketNotFoundError:
            if not create:
                raise
            logger.info("Creating worksheet %s", bucket_id)
            worksheet = self._spreadsheet.add_worksheet(title=bucket_id, rows=1000, cols=len(row))
        worksheet.append_row(row, value_input_option="USER_ENTERED")
        logger.info("Appended 1 row to %s", bucket_id)

    def _get_worksheet(self, bucket_id: str):
        try:
            return self._spreadsheet.worksheet(bucket_id)
        except gspread.WorksheetNotFound as exc:
            raise BucketNotFoundError(bucket_id) from exc
