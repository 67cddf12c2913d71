from __future__ import annotations

import pytest

from plnotify.notifications.line import DispatchResult
from plnotify.sheets.client import BucketNotFoundError, pad_rows


class FakeGrid:
    """In-memory workbook: ``{sheet name: {(row, col): value}}`` with 1-indexed cells."""

    def __init__(self, sheets: dict[str, dict[tuple[int, int], object]] | None = None) -> None:
        self.sheets = sheets or {}
        self.reads: list[tuple] = []

    def set_row(self, sheet: str, row: int, values: list[object], col_start: int = 1) -> None:
        cells = self.sheets.setdefault(sheet, {})
        for offset, value in enumerate(values):
            cells[(row, col_start + offset)] = value

    def get_cells(self, bucket_id, row_start, col_start, row_count, col_count,
                  date_rows=(), date_columns=()):
        self.reads.append((bucket_id, row_start, col_start, row_count, col_count))
        if bucket_id not in self.sheets:
            raise BucketNotFoundError(bucket_id)
        cells = self.sheets[bucket_id]
        if row_count is None:
            last_row = max((row for row, _ in cells), default=row_start - 1)
            row_count = max(0, last_row - row_start + 1)
        values = [
            [cells.get((row, col)) for col in range(col_start, col_start + col_count)]
            for row in range(row_start, row_start + row_count)
        ]
        return pad_rows(values, row_count, col_count, date_rows, date_columns)


class RecordingDispatcher:
    def __init__(self, result: DispatchResult | None = None) -> None:
        self.result = result or DispatchResult(success=True)
        self.messages: list[str] = []

    def push(self, text: str) -> DispatchResult:
        self.messages.append(text)
        return self.result


def pl_row(day, daily_sales=None, monthly_sales=None, gross=None, monthly_gross=None,
           operating=None, monthly_operating=None) -> list[object]:
    """Columns A..L of a P&L data row."""
    return [
        day, None, daily_sales, monthly_sales, None, None,
        gross, monthly_gross, None, None, operating, monthly_operating,
    ]


@pytest.fixture
def grid() -> FakeGrid:
    return FakeGrid()


@pytest.fixture
def dispatcher() -> RecordingDispatcher:
    return RecordingDispatcher()


ENV_KEYS = (
    "ENV_FILE",
    "LINE_CHANNEL_ACCESS_TOKEN",
    "LINE_GROUP_ID",
    "SPREADSHEET_ID",
    "GOOGLE_SERVICE_ACCOUNT_FILE",
    "PL_SHEET_NAME",
    "REPORT_TIMEZONE",
    "REQUEST_TIMEOUT",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    # setenv first so teardown also removes values written by load_dotenv
    for key in ENV_KEYS:
        monkeypatch.setenv(key, "")
        monkeypatch.delenv(key)
    monkeypatch.chdir(tmp_path)
    return tmp_path
