from __future__ import annotations

import logging

from ..sheets.cells import Cell, Empty
from ..sheets.client import BucketNotFoundError, Grid
from . import datekey
from .models import (
    CashBalanceRecord,
    DateRange,
    FinancialRecord,
    Lookup,
    LookupStatus,
    Metric,
)

logger = logging.getLogger(__name__)

PL_SHEET_NAME = "全社PLシート"
HEADER_ROW = 1
DATA_START_ROW = 6
PL_COLUMN_COUNT = 12

# Zero-based offsets inside the A..L block.
DATE_COL = 0
DAILY_SALES_COL = 2
MONTHLY_SALES_COL = 3
DAILY_GROSS_PROFIT_COL = 6
MONTHLY_GROSS_PROFIT_COL = 7
DAILY_OPERATING_PROFIT_COL = 10
MONTHLY_OPERATING_PROFIT_COL = 11

BALANCE_DATE_ROW = 7
BALANCE_BUDGET_ROW = 8
BALANCE_ACTUAL_ROW = 9
BALANCE_MAX_COLUMNS = 100


def _record_from_row(key: str, row: list[Cell]) -> FinancialRecord:
    return FinancialRecord(
        date=key,
        daily_sales=Metric.from_cell(row[DAILY_SALES_COL]),
        monthly_sales=Metric.from_cell(row[MONTHLY_SALES_COL]),
        daily_gross_profit=Metric.from_cell(row[DAILY_GROSS_PROFIT_COL]),
        monthly_gross_profit=Metric.from_cell(row[MONTHLY_GROSS_PROFIT_COL]),
        daily_operating_profit=Metric.from_cell(row[DAILY_OPERATING_PROFIT_COL]),
        monthly_operating_profit=Metric.from_cell(row[MONTHLY_OPERATING_PROFIT_COL]),
    )


class RowScanner:
    """Date-indexed lookups over a grid of sheets.

    Every lookup reads the grid once per bucket and then scans the fetched
    rows. A missing worksheet comes back as ``LookupStatus.MISSING_SOURCE``.
    """

    def __init__(self, grid: Grid) -> None:
        self.grid = grid

    def _data_rows(self, bucket: str) -> list[list[Cell]] | None:
        try:
            return self.grid.get_cells(
                bucket, DATA_START_ROW, 1, None, PL_COLUMN_COUNT, date_columns=(DATE_COL,)
            )
        except BucketNotFoundError:
            logger.warning("Worksheet %s not found", bucket)
            return None

    def base_date(self, bucket: str = PL_SHEET_NAME) -> Lookup[str]:
        try:
            header = self.grid.get_cells(bucket, HEADER_ROW, 1, 1, 1, date_columns=(0,))
        except BucketNotFoundError:
            logger.warning("Worksheet %s not found", bucket)
            return Lookup(LookupStatus.MISSING_SOURCE, bucket)
        key = datekey.normalize(header[0][0])
        if not key:
            return Lookup(LookupStatus.NOT_FOUND, bucket)
        return Lookup(LookupStatus.FOUND, bucket, key)

    def find_record(self, bucket: str, target_key: str) -> Lookup[FinancialRecord]:
        rows = self._data_rows(bucket)
        if rows is None:
            return Lookup(LookupStatus.MISSING_SOURCE, bucket)

        for offset, row in enumerate(rows):
            if datekey.normalize(row[DATE_COL]) == target_key:
                logger.debug("Matched %s at row %d of %s", target_key, DATA_START_ROW + offset, bucket)
                return Lookup(LookupStatus.FOUND, bucket, _record_from_row(target_key, row))

        logger.info("No row dated %s in %s", target_key, bucket)
        return Lookup(LookupStatus.NOT_FOUND, bucket)

    def find_records(self, bucket: str, date_range: DateRange) -> Lookup[list[FinancialRecord]]:
        rows = self._data_rows(bucket)
        if rows is None:
            return Lookup(LookupStatus.MISSING_SOURCE, bucket, [])

        records: list[FinancialRecord] = []
        for row in rows:
            if isinstance(row[DATE_COL], Empty):
                continue
            row_date = datekey.to_date(row[DATE_COL])
            if row_date is None or row_date not in date_range:
                continue
            records.append(_record_from_row(datekey.normalize(row_date), row))

        logger.info(
            "Found %d row(s) in %s between %s and %s",
            len(records),
            bucket,
            date_range.start,
            date_range.end,
        )
        status = LookupStatus.FOUND if records else LookupStatus.NOT_FOUND
        return Lookup(status, bucket, records)

    def find_balance(self, bucket: str, target_key: str) -> Lookup[CashBalanceRecord]:
        try:
            dates, budgets, actuals = self.grid.get_cells(
                bucket, BALANCE_DATE_ROW, 1, 3, BALANCE_MAX_COLUMNS, date_rows=(0,)
            )
        except BucketNotFoundError:
            logger.warning("Worksheet %s not found", bucket)
            return Lookup(LookupStatus.MISSING_SOURCE, bucket)

        for index, cell in enumerate(dates):
            if isinstance(cell, Empty):
                continue
            if datekey.normalize(cell) == target_key:
                return Lookup(
                    LookupStatus.FOUND,
                    bucket,
                    CashBalanceRecord(
                        date=target_key,
                        source_bucket=bucket,
                        actual_balance=Metric.from_cell(actuals[index]),
                        budget_balance=Metric.from_cell(budgets[index]),
                    ),
                )

        logger.info("No column dated %s in %s", target_key, bucket)
        return Lookup(LookupStatus.NOT_FOUND, bucket)
