from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Protocol

from ..notifications.formatter import (
    format_cash_balance_message,
    format_period_message,
    format_pl_message,
)
from ..notifications.line import DispatchResult
from ..reports import datekey
from ..reports.aggregate import EmptyRangeError, aggregate
from ..reports.buckets import bucket_id
from ..reports.models import CashBalanceRecord, LookupStatus
from ..reports.scanner import PL_SHEET_NAME, RowScanner
from ..sheets.client import Grid
from .timeframe import InvalidRangeError, next_month_end, parse_range, yesterday

logger = logging.getLogger(__name__)


class Dispatcher(Protocol):
    def push(self, text: str) -> DispatchResult: ...


class FailureKind(Enum):
    NOT_FOUND = "not_found"
    EMPTY_RANGE = "empty_range"
    INVALID_RANGE = "invalid_range"
    MISSING_DATA_SOURCE = "missing_data_source"
    TRANSPORT_FAILURE = "transport_failure"


@dataclass(slots=True)
class ReportResult:
    success: bool
    error: str | None = None
    kind: FailureKind | None = None
    message: str | None = None
    skipped: bool = False

    @classmethod
    def failed(cls, kind: FailureKind, error: str) -> "ReportResult":
        return cls(success=False, error=error, kind=kind)

    def to_dict(self) -> dict:
        if self.success:
            return {"success": True}
        return {"success": False, "error": self.error}


def dispatch_message(dispatcher: Dispatcher, message: str) -> ReportResult:
    sent = dispatcher.push(message)
    if not sent.success:
        return ReportResult(
            success=False,
            error=sent.error,
            kind=FailureKind.TRANSPORT_FAILURE,
            message=message,
        )
    return ReportResult(success=True, message=message)


def send_pl_report(
    grid: Grid,
    dispatcher: Dispatcher,
    target: date | None = None,
    sheet_name: str = PL_SHEET_NAME,
) -> ReportResult:
    """Send the P&L of one day; without ``target`` the sheet's A1 date is used."""
    scanner = RowScanner(grid)

    if target is None:
        base = scanner.base_date(sheet_name)
        if base.status is LookupStatus.MISSING_SOURCE:
            return ReportResult.failed(
                FailureKind.MISSING_DATA_SOURCE, f"「{sheet_name}」が見つかりません"
            )
        if not base.found:
            return ReportResult.failed(
                FailureKind.NOT_FOUND, f"「{sheet_name}」のA1に基準日付がありません。"
            )
        key = base.value
    else:
        key = datekey.normalize(target)

    lookup = scanner.find_record(sheet_name, key)
    if lookup.status is LookupStatus.MISSING_SOURCE:
        return ReportResult.failed(
            FailureKind.MISSING_DATA_SOURCE, f"「{sheet_name}」が見つかりません"
        )
    if not lookup.found:
        return ReportResult.failed(
            FailureKind.NOT_FOUND, f"{key}のデータが見つかりませんでした。"
        )

    return dispatch_message(dispatcher, format_pl_message(lookup.value))


def send_pl_report_for_period(
    grid: Grid,
    dispatcher: Dispatcher,
    start: str,
    end: str,
    sheet_name: str = PL_SHEET_NAME,
) -> ReportResult:
    try:
        date_range = parse_range(start, end)
    except InvalidRangeError as exc:
        logger.warning("Rejected range %s..%s: %s", start, end, exc)
        return ReportResult.failed(FailureKind.INVALID_RANGE, str(exc))

    lookup = RowScanner(grid).find_records(sheet_name, date_range)
    if lookup.status is LookupStatus.MISSING_SOURCE:
        return ReportResult.failed(
            FailureKind.MISSING_DATA_SOURCE, f"「{sheet_name}」が見つかりません"
        )

    try:
        summary = aggregate(lookup.value or [])
    except EmptyRangeError:
        return ReportResult.failed(
            FailureKind.EMPTY_RANGE, "指定期間のデータが見つかりませんでした。"
        )

    return dispatch_message(dispatcher, format_period_message(summary, start, end))


def send_cash_balance_report(
    grid: Grid,
    dispatcher: Dispatcher,
    today: date,
    skip_if_empty: bool = False,
) -> ReportResult:
    """Send yesterday's actual balance against next month-end's budget balance."""
    actual_date = yesterday(today)
    budget_date = next_month_end(today)
    actual_key = datekey.normalize(actual_date)
    budget_key = datekey.normalize(budget_date)
    actual_bucket = bucket_id(actual_date)
    budget_bucket = bucket_id(budget_date)

    scanner = RowScanner(grid)
    actual_lookup = scanner.find_balance(actual_bucket, actual_key)
    budget_lookup = scanner.find_balance(budget_bucket, budget_key)

    if (
        actual_lookup.status is LookupStatus.MISSING_SOURCE
        and budget_lookup.status is LookupStatus.MISSING_SOURCE
    ):
        logger.error("CF worksheets not found: %s, %s", actual_bucket, budget_bucket)
        return ReportResult.failed(
            FailureKind.MISSING_DATA_SOURCE,
            "現預金データが見つかりませんでした。CFシートを確認してください。",
        )

    actual = actual_lookup.value or CashBalanceRecord(date=actual_key, source_bucket=actual_bucket)
    budget = budget_lookup.value or CashBalanceRecord(date=budget_key, source_bucket=budget_bucket)

    if skip_if_empty and not actual.actual_balance.present and not budget.budget_balance.present:
        logger.info("No cash balance values for %s / %s; nothing sent", actual_key, budget_key)
        return ReportResult(success=True, skipped=True)

    return dispatch_message(dispatcher, format_cash_balance_message(actual, budget))
