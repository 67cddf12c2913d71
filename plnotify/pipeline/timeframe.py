from __future__ import annotations

from datetime import date

import pendulum

from ..reports.datekey import to_date
from ..reports.models import DateRange

MAX_RANGE_DAYS = 31


class InvalidRangeError(ValueError):
    pass


def today(timezone: str = "Asia/Tokyo") -> date:
    return pendulum.now(timezone).date()


def yesterday(reference: date) -> date:
    return pendulum.date(reference.year, reference.month, reference.day).subtract(days=1)


def next_month_end(reference: date) -> date:
    ref = pendulum.date(reference.year, reference.month, 1)
    return ref.add(months=1).end_of("month")


def parse_range(start: str, end: str) -> DateRange:
    """Validate a range request of two date strings (inclusive both ends)."""
    start_date = to_date(start)
    end_date = to_date(end)
    if start_date is None or end_date is None:
        raise InvalidRangeError("日付の形式が正しくありません。")
    if start_date > end_date:
        raise InvalidRangeError("開始日は終了日より前の日付を選択してください。")
    date_range = DateRange(start_date, end_date)
    if date_range.days > MAX_RANGE_DAYS:
        raise InvalidRangeError(f"期間は{MAX_RANGE_DAYS}日以内で指定してください。")
    return date_range
