from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Union


@dataclass(frozen=True, slots=True)
class Number:
    value: int | float


@dataclass(frozen=True, slots=True)
class Text:
    value: str


@dataclass(frozen=True, slots=True)
class DateValue:
    value: date


@dataclass(frozen=True, slots=True)
class Empty:
    pass


EMPTY = Empty()

Cell = Union[Number, Text, DateValue, Empty]


def to_cell(raw: object) -> Cell:
    """Tag a raw value returned by the Sheets API (or a test grid)."""
    if raw is None:
        return EMPTY
    if isinstance(raw, bool):
        return Text(str(raw).upper())
    if isinstance(raw, (int, float)):
        if isinstance(raw, float):
            if math.isnan(raw):
                return EMPTY
            if raw.is_integer():
                return Number(int(raw))
        return Number(raw)
    if isinstance(raw, datetime):
        return DateValue(raw.date())
    if isinstance(raw, date):
        return DateValue(raw)
    text = str(raw)
    if not text.strip():
        return EMPTY
    return Text(text)


def number_or_none(cell: Cell) -> int | float | None:
    if isinstance(cell, Number):
        return cell.value
    return None


SHEETS_EPOCH = date(1899, 12, 30)


def serial_to_date(serial: int | float) -> date:
    """Calendar date of a Sheets date serial; the fraction is the time of day."""
    return SHEETS_EPOCH + timedelta(days=math.floor(serial))


def to_date_cell(raw: object) -> Cell:
    """Tag a cell read from a date row or column, where numbers are date serials."""
    cell = to_cell(raw)
    if isinstance(cell, Number):
        return DateValue(serial_to_date(cell.value))
    return cell
