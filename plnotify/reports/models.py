from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Generic, TypeVar

from ..sheets.cells import Cell, number_or_none

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Metric:
    """A numeric cell value that may be absent (empty or non-numeric)."""

    value: int | float | None = None

    @classmethod
    def from_cell(cls, cell: Cell) -> "Metric":
        return cls(number_or_none(cell))

    @property
    def present(self) -> bool:
        return self.value is not None

    @property
    def or_zero(self) -> int | float:
        return self.value if self.value is not None else 0


ABSENT = Metric()


@dataclass(frozen=True, slots=True)
class FinancialRecord:
    date: str
    daily_sales: Metric = ABSENT
    monthly_sales: Metric = ABSENT
    daily_gross_profit: Metric = ABSENT
    monthly_gross_profit: Metric = ABSENT
    daily_operating_profit: Metric = ABSENT
    monthly_operating_profit: Metric = ABSENT


@dataclass(frozen=True, slots=True)
class CashBalanceRecord:
    date: str
    source_bucket: str
    actual_balance: Metric = ABSENT
    budget_balance: Metric = ABSENT


@dataclass(frozen=True, slots=True)
class DateRange:
    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValueError(f"Range start {self.start} is after end {self.end}.")

    def __contains__(self, day: date) -> bool:
        return self.start <= day <= self.end

    @property
    def days(self) -> int:
        return (self.end - self.start).days + 1


@dataclass(frozen=True, slots=True)
class PeriodAggregate:
    total_sales: int | float
    total_gross_profit: int | float
    total_operating_profit: int | float
    count: int
    average_sales: float
    average_gross_profit: float
    average_operating_profit: float


class LookupStatus(Enum):
    FOUND = "found"
    NOT_FOUND = "not_found"
    MISSING_SOURCE = "missing_source"


@dataclass(frozen=True, slots=True)
class Lookup(Generic[T]):
    status: LookupStatus
    bucket: str
    value: T | None = None

    @property
    def found(self) -> bool:
        return self.status is LookupStatus.FOUND
