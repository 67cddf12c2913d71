from __future__ import annotations

from typing import Sequence

from .models import FinancialRecord, PeriodAggregate


class EmptyRangeError(ValueError):
    pass


def aggregate(records: Sequence[FinancialRecord]) -> PeriodAggregate:
    """Sum the daily metrics of ``records`` and average them per record.

    Absent metrics count as zero and still count towards the divisor.
    """
    if not records:
        raise EmptyRangeError("Cannot aggregate an empty sequence of records.")

    count = len(records)
    total_sales = sum(record.daily_sales.or_zero for record in records)
    total_gross_profit = sum(record.daily_gross_profit.or_zero for record in records)
    total_operating_profit = sum(record.daily_operating_profit.or_zero for record in records)

    return PeriodAggregate(
        total_sales=total_sales,
        total_gross_profit=total_gross_profit,
        total_operating_profit=total_operating_profit,
        count=count,
        average_sales=total_sales / count,
        average_gross_profit=total_gross_profit / count,
        average_operating_profit=total_operating_profit / count,
    )
