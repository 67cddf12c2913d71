import pytest

from plnotify.reports.aggregate import EmptyRangeError, aggregate
from plnotify.reports.models import FinancialRecord, Metric


def record(day: int, sales=None, gross=None, operating=None) -> FinancialRecord:
    return FinancialRecord(
        date=f"2025/06/{day:02d}",
        daily_sales=Metric(sales),
        daily_gross_profit=Metric(gross),
        daily_operating_profit=Metric(operating),
    )


def test_aggregate_month_of_equal_days():
    records = [record(day, 1000, 400, 100) for day in range(1, 31)]

    summary = aggregate(records)

    assert summary.count == 30
    assert summary.total_sales == 30000
    assert summary.total_gross_profit == 12000
    assert summary.total_operating_profit == 3000
    assert summary.average_sales == 1000
    assert summary.average_gross_profit == 400
    assert summary.average_operating_profit == 100


def test_absent_values_add_zero_but_still_count():
    records = [record(1, 1000, 300, -50), record(2, None, 300, None), record(3, 2000, 300, 80)]

    summary = aggregate(records)

    assert summary.count == len(records)
    assert summary.total_sales == sum(r.daily_sales.or_zero for r in records) == 3000
    assert summary.average_sales == 1000
    assert summary.average_gross_profit == 300
    assert summary.total_operating_profit == 30
    assert summary.average_operating_profit == 10


def test_aggregate_of_nothing_raises():
    with pytest.raises(EmptyRangeError):
        aggregate([])
