from __future__ import annotations

import math
from datetime import datetime
from typing import Sequence

from ..reports.models import CashBalanceRecord, FinancialRecord, Metric, PeriodAggregate

SEPARATOR = "━━━━━━━━━━━━"
UNAVAILABLE = "取得不可"
CURRENCY = "¥"
UP = "📈"
DOWN = "📉"


def _plain(value: object) -> int | float | None:
    if isinstance(value, Metric):
        value = value.value
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    if isinstance(value, float):
        if not math.isfinite(value):
            return None
        if value.is_integer():
            return int(value)
    return value


def format_number(value: object) -> str:
    """Group thousands like ``toLocaleString('ja-JP')``: at most 3 decimals."""
    number = _plain(value)
    if number is None:
        return UNAVAILABLE
    if isinstance(number, int):
        return f"{number:,}"
    text = f"{number:,.3f}".rstrip("0").rstrip(".")
    return "0" if text == "-0" else text


def format_currency(value: object) -> str:
    text = format_number(value)
    if text == UNAVAILABLE:
        return text
    return CURRENCY + text


def round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def format_pl_message(record: FinancialRecord) -> str:
    lines = [
        "📊 全社PL情報",
        SEPARATOR,
        f"📅 {record.date}",
        "",
        "【売上】",
        f"単日: {format_currency(record.daily_sales)}",
        f"当月累計: {format_currency(record.monthly_sales)}",
        "",
        "【粗利】",
        f"単日: {format_currency(record.daily_gross_profit)}",
        f"当月累計: {format_currency(record.monthly_gross_profit)}",
        "",
        "【営業利益】",
        f"単日: {format_currency(record.daily_operating_profit)}",
        f"当月累計: {format_currency(record.monthly_operating_profit)}",
    ]
    return "\n".join(lines)


def format_period_message(summary: PeriodAggregate, start: str, end: str) -> str:
    lines = [
        "📊 期間PL情報",
        SEPARATOR,
        f"📅 {start} ～ {end}",
        f"（データ件数: {summary.count}件）",
        "",
        "【期間合計】",
        f"売上: {format_currency(summary.total_sales)}",
        f"粗利: {format_currency(summary.total_gross_profit)}",
        f"営業利益: {format_currency(summary.total_operating_profit)}",
        "",
        "【日平均】",
        f"売上: {format_currency(round_half_up(summary.average_sales))}",
        f"粗利: {format_currency(round_half_up(summary.average_gross_profit))}",
        f"営業利益: {format_currency(round_half_up(summary.average_operating_profit))}",
    ]
    return "\n".join(lines)


def format_cash_balance_message(actual: CashBalanceRecord, budget: CashBalanceRecord) -> str:
    """Render the actual/budget balance pair.

    ``actual`` supplies its actual balance and ``budget`` its budget balance.
    The difference block only appears when both are numeric.
    """
    lines = [
        "💰 現預金残高情報",
        SEPARATOR,
        "",
        "【実残高】",
        f"📅 {actual.date}時点",
        f"💵 {format_currency(actual.actual_balance)}",
        f"（{actual.source_bucket}より取得）",
        "",
        "【予算残高】",
        f"📅 {budget.date}時点",
        f"💴 {format_currency(budget.budget_balance)}",
        f"（{budget.source_bucket}より取得）",
    ]
    message = "\n".join(lines) + "\n\n"

    actual_value = _plain(actual.actual_balance)
    budget_value = _plain(budget.budget_balance)
    if actual_value is not None and budget_value is not None:
        difference = budget_value - actual_value
        glyph = UP if difference >= 0 else DOWN
        message += f"【予実差額】\n{glyph} {format_currency(difference)}"
    return message


def format_timestamp(moment: datetime) -> str:
    """``toLocaleString('ja-JP')`` layout, e.g. ``2025/8/14 9:05:03``."""
    return (
        f"{moment.year}/{moment.month}/{moment.day} "
        f"{moment.hour}:{moment.minute:02d}:{moment.second:02d}"
    )


def format_custom_message(
    title: str,
    body: str,
    emoji: str = "📢",
    sender: str | None = None,
    timestamp: datetime | None = None,
) -> str:
    message = f"{emoji} {title}\n{SEPARATOR}\n{body}"
    if sender:
        message += f"\n\n送信者: {sender}"
    if timestamp is not None:
        message += f"\n送信日時: {format_timestamp(timestamp)}"
    return message


def format_form_submission(headers: Sequence[str], values: Sequence[str]) -> str:
    """Render a form response; ``values[0]`` is the submission timestamp."""
    timestamp = values[0] if values else ""
    message = f"📝 新しいフォーム回答\n{SEPARATOR}\n送信日時: {timestamp}\n\n"
    for index in range(1, len(values)):
        header = headers[index] if index < len(headers) else ""
        if header and values[index]:
            message += f"【{header}】\n{values[index]}\n\n"
    return message


def format_settings_summary(token: str | None, group_id: str | None) -> str:
    message = "=== 現在の設定 ===\n\n"

    if token:
        message += "✅ アクセストークン: 設定済み\n"
        message += f"   ({token[:20]}...)\n\n"
    else:
        message += "❌ アクセストークン: 未設定\n\n"

    if group_id:
        message += "✅ グループID: 設定済み\n"
        message += f"   ({group_id})\n"
    else:
        message += "❌ グループID: 未設定\n"

    if not token or not group_id:
        message += "\n⚠️ 初期設定を完了してください"

    return message
