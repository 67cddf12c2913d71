from __future__ import annotations

import argparse
import json
import logging
import sys
from datetime import date
from pathlib import Path
from typing import Callable

import pendulum

from .config import LINE_VARIABLES, SHEETS_VARIABLES, Settings, save_line_settings
from .notifications.formatter import (
    format_custom_message,
    format_form_submission,
    format_settings_summary,
)
from .notifications.line import LineConfig, LineDispatcher
from .pipeline.reports import (
    Dispatcher,
    ReportResult,
    dispatch_message,
    send_cash_balance_report,
    send_pl_report,
    send_pl_report_for_period,
)
from .pipeline.timeframe import today, yesterday
from .sheets.client import SheetsClient
from .webhook import handle_webhook

logger = logging.getLogger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Send P&L and cash balance reports from Google Sheets to LINE."
    )
    commands = parser.add_subparsers(dest="command", required=True)

    pl = commands.add_parser("pl", help="Send one day's P&L. Defaults to yesterday.")
    target = pl.add_mutually_exclusive_group()
    target.add_argument("--date", type=date.fromisoformat, help="Target date (YYYY-MM-DD).")
    target.add_argument(
        "--base-date",
        action="store_true",
        help="Use the base date stored in A1 of the P&L sheet.",
    )

    period = commands.add_parser("period", help="Send totals and daily averages for a range.")
    period.add_argument("--start", required=True, help="Start date (YYYY-MM-DD).")
    period.add_argument("--end", required=True, help="End date (YYYY-MM-DD).")

    cash = commands.add_parser("cash", help="Send actual vs. budget cash balance.")
    cash.add_argument(
        "--scheduled",
        action="store_true",
        help="Skip sending when neither balance is available.",
    )

    custom = commands.add_parser("custom", help="Send a free-form message.")
    custom.add_argument("--title", required=True)
    custom.add_argument("--message", required=True)
    custom.add_argument("--emoji", default="📢")
    custom.add_argument("--sender", help="Sender shown under the message.")
    custom.add_argument("--timestamp", action="store_true", help="Append the send time.")

    form = commands.add_parser("form", help="Send a form response read from a JSON file.")
    form.add_argument("--payload", type=Path, required=True)

    webhook = commands.add_parser("webhook", help="Log group ids found in a LINE webhook body.")
    webhook.add_argument("--payload", type=Path, required=True)

    commands.add_parser("settings", help="Show whether the LINE settings are configured.")

    configure = commands.add_parser("configure", help="Save the LINE settings to .env.")
    configure.add_argument("--token", required=True)
    configure.add_argument("--group-id", required=True)

    commands.add_parser("ping", help="Check the LINE access token against the bot info API.")

    return parser.parse_args(argv)


def sheets_client(settings: Settings) -> SheetsClient:
    return SheetsClient(
        spreadsheet_id=settings.spreadsheet_id,
        service_account_file=str(settings.service_account_file),
    )


def log_result(result: ReportResult, label: str) -> int:
    if result.skipped:
        logger.info("%s skipped: no data to send.", label)
        return 0
    if result.success:
        logger.info("%s sent.", label)
        return 0
    logger.error("%s failed (%s): %s", label, result.kind.value if result.kind else "error", result.error)
    return 1


def run(
    args: argparse.Namespace,
    grid_factory: Callable[[Settings], SheetsClient] = sheets_client,
    dispatcher_factory: Callable[[LineConfig], Dispatcher] = LineDispatcher,
) -> int:
    if args.command == "settings":
        settings = Settings.from_env(required=())
        print(format_settings_summary(settings.line_access_token, settings.line_group_id))
        return 0

    if args.command == "configure":
        path = save_line_settings(args.token, args.group_id)
        logger.info("Saved LINE settings to %s", path)
        return 0

    if args.command == "ping":
        settings = Settings.from_env(required=("LINE_CHANNEL_ACCESS_TOKEN",))
        info = LineDispatcher(settings.line).bot_info()
        logger.info("Connected as %s (%s)", info.display_name, info.user_id)
        return 0

    if args.command == "webhook":
        settings = Settings.from_env(required=SHEETS_VARIABLES)
        status = handle_webhook(
            args.payload.read_text(encoding="utf-8"),
            grid_factory(settings),
            timezone=settings.timezone,
        )
        print(json.dumps(status))
        return 0

    if args.command in ("custom", "form"):
        settings = Settings.from_env(required=LINE_VARIABLES)
        dispatcher = dispatcher_factory(settings.line)
        if args.command == "custom":
            message = format_custom_message(
                args.title,
                args.message,
                emoji=args.emoji,
                sender=args.sender,
                timestamp=pendulum.now(settings.timezone) if args.timestamp else None,
            )
            return log_result(dispatch_message(dispatcher, message), "Custom message")
        body = json.loads(args.payload.read_text(encoding="utf-8"))
        message = format_form_submission(body.get("headers", []), body.get("values", []))
        return log_result(dispatch_message(dispatcher, message), "Form response")

    settings = Settings.from_env()
    dispatcher = dispatcher_factory(settings.line)
    sheets = grid_factory(settings)

    if args.command == "pl":
        target = None if args.base_date else (args.date or yesterday(today(settings.timezone)))
        logger.info("Sending P&L report for %s", target or "the sheet's base date")
        result = send_pl_report(sheets, dispatcher, target, sheet_name=settings.pl_sheet_name)
        return log_result(result, "P&L report")

    if args.command == "period":
        logger.info("Sending period P&L report for %s to %s", args.start, args.end)
        result = send_pl_report_for_period(
            sheets, dispatcher, args.start, args.end, sheet_name=settings.pl_sheet_name
        )
        return log_result(result, "Period P&L report")

    if args.command == "cash":
        result = send_cash_balance_report(
            sheets, dispatcher, today(settings.timezone), skip_if_empty=args.scheduled
        )
        return log_result(result, "Cash balance report")

    raise ValueError(f"Unknown command: {args.command}")


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )
    args = parse_args(argv)

    try:
        return run(args)
    except RuntimeError as exc:
        logger.error("%s", exc)
        return 1
    except Exception:  # noqa: BLE001
        logger.exception("Command %s failed", args.command)
        return 1


if __name__ == "__main__":
    sys.exit(main())
