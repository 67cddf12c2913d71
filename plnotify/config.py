from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from dotenv import load_dotenv, set_key

from .notifications.line import LineConfig
from .reports.scanner import PL_SHEET_NAME

LINE_VARIABLES = ("LINE_CHANNEL_ACCESS_TOKEN", "LINE_GROUP_ID")
SHEETS_VARIABLES = ("SPREADSHEET_ID", "GOOGLE_SERVICE_ACCOUNT_FILE")
REQUIRED_VARIABLES = LINE_VARIABLES + SHEETS_VARIABLES


def env_path() -> Path:
    return Path(os.getenv("ENV_FILE", ".env"))


def load_environment() -> None:
    """Load environment variables from a .env file if present."""
    path = env_path()
    if path.is_file():
        load_dotenv(path)
    else:
        # Fallback: load .env in current working directory if ENV_FILE is missing
        default_path = Path(".env")
        if default_path.is_file():
            load_dotenv(default_path)


def save_line_settings(token: str, group_id: str, path: Path | None = None) -> Path:
    """Persist the LINE credentials into the .env file."""
    target = path or env_path()
    target.parent.mkdir(parents=True, exist_ok=True)
    target.touch(exist_ok=True)
    set_key(str(target), "LINE_CHANNEL_ACCESS_TOKEN", token, quote_mode="never")
    set_key(str(target), "LINE_GROUP_ID", group_id, quote_mode="never")
    os.environ["LINE_CHANNEL_ACCESS_TOKEN"] = token
    os.environ["LINE_GROUP_ID"] = group_id
    return target


@dataclass(frozen=True)
class Settings:
    line_access_token: str
    line_group_id: str
    spreadsheet_id: str
    service_account_file: Path | None
    pl_sheet_name: str = PL_SHEET_NAME
    timezone: str = "Asia/Tokyo"
    timeout: int = 20

    @property
    def line(self) -> LineConfig:
        return LineConfig(
            access_token=self.line_access_token,
            group_id=self.line_group_id,
            timeout=self.timeout,
        )

    @classmethod
    def from_env(cls, required: Iterable[str] = REQUIRED_VARIABLES) -> "Settings":
        load_environment()

        token = os.getenv("LINE_CHANNEL_ACCESS_TOKEN", "")
        group_id = os.getenv("LINE_GROUP_ID", "")
        spreadsheet_id = os.getenv("SPREADSHEET_ID", "")
        service_account_file = os.getenv("GOOGLE_SERVICE_ACCOUNT_FILE", "")
        pl_sheet_name = os.getenv("PL_SHEET_NAME", PL_SHEET_NAME)
        timezone = os.getenv("REPORT_TIMEZONE", "Asia/Tokyo")
        timeout_raw = os.getenv("REQUEST_TIMEOUT", "20")

        try:
            timeout = int(timeout_raw)
        except ValueError as exc:
            raise RuntimeError(f"REQUEST_TIMEOUT must be an integer, got {timeout_raw!r}") from exc

        missing = [
            name
            for name, value in {
                "LINE_CHANNEL_ACCESS_TOKEN": token,
                "LINE_GROUP_ID": group_id,
                "SPREADSHEET_ID": spreadsheet_id,
                "GOOGLE_SERVICE_ACCOUNT_FILE": service_account_file,
            }.items()
            if name in required and not value
        ]
        if missing:
            raise RuntimeError(
                f"Missing required environment variable(s): {', '.join(missing)}"
            )

        return cls(
            line_access_token=token,
            line_group_id=group_id,
            spreadsheet_id=spreadsheet_id,
            service_account_file=(
                Path(service_account_file).expanduser().resolve()
                if service_account_file
                else None
            ),
            pl_sheet_name=pl_sheet_name,
            timezone=timezone,
            timeout=timeout,
        )
