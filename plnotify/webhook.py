from __future__ import annotations

import json
import logging
from datetime import datetime
from typing import Protocol

import pendulum

from .notifications.formatter import format_timestamp

logger = logging.getLogger(__name__)

GROUP_ID_LOG_SHEET = "GroupID_Log"


class RowAppender(Protocol):
    def append_row(self, bucket_id: str, row: list[object], create: bool = False) -> None: ...


def extract_group_ids(payload: dict) -> list[str]:
    group_ids: list[str] = []
    for event in payload.get("events") or []:
        source = event.get("source") or {}
        if event.get("type") == "message" and source.get("type") == "group":
            group_id = source.get("groupId")
            if group_id:
                group_ids.append(group_id)
    return group_ids


def handle_webhook(
    body: str | None,
    sheets: RowAppender,
    now: datetime | None = None,
    timezone: str = "Asia/Tokyo",
) -> dict:
    """Record the group ids found in a LINE webhook body.

    Always answers ``{"status": "ok"}`` once a body is present, so LINE does
    not redeliver; parsing failures are only logged.
    """
    if not body:
        return {"status": "no data"}

    try:
        payload = json.loads(body)
    except json.JSONDecodeError as exc:
        logger.error("Could not decode webhook body: %s", exc)
        return {"status": "ok"}
    if not isinstance(payload, dict):
        logger.error("Unexpected webhook body type: %s", type(payload).__name__)
        return {"status": "ok"}

    stamp = format_timestamp(now or pendulum.now(timezone))
    for group_id in extract_group_ids(payload):
        logger.info("Detected group id %s", group_id)
        sheets.append_row(GROUP_ID_LOG_SHEET, [stamp, "Group ID Detected", group_id], create=True)

    return {"status": "ok"}
