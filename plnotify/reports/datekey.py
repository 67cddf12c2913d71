from __future__ import annotations

import logging
import re
from datetime import date, datetime

import pendulum
from pendulum.parsing.exceptions import ParserError

from ..sheets.cells import DateValue, Empty, Number, Text

logger = logging.getLogger(__name__)

KEY_FORMAT = "%Y/%m/%d"
JAPANESE_DATE = re.compile(r"(\d{4})年\s*(\d{1,2})月\s*(\d{1,2})日")


def to_date(value: object) -> date | None:
    """Calendar date of ``value``, ignoring time of day and offset."""
    if isinstance(value, (DateValue, Text, Number)):
        value = value.value
    if value is None or isinstance(value, Empty):
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None
    match = JAPANESE_DATE.match(value.strip())
    if match:
        try:
            return date(*(int(part) for part in match.groups()))
        except ValueError:
            return None
    try:
        parsed = pendulum.parse(value.strip(), strict=False)
    except (ParserError, ValueError, TypeError, OverflowError) as exc:
        logger.debug("Could not parse date %r: %s", value, exc)
        return None
    if isinstance(parsed, datetime):
        return parsed.date()
    if isinstance(parsed, date):
        return parsed
    return None


def normalize(value: object) -> str:
    """Render ``value`` as a ``YYYY/MM/DD`` key.

    Empty input gives ``""``. Anything that does not parse as a date is
    returned stringified, so it can never match a real key.
    """
    raw = value.value if isinstance(value, (DateValue, Text, Number)) else value
    if raw is None or isinstance(raw, Empty) or raw == "":
        return ""
    parsed = to_date(raw)
    if parsed is None:
        return str(raw)
    return parsed.strftime(KEY_FORMAT)
