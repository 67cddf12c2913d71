from __future__ import annotations

from datetime import date

BALANCE_SUFFIX = "CF"


def bucket_id(day: date) -> str:
    """Name of the monthly cash-flow sheet holding ``day``, e.g. ``202508CF``."""
    return f"{day.year:04d}{day.month:02d}{BALANCE_SUFFIX}"
