from __future__ import annotations

from datetime import date, datetime, time
from typing import Union


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def as_date(value: Union[date, datetime, str]) -> date:
    """Coerce a date, datetime or ISO string to a calendar date.

    Strings may carry a time part ("2024-01-01T10:00:00"); only the day counts.
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return parse_iso_date(str(value).strip()[:10])


def parse_hhmm(value: str) -> time:
    """Parse HH:MM (seconds optional) into time."""
    text = str(value).strip()
    fmt = "%H:%M:%S" if text.count(":") == 2 else "%H:%M"
    return datetime.strptime(text, fmt).time()


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()
