"""Helpers for the timestamps Syncable puts in donation emails."""
from __future__ import annotations

import re
from datetime import datetime
from email.utils import parsedate_to_datetime
from typing import Optional

_LOOSE_DATETIME = re.compile(
    r"([0-9]{4})/([0-9]{1,2})/([0-9]{1,2})\s+([0-9]{1,2}):([0-9]{1,2}):([0-9]{1,2})"
)

_FORMATS = (
    "%Y/%m/%d %H:%M:%S",
    "%Y/%m/%d %H:%M",
    "%Y/%m/%d",
)


def normalize_date(date_string: str) -> str:
    """Zero-pad a ``YYYY/M/D H:M:S`` timestamp to ``YYYY/MM/DD HH:MM:SS``.

    Strings that do not contain such a timestamp are returned unchanged.
    """
    match = _LOOSE_DATETIME.search(date_string)
    if not match:
        return date_string

    year, month, day, hour, minute, second = match.groups()
    return (
        f"{year}/{month.zfill(2)}/{day.zfill(2)} "
        f"{hour.zfill(2)}:{minute.zfill(2)}:{second.zfill(2)}"
    )


def parse_date(date_string: str) -> Optional[datetime]:
    """Parse a date string into a datetime, or return None if it can't be parsed."""
    value = (date_string or "").strip()
    if not value:
        return None

    for fmt in _FORMATS:
        try:
            return datetime.strptime(value, fmt)
        except ValueError:
            continue

    try:
        return datetime.fromisoformat(value)
    except ValueError:
        pass

    try:
        return parsedate_to_datetime(value)
    except (TypeError, ValueError, IndexError):
        return None
