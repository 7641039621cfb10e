"""
DiagnoCenter HR - Date Helpers
"""

from datetime import date, datetime
from typing import Union

DateLike = Union[date, datetime, str]

MONTH_NAMES = [
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
]


def _to_date(value: DateLike) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError:
            return date.fromisoformat(text[:10])
    raise TypeError(f"Unsupported date value: {value!r}")


def days_between(start: DateLike, end: DateLike) -> int:
    """
    Whole calendar days from ``start`` to ``end``.

    Time-of-day components are ignored, so a request from the 1st to the 5th
    is 4 days. Negative when ``end`` precedes ``start``.
    """
    return (_to_date(end) - _to_date(start)).days


def month_number(name: str) -> int:
    """Return 1-12 for an English month name (case-insensitive), else 0."""
    lowered = name.strip().lower()
    for index, month in enumerate(MONTH_NAMES, start=1):
        if month.lower() == lowered:
            return index
    return 0


def month_name(month: int) -> str:
    return MONTH_NAMES[month - 1]
