from __future__ import annotations

import re
from datetime import date, datetime, timedelta

from ..core.constants import DAY_FORMAT
from ..core.exceptions import ValidationError

# "dd/mm/yyyy" optionally followed by a parenthesized weekday label, e.g. "05/02/2024 (Monday)".
_DAY_LABEL_RE = re.compile(r"^\s*(\d{1,2}/\d{1,2}/\d{4})\s*(?:\([^)]*\))?\s*$")


def parse_day(value) -> date:
    """Parse a rota/holiday day label (``dd/mm/yyyy`` with an optional weekday suffix)."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value

    match = _DAY_LABEL_RE.match(str(value or ""))
    if not match:
        raise ValidationError(f"Invalid date {value!r}, expected dd/mm/yyyy")
    try:
        return datetime.strptime(match.group(1), DAY_FORMAT).date()
    except ValueError:
        raise ValidationError(f"Invalid date {value!r}, expected dd/mm/yyyy")


def format_day(value: date) -> str:
    return value.strftime(DAY_FORMAT)


def weekday_label(value: date) -> str:
    return value.strftime("%A")


def week_bounds(today: date) -> tuple[date, date]:
    """Monday..Sunday of the week containing ``today``."""
    monday = today - timedelta(days=today.weekday())
    return monday, monday + timedelta(days=6)


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def today_local() -> date:
    return now_local().date()
