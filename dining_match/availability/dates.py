from __future__ import annotations

import re
from datetime import date, datetime, timezone

from ..errors import ValidationError
from ..restaurants.models import TIME_PATTERN

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TIME_RE = re.compile(TIME_PATTERN)


def utc_today() -> date:
    return datetime.now(timezone.utc).date()


def parse_date(value: str | None, today: date | None = None) -> date:
    """Validate a ``YYYY-MM-DD`` string and return it as a date.

    Rejects malformed strings, impossible calendar dates and any day before
    today's UTC date. Same-day dates are accepted regardless of the clock.
    """
    if not value or not isinstance(value, str):
        raise ValidationError("Date is required in YYYY-MM-DD format")
    if not _DATE_RE.match(value):
        raise ValidationError(f"Invalid date format '{value}', expected YYYY-MM-DD")
    try:
        parsed = date.fromisoformat(value)
    except ValueError:
        raise ValidationError(f"Invalid calendar date '{value}'") from None

    if parsed < (today or utc_today()):
        raise ValidationError(f"Date '{value}' is in the past")
    return parsed


def parse_time(value: str | None) -> str:
    if not value or not isinstance(value, str):
        raise ValidationError("Time is required in HH:MM format")
    if not _TIME_RE.match(value):
        raise ValidationError(f"Invalid time '{value}', expected zero-padded HH:MM")
    return value
