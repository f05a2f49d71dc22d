from __future__ import annotations

from datetime import date

from ..restaurants.models import WEEKDAYS, Restaurant


def weekday_name(day: date) -> str:
    # date.weekday() counts from Monday; the hours table starts on Sunday
    return WEEKDAYS[(day.weekday() + 1) % 7]


def is_open(restaurant: Restaurant, day: date | str, time: str) -> bool:
    """Return whether *restaurant* accepts guests at *time* on *day*.

    Times are zero-padded ``HH:MM`` strings and compare lexicographically.
    The opening minute is inclusive, the closing minute exclusive. A window
    whose close sorts before its open runs past midnight, so ``22:00-02:00``
    covers both late evening and the small hours of the same weekday entry.
    """
    if isinstance(day, str):
        day = date.fromisoformat(day)

    hours = restaurant.opening_hours.get(weekday_name(day))
    if hours is None or hours.closed:
        return False

    if hours.close >= hours.open:
        return hours.open <= time < hours.close
    return time >= hours.open or time < hours.close
