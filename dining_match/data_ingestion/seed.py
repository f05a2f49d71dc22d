from __future__ import annotations

import re
from pathlib import Path
from typing import Any, List

import pandas as pd

from ..restaurants.models import WEEKDAYS, Restaurant

_DAY_ALIASES: dict[str, str] = {}
for _day in WEEKDAYS:
    _DAY_ALIASES[_day.lower()] = _day
    _DAY_ALIASES[_day[:3].lower()] = _day

_HOURS_RE = re.compile(r"^(\d{1,2}):(\d{2})\s*-\s*(\d{1,2}):(\d{2})$")


def _normalize_rating(rating: float | int | str | None) -> float | None:
    if rating is None or (not isinstance(rating, str) and pd.isna(rating)):
        return None
    raw = str(rating).strip()
    # Handle "X/5" format (e.g. "4.1/5")
    if "/" in raw:
        raw = raw.split("/")[0].strip()
    try:
        value = float(raw)
    except (TypeError, ValueError):
        return None

    # Clamp to [0, 5]
    return max(0.0, min(5.0, value))


def _resolve_day(token: str) -> str:
    day = _DAY_ALIASES.get(token.strip().lower())
    if day is None:
        raise ValueError(f"Unknown weekday '{token}'")
    return day


def _expand_days(days_text: str) -> List[str]:
    """Expand ``"Mon-Fri"``, ``"Sat,Sun"`` or ``"Daily"`` into weekday names.

    Ranges follow the Sunday-first week and may wrap, so ``Fri-Sun``
    yields Friday, Saturday, Sunday.
    """
    days_text = days_text.strip()
    if days_text.lower() in ("daily", "every day"):
        return list(WEEKDAYS)

    days: List[str] = []
    for part in days_text.split(","):
        if "-" in part:
            start, end = (WEEKDAYS.index(_resolve_day(t)) for t in part.split("-", 1))
            span = (end - start) % 7
            days.extend(WEEKDAYS[(start + i) % 7] for i in range(span + 1))
        else:
            days.append(_resolve_day(part))
    return days


def parse_hours(text: str | None) -> dict[str, dict[str, Any]]:
    """
    Parse a free-text schedule into the weekday -> hours mapping.

    Accepts segments like ``"Mon-Fri: 12:00-23:00"`` or ``"Sat: closed"``
    separated by ``;``. Days not mentioned stay absent, which reads as closed.
    """
    if not text or (not isinstance(text, str) and pd.isna(text)):
        return {}

    hours: dict[str, dict[str, Any]] = {}
    for segment in str(text).split(";"):
        segment = segment.strip()
        if not segment:
            continue
        days_part, sep, window = segment.partition(":")
        if not sep:
            raise ValueError(f"Cannot parse opening hours segment '{segment}'")
        window = window.strip()

        if window.lower() == "closed":
            entry: dict[str, Any] = {"closed": True}
        else:
            match = _HOURS_RE.match(window)
            if not match:
                raise ValueError(f"Cannot parse opening hours window '{window}'")
            oh, om, ch, cm = match.groups()
            entry = {"open": f"{int(oh):02d}:{om}", "close": f"{int(ch):02d}:{cm}"}

        for day in _expand_days(days_part):
            hours[day] = dict(entry)
    return hours


def _first_present(df: pd.DataFrame, columns: List[str]) -> str | None:
    for col in columns:
        if col in df.columns:
            return col
    return None


def _value(row: pd.Series, col: str | None, default: Any = None) -> Any:
    if col is None:
        return default
    value = row[col]
    if not isinstance(value, (list, dict)) and pd.isna(value):
        return default
    return value


def load_seed(path: Path) -> List[Restaurant]:
    """
    Load the seed restaurant collection from CSV.

    Steps:
    - Resolve column names, accepting the historical spellings.
    - Normalize ratings and parse free-text opening hours.
    - Validate every row into a ``Restaurant``.
    - Reject duplicate ids.
    """
    df = pd.read_csv(path)

    col_id = _first_present(df, ["id", "restaurant_id"])
    col_name = _first_present(df, ["name", "restaurant_name"])
    col_cuisine = _first_present(df, ["cuisine", "cuisines"])
    col_address = _first_present(df, ["address", "full_address", "location"])
    col_rating = _first_present(df, ["rating", "rate", "avg_rating"])
    col_price = _first_present(df, ["price_range", "priceRange", "price", "budget"])
    col_hours = _first_present(df, ["hours_of_operation", "opening_hours", "hours"])
    col_max = _first_present(df, ["max_guests", "maxGuests", "capacity"])
    col_curr = _first_present(df, ["curr_guests", "currGuests"])
    col_description = _first_present(df, ["description"])

    restaurants: List[Restaurant] = []
    for position, (_, row) in enumerate(df.iterrows(), start=1):
        restaurants.append(Restaurant(
            id=int(_value(row, col_id, position)),
            name=str(_value(row, col_name, "")),
            cuisine=str(_value(row, col_cuisine, "")),
            address=str(_value(row, col_address, "")),
            rating=_normalize_rating(_value(row, col_rating)),
            price_range=_value(row, col_price),
            opening_hours=parse_hours(_value(row, col_hours)),
            max_guests=int(_value(row, col_max, 50)),
            curr_guests=int(_value(row, col_curr, 0)),
            description=_value(row, col_description),
        ))

    seen: set[int] = set()
    for restaurant in restaurants:
        if restaurant.id in seen:
            raise ValueError(f"Duplicate restaurant id {restaurant.id} in {path}")
        seen.add(restaurant.id)
    return restaurants
