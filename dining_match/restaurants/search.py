from __future__ import annotations

from datetime import date
from typing import Any, Callable, Iterable

from ..availability.dates import parse_date, parse_time
from ..availability.predicates import (
    has_capacity_for,
    matches_budget,
    matches_cuisine,
    matches_location,
    meets_rating,
)
from ..availability.schedule import is_open
from ..errors import ValidationError
from .models import Restaurant, SearchCriteria
from .store import validate_payload

Predicate = Callable[[Restaurant], bool]


def build_predicates(
    criteria: SearchCriteria, today: date | None = None,
) -> list[Predicate]:
    """Translate the supplied criteria into restaurant predicates.

    Date and time travel together: one without the other is rejected rather
    than silently dropped. Validation runs before any filtering so a bad
    date aborts the whole search.
    """
    predicates: list[Predicate] = []

    if bool(criteria.date) != bool(criteria.time):
        raise ValidationError("Date and time must be provided together")
    if criteria.date and criteria.time:
        day = parse_date(criteria.date, today=today)
        time = parse_time(criteria.time)
        predicates.append(lambda r: is_open(r, day, time))

    if criteria.cuisine:
        predicates.append(lambda r: matches_cuisine(r, criteria.cuisine))
    if criteria.budget:
        predicates.append(lambda r: matches_budget(r, criteria.budget))
    if criteria.location:
        predicates.append(lambda r: matches_location(r, criteria.location))
    if criteria.rating is not None:
        predicates.append(lambda r: meets_rating(r, criteria.rating))
    if criteria.num_guests is not None:
        predicates.append(lambda r: has_capacity_for(r, criteria.num_guests))

    return predicates


def search(
    collection: Iterable[Restaurant],
    criteria: SearchCriteria | dict[str, Any] | None = None,
    today: date | None = None,
) -> list[Restaurant]:
    """Return the restaurants matching every supplied criterion, in input order."""
    criteria = validate_payload(SearchCriteria, criteria or {})
    predicates = build_predicates(criteria, today=today)
    return [r for r in collection if all(p(r) for p in predicates)]
