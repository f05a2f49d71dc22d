from __future__ import annotations

import datetime as dt
import itertools
import logging
from typing import Any

from ..availability.dates import parse_date, parse_time
from ..availability.predicates import has_capacity_for
from ..availability.schedule import is_open
from ..errors import CapacityExceededError, ClosedError, NotFoundError, ValidationError
from ..restaurants.models import Restaurant
from ..restaurants.store import RestaurantStore
from .models import Reservation

logger = logging.getLogger(__name__)


def _positive_int(value: Any, field: str) -> int:
    try:
        number = int(str(value).strip())
    except ValueError:
        raise ValidationError(f"{field} must be a positive integer") from None
    if isinstance(value, bool) or number <= 0:
        raise ValidationError(f"{field} must be a positive integer")
    return number


class ReservationLedger:
    """Accepts reservations against a store and keeps their history.

    The restaurant's ``curr_guests`` counter is the capacity source of truth;
    each accepted request also leaves a ``Reservation`` record behind.
    """

    def __init__(self, store: RestaurantStore) -> None:
        self._store = store
        self._reservations: list[Reservation] = []
        self._ids = itertools.count(1)

    def book(
        self,
        restaurant_id: Any,
        date: Any,
        time: Any,
        num_guests: Any,
        today: dt.date | None = None,
    ) -> tuple[Restaurant, Reservation]:
        """Run every reservation check in order and apply the booking.

        Checks short-circuit on the first failure and leave the store
        untouched: inputs, date, existence, opening hours, capacity.
        """
        if restaurant_id is None or date is None or time is None or num_guests is None:
            raise ValidationError(
                "restaurantId, date, time and numGuests are all required"
            )
        restaurant_id = _positive_int(restaurant_id, "restaurantId")
        num_guests = _positive_int(num_guests, "numGuests")
        time = parse_time(time)
        day = parse_date(date, today=today)

        with self._store.lock:
            restaurant = self._store.find_by_id(restaurant_id)
            if restaurant is None:
                raise NotFoundError(f"Restaurant with ID {restaurant_id} not found")

            if not is_open(restaurant, day, time):
                logger.warning(
                    "Rejected reservation: restaurant %d closed on %s at %s",
                    restaurant_id, date, time,
                )
                raise ClosedError(
                    f"{restaurant.name} is closed on {date} at {time}"
                )

            if not has_capacity_for(restaurant, num_guests):
                logger.warning(
                    "Rejected reservation: restaurant %d has %d seats left, %d requested",
                    restaurant_id, restaurant.remaining_capacity, num_guests,
                )
                raise CapacityExceededError(
                    f"{restaurant.name} has only {restaurant.remaining_capacity} "
                    f"seats left, {num_guests} requested"
                )

            restaurant.curr_guests += num_guests
            reservation = Reservation(
                id=next(self._ids),
                restaurant_id=restaurant_id,
                date=date,
                time=time,
                num_guests=num_guests,
            )
            self._reservations.append(reservation)

        logger.info(
            "Reserved %d guests at restaurant %d for %s %s (now %d/%d)",
            num_guests, restaurant_id, date, time,
            restaurant.curr_guests, restaurant.max_guests,
        )
        return restaurant, reservation

    def reserve(
        self,
        restaurant_id: Any,
        date: Any,
        time: Any,
        num_guests: Any,
        today: dt.date | None = None,
    ) -> Restaurant:
        restaurant, _ = self.book(restaurant_id, date, time, num_guests, today=today)
        return restaurant

    def all(self) -> list[Reservation]:
        with self._store.lock:
            return list(self._reservations)

    def reservations_for(self, restaurant_id: int) -> list[Reservation]:
        with self._store.lock:
            return [r for r in self._reservations if r.restaurant_id == restaurant_id]

    def forget(self, restaurant_id: int) -> None:
        """Drop the history of a deleted restaurant."""
        with self._store.lock:
            self._reservations = [
                r for r in self._reservations if r.restaurant_id != restaurant_id
            ]
