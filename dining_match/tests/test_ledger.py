from concurrent.futures import ThreadPoolExecutor
from datetime import timedelta

import pytest

from dining_match.availability.dates import utc_today
from dining_match.errors import (
    CapacityExceededError,
    ClosedError,
    NotFoundError,
    ValidationError,
)
from dining_match.reservations.ledger import ReservationLedger
from dining_match.restaurants.models import WEEKDAYS, Restaurant
from dining_match.restaurants.store import RestaurantStore


def _next(day_name: str) -> str:
    today = utc_today()
    offset = (WEEKDAYS.index(day_name) - (today.weekday() + 1) % 7) % 7 or 7
    return (today + timedelta(days=offset)).isoformat()


def _ledger() -> tuple[RestaurantStore, ReservationLedger]:
    store = RestaurantStore([
        Restaurant(
            id=1,
            name="Chef Yam",
            cuisine="Seafood",
            address="HaNamal St 12, Tel Aviv",
            max_guests=60,
            curr_guests=0,
            opening_hours={
                "Monday": {"open": "12:00", "close": "23:00"},
                "Saturday": {"closed": True},
            },
        ),
    ])
    return store, ReservationLedger(store)


def test_reserve_then_capacity_exceeded():
    store, ledger = _ledger()
    monday = _next("Monday")

    updated = ledger.reserve(1, monday, "13:00", 10)
    assert updated.curr_guests == 10
    assert store.find_by_id(1).curr_guests == 10

    with pytest.raises(CapacityExceededError):
        ledger.reserve(1, monday, "13:00", 55)
    assert store.find_by_id(1).curr_guests == 10


def test_reserve_updates_stored_record_in_place():
    store, ledger = _ledger()
    stored = store.find_by_id(1)
    updated = ledger.reserve(1, _next("Monday"), "13:00", 4)
    assert updated is stored


def test_exact_remaining_capacity_is_accepted():
    store, ledger = _ledger()
    monday = _next("Monday")
    ledger.reserve(1, monday, "13:00", 50)
    ledger.reserve(1, monday, "14:00", 10)
    assert store.find_by_id(1).curr_guests == 60
    with pytest.raises(CapacityExceededError):
        ledger.reserve(1, monday, "14:00", 1)


def test_closed_day_rejected_without_state_change():
    store, ledger = _ledger()
    with pytest.raises(ClosedError):
        ledger.reserve(1, _next("Saturday"), "13:00", 2)
    assert store.find_by_id(1).curr_guests == 0
    assert ledger.all() == []


def test_outside_hours_rejected():
    _, ledger = _ledger()
    with pytest.raises(ClosedError):
        ledger.reserve(1, _next("Monday"), "23:00", 2)
    with pytest.raises(ClosedError):
        ledger.reserve(1, _next("Tuesday"), "13:00", 2)


def test_unknown_restaurant():
    _, ledger = _ledger()
    with pytest.raises(NotFoundError):
        ledger.reserve(99, _next("Monday"), "13:00", 2)


def test_date_checked_before_existence():
    _, ledger = _ledger()
    with pytest.raises(ValidationError):
        ledger.reserve(99, "2000-01-03", "13:00", 2)


@pytest.mark.parametrize(
    "args",
    [
        (None, "MONDAY", "13:00", 2),
        (1, None, "13:00", 2),
        (1, "MONDAY", None, 2),
        (1, "MONDAY", "13:00", None),
        (1, "MONDAY", "13:00", 0),
        (1, "MONDAY", "13:00", -3),
        (1, "MONDAY", "13:00", "many"),
        (1, "MONDAY", "13:00", True),
        ("abc", "MONDAY", "13:00", 2),
        (1, "MONDAY", "1pm", 2),
        (1, "2024-13-01", "13:00", 2),
    ],
)
def test_invalid_inputs(args):
    store, ledger = _ledger()
    args = tuple(_next("Monday") if a == "MONDAY" else a for a in args)
    with pytest.raises(ValidationError):
        ledger.reserve(*args)
    assert store.find_by_id(1).curr_guests == 0


def test_numeric_strings_are_coerced():
    _, ledger = _ledger()
    updated = ledger.reserve("1", _next("Monday"), "13:00", "3")
    assert updated.curr_guests == 3


def test_history_records_accepted_reservations_only():
    _, ledger = _ledger()
    monday = _next("Monday")
    _, first = ledger.book(1, monday, "13:00", 2)
    with pytest.raises(CapacityExceededError):
        ledger.book(1, monday, "13:00", 100)
    _, second = ledger.book(1, monday, "19:30", 4)

    assert [r.id for r in ledger.all()] == [first.id, second.id]
    assert second.id == first.id + 1
    assert first.restaurant_id == 1
    assert first.date == monday
    assert second.num_guests == 4
    assert [r.id for r in ledger.reservations_for(1)] == [1, 2]
    assert ledger.reservations_for(2) == []


def test_forget_drops_history_but_keeps_ids_monotonic():
    _, ledger = _ledger()
    monday = _next("Monday")
    ledger.book(1, monday, "13:00", 2)
    ledger.forget(1)
    assert ledger.all() == []
    _, again = ledger.book(1, monday, "13:00", 2)
    assert again.id == 2


def test_concurrent_reservations_never_overbook():
    store, ledger = _ledger()
    monday = _next("Monday")

    def attempt(_):
        try:
            ledger.reserve(1, monday, "13:00", 7)
        except CapacityExceededError:
            return False
        return True

    with ThreadPoolExecutor(max_workers=16) as pool:
        outcomes = list(pool.map(attempt, range(200)))

    accepted = sum(outcomes)
    restaurant = store.find_by_id(1)
    assert accepted == 60 // 7
    assert restaurant.curr_guests == accepted * 7 <= restaurant.max_guests
    assert len(ledger.all()) == accepted
