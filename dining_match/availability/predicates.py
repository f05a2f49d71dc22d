from __future__ import annotations

from ..restaurants.models import Restaurant


def matches_cuisine(restaurant: Restaurant, query: str) -> bool:
    return query.strip().lower() in restaurant.cuisine.lower()


def matches_budget(restaurant: Restaurant, budget: str) -> bool:
    return restaurant.price_range == budget


def matches_location(restaurant: Restaurant, query: str) -> bool:
    return query.strip().lower() in restaurant.address.render().lower()


def meets_rating(restaurant: Restaurant, min_rating: float) -> bool:
    return restaurant.rating is not None and restaurant.rating >= min_rating


def has_capacity_for(restaurant: Restaurant, num_guests: int) -> bool:
    if num_guests <= 0:
        return False
    return restaurant.max_guests - restaurant.curr_guests >= num_guests
