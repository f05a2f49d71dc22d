from __future__ import annotations

from collections import Counter
from typing import Any

_FILTERS = ("cuisine", "date", "budget", "location", "rating", "num_guests")


def compute_analytics(events: list[dict[str, Any]]) -> dict[str, Any]:
    searches = [e for e in events if e["type"] == "search"]
    reservations = [e for e in events if e["type"] == "reservation"]
    total = len(searches)

    # Average response time
    times = [s["response_time_ms"] for s in searches if "response_time_ms" in s]
    avg_time = round(sum(times) / len(times), 1) if times else 0.0

    # Top cuisines and locations
    cuisine_counter: Counter[str] = Counter()
    location_counter: Counter[str] = Counter()
    for s in searches:
        if s.get("cuisine"):
            cuisine_counter[s["cuisine"].lower()] += 1
        if s.get("location"):
            location_counter[s["location"].lower()] += 1
    top_cuisines = [{"name": n, "count": c} for n, c in cuisine_counter.most_common(10)]
    top_locations = [{"name": n, "count": c} for n, c in location_counter.most_common(10)]

    # Filter usage rates
    filter_counts = {name: 0 for name in _FILTERS}
    for s in searches:
        for name in s.get("filters", []):
            if name in filter_counts:
                filter_counts[name] += 1
    filter_usage = {
        k: round(v / total * 100, 1) if total else 0.0
        for k, v in filter_counts.items()
    }

    # Reservation outcomes
    outcomes: Counter[str] = Counter(r.get("outcome", "unknown") for r in reservations)
    guests_booked = sum(r.get("num_guests", 0) for r in reservations if r.get("outcome") == "accepted")

    return {
        "total_searches": total,
        "avg_response_time_ms": avg_time,
        "top_cuisines": top_cuisines,
        "top_locations": top_locations,
        "filter_usage": filter_usage,
        "reservations": {
            "total": len(reservations),
            "accepted": outcomes.get("accepted", 0),
            "rejected": len(reservations) - outcomes.get("accepted", 0),
            "by_outcome": dict(outcomes),
            "guests_booked": guests_booked,
        },
    }
