"""
Dining Match restaurant discovery service.

Responsibilities:
- Keep the in-memory restaurant collection and its reservation history.
- Search restaurants by cuisine, budget, location, rating, capacity and opening hours.
- Expose the collection over a small JSON HTTP API.
"""
