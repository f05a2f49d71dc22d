"""
Availability rules shared by search and reservations.

Responsibilities:
- Validate requested dates and times.
- Decide whether a restaurant is open at a given moment.
- Provide the pure per-restaurant predicates used to filter results.
"""
