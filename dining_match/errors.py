from __future__ import annotations


class DiningError(Exception):
    """Base class for expected, caller-recoverable failures."""

    status_code: int = 400

    def __init__(self, message: str, errors: list[str] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.errors = errors or []


class ValidationError(DiningError):
    status_code = 400


class NotFoundError(DiningError):
    status_code = 404


class ClosedError(DiningError):
    status_code = 409


class CapacityExceededError(DiningError):
    status_code = 409
