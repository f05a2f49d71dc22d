from __future__ import annotations

from datetime import datetime, timezone
from typing import Annotated, Any

from pydantic import BeforeValidator, Field

from ..restaurants.models import CamelModel, Restaurant


def _reject_bool(value: Any) -> Any:
    # JSON true/false would otherwise coerce to 1/0
    if isinstance(value, bool):
        raise ValueError("must be an integer, not a boolean")
    return value


StrictCount = Annotated[int, BeforeValidator(_reject_bool)]


class ReservationRequest(CamelModel):
    restaurant_id: StrictCount
    date: str = Field(..., min_length=1)
    time: str = Field(..., min_length=1)
    num_guests: StrictCount = Field(..., gt=0)


class Reservation(CamelModel):
    id: int
    restaurant_id: int
    date: str
    time: str
    num_guests: int
    created_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class ReservationResponse(CamelModel):
    success: bool = True
    message: str
    data: Restaurant
    reservation: Reservation
