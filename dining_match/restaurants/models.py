from __future__ import annotations

import re
from typing import Annotated, Any, Literal

from pydantic import (
    AfterValidator,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    field_validator,
    model_validator,
)
from pydantic.alias_generators import to_camel

PriceRange = Literal["$", "$$", "$$$", "$$$$"]
Weekday = Literal[
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
]

WEEKDAYS: tuple[str, ...] = (
    "Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday",
)
TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"

_STREET_NUMBER = re.compile(r"^(?P<street>.*?)\s+(?P<number>\d+[A-Za-z]?)$")


class CamelModel(BaseModel):
    """Accepts snake_case or camelCase input, serialises as camelCase."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class Address(CamelModel):
    street: str = ""
    number: str = ""
    city: str = ""

    @field_validator("number", mode="before")
    @classmethod
    def _number_as_text(cls, value: Any) -> Any:
        if isinstance(value, int):
            return str(value)
        return value

    @classmethod
    def parse(cls, text: str) -> Address:
        """Split ``"HaNamal St 12, Tel Aviv"`` into street, number and city."""
        text = text.strip()
        street_part, sep, city = text.rpartition(",")
        if not sep:
            street_part, city = text, ""
        match = _STREET_NUMBER.match(street_part.strip())
        if match:
            return cls(street=match["street"], number=match["number"], city=city)
        return cls(street=street_part, city=city)

    def render(self) -> str:
        street = " ".join(p for p in (self.street, self.number) if p)
        return ", ".join(p for p in (street, self.city) if p)


class DayHours(CamelModel):
    closed: bool = False
    open: str | None = Field(default=None, pattern=TIME_PATTERN)
    close: str | None = Field(default=None, pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def _require_window(self) -> DayHours:
        if not self.closed and (self.open is None or self.close is None):
            raise ValueError("open and close are required unless the day is closed")
        return self


def _parse_address(value: Any) -> Any:
    if isinstance(value, str):
        if not value.strip():
            raise ValueError("Address is required and must be a non-empty string")
        return Address.parse(value)
    return value


def _address_not_blank(value: Address) -> Address:
    if not value.render():
        raise ValueError("Address is required and must not be empty")
    return value


def _capitalize_days(value: Any) -> Any:
    if isinstance(value, dict):
        return {str(day).strip().capitalize(): hours for day, hours in value.items()}
    return value


AddressField = Annotated[
    Address, BeforeValidator(_parse_address), AfterValidator(_address_not_blank)
]
OpeningHours = Annotated[dict[Weekday, DayHours], BeforeValidator(_capitalize_days)]


class RestaurantCreate(CamelModel):
    name: str = Field(..., min_length=1)
    cuisine: str = Field(..., min_length=1)
    address: AddressField
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    price_range: PriceRange | None = None
    opening_hours: OpeningHours = Field(default_factory=dict)
    max_guests: int = Field(default=50, ge=0)
    curr_guests: int = Field(default=0, ge=0)
    image_url: str | None = None
    phone_number: str | None = None
    website: str | None = None
    description: str | None = None
    dietary_options: list[str] = Field(default_factory=list)
    features: list[str] = Field(default_factory=list)

    @model_validator(mode="after")
    def _guests_within_capacity(self):
        if self.curr_guests > self.max_guests:
            raise ValueError(
                f"currGuests ({self.curr_guests}) cannot exceed maxGuests ({self.max_guests})"
            )
        return self


class Restaurant(RestaurantCreate):
    id: int

    @property
    def remaining_capacity(self) -> int:
        return self.max_guests - self.curr_guests


class RestaurantUpdate(CamelModel):
    """Partial update; only explicitly supplied fields are merged."""

    name: str | None = Field(default=None, min_length=1)
    cuisine: str | None = Field(default=None, min_length=1)
    address: AddressField | None = None
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    price_range: PriceRange | None = None
    opening_hours: OpeningHours | None = None
    max_guests: int | None = Field(default=None, ge=0)
    curr_guests: int | None = Field(default=None, ge=0)
    image_url: str | None = None
    phone_number: str | None = None
    website: str | None = None
    description: str | None = None
    dietary_options: list[str] | None = None
    features: list[str] | None = None


class SearchCriteria(CamelModel):
    cuisine: str | None = None
    date: str | None = None
    time: str | None = None
    budget: PriceRange | None = None
    location: str | None = None
    rating: float | None = Field(default=None, ge=0.0, le=5.0)
    num_guests: int | None = Field(default=None, gt=0)

    def active_filters(self) -> list[str]:
        return [name for name, value in self.model_dump().items() if value not in (None, "")]


class RestaurantResponse(BaseModel):
    success: bool = True
    message: str | None = None
    data: Restaurant


class RestaurantListResponse(BaseModel):
    success: bool = True
    count: int
    data: list[Restaurant]
