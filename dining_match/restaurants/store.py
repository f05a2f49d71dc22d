from __future__ import annotations

import logging
import threading
from typing import Any, Iterable, TypeVar

import pydantic
from pydantic import BaseModel

from ..errors import ValidationError
from .models import Restaurant, RestaurantCreate, RestaurantUpdate

logger = logging.getLogger(__name__)

_M = TypeVar("_M", bound=BaseModel)


def validate_payload(model: type[_M], data: _M | dict[str, Any]) -> _M:
    """Coerce *data* into *model*, reporting failures as ``ValidationError``."""
    if isinstance(data, model):
        return data
    try:
        return model.model_validate(data)
    except pydantic.ValidationError as exc:
        errors = [
            f"{'.'.join(str(p) for p in err['loc']) or 'body'}: {err['msg']}"
            for err in exc.errors()
        ]
        raise ValidationError("Validation failed", errors) from None


class RestaurantStore:
    """In-memory restaurant collection.

    Every mutation runs under ``lock`` so callers on worker threads see one
    writer at a time. Records are kept in insertion order.
    """

    def __init__(self, seed: Iterable[Restaurant] = ()) -> None:
        self.lock = threading.RLock()
        self._seed = [r.model_copy(deep=True) for r in seed]
        self._items: list[Restaurant] = [r.model_copy(deep=True) for r in self._seed]

    def __len__(self) -> int:
        return len(self._items)

    def all(self) -> list[Restaurant]:
        with self.lock:
            return list(self._items)

    def reset(self) -> None:
        """Drop every change and restore the seed collection."""
        with self.lock:
            self._items = [r.model_copy(deep=True) for r in self._seed]

    def _next_id(self) -> int:
        if not self._items:
            return 1
        return max(r.id for r in self._items) + 1

    def _index_of(self, restaurant_id: int) -> int | None:
        for i, r in enumerate(self._items):
            if r.id == restaurant_id:
                return i
        return None

    def insert(self, draft: RestaurantCreate | dict[str, Any]) -> Restaurant:
        draft = validate_payload(RestaurantCreate, draft)
        with self.lock:
            restaurant = Restaurant(id=self._next_id(), **draft.model_dump())
            self._items.append(restaurant)
        logger.info("Created restaurant %d (%s)", restaurant.id, restaurant.name)
        return restaurant

    def find_by_id(self, restaurant_id: int) -> Restaurant | None:
        with self.lock:
            index = self._index_of(restaurant_id)
            return None if index is None else self._items[index]

    def update(
        self, restaurant_id: int, patch: RestaurantUpdate | dict[str, Any],
    ) -> Restaurant | None:
        patch = validate_payload(RestaurantUpdate, patch)
        with self.lock:
            index = self._index_of(restaurant_id)
            if index is None:
                return None
            merged = {
                **self._items[index].model_dump(),
                **patch.model_dump(exclude_unset=True),
                "id": restaurant_id,
            }
            updated = validate_payload(Restaurant, merged)
            self._items[index] = updated
        logger.info("Updated restaurant %d", restaurant_id)
        return updated

    def delete(self, restaurant_id: int) -> bool:
        with self.lock:
            index = self._index_of(restaurant_id)
            if index is None:
                return False
            del self._items[index]
        logger.info("Deleted restaurant %d", restaurant_id)
        return True
