from __future__ import annotations

import json
import math
from dataclasses import replace
from typing import Callable, Iterable, List, Optional

from db.models import CartLineItem
from utils.local_storage import LocalStorage, LocalStorageError
from utils.logger import get_logger

_logger = get_logger(__name__)

CART_STORAGE_KEY = "cart:v1"

CartListener = Callable[[List[CartLineItem]], None]


def item_count(items: Iterable[CartLineItem]) -> int:
    return sum(item.quantity for item in items)


def cart_total(items: Iterable[CartLineItem]) -> float:
    return sum(item.price * item.quantity for item in items)


class CartStore:
    """
    The shopping cart of the local session.

    Line items are merged on (id, size, name) and kept in insertion order.
    Every mutation writes the whole list to local storage under `cart:v1`,
    then notifies subscribers. Storage problems never surface to the caller:
    a bad snapshot restores as an empty cart, a failed write is only logged.
    """

    def __init__(self, storage: Optional[LocalStorage] = None):
        self._storage = storage
        self._listeners: List[CartListener] = []
        self._items: List[CartLineItem] = self._restore()

    @property
    def items(self) -> List[CartLineItem]:
        return list(self._items)

    @property
    def item_count(self) -> int:
        return item_count(self._items)

    @property
    def total(self) -> float:
        return cart_total(self._items)

    def __len__(self) -> int:
        return len(self._items)

    # ---------------------------
    # Mutations
    # ---------------------------

    def add_item(self, candidate: CartLineItem, quantity: Optional[int] = None) -> None:
        """
        Merge into the matching line item, or append a new one. The amount is
        `quantity` when given, otherwise the candidate's own quantity.
        """
        if quantity is None:
            quantity = candidate.quantity
        for i, item in enumerate(self._items):
            if item.merge_key == candidate.merge_key:
                self._items[i] = replace(item, quantity=item.quantity + quantity)
                break
        else:
            self._items.append(replace(candidate, quantity=quantity))
        self._commit()

    def remove_item(self, index: int) -> None:
        # filtering by position: an index that doesn't exist removes nothing
        self._items = [item for i, item in enumerate(self._items) if i != index]
        self._commit()

    def update_quantity(self, index: int, new_quantity: float) -> None:
        if not math.isfinite(new_quantity):
            qty = 1
        else:
            qty = max(1, math.floor(new_quantity))
        self._items = [
            replace(item, quantity=qty) if i == index else item
            for i, item in enumerate(self._items)
        ]
        self._commit()

    def clear(self) -> None:
        self._items = []
        self._commit()

    # ---------------------------
    # Subscriptions
    # ---------------------------

    def subscribe(self, callback: CartListener) -> Callable[[], None]:
        """Call `callback(items)` after every mutation. Returns an unsubscribe handle."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # ---------------------------
    # Persistence
    # ---------------------------

    def _restore(self) -> List[CartLineItem]:
        if self._storage is None:
            return []
        try:
            raw = self._storage.get_item(CART_STORAGE_KEY)
            if not raw:
                return []
            data = json.loads(raw)
            return [CartLineItem.from_dict(d) for d in data]
        except (
            LocalStorageError,
            ValueError,
            TypeError,
            KeyError,
            AttributeError,
        ) as e:
            _logger.warning(f"Discarding unreadable cart snapshot: {e}")
            return []

    def _persist(self) -> None:
        if self._storage is None:
            return
        try:
            self._storage.set_item(
                CART_STORAGE_KEY, json.dumps([i.to_dict() for i in self._items])
            )
        except LocalStorageError as e:
            _logger.warning(f"Failed to save cart to local storage: {e}")

    def _commit(self) -> None:
        self._persist()
        items = self.items
        for listener in list(self._listeners):
            listener(items)
