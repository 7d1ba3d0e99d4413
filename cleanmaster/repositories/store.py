"""
In-memory collections persisted as whole snapshots.

The ``Store`` owns the customers, orders and payments collections. Every
mutation rewrites the full snapshot of the touched collection before it
returns; subscribers are notified afterwards with a ``ChangeEvent``.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Generic, Iterable, Iterator, List, Optional, Tuple, Type, TypeVar

from cleanmaster.domain.codec import SnapshotDecodeError, decode_collection, encode_collection
from cleanmaster.domain.records import Customer, Order, Payment
from cleanmaster.repositories.storage import KeyValueStorage, StorageError

logger = logging.getLogger(__name__)

CUSTOMERS_KEY = "Customers"
ORDERS_KEY = "Orders"
PAYMENTS_KEY = "Payments"

T = TypeVar("T", Customer, Order, Payment)


class StoreError(Exception):
    """Base class for store misuse."""


class DuplicateIdError(StoreError):
    pass


class EntityNotFoundError(StoreError):
    pass


@dataclass(frozen=True)
class ChangeEvent:
    collection: str
    action: str
    entity_ids: Tuple[str, ...]
    persisted: bool


Listener = Callable[[ChangeEvent], None]


class Collection(Generic[T]):
    """One entity type bound to one storage slot."""

    def __init__(self, key: str, entity_type: Type[T], storage: KeyValueStorage) -> None:
        self.key = key
        self.entity_type = entity_type
        self.storage = storage
        self._items: List[T] = []
        self._listeners: List[Listener] = []

    # -------------------------- reads --------------------------
    def __iter__(self) -> Iterator[T]:
        return iter(list(self._items))

    def __len__(self) -> int:
        return len(self._items)

    @property
    def items(self) -> Tuple[T, ...]:
        return tuple(self._items)

    def index_of(self, entity_id: str) -> Optional[int]:
        for index, item in enumerate(self._items):
            if item.id == entity_id:
                return index
        return None

    def get(self, entity_id: str) -> Optional[T]:
        index = self.index_of(entity_id)
        return self._items[index] if index is not None else None

    # -------------------------- mutations --------------------------
    def add(self, entity: T) -> bool:
        if self.index_of(entity.id) is not None:
            raise DuplicateIdError(f"{self.key}: id {entity.id} already exists")
        self._items.append(entity)
        return self._commit("add", (entity.id,))

    def delete(self, positions: Iterable[int]) -> bool:
        targets = sorted(set(positions), reverse=True)
        size = len(self._items)
        for position in targets:
            if not 0 <= position < size:
                raise IndexError(f"{self.key}: position {position} out of range")
        removed = [self._items.pop(position).id for position in targets]
        removed.reverse()
        return self._commit("delete", tuple(removed))

    def delete_by_id(self, entity_id: str) -> bool:
        index = self.index_of(entity_id)
        if index is None:
            raise EntityNotFoundError(f"{self.key}: id {entity_id} not found")
        return self.delete([index])

    def replace(self, entity: T) -> bool:
        """Overwrite the entity with the same id; no-op returning False when absent."""
        index = self.index_of(entity.id)
        if index is None:
            return False
        self._items[index] = entity
        self._commit("replace", (entity.id,))
        return True

    # -------------------------- persistence --------------------------
    def load(self) -> None:
        try:
            raw = self.storage.read(self.key)
        except StorageError as exc:
            logger.warning("Could not read %s, starting empty: %s", self.key, exc)
            self._items = []
            return
        if raw is None:
            logger.debug("No snapshot for %s yet", self.key)
            self._items = []
            return
        try:
            self._items = decode_collection(self.entity_type, raw)
        except SnapshotDecodeError as exc:
            logger.warning("Malformed snapshot for %s, starting empty: %s", self.key, exc)
            self._items = []
            return
        logger.debug("Loaded %d entries from %s", len(self._items), self.key)

    def save(self) -> bool:
        """Write the full collection; returns False when the write failed."""
        try:
            self.storage.write(self.key, encode_collection(self._items))
        except (StorageError, TypeError, ValueError, AttributeError) as exc:
            logger.warning("Could not persist %s: %s", self.key, exc)
            return False
        logger.debug("Saved %d entries to %s", len(self._items), self.key)
        return True

    # -------------------------- observers --------------------------
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _commit(self, action: str, entity_ids: Tuple[str, ...]) -> bool:
        persisted = self.save()
        event = ChangeEvent(self.key, action, entity_ids, persisted)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception:
                logger.exception("Listener failed for %s %s", self.key, action)
        return persisted


class Store:
    """Owns the three collections for the lifetime of the process."""

    def __init__(self, storage: KeyValueStorage) -> None:
        self.storage = storage
        self.customers: Collection[Customer] = Collection(CUSTOMERS_KEY, Customer, storage)
        self.orders: Collection[Order] = Collection(ORDERS_KEY, Order, storage)
        self.payments: Collection[Payment] = Collection(PAYMENTS_KEY, Payment, storage)
        self.reload()

    @property
    def collections(self) -> Tuple[Collection, ...]:
        return (self.customers, self.orders, self.payments)

    def reload(self) -> None:
        for collection in self.collections:
            collection.load()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Subscribe to changes of every collection."""
        handles = [collection.subscribe(listener) for collection in self.collections]

        def unsubscribe() -> None:
            for handle in handles:
                handle()

        return unsubscribe
