"""
Persistence adapters and the in-memory store.

Storage backends only know about slot keys and snapshot strings; the Store
turns those snapshots into entity collections.
"""

from .storage import JSONFileStorage, KeyValueStorage, MemoryStorage, SQLStorage, StorageError
from .store import ChangeEvent, Collection, DuplicateIdError, EntityNotFoundError, Store, StoreError

__all__ = [
    "ChangeEvent",
    "Collection",
    "DuplicateIdError",
    "EntityNotFoundError",
    "JSONFileStorage",
    "KeyValueStorage",
    "MemoryStorage",
    "SQLStorage",
    "Store",
    "StoreError",
    "StorageError",
]
