"""
Key-value persistence adapters.

Each adapter stores one snapshot string per slot key ("Customers", "Orders",
"Payments"). ``read`` returns ``None`` for a slot that was never written and
raises ``StorageError`` when the backing medium cannot be read or written.
"""

from __future__ import annotations

import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Dict, Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError

from cleanmaster.db.create_tables import create_all
from cleanmaster.db.models import Snapshot
from cleanmaster.db.session import get_engine, get_session

logger = logging.getLogger(__name__)


class StorageError(Exception):
    """Raised when the storage medium fails."""


class KeyValueStorage(Protocol):
    def read(self, key: str) -> Optional[str]:
        ...

    def write(self, key: str, value: str) -> None:
        ...


class MemoryStorage:
    """Dict-backed storage, useful for tests and throwaway sessions."""

    def __init__(self, initial: Optional[Dict[str, str]] = None) -> None:
        self.slots: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> Optional[str]:
        return self.slots.get(key)

    def write(self, key: str, value: str) -> None:
        self.slots[key] = value


class JSONFileStorage:
    """All slots kept in a single JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _load_all(self) -> dict:
        if not self.path.exists():
            return {}
        try:
            with self.path.open("r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as exc:
            raise StorageError(f"cannot read {self.path}: {exc}") from exc
        if not isinstance(data, dict):
            raise StorageError(f"{self.path} does not hold a JSON object")
        return data

    def read(self, key: str) -> Optional[str]:
        value = self._load_all().get(key)
        if value is None:
            return None
        if not isinstance(value, str):
            raise StorageError(f"slot {key} in {self.path} is not a string")
        return value

    def write(self, key: str, value: str) -> None:
        try:
            data = self._load_all()
        except StorageError as exc:
            logger.warning("Discarding unreadable data file before write: %s", exc)
            data = {}
        data[key] = value
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    json.dump(data, f, ensure_ascii=False, indent=2)
                os.replace(tmp_name, self.path)
            except BaseException:
                if os.path.exists(tmp_name):
                    os.unlink(tmp_name)
                raise
        except OSError as exc:
            raise StorageError(f"cannot write {self.path}: {exc}") from exc


class SQLStorage:
    """Slots stored as rows of the ``snapshots`` table."""

    def __init__(self, url: Optional[str] = None, *, create_tables: bool = True) -> None:
        self.engine = get_engine(url)
        if create_tables:
            try:
                create_all(self.engine)
            except SQLAlchemyError as exc:
                raise StorageError(f"cannot prepare snapshot table: {exc}") from exc

    def read(self, key: str) -> Optional[str]:
        try:
            with get_session(self.engine) as session:
                row = session.get(Snapshot, key)
                return row.value if row else None
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot read slot {key}: {exc}") from exc

    def write(self, key: str, value: str) -> None:
        try:
            with get_session(self.engine) as session:
                row = session.get(Snapshot, key)
                if row is None:
                    session.add(Snapshot(key=key, value=value))
                else:
                    row.value = value
        except SQLAlchemyError as exc:
            raise StorageError(f"cannot write slot {key}: {exc}") from exc
