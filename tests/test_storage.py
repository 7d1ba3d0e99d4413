"""
Smoke tests for the JSON file and SQL snapshot backends.
"""
from __future__ import annotations

import json
import sys
from datetime import date
from decimal import Decimal
from pathlib import Path

import pytest

# Garante que o pacote cleanmaster seja importável durante os testes locais
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from cleanmaster.core import config as core_config  # noqa: E402
from cleanmaster.db import session as db_session  # noqa: E402
from cleanmaster.domain.records import Customer, Order, Payment  # noqa: E402
from cleanmaster.repositories.storage import JSONFileStorage, SQLStorage, StorageError  # noqa: E402
from cleanmaster.repositories.store import CUSTOMERS_KEY, Store  # noqa: E402


@pytest.fixture()
def temp_db(tmp_path, monkeypatch):
    """Configura um SQLite temporário e garante teardown completo."""
    db_file = tmp_path / "test.db"
    monkeypatch.setenv("DATABASE_URL", f"sqlite:///{db_file}")
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]

    yield db_file

    try:
        db_session.get_engine().dispose()
    except Exception:
        pass
    core_config.get_settings.cache_clear()
    db_session.get_engine.cache_clear()
    db_session._get_sessionmaker.cache_clear()  # type: ignore[attr-defined]


def _populate(store: Store) -> None:
    customer = Customer(name="Alice", contact="555-0100", address="1 Main St")
    order = Order(customer_id=customer.id, item_type="Shirt", quantity=3, order_date=date(2024, 6, 1))
    store.customers.add(customer)
    store.orders.add(order)
    store.payments.add(Payment(order_id=order.id, amount=Decimal("15.00"), payment_date=date(2024, 6, 2)))


def test_json_file_missing_reads_none(tmp_path):
    storage = JSONFileStorage(tmp_path / "data.json")
    assert storage.read(CUSTOMERS_KEY) is None


def test_json_file_keeps_slots_side_by_side(tmp_path):
    path = tmp_path / "nested" / "data.json"
    storage = JSONFileStorage(path)
    storage.write("Customers", "[]")
    storage.write("Orders", '[{"id": "o"}]')

    data = json.loads(path.read_text(encoding="utf-8"))
    assert data == {"Customers": "[]", "Orders": '[{"id": "o"}]'}
    assert storage.read("Orders") == '[{"id": "o"}]'
    assert [p.name for p in path.parent.iterdir()] == ["data.json"]


def test_json_file_corrupt_read_raises_and_write_recovers(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("{broken", encoding="utf-8")
    storage = JSONFileStorage(path)
    with pytest.raises(StorageError):
        storage.read(CUSTOMERS_KEY)

    storage.write(CUSTOMERS_KEY, "[]")
    assert storage.read(CUSTOMERS_KEY) == "[]"


def test_store_survives_restart_on_json_file(tmp_path):
    path = tmp_path / "data.json"
    store = Store(JSONFileStorage(path))
    _populate(store)

    restarted = Store(JSONFileStorage(path))
    assert [c.items for c in restarted.collections] == [c.items for c in store.collections]


def test_store_with_corrupt_file_starts_empty(tmp_path):
    path = tmp_path / "data.json"
    path.write_text("[]", encoding="utf-8")
    store = Store(JSONFileStorage(path))
    assert len(store.customers) == 0


def test_sql_storage_round_trip(temp_db):
    storage = SQLStorage()
    assert storage.read(CUSTOMERS_KEY) is None
    storage.write(CUSTOMERS_KEY, "[]")
    storage.write(CUSTOMERS_KEY, '[{"id": "1"}]')
    assert storage.read(CUSTOMERS_KEY) == '[{"id": "1"}]'


def test_store_survives_restart_on_sql(temp_db):
    store = Store(SQLStorage())
    _populate(store)
    store.customers.replace(Customer(name="Alicia", id=store.customers.items[0].id))

    restarted = Store(SQLStorage())
    assert restarted.customers.items[0].name == "Alicia"
    assert [c.items for c in restarted.collections] == [c.items for c in store.collections]
