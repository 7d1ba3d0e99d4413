"""
JSON snapshot codec.

A snapshot is a UTF-8 JSON array of objects keyed by the camelCase field names
of the entity, ``id`` included. Dates are ISO ``YYYY-MM-DD`` strings and money
amounts are decimal strings so that decoding reproduces the exact value.
"""
from __future__ import annotations

import json
from datetime import date
from decimal import Decimal, InvalidOperation
from typing import Any, Iterable, Type, TypeVar

from cleanmaster.domain.records import Customer, Order, Payment, as_date

T = TypeVar("T", Customer, Order, Payment)


class SnapshotDecodeError(ValueError):
    """Raised when a stored snapshot cannot be turned back into entities."""


# attribute -> (json key, kind)
_FIELDS: dict[type, tuple[tuple[str, str, str], ...]] = {
    Customer: (
        ("id", "id", "str"),
        ("name", "name", "str"),
        ("contact", "contact", "str"),
        ("address", "address", "str"),
    ),
    Order: (
        ("id", "id", "str"),
        ("customer_id", "customerId", "str"),
        ("item_type", "itemType", "str"),
        ("quantity", "quantity", "int"),
        ("service_type", "serviceType", "str"),
        ("status", "status", "str"),
        ("order_date", "orderDate", "date"),
    ),
    Payment: (
        ("id", "id", "str"),
        ("order_id", "orderId", "str"),
        ("amount", "amount", "decimal"),
        ("payment_date", "paymentDate", "date"),
        ("payment_status", "paymentStatus", "str"),
        ("payment_method", "paymentMethod", "str"),
    ),
}


def _dump_value(value: Any, kind: str) -> Any:
    if kind == "date":
        return as_date(value).isoformat()
    if kind == "decimal":
        return str(value)
    return value


def _load_value(raw: Any, kind: str, key: str) -> Any:
    if kind == "str":
        if not isinstance(raw, str):
            raise SnapshotDecodeError(f"{key}: expected string")
        return raw
    if kind == "int":
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise SnapshotDecodeError(f"{key}: expected integer")
        return raw
    if kind == "date":
        try:
            return date.fromisoformat(raw)
        except (TypeError, ValueError) as exc:
            raise SnapshotDecodeError(f"{key}: expected ISO date") from exc
    if kind == "decimal":
        if isinstance(raw, bool) or not isinstance(raw, (str, int, float)):
            raise SnapshotDecodeError(f"{key}: expected decimal")
        try:
            value = Decimal(str(raw))
        except InvalidOperation as exc:
            raise SnapshotDecodeError(f"{key}: expected decimal") from exc
        if not value.is_finite():
            raise SnapshotDecodeError(f"{key}: expected finite decimal")
        return value
    raise SnapshotDecodeError(f"{key}: unknown field kind {kind}")


def to_dict(entity: T) -> dict:
    fields = _FIELDS[type(entity)]
    return {key: _dump_value(getattr(entity, attr), kind) for attr, key, kind in fields}


def from_dict(entity_type: Type[T], payload: Any) -> T:
    if not isinstance(payload, dict):
        raise SnapshotDecodeError(f"{entity_type.__name__}: expected object")
    values = {}
    for attr, key, kind in _FIELDS[entity_type]:
        if key not in payload:
            raise SnapshotDecodeError(f"{entity_type.__name__}: missing {key}")
        values[attr] = _load_value(payload[key], kind, key)
    return entity_type(**values)


def encode_collection(items: Iterable[T]) -> str:
    """Serialize a whole collection into one snapshot string."""
    return json.dumps([to_dict(item) for item in items], ensure_ascii=False)


def decode_collection(entity_type: Type[T], text: str | bytes) -> list[T]:
    """Parse a snapshot produced by ``encode_collection``."""
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise SnapshotDecodeError("snapshot is not valid UTF-8") from exc
    try:
        payload = json.loads(text)
    except (TypeError, ValueError) as exc:
        raise SnapshotDecodeError("snapshot is not valid JSON") from exc
    if not isinstance(payload, list):
        raise SnapshotDecodeError("snapshot must be a JSON array")
    items = [from_dict(entity_type, item) for item in payload]
    seen: set[str] = set()
    for item in items:
        if item.id in seen:
            raise SnapshotDecodeError(f"{entity_type.__name__}: duplicate id {item.id}")
        seen.add(item.id)
    return items
