"""Entity types for customers, orders and payments."""
from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal

SERVICE_TYPES = ("Dry Cleaning", "Laundry", "Alterations", "Pressing")
ORDER_STATUSES = ("Pending", "In Process", "Completed")
PAYMENT_STATUSES = ("Paid", "Unpaid")
PAYMENT_METHODS = ("Cash", "Card", "Online")

DEFAULT_SERVICE_TYPE = "Dry Cleaning"
DEFAULT_ORDER_STATUS = "Pending"
DEFAULT_PAYMENT_STATUS = "Unpaid"
DEFAULT_PAYMENT_METHOD = "Cash"

MIN_QUANTITY = 1
MAX_QUANTITY = 100


def new_id() -> str:
    """Return a fresh entity identifier."""
    return str(uuid.uuid4())


def as_date(value: date) -> date:
    """Drop the time part of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


@dataclass
class Customer:
    name: str
    contact: str = ""
    address: str = ""
    id: str = field(default_factory=new_id)


@dataclass
class Order:
    customer_id: str
    item_type: str
    quantity: int = MIN_QUANTITY
    service_type: str = DEFAULT_SERVICE_TYPE
    status: str = DEFAULT_ORDER_STATUS
    order_date: date = field(default_factory=date.today)
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        self.order_date = as_date(self.order_date)


@dataclass
class Payment:
    order_id: str
    amount: Decimal
    payment_date: date = field(default_factory=date.today)
    payment_status: str = DEFAULT_PAYMENT_STATUS
    payment_method: str = DEFAULT_PAYMENT_METHOD
    id: str = field(default_factory=new_id)

    def __post_init__(self) -> None:
        self.payment_date = as_date(self.payment_date)
