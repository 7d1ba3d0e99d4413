"""Order use cases."""

from __future__ import annotations

import logging
from datetime import date
from typing import Optional

from cleanmaster.core.config import REFERENCE_POLICY_CASCADE, Settings, get_settings
from cleanmaster.domain.records import (
    DEFAULT_ORDER_STATUS,
    DEFAULT_SERVICE_TYPE,
    MAX_QUANTITY,
    MIN_QUANTITY,
    Order,
    Payment,
)
from cleanmaster.repositories.store import Store
from cleanmaster.services.errors import InvalidFieldError, RecordNotFoundError, SelectionRequiredError

logger = logging.getLogger(__name__)


def validate_quantity(quantity) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int):
        raise InvalidFieldError("Quantity must be a whole number.", "quantity")
    if not MIN_QUANTITY <= quantity <= MAX_QUANTITY:
        raise InvalidFieldError(f"Quantity must be between {MIN_QUANTITY} and {MAX_QUANTITY}.", "quantity")
    return quantity


class OrderService:
    def __init__(self, store: Store, settings: Optional[Settings] = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    def create(
        self,
        customer_id: Optional[str],
        item_type: str,
        quantity: int = MIN_QUANTITY,
        service_type: str = DEFAULT_SERVICE_TYPE,
        status: str = DEFAULT_ORDER_STATUS,
        order_date: Optional[date] = None,
    ) -> Order:
        if not customer_id:
            raise SelectionRequiredError("Please select a customer")
        order = Order(
            customer_id=customer_id,
            item_type=(item_type or "").strip(),
            quantity=validate_quantity(quantity),
            service_type=service_type or DEFAULT_SERVICE_TYPE,
            status=status or DEFAULT_ORDER_STATUS,
            order_date=order_date or date.today(),
        )
        self.store.orders.add(order)
        return order

    def update(self, order: Order) -> Order:
        """Save an edited order; the id must still be present."""
        validate_quantity(order.quantity)
        if not self.store.orders.replace(order):
            raise RecordNotFoundError("Order not found.")
        return order

    def delete(self, order_id: str) -> None:
        if self.store.orders.index_of(order_id) is None:
            raise RecordNotFoundError("Order not found.")
        if self.settings.reference_policy == REFERENCE_POLICY_CASCADE:
            payments = self.store.payments
            positions = [i for i, p in enumerate(payments.items) if p.order_id == order_id]
            if positions:
                payments.delete(positions)
                logger.info("Cascaded delete of order %s: %d payments", order_id, len(positions))
        self.store.orders.delete_by_id(order_id)

    def get(self, order_id: str) -> Order:
        order = self.store.orders.get(order_id)
        if order is None:
            raise RecordNotFoundError("Order not found.")
        return order

    def payments_for(self, order_id: str) -> list[Payment]:
        return [p for p in self.store.payments if p.order_id == order_id]
