"""Customer use cases (create, edit, delete, search)."""

from __future__ import annotations

import logging
from typing import Optional

from cleanmaster.core.config import REFERENCE_POLICY_CASCADE, Settings, get_settings
from cleanmaster.domain.records import Customer, Order
from cleanmaster.repositories.store import Store
from cleanmaster.services.errors import RecordNotFoundError

logger = logging.getLogger(__name__)


class CustomerService:
    """Customer records plus the orders that point at them."""

    def __init__(self, store: Store, settings: Optional[Settings] = None) -> None:
        self.store = store
        self.settings = settings or get_settings()

    def create(self, name: str, contact: str = "", address: str = "") -> Customer:
        customer = Customer(name=(name or "").strip(), contact=(contact or "").strip(), address=(address or "").strip())
        self.store.customers.add(customer)
        return customer

    def update(self, customer_id: str, *, name: str, contact: str, address: str) -> Customer:
        current = self.store.customers.get(customer_id)
        if current is None:
            raise RecordNotFoundError("Customer not found.")
        updated = Customer(
            id=current.id,
            name=(name or "").strip(),
            contact=(contact or "").strip(),
            address=(address or "").strip(),
        )
        if not self.store.customers.replace(updated):
            raise RecordNotFoundError("Customer not found.")
        return updated

    def delete(self, customer_id: str) -> None:
        if self.store.customers.index_of(customer_id) is None:
            raise RecordNotFoundError("Customer not found.")
        if self.settings.reference_policy == REFERENCE_POLICY_CASCADE:
            self._cascade(customer_id)
        self.store.customers.delete_by_id(customer_id)

    def _cascade(self, customer_id: str) -> None:
        order_ids = {order.id for order in self.store.orders if order.customer_id == customer_id}
        if not order_ids:
            return
        payments = self.store.payments
        payment_positions = [i for i, p in enumerate(payments.items) if p.order_id in order_ids]
        if payment_positions:
            payments.delete(payment_positions)
        orders = self.store.orders
        orders.delete([i for i, o in enumerate(orders.items) if o.id in order_ids])
        logger.info(
            "Cascaded delete of customer %s: %d orders, %d payments",
            customer_id,
            len(order_ids),
            len(payment_positions),
        )

    def get(self, customer_id: str) -> Customer:
        customer = self.store.customers.get(customer_id)
        if customer is None:
            raise RecordNotFoundError("Customer not found.")
        return customer

    def search(self, query: str = "") -> list[Customer]:
        """Customers whose name contains ``query``; everything for an empty query."""
        if not query:
            return list(self.store.customers)
        return [c for c in self.store.customers if query in c.name]

    def orders_for(self, customer_id: str) -> list[Order]:
        return [o for o in self.store.orders if o.customer_id == customer_id]
