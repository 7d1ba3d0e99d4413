"""Entity types and the snapshot codec."""

from .records import Customer, Order, Payment, new_id

__all__ = ["Customer", "Order", "Payment", "new_id"]
