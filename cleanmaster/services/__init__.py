"""
Use cases for the presentation layer.

Screens call these services instead of touching the store collections
directly. Failures come back as RecordError subclasses whose ``message`` is
the text to show the user.
"""

from .customer_service import CustomerService
from .errors import InvalidFieldError, RecordError, RecordNotFoundError, SelectionRequiredError
from .order_service import OrderService
from .payment_service import PaymentService

__all__ = [
    "CustomerService",
    "InvalidFieldError",
    "OrderService",
    "PaymentService",
    "RecordError",
    "RecordNotFoundError",
    "SelectionRequiredError",
]
