"""Payment use cases."""

from __future__ import annotations

from dataclasses import replace
from datetime import date
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP, localcontext
from typing import Optional

from cleanmaster.domain.records import DEFAULT_PAYMENT_METHOD, DEFAULT_PAYMENT_STATUS, Payment
from cleanmaster.repositories.store import Store
from cleanmaster.services.errors import InvalidFieldError, RecordNotFoundError, SelectionRequiredError

CENTS = Decimal("0.01")
MAX_AMOUNT = Decimal("1000000000")
PAID = "Paid"


def parse_amount(value) -> Decimal:
    """Accept Decimal, int, float or numeric text and return an amount in cents."""
    if isinstance(value, bool):
        raise InvalidFieldError("Amount must be a number.", "amount")
    try:
        amount = Decimal(str(value).strip())
    except (InvalidOperation, ValueError) as exc:
        raise InvalidFieldError("Amount must be a number.", "amount") from exc
    if not amount.is_finite():
        raise InvalidFieldError("Amount must be a number.", "amount")
    if amount < 0:
        raise InvalidFieldError("Amount cannot be negative.", "amount")
    if amount > MAX_AMOUNT:
        raise InvalidFieldError("Amount is too large.", "amount")
    try:
        return amount.quantize(CENTS, rounding=ROUND_HALF_UP)
    except InvalidOperation as exc:
        raise InvalidFieldError("Amount must be a number.", "amount") from exc


class PaymentService:
    def __init__(self, store: Store) -> None:
        self.store = store

    def create(
        self,
        order_id: Optional[str],
        amount,
        payment_date: Optional[date] = None,
        payment_status: str = DEFAULT_PAYMENT_STATUS,
        payment_method: str = DEFAULT_PAYMENT_METHOD,
    ) -> Payment:
        if not order_id:
            raise SelectionRequiredError("Please select an order")
        payment = Payment(
            order_id=order_id,
            amount=parse_amount(amount),
            payment_date=payment_date or date.today(),
            payment_status=(payment_status or DEFAULT_PAYMENT_STATUS).strip(),
            payment_method=payment_method or DEFAULT_PAYMENT_METHOD,
        )
        self.store.payments.add(payment)
        return payment

    def update(self, payment: Payment) -> Payment:
        cleaned = replace(payment, amount=parse_amount(payment.amount))
        if not self.store.payments.replace(cleaned):
            raise RecordNotFoundError("Payment not found.")
        return cleaned

    def delete(self, payment_id: str) -> None:
        if self.store.payments.index_of(payment_id) is None:
            raise RecordNotFoundError("Payment not found.")
        self.store.payments.delete_by_id(payment_id)

    def get(self, payment_id: str) -> Payment:
        payment = self.store.payments.get(payment_id)
        if payment is None:
            raise RecordNotFoundError("Payment not found.")
        return payment

    def describe(self, payment_id: str) -> str:
        payment = self.get(payment_id)
        return f"Payment of {payment.amount:.2f} - {payment.payment_status}"

    def total_paid(self, order_id: str) -> Decimal:
        amounts = [p.amount for p in self.store.payments if p.order_id == order_id and p.payment_status == PAID]
        # snapshots may hold amounts that never went through parse_amount
        with localcontext() as ctx:
            ctx.prec = 60
            total = sum(amounts, Decimal("0"))
            try:
                return total.quantize(CENTS, rounding=ROUND_HALF_UP)
            except InvalidOperation:
                return total
