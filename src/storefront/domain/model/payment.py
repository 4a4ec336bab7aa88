"""Payment aggregate and its status transition table.

A Payment is one-to-one with an Order.  Its status changes only through
``Payment.transition_to`` which enforces the allowed edges below; the
order status is derived from the payment status via ``order_status_for``.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from storefront.domain.exceptions import InvalidTransition, MissingReason, ValidationError
from storefront.domain.model.order import OrderStatus
from storefront.domain.model.value_objects import Money


class PaymentStatus(Enum):
    PENDING = "pending"
    PENDING_APPROVAL = "pending_approval"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"

    @staticmethod
    def parse(raw: str) -> PaymentStatus:
        try:
            return PaymentStatus(raw.strip().lower())
        except ValueError as exc:
            valid = ", ".join(s.value for s in PaymentStatus)
            raise ValidationError(
                f"Unknown payment status '{raw}'. Expected one of: {valid}"
            ) from exc


ALLOWED_TRANSITIONS: dict[PaymentStatus, frozenset[PaymentStatus]] = {
    PaymentStatus.PENDING: frozenset({
        PaymentStatus.PENDING_APPROVAL,
        PaymentStatus.APPROVED,
        PaymentStatus.REJECTED,
        PaymentStatus.CANCELLED,
    }),
    PaymentStatus.PENDING_APPROVAL: frozenset({
        PaymentStatus.APPROVED,
        PaymentStatus.REJECTED,
        PaymentStatus.CANCELLED,
    }),
    PaymentStatus.APPROVED: frozenset(),
    PaymentStatus.REJECTED: frozenset(),
    PaymentStatus.CANCELLED: frozenset(),
}

OPEN_STATUSES = frozenset({PaymentStatus.PENDING, PaymentStatus.PENDING_APPROVAL})

_ORDER_STATUS_BY_PAYMENT = {
    PaymentStatus.PENDING: OrderStatus.PENDING,
    PaymentStatus.PENDING_APPROVAL: OrderStatus.PENDING,
    PaymentStatus.APPROVED: OrderStatus.PREPARING,
    PaymentStatus.REJECTED: OrderStatus.CANCELLED,
    PaymentStatus.CANCELLED: OrderStatus.CANCELLED,
}


def order_status_for(status: PaymentStatus) -> OrderStatus:
    """The order status implied by a payment status."""
    return _ORDER_STATUS_BY_PAYMENT[status]


def can_transition(current: PaymentStatus, target: PaymentStatus) -> bool:
    return target in ALLOWED_TRANSITIONS[current]


@dataclass
class Payment:
    """Aggregate root for an order's payment."""

    id: int | None
    order_id: int
    payment_method: str
    amount: Money
    created_at: datetime
    updated_at: datetime
    status: PaymentStatus = PaymentStatus.PENDING
    rejection_reason: str | None = None

    @staticmethod
    def create(order_id: int, payment_method: str, amount: Money, created_at: datetime) -> Payment:
        if not payment_method or not payment_method.strip():
            raise ValidationError("Payment method is required")
        return Payment(
            id=None,
            order_id=order_id,
            payment_method=payment_method.strip(),
            amount=amount,
            created_at=created_at,
            updated_at=created_at,
        )

    def transition_to(
        self,
        target: PaymentStatus,
        at: datetime,
        reason: str | None = None,
    ) -> PaymentStatus:
        """Move to ``target`` and return the previous status.

        Same-state requests are rejected like any other missing edge, so
        a replayed transition is never applied twice.
        """
        if not can_transition(self.status, target):
            raise InvalidTransition(self.status.value, target.value)
        if target == PaymentStatus.REJECTED:
            if reason is None or not reason.strip():
                raise MissingReason()
            self.rejection_reason = reason.strip()

        previous = self.status
        self.status = target
        self.updated_at = at
        return previous
