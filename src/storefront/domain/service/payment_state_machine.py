"""Domain service: Payment State Machine.

Applies a validated payment status change together with its side
effects on the owning order and on the stock ledger:

    -> approved             confirm every line, order -> preparing
    -> rejected / cancelled release every line, order -> cancelled
    -> pending_approval     no side effect

The caller owns the transaction; if anything here raises, nothing the
machine did survives the rollback.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.order import Order, OrderStatus
from storefront.domain.model.payment import Payment, PaymentStatus, order_status_for
from storefront.domain.service.stock_ledger import StockLedger

_RELEASING = frozenset({PaymentStatus.REJECTED, PaymentStatus.CANCELLED})


@dataclass(frozen=True)
class TransitionOutcome:
    payment_id: int
    order_id: int
    previous: PaymentStatus
    current: PaymentStatus
    order_status: OrderStatus
    units_released: int = 0
    units_confirmed: int = 0


class PaymentStateMachine:

    def __init__(self, ledger: StockLedger) -> None:
        self._ledger = ledger

    def apply(
        self,
        payment: Payment,
        order: Order,
        target: PaymentStatus,
        at: datetime,
        actor_id: int | None,
        reason: str | None = None,
    ) -> TransitionOutcome:
        if payment.order_id != order.id:
            raise ValidationError(
                f"Payment #{payment.id} does not belong to order #{order.id}"
            )

        previous = payment.transition_to(target, at=at, reason=reason)

        released = confirmed = 0
        if target == PaymentStatus.APPROVED:
            for line in order.lines:
                self._ledger.confirm(line.variant_id, line.quantity.value, order.id, actor_id)
                confirmed += line.quantity.value
        elif target in _RELEASING:
            note = f"payment {target.value}" + (f": {reason.strip()}" if reason else "")
            for line in order.lines:
                if self._ledger.release(
                    line.variant_id, line.quantity.value, order.id, actor_id, note=note
                ):
                    released += line.quantity.value

        order.status = order_status_for(payment.status)

        return TransitionOutcome(
            payment_id=payment.id,  # type: ignore[arg-type]
            order_id=order.id,  # type: ignore[arg-type]
            previous=previous,
            current=payment.status,
            order_status=order.status,
            units_released=released,
            units_confirmed=confirmed,
        )
