"""Application service: Transition Payment use case.

Only sales and admin roles may drive payment transitions; the check
happens once here, before any transaction is opened.

The payment row is locked for the duration of the transition.  Payment
status, order status and stock movements commit together; the customer
notification is sent afterwards and may fail without consequence.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.concurrency import run_with_retry
from storefront.application.dto import TransitionDTO
from storefront.application.notifications import (
    ORDER_CANCELLED,
    PAYMENT_APPROVED,
    Notification,
    NotificationSender,
    customer_recipient,
    dispatch,
)
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.actor import Actor, Capability
from storefront.domain.model.order import Order
from storefront.domain.model.payment import Payment, PaymentStatus
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.payment_state_machine import (
    PaymentStateMachine,
    TransitionOutcome,
)
from storefront.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def apply_payment_transition(
    uow: UnitOfWork,
    payment_id: int,
    target: PaymentStatus,
    actor_id: int | None,
    reason: str | None,
    clock: Callable[[], datetime],
) -> tuple[TransitionOutcome, Notification | None]:
    """Run one transition in its own transaction.

    Returns the outcome and the notification to send once committed.
    """
    with uow:
        payment = uow.payments.get_for_update(payment_id)
        if payment is None:
            raise EntityNotFoundError(f"Payment #{payment_id} not found")
        order = uow.orders.get_by_id(payment.order_id)
        if order is None:
            raise EntityNotFoundError(
                f"Order #{payment.order_id} for payment #{payment_id} not found"
            )

        machine = PaymentStateMachine(StockLedger(uow.variants, uow.movements, clock))
        outcome = machine.apply(payment, order, target, at=clock(), actor_id=actor_id, reason=reason)

        uow.payments.save(payment)
        uow.orders.save_status(order)
        uow.commit()

    return outcome, _notification_for(outcome, order, payment, reason)


def _notification_for(
    outcome: TransitionOutcome,
    order: Order,
    payment: Payment,
    reason: str | None,
) -> Notification | None:
    if outcome.current == PaymentStatus.APPROVED:
        template = PAYMENT_APPROVED
    elif outcome.current in (PaymentStatus.REJECTED, PaymentStatus.CANCELLED):
        template = ORDER_CANCELLED
    else:
        return None
    return Notification(
        recipient=customer_recipient(order.customer_id),
        template_id=template,
        payload={
            "order_id": order.id,
            "payment_status": payment.status.value,
            "order_status": order.status.value,
            "reason": payment.rejection_reason or reason,
            "total": str(order.total),
        },
    )


class TransitionPaymentHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: NotificationSender,
        clock: Callable[[], datetime] = _utcnow,
        retry_attempts: int = 3,
    ) -> None:
        self._uow = uow
        self._notifier = notifier
        self._clock = clock
        self._retry_attempts = retry_attempts

    def handle(
        self,
        payment_id: int,
        new_status: PaymentStatus | str,
        actor: Actor,
        reason: str | None = None,
    ) -> TransitionDTO:
        actor.require(Capability.TRANSITION_PAYMENTS)
        target = (
            new_status
            if isinstance(new_status, PaymentStatus)
            else PaymentStatus.parse(new_status)
        )

        outcome, notification = run_with_retry(
            lambda: apply_payment_transition(
                self._uow, payment_id, target, actor.id, reason, self._clock
            ),
            attempts=self._retry_attempts,
        )
        logger.info(
            "Payment #%s moved %s -> %s by actor #%s (order #%s now %s)",
            outcome.payment_id,
            outcome.previous.value,
            outcome.current.value,
            actor.id,
            outcome.order_id,
            outcome.order_status.value,
        )

        if notification is not None:
            dispatch(self._notifier, [notification])

        return TransitionDTO(
            payment_id=outcome.payment_id,
            order_id=outcome.order_id,
            previous_status=outcome.previous.value,
            payment_status=outcome.current.value,
            order_status=outcome.order_status.value,
            units_released=outcome.units_released,
            units_confirmed=outcome.units_confirmed,
        )
