"""Application service: payment / order consistency audit.

Reports rows that break the order-payment invariants: orders without a
payment, payments with a non-positive amount or an amount different
from the order total, and orders whose status diverges from the one
their payment status implies.  Read-only; fixing is left to a human.
"""

from __future__ import annotations

import logging

from storefront.application.dto import AuditFindingDTO
from storefront.domain.model.actor import Actor, Capability
from storefront.domain.model.payment import order_status_for
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

ORDER_WITHOUT_PAYMENT = "order_without_payment"
INVALID_AMOUNT = "invalid_amount"
AMOUNT_MISMATCH = "amount_mismatch"
STATUS_MISMATCH = "status_mismatch"


class AuditPaymentsHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, actor: Actor) -> list[AuditFindingDTO]:
        actor.require(Capability.AUDIT)
        with self._uow as uow:
            orders = uow.orders.list_all()
            payments = {p.order_id: p for p in uow.payments.list_all()}

        findings: list[AuditFindingDTO] = []
        for order in orders:
            payment = payments.get(order.id)  # type: ignore[arg-type]
            if payment is None:
                findings.append(AuditFindingDTO(
                    ORDER_WITHOUT_PAYMENT, order.id, None,
                    f"Order #{order.id} has no payment (total {order.total})",
                ))
                continue

            if payment.amount.is_zero:
                findings.append(AuditFindingDTO(
                    INVALID_AMOUNT, order.id, payment.id,
                    f"Payment #{payment.id} has an invalid amount {payment.amount}",
                ))
            elif payment.amount != order.total:
                findings.append(AuditFindingDTO(
                    AMOUNT_MISMATCH, order.id, payment.id,
                    f"Payment #{payment.id} amount {payment.amount} "
                    f"differs from order total {order.total}",
                ))

            expected = order_status_for(payment.status)
            if order.status != expected:
                findings.append(AuditFindingDTO(
                    STATUS_MISMATCH, order.id, payment.id,
                    f"Order #{order.id} is '{order.status.value}' but payment "
                    f"#{payment.id} is '{payment.status.value}' (expected order "
                    f"'{expected.value}')",
                ))

        if findings:
            logger.warning("Payment audit found %d inconsistencies", len(findings))
        return findings
