"""Application service: Place Order use case.

Checkout in one transaction:

1. Lock every variant in the cart (ascending id) and validate each
   line; nothing is written until every line has passed.
2. Create the Order (``pending``) with a price snapshot per line.
3. Reserve stock for every line through the ledger.
4. Create the Payment (``pending``) for the order total and commit.

Any failure rolls the whole transaction back, so a cart is never
partially reserved.  The confirmation email goes out after commit on a
best-effort basis.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.concurrency import run_with_retry
from storefront.application.dto import PlacedOrderDTO
from storefront.application.notifications import (
    ORDER_CONFIRMATION,
    Notification,
    NotificationSender,
    customer_recipient,
    dispatch,
)
from storefront.domain.exceptions import EmptyCart, InsufficientStock, InvalidCartLine
from storefront.domain.model.cart import Cart
from storefront.domain.model.order import Order, OrderLine
from storefront.domain.model.payment import Payment
from storefront.domain.model.value_objects import ShippingAddress
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlaceOrderHandler:

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
        customer_id: int,
        cart: Cart,
        address: ShippingAddress,
        payment_method: str,
    ) -> PlacedOrderDTO:
        if cart.is_empty:
            raise EmptyCart()

        placed = run_with_retry(
            lambda: self._place(customer_id, cart, address, payment_method),
            attempts=self._retry_attempts,
        )
        logger.info(
            "Order #%s placed for customer #%s (payment #%s, total %s)",
            placed.order_id,
            customer_id,
            placed.payment_id,
            placed.total,
        )

        dispatch(self._notifier, [
            Notification(
                recipient=customer_recipient(customer_id),
                template_id=ORDER_CONFIRMATION,
                payload={
                    "order_id": placed.order_id,
                    "total": placed.total,
                    "payment_method": payment_method,
                },
            )
        ])
        return placed

    def _place(
        self,
        customer_id: int,
        cart: Cart,
        address: ShippingAddress,
        payment_method: str,
    ) -> PlacedOrderDTO:
        now = self._clock()
        with self._uow as uow:
            ledger = StockLedger(uow.variants, uow.movements, self._clock)

            # Phase 1: lock and validate every line before any mutation
            locked = ledger.lock_variants(line.variant_id for line in cart.lines)
            order_lines: list[OrderLine] = []
            for line in cart.lines:
                variant = locked.get(line.variant_id)
                if variant is None:
                    raise InvalidCartLine(line.variant_id, "unknown variant")
                if not variant.active:
                    raise InvalidCartLine(line.variant_id, "variant is no longer available")
                if line.quantity.value > variant.available_quantity:
                    raise InsufficientStock(
                        variant_id=line.variant_id,
                        available=variant.available_quantity,
                        requested=line.quantity.value,
                    )
                order_lines.append(
                    OrderLine(
                        variant_id=line.variant_id,
                        product_name=variant.product_name,
                        size=variant.size,
                        color=variant.color,
                        quantity=line.quantity,
                        unit_price=variant.unit_price,  # <-- price snapshot
                    )
                )

            # Phase 2: write order, reservations and payment
            order = uow.orders.add(
                Order.create(
                    customer_id=customer_id,
                    lines=order_lines,
                    shipping_address=address,
                    created_at=now,
                )
            )
            for order_line in order.lines:
                ledger.reserve(
                    order_line.variant_id,
                    order_line.quantity.value,
                    order.id,  # type: ignore[arg-type]
                    actor_id=customer_id,
                )
            payment = uow.payments.add(
                Payment.create(
                    order_id=order.id,  # type: ignore[arg-type]
                    payment_method=payment_method,
                    amount=order.total,
                    created_at=now,
                )
            )
            uow.commit()

        return PlacedOrderDTO(
            order_id=order.id,  # type: ignore[arg-type]
            payment_id=payment.id,  # type: ignore[arg-type]
            status=order.status.value,
            total=str(order.total),
        )
