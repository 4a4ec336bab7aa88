"""SQL-backed implementation of PaymentRepository."""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, RowMapping

from storefront.domain.model.payment import Payment, PaymentStatus
from storefront.domain.model.value_objects import Money
from storefront.domain.repository.payment_repository import PaymentRepository
from storefront.infrastructure.persistence.schema import orders, payments


class SqlPaymentRepository(PaymentRepository):

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    # --- PaymentRepository interface ------------------------------------------

    def get_by_id(self, payment_id: int) -> Payment | None:
        return self._first(select(payments).where(payments.c.id == payment_id))

    def get_for_update(self, payment_id: int) -> Payment | None:
        return self._first(
            select(payments).where(payments.c.id == payment_id).with_for_update()
        )

    def get_by_order_id(self, order_id: int) -> Payment | None:
        return self._first(select(payments).where(payments.c.order_id == order_id))

    def list_all(self) -> list[Payment]:
        rows = self._conn.execute(select(payments).order_by(payments.c.id)).mappings()
        return [self._to_domain(row) for row in rows]

    def find_stale(
        self,
        statuses: Iterable[PaymentStatus],
        created_before: datetime,
    ) -> list[Payment]:
        stmt = (
            select(payments)
            .join(orders, orders.c.id == payments.c.order_id)
            .where(payments.c.status.in_([s.value for s in statuses]))
            .where(orders.c.created_at < created_before)
            .order_by(payments.c.id)
        )
        return [self._to_domain(row) for row in self._conn.execute(stmt).mappings()]

    def add(self, payment: Payment) -> Payment:
        result = self._conn.execute(
            insert(payments).values(
                order_id=payment.order_id,
                payment_method=payment.payment_method,
                amount=payment.amount.amount,
                currency=payment.amount.currency,
                status=payment.status.value,
                rejection_reason=payment.rejection_reason,
                created_at=payment.created_at,
                updated_at=payment.updated_at,
            )
        )
        payment.id = result.inserted_primary_key[0]
        return payment

    def save(self, payment: Payment) -> None:
        self._conn.execute(
            update(payments)
            .where(payments.c.id == payment.id)
            .values(
                status=payment.status.value,
                rejection_reason=payment.rejection_reason,
                updated_at=payment.updated_at,
            )
        )

    # --- Serialization --------------------------------------------------------

    def _first(self, stmt) -> Payment | None:
        row = self._conn.execute(stmt).mappings().first()
        return self._to_domain(row) if row is not None else None

    @staticmethod
    def _to_domain(row: RowMapping) -> Payment:
        return Payment(
            id=row["id"],
            order_id=row["order_id"],
            payment_method=row["payment_method"],
            amount=Money(row["amount"], row["currency"]),
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            status=PaymentStatus(row["status"]),
            rejection_reason=row["rejection_reason"],
        )
