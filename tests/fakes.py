"""In-memory fakes for testing.

The repositories implement the same abstract interfaces as the SQL
ones but keep everything in dicts held by a ``FakeDatabase``.  Reads
hand out copies, like rows loaded from a real database, so a handler
that forgets to ``save`` is caught by the tests.

``FakeUnitOfWork`` snapshots the database when a transaction starts
and restores it on rollback.  A single lock held for the whole
transaction stands in for the row locks of the real store.
"""

from __future__ import annotations

import copy
import threading
from collections.abc import Iterable
from dataclasses import replace
from datetime import datetime, timedelta, timezone

from storefront.application.notifications import Notification, NotificationSender
from storefront.domain.exceptions import ConcurrencyConflict
from storefront.domain.model.order import Order
from storefront.domain.model.payment import Payment, PaymentStatus
from storefront.domain.model.stock_movement import MovementKind, StockMovement
from storefront.domain.model.value_objects import Money, ShippingAddress
from storefront.domain.model.variant import Variant
from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.payment_repository import PaymentRepository
from storefront.domain.repository.stock_movement_repository import (
    StockMovementRepository,
)
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.repository.variant_repository import VariantRepository

ADDRESS = ShippingAddress(
    street="Av. Corrientes 1234",
    city="Buenos Aires",
    province="CABA",
    postal_code="C1043",
)


class FakeDatabase:

    def __init__(self) -> None:
        self.variants: dict[int, Variant] = {}
        self.orders: dict[int, Order] = {}
        self.payments: dict[int, Payment] = {}
        self.movements: list[StockMovement] = []
        self.sequences = {"variant": 1, "order": 1, "payment": 1, "movement": 1}
        self.lock = threading.RLock()

    def next_id(self, name: str) -> int:
        value = self.sequences[name]
        self.sequences[name] += 1
        return value

    def snapshot(self) -> tuple:
        return copy.deepcopy(
            (self.variants, self.orders, self.payments, self.movements, self.sequences)
        )

    def restore(self, snapshot: tuple) -> None:
        (
            self.variants,
            self.orders,
            self.payments,
            self.movements,
            self.sequences,
        ) = snapshot

    # --- Seeding helpers (bypass the ledger on purpose) -----------------------

    def add_variant(
        self,
        stock: int,
        price: str = "100.00",
        product_name: str = "Camisa Lino",
        size: str = "M",
        color: str = "Blanco",
        active: bool = True,
    ) -> Variant:
        variant = Variant(
            id=self.next_id("variant"),
            product_id=1,
            product_name=product_name,
            size=size,
            color=color,
            unit_price=Money.of(price),
            available_quantity=stock,
            active=active,
        )
        self.variants[variant.id] = variant
        return variant

    def movements_of(self, kind: MovementKind) -> list[StockMovement]:
        return [m for m in self.movements if m.kind == kind]


class FakeVariantRepository(VariantRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, variant_id: int) -> Variant | None:
        return copy.deepcopy(self._db.variants.get(variant_id))

    def get_for_update(self, variant_id: int) -> Variant | None:
        return self.get_by_id(variant_id)

    def list_all(self, include_inactive: bool = False) -> list[Variant]:
        return [
            copy.deepcopy(v)
            for _, v in sorted(self._db.variants.items())
            if include_inactive or v.active
        ]

    def add(self, variant: Variant) -> Variant:
        variant.id = self._db.next_id("variant")
        self._db.variants[variant.id] = copy.deepcopy(variant)
        return variant

    def save(self, variant: Variant) -> None:
        self._db.variants[variant.id] = copy.deepcopy(variant)  # type: ignore[index]


class FakeOrderRepository(OrderRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, order_id: int) -> Order | None:
        return copy.deepcopy(self._db.orders.get(order_id))

    def list_all(self) -> list[Order]:
        return [copy.deepcopy(o) for _, o in sorted(self._db.orders.items())]

    def add(self, order: Order) -> Order:
        order.id = self._db.next_id("order")
        self._db.orders[order.id] = copy.deepcopy(order)
        return order

    def save_status(self, order: Order) -> None:
        stored = self._db.orders[order.id]  # type: ignore[index]
        stored.status = order.status


class FakePaymentRepository(PaymentRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def get_by_id(self, payment_id: int) -> Payment | None:
        return copy.deepcopy(self._db.payments.get(payment_id))

    def get_for_update(self, payment_id: int) -> Payment | None:
        return self.get_by_id(payment_id)

    def get_by_order_id(self, order_id: int) -> Payment | None:
        for payment in self._db.payments.values():
            if payment.order_id == order_id:
                return copy.deepcopy(payment)
        return None

    def list_all(self) -> list[Payment]:
        return [copy.deepcopy(p) for _, p in sorted(self._db.payments.items())]

    def find_stale(
        self,
        statuses: Iterable[PaymentStatus],
        created_before: datetime,
    ) -> list[Payment]:
        wanted = set(statuses)
        return [
            copy.deepcopy(p)
            for _, p in sorted(self._db.payments.items())
            if p.status in wanted and self._db.orders[p.order_id].created_at < created_before
        ]

    def add(self, payment: Payment) -> Payment:
        payment.id = self._db.next_id("payment")
        self._db.payments[payment.id] = copy.deepcopy(payment)
        return payment

    def save(self, payment: Payment) -> None:
        self._db.payments[payment.id] = copy.deepcopy(payment)  # type: ignore[index]


class FakeStockMovementRepository(StockMovementRepository):

    def __init__(self, db: FakeDatabase) -> None:
        self._db = db

    def append(self, movement: StockMovement) -> StockMovement:
        stored = replace(movement, id=self._db.next_id("movement"))
        self._db.movements.append(stored)
        return stored

    def exists(self, order_id: int, variant_id: int, kind: MovementKind) -> bool:
        return any(
            m.order_id == order_id and m.variant_id == variant_id and m.kind == kind
            for m in self._db.movements
        )

    def list_for_variant(self, variant_id: int) -> list[StockMovement]:
        return [m for m in self._db.movements if m.variant_id == variant_id]

    def list_for_order(self, order_id: int) -> list[StockMovement]:
        return [m for m in self._db.movements if m.order_id == order_id]

    def list_recent(self, limit: int = 50) -> list[StockMovement]:
        return list(reversed(self._db.movements))[:limit]


class FakeUnitOfWork(UnitOfWork):

    def __init__(self, db: FakeDatabase | None = None, fail_commits: int = 0) -> None:
        self.db = db if db is not None else FakeDatabase()
        self.fail_commits = fail_commits
        self.commits = 0
        self._snapshot: tuple | None = None
        self._committed = False
        self.variants = FakeVariantRepository(self.db)
        self.orders = FakeOrderRepository(self.db)
        self.payments = FakePaymentRepository(self.db)
        self.movements = FakeStockMovementRepository(self.db)

    def _begin(self) -> None:
        self.db.lock.acquire()
        self._snapshot = self.db.snapshot()
        self._committed = False

    def _end(self) -> None:
        self._snapshot = None
        self.db.lock.release()

    def commit(self) -> None:
        if self.fail_commits > 0:
            self.fail_commits -= 1
            raise ConcurrencyConflict("simulated lock wait timeout")
        self._committed = True
        self.commits += 1

    def rollback(self) -> None:
        if not self._committed and self._snapshot is not None:
            self.db.restore(self._snapshot)
            self._snapshot = None


class RecordingNotificationSender(NotificationSender):

    def __init__(self) -> None:
        self.sent: list[Notification] = []

    def send(self, notification: Notification) -> None:
        self.sent.append(notification)

    @property
    def templates(self) -> list[str]:
        return [n.template_id for n in self.sent]


class FailingNotificationSender(NotificationSender):

    def __init__(self) -> None:
        self.attempts = 0

    def send(self, notification: Notification) -> None:
        self.attempts += 1
        raise ConnectionError("SMTP server unavailable")


class FakeClock:

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2025, 3, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> None:
        self.now = self.now + timedelta(**kwargs)
