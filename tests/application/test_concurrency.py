"""Retry helper and concurrent checkout tests."""

import threading

import pytest

from storefront.application.concurrency import run_with_retry
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.transition_payment import TransitionPaymentHandler
from storefront.domain.exceptions import ConcurrencyConflict, InsufficientStock
from storefront.domain.model.actor import Actor, Role
from storefront.domain.model.cart import Cart
from storefront.domain.model.stock_movement import MovementKind
from tests.fakes import (
    ADDRESS,
    FakeClock,
    FakeDatabase,
    FakeUnitOfWork,
    RecordingNotificationSender,
)


class TestRunWithRetry:

    def test_retries_then_succeeds(self):
        calls, delays = [], []

        def flaky():
            calls.append(1)
            if len(calls) < 3:
                raise ConcurrencyConflict("deadlock")
            return "ok"

        assert run_with_retry(flaky, attempts=3, sleep=delays.append) == "ok"
        assert delays == [0.1, 0.2]

    def test_gives_up(self):
        def always():
            raise ConcurrencyConflict("lock wait timeout")

        with pytest.raises(ConcurrencyConflict):
            run_with_retry(always, attempts=2, sleep=lambda _: None)

    def test_other_errors_are_not_retried(self):
        calls = []

        def broken():
            calls.append(1)
            raise ValueError("boom")

        with pytest.raises(ValueError):
            run_with_retry(broken, sleep=lambda _: None)
        assert len(calls) == 1

    def test_attempts_must_be_positive(self):
        with pytest.raises(ValueError):
            run_with_retry(lambda: None, attempts=0)


class TestConflictRecovery:

    def test_place_order_retries_after_conflict(self):
        uow = FakeUnitOfWork(fail_commits=1)
        uow.db.add_variant(5)
        placed = PlaceOrderHandler(uow, RecordingNotificationSender(), clock=FakeClock()).handle(
            7, Cart.of([(1, 3)]), ADDRESS, "transfer"
        )

        assert uow.commits == 1
        assert list(uow.db.orders) == [placed.order_id]
        assert uow.db.variants[1].available_quantity == 2
        assert len(uow.db.movements) == 1

    def test_transition_retries_after_conflict(self):
        uow = FakeUnitOfWork()
        uow.db.add_variant(5)
        clock = FakeClock()
        placed = PlaceOrderHandler(uow, RecordingNotificationSender(), clock=clock).handle(
            7, Cart.of([(1, 3)]), ADDRESS, "transfer"
        )
        uow.fail_commits = 1

        TransitionPaymentHandler(uow, RecordingNotificationSender(), clock=clock).handle(
            placed.payment_id, "cancelled", Actor(3, Role.SALES)
        )

        assert uow.db.variants[1].available_quantity == 5
        assert len(uow.db.movements_of(MovementKind.RELEASE)) == 1


def test_concurrent_checkouts_never_oversell():
    db = FakeDatabase()
    db.add_variant(5)
    results: list[str] = []
    barrier = threading.Barrier(8)

    def checkout(customer_id: int) -> None:
        handler = PlaceOrderHandler(
            FakeUnitOfWork(db), RecordingNotificationSender(), clock=FakeClock()
        )
        barrier.wait()
        try:
            handler.handle(customer_id, Cart.of([(1, 1)]), ADDRESS, "transfer")
            results.append("placed")
        except InsufficientStock:
            results.append("rejected")

    threads = [threading.Thread(target=checkout, args=(i,)) for i in range(1, 9)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert results.count("placed") == 5
    assert results.count("rejected") == 3
    assert db.variants[1].available_quantity == 0
    assert sum(m.delta for m in db.movements_of(MovementKind.SALE)) == -5
