"""Unit tests for the PaymentStateMachine domain service."""

import pytest

from storefront.domain.exceptions import InvalidTransition, MissingReason, ValidationError
from storefront.domain.model.order import Order, OrderLine, OrderStatus
from storefront.domain.model.payment import Payment, PaymentStatus
from storefront.domain.model.stock_movement import MovementKind
from storefront.domain.model.value_objects import Money, Quantity
from storefront.domain.service.payment_state_machine import PaymentStateMachine
from storefront.domain.service.stock_ledger import StockLedger
from tests.fakes import ADDRESS, FakeClock, FakeUnitOfWork


def _setup(status: PaymentStatus = PaymentStatus.PENDING):
    """Order #1 for 3 units of variant 1 (stock already reserved: 5 -> 2)."""
    clock = FakeClock()
    uow = FakeUnitOfWork()
    variant = uow.db.add_variant(5)
    ledger = StockLedger(uow.variants, uow.movements, clock)

    order = Order.create(
        customer_id=7,
        lines=[OrderLine(variant.id, "Camisa Lino", "M", "Blanco", Quantity(3), Money.of("100"))],
        shipping_address=ADDRESS,
        created_at=clock(),
    )
    order.id = 1
    ledger.reserve(variant.id, 3, order.id, actor_id=7)

    payment = Payment.create(1, "transfer", order.total, clock())
    payment.id = 1
    payment.status = status
    return PaymentStateMachine(ledger), payment, order, uow.db, clock


class TestApproval:

    @pytest.mark.parametrize("start", [PaymentStatus.PENDING, PaymentStatus.PENDING_APPROVAL])
    def test_confirms_and_prepares(self, start):
        machine, payment, order, db, clock = _setup(start)
        outcome = machine.apply(payment, order, PaymentStatus.APPROVED, clock(), actor_id=3)

        assert order.status == OrderStatus.PREPARING
        assert outcome.units_confirmed == 3
        assert db.variants[1].available_quantity == 2
        assert len(db.movements_of(MovementKind.CONFIRMATION)) == 1


class TestReleaseEdges:

    @pytest.mark.parametrize("start", [PaymentStatus.PENDING, PaymentStatus.PENDING_APPROVAL])
    def test_rejection_releases_and_cancels(self, start):
        machine, payment, order, db, clock = _setup(start)
        outcome = machine.apply(
            payment, order, PaymentStatus.REJECTED, clock(), actor_id=3, reason="stock error"
        )

        assert order.status == OrderStatus.CANCELLED
        assert outcome.units_released == 3
        assert db.variants[1].available_quantity == 5
        [release] = db.movements_of(MovementKind.RELEASE)
        assert release.delta == 3
        assert release.note == "payment rejected: stock error"

    @pytest.mark.parametrize("start", [PaymentStatus.PENDING, PaymentStatus.PENDING_APPROVAL])
    def test_cancellation_releases(self, start):
        machine, payment, order, db, clock = _setup(start)
        machine.apply(payment, order, PaymentStatus.CANCELLED, clock(), actor_id=3)
        assert order.status == OrderStatus.CANCELLED
        assert db.variants[1].available_quantity == 5


class TestNoSideEffects:

    def test_pending_approval_changes_nothing_else(self):
        machine, payment, order, db, clock = _setup()
        movements_before = list(db.movements)
        outcome = machine.apply(payment, order, PaymentStatus.PENDING_APPROVAL, clock(), actor_id=3)

        assert outcome.previous == PaymentStatus.PENDING
        assert order.status == OrderStatus.PENDING
        assert db.movements == movements_before

    def test_invalid_edge_touches_nothing(self):
        machine, payment, order, db, clock = _setup(PaymentStatus.APPROVED)
        with pytest.raises(InvalidTransition):
            machine.apply(payment, order, PaymentStatus.CANCELLED, clock(), actor_id=3)
        assert db.variants[1].available_quantity == 2

    def test_missing_reason_touches_nothing(self):
        machine, payment, order, db, clock = _setup(PaymentStatus.PENDING_APPROVAL)
        with pytest.raises(MissingReason):
            machine.apply(payment, order, PaymentStatus.REJECTED, clock(), actor_id=3)
        assert payment.status == PaymentStatus.PENDING_APPROVAL
        assert db.movements_of(MovementKind.RELEASE) == []

    def test_mismatched_order_rejected(self):
        machine, payment, order, _, clock = _setup()
        payment.order_id = 2
        with pytest.raises(ValidationError, match="does not belong"):
            machine.apply(payment, order, PaymentStatus.APPROVED, clock(), actor_id=3)
