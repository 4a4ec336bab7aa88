"""Abstract repository for the Payment aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime

from storefront.domain.model.payment import Payment, PaymentStatus


class PaymentRepository(ABC):

    @abstractmethod
    def get_by_id(self, payment_id: int) -> Payment | None:
        """Return a payment without locking it, or None."""

    @abstractmethod
    def get_for_update(self, payment_id: int) -> Payment | None:
        """Return a payment and hold its row lock until the transaction ends."""

    @abstractmethod
    def get_by_order_id(self, order_id: int) -> Payment | None:
        """Return the payment of an order, or None."""

    @abstractmethod
    def list_all(self) -> list[Payment]:
        """Return every payment."""

    @abstractmethod
    def find_stale(
        self,
        statuses: Iterable[PaymentStatus],
        created_before: datetime,
    ) -> list[Payment]:
        """Payments in ``statuses`` whose order was created before the cutoff."""

    @abstractmethod
    def add(self, payment: Payment) -> Payment:
        """Persist a new payment and assign its id."""

    @abstractmethod
    def save(self, payment: Payment) -> None:
        """Persist status, reason and timestamp of an existing payment."""
