"""Unit of work: one database transaction spanning all repositories.

Use as a context manager.  Leaving the block without calling
``commit()`` (or because of an exception) rolls everything back, so a
failed use case never leaves partial writes behind.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.repository.order_repository import OrderRepository
from storefront.domain.repository.payment_repository import PaymentRepository
from storefront.domain.repository.stock_movement_repository import (
    StockMovementRepository,
)
from storefront.domain.repository.variant_repository import VariantRepository


class UnitOfWork(ABC):

    variants: VariantRepository
    orders: OrderRepository
    payments: PaymentRepository
    movements: StockMovementRepository

    def __enter__(self) -> UnitOfWork:
        self._begin()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._end()

    @abstractmethod
    def _begin(self) -> None:
        """Open the transaction and bind the repositories to it."""

    @abstractmethod
    def _end(self) -> None:
        """Release the connection / locks held by the transaction."""

    @abstractmethod
    def commit(self) -> None:
        """Make every change in this transaction durable."""

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted changes; a no-op after ``commit()``."""
