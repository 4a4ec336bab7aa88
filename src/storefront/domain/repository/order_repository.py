"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.order import Order


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, oldest first."""

    @abstractmethod
    def add(self, order: Order) -> Order:
        """Persist a new order with its lines and assign its id."""

    @abstractmethod
    def save_status(self, order: Order) -> None:
        """Persist the status of an existing order; lines never change."""
