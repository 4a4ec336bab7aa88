"""Abstract repository for StockMovement records.

The interface is append-only on purpose: there is no way to update
or delete a movement once written.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.stock_movement import MovementKind, StockMovement


class StockMovementRepository(ABC):

    @abstractmethod
    def append(self, movement: StockMovement) -> StockMovement:
        """Insert a movement and return it with its assigned id."""

    @abstractmethod
    def exists(self, order_id: int, variant_id: int, kind: MovementKind) -> bool:
        """True if a movement of ``kind`` exists for this order and variant."""

    @abstractmethod
    def list_for_variant(self, variant_id: int) -> list[StockMovement]:
        """Movements of one variant, oldest first."""

    @abstractmethod
    def list_for_order(self, order_id: int) -> list[StockMovement]:
        """Movements referencing one order, oldest first."""

    @abstractmethod
    def list_recent(self, limit: int = 50) -> list[StockMovement]:
        """Most recent movements, newest first."""
