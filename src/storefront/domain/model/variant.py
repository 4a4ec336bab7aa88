"""Variant aggregate: one purchasable product x size x color.

``available_quantity`` is the already-net figure: stock reserved by
pending orders has been subtracted from it at reservation time.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.exceptions import InsufficientStock, ValidationError
from storefront.domain.model.value_objects import Money


@dataclass
class Variant:
    """Aggregate root for per-variant stock.

    Invariants:
    - ``available_quantity`` is always >= 0
    - variants are never deleted, only deactivated
    """

    id: int | None
    product_id: int
    product_name: str
    size: str
    color: str
    unit_price: Money
    available_quantity: int = 0
    active: bool = True

    @property
    def label(self) -> str:
        return f"{self.product_name} ({self.size}/{self.color})"

    def take(self, quantity: int) -> None:
        """Decrement stock for a reservation."""
        if quantity <= 0:
            raise ValidationError("Reservation quantity must be positive")
        if quantity > self.available_quantity:
            raise InsufficientStock(
                variant_id=self.id,  # type: ignore[arg-type]
                available=self.available_quantity,
                requested=quantity,
            )
        self.available_quantity -= quantity

    def put_back(self, quantity: int) -> None:
        """Re-credit stock (release or restock)."""
        if quantity <= 0:
            raise ValidationError("Quantity to put back must be positive")
        self.available_quantity += quantity

    def adjust(self, delta: int) -> None:
        """Apply a signed manual correction."""
        if delta == 0:
            raise ValidationError("Adjustment cannot be zero")
        if not self.active:
            raise ValidationError(f"Cannot adjust inactive variant {self.label}")
        if self.available_quantity + delta < 0:
            raise ValidationError(
                f"Adjustment would leave {self.label} with negative stock "
                f"(current {self.available_quantity}, adjustment {delta})"
            )
        self.available_quantity += delta

    def deactivate(self) -> None:
        if not self.active:
            raise ValidationError(f"Variant {self.label} is already inactive")
        self.active = False
