"""Cart value object.

The in-progress cart lives in the customer's session (an external
collaborator); checkout hands a snapshot of it to the order placement
flow as a ``Cart``.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.value_objects import Quantity


@dataclass(frozen=True)
class CartLine:
    variant_id: int
    quantity: Quantity


@dataclass(frozen=True)
class Cart:
    lines: tuple[CartLine, ...] = ()

    @staticmethod
    def of(pairs: list[tuple[int, int]]) -> Cart:
        """Build a cart from (variant_id, quantity) pairs, merging repeats."""
        merged: dict[int, int] = {}
        for variant_id, qty in pairs:
            Quantity(qty)
            merged[variant_id] = merged.get(variant_id, 0) + qty
        return Cart(tuple(CartLine(vid, Quantity(q)) for vid, q in merged.items()))

    @property
    def is_empty(self) -> bool:
        return not self.lines

    def __len__(self) -> int:
        return len(self.lines)
