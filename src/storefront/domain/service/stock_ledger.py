"""Domain service: Stock Ledger.

Maintains the authoritative available-to-promise quantity per variant
and writes one StockMovement for every ledger-affecting operation.

Every method must run inside the caller's unit of work: the variant
row is locked with ``get_for_update`` for the whole read-check-write
sequence, so two concurrent reservations can never both pass the
availability check.

Stock is decremented eagerly when an order is placed (``reserve``),
re-credited when its payment is rejected or cancelled (``release``)
and only audited when the payment is approved (``confirm``).
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable
from datetime import datetime, timezone

from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.model.stock_movement import MovementKind, StockMovement
from storefront.domain.model.variant import Variant
from storefront.domain.repository.stock_movement_repository import (
    StockMovementRepository,
)
from storefront.domain.repository.variant_repository import VariantRepository

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class StockLedger:

    def __init__(
        self,
        variants: VariantRepository,
        movements: StockMovementRepository,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._variants = variants
        self._movements = movements
        self._clock = clock

    # --- Order-driven operations ----------------------------------------------

    def lock_variants(self, variant_ids: Iterable[int]) -> dict[int, Variant]:
        """Lock the given variant rows in ascending id order.

        A consistent lock order keeps two checkouts touching the same
        variants from deadlocking.  Unknown ids are simply absent from
        the result.
        """
        locked: dict[int, Variant] = {}
        for variant_id in sorted(set(variant_ids)):
            variant = self._variants.get_for_update(variant_id)
            if variant is not None:
                locked[variant_id] = variant
        return locked

    def reserve(
        self,
        variant_id: int,
        qty: int,
        order_id: int,
        actor_id: int | None,
    ) -> StockMovement:
        """Decrement stock for an order and record a ``sale`` movement.

        Raises InsufficientStock when ``available_quantity < qty``.
        """
        variant = self._lock(variant_id)
        if not variant.active:
            raise ValidationError(f"Variant {variant.label} is inactive")
        variant.take(qty)
        self._variants.save(variant)
        return self._record(variant_id, -qty, MovementKind.SALE, order_id, actor_id)

    def release(
        self,
        variant_id: int,
        qty: int,
        order_id: int,
        actor_id: int | None,
        note: str | None = None,
    ) -> bool:
        """Re-credit a reservation.  Returns False if already released.

        The guard makes a second release for the same order and variant
        a no-op instead of crediting the stock twice.
        """
        variant = self._lock(variant_id)
        if self._movements.exists(order_id, variant_id, MovementKind.RELEASE):
            logger.warning(
                "Skipping duplicate release of variant #%s for order #%s",
                variant_id,
                order_id,
            )
            return False
        variant.put_back(qty)
        self._variants.save(variant)
        self._record(variant_id, qty, MovementKind.RELEASE, order_id, actor_id, note)
        return True

    def confirm(
        self,
        variant_id: int,
        qty: int,
        order_id: int,
        actor_id: int | None,
    ) -> StockMovement:
        """Mark a reservation as final.  Quantity does not change."""
        if qty <= 0:
            raise ValidationError("Confirmed quantity must be positive")
        self._lock(variant_id)
        return self._record(
            variant_id, 0, MovementKind.CONFIRMATION, order_id, actor_id,
            note=f"{qty} unit(s) sold",
        )

    # --- Back-office operations -----------------------------------------------

    def restock(
        self,
        variant_id: int,
        qty: int,
        actor_id: int | None,
        note: str | None = None,
    ) -> StockMovement:
        variant = self._lock(variant_id)
        variant.put_back(qty)
        self._variants.save(variant)
        return self._record(variant_id, qty, MovementKind.RESTOCK, None, actor_id, note)

    def adjust(
        self,
        variant_id: int,
        delta: int,
        actor_id: int | None,
        note: str | None = None,
    ) -> StockMovement:
        variant = self._lock(variant_id)
        variant.adjust(delta)
        self._variants.save(variant)
        return self._record(variant_id, delta, MovementKind.ADJUSTMENT, None, actor_id, note)

    def deactivate(self, variant_id: int) -> Variant:
        variant = self._lock(variant_id)
        variant.deactivate()
        self._variants.save(variant)
        return variant

    # --- Internal helpers -----------------------------------------------------

    def _lock(self, variant_id: int) -> Variant:
        variant = self._variants.get_for_update(variant_id)
        if variant is None:
            raise EntityNotFoundError(f"Variant #{variant_id} not found")
        return variant

    def _record(
        self,
        variant_id: int,
        delta: int,
        kind: MovementKind,
        order_id: int | None,
        actor_id: int | None,
        note: str | None = None,
    ) -> StockMovement:
        return self._movements.append(
            StockMovement(
                id=None,
                variant_id=variant_id,
                delta=delta,
                kind=kind,
                created_at=self._clock(),
                order_id=order_id,
                actor_id=actor_id,
                note=note,
            )
        )
