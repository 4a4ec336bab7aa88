"""Application service: back-office stock changes.

Restocks, signed adjustments and deactivation all go through the stock
ledger so each one leaves a movement behind.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.concurrency import run_with_retry
from storefront.application.dto import VariantStockDTO, variant_to_dto
from storefront.domain.model.actor import Actor, Capability
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AdjustStockHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = _utcnow,
        retry_attempts: int = 3,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._retry_attempts = retry_attempts

    def restock(self, actor: Actor, variant_id: int, quantity: int, note: str | None = None) -> VariantStockDTO:
        actor.require(Capability.MANAGE_STOCK)
        result = self._run(lambda ledger: ledger.restock(variant_id, quantity, actor.id, note), variant_id)
        logger.info("Variant #%s restocked by %d (actor #%s)", variant_id, quantity, actor.id)
        return result

    def adjust(self, actor: Actor, variant_id: int, delta: int, note: str | None = None) -> VariantStockDTO:
        actor.require(Capability.MANAGE_STOCK)
        result = self._run(lambda ledger: ledger.adjust(variant_id, delta, actor.id, note), variant_id)
        logger.info("Variant #%s adjusted by %+d (actor #%s)", variant_id, delta, actor.id)
        return result

    def deactivate(self, actor: Actor, variant_id: int) -> VariantStockDTO:
        actor.require(Capability.MANAGE_STOCK)
        result = self._run(lambda ledger: ledger.deactivate(variant_id), variant_id)
        logger.info("Variant #%s deactivated (actor #%s)", variant_id, actor.id)
        return result

    # --- Internal helpers -----------------------------------------------------

    def _run(self, operation: Callable[[StockLedger], object], variant_id: int) -> VariantStockDTO:
        def attempt() -> VariantStockDTO:
            with self._uow as uow:
                operation(StockLedger(uow.variants, uow.movements, self._clock))
                variant = uow.variants.get_by_id(variant_id)
                uow.commit()
            return variant_to_dto(variant)  # type: ignore[arg-type]

        return run_with_retry(attempt, attempts=self._retry_attempts)
