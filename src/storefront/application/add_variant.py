"""Application service: Add Variant use case."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from storefront.application.concurrency import run_with_retry
from storefront.application.dto import VariantStockDTO, variant_to_dto
from storefront.domain.exceptions import ValidationError
from storefront.domain.model.actor import Actor, Capability
from storefront.domain.model.value_objects import Money
from storefront.domain.model.variant import Variant
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.domain.service.stock_ledger import StockLedger

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class AddVariantHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        clock: Callable[[], datetime] = _utcnow,
        currency: str = "ARS",
        retry_attempts: int = 3,
    ) -> None:
        self._uow = uow
        self._clock = clock
        self._currency = currency
        self._retry_attempts = retry_attempts

    def handle(
        self,
        actor: Actor,
        product_id: int,
        product_name: str,
        size: str,
        color: str,
        price: str,
        initial_stock: int = 0,
    ) -> VariantStockDTO:
        """Add a sellable size/color of a product, optionally with stock."""
        actor.require(Capability.MANAGE_STOCK)
        if not product_name or not product_name.strip():
            raise ValidationError("Product name is required")
        if not size.strip() or not color.strip():
            raise ValidationError("Size and color are required")
        if initial_stock < 0:
            raise ValidationError("Initial stock cannot be negative")
        unit_price = Money.of(price, self._currency)
        if unit_price.is_zero:
            raise ValidationError("Variant price must be greater than zero")

        variant = run_with_retry(
            lambda: self._add(actor, product_id, product_name, size, color, unit_price, initial_stock),
            attempts=self._retry_attempts,
        )
        logger.info("Variant #%s %s added by actor #%s", variant.id, variant.label, actor.id)
        return variant_to_dto(variant)

    def _add(
        self,
        actor: Actor,
        product_id: int,
        product_name: str,
        size: str,
        color: str,
        unit_price: Money,
        initial_stock: int,
    ) -> Variant:
        with self._uow as uow:
            for existing in uow.variants.list_all(include_inactive=True):
                if (
                    existing.product_id == product_id
                    and existing.size.lower() == size.strip().lower()
                    and existing.color.lower() == color.strip().lower()
                ):
                    raise ValidationError(
                        f"Variant {existing.label} already exists (#{existing.id})"
                    )

            variant = uow.variants.add(
                Variant(
                    id=None,
                    product_id=product_id,
                    product_name=product_name.strip(),
                    size=size.strip(),
                    color=color.strip(),
                    unit_price=unit_price,
                )
            )
            if initial_stock:
                ledger = StockLedger(uow.variants, uow.movements, self._clock)
                ledger.restock(variant.id, initial_stock, actor.id, note="initial stock")  # type: ignore[arg-type]
                variant.available_quantity = initial_stock
            uow.commit()
        return variant
