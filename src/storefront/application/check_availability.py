"""Application service: preliminary availability check.

Used by cart pages before checkout.  It takes no lock; the binding
check happens again under lock when the order is placed.
"""

from __future__ import annotations

from storefront.application.dto import AvailabilityDTO
from storefront.domain.exceptions import EntityNotFoundError
from storefront.domain.model.value_objects import Quantity
from storefront.domain.repository.unit_of_work import UnitOfWork


class CheckAvailabilityHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, variant_id: int, quantity: int) -> AvailabilityDTO:
        requested = Quantity(quantity)
        with self._uow as uow:
            variant = uow.variants.get_by_id(variant_id)
        if variant is None:
            raise EntityNotFoundError(f"Variant #{variant_id} not found")

        available = variant.available_quantity if variant.active else 0
        return AvailabilityDTO(
            variant_id=variant_id,
            requested=requested.value,
            available=available,
            max_offer=min(requested.value, available),
        )
