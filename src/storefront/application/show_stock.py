"""Application service: Show Stock use cases (queries)."""

from __future__ import annotations

from storefront.application.dto import (
    MovementDTO,
    VariantStockDTO,
    movement_to_dto,
    variant_to_dto,
)
from storefront.domain.exceptions import EntityNotFoundError, ValidationError
from storefront.domain.repository.unit_of_work import UnitOfWork


class ShowStockHandler:

    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    def handle(self, include_inactive: bool = False) -> list[VariantStockDTO]:
        with self._uow as uow:
            variants = uow.variants.list_all(include_inactive=include_inactive)
        return [variant_to_dto(v) for v in variants]

    def history(self, variant_id: int) -> list[MovementDTO]:
        """Full movement history of one variant, oldest first."""
        with self._uow as uow:
            if uow.variants.get_by_id(variant_id) is None:
                raise EntityNotFoundError(f"Variant #{variant_id} not found")
            movements = uow.movements.list_for_variant(variant_id)
        return [movement_to_dto(m) for m in movements]

    def recent(self, limit: int = 50) -> list[MovementDTO]:
        if limit <= 0:
            raise ValidationError("Limit must be positive")
        with self._uow as uow:
            movements = uow.movements.list_recent(limit)
        return [movement_to_dto(m) for m in movements]
