"""SQL-backed implementation of VariantRepository."""

from __future__ import annotations

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, RowMapping
from sqlalchemy.exc import IntegrityError

from storefront.domain.exceptions import ValidationError
from storefront.domain.model.value_objects import Money
from storefront.domain.model.variant import Variant
from storefront.domain.repository.variant_repository import VariantRepository
from storefront.infrastructure.persistence.schema import variants


class SqlVariantRepository(VariantRepository):

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    # --- VariantRepository interface ------------------------------------------

    def get_by_id(self, variant_id: int) -> Variant | None:
        row = self._conn.execute(
            select(variants).where(variants.c.id == variant_id)
        ).mappings().first()
        return self._to_domain(row) if row is not None else None

    def get_for_update(self, variant_id: int) -> Variant | None:
        row = self._conn.execute(
            select(variants).where(variants.c.id == variant_id).with_for_update()
        ).mappings().first()
        return self._to_domain(row) if row is not None else None

    def list_all(self, include_inactive: bool = False) -> list[Variant]:
        stmt = select(variants).order_by(variants.c.id)
        if not include_inactive:
            stmt = stmt.where(variants.c.active.is_(True))
        return [self._to_domain(row) for row in self._conn.execute(stmt).mappings()]

    def add(self, variant: Variant) -> Variant:
        try:
            result = self._conn.execute(insert(variants).values(**self._to_row(variant)))
        except IntegrityError as exc:
            raise ValidationError(f"Variant {variant.label} already exists") from exc
        variant.id = result.inserted_primary_key[0]
        return variant

    def save(self, variant: Variant) -> None:
        self._conn.execute(
            update(variants)
            .where(variants.c.id == variant.id)
            .values(
                available_quantity=variant.available_quantity,
                active=variant.active,
            )
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_row(variant: Variant) -> dict:
        return {
            "product_id": variant.product_id,
            "product_name": variant.product_name,
            "size": variant.size,
            "color": variant.color,
            "unit_price": variant.unit_price.amount,
            "currency": variant.unit_price.currency,
            "available_quantity": variant.available_quantity,
            "active": variant.active,
        }

    @staticmethod
    def _to_domain(row: RowMapping) -> Variant:
        return Variant(
            id=row["id"],
            product_id=row["product_id"],
            product_name=row["product_name"],
            size=row["size"],
            color=row["color"],
            unit_price=Money(row["unit_price"], row["currency"]),
            available_quantity=row["available_quantity"],
            active=row["active"],
        )
