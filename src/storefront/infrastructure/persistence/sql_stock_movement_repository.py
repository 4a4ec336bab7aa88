"""SQL-backed implementation of StockMovementRepository (insert-only)."""

from __future__ import annotations

from dataclasses import replace

from sqlalchemy import exists, insert, select
from sqlalchemy.engine import Connection, RowMapping

from storefront.domain.model.stock_movement import MovementKind, StockMovement
from storefront.domain.repository.stock_movement_repository import (
    StockMovementRepository,
)
from storefront.infrastructure.persistence.schema import stock_movements


class SqlStockMovementRepository(StockMovementRepository):

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    def append(self, movement: StockMovement) -> StockMovement:
        result = self._conn.execute(
            insert(stock_movements).values(
                variant_id=movement.variant_id,
                delta=movement.delta,
                kind=movement.kind.value,
                order_id=movement.order_id,
                actor_id=movement.actor_id,
                note=movement.note,
                created_at=movement.created_at,
            )
        )
        return replace(movement, id=result.inserted_primary_key[0])

    def exists(self, order_id: int, variant_id: int, kind: MovementKind) -> bool:
        stmt = select(
            exists().where(
                stock_movements.c.order_id == order_id,
                stock_movements.c.variant_id == variant_id,
                stock_movements.c.kind == kind.value,
            )
        )
        return bool(self._conn.execute(stmt).scalar())

    def list_for_variant(self, variant_id: int) -> list[StockMovement]:
        return self._list(
            select(stock_movements)
            .where(stock_movements.c.variant_id == variant_id)
            .order_by(stock_movements.c.id)
        )

    def list_for_order(self, order_id: int) -> list[StockMovement]:
        return self._list(
            select(stock_movements)
            .where(stock_movements.c.order_id == order_id)
            .order_by(stock_movements.c.id)
        )

    def list_recent(self, limit: int = 50) -> list[StockMovement]:
        return self._list(
            select(stock_movements).order_by(stock_movements.c.id.desc()).limit(limit)
        )

    # --- Serialization --------------------------------------------------------

    def _list(self, stmt) -> list[StockMovement]:
        return [self._to_domain(row) for row in self._conn.execute(stmt).mappings()]

    @staticmethod
    def _to_domain(row: RowMapping) -> StockMovement:
        return StockMovement(
            id=row["id"],
            variant_id=row["variant_id"],
            delta=row["delta"],
            kind=MovementKind(row["kind"]),
            created_at=row["created_at"],
            order_id=row["order_id"],
            actor_id=row["actor_id"],
            note=row["note"],
        )
