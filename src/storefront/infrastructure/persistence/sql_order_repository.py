"""SQL-backed implementation of OrderRepository."""

from __future__ import annotations

from collections import defaultdict

from sqlalchemy import insert, select, update
from sqlalchemy.engine import Connection, RowMapping

from storefront.domain.model.order import Order, OrderLine, OrderStatus
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress
from storefront.domain.repository.order_repository import OrderRepository
from storefront.infrastructure.persistence.schema import order_lines, orders


class SqlOrderRepository(OrderRepository):

    def __init__(self, connection: Connection) -> None:
        self._conn = connection

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        row = self._conn.execute(
            select(orders).where(orders.c.id == order_id)
        ).mappings().first()
        if row is None:
            return None
        lines = self._conn.execute(
            select(order_lines)
            .where(order_lines.c.order_id == order_id)
            .order_by(order_lines.c.position)
        ).mappings()
        return self._to_domain(row, [self._line_to_domain(line) for line in lines])

    def list_all(self) -> list[Order]:
        lines_by_order: dict[int, list[OrderLine]] = defaultdict(list)
        for line in self._conn.execute(
            select(order_lines).order_by(order_lines.c.order_id, order_lines.c.position)
        ).mappings():
            lines_by_order[line["order_id"]].append(self._line_to_domain(line))

        rows = self._conn.execute(select(orders).order_by(orders.c.id)).mappings()
        return [self._to_domain(row, lines_by_order[row["id"]]) for row in rows]

    def add(self, order: Order) -> Order:
        address = order.shipping_address
        result = self._conn.execute(
            insert(orders).values(
                customer_id=order.customer_id,
                status=order.status.value,
                created_at=order.created_at,
                ship_street=address.street,
                ship_city=address.city,
                ship_province=address.province,
                ship_postal_code=address.postal_code,
            )
        )
        order.id = result.inserted_primary_key[0]
        self._conn.execute(
            insert(order_lines),
            [
                {
                    "order_id": order.id,
                    "position": position,
                    "variant_id": line.variant_id,
                    "product_name": line.product_name,
                    "size": line.size,
                    "color": line.color,
                    "quantity": line.quantity.value,
                    "unit_price": line.unit_price.amount,
                    "currency": line.unit_price.currency,
                }
                for position, line in enumerate(order.lines)
            ],
        )
        return order

    def save_status(self, order: Order) -> None:
        self._conn.execute(
            update(orders).where(orders.c.id == order.id).values(status=order.status.value)
        )

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _line_to_domain(row: RowMapping) -> OrderLine:
        return OrderLine(
            variant_id=row["variant_id"],
            product_name=row["product_name"],
            size=row["size"],
            color=row["color"],
            quantity=Quantity(row["quantity"]),
            unit_price=Money(row["unit_price"], row["currency"]),
        )

    @staticmethod
    def _to_domain(row: RowMapping, lines: list[OrderLine]) -> Order:
        return Order(
            id=row["id"],
            customer_id=row["customer_id"],
            lines=tuple(lines),
            shipping_address=ShippingAddress(
                street=row["ship_street"],
                city=row["ship_city"],
                province=row["ship_province"],
                postal_code=row["ship_postal_code"],
            ),
            status=OrderStatus(row["status"]),
            created_at=row["created_at"],
        )
