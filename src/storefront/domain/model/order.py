"""Order aggregate.

The Order owns its lines, which are immutable once created.  Its status
is never set directly by callers: it follows the payment status (see
``order_status_for`` in the payment module).
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from storefront.domain.exceptions import EmptyCart, ValidationError
from storefront.domain.model.value_objects import Money, Quantity, ShippingAddress


class OrderStatus(Enum):
    PENDING = "pending"
    PREPARING = "preparing"
    CANCELLED = "cancelled"


@dataclass(frozen=True)
class OrderLine:
    """Captures the variant and price snapshot at order-creation time."""

    variant_id: int
    product_name: str
    size: str
    color: str
    quantity: Quantity
    unit_price: Money  # locked at order-creation time

    @property
    def line_total(self) -> Money:
        return self.unit_price * self.quantity.value


# ---------------------------------------------------------------------------
# Constants for business rules
# ---------------------------------------------------------------------------
MAX_ORDER_LINES = 50


@dataclass
class Order:
    """Aggregate root for customer orders.

    Use the ``Order.create()`` factory for new orders; it enforces all
    business rules.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    customer_id: int
    lines: tuple[OrderLine, ...]
    shipping_address: ShippingAddress
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def create(
        customer_id: int,
        lines: list[OrderLine],
        shipping_address: ShippingAddress,
        created_at: datetime,
    ) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if customer_id is None or customer_id <= 0:
            raise ValidationError("Customer id is required")

        if not lines:
            raise EmptyCart()

        if len(lines) > MAX_ORDER_LINES:
            raise ValidationError(f"Maximum {MAX_ORDER_LINES} lines per order")

        return Order(
            id=None,
            customer_id=customer_id,
            lines=tuple(lines),
            shipping_address=shipping_address,
            created_at=created_at,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero(self.lines[0].unit_price.currency) if self.lines else Money.zero()
        for line in self.lines:
            result = result + line.line_total
        return result
