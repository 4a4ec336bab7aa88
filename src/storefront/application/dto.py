"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from storefront.domain.model.order import Order
from storefront.domain.model.payment import Payment
from storefront.domain.model.stock_movement import StockMovement
from storefront.domain.model.variant import Variant

_TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class PlacedOrderDTO:
    """Output of a successful checkout."""

    order_id: int
    payment_id: int
    status: str
    total: str


@dataclass(frozen=True)
class OrderLineDTO:
    variant_id: int
    description: str
    quantity: int
    unit_price: str  # formatted, e.g. "$15.00"
    line_total: str


@dataclass(frozen=True)
class PaymentDTO:
    id: int
    status: str
    method: str
    amount: str
    rejection_reason: str | None
    updated_at: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order with its payment as displayed to the user."""

    id: int
    customer_id: int
    status: str
    lines: list[OrderLineDTO]
    total: str
    shipping_address: str
    created_at: str
    payment: PaymentDTO | None


@dataclass(frozen=True)
class TransitionDTO:
    payment_id: int
    order_id: int
    previous_status: str
    payment_status: str
    order_status: str
    units_released: int
    units_confirmed: int


@dataclass(frozen=True)
class VariantStockDTO:
    id: int
    description: str
    unit_price: str
    available: int
    active: bool


@dataclass(frozen=True)
class MovementDTO:
    id: int
    variant_id: int
    kind: str
    delta: int
    order_id: int | None
    actor: str
    created_at: str
    note: str | None


@dataclass(frozen=True)
class AvailabilityDTO:
    variant_id: int
    requested: int
    available: int
    max_offer: int

    @property
    def sufficient(self) -> bool:
        return self.requested <= self.available


@dataclass(frozen=True)
class AuditFindingDTO:
    kind: str
    order_id: int | None
    payment_id: int | None
    message: str


# --- Mapping --------------------------------------------------------------------


def payment_to_dto(payment: Payment) -> PaymentDTO:
    return PaymentDTO(
        id=payment.id,  # type: ignore[arg-type]
        status=payment.status.value,
        method=payment.payment_method,
        amount=str(payment.amount),
        rejection_reason=payment.rejection_reason,
        updated_at=payment.updated_at.strftime(_TIMESTAMP_FORMAT),
    )


def order_to_dto(order: Order, payment: Payment | None) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        customer_id=order.customer_id,
        status=order.status.value,
        lines=[
            OrderLineDTO(
                variant_id=line.variant_id,
                description=f"{line.product_name} ({line.size}/{line.color})",
                quantity=line.quantity.value,
                unit_price=str(line.unit_price),
                line_total=str(line.line_total),
            )
            for line in order.lines
        ],
        total=str(order.total),
        shipping_address=str(order.shipping_address),
        created_at=order.created_at.strftime(_TIMESTAMP_FORMAT),
        payment=payment_to_dto(payment) if payment is not None else None,
    )


def variant_to_dto(variant: Variant) -> VariantStockDTO:
    return VariantStockDTO(
        id=variant.id,  # type: ignore[arg-type]
        description=variant.label,
        unit_price=str(variant.unit_price),
        available=variant.available_quantity,
        active=variant.active,
    )


def movement_to_dto(movement: StockMovement) -> MovementDTO:
    return MovementDTO(
        id=movement.id,  # type: ignore[arg-type]
        variant_id=movement.variant_id,
        kind=movement.kind.value,
        delta=movement.delta,
        order_id=movement.order_id,
        actor="system" if movement.actor_id is None else f"#{movement.actor_id}",
        created_at=movement.created_at.strftime(_TIMESTAMP_FORMAT),
        note=movement.note,
    )
