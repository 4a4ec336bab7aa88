"""CLI commands for orders (checkout and order lookup)."""

from __future__ import annotations

import click

from storefront.application.dto import OrderDTO
from storefront.application.place_order import PlaceOrderHandler
from storefront.application.show_order import ShowOrderHandler
from storefront.domain.exceptions import DomainException, InsufficientStock
from storefront.domain.model.cart import Cart
from storefront.domain.model.value_objects import ShippingAddress
from storefront.infrastructure.bootstrap import (
    notification_sender,
    settings,
    unit_of_work,
)
from storefront.infrastructure.cli.common import parse_pairs


@click.command("place")
@click.option("--customer", "customer_id", required=True, type=int, help="Customer ID.")
@click.option("--items", required=True, help="Items as 'VariantId:Qty,VariantId:Qty'.")
@click.option("--street", required=True, help="Shipping street and number.")
@click.option("--city", required=True, help="Shipping city.")
@click.option("--province", required=True, help="Shipping province.")
@click.option("--postal-code", required=True, help="Shipping postal code.")
@click.option("--payment-method", required=True, help="Payment method reference.")
def order_place(
    customer_id: int,
    items: str,
    street: str,
    city: str,
    province: str,
    postal_code: str,
    payment_method: str,
) -> None:
    """Place an order: reserves stock and opens a pending payment."""
    pairs = parse_pairs(items)

    handler = PlaceOrderHandler(
        uow=unit_of_work(),
        notifier=notification_sender(),
        retry_attempts=settings().retry_attempts,
    )

    try:
        cart = Cart.of(pairs)
        address = ShippingAddress(street, city, province, postal_code)
        placed = handler.handle(customer_id, cart, address, payment_method)
    except InsufficientStock as exc:
        raise click.ClickException(f"{exc}. You can order up to {exc.max_offer}.")
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Order #{placed.order_id} placed  (status={placed.status}, "
        f"payment #{placed.payment_id}, total {placed.total})"
    )


def _display_order(dto: OrderDTO) -> None:
    """Shared formatting for displaying an order."""
    click.echo(f"Order #{dto.id}  (status={dto.status})")
    click.echo(f"Customer: #{dto.customer_id}")
    click.echo(f"Created:  {dto.created_at}")
    click.echo(f"Ship to:  {dto.shipping_address}")
    click.echo()
    click.echo(f"  {'Variant':<30} {'Qty':>5} {'Price':>10} {'Total':>10}")
    click.echo(f"  {'-'*57}")
    for line in dto.lines:
        click.echo(
            f"  {line.description:<30} {line.quantity:>5} {line.unit_price:>10} {line.line_total:>10}"
        )
    click.echo(f"  {'-'*57}")
    click.echo(f"  {'Order Total':<37} {dto.total:>20}")
    click.echo()
    if dto.payment is None:
        click.echo("Payment: none")
    else:
        click.echo(
            f"Payment #{dto.payment.id}: {dto.payment.status} via {dto.payment.method} "
            f"({dto.payment.amount}, updated {dto.payment.updated_at})"
        )
        if dto.payment.rejection_reason:
            click.echo(f"  Reason: {dto.payment.rejection_reason}")


@click.command("show")
@click.option("--id", "order_id", required=True, type=int, help="Order ID to display.")
@click.option("--movements", is_flag=True, default=False, help="Also list stock movements.")
def order_show(order_id: int, movements: bool) -> None:
    """Show details of an existing order."""
    handler = ShowOrderHandler(uow=unit_of_work())

    try:
        dto = handler.handle(order_id)
        history = handler.movements(order_id) if movements else []
    except DomainException as exc:
        raise click.ClickException(str(exc))

    _display_order(dto)
    if movements:
        click.echo()
        for m in history:
            click.echo(f"  {m.created_at}  variant #{m.variant_id:<5} {m.kind:<13} {m.delta:>+6}")
