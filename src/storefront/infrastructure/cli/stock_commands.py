"""CLI commands for variant stock management."""

from __future__ import annotations

import click

from storefront.application.add_variant import AddVariantHandler
from storefront.application.adjust_stock import AdjustStockHandler
from storefront.application.check_availability import CheckAvailabilityHandler
from storefront.application.dto import MovementDTO
from storefront.application.show_stock import ShowStockHandler
from storefront.domain.exceptions import DomainException
from storefront.infrastructure.bootstrap import settings, unit_of_work
from storefront.infrastructure.cli.common import actor_options, build_actor


def _display_movements(movements: list[MovementDTO]) -> None:
    if not movements:
        click.echo("No stock movements found.")
        return
    click.echo(f"{'ID':>6} {'When':<20} {'Variant':>8} {'Kind':<13} {'Delta':>6} {'Order':>6} {'Actor':>8}")
    click.echo("-" * 73)
    for m in movements:
        order = f"#{m.order_id}" if m.order_id is not None else "-"
        click.echo(
            f"{m.id:>6} {m.created_at:<20} {m.variant_id:>8} {m.kind:<13} "
            f"{m.delta:>+6} {order:>6} {m.actor:>8}"
        )


@click.command("add")
@click.option("--product-id", required=True, type=int, help="Product ID.")
@click.option("--name", required=True, help="Product name.")
@click.option("--size", required=True, help="Size.")
@click.option("--color", required=True, help="Color.")
@click.option("--price", required=True, help="Unit price, e.g. 15000.00.")
@click.option("--initial", "initial_stock", default=0, type=int, help="Initial stock.")
@actor_options
def stock_add(
    product_id: int,
    name: str,
    size: str,
    color: str,
    price: str,
    initial_stock: int,
    actor_id: int,
    role: str,
) -> None:
    """Add a variant (product x size x color)."""
    handler = AddVariantHandler(
        uow=unit_of_work(),
        currency=settings().currency,
        retry_attempts=settings().retry_attempts,
    )

    try:
        dto = handler.handle(
            build_actor(actor_id, role), product_id, name, size, color, price, initial_stock
        )
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Variant #{dto.id} {dto.description} added with {dto.available} in stock.")


@click.command("show")
@click.option("--all", "include_inactive", is_flag=True, default=False, help="Include inactive variants.")
def stock_show(include_inactive: bool) -> None:
    """Show current stock levels."""
    handler = ShowStockHandler(uow=unit_of_work())
    lines = handler.handle(include_inactive=include_inactive)

    if not lines:
        click.echo("No variants found.")
        return

    click.echo(f"{'ID':>5} {'Variant':<30} {'Price':>12} {'Available':>10} {'Active':>7}")
    click.echo("-" * 68)
    for line in lines:
        click.echo(
            f"{line.id:>5} {line.description:<30} {line.unit_price:>12} "
            f"{line.available:>10} {'yes' if line.active else 'no':>7}"
        )


@click.command("history")
@click.option("--id", "variant_id", required=True, type=int, help="Variant ID.")
def stock_history(variant_id: int) -> None:
    """Show the movement history of a variant."""
    try:
        movements = ShowStockHandler(uow=unit_of_work()).history(variant_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    _display_movements(movements)


@click.command("recent")
@click.option("--limit", default=50, type=click.IntRange(min=1), help="How many movements.")
def stock_recent(limit: int) -> None:
    """Show the most recent stock movements."""
    _display_movements(ShowStockHandler(uow=unit_of_work()).recent(limit))


@click.command("check")
@click.option("--id", "variant_id", required=True, type=int, help="Variant ID.")
@click.option("--quantity", required=True, type=int, help="Quantity wanted.")
def stock_check(variant_id: int, quantity: int) -> None:
    """Check whether a quantity is currently available."""
    try:
        result = CheckAvailabilityHandler(uow=unit_of_work()).handle(variant_id, quantity)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if result.sufficient:
        click.echo(f"{result.requested} available (in stock: {result.available}).")
    else:
        click.echo(f"Only {result.available} available; you can order up to {result.max_offer}.")


def _adjust_handler() -> AdjustStockHandler:
    return AdjustStockHandler(uow=unit_of_work(), retry_attempts=settings().retry_attempts)


@click.command("restock")
@click.option("--id", "variant_id", required=True, type=int, help="Variant ID.")
@click.option("--quantity", required=True, type=int, help="Units received.")
@click.option("--note", default=None, help="Free-text note for the movement.")
@actor_options
def stock_restock(variant_id: int, quantity: int, note: str | None, actor_id: int, role: str) -> None:
    """Add received units to a variant."""
    try:
        dto = _adjust_handler().restock(build_actor(actor_id, role), variant_id, quantity, note)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Variant #{dto.id} now has {dto.available} available.")


@click.command("adjust")
@click.option("--id", "variant_id", required=True, type=int, help="Variant ID.")
@click.option("--delta", required=True, type=int, help="Signed correction, e.g. -2.")
@click.option("--note", default=None, help="Free-text note for the movement.")
@actor_options
def stock_adjust(variant_id: int, delta: int, note: str | None, actor_id: int, role: str) -> None:
    """Correct a variant's stock after a count."""
    try:
        dto = _adjust_handler().adjust(build_actor(actor_id, role), variant_id, delta, note)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Variant #{dto.id} now has {dto.available} available.")


@click.command("deactivate")
@click.option("--id", "variant_id", required=True, type=int, help="Variant ID.")
@actor_options
def stock_deactivate(variant_id: int, actor_id: int, role: str) -> None:
    """Stop selling a variant (it is never deleted)."""
    try:
        dto = _adjust_handler().deactivate(build_actor(actor_id, role), variant_id)
    except DomainException as exc:
        raise click.ClickException(str(exc))
    click.echo(f"Variant #{dto.id} {dto.description} deactivated.")
