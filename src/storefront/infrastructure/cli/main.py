import logging

import click

from storefront.infrastructure.bootstrap import settings
from storefront.infrastructure.cli.order_commands import order_place, order_show
from storefront.infrastructure.cli.payment_commands import (
    payment_audit,
    payment_sweep,
    payment_transition,
)
from storefront.infrastructure.cli.stock_commands import (
    stock_add,
    stock_adjust,
    stock_check,
    stock_deactivate,
    stock_history,
    stock_recent,
    stock_restock,
    stock_show,
)


@click.group()
def cli() -> None:
    """Storefront: orders, payments and stock"""
    logging.basicConfig(
        level=settings().log_level,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


@cli.group()
def order() -> None:
    """Place and inspect orders."""


@cli.group()
def payment() -> None:
    """Manage payments."""


@cli.group()
def stock() -> None:
    """Manage variant stock."""


# Register subcommands
order.add_command(order_place)
order.add_command(order_show)
payment.add_command(payment_audit)
payment.add_command(payment_sweep)
payment.add_command(payment_transition)
stock.add_command(stock_add)
stock.add_command(stock_adjust)
stock.add_command(stock_check)
stock.add_command(stock_deactivate)
stock.add_command(stock_history)
stock.add_command(stock_recent)
stock.add_command(stock_restock)
stock.add_command(stock_show)
