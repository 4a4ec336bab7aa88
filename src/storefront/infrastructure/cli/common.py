"""Helpers shared by the CLI command modules."""

from __future__ import annotations

from collections.abc import Callable

import click

from storefront.domain.exceptions import DomainException
from storefront.domain.model.actor import Actor, Role


def actor_options(func: Callable) -> Callable:
    """Add ``--actor-id`` / ``--role``, as supplied by the session provider."""
    func = click.option(
        "--role",
        required=True,
        type=click.Choice([r.value for r in Role], case_sensitive=False),
        help="Role of the acting user.",
    )(func)
    func = click.option("--actor-id", required=True, type=int, help="Acting user ID.")(func)
    return func


def build_actor(actor_id: int, role: str) -> Actor:
    try:
        return Actor(id=actor_id, role=Role.parse(role))
    except DomainException as exc:
        raise click.BadParameter(str(exc))


def parse_pairs(raw: str) -> list[tuple[int, int]]:
    """Parse '3:2,5:1' into [(3, 2), (5, 1)] (variant id, quantity)."""
    pairs: list[tuple[int, int]] = []
    for pair in raw.split(","):
        pair = pair.strip()
        if ":" not in pair:
            raise click.BadParameter(
                f"Invalid item format '{pair}'. Expected 'VariantId:Quantity'."
            )
        variant_str, qty_str = pair.split(":", 1)
        try:
            pairs.append((int(variant_str), int(qty_str)))
        except ValueError:
            raise click.BadParameter(f"Invalid item '{pair}'. Both parts must be integers.")
    return pairs
