"""CLI commands for payments (back office)."""

from __future__ import annotations

from datetime import timedelta

import click

from storefront.application.audit_payments import AuditPaymentsHandler
from storefront.application.sweep_expired_reservations import (
    SweepExpiredReservationsHandler,
)
from storefront.application.transition_payment import TransitionPaymentHandler
from storefront.domain.exceptions import DomainException
from storefront.domain.model.payment import PaymentStatus
from storefront.infrastructure.bootstrap import (
    notification_sender,
    settings,
    unit_of_work,
)
from storefront.infrastructure.cli.common import actor_options, build_actor


@click.command("transition")
@click.option("--id", "payment_id", required=True, type=int, help="Payment ID.")
@click.option(
    "--status",
    required=True,
    type=click.Choice([s.value for s in PaymentStatus], case_sensitive=False),
    help="New payment status.",
)
@click.option("--reason", default=None, help="Reason (required when rejecting).")
@actor_options
def payment_transition(
    payment_id: int,
    status: str,
    reason: str | None,
    actor_id: int,
    role: str,
) -> None:
    """Change a payment's status (sales and admin only)."""
    actor = build_actor(actor_id, role)
    handler = TransitionPaymentHandler(
        uow=unit_of_work(),
        notifier=notification_sender(),
        retry_attempts=settings().retry_attempts,
    )

    try:
        result = handler.handle(payment_id, status, actor, reason=reason)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(
        f"Payment #{result.payment_id}: {result.previous_status} -> {result.payment_status} "
        f"(order #{result.order_id} is now {result.order_status})"
    )
    if result.units_released:
        click.echo(f"{result.units_released} unit(s) returned to stock.")


@click.command("sweep")
@click.option(
    "--ttl-hours",
    type=click.IntRange(min=1),
    default=None,
    help="Reservation lifetime in hours (defaults to configuration).",
)
def payment_sweep(ttl_hours: int | None) -> None:
    """Cancel pending orders whose reservation has expired."""
    ttl = timedelta(hours=ttl_hours) if ttl_hours else settings().reservation_ttl
    handler = SweepExpiredReservationsHandler(
        uow=unit_of_work(),
        notifier=notification_sender(),
        retry_attempts=settings().retry_attempts,
    )

    try:
        count = handler.handle(ttl)
    except DomainException as exc:
        raise click.ClickException(str(exc))

    click.echo(f"Cancelled {count} expired reservation(s).")


@click.command("audit")
@actor_options
def payment_audit(actor_id: int, role: str) -> None:
    """Report order/payment inconsistencies."""
    handler = AuditPaymentsHandler(uow=unit_of_work())

    try:
        findings = handler.handle(build_actor(actor_id, role))
    except DomainException as exc:
        raise click.ClickException(str(exc))

    if not findings:
        click.echo("No inconsistencies found.")
        return
    for finding in findings:
        click.echo(f"[{finding.kind}] {finding.message}")
