"""Application service: expire stale reservations.

Payments still ``pending`` or ``pending_approval`` whose order is older
than the TTL are cancelled through the normal state machine, which
releases their stock and cancels the order.  Each payment gets its own
transaction; one that moved on in the meantime is skipped, so running
the sweep twice has no further effect.  A payment that keeps failing is
logged and left for the next run without stopping the others.

Triggered by an external scheduler (cron) or by request traffic.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from storefront.application.concurrency import run_with_retry
from storefront.application.notifications import NotificationSender, dispatch
from storefront.application.transition_payment import apply_payment_transition
from storefront.domain.exceptions import (
    DomainException,
    InvalidTransition,
    ValidationError,
)
from storefront.domain.model.payment import OPEN_STATUSES, PaymentStatus
from storefront.domain.repository.unit_of_work import UnitOfWork

logger = logging.getLogger(__name__)

DEFAULT_TTL = timedelta(hours=24)
EXPIRY_REASON = "reservation expired"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SweepExpiredReservationsHandler:

    def __init__(
        self,
        uow: UnitOfWork,
        notifier: NotificationSender,
        clock: Callable[[], datetime] = _utcnow,
        retry_attempts: int = 3,
    ) -> None:
        self._uow = uow
        self._notifier = notifier
        self._clock = clock
        self._retry_attempts = retry_attempts

    def handle(self, ttl: timedelta = DEFAULT_TTL) -> int:
        """Cancel every expired reservation.  Returns how many were cancelled."""
        if ttl <= timedelta(0):
            raise ValidationError("Reservation TTL must be positive")

        cutoff = self._clock() - ttl
        with self._uow as uow:
            candidates = [p.id for p in uow.payments.find_stale(OPEN_STATUSES, cutoff)]

        cancelled = 0
        failed = 0
        for payment_id in candidates:
            try:
                outcome, notification = run_with_retry(
                    lambda pid=payment_id: apply_payment_transition(
                        self._uow,
                        pid,
                        PaymentStatus.CANCELLED,
                        actor_id=None,
                        reason=EXPIRY_REASON,
                        clock=self._clock,
                    ),
                    attempts=self._retry_attempts,
                )
            except InvalidTransition as exc:
                logger.info("Skipping payment #%s: %s", payment_id, exc)
                continue
            except DomainException:
                logger.exception("Could not expire payment #%s; leaving it for the next sweep", payment_id)
                failed += 1
                continue

            cancelled += 1
            logger.info(
                "Expired reservation: order #%s cancelled, %d unit(s) released",
                outcome.order_id,
                outcome.units_released,
            )
            if notification is not None:
                dispatch(self._notifier, [notification])

        logger.info(
            "Reservation sweep cancelled %d of %d candidate payment(s) older than %s (%d failed)",
            cancelled,
            len(candidates),
            cutoff.isoformat(),
            failed,
        )
        return cancelled
