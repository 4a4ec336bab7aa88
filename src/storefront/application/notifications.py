"""Outbound customer notifications.

The sender is an external collaborator (email in production).  Use
cases collect notifications while their transaction runs and dispatch
them only after commit: a failed send is logged and dropped, it never
undoes or blocks a committed state change.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Iterable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

ORDER_CONFIRMATION = "order_confirmation"
PAYMENT_APPROVED = "payment_approved"
ORDER_CANCELLED = "order_cancelled"


@dataclass(frozen=True)
class Notification:
    recipient: str
    template_id: str
    payload: dict[str, Any] = field(default_factory=dict)


class NotificationSender(ABC):

    @abstractmethod
    def send(self, notification: Notification) -> None:
        """Deliver one notification; raise on failure."""


def customer_recipient(customer_id: int) -> str:
    """Address a customer by id; the sender resolves it to an email."""
    return f"customer:{customer_id}"


def dispatch(sender: NotificationSender, notifications: Iterable[Notification]) -> int:
    """Send each notification best-effort.  Returns how many were sent."""
    sent = 0
    for notification in notifications:
        try:
            sender.send(notification)
        except Exception:
            logger.exception(
                "Failed to send %s notification to %s",
                notification.template_id,
                notification.recipient,
            )
            continue
        sent += 1
    return sent
