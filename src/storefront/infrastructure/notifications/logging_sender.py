"""Notification sender that writes messages to the application log.

Stands in for the email gateway in development and in the CLI.
"""

from __future__ import annotations

import json
import logging

from storefront.application.notifications import Notification, NotificationSender

logger = logging.getLogger(__name__)


class LoggingNotificationSender(NotificationSender):

    def send(self, notification: Notification) -> None:
        logger.info(
            "Notification %s -> %s %s",
            notification.template_id,
            notification.recipient,
            json.dumps(notification.payload, default=str, sort_keys=True),
        )
