"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

from functools import lru_cache

from sqlalchemy.engine import Engine

from storefront.infrastructure.config import Settings, load_settings
from storefront.infrastructure.notifications.logging_sender import (
    LoggingNotificationSender,
)
from storefront.infrastructure.persistence.database import make_engine
from storefront.infrastructure.persistence.sql_unit_of_work import SqlUnitOfWork


@lru_cache(maxsize=1)
def settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=None)
def _engine(database_url: str) -> Engine:
    return make_engine(database_url)


def unit_of_work() -> SqlUnitOfWork:
    return SqlUnitOfWork(_engine(settings().database_url))


def notification_sender() -> LoggingNotificationSender:
    return LoggingNotificationSender()


def reset() -> None:
    """Forget cached settings and engines (tests, config reloads)."""
    settings.cache_clear()
    _engine.cache_clear()
