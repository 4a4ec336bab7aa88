"""Retry helper for transactions that lost a lock race.

A ``ConcurrencyConflict`` means the database rolled the transaction
back (lock-wait timeout or deadlock), so re-running the whole unit of
work from the start is safe.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import TypeVar

from storefront.domain.exceptions import ConcurrencyConflict

logger = logging.getLogger(__name__)

T = TypeVar("T")


def run_with_retry(
    func: Callable[[], T],
    *,
    attempts: int = 3,
    backoff_base: float = 0.1,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Execute ``func`` again on ConcurrencyConflict, with exponential backoff.

    The last conflict is re-raised once ``attempts`` are exhausted.
    """
    if attempts < 1:
        raise ValueError("attempts must be at least 1")
    for attempt in range(attempts):
        try:
            return func()
        except ConcurrencyConflict:
            if attempt >= attempts - 1:
                raise
            delay = backoff_base * (2 ** attempt)
            logger.warning(
                "Concurrency conflict, retrying in %.2fs (attempt %d of %d)",
                delay,
                attempt + 1,
                attempts,
            )
            sleep(delay)
    raise AssertionError("unreachable")
