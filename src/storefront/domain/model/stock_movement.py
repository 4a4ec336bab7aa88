"""StockMovement: the append-only audit trail of the stock ledger."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


class MovementKind(Enum):
    SALE = "sale"
    RELEASE = "release"
    RESTOCK = "restock"
    ADJUSTMENT = "adjustment"
    CONFIRMATION = "confirmation"


@dataclass(frozen=True)
class StockMovement:
    """One ledger-affecting operation. Never updated or deleted."""

    id: int | None
    variant_id: int
    delta: int
    kind: MovementKind
    created_at: datetime
    order_id: int | None = None
    actor_id: int | None = None  # None means the system (e.g. expiry sweep)
    note: str | None = None
