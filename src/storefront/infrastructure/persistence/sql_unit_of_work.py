"""SQL implementation of the unit of work.

One connection and one transaction per ``with`` block.  Lock-wait
timeouts and deadlocks surface from the driver as ``OperationalError``;
they are re-raised as ``ConcurrencyConflict`` after the rollback so the
application layer can retry the whole unit.  Any other operational
error (a missing table, a refused connection) propagates unchanged.
"""

from __future__ import annotations

from sqlalchemy.engine import Connection, Engine, RootTransaction
from sqlalchemy.exc import OperationalError

from storefront.domain.exceptions import ConcurrencyConflict
from storefront.domain.repository.unit_of_work import UnitOfWork
from storefront.infrastructure.persistence.sql_order_repository import SqlOrderRepository
from storefront.infrastructure.persistence.sql_payment_repository import (
    SqlPaymentRepository,
)
from storefront.infrastructure.persistence.sql_stock_movement_repository import (
    SqlStockMovementRepository,
)
from storefront.infrastructure.persistence.sql_variant_repository import (
    SqlVariantRepository,
)

# Lock-wait timeouts and deadlocks: PostgreSQL SQLSTATEs, MySQL error codes
# and the SQLite busy messages.
_LOCK_SQLSTATES = frozenset({"40001", "40P01", "55P03"})
_LOCK_ERROR_CODES = frozenset({1205, 1213})
_LOCK_MESSAGES = ("database is locked", "database table is locked", "deadlock", "lock wait timeout")


def is_lock_conflict(exc: OperationalError) -> bool:
    """True when the driver error means the transaction lost a lock race."""
    orig = exc.orig
    sqlstate = getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)
    if sqlstate in _LOCK_SQLSTATES:
        return True
    args = getattr(orig, "args", ())
    if args and args[0] in _LOCK_ERROR_CODES:
        return True
    message = str(orig).lower()
    return any(marker in message for marker in _LOCK_MESSAGES)


class SqlUnitOfWork(UnitOfWork):

    def __init__(self, engine: Engine) -> None:
        self._engine = engine
        self._connection: Connection | None = None
        self._transaction: RootTransaction | None = None

    def __exit__(self, exc_type, exc, tb) -> None:
        super().__exit__(exc_type, exc, tb)
        if isinstance(exc, OperationalError) and is_lock_conflict(exc):
            raise ConcurrencyConflict(f"Transaction rolled back: {exc.orig}") from exc

    def _begin(self) -> None:
        if self._connection is not None:
            raise RuntimeError("Unit of work is already in progress")
        try:
            self._connection = self._engine.connect()
            self._transaction = self._connection.begin()
        except OperationalError as exc:
            self._end()
            if not is_lock_conflict(exc):
                raise
            raise ConcurrencyConflict(f"Could not start transaction: {exc.orig}") from exc
        self.variants = SqlVariantRepository(self._connection)
        self.orders = SqlOrderRepository(self._connection)
        self.payments = SqlPaymentRepository(self._connection)
        self.movements = SqlStockMovementRepository(self._connection)

    def _end(self) -> None:
        if self._connection is not None:
            self._connection.close()
        self._connection = None
        self._transaction = None

    def commit(self) -> None:
        if self._transaction is None:
            raise RuntimeError("No transaction in progress")
        self._transaction.commit()

    def rollback(self) -> None:
        if self._transaction is not None and self._transaction.is_active:
            self._transaction.rollback()
