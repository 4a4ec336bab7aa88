"""Domain-level exceptions.

All business rule violations are expressed as subclasses of DomainException
so the CLI layer can catch them uniformly and display user-friendly messages.
Each error keeps the structured details (quantities, states, ids) as
attributes so callers can decide on a retry or an alternative offer.
"""

from __future__ import annotations


class DomainException(Exception):
    """Base class for all domain errors."""


class ValidationError(DomainException):
    """A business rule or invariant was violated."""


class EntityNotFoundError(DomainException):
    """A requested entity does not exist."""


class PermissionDenied(DomainException):
    """The acting role lacks the capability for the requested operation."""


class EmptyCart(ValidationError):
    """An order was placed with no cart lines."""

    def __init__(self) -> None:
        super().__init__("Cart is empty")


class InvalidCartLine(ValidationError):
    """A cart line refers to an unknown or inactive variant."""

    def __init__(self, variant_id: int, reason: str) -> None:
        super().__init__(f"Invalid cart line for variant #{variant_id}: {reason}")
        self.variant_id = variant_id
        self.reason = reason


class InsufficientStock(ValidationError):
    """Not enough available quantity to reserve."""

    def __init__(self, variant_id: int, available: int, requested: int) -> None:
        super().__init__(
            f"Insufficient stock for variant #{variant_id} "
            f"(available={available}, requested={requested})"
        )
        self.variant_id = variant_id
        self.available = available
        self.requested = requested

    @property
    def max_offer(self) -> int:
        """Largest quantity the caller can offer instead."""
        return max(self.available, 0)


class InvalidTransition(ValidationError):
    """A payment status change that is not an allowed edge."""

    def __init__(self, current: str, target: str) -> None:
        super().__init__(f"Cannot change payment status from '{current}' to '{target}'")
        self.current = current
        self.target = target


class MissingReason(ValidationError):
    """A rejection was requested without a reason."""

    def __init__(self) -> None:
        super().__init__("A reason is required to reject a payment")


class ConcurrencyConflict(DomainException):
    """Lock-wait timeout or deadlock; the transaction was rolled back."""
