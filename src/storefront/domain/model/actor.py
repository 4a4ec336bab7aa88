"""Roles and capabilities of whoever drives a use case.

The session/auth provider supplies an ``Actor``; handlers check the
capability they need once, at their boundary.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from storefront.domain.exceptions import PermissionDenied, ValidationError


class Role(Enum):
    CUSTOMER = "customer"
    SALES = "sales"
    MARKETING = "marketing"
    ADMIN = "admin"

    @staticmethod
    def parse(raw: str) -> Role:
        try:
            return Role(raw.strip().lower())
        except ValueError as exc:
            raise ValidationError(f"Unknown role '{raw}'") from exc


class Capability(Enum):
    TRANSITION_PAYMENTS = "transition_payments"
    MANAGE_STOCK = "manage_stock"
    AUDIT = "audit"


ROLE_CAPABILITIES: dict[Role, frozenset[Capability]] = {
    Role.CUSTOMER: frozenset(),
    Role.SALES: frozenset({Capability.TRANSITION_PAYMENTS, Capability.AUDIT}),
    Role.MARKETING: frozenset({Capability.MANAGE_STOCK}),
    Role.ADMIN: frozenset(Capability),
}


@dataclass(frozen=True)
class Actor:
    id: int
    role: Role

    def can(self, capability: Capability) -> bool:
        return capability in ROLE_CAPABILITIES[self.role]

    def require(self, capability: Capability) -> None:
        if not self.can(capability):
            raise PermissionDenied(
                f"Role '{self.role.value}' is not allowed to {capability.value.replace('_', ' ')}"
            )
