"""Abstract repository for the Variant aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Concrete implementations (SQL, in-memory)
live in the infrastructure layer and in the test fakes.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from storefront.domain.model.variant import Variant


class VariantRepository(ABC):

    @abstractmethod
    def get_by_id(self, variant_id: int) -> Variant | None:
        """Return a variant without locking it, or None."""

    @abstractmethod
    def get_for_update(self, variant_id: int) -> Variant | None:
        """Return a variant and hold its row lock until the transaction ends."""

    @abstractmethod
    def list_all(self, include_inactive: bool = False) -> list[Variant]:
        """Return variants ordered by id."""

    @abstractmethod
    def add(self, variant: Variant) -> Variant:
        """Persist a new variant and assign its id."""

    @abstractmethod
    def save(self, variant: Variant) -> None:
        """Persist stock and active flag of an existing variant."""
