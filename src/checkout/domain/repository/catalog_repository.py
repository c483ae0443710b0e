"""Abstract repository for the CatalogItem aggregate.

Defined in the domain layer so the domain never depends on
infrastructure. Implementations must make ``save_all`` a single
all-or-nothing write.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from checkout.domain.model.catalog import CatalogItem


class CatalogRepository(ABC):

    @abstractmethod
    def get_many(self, item_ids: list[int]) -> dict[int, CatalogItem]:
        """Return the requested items that exist, keyed by ID, from one read."""

    @abstractmethod
    def list_all(self) -> list[CatalogItem]:
        """Return every item in the catalog."""

    @abstractmethod
    def add(self, item: CatalogItem) -> None:
        """Store a new item and assign its ID in the same write."""

    @abstractmethod
    def save_all(self, items: list[CatalogItem]) -> None:
        """Persist several existing items in one transactional write."""
