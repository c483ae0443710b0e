"""Application service: Add Catalog Item use case."""

from __future__ import annotations

from checkout.domain.exceptions import (
    InvalidRequestError,
    PersistenceFailedError,
    StorageError,
)
from checkout.domain.model.catalog import CatalogItem
from checkout.domain.model.value_objects import Money
from checkout.domain.repository.catalog_repository import CatalogRepository


class AddCatalogItemHandler:

    def __init__(self, catalog_repo: CatalogRepository) -> None:
        self._catalog_repo = catalog_repo

    def handle(self, title: str, artist: str, price: str) -> CatalogItem:
        """Add a new, available item to the catalog.

        The repository assigns the ID when the item is stored.
        """
        if not title or not title.strip():
            raise InvalidRequestError("Title is required")
        if not artist or not artist.strip():
            raise InvalidRequestError("Artist is required")

        item = CatalogItem(
            id=None,
            title=title.strip(),
            artist=artist.strip(),
            price=Money.of(price),
        )
        try:
            self._catalog_repo.add(item)
        except StorageError as exc:
            raise PersistenceFailedError(f"Could not store item '{item.title}'") from exc
        return item
