"""JSON-file-backed implementation of CatalogRepository."""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path

from checkout.domain.exceptions import StorageError
from checkout.domain.model.catalog import CatalogItem
from checkout.domain.model.value_objects import Money
from checkout.domain.repository.catalog_repository import CatalogRepository
from checkout.infrastructure.persistence.json_file import JsonFile


class JsonCatalogRepository(CatalogRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    # --- CatalogRepository interface ------------------------------------------

    def get_many(self, item_ids: list[int]) -> dict[int, CatalogItem]:
        wanted = set(item_ids)
        return {
            raw["id"]: self._to_domain(raw)
            for raw in self._file.load()
            if raw["id"] in wanted
        }

    def list_all(self) -> list[CatalogItem]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def add(self, item: CatalogItem) -> None:
        with self._file.transaction() as records:
            new_id = max((raw["id"] for raw in records), default=0) + 1
            records.append(self._to_raw(item, new_id))

        # Only assign the ID once the write has succeeded
        item.id = new_id

    def save_all(self, items: list[CatalogItem]) -> None:
        with self._file.transaction() as records:
            index = {raw["id"]: i for i, raw in enumerate(records)}
            for item in items:
                if item.id not in index:
                    # Aborts the transaction, nothing is written
                    raise StorageError(f"Catalog item #{item.id} is not stored")
                records[index[item.id]] = self._to_raw(item, item.id)

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(item: CatalogItem, item_id: int) -> dict:
        return {
            "id": item_id,
            "title": item.title,
            "artist": item.artist,
            "price": str(item.price.amount),
            "currency": item.price.currency,
            "is_available": item.is_available,
        }

    @staticmethod
    def _to_domain(raw: dict) -> CatalogItem:
        return CatalogItem(
            id=raw["id"],
            title=raw["title"],
            artist=raw.get("artist", ""),
            price=Money(Decimal(raw["price"]), raw.get("currency", "USD")),
            is_available=raw.get("is_available", True),
        )
