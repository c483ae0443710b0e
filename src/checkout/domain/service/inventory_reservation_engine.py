"""Domain service: Inventory Reservation.

Claims a set of one-of-a-kind catalog items for a single order, all or
nothing, while other requests may be claiming overlapping sets.

Each item has its own lock. A reservation takes the locks of every
requested item in ascending ID order, so two overlapping reservations
never deadlock and unrelated reservations never wait on each other.
Inside the locks the service works in two phases:

  Phase 1, load and validate: read every item from one snapshot and
            fail fast if any is missing or already reserved.
  Phase 2, mutate and persist: flip every item and write them all
            with one ``save_all`` call.

Nothing is written unless every item passed phase 1.
"""

from __future__ import annotations

import logging
import threading
import weakref
from collections.abc import Iterable, Iterator
from contextlib import contextmanager

from checkout.domain.exceptions import (
    EntityNotFoundError,
    InvalidRequestError,
    ItemsUnavailableError,
    PersistenceFailedError,
    ReservationTimeoutError,
    StorageError,
)
from checkout.domain.model.catalog import CatalogItem
from checkout.domain.repository.catalog_repository import CatalogRepository

logger = logging.getLogger(__name__)


class InventoryReservationEngine:
    """Must be shared by every request in the process.

    ``lock_timeout`` is the number of seconds to wait for each item lock;
    ``None`` waits forever.
    """

    def __init__(
        self,
        catalog_repo: CatalogRepository,
        lock_timeout: float | None = None,
    ) -> None:
        self._catalog_repo = catalog_repo
        self._lock_timeout = lock_timeout
        # Entries vanish once no request holds or waits on the lock
        self._item_locks: weakref.WeakValueDictionary[int, threading.Lock] = (
            weakref.WeakValueDictionary()
        )
        self._registry_lock = threading.Lock()

    def reserve(self, item_ids: Iterable[int]) -> list[CatalogItem]:
        """Mark every requested item unavailable, or none of them.

        Returns the reserved items (with the prices read under the lock),
        in ascending ID order.
        """
        ids = self._distinct(item_ids)

        with self._locked(ids):
            # Phase 1: load all items from one read and validate
            items = self._load(ids)
            unavailable = [
                item_id
                for item_id in ids
                if item_id not in items or not items[item_id].is_available
            ]
            if unavailable:
                logger.info("Reservation refused, unavailable items %s", unavailable)
                raise ItemsUnavailableError(unavailable)

            # Phase 2: mutate and persist
            reserved = [items[item_id] for item_id in ids]
            for item in reserved:
                item.reserve()
            try:
                self._catalog_repo.save_all(reserved)
            except StorageError as exc:
                raise PersistenceFailedError(
                    f"Could not persist reservation of items {ids}"
                ) from exc

        logger.debug("Reserved items %s", ids)
        return reserved

    def release(self, item_ids: Iterable[int]) -> list[CatalogItem]:
        """Make previously reserved items available again.

        Items that are already available are left untouched. Returns the
        items that were actually restored.
        """
        ids = self._distinct(item_ids)

        with self._locked(ids):
            items = self._load(ids)
            missing = [item_id for item_id in ids if item_id not in items]
            if missing:
                raise EntityNotFoundError(f"Catalog items not found: {missing}")

            restored = [items[item_id] for item_id in ids if not items[item_id].is_available]
            for item in restored:
                item.restore()
            if restored:
                try:
                    self._catalog_repo.save_all(restored)
                except StorageError as exc:
                    raise PersistenceFailedError(
                        f"Could not persist release of items {ids}"
                    ) from exc

        logger.debug("Released items %s", [item.id for item in restored])
        return restored

    # --- Internal helpers -----------------------------------------------------

    def _load(self, ids: list[int]) -> dict[int, CatalogItem]:
        try:
            return self._catalog_repo.get_many(ids)
        except StorageError as exc:
            raise PersistenceFailedError(f"Could not read catalog items {ids}") from exc

    @staticmethod
    def _distinct(item_ids: Iterable[int]) -> list[int]:
        ids = list(item_ids)
        if not ids:
            raise InvalidRequestError("At least one item is required")
        if len(set(ids)) != len(ids):
            raise InvalidRequestError("Duplicate item IDs are not allowed")
        return sorted(ids)

    def _lock_for(self, item_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._item_locks.get(item_id)
            if lock is None:
                lock = self._item_locks[item_id] = threading.Lock()
            return lock

    @contextmanager
    def _locked(self, sorted_ids: list[int]) -> Iterator[None]:
        """Hold the lock of every item in *sorted_ids* for the block."""
        timeout = -1 if self._lock_timeout is None else self._lock_timeout
        held: list[threading.Lock] = []
        try:
            for item_id in sorted_ids:
                lock = self._lock_for(item_id)
                if not lock.acquire(timeout=timeout):
                    raise ReservationTimeoutError(
                        f"Timed out waiting for item #{item_id}"
                    )
                held.append(lock)
            yield
        finally:
            for lock in reversed(held):
                lock.release()
