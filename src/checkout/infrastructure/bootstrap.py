"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.

The reservation engine and the invoice sequencer hold the process-wide
locks, so each is built once and shared by every request.
"""

from __future__ import annotations

from functools import lru_cache

from checkout.domain.exceptions import SequencerUnavailableError, StorageError
from checkout.domain.service.inventory_reservation_engine import (
    InventoryReservationEngine,
)
from checkout.domain.service.invoice_sequencer import InvoiceSequencer
from checkout.infrastructure.config import Settings
from checkout.infrastructure.persistence.json_catalog_repository import (
    JsonCatalogRepository,
)
from checkout.infrastructure.persistence.json_order_repository import (
    JsonOrderRepository,
)
from checkout.infrastructure.persistence.json_sequence_store import (
    JsonSequenceStore,
)
from checkout.infrastructure.persistence.json_user_repository import (
    JsonUserRepository,
)


@lru_cache(maxsize=None)
def settings() -> Settings:
    return Settings.from_env()


def catalog_repository() -> JsonCatalogRepository:
    return JsonCatalogRepository(settings().data_dir / "catalog.json")


def order_repository() -> JsonOrderRepository:
    return JsonOrderRepository(settings().data_dir / "orders.json")


def user_repository() -> JsonUserRepository:
    return JsonUserRepository(settings().data_dir / "users.json")


def sequence_store() -> JsonSequenceStore:
    return JsonSequenceStore(settings().data_dir / "sequences.json")


@lru_cache(maxsize=None)
def reservation_engine() -> InventoryReservationEngine:
    return InventoryReservationEngine(
        catalog_repository(), lock_timeout=settings().lock_timeout
    )


@lru_cache(maxsize=None)
def invoice_sequencer() -> InvoiceSequencer:
    sequencer = InvoiceSequencer(sequence_store(), lock_timeout=settings().lock_timeout)
    try:
        issued = order_repository().invoice_numbers()
    except StorageError as exc:
        raise SequencerUnavailableError("Cannot read issued invoice numbers") from exc
    sequencer.reconcile(issued)
    return sequencer


def reset() -> None:
    """Forget cached settings and singletons (used when the environment changes)."""
    settings.cache_clear()
    reservation_engine.cache_clear()
    invoice_sequencer.cache_clear()
