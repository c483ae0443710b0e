"""Application service: Restore Item use case.

Puts a reserved catalog item back on sale, e.g. after an order was
cancelled outside this system. Administrators only.
"""

from __future__ import annotations

import logging

from checkout.domain.exceptions import UnauthorizedError
from checkout.domain.model.user import User
from checkout.domain.service.inventory_reservation_engine import (
    InventoryReservationEngine,
)

logger = logging.getLogger(__name__)


class RestoreItemHandler:

    def __init__(self, reservation_engine: InventoryReservationEngine) -> None:
        self._reservation_engine = reservation_engine

    def handle(self, requester: User, item_id: int) -> bool:
        """Return True if the item was reserved and is now available again."""
        if not requester.is_admin:
            raise UnauthorizedError(f"User #{requester.id} may not restore catalog items")

        restored = self._reservation_engine.release([item_id])
        if restored:
            logger.info("Item #%s restored by user #%s", item_id, requester.id)
        return bool(restored)
