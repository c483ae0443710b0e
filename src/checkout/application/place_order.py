"""Application service: Place Order use case.

Orchestrates the reservation engine, the invoice sequencer and the
Order aggregate so that a placed order either exists completely, with
its items reserved and an invoice number issued, or not at all.

Any failure after the items were reserved releases them again before
the error reaches the caller. If that release fails too, the items are
stranded without an owning order; this is logged at CRITICAL for an
operator to reconcile.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import datetime, timezone

from checkout.application.dto import OrderDTO, OrderLineRequest, order_to_dto
from checkout.domain.exceptions import (
    InvalidRequestError,
    ItemsUnavailableError,
    PersistenceFailedError,
    StorageError,
)
from checkout.domain.model.catalog import CatalogItem
from checkout.domain.model.order import Order, OrderLine
from checkout.domain.repository.order_repository import OrderRepository
from checkout.domain.repository.user_repository import UserRepository
from checkout.domain.service.inventory_reservation_engine import (
    InventoryReservationEngine,
)
from checkout.domain.service.invoice_sequencer import InvoiceSequencer

logger = logging.getLogger(__name__)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class PlaceOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        user_repo: UserRepository,
        reservation_engine: InventoryReservationEngine,
        invoice_sequencer: InvoiceSequencer,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        self._order_repo = order_repo
        self._user_repo = user_repo
        self._reservation_engine = reservation_engine
        self._invoice_sequencer = invoice_sequencer
        self._clock = clock

    def handle(
        self,
        buyer_id: int,
        shipping_address: str,
        payment_method: str,
        lines: list[OrderLineRequest],
    ) -> OrderDTO:
        """Place a new order.

        Steps:
        1. Validate the request (fail before touching any item).
        2. Reserve every requested item, all or nothing.
        3. Snapshot prices, issue an invoice number, persist the aggregate.
        4. On any failure after step 2, release the reserved items.
        """
        self._validate(buyer_id, shipping_address, payment_method, lines)
        item_ids = [line.item_id for line in lines]

        try:
            reserved = self._reservation_engine.reserve(item_ids)
        except ItemsUnavailableError:
            logger.warning("Buyer #%s could not reserve items %s", buyer_id, item_ids)
            raise

        try:
            order = self._build_and_persist(
                buyer_id, shipping_address, payment_method, item_ids, reserved
            )
        except Exception:
            self._compensate(buyer_id, item_ids)
            raise

        logger.info(
            "Order #%s placed by buyer #%s, invoice %s, total %s",
            order.id, buyer_id, order.invoice_number, order.total,
        )
        return order_to_dto(order)

    # --- Internal helpers -----------------------------------------------------

    def _validate(
        self,
        buyer_id: int,
        shipping_address: str,
        payment_method: str,
        lines: list[OrderLineRequest],
    ) -> None:
        if not lines:
            raise InvalidRequestError("Order must contain at least one item")

        seen: set[int] = set()
        for line in lines:
            # Every catalog item is unique, so a line can only ever buy one.
            if line.quantity != 1:
                raise InvalidRequestError(
                    f"Item #{line.item_id} is one of a kind; quantity must be 1, "
                    f"got {line.quantity}"
                )
            if line.item_id in seen:
                raise InvalidRequestError(f"Item #{line.item_id} appears more than once")
            seen.add(line.item_id)

        if not shipping_address or not shipping_address.strip():
            raise InvalidRequestError("Shipping address is required")
        if not payment_method or not payment_method.strip():
            raise InvalidRequestError("Payment method is required")

        try:
            buyer = self._user_repo.get_by_id(buyer_id)
        except StorageError as exc:
            raise PersistenceFailedError(f"Could not look up buyer #{buyer_id}") from exc
        if buyer is None:
            raise InvalidRequestError(f"Buyer #{buyer_id} not found")

    def _build_and_persist(
        self,
        buyer_id: int,
        shipping_address: str,
        payment_method: str,
        item_ids: list[int],
        reserved: list[CatalogItem],
    ) -> Order:
        by_id = {item.id: item for item in reserved}
        created_at = self._clock()
        invoice_number = self._invoice_sequencer.next_invoice_number(created_at.date())

        order = Order.place(
            buyer_id=buyer_id,
            shipping_address=shipping_address,
            payment_method=payment_method,
            invoice_number=invoice_number,
            lines=[OrderLine.for_item(by_id[item_id]) for item_id in item_ids],
            created_at=created_at,
        )

        try:
            self._order_repo.save(order)
        except StorageError as exc:
            raise PersistenceFailedError(
                f"Could not store order with invoice {invoice_number}"
            ) from exc
        return order

    def _compensate(self, buyer_id: int, item_ids: list[int]) -> None:
        try:
            self._reservation_engine.release(item_ids)
        except Exception:
            logger.critical(
                "Failed to release items %s after failed order by buyer #%s; "
                "items are reserved without an order and need manual reconciliation",
                item_ids, buyer_id,
                exc_info=True,
            )
        else:
            logger.warning(
                "Order by buyer #%s failed after reservation; released items %s",
                buyer_id, item_ids,
            )
