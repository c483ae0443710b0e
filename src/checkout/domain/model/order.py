"""Order aggregate, the core of the domain.

The Order is an aggregate root that owns its lines. An Order and its
lines are created together by ``Order.place()`` and stored as one unit.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum

from checkout.domain.exceptions import InvalidRequestError
from checkout.domain.model.catalog import CatalogItem
from checkout.domain.model.value_objects import InvoiceNumber, Money, Quantity


class OrderStatus(Enum):
    PENDING = "Pending"
    FULFILLED = "Fulfilled"
    CANCELLED = "Cancelled"


@dataclass(frozen=True)
class OrderLine:
    """Captures the price of a catalog item at purchase time.

    Later catalog price changes never reach an existing order.
    """

    item_id: int
    title: str
    artist: str
    unit_price: Money  # locked at placement time
    quantity: Quantity

    @property
    def subtotal(self) -> Money:
        return self.unit_price * self.quantity.value

    @staticmethod
    def for_item(item: CatalogItem, quantity: int = 1) -> OrderLine:
        return OrderLine(
            item_id=item.id,
            title=item.title,
            artist=item.artist,
            unit_price=item.price,
            quantity=Quantity(quantity),
        )


@dataclass
class Order:
    """Aggregate root for placed orders.

    Use the ``Order.place()`` factory for new orders; it enforces all
    invariants.  The ``__init__`` is intentionally simple so the
    repository can reconstitute persisted orders without re-validating.
    """

    id: int | None
    buyer_id: int
    shipping_address: str
    payment_method: str
    invoice_number: InvoiceNumber
    lines: list[OrderLine]
    status: OrderStatus = OrderStatus.PENDING
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    # --- Factory (used for NEW orders only) -----------------------------------

    @staticmethod
    def place(
        buyer_id: int,
        shipping_address: str,
        payment_method: str,
        invoice_number: InvoiceNumber,
        lines: list[OrderLine],
        created_at: datetime,
    ) -> Order:
        """Create a new pending order, enforcing all invariants."""
        if not shipping_address or not shipping_address.strip():
            raise InvalidRequestError("Shipping address is required")

        if not payment_method or not payment_method.strip():
            raise InvalidRequestError("Payment method is required")

        if not lines:
            raise InvalidRequestError("Order must contain at least one item")

        item_ids = [line.item_id for line in lines]
        if len(set(item_ids)) != len(item_ids):
            raise InvalidRequestError("Each catalog item may appear only once per order")

        return Order(
            id=None,
            buyer_id=buyer_id,
            shipping_address=shipping_address.strip(),
            payment_method=payment_method.strip(),
            invoice_number=invoice_number,
            lines=list(lines),
            created_at=created_at,
        )

    # --- Computed properties --------------------------------------------------

    @property
    def total(self) -> Money:
        result = Money.zero()
        for line in self.lines:
            result = result + line.subtotal
        return result

    def is_owned_by(self, user_id: int | None) -> bool:
        return user_id is not None and self.buyer_id == user_id
