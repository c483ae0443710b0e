"""Data Transfer Objects: plain containers that cross layer boundaries.

DTOs carry data between the CLI and application layers without
exposing domain internals to the outside world.
"""

from __future__ import annotations

from dataclasses import dataclass

from checkout.domain.model.invoice import Invoice
from checkout.domain.model.order import Order, OrderLine

_DATE_FORMAT = "%Y-%m-%d %H:%M UTC"


@dataclass(frozen=True)
class OrderLineRequest:
    """Input: which catalog item the buyer wants, and how many."""

    item_id: int
    quantity: int = 1


@dataclass(frozen=True)
class OrderLineDTO:
    """Output: a single order line as displayed to the user."""

    item_id: int
    title: str
    artist: str
    price: str  # formatted, e.g. "$100.00"
    quantity: int
    subtotal: str


@dataclass(frozen=True)
class OrderDTO:
    """Output: a complete order as displayed to the user."""

    id: int
    buyer_id: int
    created_at: str
    status: str
    shipping_address: str
    payment_method: str
    invoice_number: str
    items: list[OrderLineDTO]
    total: str


@dataclass(frozen=True)
class InvoiceDTO:
    invoice_number: str
    invoice_date: str
    customer_name: str
    customer_email: str
    shipping_address: str
    payment_method: str
    items: list[OrderLineDTO]
    subtotal: str
    tax: str
    total: str


# --- Mapping ------------------------------------------------------------------


def line_to_dto(line: OrderLine) -> OrderLineDTO:
    return OrderLineDTO(
        item_id=line.item_id,
        title=line.title,
        artist=line.artist,
        price=str(line.unit_price),
        quantity=line.quantity.value,
        subtotal=str(line.subtotal),
    )


def order_to_dto(order: Order) -> OrderDTO:
    return OrderDTO(
        id=order.id,  # type: ignore[arg-type]
        buyer_id=order.buyer_id,
        created_at=order.created_at.strftime(_DATE_FORMAT),
        status=order.status.value,
        shipping_address=order.shipping_address,
        payment_method=order.payment_method,
        invoice_number=str(order.invoice_number),
        items=[line_to_dto(line) for line in order.lines],
        total=str(order.total),
    )


def invoice_to_dto(invoice: Invoice) -> InvoiceDTO:
    return InvoiceDTO(
        invoice_number=str(invoice.invoice_number),
        invoice_date=invoice.invoice_date.strftime(_DATE_FORMAT),
        customer_name=invoice.customer_name,
        customer_email=invoice.customer_email,
        shipping_address=invoice.shipping_address,
        payment_method=invoice.payment_method,
        items=[line_to_dto(line) for line in invoice.lines],
        subtotal=str(invoice.subtotal),
        tax=str(invoice.tax),
        total=str(invoice.total),
    )
