"""Invoice: a read-only view derived from a placed Order."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from checkout.domain.model.order import Order, OrderLine
from checkout.domain.model.user import User
from checkout.domain.model.value_objects import InvoiceNumber, Money

TAX_RATE = Decimal("0.08")


@dataclass(frozen=True)
class Invoice:
    invoice_number: InvoiceNumber
    invoice_date: datetime
    customer_name: str
    customer_email: str
    shipping_address: str
    payment_method: str
    lines: list[OrderLine]
    subtotal: Money
    tax: Money

    @property
    def total(self) -> Money:
        return self.subtotal + self.tax

    @staticmethod
    def for_order(order: Order, buyer: User | None) -> Invoice:
        subtotal = order.total
        return Invoice(
            invoice_number=order.invoice_number,
            invoice_date=order.created_at,
            customer_name=buyer.full_name if buyer else "",
            customer_email=buyer.email if buyer else "",
            shipping_address=order.shipping_address,
            payment_method=order.payment_method,
            lines=list(order.lines),
            subtotal=subtotal,
            tax=subtotal.apply_rate(TAX_RATE),
        )
