"""JSON-file-backed implementation of OrderRepository."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from pathlib import Path

from checkout.domain.model.order import Order, OrderLine, OrderStatus
from checkout.domain.model.value_objects import InvoiceNumber, Money, Quantity
from checkout.domain.repository.order_repository import OrderRepository
from checkout.infrastructure.persistence.json_file import JsonFile


class JsonOrderRepository(OrderRepository):

    def __init__(self, file_path: Path) -> None:
        self._file = JsonFile(file_path, empty=[])

    # --- OrderRepository interface --------------------------------------------

    def get_by_id(self, order_id: int) -> Order | None:
        for raw in self._file.load():
            if raw["id"] == order_id:
                return self._to_domain(raw)
        return None

    def list_all(self) -> list[Order]:
        return [self._to_domain(raw) for raw in self._file.load()]

    def list_by_buyer(self, buyer_id: int) -> list[Order]:
        return [
            self._to_domain(raw)
            for raw in self._file.load()
            if raw["buyer_id"] == buyer_id
        ]

    def invoice_numbers(self) -> list[InvoiceNumber]:
        return [InvoiceNumber.parse(raw["invoice_number"]) for raw in self._file.load()]

    def save(self, order: Order) -> None:
        with self._file.transaction() as orders:
            new_id = order.id
            if new_id is None:
                new_id = max((o["id"] for o in orders), default=0) + 1

            # Upsert: replace if exists, otherwise append
            raw = self._to_raw(order, new_id)
            for i, existing in enumerate(orders):
                if existing["id"] == new_id:
                    orders[i] = raw
                    break
            else:
                orders.append(raw)

        # Only assign the ID once the write has succeeded
        order.id = new_id

    # --- Serialization --------------------------------------------------------

    @staticmethod
    def _to_raw(order: Order, order_id: int) -> dict:
        return {
            "id": order_id,
            "buyer_id": order.buyer_id,
            "status": order.status.value,
            "created_at": order.created_at.isoformat(),
            "shipping_address": order.shipping_address,
            "payment_method": order.payment_method,
            "invoice_number": str(order.invoice_number),
            "total_amount": str(order.total.amount),
            "lines": [
                {
                    "item_id": line.item_id,
                    "title": line.title,
                    "artist": line.artist,
                    "quantity": line.quantity.value,
                    "unit_price": str(line.unit_price.amount),
                    "currency": line.unit_price.currency,
                }
                for line in order.lines
            ],
        }

    @staticmethod
    def _to_domain(raw: dict) -> Order:
        lines = [
            OrderLine(
                item_id=line["item_id"],
                title=line["title"],
                artist=line.get("artist", ""),
                unit_price=Money(Decimal(line["unit_price"]), line.get("currency", "USD")),
                quantity=Quantity(line["quantity"]),
            )
            for line in raw["lines"]
        ]
        return Order(
            id=raw["id"],
            buyer_id=raw["buyer_id"],
            shipping_address=raw["shipping_address"],
            payment_method=raw["payment_method"],
            invoice_number=InvoiceNumber.parse(raw["invoice_number"]),
            lines=lines,
            status=OrderStatus(raw["status"]),
            created_at=datetime.fromisoformat(raw["created_at"]),
        )
