"""Abstract repository for the Order aggregate."""

from __future__ import annotations

from abc import ABC, abstractmethod

from checkout.domain.model.order import Order
from checkout.domain.model.value_objects import InvoiceNumber


class OrderRepository(ABC):

    @abstractmethod
    def get_by_id(self, order_id: int) -> Order | None:
        """Return an order by its ID, or None if not found."""

    @abstractmethod
    def list_all(self) -> list[Order]:
        """Return every order, oldest first."""

    @abstractmethod
    def list_by_buyer(self, buyer_id: int) -> list[Order]:
        """Return the orders placed by one buyer, oldest first."""

    @abstractmethod
    def invoice_numbers(self) -> list[InvoiceNumber]:
        """Return the invoice number of every stored order."""

    @abstractmethod
    def save(self, order: Order) -> None:
        """Persist an order and its lines as one unit, assigning an ID if new."""
