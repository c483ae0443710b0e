"""Application service: Show Invoice use case (query)."""

from __future__ import annotations

from checkout.application.dto import InvoiceDTO, invoice_to_dto
from checkout.domain.exceptions import (
    EntityNotFoundError,
    PersistenceFailedError,
    StorageError,
)
from checkout.domain.model.invoice import Invoice
from checkout.domain.model.user import User
from checkout.domain.repository.order_repository import OrderRepository
from checkout.domain.repository.user_repository import UserRepository
from checkout.domain.service.order_access_guard import OrderAccessGuard


class ShowInvoiceHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        user_repo: UserRepository,
        access_guard: OrderAccessGuard | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._user_repo = user_repo
        self._access_guard = access_guard or OrderAccessGuard()

    def handle(self, requester: User, order_id: int) -> InvoiceDTO:
        """Build the invoice for an order: line subtotals plus 8% tax."""
        try:
            order = self._order_repo.get_by_id(order_id)
        except StorageError as exc:
            raise PersistenceFailedError(f"Could not read order #{order_id}") from exc
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        self._access_guard.ensure(requester, order)

        try:
            buyer = self._user_repo.get_by_id(order.buyer_id)
        except StorageError as exc:
            raise PersistenceFailedError(f"Could not look up buyer #{order.buyer_id}") from exc
        return invoice_to_dto(Invoice.for_order(order, buyer))
