"""Application service: Show Order use case (query)."""

from __future__ import annotations

from checkout.application.dto import OrderDTO, order_to_dto
from checkout.domain.exceptions import (
    EntityNotFoundError,
    PersistenceFailedError,
    StorageError,
)
from checkout.domain.model.user import User
from checkout.domain.repository.order_repository import OrderRepository
from checkout.domain.service.order_access_guard import OrderAccessGuard


class ShowOrderHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        access_guard: OrderAccessGuard | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._access_guard = access_guard or OrderAccessGuard()

    def handle(self, requester: User, order_id: int) -> OrderDTO:
        try:
            order = self._order_repo.get_by_id(order_id)
        except StorageError as exc:
            raise PersistenceFailedError(f"Could not read order #{order_id}") from exc
        if order is None:
            raise EntityNotFoundError(f"Order #{order_id} not found")
        self._access_guard.ensure(requester, order)
        return order_to_dto(order)
