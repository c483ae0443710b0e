"""Application service: List Orders use case (query).

Administrators see every order; everybody else sees only their own.
"""

from __future__ import annotations

from checkout.application.dto import OrderDTO, order_to_dto
from checkout.domain.exceptions import PersistenceFailedError, StorageError
from checkout.domain.model.user import User
from checkout.domain.repository.order_repository import OrderRepository
from checkout.domain.service.order_access_guard import OrderAccessGuard


class ListOrdersHandler:

    def __init__(
        self,
        order_repo: OrderRepository,
        access_guard: OrderAccessGuard | None = None,
    ) -> None:
        self._order_repo = order_repo
        self._access_guard = access_guard or OrderAccessGuard()

    def handle(self, requester: User) -> list[OrderDTO]:
        try:
            if requester.is_admin:
                orders = self._order_repo.list_all()
            else:
                orders = self._order_repo.list_by_buyer(requester.id)  # type: ignore[arg-type]
        except StorageError as exc:
            raise PersistenceFailedError("Could not read orders") from exc
        return [order_to_dto(order) for order in self._access_guard.visible(requester, orders)]
