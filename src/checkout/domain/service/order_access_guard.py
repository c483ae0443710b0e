"""Domain service: Order Access Guard.

Only the buyer who placed an order, or an administrator, may see it or
its invoice.
"""

from __future__ import annotations

from checkout.domain.exceptions import UnauthorizedError
from checkout.domain.model.order import Order
from checkout.domain.model.user import User


class OrderAccessGuard:

    @staticmethod
    def authorize(requester: User, order: Order) -> bool:
        return requester.is_admin or order.is_owned_by(requester.id)

    def ensure(self, requester: User, order: Order) -> None:
        if not self.authorize(requester, order):
            raise UnauthorizedError(
                f"User #{requester.id} may not access order #{order.id}"
            )

    def visible(self, requester: User, orders: list[Order]) -> list[Order]:
        return [order for order in orders if self.authorize(requester, order)]
