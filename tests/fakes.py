"""In-memory fake repositories for testing.

These implement the same abstract interfaces as the JSON repositories
but keep everything in a dict. No file I/O, no side effects.

Like a real store they hand out copies, so mutating a loaded entity has
no effect until it is saved. Each fake can be told to fail, to exercise
the error paths.
"""

from __future__ import annotations

import threading
from dataclasses import replace

from checkout.domain.exceptions import StorageError
from checkout.domain.model.catalog import CatalogItem
from checkout.domain.model.order import Order
from checkout.domain.model.user import User
from checkout.domain.model.value_objects import InvoiceNumber, Money
from checkout.domain.repository.catalog_repository import CatalogRepository
from checkout.domain.repository.order_repository import OrderRepository
from checkout.domain.repository.sequence_store import SequenceStore
from checkout.domain.repository.user_repository import UserRepository


class FakeCatalogRepository(CatalogRepository):

    def __init__(self, items: list[CatalogItem] | None = None) -> None:
        self._store: dict[int, CatalogItem] = {}
        self._lock = threading.Lock()
        self.fail_on_get = False
        self.fail_on_save = False
        self.save_calls = 0
        for item in items or []:
            self._store[item.id] = replace(item)

    def get_many(self, item_ids: list[int]) -> dict[int, CatalogItem]:
        with self._lock:
            if self.fail_on_get:
                raise StorageError("catalog store is down")
            return {
                item_id: replace(self._store[item_id])
                for item_id in item_ids
                if item_id in self._store
            }

    def list_all(self) -> list[CatalogItem]:
        with self._lock:
            return [replace(item) for item in self._store.values()]

    def add(self, item: CatalogItem) -> None:
        with self._lock:
            if self.fail_on_save:
                raise StorageError("catalog store is down")
            item.id = max(self._store, default=0) + 1
            self._store[item.id] = replace(item)

    def save_all(self, items: list[CatalogItem]) -> None:
        with self._lock:
            self.save_calls += 1
            if self.fail_on_save:
                raise StorageError("catalog store is down")
            if any(item.id not in self._store for item in items):
                raise StorageError("catalog item is not stored")
            for item in items:
                self._store[item.id] = replace(item)

    # --- Test helpers ---------------------------------------------------------

    def is_available(self, item_id: int) -> bool:
        return self._store[item_id].is_available

    def set_price(self, item_id: int, price: Money) -> None:
        self._store[item_id].price = price


class FakeOrderRepository(OrderRepository):

    def __init__(self) -> None:
        self._store: dict[int, Order] = {}
        self._next_id = 1
        self._lock = threading.Lock()
        self.fail_on_get = False
        self.fail_on_save = False

    def get_by_id(self, order_id: int) -> Order | None:
        with self._lock:
            if self.fail_on_get:
                raise StorageError("order store is down")
            return self._store.get(order_id)

    def list_all(self) -> list[Order]:
        with self._lock:
            if self.fail_on_get:
                raise StorageError("order store is down")
            return [self._store[key] for key in sorted(self._store)]

    def list_by_buyer(self, buyer_id: int) -> list[Order]:
        return [order for order in self.list_all() if order.buyer_id == buyer_id]

    def invoice_numbers(self) -> list[InvoiceNumber]:
        return [order.invoice_number for order in self.list_all()]

    def save(self, order: Order) -> None:
        with self._lock:
            if self.fail_on_save:
                raise StorageError("order store is down")
            if order.id is None:
                order.id = self._next_id
                self._next_id += 1
            self._store[order.id] = order


class FakeUserRepository(UserRepository):

    def __init__(self, users: list[User] | None = None) -> None:
        self._store: dict[int, User] = {}
        self.fail_on_get = False
        for user in users or []:
            self.save(user)

    def get_by_id(self, user_id: int) -> User | None:
        if self.fail_on_get:
            raise StorageError("user store is down")
        return self._store.get(user_id)

    def get_by_username(self, username: str) -> User | None:
        for user in self._store.values():
            if user.username.lower() == username.lower():
                return user
        return None

    def save(self, user: User) -> None:
        if user.id is None:
            user.id = max(self._store, default=0) + 1
        self._store[user.id] = user


class FakeSequenceStore(SequenceStore):

    def __init__(self) -> None:
        self.counters: dict[str, int] = {}
        self.unavailable = False
        self._lock = threading.Lock()

    def increment(self, key: str) -> int:
        with self._lock:
            if self.unavailable:
                raise StorageError("sequence store is down")
            self.counters[key] = self.counters.get(key, 0) + 1
            return self.counters[key]

    def ensure_at_least(self, key: str, value: int) -> None:
        with self._lock:
            if self.unavailable:
                raise StorageError("sequence store is down")
            if self.counters.get(key, 0) < value:
                self.counters[key] = value
