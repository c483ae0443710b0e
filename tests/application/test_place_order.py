"""Integration tests for the PlaceOrder use case.

Uses in-memory fake repositories, no file I/O.
"""

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timezone

import pytest

from checkout.application.dto import OrderLineRequest
from checkout.application.place_order import PlaceOrderHandler
from checkout.domain.exceptions import (
    InvalidRequestError,
    ItemsUnavailableError,
    PersistenceFailedError,
    SequencerUnavailableError,
)
from checkout.domain.model.catalog import CatalogItem
from checkout.domain.model.user import User
from checkout.domain.model.value_objects import Money
from checkout.domain.service.inventory_reservation_engine import (
    InventoryReservationEngine,
)
from checkout.domain.service.invoice_sequencer import InvoiceSequencer
from tests.fakes import (
    FakeCatalogRepository,
    FakeOrderRepository,
    FakeSequenceStore,
    FakeUserRepository,
)

NOW = datetime(2024, 4, 26, 9, 30, tzinfo=timezone.utc)


class Checkout:
    """Handler wired to fakes, with the fakes exposed for assertions."""

    def __init__(self, items: list[CatalogItem] | None = None, buyers: int = 2) -> None:
        if items is None:
            items = [
                CatalogItem(id=1, title="Starry Night", artist="Van Gogh", price=Money.of("100.00")),
                CatalogItem(id=2, title="Water Lilies", artist="Monet", price=Money.of("50.00")),
                CatalogItem(id=3, title="The Scream", artist="Munch", price=Money.of("75.00")),
            ]
        self.catalog = FakeCatalogRepository(items)
        self.orders = FakeOrderRepository()
        self.users = FakeUserRepository([
            User(id=None, username=f"buyer{n}", first_name="Buyer", last_name=str(n),
                 email=f"buyer{n}@example.com")
            for n in range(1, buyers + 1)
        ])
        self.sequences = FakeSequenceStore()
        self.engine = InventoryReservationEngine(self.catalog)
        self.handler = PlaceOrderHandler(
            order_repo=self.orders,
            user_repo=self.users,
            reservation_engine=self.engine,
            invoice_sequencer=InvoiceSequencer(self.sequences),
            clock=lambda: NOW,
        )

    def place(self, buyer_id: int = 1, *item_ids: int, address="1 Main St", payment="Credit Card"):
        return self.handler.handle(
            buyer_id=buyer_id,
            shipping_address=address,
            payment_method=payment,
            lines=[OrderLineRequest(item_id) for item_id in item_ids],
        )


class TestPlaceOrderHappyPath:

    def test_two_items_total_and_reservation(self):
        checkout = Checkout()

        dto = checkout.place(1, 1, 2)

        assert dto.total == "$150.00"
        assert dto.status == "Pending"
        assert dto.buyer_id == 1
        assert not checkout.catalog.is_available(1)
        assert not checkout.catalog.is_available(2)
        assert checkout.catalog.is_available(3)

    def test_lines_keep_request_order_and_prices(self):
        dto = Checkout().place(1, 2, 1)

        assert [line.item_id for line in dto.items] == [2, 1]
        assert [line.price for line in dto.items] == ["$50.00", "$100.00"]
        assert [line.subtotal for line in dto.items] == ["$50.00", "$100.00"]
        assert dto.items[0].title == "Water Lilies"

    def test_invoice_number_uses_placement_date(self):
        checkout = Checkout()

        first = checkout.place(1, 1)
        second = checkout.place(2, 2)

        assert first.invoice_number == "INV-20240426-001"
        assert second.invoice_number == "INV-20240426-002"

    def test_persists_order(self):
        checkout = Checkout()
        dto = checkout.place(1, 1, address="  22 Gallery Rd ")

        saved = checkout.orders.get_by_id(dto.id)

        assert saved is not None
        assert saved.buyer_id == 1
        assert saved.shipping_address == "22 Gallery Rd"
        assert str(saved.invoice_number) == dto.invoice_number
        assert saved.created_at == NOW

    def test_later_price_change_does_not_touch_order(self):
        checkout = Checkout()
        dto = checkout.place(1, 1)

        checkout.catalog.set_price(1, Money.of("999.00"))

        assert str(checkout.orders.get_by_id(dto.id).total) == "$100.00"


class TestPlaceOrderValidation:

    def test_empty_cart_rejected(self):
        with pytest.raises(InvalidRequestError, match="at least one item"):
            Checkout().place(1)

    def test_unknown_buyer_rejected(self):
        checkout = Checkout()
        with pytest.raises(InvalidRequestError, match="Buyer #99 not found"):
            checkout.place(99, 1)
        assert checkout.catalog.is_available(1)

    def test_quantity_above_one_rejected(self):
        checkout = Checkout()
        with pytest.raises(InvalidRequestError, match="quantity must be 1"):
            checkout.handler.handle(1, "1 Main St", "Credit Card", [OrderLineRequest(1, 2)])
        assert checkout.catalog.is_available(1)

    def test_zero_quantity_rejected(self):
        with pytest.raises(InvalidRequestError, match="quantity must be 1"):
            Checkout().handler.handle(1, "1 Main St", "Credit Card", [OrderLineRequest(1, 0)])

    def test_duplicate_item_rejected(self):
        checkout = Checkout()
        with pytest.raises(InvalidRequestError, match="more than once"):
            checkout.place(1, 1, 1)
        assert checkout.catalog.is_available(1)

    def test_blank_address_rejected_before_reserving(self):
        checkout = Checkout()
        with pytest.raises(InvalidRequestError, match="Shipping address"):
            checkout.place(1, 1, address=" ")
        assert checkout.catalog.is_available(1)

    def test_blank_payment_rejected(self):
        with pytest.raises(InvalidRequestError, match="Payment method"):
            Checkout().place(1, 1, payment="")


class TestPlaceOrderStorageFailures:

    def test_buyer_lookup_failure_is_typed(self):
        checkout = Checkout()
        checkout.users.fail_on_get = True

        with pytest.raises(PersistenceFailedError, match="buyer #1"):
            checkout.place(1, 1)

        assert checkout.catalog.is_available(1)

    def test_catalog_read_failure_is_typed(self):
        checkout = Checkout()
        checkout.catalog.fail_on_get = True

        with pytest.raises(PersistenceFailedError, match="catalog items"):
            checkout.place(1, 1, 2)

        assert checkout.orders.list_all() == []
        assert checkout.sequences.counters == {}


class TestPlaceOrderUnavailableItems:

    def test_sold_item_fails_whole_cart(self):
        checkout = Checkout()
        checkout.place(1, 2)

        with pytest.raises(ItemsUnavailableError, match="#2"):
            checkout.place(2, 1, 2)

        # No partial state: item 1 is still for sale and no second order exists
        assert checkout.catalog.is_available(1)
        assert len(checkout.orders.list_all()) == 1

    def test_unknown_item_fails(self):
        checkout = Checkout()
        with pytest.raises(ItemsUnavailableError) as exc_info:
            checkout.place(1, 1, 42)
        assert exc_info.value.item_ids == [42]
        assert checkout.catalog.is_available(1)
        assert checkout.orders.list_all() == []

    def test_no_invoice_number_consumed(self):
        checkout = Checkout()
        checkout.place(1, 1)
        with pytest.raises(ItemsUnavailableError):
            checkout.place(2, 1)
        assert checkout.sequences.counters == {"INV-20240426": 1}


class TestPlaceOrderCompensation:

    def test_persistence_failure_releases_items(self, caplog):
        checkout = Checkout()
        checkout.orders.fail_on_save = True

        with caplog.at_level(logging.WARNING, logger="checkout"):
            with pytest.raises(PersistenceFailedError):
                checkout.place(1, 1, 2)

        assert checkout.catalog.is_available(1)
        assert checkout.catalog.is_available(2)
        assert checkout.orders.list_all() == []
        assert "released items [1, 2]" in caplog.text

    def test_sequencer_failure_releases_items(self):
        checkout = Checkout()
        checkout.sequences.unavailable = True

        with pytest.raises(SequencerUnavailableError):
            checkout.place(1, 1)

        assert checkout.catalog.is_available(1)
        assert checkout.orders.list_all() == []

    def test_items_can_be_bought_after_failed_attempt(self):
        checkout = Checkout()
        checkout.orders.fail_on_save = True
        with pytest.raises(PersistenceFailedError):
            checkout.place(1, 1)

        checkout.orders.fail_on_save = False
        dto = checkout.place(2, 1)

        assert dto.buyer_id == 2

    def test_failed_release_is_logged_as_critical(self, caplog):
        checkout = Checkout()
        checkout.orders.fail_on_save = True

        original_release = checkout.engine.release

        def broken_release(item_ids):
            checkout.catalog.fail_on_save = True
            return original_release(item_ids)

        checkout.engine.release = broken_release

        with caplog.at_level(logging.CRITICAL, logger="checkout"):
            with pytest.raises(PersistenceFailedError, match="Could not store order"):
                checkout.place(1, 1)

        critical = [r for r in caplog.records if r.levelno == logging.CRITICAL]
        assert len(critical) == 1
        assert "manual reconciliation" in critical[0].getMessage()
        # The item is stranded, which is exactly what the operator must fix
        assert not checkout.catalog.is_available(1)


class TestConcurrentPlacement:

    def test_two_buyers_race_for_the_same_item(self):
        checkout = Checkout()
        barrier = threading.Barrier(2)

        def attempt(args):
            buyer_id, item_ids = args
            barrier.wait()
            try:
                return checkout.place(buyer_id, *item_ids)
            except ItemsUnavailableError:
                return None

        with ThreadPoolExecutor(max_workers=2) as pool:
            results = list(pool.map(attempt, [(1, [1, 2]), (2, [1, 3])]))

        winners = [dto for dto in results if dto is not None]
        assert len(winners) == 1
        assert len(checkout.orders.list_all()) == 1
        assert not checkout.catalog.is_available(1)

        # The loser's other item was not kept reserved
        loser_other_item = 3 if winners[0].buyer_id == 1 else 2
        assert checkout.catalog.is_available(loser_other_item)

    def test_concurrent_placements_get_distinct_invoice_numbers(self):
        placements = 100
        items = [
            CatalogItem(id=n, title=f"Work {n}", artist="Artist", price=Money.of("10.00"))
            for n in range(1, placements + 1)
        ]
        checkout = Checkout(items=items, buyers=placements)
        barrier = threading.Barrier(placements)

        def attempt(n):
            barrier.wait()
            return checkout.place(n, n).invoice_number

        with ThreadPoolExecutor(max_workers=placements) as pool:
            numbers = list(pool.map(attempt, range(1, placements + 1)))

        assert len(set(numbers)) == placements
        assert len(checkout.orders.list_all()) == placements
        assert all(number.startswith("INV-20240426-") for number in numbers)
