"""Tests for SalesRepository against the in-memory document store."""

from datetime import datetime, timezone

import pytest

from ims.domain.exceptions import EntityNotFoundError, StoreError, ValidationError
from ims.domain.model.inventory import InventoryItem
from ims.domain.model.sale import SalesTransaction
from ims.domain.model.value_objects import Money, Quantity
from ims.domain.repository.sales_repository import SalesRepository, transaction_from_document
from ims.infrastructure.persistence.in_memory_document_store import InMemoryDocumentStore
from tests.fakes import FixedClock


def _setup():
    store = InMemoryDocumentStore()
    clock = FixedClock()
    repo = SalesRepository(store, clock=clock)
    repo.start()
    return repo, store, clock


def _draft(quantity: int = 2, price: str = "75") -> SalesTransaction:
    item = InventoryItem(
        id="1",
        name="Basmati Rice",
        category="Rice",
        quantity=500,
        unit="kg",
        unit_price=Money.of(price),
        threshold=100,
        last_updated=datetime(2024, 5, 1, tzinfo=timezone.utc),
    )
    return SalesTransaction.snapshot(item, Quantity(quantity))


class TestRecord:

    def test_assigns_id_and_timestamp(self):
        repo, _, clock = _setup()

        sale = repo.record(_draft())

        assert sale.id
        assert sale.date == clock.now
        assert repo.list() == [sale]

    def test_writes_snapshot_fields_through(self):
        repo, store, _ = _setup()
        sale = repo.record(_draft(quantity=3, price="75"))

        doc = store.get("sales", sale.id)
        assert doc["productId"] == "1"
        assert doc["productName"] == "Basmati Rice"
        assert doc["quantity"] == 3
        assert doc["unitPrice"] == "75"
        assert doc["totalAmount"] == "225"

    def test_already_recorded_sale_rejected(self):
        repo, _, _ = _setup()
        sale = repo.record(_draft())
        with pytest.raises(ValidationError, match="already been recorded"):
            repo.record(sale)

    def test_list_is_newest_first(self):
        repo, _, clock = _setup()
        first = repo.record(_draft())
        clock.advance(minutes=1)
        second = repo.record(_draft())

        assert repo.list() == [second, first]


class TestVoid:

    def test_void_removes_sale(self):
        repo, store, _ = _setup()
        sale = repo.record(_draft())

        repo.void(sale.id)

        assert repo.list() == []
        assert store.read_once("sales") == []

    def test_void_unknown_sale_rejected(self):
        repo, _, _ = _setup()
        with pytest.raises(EntityNotFoundError):
            repo.void("missing")


class TestSeedIfEmpty:

    def test_seeds_with_given_ids_and_dates(self):
        repo, _, clock = _setup()
        sale = SalesTransaction(
            id="s1",
            product_id="1",
            product_name="Basmati Rice",
            quantity=50,
            unit_price=Money.of("75"),
            total_amount=Money.of("3750"),
            date=clock.now,
        )

        assert repo.seed_if_empty([sale]) is True
        assert repo.get("s1") == sale

    def test_leaves_populated_collection_alone(self):
        repo, _, _ = _setup()
        repo.record(_draft())
        assert repo.seed_if_empty([]) is False


class TestMalformedDocuments:

    def test_bad_date_raises_store_error(self):
        doc = {
            "id": "s9",
            "productId": "1",
            "productName": "Basmati Rice",
            "quantity": 2,
            "unitPrice": "75",
            "totalAmount": "150",
            "date": "yesterday",
        }
        with pytest.raises(StoreError, match="Malformed sales document 's9'"):
            transaction_from_document(doc)

    def test_malformed_push_reported_as_error(self):
        repo, store, _ = _setup()
        sale = repo.record(_draft())

        store.create("sales", {"productName": "Broken"}, doc_id="bad")

        assert isinstance(repo.last_error, StoreError)
        assert repo.list() == [sale]
