"""Unit tests for the LowStockEvaluator domain service."""

from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.service.low_stock_evaluator import LowStockEvaluator
from ims.infrastructure.persistence.in_memory_document_store import InMemoryDocumentStore
from tests.fakes import FixedClock, item_fields


def _setup(*specs: tuple[str, int, int]):
    """Build a repo holding (name, quantity, threshold) items."""
    clock = FixedClock()
    repo = InventoryRepository(InMemoryDocumentStore(), clock=clock)
    repo.start()
    for name, quantity, threshold in specs:
        repo.add(item_fields(name=name, quantity=quantity, threshold=threshold))
        clock.advance(seconds=1)
    return repo, LowStockEvaluator(repo)


class TestGetLowStockItems:

    def test_returns_exactly_items_at_or_below_threshold(self):
        repo, evaluator = _setup(
            ("Basmati Rice", 500, 100),
            ("Olive Oil", 40, 50),
            ("Sunflower Oil", 50, 50),
            ("Whole Wheat", 0, 0),
        )

        low = {item.name for item in evaluator.get()}

        expected = {item.name for item in repo.list() if item.quantity <= item.threshold}
        assert low == expected == {"Olive Oil", "Sunflower Oil", "Whole Wheat"}

    def test_idempotent_without_mutation(self):
        _, evaluator = _setup(("Olive Oil", 40, 50), ("Basmati Rice", 500, 100))
        assert evaluator.get() == evaluator.get()

    def test_recomputed_after_mutation(self):
        repo, evaluator = _setup(("Basmati Rice", 500, 100))
        assert evaluator.get() == []

        item = repo.list()[0]
        repo.update(item.id, {"quantity": 100})

        assert [i.id for i in evaluator.get()] == [item.id]
        assert evaluator.count() == 1

    def test_empty_inventory(self):
        _, evaluator = _setup()
        assert evaluator.get() == []
