"""Domain service: Low-Stock Evaluator.

A pure derived view over the inventory repository's current snapshot.
Nothing is cached; every call recomputes from the live view.
"""

from __future__ import annotations

from ims.domain.model.inventory import InventoryItem
from ims.domain.repository.inventory_repository import InventoryRepository


class LowStockEvaluator:

    def __init__(self, inventory_repo: InventoryRepository) -> None:
        self._inventory_repo = inventory_repo

    def get(self) -> list[InventoryItem]:
        """Items whose quantity is at or below their threshold."""
        return [item for item in self._inventory_repo.list() if item.is_low_stock]

    def count(self) -> int:
        return len(self.get())
