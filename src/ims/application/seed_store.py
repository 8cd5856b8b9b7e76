"""Application service: Seed Store use case.

Fills empty collections with the sample catalog and a few sample sales so
a fresh installation has something to show.  Collections that already hold
documents are left untouched.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Callable

from ims.domain.model.inventory import InventoryItem
from ims.domain.model.sale import SalesTransaction
from ims.domain.model.value_objects import Money
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.sales_repository import SalesRepository

# (id, name, category, quantity, unit, unit price, threshold)
SAMPLE_INVENTORY = [
    ("1", "Basmati Rice", "Rice", 500, "kg", "75", 100),
    ("2", "Whole Wheat", "Wheat", 750, "kg", "45", 150),
    ("3", "Sunflower Oil", "Oil", 200, "liter", "120", 50),
    ("4", "Jasmine Rice", "Rice", 350, "kg", "90", 100),
    ("5", "Olive Oil", "Oil", 40, "liter", "350", 50),
]

# (id, product id, product name, quantity, unit price, days ago)
SAMPLE_SALES = [
    ("s1", "1", "Basmati Rice", 50, "75", 1),
    ("s2", "3", "Sunflower Oil", 20, "120", 2),
    ("s3", "2", "Whole Wheat", 100, "45", 3),
]


@dataclass(frozen=True)
class SeedResult:
    inventory_seeded: bool
    sales_seeded: bool


class SeedStoreHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        sales_repo: SalesRepository,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._sales_repo = sales_repo
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    def handle(self) -> SeedResult:
        now = self._clock()
        items = [
            InventoryItem(
                id=item_id,
                name=name,
                category=category,
                quantity=quantity,
                unit=unit,
                unit_price=Money.of(price),
                threshold=threshold,
                last_updated=now,
            )
            for item_id, name, category, quantity, unit, price, threshold in SAMPLE_INVENTORY
        ]
        sales = []
        for sale_id, product_id, product_name, quantity, price, days_ago in SAMPLE_SALES:
            unit_price = Money.of(price)
            sales.append(
                SalesTransaction(
                    id=sale_id,
                    product_id=product_id,
                    product_name=product_name,
                    quantity=quantity,
                    unit_price=unit_price,
                    total_amount=unit_price * quantity,
                    date=now - timedelta(days=days_ago),
                )
            )
        return SeedResult(
            inventory_seeded=self._inventory_repo.seed_if_empty(items),
            sales_seeded=self._sales_repo.seed_if_empty(sales),
        )
