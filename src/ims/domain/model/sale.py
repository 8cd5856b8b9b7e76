"""SalesTransaction entity — one completed sale event.

A sale captures a snapshot of the product's name and price at the moment
it is recorded.  Later edits to the item (rename, repricing, deletion)
never change a recorded sale.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone

from ims.domain.model.inventory import InventoryItem
from ims.domain.model.value_objects import Money, Quantity


@dataclass(frozen=True)
class SalesTransaction:
    """Immutable sale record.

    Use the ``SalesTransaction.snapshot()`` factory for new sales; it
    computes ``total_amount`` once.  ``__init__`` takes every field as
    stored, so the repository reconstitutes persisted sales without
    recomputing anything.
    """

    id: str | None
    product_id: str
    product_name: str
    quantity: int
    unit_price: Money  # locked at sale time
    total_amount: Money
    date: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @staticmethod
    def snapshot(item: InventoryItem, quantity: Quantity) -> SalesTransaction:
        """Build an unsaved sale from the item's current name and price."""
        price = item.unit_price
        return SalesTransaction(
            id=None,
            product_id=item.id,
            product_name=item.name,
            quantity=quantity.value,
            unit_price=price,
            total_amount=price * quantity.value,
        )
