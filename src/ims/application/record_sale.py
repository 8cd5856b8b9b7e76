"""Application service: Record Sale use case.

Coordinates the two repositories: validates the request against the
current inventory view, records the sale with snapshot fields, then
decrements stock with a guarded store-side update.

The sale is written *before* the decrement.  If the process fails in
between, the system is left with a recorded sale and un-decremented stock
(surfaced as PartialSaleError) rather than with lost revenue.
"""

from __future__ import annotations

import logging
from typing import Callable

from ims.application.dto import LowStockAlert, SaleResult
from ims.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    GuardViolationError,
    InsufficientStockError,
    PartialSaleError,
    ProductNotFoundError,
    StoreError,
)
from ims.domain.model.inventory import InventoryItem
from ims.domain.model.sale import SalesTransaction
from ims.domain.model.value_objects import Quantity
from ims.domain.repository.inventory_repository import InventoryRepository
from ims.domain.repository.sales_repository import SalesRepository

logger = logging.getLogger(__name__)

AlertListener = Callable[[LowStockAlert], None]


class RecordSaleHandler:

    def __init__(
        self,
        inventory_repo: InventoryRepository,
        sales_repo: SalesRepository,
        on_low_stock: AlertListener | None = None,
    ) -> None:
        self._inventory_repo = inventory_repo
        self._sales_repo = sales_repo
        self._on_low_stock = on_low_stock

    def handle(self, product_id: str, quantity: int) -> SaleResult:
        """Sell ``quantity`` units of an item.

        Steps:
        1. Validate quantity, item existence and stock (no writes on failure).
        2. Snapshot name and price; total = quantity x price.
        3. Record the sale.
        4. Decrement stock atomically; the store refuses to go below zero.
        5. Emit a low-stock alert when the new quantity is <= threshold.
        """
        qty = Quantity(quantity)

        item = self._inventory_repo.get(product_id)
        if item is None:
            raise ProductNotFoundError(product_id)
        if qty.value > item.quantity:
            raise InsufficientStockError(item.name, qty.value, item.quantity, item.unit)

        transaction = self._sales_repo.record(SalesTransaction.snapshot(item, qty))

        try:
            updated = self._inventory_repo.decrement(item.id, qty.value)
        except GuardViolationError as exc:
            # Another session sold the stock after our view was taken.
            self._void(transaction, reason=str(exc))
            raise InsufficientStockError(item.name, qty.value, exc.current, item.unit) from exc
        except (StoreError, EntityNotFoundError) as exc:
            logger.error(
                "Sale %s recorded but stock of %s not decremented: %s",
                transaction.id, item.id, exc,
            )
            raise PartialSaleError(transaction, str(exc)) from exc

        alert = self._check_threshold(updated)
        return SaleResult(
            transaction=transaction,
            new_quantity=updated.quantity,
            low_stock_triggered=alert is not None,
            alert=alert,
        )

    # --- Internal helpers -----------------------------------------------------

    def _void(self, transaction: SalesTransaction, reason: str) -> None:
        logger.warning(
            "Stock for %s changed concurrently; voiding sale %s (%s)",
            transaction.product_name, transaction.id, reason,
        )
        try:
            self._sales_repo.void(transaction.id)  # type: ignore[arg-type]
        except DomainException as exc:
            logger.error("Could not void sale %s: %s", transaction.id, exc)
            raise PartialSaleError(transaction, f"{reason}; void failed: {exc}") from exc

    def _check_threshold(self, item: InventoryItem) -> LowStockAlert | None:
        if not item.is_low_stock:
            return None
        alert = LowStockAlert(
            item_id=item.id,
            item_name=item.name,
            quantity=item.quantity,
            threshold=item.threshold,
            unit=item.unit,
        )
        logger.warning("Low stock: %s", alert.message)
        if self._on_low_stock is not None:
            self._on_low_stock(alert)
        return alert
