"""Sales repository — materialized view of the ``sales`` collection."""

from __future__ import annotations

import logging
from dataclasses import replace
from datetime import datetime, timezone
from decimal import Decimal
from typing import Callable, Iterable

from ims.domain.exceptions import DocumentNotFoundError, EntityNotFoundError, StoreError, ValidationError
from ims.domain.model.sale import SalesTransaction
from ims.domain.model.value_objects import DEFAULT_CURRENCY, Money
from ims.domain.repository.document_store import Document, DocumentStore, Unsubscribe
from ims.domain.repository.live_view import LiveView, Observer

logger = logging.getLogger(__name__)

COLLECTION = "sales"


class SalesRepository:

    def __init__(
        self,
        store: DocumentStore,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._store = store
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._view: LiveView[SalesTransaction] = LiveView(
            key=lambda sale: sale.id,
            sort_key=lambda sale: sale.date,
            reverse=True,
        )
        self._unsubscribe: Unsubscribe | None = None
        self.last_error: Exception | None = None

    # --- Lifecycle ------------------------------------------------------------

    def start(self) -> None:
        if self._unsubscribe is None:
            self._unsubscribe = self._store.subscribe(
                COLLECTION, self._on_change, self._on_error
            )

    def close(self) -> None:
        if self._unsubscribe is not None:
            self._unsubscribe()
            self._unsubscribe = None

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        return self._view.subscribe(observer)

    # --- Queries --------------------------------------------------------------

    def list(self) -> list[SalesTransaction]:
        """Every sale, newest first."""
        return self._view.snapshot()

    def get(self, transaction_id: str) -> SalesTransaction | None:
        return self._view.get(transaction_id)

    # --- Commands -------------------------------------------------------------

    def record(self, transaction: SalesTransaction) -> SalesTransaction:
        """Persist a new sale, stamping it with the current time.

        Only the sale orchestrator calls this, so every sale is paired with
        an inventory decrement.
        """
        if transaction.id is not None:
            raise ValidationError(f"Sale {transaction.id} has already been recorded")
        stamped = replace(transaction, date=self._clock())
        raw = transaction_to_document(stamped)
        raw.pop("id")
        doc = self._store.create(COLLECTION, raw)
        saved = transaction_from_document(doc)
        self._view.upsert(saved)
        logger.info(
            "Recorded sale %s: %d x %s = %s",
            saved.id, saved.quantity, saved.product_name, saved.total_amount,
        )
        return saved

    def void(self, transaction_id: str) -> None:
        """Delete a sale whose stock decrement was refused."""
        try:
            self._store.delete(COLLECTION, transaction_id)
        except DocumentNotFoundError as exc:
            raise EntityNotFoundError(f"Sale '{transaction_id}' not found") from exc
        self._view.discard(transaction_id)
        logger.warning("Voided sale %s", transaction_id)

    def seed_if_empty(self, transactions: Iterable[SalesTransaction]) -> bool:
        if self._store.read_once(COLLECTION):
            return False
        for sale in transactions:
            raw = transaction_to_document(sale)
            raw.pop("id")
            self._store.create(COLLECTION, raw, doc_id=sale.id)
        logger.info("Seeded %s collection", COLLECTION)
        return True

    # --- Subscription callbacks -----------------------------------------------

    def _on_change(self, docs: list[Document]) -> None:
        try:
            sales = [transaction_from_document(doc) for doc in docs]
        except StoreError as exc:
            self._on_error(exc)
            return
        self._view.replace_all(sales)
        self.last_error = None

    def _on_error(self, error: Exception) -> None:
        self.last_error = error
        logger.error("Sales subscription failed: %s", error)


# --- Serialization ------------------------------------------------------------


def transaction_to_document(sale: SalesTransaction) -> Document:
    return {
        "id": sale.id,
        "productId": sale.product_id,
        "productName": sale.product_name,
        "quantity": sale.quantity,
        "unitPrice": str(sale.unit_price.amount),
        "totalAmount": str(sale.total_amount.amount),
        "currency": sale.unit_price.currency,
        "date": sale.date.isoformat(),
    }


def transaction_from_document(raw: Document) -> SalesTransaction:
    currency = raw.get("currency", DEFAULT_CURRENCY)
    try:
        return SalesTransaction(
            id=raw["id"],
            product_id=raw["productId"],
            product_name=raw["productName"],
            quantity=raw["quantity"],
            unit_price=Money(Decimal(str(raw["unitPrice"])), currency),
            total_amount=Money(Decimal(str(raw["totalAmount"])), currency),
            date=datetime.fromisoformat(raw["date"]),
        )
    except (KeyError, TypeError, ValueError, ArithmeticError, ValidationError) as exc:
        raise StoreError(f"Malformed sales document {raw.get('id')!r}: {exc!r}") from exc
