"""Inventory repository — materialized view of the ``inventory`` collection.

Reads are served from memory.  Writes go through to the document store;
the confirmed document is applied to the local view straight away and the
store's subscription echo later reconciles the full set.
"""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from decimal import Decimal
from typing import Any, Callable, Iterable, Mapping

from ims.domain.exceptions import DocumentNotFoundError, EntityNotFoundError, StoreError, ValidationError
from ims.domain.model.inventory import InventoryItem, validate_item_fields
from ims.domain.model.value_objects import DEFAULT_CURRENCY, Money
from ims.domain.repository.document_store import Document, DocumentStore, Unsubscribe
from ims.domain.repository.live_view import LiveView, Observer

logger = logging.getLogger(__name__)

COLLECTION = "inventory"

Clock = Callable[[], datetime]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class InventoryRepository:

    def __init__(self, store: DocumentStore, clock: Clock | None = None) -> None:
        self._store = store
        self._clock = clock or _utc_now
        self._view: LiveView[InventoryItem] = LiveView(
            key=lambda item: item.id,
            sort_key=lambda item: item.last_updated,
            reverse=True,
        )
        self._unsubscribe: Unsubscribe | None = None
        self.last_error: Exception | None = None

    # --- Lifecycle ------------------------------------------------------------

    def start(self) -> None:
        """Open the live subscription; the first push hydrates the view."""
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

    def list(self) -> list[InventoryItem]:
        """Every item, most recently updated first."""
        return self._view.snapshot()

    def get(self, item_id: str) -> InventoryItem | None:
        return self._view.get(item_id)

    # --- Commands -------------------------------------------------------------

    def add(self, fields: Mapping[str, Any]) -> InventoryItem:
        """Validate and create a new item; returns the confirmed item."""
        clean = validate_item_fields(fields)
        clean.setdefault("notes", None)
        now = self._clock()
        doc = self._store.create(COLLECTION, _fields_to_raw(clean, now))
        item = item_from_document(doc)
        self._view.upsert(item)
        logger.info("Added inventory item %s (%s)", item.id, item.name)
        return item

    def update(self, item_id: str, changes: Mapping[str, Any]) -> InventoryItem:
        """Merge partial fields onto an item; returns the confirmed item."""
        clean = validate_item_fields(changes, partial=True)
        now = self._clock()
        try:
            doc = self._store.update(COLLECTION, item_id, _fields_to_raw(clean, now))
        except DocumentNotFoundError as exc:
            raise EntityNotFoundError(f"Inventory item '{item_id}' not found") from exc
        item = item_from_document(doc)
        self._view.upsert(item)
        logger.info("Updated inventory item %s: %s", item_id, ", ".join(sorted(clean)) or "touch")
        return item

    def remove(self, item_id: str) -> None:
        try:
            self._store.delete(COLLECTION, item_id)
        except DocumentNotFoundError as exc:
            raise EntityNotFoundError(f"Inventory item '{item_id}' not found") from exc
        self._view.discard(item_id)
        logger.info("Removed inventory item %s", item_id)

    def decrement(self, item_id: str, amount: int) -> InventoryItem:
        """Atomically subtract ``amount`` from an item's quantity.

        The store refuses the write (GuardViolationError) when the result
        would be negative, so two sessions can never oversell one item.
        """
        now = self._clock()
        try:
            doc = self._store.increment(
                COLLECTION,
                item_id,
                "quantity",
                -amount,
                floor=0,
                fields={"lastUpdated": now.isoformat()},
            )
        except DocumentNotFoundError as exc:
            raise EntityNotFoundError(f"Inventory item '{item_id}' not found") from exc
        item = item_from_document(doc)
        self._view.upsert(item)
        return item

    def seed_if_empty(self, items: Iterable[InventoryItem]) -> bool:
        """Write ``items`` only when the collection has no documents yet."""
        if self._store.read_once(COLLECTION):
            return False
        for item in items:
            raw = item_to_document(item)
            raw.pop("id")
            self._store.create(COLLECTION, raw, doc_id=item.id)
        logger.info("Seeded %s collection", COLLECTION)
        return True

    # --- Subscription callbacks -----------------------------------------------

    def _on_change(self, docs: list[Document]) -> None:
        try:
            items = [item_from_document(doc) for doc in docs]
        except StoreError as exc:
            self._on_error(exc)
            return
        self._view.replace_all(items)
        self.last_error = None

    def _on_error(self, error: Exception) -> None:
        # Keep serving the last known-good snapshot.
        self.last_error = error
        logger.error("Inventory subscription failed: %s", error)


# --- Serialization ------------------------------------------------------------


def item_to_document(item: InventoryItem) -> Document:
    return {
        "id": item.id,
        "name": item.name,
        "category": item.category,
        "quantity": item.quantity,
        "unit": item.unit,
        "unitPrice": str(item.unit_price.amount),
        "currency": item.unit_price.currency,
        "threshold": item.threshold,
        "lastUpdated": item.last_updated.isoformat(),
        "notes": item.notes,
    }


def item_from_document(raw: Document) -> InventoryItem:
    try:
        return InventoryItem(
            id=raw["id"],
            name=raw["name"],
            category=raw["category"],
            quantity=raw["quantity"],
            unit=raw["unit"],
            unit_price=Money(Decimal(str(raw["unitPrice"])), raw.get("currency", DEFAULT_CURRENCY)),
            threshold=raw["threshold"],
            last_updated=datetime.fromisoformat(raw["lastUpdated"]),
            notes=raw.get("notes"),
        )
    except (KeyError, TypeError, ValueError, ArithmeticError, ValidationError) as exc:
        raise StoreError(f"Malformed inventory document {raw.get('id')!r}: {exc!r}") from exc


def _fields_to_raw(clean: Mapping[str, Any], now: datetime) -> Document:
    raw: Document = {}
    for name, value in clean.items():
        if name == "unit_price":
            raw["unitPrice"] = str(value.amount)
            raw["currency"] = value.currency
        else:
            raw[name] = value
    raw["lastUpdated"] = now.isoformat()
    return raw
