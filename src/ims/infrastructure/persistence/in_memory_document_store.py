"""Process-local implementation of DocumentStore.

Keeps every collection in a dict.  All operations run under one lock and
documents are deep-copied in and out, so callers never share state with
the store.  Subclasses change where collections are loaded from and saved
to by overriding ``_read`` and ``_write``, and how an operation is made
exclusive by overriding ``_locked``.
"""

from __future__ import annotations

import copy
import logging
import threading
import uuid
from collections import defaultdict
from typing import Any, ContextManager, Mapping

from ims.domain.exceptions import DocumentNotFoundError, GuardViolationError, StoreError
from ims.domain.repository.document_store import (
    ChangeCallback,
    Document,
    DocumentStore,
    ErrorCallback,
    Unsubscribe,
)

logger = logging.getLogger(__name__)


def new_document_id() -> str:
    return uuid.uuid4().hex[:20]


class InMemoryDocumentStore(DocumentStore):

    def __init__(self) -> None:
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, Document]] = {}
        self._subscribers: dict[str, list[tuple[ChangeCallback, ErrorCallback]]] = defaultdict(list)

    # --- DocumentStore interface ----------------------------------------------

    def subscribe(
        self,
        collection: str,
        on_change: ChangeCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        entry = (on_change, on_error)
        with self._locked(collection):
            self._subscribers[collection].append(entry)
            self._deliver(collection, [entry])

        def unsubscribe() -> None:
            with self._lock:
                if entry in self._subscribers[collection]:
                    self._subscribers[collection].remove(entry)

        return unsubscribe

    def create(
        self,
        collection: str,
        fields: Mapping[str, Any],
        doc_id: str | None = None,
    ) -> Document:
        with self._locked(collection):
            docs = self._read(collection)
            doc_id = doc_id or new_document_id()
            if doc_id in docs:
                raise StoreError(f"Document '{doc_id}' already exists in '{collection}'")
            doc = {**copy.deepcopy(dict(fields)), "id": doc_id}
            docs[doc_id] = doc
            self._write(collection, docs)
            self._changed(collection)
            return copy.deepcopy(doc)

    def get(self, collection: str, doc_id: str) -> Document | None:
        with self._locked(collection):
            doc = self._read(collection).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> Document:
        with self._locked(collection):
            docs = self._read(collection)
            doc = docs.get(doc_id)
            if doc is None:
                raise DocumentNotFoundError(collection, doc_id)
            doc.update(copy.deepcopy({k: v for k, v in fields.items() if k != "id"}))
            self._write(collection, docs)
            self._changed(collection)
            return copy.deepcopy(doc)

    def increment(
        self,
        collection: str,
        doc_id: str,
        field: str,
        delta: int,
        floor: int | None = None,
        fields: Mapping[str, Any] | None = None,
    ) -> Document:
        with self._locked(collection):
            docs = self._read(collection)
            doc = docs.get(doc_id)
            if doc is None:
                raise DocumentNotFoundError(collection, doc_id)
            current = doc.get(field, 0)
            if not isinstance(current, int) or isinstance(current, bool):
                raise StoreError(f"Field '{field}' of {collection}/{doc_id} is not an integer")
            result = current + delta
            if floor is not None and result < floor:
                raise GuardViolationError(collection, doc_id, field, current)
            doc[field] = result
            if fields:
                doc.update(copy.deepcopy(dict(fields)))
            self._write(collection, docs)
            self._changed(collection)
            return copy.deepcopy(doc)

    def delete(self, collection: str, doc_id: str) -> None:
        with self._locked(collection):
            docs = self._read(collection)
            if docs.pop(doc_id, None) is None:
                raise DocumentNotFoundError(collection, doc_id)
            self._write(collection, docs)
            self._changed(collection)

    def read_once(self, collection: str) -> list[Document]:
        with self._locked(collection):
            return [copy.deepcopy(doc) for doc in self._read(collection).values()]

    # --- Storage hooks --------------------------------------------------------

    def _locked(self, collection: str) -> ContextManager[Any]:
        """Held for the whole read-modify-write of one operation."""
        return self._lock

    def _read(self, collection: str) -> dict[str, Document]:
        return self._collections.setdefault(collection, {})

    def _write(self, collection: str, docs: dict[str, Document]) -> None:
        self._collections[collection] = docs

    # --- Notification ---------------------------------------------------------

    def _changed(self, collection: str) -> None:
        self._deliver(collection, list(self._subscribers[collection]))

    def _deliver(
        self,
        collection: str,
        subscribers: list[tuple[ChangeCallback, ErrorCallback]],
    ) -> None:
        if not subscribers:
            return
        logger.debug("Notifying %d subscriber(s) of %s", len(subscribers), collection)
        try:
            docs = list(self._read(collection).values())
        except StoreError as exc:
            for _, on_error in subscribers:
                on_error(exc)
            return
        for on_change, _ in subscribers:
            on_change([copy.deepcopy(doc) for doc in docs])
