"""Abstract document store — the port both repositories write through.

Defined in the domain layer so the domain never depends on
infrastructure.  Concrete adapters (in-memory, JSON files) live in the
infrastructure layer.

Documents are plain dicts carrying their id under the ``"id"`` key.
No multi-document transaction is offered; the only atomic primitive is the
single-document guarded ``increment``.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any, Callable, Mapping

Document = dict[str, Any]
ChangeCallback = Callable[[list[Document]], None]
ErrorCallback = Callable[[Exception], None]
Unsubscribe = Callable[[], None]


class DocumentStore(ABC):

    @abstractmethod
    def subscribe(
        self,
        collection: str,
        on_change: ChangeCallback,
        on_error: ErrorCallback,
    ) -> Unsubscribe:
        """Watch a collection.

        ``on_change`` receives the full current document set right away and
        again after every change.  Read failures go to ``on_error``.
        """

    @abstractmethod
    def create(
        self,
        collection: str,
        fields: Mapping[str, Any],
        doc_id: str | None = None,
    ) -> Document:
        """Insert a document and return it as stored (with its id)."""

    @abstractmethod
    def get(self, collection: str, doc_id: str) -> Document | None:
        """Return one document, or None."""

    @abstractmethod
    def update(self, collection: str, doc_id: str, fields: Mapping[str, Any]) -> Document:
        """Overwrite the named fields and return the stored document.

        Raises DocumentNotFoundError if the document does not exist.
        """

    @abstractmethod
    def increment(
        self,
        collection: str,
        doc_id: str,
        field: str,
        delta: int,
        floor: int | None = None,
        fields: Mapping[str, Any] | None = None,
    ) -> Document:
        """Atomically add ``delta`` to a numeric field.

        When ``floor`` is given and the result would fall below it, nothing
        is written and GuardViolationError is raised with the current
        value.  ``fields`` are written in the same step on success.
        """

    @abstractmethod
    def delete(self, collection: str, doc_id: str) -> None:
        """Remove a document. Raises DocumentNotFoundError if absent."""

    @abstractmethod
    def read_once(self, collection: str) -> list[Document]:
        """Return every document in a collection without subscribing."""
