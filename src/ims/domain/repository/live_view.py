"""In-memory materialized view with observers.

Holds the latest snapshot of one collection keyed by id and notifies every
observer with the new snapshot on each change.
"""

from __future__ import annotations

import logging
from typing import Callable, Generic, Iterable, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")

Observer = Callable[[list[T]], None]


class LiveView(Generic[T]):

    def __init__(
        self,
        key: Callable[[T], str],
        sort_key: Callable[[T], object] | None = None,
        reverse: bool = False,
    ) -> None:
        self._key = key
        self._sort_key = sort_key
        self._reverse = reverse
        self._items: dict[str, T] = {}
        self._observers: list[Observer] = []
        self.loaded = False

    # --- Reads ----------------------------------------------------------------

    def snapshot(self) -> list[T]:
        items = list(self._items.values())
        if self._sort_key is not None:
            items.sort(key=self._sort_key, reverse=self._reverse)
        return items

    def get(self, key: str) -> T | None:
        return self._items.get(key)

    def __len__(self) -> int:
        return len(self._items)

    # --- Writes ---------------------------------------------------------------

    def replace_all(self, items: Iterable[T]) -> None:
        self._items = {self._key(item): item for item in items}
        self.loaded = True
        self._notify()

    def upsert(self, item: T) -> None:
        self._items[self._key(item)] = item
        self._notify()

    def discard(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._notify()

    # --- Observers ------------------------------------------------------------

    def subscribe(self, observer: Observer) -> Callable[[], None]:
        """Register ``observer``; the returned callable unregisters it."""
        self._observers.append(observer)

        def unsubscribe() -> None:
            if observer in self._observers:
                self._observers.remove(observer)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        for observer in list(self._observers):
            try:
                observer(snapshot)
            except Exception:
                # One broken observer must not starve the others.
                logger.exception("View observer %r failed", observer)
