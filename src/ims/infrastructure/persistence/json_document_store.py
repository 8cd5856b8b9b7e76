"""JSON-file-backed implementation of DocumentStore.

One file per collection (``<data_dir>/<collection>.json``) holding a list
of records.  Every operation re-reads the file under an inter-process lock
(``<collection>.json.lock``), so separate processes sharing a data
directory see each other's writes and a guarded ``increment`` stays atomic
across them.  Subscribers are notified only within the writing process.
"""

from __future__ import annotations

import json
import logging
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator

from filelock import FileLock, Timeout

from ims.domain.exceptions import StoreError
from ims.domain.repository.document_store import Document
from ims.infrastructure.persistence.in_memory_document_store import InMemoryDocumentStore

logger = logging.getLogger(__name__)

DEFAULT_LOCK_TIMEOUT = 10.0


class JsonDocumentStore(InMemoryDocumentStore):

    def __init__(self, data_dir: Path, lock_timeout: float = DEFAULT_LOCK_TIMEOUT) -> None:
        super().__init__()
        self._data_dir = data_dir
        self._lock_timeout = lock_timeout
        self._file_locks: dict[str, FileLock] = {}

    # --- Storage hooks --------------------------------------------------------

    @contextmanager
    def _locked(self, collection: str) -> Iterator[None]:
        with self._lock:
            file_lock = self._file_lock(collection)
            try:
                file_lock.acquire(timeout=self._lock_timeout)
            except Timeout as exc:
                raise StoreError(f"Timed out waiting for {file_lock.lock_file}") from exc
            try:
                yield
            finally:
                file_lock.release()

    def _read(self, collection: str) -> dict[str, Document]:
        path = self._path(collection)
        if not path.exists():
            return {}
        try:
            records = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"Cannot read {path}: {exc}") from exc
        if not isinstance(records, list):
            raise StoreError(f"Cannot read {path}: expected a list of records")
        docs: dict[str, Document] = {}
        for raw in records:
            if not isinstance(raw, dict) or not isinstance(raw.get("id"), str):
                raise StoreError(f"Cannot read {path}: record without a string id: {raw!r}")
            docs[raw["id"]] = raw
        return docs

    def _write(self, collection: str, docs: dict[str, Document]) -> None:
        path = self._path(collection)
        tmp = path.with_suffix(".json.tmp")
        try:
            tmp.write_text(
                json.dumps(list(docs.values()), indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
            tmp.replace(path)
        except OSError as exc:
            raise StoreError(f"Cannot write {path}: {exc}") from exc
        logger.debug("Wrote %d record(s) to %s", len(docs), path)

    # --- File helpers ---------------------------------------------------------

    def _path(self, collection: str) -> Path:
        return self._data_dir / f"{collection}.json"

    def _file_lock(self, collection: str) -> FileLock:
        if collection not in self._file_locks:
            try:
                self._data_dir.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise StoreError(f"Cannot create {self._data_dir}: {exc}") from exc
            lock_path = self._data_dir / f"{collection}.json.lock"
            self._file_locks[collection] = FileLock(str(lock_path))
        return self._file_locks[collection]
