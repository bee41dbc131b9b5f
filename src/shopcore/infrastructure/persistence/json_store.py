"""JSON-file document store and its unit of work.

All collections live in one JSON document so a commit is a single
atomic file replace: the new document is written to a temporary file
in the same directory and moved over the old one. Readers therefore
see either the previous state or the new one, never a mix.

Units of work on the same file are serialised with a per-file lock
held from ``__enter__`` to ``__exit__``. This makes read-check-write
sequences (merge-or-create of a cart line, order-number allocation)
race-free inside one process.
"""

from __future__ import annotations

import json
import os
import tempfile
import threading
from pathlib import Path

import structlog

from shopcore.domain.exceptions import TransactionFailureError
from shopcore.domain.repository.unit_of_work import UnitOfWork
from shopcore.infrastructure.persistence.json_cart_repository import JsonCartRepository
from shopcore.infrastructure.persistence.json_order_repository import JsonOrderRepository
from shopcore.infrastructure.persistence.json_product_repository import (
    JsonProductRepository,
    JsonVariantRepository,
)

logger = structlog.get_logger(__name__)

COLLECTIONS = ("products", "variants", "cart_lines", "orders")

_locks: dict[Path, threading.Lock] = {}
_locks_guard = threading.Lock()


def _lock_for(path: Path) -> threading.Lock:
    with _locks_guard:
        return _locks.setdefault(path, threading.Lock())


class JsonDocumentStore:

    def __init__(self, file_path: Path) -> None:
        self._file_path = file_path.resolve()
        self._ensure_file()

    @property
    def lock(self) -> threading.Lock:
        return _lock_for(self._file_path)

    def load(self) -> dict[str, list[dict]]:
        document = json.loads(self._file_path.read_text(encoding="utf-8"))
        for name in COLLECTIONS:
            document.setdefault(name, [])
        return document

    def replace(self, document: dict[str, list[dict]]) -> None:
        """Atomically swap the stored document for ``document``."""
        payload = json.dumps(document, indent=2) + "\n"
        tmp_name = None
        try:
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=self._file_path.parent,
                prefix=f".{self._file_path.name}.",
                suffix=".tmp",
                delete=False,
            ) as tmp:
                tmp_name = tmp.name
                tmp.write(payload)
                tmp.flush()
                os.fsync(tmp.fileno())
            os.replace(tmp_name, self._file_path)
        except OSError as exc:
            if tmp_name is not None and os.path.exists(tmp_name):
                os.unlink(tmp_name)
            raise TransactionFailureError(
                f"Could not write {self._file_path.name}: {exc}"
            ) from exc

    # --- File helpers ---------------------------------------------------------

    def _ensure_file(self) -> None:
        if not self._file_path.exists():
            self._file_path.parent.mkdir(parents=True, exist_ok=True)
            self._file_path.write_text(
                json.dumps({name: [] for name in COLLECTIONS}, indent=2) + "\n",
                encoding="utf-8",
            )


class JsonUnitOfWork(UnitOfWork):
    """Unit of work over a JsonDocumentStore.

    ``__enter__`` takes the file lock and loads a private working copy of
    the document; repositories read and write that copy. ``commit``
    writes it back in one atomic replace. Leaving the block without a
    commit drops the copy.
    """

    def __init__(self, store: JsonDocumentStore) -> None:
        self._store = store
        self._document: dict[str, list[dict]] | None = None
        self._committed = False

    def __enter__(self) -> JsonUnitOfWork:
        self._store.lock.acquire()
        try:
            self._document = self._store.load()
        except Exception:
            self._store.lock.release()
            raise
        self._committed = False
        self.products = JsonProductRepository(self._document["products"])
        self.variants = JsonVariantRepository(self._document["variants"])
        self.carts = JsonCartRepository(self._document["cart_lines"])
        self.orders = JsonOrderRepository(self._document["orders"])
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        try:
            self.rollback()
        finally:
            self._store.lock.release()

    def commit(self) -> None:
        if self._document is None:
            raise TransactionFailureError("Unit of work is not active")
        self._store.replace(self._document)
        self._committed = True
        logger.debug("uow_committed")

    def rollback(self) -> None:
        if self._document is not None and not self._committed:
            logger.debug("uow_rolled_back")
        self._document = None
