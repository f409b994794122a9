from __future__ import annotations

import copy
import threading
import uuid
from typing import Any, Optional, Sequence, Tuple

from ..core.exceptions import StoreWriteError
from .document_store import Document, ListenerRegistry, SnapshotCallback, Subscription, apply_update


class InMemoryDocumentStore:
    """Process-local store used for development, tests and offline demos."""

    def __init__(self):
        self._lock = threading.RLock()
        self._collections: dict[str, dict[str, Document]] = {}
        self._versions: dict[tuple[str, str], int] = {}
        self._listeners = ListenerRegistry()

    def _bump(self, collection: str, doc_id: str) -> int:
        # Caller holds the store lock.
        key = (collection, doc_id)
        self._versions[key] = self._versions.get(key, 0) + 1
        return self._versions[key]

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with self._lock:
            doc = self._collections.get(collection, {}).get(doc_id)
            return copy.deepcopy(doc) if doc is not None else None

    def set(self, collection: str, doc_id: str, document: Document) -> None:
        with self._lock:
            self._collections.setdefault(collection, {})[doc_id] = copy.deepcopy(document)
            version = self._bump(collection, doc_id)
        self._listeners.notify(collection, doc_id, document, version)

    def update(self, collection: str, doc_id: str, fields: Document) -> None:
        with self._lock:
            docs = self._collections.setdefault(collection, {})
            if doc_id not in docs:
                raise StoreWriteError(f"No document to update: {collection}/{doc_id}")
            docs[doc_id] = apply_update(docs[doc_id], fields)
            updated = copy.deepcopy(docs[doc_id])
            version = self._bump(collection, doc_id)
        self._listeners.notify(collection, doc_id, updated, version)

    def add(self, collection: str, document: Document) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.set(collection, doc_id, document)
        return doc_id

    def delete(self, collection: str, doc_id: str) -> bool:
        with self._lock:
            removed = self._collections.get(collection, {}).pop(doc_id, None)
            if removed is None:
                return False
            version = self._bump(collection, doc_id)
        self._listeners.notify(collection, doc_id, None, version)
        return True

    def query(self, collection: str, *, field: Optional[str] = None, value: Any = None) -> Sequence[Tuple[str, Document]]:
        with self._lock:
            items = list(self._collections.get(collection, {}).items())
        return [
            (doc_id, copy.deepcopy(doc))
            for doc_id, doc in items
            if field is None or doc.get(field) == value
        ]

    def listen(self, collection: str, doc_id: str, callback: SnapshotCallback) -> Subscription:
        sub = self._listeners.add(collection, doc_id, callback)
        callback(self.get(collection, doc_id))
        return sub
