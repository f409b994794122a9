"""Abstract document store the attendance core issues its operations against.

Documents are plain JSON-compatible dicts addressed by ``(collection, doc_id)``.
Live listeners receive the current value right after subscribing and again
after every write to the same document, until cancelled. A deleted or absent
document is delivered as ``None``.
"""
from __future__ import annotations

import copy
import logging
import threading
from collections import deque
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Protocol, Sequence, Tuple

logger = logging.getLogger(__name__)

Document = Dict[str, Any]
SnapshotCallback = Callable[[Optional[Document]], None]


@dataclass(frozen=True)
class ArrayAppend:
    """Update sentinel: append values to an array field (duplicates kept)."""

    values: Tuple[Any, ...]

    def __init__(self, *values: Any):
        object.__setattr__(self, "values", tuple(values))


def apply_update(document: Document, fields: Document) -> Document:
    updated = copy.deepcopy(document)
    for key, value in fields.items():
        if isinstance(value, ArrayAppend):
            updated[key] = list(updated.get(key) or []) + list(value.values)
        else:
            updated[key] = copy.deepcopy(value)
    return updated


class Subscription:
    def __init__(self, on_cancel: Callable[["Subscription"], None]):
        self._on_cancel = on_cancel
        self._active = True

    @property
    def active(self) -> bool:
        return self._active

    def cancel(self) -> None:
        if self._active:
            self._active = False
            self._on_cancel(self)


class ListenerRegistry:
    """Per-document listener bookkeeping shared by store implementations.

    Snapshots of one document reach listeners one at a time and in write
    order. Whichever thread finds the document idle delivers everything
    queued for it, so no lock is held while callbacks run. A snapshot
    carrying a version older than one already queued is dropped.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._listeners: dict[tuple[str, str], list[tuple[Subscription, SnapshotCallback]]] = {}
        self._versions: dict[tuple[str, str], int] = {}
        self._pending: dict[tuple[str, str], deque] = {}
        self._draining: set[tuple[str, str]] = set()

    def add(self, collection: str, doc_id: str, callback: SnapshotCallback) -> Subscription:
        key = (collection, doc_id)

        def _remove(sub: Subscription) -> None:
            with self._lock:
                entries = self._listeners.get(key, [])
                self._listeners[key] = [e for e in entries if e[0] is not sub]
                if not self._listeners[key]:
                    del self._listeners[key]

        sub = Subscription(_remove)
        with self._lock:
            self._listeners.setdefault(key, []).append((sub, callback))
        return sub

    def notify(self, collection: str, doc_id: str, document: Optional[Document], version: Optional[int] = None) -> None:
        key = (collection, doc_id)
        with self._lock:
            if version is not None:
                if version <= self._versions.get(key, 0):
                    logger.debug("Dropping stale snapshot %s/%s v%d", collection, doc_id, version)
                    return
                self._versions[key] = version
            self._pending.setdefault(key, deque()).append(copy.deepcopy(document))
            if key in self._draining:
                return
            self._draining.add(key)

        try:
            self._drain(key)
        except Exception:
            with self._lock:
                self._draining.discard(key)
            raise

    def _drain(self, key: tuple[str, str]) -> None:
        while True:
            with self._lock:
                queue = self._pending.get(key)
                if not queue:
                    self._pending.pop(key, None)
                    self._draining.discard(key)
                    return
                snapshot = queue.popleft()
                entries = list(self._listeners.get(key, []))
            for sub, callback in entries:
                if sub.active:
                    callback(copy.deepcopy(snapshot))


class DocumentStore(Protocol):
    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        raise NotImplementedError

    def set(self, collection: str, doc_id: str, document: Document) -> None:
        """Full overwrite."""

        raise NotImplementedError

    def update(self, collection: str, doc_id: str, fields: Document) -> None:
        """Partial update of an existing document. Raises StoreWriteError if absent."""

        raise NotImplementedError

    def add(self, collection: str, document: Document) -> str:
        raise NotImplementedError

    def delete(self, collection: str, doc_id: str) -> bool:
        raise NotImplementedError

    def query(self, collection: str, *, field: Optional[str] = None, value: Any = None) -> Sequence[Tuple[str, Document]]:
        raise NotImplementedError

    def listen(self, collection: str, doc_id: str, callback: SnapshotCallback) -> Subscription:
        raise NotImplementedError


def sort_by(items: List[Tuple[str, Document]], field: str, *, reverse: bool = False) -> List[Tuple[str, Document]]:
    return sorted(items, key=lambda item: item[1].get(field) or 0, reverse=reverse)
