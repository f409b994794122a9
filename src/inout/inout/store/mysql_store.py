from __future__ import annotations

import json
import logging
import uuid
from typing import Any, Optional, Sequence, Tuple

from ..core.exceptions import StoreWriteError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetch_body, fetch_documents
from .document_store import Document, ListenerRegistry, SnapshotCallback, Subscription, apply_update

logger = logging.getLogger(__name__)


class MySQLDocumentStore:
    """Document store persisted as JSON bodies in a single MySQL table.

    Listeners are process-local: they fire for writes made through this
    instance only.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory
        self._listeners = ListenerRegistry()

    def get(self, collection: str, doc_id: str) -> Optional[Document]:
        with db_cursor(self._conn_factory) as cur:
            cur.execute(
                "SELECT body FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            return fetch_body(cur)

    def set(self, collection: str, doc_id: str, document: Document) -> None:
        with db_cursor(self._conn_factory, action=f"write {collection}/{doc_id}") as cur:
            cur.execute(
                """
                INSERT INTO documents(collection, doc_id, body)
                VALUES(%s,%s,%s)
                ON DUPLICATE KEY UPDATE body=VALUES(body)
                """,
                (collection, doc_id, json.dumps(document)),
            )
        self._listeners.notify(collection, doc_id, document)

    def update(self, collection: str, doc_id: str, fields: Document) -> None:
        with db_cursor(self._conn_factory, action=f"update {collection}/{doc_id}") as cur:
            cur.execute(
                "SELECT body FROM documents WHERE collection=%s AND doc_id=%s FOR UPDATE",
                (collection, doc_id),
            )
            current = fetch_body(cur)
            if current is None:
                raise StoreWriteError(f"No document to update: {collection}/{doc_id}")
            updated = apply_update(current, fields)
            cur.execute(
                "UPDATE documents SET body=%s WHERE collection=%s AND doc_id=%s",
                (json.dumps(updated), collection, doc_id),
            )
        self._listeners.notify(collection, doc_id, updated)

    def add(self, collection: str, document: Document) -> str:
        doc_id = uuid.uuid4().hex[:20]
        self.set(collection, doc_id, document)
        return doc_id

    def delete(self, collection: str, doc_id: str) -> bool:
        with db_cursor(self._conn_factory, action=f"delete {collection}/{doc_id}") as cur:
            cur.execute(
                "DELETE FROM documents WHERE collection=%s AND doc_id=%s",
                (collection, doc_id),
            )
            removed = cur.rowcount > 0
        if removed:
            self._listeners.notify(collection, doc_id, None)
        return removed

    def query(self, collection: str, *, field: Optional[str] = None, value: Any = None) -> Sequence[Tuple[str, Document]]:
        clauses = ["collection=%s"]
        params: list[object] = [collection]
        if field is not None:
            clauses.append("JSON_EXTRACT(body, %s) = CAST(%s AS JSON)")
            params.extend([f"$.{field}", json.dumps(value)])

        where = " AND ".join(clauses)
        with db_cursor(self._conn_factory) as cur:
            cur.execute(f"SELECT doc_id, body FROM documents WHERE {where}", tuple(params))
            return fetch_documents(cur)

    def listen(self, collection: str, doc_id: str, callback: SnapshotCallback) -> Subscription:
        sub = self._listeners.add(collection, doc_id, callback)
        callback(self.get(collection, doc_id))
        return sub
