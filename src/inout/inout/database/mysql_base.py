from __future__ import annotations

import json
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Tuple

import mysql.connector

from ..core.exceptions import StoreWriteError
from .connection import DatabaseConnection

Row = Dict[str, Any]


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, action: Optional[str] = None) -> Iterator[Any]:
    """Dictionary cursor in its own short transaction.

    Commits on success and rolls back otherwise. When ``action`` is given,
    connector errors surface as ``StoreWriteError`` naming it.
    """
    conn = conn_factory.connect()
    cur = conn.cursor(dictionary=True)
    try:
        yield cur
        conn.commit()
    except mysql.connector.Error as e:
        conn.rollback()
        if action is None:
            raise
        raise StoreWriteError(f"Failed to {action}: {e}") from e
    except Exception:
        conn.rollback()
        raise
    finally:
        cur.close()
        conn.close()


def load_body(body: Any) -> Row:
    # JSON columns come back as str or bytes depending on the connector build.
    if isinstance(body, (bytes, bytearray)):
        body = body.decode("utf-8")
    return json.loads(body) if isinstance(body, str) else dict(body)


def fetch_body(cur) -> Optional[Row]:
    row = cur.fetchone()
    return load_body(row["body"]) if row else None


def fetch_documents(cur) -> List[Tuple[str, Row]]:
    return [(str(r["doc_id"]), load_body(r["body"])) for r in cur.fetchall() or []]
