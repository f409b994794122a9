from __future__ import annotations

import logging

from .connection import DatabaseConnection

logger = logging.getLogger(__name__)

DOCUMENTS_TABLE_DDL = """
CREATE TABLE IF NOT EXISTS documents (
    collection VARCHAR(64) NOT NULL,
    doc_id VARCHAR(191) NOT NULL,
    body JSON NOT NULL,
    updated_at TIMESTAMP NOT NULL DEFAULT CURRENT_TIMESTAMP ON UPDATE CURRENT_TIMESTAMP,
    PRIMARY KEY (collection, doc_id)
) CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci
"""


def ensure_database_exists(conn_factory: DatabaseConnection) -> None:
    database = conn_factory.config.database
    conn = conn_factory.connect(with_database=False)
    try:
        cur = conn.cursor()
        cur.execute(
            f"CREATE DATABASE IF NOT EXISTS `{database}` CHARACTER SET utf8mb4 COLLATE utf8mb4_unicode_ci;"
        )
        conn.commit()
    finally:
        conn.close()


def apply_schema(conn_factory: DatabaseConnection) -> None:
    """Idempotent: creates the database and the documents table if missing."""
    ensure_database_exists(conn_factory)
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute(DOCUMENTS_TABLE_DDL)
        conn.commit()
    finally:
        conn.close()
    logger.info("Document schema ready in %s", conn_factory.config.database)


def count_documents(conn_factory: DatabaseConnection) -> dict[str, int]:
    conn = conn_factory.connect()
    try:
        cur = conn.cursor()
        cur.execute("SELECT collection, COUNT(*) FROM documents GROUP BY collection")
        return {str(collection): int(n) for collection, n in cur.fetchall()}
    finally:
        conn.close()
