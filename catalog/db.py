"""SQLite document store for catalog products.

Each product is stored as a single JSON document. A few top-level fields
are mirrored into indexed columns so they can be filtered on.
"""

import json
import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Generator, Iterable, List, Optional, Tuple

from catalog.config import DB_PATH
from catalog.errors import PersistError
from catalog.models import Product, utc_now

__all__ = [
    "DEFAULT_DB_PATH",
    "FILTER_COLUMNS",
    "get_connection",
    "init_db",
    "insert_many",
    "find_by_id",
    "find_products",
    "update_one",
    "count_products",
]

DEFAULT_DB_PATH = DB_PATH

# Filter keys accepted by find/update/count, mapped to SQL conditions.
# Keys outside this whitelist are rejected to keep queries parameterized.
FILTER_COLUMNS: Dict[str, str] = {
    "id": "id = ?",
    "product_id": "product_id = ?",
    "enriched": "enriched = ?",
    "deleted": "deleted = ?",
    "variant_id": (
        "EXISTS (SELECT 1 FROM json_each(products.data, '$.variants') "
        "WHERE json_extract(json_each.value, '$.id') = ?)"
    ),
}


@contextmanager
def get_connection(db_path: str = DEFAULT_DB_PATH) -> Generator[sqlite3.Connection, None, None]:
    """Context manager for database connections."""
    try:
        Path(db_path).parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise PersistError(f"Cannot create database directory for {db_path}: {e}") from e

    conn = sqlite3.connect(db_path, timeout=10)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
    finally:
        conn.close()


def init_db(db_path: str = DEFAULT_DB_PATH) -> None:
    """Initialize the database schema.

    Raises:
        PersistError: If the database cannot be opened or created
    """
    try:
        with get_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS products (
                    id TEXT PRIMARY KEY,
                    product_id TEXT NOT NULL DEFAULT '',
                    enriched INTEGER NOT NULL DEFAULT 0,
                    deleted INTEGER NOT NULL DEFAULT 0,
                    data TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
            """)
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_product_id ON products(product_id)")
            cursor.execute("CREATE INDEX IF NOT EXISTS idx_products_enriched ON products(enriched)")
            conn.commit()
    except sqlite3.Error as e:
        raise PersistError(f"Failed to initialize database at {db_path}: {e}") from e


def _row_values(product: Product) -> Tuple[Any, ...]:
    return (
        product.id,
        product.product_id,
        int(product.enriched),
        int(product.deleted),
        json.dumps(product.to_document(), ensure_ascii=False),
        product.created_at,
        product.updated_at,
    )


def _build_where(filters: Optional[Dict[str, Any]]) -> Tuple[str, List[Any]]:
    """Translate a filter dict into a WHERE clause and parameters."""
    if not filters:
        return "", []

    conditions: List[str] = []
    params: List[Any] = []
    for key, value in filters.items():
        if key not in FILTER_COLUMNS:
            raise ValueError(f"Unsupported filter field: {key}. Must be one of {sorted(FILTER_COLUMNS)}")
        conditions.append(FILTER_COLUMNS[key])
        params.append(int(value) if isinstance(value, bool) else value)
    return " WHERE " + " AND ".join(conditions), params


def insert_many(db_path: str, products: Iterable[Product]) -> int:
    """Insert products in a single transaction.

    Returns:
        Number of inserted documents

    Raises:
        PersistError: If the store rejects the write (duplicate id, locked or
            unreachable database)
    """
    rows = [_row_values(p) for p in products]
    if not rows:
        return 0

    try:
        with get_connection(db_path) as conn:
            conn.executemany(
                """
                INSERT INTO products (id, product_id, enriched, deleted, data, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                rows,
            )
            conn.commit()
    except sqlite3.Error as e:
        raise PersistError(f"Failed to insert {len(rows)} product(s): {e}") from e
    return len(rows)


def find_by_id(db_path: str, doc_id: str) -> Optional[Product]:
    """Get a single product by document id."""
    try:
        with get_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT data FROM products WHERE id = ?", (doc_id,))
            row = cursor.fetchone()
    except sqlite3.Error as e:
        raise PersistError(f"Failed to read product {doc_id}: {e}") from e
    if row is None:
        return None
    return Product.from_document(json.loads(row["data"]))


def find_products(
    db_path: str,
    filters: Optional[Dict[str, Any]] = None,
    limit: Optional[int] = None,
) -> List[Product]:
    """Find products matching all filters.

    Results come back in store-native order; no sort is applied.
    """
    where, params = _build_where(filters)
    query = f"SELECT data FROM products{where}"
    if limit is not None:
        query += " LIMIT ?"
        params.append(int(limit))

    try:
        with get_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(query, params)
            rows = cursor.fetchall()
    except sqlite3.Error as e:
        raise PersistError(f"Failed to query products matching {filters}: {e}") from e
    return [Product.from_document(json.loads(row["data"])) for row in rows]


def update_one(db_path: str, filters: Dict[str, Any], updates: Dict[str, Any]) -> bool:
    """Apply ``updates`` to the first product matching ``filters``.

    The read and write happen in one transaction, so each document update is
    atomic. Nothing is guaranteed across documents.

    Returns:
        True if a document matched and was updated

    Raises:
        PersistError: If the write fails
    """
    if "id" in updates or "created_at" in updates:
        raise ValueError("Document id and creation time are immutable")
    where, params = _build_where(filters)

    try:
        with get_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            cursor.execute(f"SELECT data FROM products{where} LIMIT 1", params)
            row = cursor.fetchone()
            if row is None:
                conn.rollback()
                return False

            doc = json.loads(row["data"])
            doc.update(updates)
            doc["updated_at"] = utc_now()
            product = Product.from_document(doc)
            cursor.execute(
                """
                UPDATE products SET
                    product_id = ?,
                    enriched = ?,
                    deleted = ?,
                    data = ?,
                    updated_at = ?
                WHERE id = ?
                """,
                (
                    product.product_id,
                    int(product.enriched),
                    int(product.deleted),
                    json.dumps(product.to_document(), ensure_ascii=False),
                    product.updated_at,
                    product.id,
                ),
            )
            conn.commit()
    except sqlite3.Error as e:
        raise PersistError(f"Failed to update product matching {filters}: {e}") from e
    return True


def count_products(db_path: str = DEFAULT_DB_PATH, filters: Optional[Dict[str, Any]] = None) -> int:
    """Count products matching all filters."""
    where, params = _build_where(filters)
    try:
        with get_connection(db_path) as conn:
            cursor = conn.cursor()
            cursor.execute(f"SELECT COUNT(*) FROM products{where}", params)
            return cursor.fetchone()[0]
    except sqlite3.Error as e:
        raise PersistError(f"Failed to count products matching {filters}: {e}") from e
