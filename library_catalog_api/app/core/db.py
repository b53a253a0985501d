"""
SQLite‑backed document store and simple migration system.

``DocumentStore`` is the persistence adapter used by every service.  It
exposes four operations over named collections (``users``, ``authors``
and ``books``): ``find_by_id``, ``find``, ``save`` and ``remove``.  A
store instance owns a single SQLite connection; the application opens
it at startup and closes it at shutdown, and services receive the
handle explicitly.

Filters passed to ``find`` map field names to either a plain value
(equality) or one of the operators ``Contains`` and ``Between``.
Field names are checked against the collection's column
list before any SQL is built.

The migration mechanism stores applied migration versions in the
``migrations`` table and executes new migrations in order.
"""

import logging
import os
import sqlite3
import threading
from contextlib import contextmanager
from dataclasses import dataclass
from datetime import date, datetime
from pathlib import Path
from typing import Any, Dict, Iterator, List, Mapping, Optional

from .errors import DuplicateKeyError, NotFound, StoreError, ValidationFailed

logger = logging.getLogger(__name__)


COLLECTIONS: Dict[str, tuple] = {
    "users": ("id", "name", "email", "password", "created_at"),
    "authors": ("id", "name", "owner_id"),
    "books": (
        "id",
        "title",
        "description",
        "publish_date",
        "page_count",
        "created_at",
        "cover_image",
        "cover_image_type",
        "author_id",
        "owner_id",
    ),
}


MIGRATIONS: list[tuple[int, str]] = [
    # Migration 1: Initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL,
            email TEXT NOT NULL UNIQUE,
            password TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL
        );

        CREATE TABLE IF NOT EXISTS authors (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            name TEXT NOT NULL UNIQUE,
            owner_id INTEGER NOT NULL
        );

        -- author_id is not declared as a foreign key: the author check
        -- happens in BookService, and author deletion is guarded by a
        -- dependent-books lookup.
        CREATE TABLE IF NOT EXISTS books (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL UNIQUE,
            description TEXT,
            publish_date TEXT NOT NULL,
            page_count INTEGER NOT NULL,
            created_at TIMESTAMP NOT NULL,
            cover_image BLOB NOT NULL,
            cover_image_type TEXT NOT NULL,
            author_id INTEGER NOT NULL,
            owner_id INTEGER NOT NULL
        );
        """,
    ),
    # Migration 2: indices for the lookups the services perform
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_books_author_id ON books(author_id);
        CREATE INDEX IF NOT EXISTS idx_books_publish_date ON books(publish_date);
        CREATE INDEX IF NOT EXISTS idx_books_created_at ON books(created_at);
        CREATE INDEX IF NOT EXISTS idx_authors_owner_id ON authors(owner_id);
        CREATE INDEX IF NOT EXISTS idx_books_owner_id ON books(owner_id);
        """,
    ),
]


# SQLite stores integers as signed 64-bit values.
SQLITE_MIN_INTEGER = -(2 ** 63)
SQLITE_MAX_INTEGER = 2 ** 63 - 1


@dataclass(frozen=True)
class Contains:
    """Case‑insensitive substring match on a text field.

    Matching uses Unicode case folding, so ``"émile"`` finds ``"Émile"``.
    """

    value: str


@dataclass(frozen=True)
class Between:
    """Inclusive range; either end may be ``None`` to leave it open."""

    low: Any = None
    high: Any = None


def get_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    ``:memory:`` and absolute paths are used directly.  Otherwise the
    path is resolved relative to the project root.
    """
    if database_url == ":memory:" or os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent  # library_catalog_api/
    return str((base_dir / database_url).resolve())


def _casefold(value: Any) -> Any:
    return value.casefold() if isinstance(value, str) else value


def _is_storable_id(record_id: Any) -> bool:
    return not isinstance(record_id, int) or SQLITE_MIN_INTEGER <= record_id <= SQLITE_MAX_INTEGER


def _to_db(value: Any) -> Any:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    if isinstance(value, bool):
        return 1 if value else 0
    return value


class DocumentStore:
    """Persistence adapter over a single SQLite connection."""

    def __init__(self, database_url: str) -> None:
        self.path = get_database_path(database_url)
        self._conn: Optional[sqlite3.Connection] = None
        self._lock = threading.RLock()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def open(self) -> "DocumentStore":
        """Connect to the database and apply pending migrations."""
        with self._lock:
            if self._conn is not None:
                return self
            try:
                conn = sqlite3.connect(self.path, check_same_thread=False)
            except sqlite3.Error as e:
                raise StoreError(f"Cannot open database {self.path}: {e}") from e
            # Return rows as dict‑like objects keyed by column name
            conn.row_factory = sqlite3.Row
            conn.create_function("casefold", 1, _casefold, deterministic=True)
            self._conn = conn
            self._migrate()
            logger.info("Document store opened at %s", self.path)
        return self

    def close(self) -> None:
        with self._lock:
            if self._conn is not None:
                self._conn.close()
                self._conn = None
                logger.info("Document store closed")

    @property
    def is_open(self) -> bool:
        return self._conn is not None

    def ping(self) -> bool:
        """Return True if the connection answers a trivial query."""
        try:
            with self._cursor() as cursor:
                cursor.execute("SELECT 1")
            return True
        except StoreError:
            return False

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor, committing on success and rolling back on error.

        ``sqlite3`` exceptions are translated into ``StoreError``
        (``DuplicateKeyError`` for UNIQUE violations); integers outside
        SQLite's 64-bit range raise ``ValidationFailed``.
        """
        with self._lock:
            if self._conn is None:
                raise StoreError("Document store is not open")
            cursor = self._conn.cursor()
            try:
                yield cursor
                self._conn.commit()
            except sqlite3.IntegrityError as e:
                self._conn.rollback()
                raise self._integrity_error(e) from e
            except OverflowError as e:
                self._conn.rollback()
                raise ValidationFailed("Integer value out of range") from e
            except sqlite3.Error as e:
                self._conn.rollback()
                logger.error("Store operation failed: %s", e)
                raise StoreError(str(e)) from e
            except Exception:
                self._conn.rollback()
                raise
            finally:
                cursor.close()

    def _migrate(self) -> None:
        with self._cursor() as cursor:
            cursor.execute(
                "CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)"
            )
            cursor.execute("SELECT MAX(version) as version FROM migrations")
            row = cursor.fetchone()
            current_version = row["version"] if row and row["version"] is not None else 0

            for version, sql in MIGRATIONS:
                if version > current_version:
                    # executescript commits any pending transaction first
                    cursor.executescript(sql)
                    cursor.execute(
                        "INSERT INTO migrations (version) VALUES (?)", (version,)
                    )
                    logger.info("Applied migration %s", version)
                    current_version = version

    @staticmethod
    def _integrity_error(error: sqlite3.IntegrityError) -> StoreError:
        # Messages look like "UNIQUE constraint failed: authors.name"
        message = str(error)
        prefix = "UNIQUE constraint failed: "
        if message.startswith(prefix):
            collection, _, field = message[len(prefix):].split(",")[0].strip().partition(".")
            return DuplicateKeyError(collection, field)
        return StoreError(message)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    @staticmethod
    def _columns(collection: str) -> tuple:
        try:
            return COLLECTIONS[collection]
        except KeyError:
            raise StoreError(f"Unknown collection {collection!r}") from None

    def _check_field(self, collection: str, field: str) -> str:
        if field not in self._columns(collection):
            raise StoreError(f"Unknown field {collection}.{field}")
        return field

    def _where(self, collection: str, criteria: Mapping[str, Any]) -> tuple[str, list]:
        clauses: List[str] = []
        params: List[Any] = []
        for field, condition in criteria.items():
            column = self._check_field(collection, field)
            if isinstance(condition, Contains):
                clauses.append(f"instr(casefold({column}), casefold(?)) > 0")
                params.append(condition.value)
            elif isinstance(condition, Between):
                if condition.low is not None:
                    clauses.append(f"{column} >= ?")
                    params.append(_to_db(condition.low))
                if condition.high is not None:
                    clauses.append(f"{column} <= ?")
                    params.append(_to_db(condition.high))
            elif condition is None:
                clauses.append(f"{column} IS NULL")
            else:
                clauses.append(f"{column} = ?")
                params.append(_to_db(condition))
        if not clauses:
            return "", params
        return " WHERE " + " AND ".join(clauses), params

    # ------------------------------------------------------------------
    # Document operations
    # ------------------------------------------------------------------
    def find_by_id(self, collection: str, record_id: int) -> Optional[Dict[str, Any]]:
        """Return the record with ``record_id`` or ``None``."""
        columns = self._columns(collection)
        if not _is_storable_id(record_id):
            return None
        with self._cursor() as cursor:
            row = cursor.execute(
                f"SELECT {', '.join(columns)} FROM {collection} WHERE id = ?",
                (record_id,),
            ).fetchone()
        return dict(row) if row else None

    def find(
        self,
        collection: str,
        criteria: Optional[Mapping[str, Any]] = None,
        *,
        order_by: str = "id",
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        """Return all records matching every criterion (logical AND)."""
        columns = self._columns(collection)
        where, params = self._where(collection, criteria or {})
        order_column = self._check_field(collection, order_by)
        query = f"SELECT {', '.join(columns)} FROM {collection}{where}"
        query += f" ORDER BY {order_column} {'DESC' if descending else 'ASC'}"
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)
        with self._cursor() as cursor:
            rows = cursor.execute(query, tuple(params)).fetchall()
        return [dict(row) for row in rows]

    def save(self, collection: str, record: Mapping[str, Any]) -> Dict[str, Any]:
        """Insert ``record`` (no ``id``) or update it (with ``id``).

        Returns the stored record as re‑read from the database.
        """
        values = {
            self._check_field(collection, key): _to_db(value)
            for key, value in record.items()
            if key != "id"
        }
        record_id = record.get("id")
        with self._cursor() as cursor:
            if record_id is None:
                names = list(values)
                placeholders = ", ".join("?" for _ in names)
                cursor.execute(
                    f"INSERT INTO {collection} ({', '.join(names)}) VALUES ({placeholders})",
                    tuple(values[n] for n in names),
                )
                record_id = cursor.lastrowid
            elif values:
                assignments = ", ".join(f"{name} = ?" for name in values)
                cursor.execute(
                    f"UPDATE {collection} SET {assignments} WHERE id = ?",
                    (*values.values(), record_id),
                )
                if cursor.rowcount == 0:
                    raise NotFound(collection, record_id)
        saved = self.find_by_id(collection, record_id)
        if saved is None:
            raise NotFound(collection, record_id)
        return saved

    def remove(self, collection: str, record_id: int) -> bool:
        """Delete a record; returns False when nothing was deleted."""
        self._columns(collection)
        if not _is_storable_id(record_id):
            return False
        with self._cursor() as cursor:
            cursor.execute(f"DELETE FROM {collection} WHERE id = ?", (record_id,))
            return cursor.rowcount > 0
