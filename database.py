import json
import logging
import sqlite3
from typing import Dict, Iterable, List, Optional, Protocol

from book import Book
from config import settings

logger = logging.getLogger(__name__)

DATABASE_FILE = settings.db_file
DEFAULT_KEY = "books"


class StorageError(Exception):
    """Raised when the backing store cannot be read or written."""


class Storage(Protocol):
    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...


class MemoryStorage:
    """Dict-backed slot store, handy for embedding and tests."""

    def __init__(self, items: Optional[Dict[str, str]] = None) -> None:
        self._items: Dict[str, str] = dict(items or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value


class SQLiteStorage:
    """Named slots in a single SQLite table, one JSON blob per key."""

    def __init__(self, db_file: Optional[str] = None) -> None:
        self.db_file = db_file or DATABASE_FILE
        self._create_tables()

    def _connect(self) -> sqlite3.Connection:
        try:
            conn = sqlite3.connect(self.db_file)
        except sqlite3.Error as e:
            raise StorageError(f"Could not open {self.db_file}: {e}") from e
        conn.row_factory = sqlite3.Row
        return conn

    def _create_tables(self) -> None:
        conn = self._connect()
        try:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS storage (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
                )
            """)
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not initialize {self.db_file}: {e}") from e
        finally:
            conn.close()

    def get_item(self, key: str) -> Optional[str]:
        conn = self._connect()
        try:
            row = conn.execute("SELECT value FROM storage WHERE key = ?", (key,)).fetchone()
            return row["value"] if row else None
        except sqlite3.Error as e:
            raise StorageError(f"Could not read '{key}': {e}") from e
        finally:
            conn.close()

    def set_item(self, key: str, value: str) -> None:
        conn = self._connect()
        try:
            conn.execute(
                """
                INSERT INTO storage (key, value) VALUES (?, ?)
                ON CONFLICT(key) DO UPDATE SET value = excluded.value, updated_at = CURRENT_TIMESTAMP
                """,
                (key, value),
            )
            conn.commit()
        except sqlite3.Error as e:
            raise StorageError(f"Could not write '{key}': {e}") from e
        finally:
            conn.close()


# ------------------------- Collection codec ------------------------- #
def serialize_books(books: Iterable[Book]) -> str:
    return json.dumps([book.to_dict() for book in books], ensure_ascii=False)


def deserialize_books(blob: Optional[str]) -> List[Book]:
    """Parse a stored blob. Anything that is not a JSON array loads as an empty shelf."""
    if blob is None:
        return []
    try:
        data = json.loads(blob)
    except (json.JSONDecodeError, TypeError) as e:
        logger.warning("Stored books are not valid JSON, starting empty: %s", e)
        return []
    if not isinstance(data, list):
        logger.warning("Stored books are a %s, not a list; starting empty", type(data).__name__)
        return []

    books = []
    for item in data:
        if not isinstance(item, dict):
            logger.warning("Skipping stored entry that is not an object: %r", item)
            continue
        books.append(Book.from_dict(item))
    return books


def load_books(storage: Storage, key: str = DEFAULT_KEY) -> List[Book]:
    return deserialize_books(storage.get_item(key))


def save_books(storage: Storage, books: Iterable[Book], key: str = DEFAULT_KEY) -> None:
    books = list(books)
    storage.set_item(key, serialize_books(books))
    logger.info("Saved %d book(s) under '%s'", len(books), key)
