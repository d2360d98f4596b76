import json
import logging
import sqlite3

import pytest

from book import Book
from database import (
    MemoryStorage,
    SQLiteStorage,
    StorageError,
    deserialize_books,
    load_books,
    save_books,
    serialize_books,
)


def _books():
    return [
        Book(1700000000001, "Dune", "Herbert", 1965, True),
        Book(1700000000002, "Hobbit", "Tolkien", 1937, False),
        Book(1700000000003, "Untitled", "", None, False),
    ]


def test_round_trip_preserves_fields_and_order():
    books = _books()
    assert deserialize_books(serialize_books(books)) == books


def test_serialized_shape():
    data = json.loads(serialize_books(_books()[:1]))
    assert data == [{"id": 1700000000001, "title": "Dune", "author": "Herbert", "year": 1965, "isComplete": True}]


def test_missing_slot_loads_empty(memory_storage):
    assert load_books(memory_storage) == []


@pytest.mark.parametrize("blob", ["not json", "{\"a\": 1}", "42", "null", "\"books\""])
def test_malformed_blob_loads_empty(blob, caplog):
    with caplog.at_level(logging.WARNING):
        assert deserialize_books(blob) == []


def test_malformed_blob_logs_warning(caplog):
    with caplog.at_level(logging.WARNING, logger="database"):
        deserialize_books("{oops")
    assert "not valid JSON" in caplog.text


def test_non_object_entries_are_skipped():
    blob = json.dumps([1, "x", {"id": 5, "title": "Dune", "author": "Herbert", "year": 1965, "isComplete": False}])
    books = deserialize_books(blob)
    assert [b.id for b in books] == [5]


def test_save_overwrites_slot(memory_storage):
    books = _books()
    save_books(memory_storage, books)
    save_books(memory_storage, books[:1])
    assert load_books(memory_storage) == books[:1]


def test_custom_key_is_separate():
    storage = MemoryStorage()
    save_books(storage, _books(), key="shelf-a")
    assert load_books(storage) == []
    assert len(load_books(storage, "shelf-a")) == 3


def test_sqlite_storage_persists_between_instances(sqlite_storage):
    save_books(sqlite_storage, _books())

    reopened = SQLiteStorage(sqlite_storage.db_file)
    assert load_books(reopened) == _books()


def test_sqlite_set_item_upserts(sqlite_storage):
    sqlite_storage.set_item("books", "[]")
    sqlite_storage.set_item("books", "[1]")
    assert sqlite_storage.get_item("books") == "[1]"

    conn = sqlite3.connect(sqlite_storage.db_file)
    try:
        assert conn.execute("SELECT COUNT(*) FROM storage").fetchone()[0] == 1
    finally:
        conn.close()


def test_sqlite_missing_key(sqlite_storage):
    assert sqlite_storage.get_item("nothing") is None


def test_sqlite_unusable_path_raises_storage_error(tmp_path):
    with pytest.raises(StorageError):
        SQLiteStorage(str(tmp_path / "missing-dir" / "shelf.db"))
