import os
import pytest

from bookstore import IdGenerator
from database import MemoryStorage, SQLiteStorage


class RecordingView:
    """View double: scripted answers in, rendered book lists out."""

    def __init__(self, add_input=None, search_query="", confirm=True):
        self.add_input = add_input or {}
        self.search_query = search_query
        self.confirm = confirm
        self.renders = []
        self.confirmations_asked = 0

    def get_add_input(self):
        return dict(self.add_input)

    def get_search_query(self):
        return self.search_query

    def request_remove_confirmation(self):
        self.confirmations_asked += 1
        return self.confirm

    def render(self, books):
        self.renders.append(list(books))


class FrozenClock:
    """Millisecond clock that only moves when told to."""

    def __init__(self, now=1_700_000_000_000):
        self.now = now

    def __call__(self):
        return self.now


@pytest.fixture
def view():
    return RecordingView()


@pytest.fixture
def clock():
    return FrozenClock()


@pytest.fixture
def id_generator(clock):
    return IdGenerator(clock=clock)


@pytest.fixture
def memory_storage():
    return MemoryStorage()


@pytest.fixture
def sqlite_storage(tmp_path, request):
    # Unique database file per test
    db_file = str(tmp_path / f"test_{request.node.name}.db")
    yield SQLiteStorage(db_file)
    if os.path.exists(db_file):
        os.remove(db_file)


@pytest.fixture
def db_env(tmp_path, monkeypatch):
    """Point the CLI at a fresh database file and the plain output mode."""
    db_file = str(tmp_path / "cli.db")
    monkeypatch.setenv("BOOKSHELF_DB_FILE", db_file)
    monkeypatch.setenv("BOOKSHELF_OUTPUT", "plain")
    monkeypatch.setenv("CONFIRM_DELETIONS", "True")
    return db_file
