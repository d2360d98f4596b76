import logging
from typing import Any, List, Mapping, Optional, Protocol

from book import Book
from bookstore import BookStore, IdGenerator
from database import DEFAULT_KEY, Storage, load_books, save_books
from query import filter_by_title, is_blank_query

logger = logging.getLogger(__name__)


class View(Protocol):
    def get_add_input(self) -> Mapping[str, Any]: ...

    def get_search_query(self) -> str: ...

    def request_remove_confirmation(self) -> bool: ...

    def render(self, books: List[Book]) -> None: ...


class Bookshelf:
    """Wires a BookStore to its storage slot and a view.

    Each user intent maps to exactly one store call. The store's single
    change listener saves the whole collection and then re-renders it.
    """

    def __init__(self, storage: Storage, view: View, key: str = DEFAULT_KEY,
                 id_generator: Optional[IdGenerator] = None) -> None:
        self.storage = storage
        self.view = view
        self.key = key
        self._id_generator = id_generator
        self.store: Optional[BookStore] = None

    def start(self, render: bool = True) -> "Bookshelf":
        """Hydrate from storage and hook up persistence. Shows everything once unless ``render`` is False."""
        books = load_books(self.storage, self.key)
        self.store = BookStore(books, id_generator=self._id_generator)
        self.store.subscribe(self._on_changed)
        logger.info("Loaded %d book(s) from '%s'", len(self.store), self.key)
        if render:
            self.view.render(list(self.store.all()))
        return self

    def _on_changed(self) -> None:
        books = self.store.all()
        save_books(self.storage, books, self.key)
        self.view.render(list(books))

    def _require_store(self) -> BookStore:
        if self.store is None:
            raise RuntimeError("Bookshelf.start() must be called first")
        return self.store

    # ------------------------- User intents ------------------------- #
    def submit_add(self, data: Optional[Mapping[str, Any]] = None) -> Book:
        store = self._require_store()
        return store.add(data if data is not None else self.view.get_add_input())

    def submit_search(self, query: Optional[str] = None) -> List[Book]:
        store = self._require_store()
        if query is None:
            query = self.view.get_search_query()
        books = list(store.all())
        if not is_blank_query(query):
            books = filter_by_title(books, query)
        self.view.render(books)
        return books

    def mark_complete(self, book_id: int) -> bool:
        return self._require_store().set_completion(book_id, True)

    def mark_incomplete(self, book_id: int) -> bool:
        return self._require_store().set_completion(book_id, False)

    def click_remove(self, book_id: int) -> bool:
        return self._require_store().remove(book_id, self.view.request_remove_confirmation)
