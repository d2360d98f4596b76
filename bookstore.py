import logging
import threading
import time
from typing import Callable, Iterable, Iterator, List, Mapping, Optional, Tuple

from book import Book

logger = logging.getLogger(__name__)

ChangeListener = Callable[[], None]


def _now_ms() -> int:
    return int(time.time() * 1000)


class IdGenerator:
    """Hands out millisecond-timestamp ids that never repeat and never go backwards."""

    def __init__(self, clock: Callable[[], int] = _now_ms, last_id: int = 0) -> None:
        self._clock = clock
        self._last = last_id
        self._lock = threading.Lock()

    def seed(self, last_id: int) -> None:
        with self._lock:
            self._last = max(self._last, last_id)

    def next_id(self) -> int:
        with self._lock:
            candidate = self._clock()
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


class BookStore:
    """Owns the ordered book collection. Every mutation goes through here."""

    def __init__(self, books: Optional[Iterable[Book]] = None, id_generator: Optional[IdGenerator] = None) -> None:
        self._ids = id_generator or IdGenerator()
        self._books: List[Book] = []
        self._listener: Optional[ChangeListener] = None
        self._lock = threading.RLock()
        if books:
            self._hydrate(books)

    # ------------------------- Change notification ------------------------- #
    def subscribe(self, listener: Optional[ChangeListener]) -> None:
        """Register the single change listener, replacing any previous one."""
        self._listener = listener

    def _notify(self) -> None:
        if self._listener is not None:
            self._listener()

    # ------------------------- Core operations ------------------------- #
    def add(self, data: Mapping) -> Book:
        """Create a book from form-shaped input and append it."""
        with self._lock:
            # Same coercion as records loaded from storage
            book = Book.from_dict(dict(data, id=self._ids.next_id()))
            self._books.append(book)
            logger.info("Added book %s (%r)", book.id, book.title)
            self._notify()
            return book

    def find_index_by_id(self, book_id: int) -> Optional[int]:
        with self._lock:
            for index, book in enumerate(self._books):
                if book.id == book_id:
                    return index
            return None

    def get(self, book_id: int) -> Optional[Book]:
        with self._lock:
            index = self.find_index_by_id(book_id)
            return self._books[index] if index is not None else None

    def set_completion(self, book_id: int, is_complete: bool) -> bool:
        """Replace the book with a copy carrying the new completion flag. False if the id is unknown."""
        with self._lock:
            index = self.find_index_by_id(book_id)
            if index is None:
                logger.debug("set_completion: no book with id %s", book_id)
                return False
            self._books[index] = self._books[index].with_completion(is_complete)
            logger.info("Book %s marked %s", book_id, "complete" if is_complete else "incomplete")
            self._notify()
            return True

    def remove(self, book_id: int, confirm: Callable[[], bool]) -> bool:
        """Remove a book once ``confirm()`` agrees.

        Unknown ids return False without asking; a declined confirmation
        leaves the collection untouched.
        """
        with self._lock:
            index = self.find_index_by_id(book_id)
            if index is None:
                logger.debug("remove: no book with id %s", book_id)
                return False
            if not confirm():
                logger.info("Removal of book %s declined", book_id)
                return False
            del self._books[index]
            logger.info("Removed book %s", book_id)
            self._notify()
            return True

    def all(self) -> Tuple[Book, ...]:
        with self._lock:
            return tuple(self._books)

    def __len__(self) -> int:
        with self._lock:
            return len(self._books)

    def __iter__(self) -> Iterator[Book]:
        return iter(self.all())

    def __contains__(self, book_id: object) -> bool:
        return self.get(book_id) is not None  # type: ignore[arg-type]

    # ------------------------- Hydration ------------------------- #
    def _hydrate(self, books: Iterable[Book]) -> None:
        books = list(books)
        valid_ids = [b.id for b in books if isinstance(b.id, int) and not isinstance(b.id, bool)]
        if valid_ids:
            self._ids.seed(max(valid_ids))

        seen = set()
        for book in books:
            if not isinstance(book.id, int) or isinstance(book.id, bool) or book.id in seen:
                fresh = self._ids.next_id()
                logger.warning("Stored book %r has a missing or duplicate id %r; reassigned to %s",
                               book.title, book.id, fresh)
                book = Book(fresh, book.title, book.author, book.year, book.is_complete)
            seen.add(book.id)
            self._books.append(book)
