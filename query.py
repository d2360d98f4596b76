from typing import Iterable, List, Optional

from book import Book


def filter_by_title(books: Iterable[Book], query: str) -> List[Book]:
    """Books whose title contains ``query``, ignoring case. An empty query matches everything."""
    needle = query.lower()
    return [book for book in books if needle in book.title.lower()]


def is_blank_query(query: Optional[str]) -> bool:
    return query is None or not query.strip()
