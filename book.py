from __future__ import annotations

import re
from typing import Any

# ASCII-only, so "1_965" and non-Latin digits are rejected
_INTEGER = re.compile(r"[+-]?[0-9]+")
_DECIMAL = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?")

TRUTHY = ("true", "1", "yes")


def coerce_text(raw: Any) -> str:
    return "" if raw is None else str(raw)


def coerce_flag(raw: Any) -> bool:
    """Completion flag from input. Strings count as True only for 'true', '1' or 'yes'."""
    if isinstance(raw, str):
        return raw.strip().lower() in TRUTHY
    return bool(raw)


def coerce_year(raw: Any) -> int | None:
    """Turn form input into a year. Blank input is 0, non-numeric input is None."""
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, int):
        return raw
    if isinstance(raw, float):
        return int(raw) if raw.is_integer() else None
    text = str(raw).strip()
    if not text:
        return 0
    if _INTEGER.fullmatch(text):
        return int(text)
    if not _DECIMAL.fullmatch(text):
        return None
    value = float(text)
    if value in (float("inf"), float("-inf")):
        return None
    return int(value) if value.is_integer() else None


class Book:
    """Represents a single book record on the shelf."""

    __slots__ = ("id", "title", "author", "year", "is_complete")

    def __init__(self, id: int, title: str, author: str, year: int | None, is_complete: bool = False) -> None:
        self.id = id
        self.title = title
        self.author = author
        self.year = year
        self.is_complete = bool(is_complete)

    def __str__(self) -> str:  # pragma: no cover - string formatting trivial
        return f"{self.title} by {self.author} ({self.year})"

    def __repr__(self) -> str:
        return (
            f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r}, "
            f"year={self.year!r}, is_complete={self.is_complete!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash((self.id, self.title, self.author, self.year, self.is_complete))

    def with_completion(self, is_complete: bool) -> "Book":
        """Return a copy of this book with only the completion flag changed."""
        return Book(self.id, self.title, self.author, self.year, is_complete)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "year": self.year,
            "isComplete": self.is_complete,
        }

    @staticmethod
    def from_dict(data: dict) -> "Book":
        # Stored records use the camelCase key; accept snake_case too
        is_complete = data.get("isComplete", data.get("is_complete", False))
        return Book(
            id=data.get("id"),
            title=coerce_text(data.get("title")),
            author=coerce_text(data.get("author")),
            year=coerce_year(data.get("year")),
            is_complete=coerce_flag(is_complete),
        )
