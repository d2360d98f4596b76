from typing import Any, Dict, List, Optional

from rich.console import Console
from rich.prompt import Confirm, Prompt

from book import Book
from utils.ui_helpers import print_shelves

REMOVE_CONFIRMATION = "Are you sure you want to delete this book?"


class ConsoleView:
    """Terminal front end: asks for user input with Rich prompts and prints the shelves."""

    def __init__(self, console: Optional[Console] = None, assume_yes: bool = False) -> None:
        self.console = console or Console()
        self.assume_yes = assume_yes

    def get_add_input(self, title: Optional[str] = None, author: Optional[str] = None,
                      year: Optional[str] = None, is_complete: Optional[bool] = None) -> Dict[str, Any]:
        """Ask for the fields of a new book. Values passed in are used as-is."""
        if title is None:
            title = Prompt.ask("Title", console=self.console)
        if author is None:
            author = Prompt.ask("Author", console=self.console)
        if year is None:
            year = Prompt.ask("Year", console=self.console, default="")
        if is_complete is None:
            is_complete = Confirm.ask("Already finished reading?", console=self.console, default=False)
        # Year stays raw; the store coerces it
        return {"title": title, "author": author, "year": year, "isComplete": is_complete}

    def get_search_query(self) -> str:
        return Prompt.ask("Search by title", console=self.console, default="")

    def request_remove_confirmation(self) -> bool:
        if self.assume_yes:
            return True
        return Confirm.ask(REMOVE_CONFIRMATION, console=self.console, default=False)

    def render(self, books: List[Book]) -> None:
        print_shelves(list(books))
