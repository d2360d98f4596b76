import logging
from functools import wraps
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import IntPrompt, Prompt

from bookshelf import Bookshelf
from config import Settings, settings
from database import SQLiteStorage, StorageError
from utils.ui_helpers import set_output_mode
from view import ConsoleView

console = Console()

SHELL_ACTIONS = ["list", "add", "search", "complete", "incomplete", "remove", "quit"]


def open_shelf(assume_yes: bool = False, render: bool = False) -> Bookshelf:
    """Build a Bookshelf on the configured SQLite slot."""
    current = Settings()
    view = ConsoleView(console=console, assume_yes=assume_yes or not current.confirm_deletions)
    storage = SQLiteStorage(current.db_file)
    return Bookshelf(storage, view, key=current.storage_key).start(render=render)


# Storage failures are the only errors that end a command
def handle_storage_errors(func):
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except StorageError as e:
            print(f"Storage error: {e}")
            raise typer.Exit(code=1)
    return wrapper


# --- Typer CLI Application ---
app = typer.Typer(help=settings.app_name)

@app.callback()
def _global_options(
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    )
):
    """Global options for the CLI (e.g. output mode)."""
    current = Settings()
    logging.basicConfig(level=getattr(logging, current.log_level, logging.WARNING))
    set_output_mode(output or current.output_mode)

@app.command("list")
@handle_storage_errors
def cli_list():
    """Show both shelves."""
    open_shelf(render=True)

@app.command("add")
@handle_storage_errors
def cli_add(
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Book title"),
    author: Optional[str] = typer.Option(None, "--author", "-a", help="Book author"),
    year: Optional[str] = typer.Option(None, "--year", "-y", help="Publication year"),
    complete: bool = typer.Option(False, "--complete", "-c", help="Put the book on the finished shelf"),
):
    """Add a book. Prompts for anything not given as an option."""
    shelf = open_shelf()
    given = {"title": title, "author": author, "year": year}
    if all(v is not None for v in given.values()):
        data = dict(given, isComplete=complete)
    elif any(v is not None for v in given.values()) or complete:
        data = shelf.view.get_add_input(**given, is_complete=complete)
    else:
        data = None
    book = shelf.submit_add(data)
    print(f"Added: {book.title} by {book.author} (id {book.id})")

@app.command("search")
@handle_storage_errors
def cli_search(query: Optional[str] = typer.Argument(None, help="Part of the title to look for")):
    """Show books whose title contains QUERY (case-insensitive). A blank query shows everything."""
    shelf = open_shelf()
    found = shelf.submit_search(query)
    print(f"{len(found)} book(s) found.")

@app.command("complete")
@handle_storage_errors
def cli_complete(book_id: int = typer.Argument(..., metavar="ID")):
    """Move a book to the finished shelf."""
    if open_shelf().mark_complete(book_id):
        print(f"Book with id {book_id} marked as finished.")
    else:
        print(f"Book with id {book_id} not found.")

@app.command("incomplete")
@handle_storage_errors
def cli_incomplete(book_id: int = typer.Argument(..., metavar="ID")):
    """Move a book back to the unfinished shelf."""
    if open_shelf().mark_incomplete(book_id):
        print(f"Book with id {book_id} marked as unfinished.")
    else:
        print(f"Book with id {book_id} not found.")

@app.command("remove")
@handle_storage_errors
def cli_remove(
    book_id: int = typer.Argument(..., metavar="ID"),
    yes: bool = typer.Option(False, "--yes", help="Do not ask for confirmation"),
):
    """Remove a book after confirmation."""
    shelf = open_shelf(assume_yes=yes)
    _report_removal(shelf, book_id)

def _report_removal(shelf: Bookshelf, book_id: int) -> None:
    if book_id not in shelf.store:
        print(f"Book with id {book_id} not found.")
    elif shelf.click_remove(book_id):
        print(f"Book with id {book_id} has been removed.")
    else:
        print("Removal cancelled.")

@app.command("shell")
@handle_storage_errors
def cli_shell():
    """Interactive session: pick an action until 'quit'."""
    shelf = open_shelf(render=True)
    while True:
        action = Prompt.ask("Action", choices=SHELL_ACTIONS, default="list", console=console)
        if action == "quit":
            break
        if action == "list":
            shelf.view.render(list(shelf.store.all()))
        elif action == "add":
            book = shelf.submit_add()
            print(f"Added: {book.title} by {book.author} (id {book.id})")
        elif action == "search":
            shelf.submit_search()
        elif action in ("complete", "incomplete"):
            book_id = IntPrompt.ask("Book id", console=console)
            ok = shelf.mark_complete(book_id) if action == "complete" else shelf.mark_incomplete(book_id)
            if not ok:
                print(f"Book with id {book_id} not found.")
        elif action == "remove":
            _report_removal(shelf, IntPrompt.ask("Book id", console=console))


if __name__ == "__main__":
    app()
