import os
import json
from typing import List, Any, Iterable, Tuple
from rich.console import Console
from rich.table import Table
from rich.markup import escape

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "BOOKSHELF_OUTPUT"

INCOMPLETE_SHELF = "Not finished reading"
COMPLETE_SHELF = "Finished reading"

_console = Console()

def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode

def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, "plain").lower()

def split_shelves(books: Iterable[Any]) -> Tuple[List[Any], List[Any]]:
    """Split books into (incomplete, complete), keeping collection order within each shelf."""
    incomplete, complete = [], []
    for b in books:
        (complete if b.is_complete else incomplete).append(b)
    return incomplete, complete

def format_year(year: Any) -> str:
    return "?" if year is None else str(year)

def action_label(book: Any) -> str:
    return "mark unfinished" if book.is_complete else "mark finished"

def print_shelves(books: List[Any]) -> None:
    """Render both shelves according to the current output mode.
    - plain: one header per shelf, then 'id - Title by Author (year)' lines
    - json: object with 'incomplete' and 'complete' arrays
    - rich: one Rich table per shelf
    """
    mode = get_output_mode()
    incomplete, complete = split_shelves(books)

    if mode == "json":
        payload = {
            "incomplete": [b.to_dict() for b in incomplete],
            "complete": [b.to_dict() for b in complete],
        }
        print(json.dumps(payload, ensure_ascii=False))
        return

    if not books:
        print("No books on the shelf.")
        return

    if mode == "rich":
        for title, shelf, style in ((INCOMPLETE_SHELF, incomplete, "yellow"), (COMPLETE_SHELF, complete, "green")):
            table = Table(title=f"📚 {title}", show_lines=True, header_style=f"bold {style}")
            table.add_column("ID", style="magenta", no_wrap=True)
            table.add_column("Title", style="white")
            table.add_column("Author", style="white")
            table.add_column("Year", style="white")
            table.add_column("Action", style="dim")
            for b in shelf:
                table.add_row(str(b.id), escape(b.title), escape(b.author), format_year(b.year), action_label(b))
            _console.print(table)
        return

    for title, shelf in ((INCOMPLETE_SHELF, incomplete), (COMPLETE_SHELF, complete)):
        print(f"{title} ({len(shelf)}):")
        if not shelf:
            print("  (none)")
        for b in shelf:
            print(f"  {b.id} - {b.title} by {b.author} ({format_year(b.year)}) [{action_label(b)}]")
