import json
import os
from typing import Any, Sequence

from rich.console import Console
from rich.table import Table

from catalog.config import settings

# Environment variable to control CLI output mode
# Allowed values: 'plain' (default), 'json', 'rich'
OUTPUT_MODE_ENV = "LIB_CLI_OUTPUT"

_console = Console()


def set_output_mode(mode: str) -> None:
    mode = (mode or "").lower().strip()
    if mode in {"plain", "json", "rich"}:
        os.environ[OUTPUT_MODE_ENV] = mode


def get_output_mode() -> str:
    return os.environ.get(OUTPUT_MODE_ENV, settings.output_mode).lower()


def print_books(books: Sequence[Any], empty_message: str, heading: str) -> None:
    """Print books in the current output mode.
    - plain: a heading, then one ``str(book)`` line per book, or ``empty_message``
    - json: JSON array of book dicts (``[]`` when empty)
    - rich: Rich table
    """
    mode = get_output_mode()

    if mode == "json":
        print(json.dumps([b.to_dict() for b in books], ensure_ascii=False))
        return

    if not books:
        print(empty_message)
        return

    if mode == "rich":
        table = Table(title=f"📚 {heading}", show_lines=True, header_style="bold cyan")
        table.add_column("ID", style="magenta", no_wrap=True, justify="right")
        table.add_column("Title", style="white")
        table.add_column("Author", style="white")
        table.add_column("Year", justify="right")
        table.add_column("Status")
        for b in books:
            status = "[red]BORROWED[/]" if b.borrowed else "[green]AVAILABLE[/]"
            table.add_row(str(b.id), b.title, b.author, str(b.publish_year), status)
        _console.print(table)
    else:
        print(f"\n--- {heading.upper()} ---")
        for b in books:
            print(str(b))


def print_loan_result(result: Any) -> None:
    """Print the message of a borrow/return result in the current output mode."""
    mode = get_output_mode()
    if mode == "json":
        print(json.dumps(result.to_dict(), ensure_ascii=False))
    elif mode == "rich":
        style = "green" if result.success else "yellow"
        _console.print(f"[{style}]{result.message}[/]", markup=True, highlight=False)
    else:
        print(result.message)
