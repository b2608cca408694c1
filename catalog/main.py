import json
import logging
from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.prompt import Prompt

from catalog.config import settings
from catalog.library import Library
from catalog.utils.ui_helpers import get_output_mode, print_books, print_loan_result, set_output_mode
from catalog.utils.validators import NumberValidator

APP_NAME = "Library Catalog"

NO_BOOKS_MESSAGE = "No books in the library yet."
NO_MATCHES_MESSAGE = "No matching books found."
INVALID_CHOICE_MESSAGE = "Invalid choice. Please try again."
INVALID_YEAR_MESSAGE = "Invalid year. Please enter a valid number."
INVALID_ID_MESSAGE = "Invalid ID. Please enter a valid number."
GOODBYE_MESSAGE = "Exiting the program. Goodbye!"

console = Console()

# --- Typer CLI application ---
app = typer.Typer(help="Library catalog CLI", invoke_without_command=True)


def _library(ctx: typer.Context) -> Library:
    return ctx.obj


def _log_level(name: str) -> int:
    # unknown names fall back to WARNING
    level = logging.getLevelName((name or "").upper())
    return level if isinstance(level, int) else logging.WARNING


@app.callback()
def _global_options(
    ctx: typer.Context,
    data_file: Optional[Path] = typer.Option(
        None,
        "--data-file",
        "-d",
        help="Catalog data file (default: LIBRARY_DATA_DIR/LIBRARY_DATA_FILE)",
    ),
    output: Optional[str] = typer.Option(
        None,
        "--output",
        "-o",
        help="Output format: plain | json | rich (default: plain)",
    ),
):
    """Global options; without a command the interactive menu starts."""
    logging.basicConfig(level=_log_level(settings.log_level))
    if output:
        set_output_mode(output)
    ctx.obj = Library(data_file)
    if ctx.invoked_subcommand is None:
        run_menu(ctx.obj)


@app.command("add")
def cli_add(
    ctx: typer.Context,
    title: str = typer.Argument(..., help="Book title"),
    author: str = typer.Argument(..., help="Author name"),
    year: int = typer.Argument(..., help="Publish year, e.g. 2020"),
):
    """Add a new book to the catalog."""
    book = _library(ctx).add_book(title.strip(), author.strip(), year)
    if get_output_mode() == "json":
        print(json.dumps(book.to_dict(), ensure_ascii=False))
    else:
        print(f"Book added successfully: {book}")


@app.command("list")
def cli_list(ctx: typer.Context):
    """List all books in catalog order."""
    print_books(_library(ctx).list_books(), NO_BOOKS_MESSAGE, "All books")


@app.command("search")
def cli_search(ctx: typer.Context, query: str = typer.Argument(..., help="Title keyword")):
    """Search books by title (case-insensitive)."""
    print_books(_library(ctx).search_by_title(query.strip()), NO_MATCHES_MESSAGE, "Search results")


@app.command("borrow")
def cli_borrow(ctx: typer.Context, book_id: int = typer.Argument(..., help="Book ID")):
    """Mark a book as borrowed."""
    print_loan_result(_library(ctx).borrow_book(book_id))


@app.command("return")
def cli_return(ctx: typer.Context, book_id: int = typer.Argument(..., help="Book ID")):
    """Mark a borrowed book as returned."""
    print_loan_result(_library(ctx).return_book(book_id))


@app.command("menu")
def cli_menu(ctx: typer.Context):
    """Start the interactive menu."""
    run_menu(_library(ctx))


# --- Interactive menu ---
def render_menu() -> None:
    print(f"\n===== {APP_NAME.upper()} =====")
    print("1) Add a new book")
    print("2) List all books")
    print("3) Search by title")
    print("4) Borrow a book")
    print("5) Return a book")
    print("0) Exit")


def _ask(prompt: str) -> str:
    return Prompt.ask(prompt, console=console).strip()


def add_book_flow(lib: Library) -> None:
    title = _ask("Title")
    author = _ask("Author")
    year = NumberValidator.parse_year(_ask("Publish year (e.g., 2020)"))
    if year is None:
        print(INVALID_YEAR_MESSAGE)
        return
    book = lib.add_book(title, author, year)
    print(f"Book added successfully: {book}")


def list_books_flow(lib: Library) -> None:
    print_books(lib.list_books(), NO_BOOKS_MESSAGE, "All books")


def search_flow(lib: Library) -> None:
    query = _ask("Enter a title keyword")
    print_books(lib.search_by_title(query), NO_MATCHES_MESSAGE, "Search results")


def borrow_flow(lib: Library) -> None:
    book_id = NumberValidator.parse_book_id(_ask("Enter book ID to borrow"))
    if book_id is None:
        print(INVALID_ID_MESSAGE)
        return
    print_loan_result(lib.borrow_book(book_id))


def return_flow(lib: Library) -> None:
    book_id = NumberValidator.parse_book_id(_ask("Enter book ID to return"))
    if book_id is None:
        print(INVALID_ID_MESSAGE)
        return
    print_loan_result(lib.return_book(book_id))


MENU_ACTIONS = {
    "1": add_book_flow,
    "2": list_books_flow,
    "3": search_flow,
    "4": borrow_flow,
    "5": return_flow,
}


def run_menu(lib: Library) -> None:
    """Read menu choices until the operator exits or input runs out."""
    while True:
        render_menu()
        try:
            choice = _ask("Select an option")
            if choice == "0":
                print(GOODBYE_MESSAGE)
                return
            action = MENU_ACTIONS.get(choice)
            if action is None:
                print(INVALID_CHOICE_MESSAGE)
                continue
            action(lib)
        except (EOFError, KeyboardInterrupt):
            print()
            print(GOODBYE_MESSAGE)
            return


if __name__ == "__main__":
    app()
