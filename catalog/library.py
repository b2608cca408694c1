import logging
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import List, Optional, Sequence, Union

from catalog import codec
from catalog.book import Book
from catalog.config import settings

logger = logging.getLogger(__name__)


class LoanFailure(Enum):
    """Why a borrow/return request was refused."""
    NOT_FOUND = "not_found"
    ALREADY_BORROWED = "already_borrowed"
    NOT_BORROWED = "not_borrowed"


@dataclass(frozen=True)
class LoanResult:
    """Outcome of a borrow or return request."""
    success: bool
    message: str
    reason: Optional[LoanFailure] = None
    book: Optional[Book] = None

    @classmethod
    def ok(cls, message: str, book: Book) -> "LoanResult":
        return cls(success=True, message=message, book=book)

    @classmethod
    def failed(cls, reason: LoanFailure, message: str, book: Optional[Book] = None) -> "LoanResult":
        return cls(success=False, message=message, reason=reason, book=book)

    def to_dict(self) -> dict:
        return {
            "success": self.success,
            "message": self.message,
            "reason": self.reason.value if self.reason else None,
            "book": self.book.to_dict() if self.book else None,
        }


NOT_FOUND_MESSAGE = "No book found with given ID."
ALREADY_BORROWED_MESSAGE = "This book is already borrowed and not yet returned."
NOT_BORROWED_MESSAGE = "This book is not currently borrowed."


class Library:
    """Manages the collection of books and its data file.

    The data file is rewritten in full after every change. I/O errors are
    logged and never raised; the in-memory collection stays authoritative.
    """

    def __init__(self, data_file: Optional[Union[str, Path]] = None) -> None:
        self.data_file = Path(data_file) if data_file else settings.data_path
        self._books: List[Book] = []
        self._next_id = 1
        self._load_from_file()

    @property
    def next_id(self) -> int:
        return self._next_id

    # ------------------------- Core operations ------------------------- #
    def add_book(self, title: str, author: str, publish_year: int) -> Book:
        """Create a new available book with the next free id and save."""
        book = Book(self._next_id, title, author, publish_year, borrowed=False)
        self._next_id += 1
        self._books.append(book)
        logger.info(f"Added book {book.short_label()}")
        self._save_to_file()
        return book

    def list_books(self) -> Sequence[Book]:
        return tuple(self._books)

    def search_by_title(self, query: str) -> List[Book]:
        """Case-insensitive substring search on titles, in catalog order."""
        q = query.lower()
        return [b for b in self._books if q in b.title.lower()]

    def find_book(self, book_id: int) -> Optional[Book]:
        for book in self._books:
            if book.id == book_id:
                return book
        return None

    def borrow_book(self, book_id: int) -> LoanResult:
        book = self.find_book(book_id)
        if book is None:
            return LoanResult.failed(LoanFailure.NOT_FOUND, NOT_FOUND_MESSAGE)
        if book.borrowed:
            return LoanResult.failed(LoanFailure.ALREADY_BORROWED, ALREADY_BORROWED_MESSAGE, book)
        book.mark_borrowed()
        logger.info(f"Borrowed book {book.short_label()}")
        self._save_to_file()
        return LoanResult.ok(f"Borrowed successfully: {book.short_label()}", book)

    def return_book(self, book_id: int) -> LoanResult:
        book = self.find_book(book_id)
        if book is None:
            return LoanResult.failed(LoanFailure.NOT_FOUND, NOT_FOUND_MESSAGE)
        if not book.borrowed:
            return LoanResult.failed(LoanFailure.NOT_BORROWED, NOT_BORROWED_MESSAGE, book)
        book.mark_returned()
        logger.info(f"Returned book {book.short_label()}")
        self._save_to_file()
        return LoanResult.ok(f"Returned successfully: {book.short_label()}", book)

    # ------------------------- Persistence ------------------------- #
    def _ensure_data_dir(self) -> None:
        self.data_file.parent.mkdir(parents=True, exist_ok=True)

    def _load_from_file(self) -> None:
        try:
            self._ensure_data_dir()
        except OSError as e:
            logger.error(f"Failed to create data directory {self.data_file.parent}: {e}")
            return

        if not self.data_file.exists():
            logger.debug(f"No data file at {self.data_file}, starting empty")
            return

        books: List[Book] = []
        seen_ids = set()
        skipped = 0
        try:
            with open(self.data_file, "r", encoding="utf-8") as f:
                for lineno, raw in enumerate(f, 1):
                    line = raw.rstrip("\n")
                    if not line.strip():
                        continue
                    book = codec.decode(line)
                    if book is None or book.id in seen_ids:
                        logger.debug(f"Skipping unreadable line {lineno} in {self.data_file}")
                        skipped += 1
                        continue
                    seen_ids.add(book.id)
                    books.append(book)
        except (OSError, UnicodeDecodeError) as e:
            logger.error(f"Failed to load data file {self.data_file}: {e}")
            return

        self._books = books
        self._next_id = max((b.id for b in books), default=0) + 1
        logger.debug(f"Loaded {len(books)} books from {self.data_file} ({skipped} skipped)")

    def _save_to_file(self) -> None:
        try:
            payload = "".join(f"{codec.encode(book)}\n" for book in self._books)
            payload.encode("utf-8")  # fail before the old file is truncated
            self._ensure_data_dir()
            with open(self.data_file, "w", encoding="utf-8") as f:
                f.write(payload)
        except (OSError, UnicodeEncodeError) as e:
            logger.error(f"Failed to save data file {self.data_file}: {e}")
