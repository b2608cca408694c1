"""Tab-delimited line format for catalog books.

One book per line, five fields in a fixed order::

    id <TAB> title <TAB> author <TAB> publish_year <TAB> borrowed

``borrowed`` is written as ``true``/``false`` and read case-insensitively.
Tabs and line breaks inside title/author are replaced with a space when
encoding, so the original characters cannot be recovered.
"""
import re
from typing import List, Optional

from catalog.book import Book
from catalog.utils.validators import NumberValidator

DELIMITER = "\t"
FIELD_COUNT = 5

_UNSAFE_CHARS = re.compile(r"[\t\r\n]")


def _sanitize(text: str) -> str:
    return _UNSAFE_CHARS.sub(" ", text)


def encode(book: Book) -> str:
    """Return the single-line form of ``book`` (without a line terminator).

    Only books whose title and author hold no tabs or line breaks survive
    ``decode(encode(book))`` unchanged.
    """
    fields = [
        str(book.id),
        _sanitize(book.title),
        _sanitize(book.author),
        str(book.publish_year),
        "true" if book.borrowed else "false",
    ]
    return DELIMITER.join(fields)


def decode(line: str) -> Optional[Book]:
    """Parse one line into a Book, or return None if the line is malformed.

    Inverse of ``encode`` for titles and authors free of tabs and line breaks;
    those characters were already replaced by spaces.
    """
    parts: List[str] = line.split(DELIMITER)
    # Trailing empty fields do not count towards the five
    while parts and parts[-1] == "":
        parts.pop()
    if len(parts) < FIELD_COUNT:
        return None

    book_id = NumberValidator.parse_int(parts[0])
    year = NumberValidator.parse_int(parts[3])
    if book_id is None or year is None or book_id < 1:
        return None

    borrowed = parts[4].strip().lower() == "true"
    return Book(book_id, parts[1], parts[2], year, borrowed)
