from __future__ import annotations

from typing import Any, Dict


class Book:
    """A single catalog entry.

    Identity fields are fixed at construction; only the borrowed flag changes.
    """

    def __init__(self, id: int, title: str, author: str, publish_year: int, borrowed: bool = False) -> None:
        self._id = id
        self._title = title
        self._author = author
        self._publish_year = publish_year
        self.borrowed = borrowed

    @property
    def id(self) -> int:
        return self._id

    @property
    def title(self) -> str:
        return self._title

    @property
    def author(self) -> str:
        return self._author

    @property
    def publish_year(self) -> int:
        return self._publish_year

    # No validation here; Library checks the current state first.
    def mark_borrowed(self) -> None:
        self.borrowed = True

    def mark_returned(self) -> None:
        self.borrowed = False

    def short_label(self) -> str:
        return f"#{self.id} | {self.title}"

    def __str__(self) -> str:
        status = "BORROWED" if self.borrowed else "AVAILABLE"
        return f"#{self.id} | {self.title} - {self.author} ({self.publish_year}) | {status}"

    def __repr__(self) -> str:  # pragma: no cover - debugging aid
        return (
            f"Book(id={self.id!r}, title={self.title!r}, author={self.author!r}, "
            f"publish_year={self.publish_year!r}, borrowed={self.borrowed!r})"
        )

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Book):
            return NotImplemented
        return self.to_dict() == other.to_dict()

    def __hash__(self) -> int:
        return hash(self.id)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "publish_year": self.publish_year,
            "borrowed": self.borrowed,
        }
