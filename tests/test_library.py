import logging

import pytest

from catalog.book import Book
from catalog.library import Library, LoanFailure


def test_add_list_and_find(lib):
    assert lib.list_books() == ()

    book = lib.add_book("Ulysses", "James Joyce", 1922)

    assert book == Book(1, "Ulysses", "James Joyce", 1922, borrowed=False)
    assert lib.find_book(1) is book
    assert len(lib.list_books()) == 1
    assert lib.list_books()[0].title == "Ulysses"


def test_list_is_read_only(lib):
    lib.add_book("A", "B", 2000)
    books = lib.list_books()
    with pytest.raises((TypeError, AttributeError)):
        books.append(Book(99, "X", "Y", 1))
    assert len(lib.list_books()) == 1


def test_ids_are_sequential_across_loans(lib):
    ids = []
    for n in range(5):
        ids.append(lib.add_book(f"Book {n}", "Author", 2000 + n).id)
        lib.borrow_book(ids[-1])
        lib.return_book(ids[0])
    assert ids == [1, 2, 3, 4, 5]
    assert lib.next_id == 6


def test_add_does_not_validate(lib):
    book = lib.add_book("", "", -300)
    assert book.title == ""
    assert book.publish_year == -300


def test_persistence(lib, data_file):
    lib.add_book("Sapiens", "Yuval Noah Harari", 2011)
    lib.add_book("Dune", "Frank Herbert", 1965)
    lib.borrow_book(2)

    # New instance should read the saved file
    lib2 = Library(data_file=data_file)
    assert [b.title for b in lib2.list_books()] == ["Sapiens", "Dune"]
    assert lib2.find_book(2).borrowed is True
    assert lib2.next_id == 3


def test_saved_file_format(lib, data_file):
    lib.add_book("War and Peace", "Leo Tolstoy", 1869)
    lib.add_book("Dune", "Frank Herbert", 1965)
    lib.borrow_book(1)
    assert data_file.read_text(encoding="utf-8") == (
        "1\tWar and Peace\tLeo Tolstoy\t1869\ttrue\n"
        "2\tDune\tFrank Herbert\t1965\tfalse\n"
    )


def test_next_id_recovered_from_max(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text(
        "3\tC\tA\t2000\tfalse\n7\tG\tA\t2000\tfalse\n2\tB\tA\t2000\tfalse\n",
        encoding="utf-8",
    )
    lib = Library(data_file=data_file)
    assert [b.id for b in lib.list_books()] == [3, 7, 2]
    assert lib.add_book("New", "Author", 2024).id == 8


def test_malformed_and_blank_lines_skipped(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text(
        "1\tGood\tAuthor\t1999\tfalse\n\n   \n2\tBad\tLine\n",
        encoding="utf-8",
    )
    lib = Library(data_file=data_file)
    assert len(lib.list_books()) == 1
    assert lib.list_books()[0].title == "Good"
    assert lib.next_id == 2


def test_duplicate_ids_keep_first(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_text("1\tFirst\tA\t2000\tfalse\n1\tSecond\tA\t2000\ttrue\n", encoding="utf-8")
    lib = Library(data_file=data_file)
    assert [b.title for b in lib.list_books()] == ["First"]


def test_windows_line_endings(data_file):
    data_file.parent.mkdir(parents=True)
    data_file.write_bytes(b"1\tT\tA\t2000\ttrue\r\n2\tU\tB\t2001\tfalse\r\n")
    lib = Library(data_file=data_file)
    assert [b.borrowed for b in lib.list_books()] == [True, False]


def test_missing_directory_is_created(data_file):
    assert not data_file.parent.exists()
    Library(data_file=data_file)
    assert data_file.parent.is_dir()
    assert not data_file.exists()


def test_borrow_return_state_machine(lib):
    lib.add_book("War and Peace", "Leo Tolstoy", 1869)

    result = lib.borrow_book(1)
    assert result.success
    assert result.message == "Borrowed successfully: #1 | War and Peace"
    assert lib.find_book(1).borrowed is True

    again = lib.borrow_book(1)
    assert not again.success
    assert again.reason is LoanFailure.ALREADY_BORROWED
    assert "already borrowed" in again.message

    result = lib.return_book(1)
    assert result.success
    assert result.message == "Returned successfully: #1 | War and Peace"
    assert lib.find_book(1).borrowed is False

    again = lib.return_book(1)
    assert not again.success
    assert again.reason is LoanFailure.NOT_BORROWED
    assert "not currently borrowed" in again.message


def test_unknown_id(lib):
    lib.add_book("Only", "One", 2000)
    for result in (lib.borrow_book(999), lib.return_book(999)):
        assert not result.success
        assert result.reason is LoanFailure.NOT_FOUND
        assert result.message == "No book found with given ID."
        assert result.book is None


def test_rejected_loan_does_not_touch_file(lib, data_file):
    lib.add_book("Only", "One", 2000)
    data_file.write_text("tampered\n", encoding="utf-8")
    lib.return_book(1)
    assert data_file.read_text(encoding="utf-8") == "tampered\n"


def test_search_by_title(lib):
    lib.add_book("War and Peace", "Leo Tolstoy", 1869)
    lib.add_book("Dune", "Frank Herbert", 1965)
    lib.add_book("The Art of War", "Sun Tzu", -500)

    assert [b.id for b in lib.search_by_title("WAR")] == [1, 3]
    assert len(lib.search_by_title("")) == 3
    assert lib.search_by_title("herbert") == []


def test_save_failure_keeps_memory_state(tmp_path, caplog):
    # A directory where the data file should be makes every read and write fail
    data_file = tmp_path / "books.tsv"
    data_file.mkdir()

    with caplog.at_level(logging.ERROR, logger="catalog.library"):
        lib = Library(data_file=data_file)
        book = lib.add_book("Kept", "In Memory", 2020)
        result = lib.borrow_book(book.id)

    assert result.success
    assert lib.find_book(1).borrowed is True
    assert any("Failed to load" in r.getMessage() for r in caplog.records)
    assert any("Failed to save" in r.getMessage() for r in caplog.records)


def test_unencodable_title_does_not_truncate_file(lib, data_file, caplog):
    lib.add_book("Kept", "A", 2000)
    lib.add_book("Other", "B", 2001)
    before = data_file.read_text(encoding="utf-8")

    # Lone surrogates show up when argv holds bytes that are not valid UTF-8
    with caplog.at_level(logging.ERROR, logger="catalog.library"):
        book = lib.add_book("bad\udcff", "C", 2002)

    assert book.id == 3
    assert len(lib.list_books()) == 3
    assert data_file.read_text(encoding="utf-8") == before
    assert any("Failed to save" in r.getMessage() for r in caplog.records)


def test_directory_creation_failure_starts_empty(tmp_path, caplog):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")

    with caplog.at_level(logging.ERROR, logger="catalog.library"):
        lib = Library(data_file=blocker / "books.tsv")

    assert lib.list_books() == ()
    assert lib.next_id == 1
    assert any("Failed to create data directory" in r.getMessage() for r in caplog.records)


def test_undecodable_file_starts_empty(data_file, caplog):
    data_file.parent.mkdir(parents=True)
    data_file.write_bytes(b"1\t\xff\xfe\tA\t2000\tfalse\n")

    with caplog.at_level(logging.ERROR, logger="catalog.library"):
        lib = Library(data_file=data_file)

    assert lib.list_books() == ()
    assert caplog.records


def test_default_data_path_from_settings(tmp_path, monkeypatch):
    from catalog.config import settings

    monkeypatch.setattr(settings, "data_dir", str(tmp_path / "store"))
    lib = Library()
    assert lib.data_file == tmp_path / "store" / "books.tsv"
