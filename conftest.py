import pytest

from catalog.library import Library


@pytest.fixture
def data_file(tmp_path):
    # Each test gets its own data directory under tmp_path
    return tmp_path / "data" / "books.tsv"


@pytest.fixture
def lib(data_file):
    return Library(data_file=data_file)


@pytest.fixture(autouse=True)
def plain_output(monkeypatch):
    monkeypatch.setenv("LIB_CLI_OUTPUT", "plain")
