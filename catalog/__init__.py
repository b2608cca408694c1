"""Library Catalog - core package

Modules:
- book.py: the Book record
- codec.py: tab-delimited line format for books
- library.py: the catalog store and its load/save routines
- config.py: settings read from the environment / .env
- main.py: Typer CLI and the interactive menu
"""

__version__ = "1.0.0"
