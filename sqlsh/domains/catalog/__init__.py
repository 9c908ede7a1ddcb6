"""Database catalog access."""

from .sqlite import SQLiteCatalog, open_database

__all__ = ["SQLiteCatalog", "open_database"]
