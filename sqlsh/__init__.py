"""sqlsh - An interactive SQLite shell with context-aware completion."""

from typing import TYPE_CHECKING, Any

__all__ = [
    "__version__",
    "main",
    "CompletionEngine",
    "SQLiteCatalog",
]

try:
    from importlib.metadata import PackageNotFoundError, version

    __version__ = version("sqlsh")
except PackageNotFoundError:
    __version__ = "0.0.0.dev"

if TYPE_CHECKING:
    from sqlsh.domains.catalog import SQLiteCatalog
    from sqlsh.domains.query.completion import CompletionEngine

    from .cli import main


def __getattr__(name: str) -> Any:
    """Lazy import for heavy modules to keep package import side-effect free."""
    if name == "main":
        from .cli import main

        return main
    if name == "CompletionEngine":
        from sqlsh.domains.query.completion import CompletionEngine

        return CompletionEngine
    if name == "SQLiteCatalog":
        from sqlsh.domains.catalog import SQLiteCatalog

        return SQLiteCatalog
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
