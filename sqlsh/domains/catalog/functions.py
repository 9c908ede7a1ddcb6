"""Additional SQL functions installed on the shell connection."""

from __future__ import annotations

import sqlite3

from rich.filesize import decimal


def fmt_byte_size(value: int | float | None) -> str | None:
    """Format a byte count with decimal units, e.g. 1500 -> '1.5 kB'."""
    if value is None:
        return None
    size = int(value)
    if size < 0:
        return f"-{decimal(-size)}"
    return decimal(size)


def install_functions(conn: sqlite3.Connection) -> None:
    """Register the shell's scalar functions on a connection."""
    conn.create_function("fmt_byte_size", 1, fmt_byte_size, deterministic=True)
