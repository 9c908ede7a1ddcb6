"""History store for managing query history per database."""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path

from prompt_toolkit.history import History

from sqlsh.shared.core.protocols import HistoryStoreProtocol
from sqlsh.shared.core.store import JSONFileStore, config_dir


@dataclass
class QueryHistoryEntry:
    """A query history entry."""

    query: str
    timestamp: str  # ISO format
    database: str

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "query": self.query,
            "timestamp": self.timestamp,
            "database": self.database,
        }

    @classmethod
    def from_dict(cls, data: dict) -> QueryHistoryEntry:
        """Create from dictionary."""
        return cls(
            query=data["query"],
            timestamp=data["timestamp"],
            database=data["database"],
        )


class HistoryStore(JSONFileStore):
    """Store for managing query history.

    History is stored as a JSON array in ~/.sqlsh/query_history.json
    Each entry includes query text, timestamp, and the database file it ran against.
    """

    DEFAULT_MAX_ENTRIES_PER_DATABASE = 500

    def __init__(self, file_path: Path | None = None, max_entries: int | None = None) -> None:
        super().__init__(file_path or config_dir() / "query_history.json")
        self.max_entries = max_entries or self.DEFAULT_MAX_ENTRIES_PER_DATABASE

    def _load_all_entries(self) -> list[dict]:
        """Load all history entries as raw dictionaries."""
        data = self._read_json()
        return data if isinstance(data, list) else []

    def load_for_database(self, database: str) -> list[QueryHistoryEntry]:
        """Load query history for a specific database.

        Args:
            database: Key of the database to load history for.

        Returns:
            List of QueryHistoryEntry objects, sorted by most recent first.
        """
        all_entries = self._load_all_entries()
        try:
            entries = [
                QueryHistoryEntry.from_dict(entry)
                for entry in all_entries
                if entry.get("database") == database
            ]
            entries.sort(key=lambda e: e.timestamp, reverse=True)
            return entries
        except (KeyError, TypeError, AttributeError):
            return []

    def load_queries(self, database: str) -> list[str]:
        """Load query texts for a database, most recent first."""
        return [entry.query for entry in self.load_for_database(database)]

    def save_query(self, database: str, query: str) -> None:
        """Save a query to history.

        If the exact query already exists for this database, updates its timestamp.
        Otherwise adds a new entry. Keeps only ``max_entries`` entries per database.

        Args:
            database: Key of the database.
            query: SQL query text.
        """
        query_stripped = query.strip()
        if not query_stripped:
            return

        all_entries = self._load_all_entries()
        now = datetime.now().isoformat()

        for entry in all_entries:
            if entry.get("database") == database and entry.get("query", "").strip() == query_stripped:
                entry["timestamp"] = now
                break
        else:
            new_entry = QueryHistoryEntry(query=query_stripped, timestamp=now, database=database)
            all_entries.append(new_entry.to_dict())

        database_entries = [e for e in all_entries if e.get("database") == database]
        other_entries = [e for e in all_entries if e.get("database") != database]

        database_entries.sort(key=lambda e: e.get("timestamp", ""), reverse=True)
        database_entries = database_entries[: self.max_entries]

        self._write_json(other_entries + database_entries)


class StoreBackedHistory(History):
    """prompt_toolkit history that reads and writes a HistoryStore.

    The store keeps history per database file, so switching databases
    switches the up-arrow history too.
    """

    def __init__(self, store: HistoryStoreProtocol, database: str) -> None:
        super().__init__()
        self._store = store
        self._database = database

    def load_history_strings(self) -> Iterable[str]:
        # prompt_toolkit expects the most recent item first
        return self._store.load_queries(self._database)

    def store_string(self, string: str) -> None:
        self._store.save_query(self._database, string)
