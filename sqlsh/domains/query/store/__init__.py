"""Query persistence."""

from .history import HistoryStore, QueryHistoryEntry, StoreBackedHistory

__all__ = ["HistoryStore", "QueryHistoryEntry", "StoreBackedHistory"]
