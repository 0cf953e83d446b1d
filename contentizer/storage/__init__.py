"""
Persistence for settings, daily quota and history.
"""

from .store import InMemoryStore, KeyValueStore, SQLiteStore

__all__ = ["InMemoryStore", "KeyValueStore", "SQLiteStore"]
