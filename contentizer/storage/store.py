"""
Persistent key-value store.

Durable mapping of logical document names (settings, history,
daily_quota) to JSON-compatible values. Writes are staged with ``set``
and flushed with ``save``; there is no atomicity across keys.
"""

import copy
import json
import logging
import sqlite3
import threading
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

from ..errors import StoreIOError
from .db import get_connection, initialize_schema

logger = logging.getLogger(__name__)


class KeyValueStore(ABC):
    """Interface shared by the durable store and its in-memory stand-in.

    Values are never cached between operations: ``get`` always reflects
    the durable medium plus whatever has been staged and not yet saved.
    """

    def __init__(self):
        self._staged: Dict[str, Any] = {}
        self._staged_lock = threading.Lock()
        self._key_locks: Dict[str, threading.RLock] = {}
        self._key_locks_guard = threading.Lock()

    def lock(self, key: str) -> threading.RLock:
        """Return the lock serializing load-mutate-save sequences on ``key``."""
        with self._key_locks_guard:
            key_lock = self._key_locks.get(key)
            if key_lock is None:
                key_lock = threading.RLock()
                self._key_locks[key] = key_lock
            return key_lock

    def get(self, key: str) -> Optional[Any]:
        """Return the value for ``key``, or None if absent or unreadable."""
        with self._staged_lock:
            if key in self._staged:
                return copy.deepcopy(self._staged[key])
        return self._read(key)

    def set(self, key: str, value: Any) -> None:
        """Stage an update; nothing is durable until ``save`` succeeds."""
        with self._staged_lock:
            self._staged[key] = copy.deepcopy(value)

    def save(self) -> None:
        """Flush staged updates to the durable medium.

        Raises:
            StoreIOError: If the medium can't be written; the staged values
                are discarded, so the durable state is left as it was.
        """
        with self._staged_lock:
            if not self._staged:
                return
            try:
                self._write(dict(self._staged))
            finally:
                self._staged.clear()

    @abstractmethod
    def _read(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def _write(self, values: Dict[str, Any]) -> None:
        ...


class SQLiteStore(KeyValueStore):
    """Key-value store persisted as JSON documents in a SQLite table."""

    def __init__(self, db_path: str = "contentizer.db"):
        super().__init__()
        self.db_path = db_path
        self._schema_ready = False

    def _connect(self) -> sqlite3.Connection:
        conn = get_connection(self.db_path)
        if not self._schema_ready:
            initialize_schema(conn)
            self._schema_ready = True
        return conn

    def _read(self, key: str) -> Optional[Any]:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as e:
            raise StoreIOError(f"Failed to load store: {e}") from e
        try:
            row = conn.execute(
                "SELECT value FROM kv_store WHERE key = ?", (key,)
            ).fetchone()
        except sqlite3.Error as e:
            raise StoreIOError(f"Failed to read '{key}' from store: {e}") from e
        finally:
            conn.close()

        if row is None:
            return None
        try:
            return json.loads(row[0])
        except ValueError:
            logger.warning("Stored value for '%s' is not valid JSON; using defaults", key)
            return None

    def _write(self, values: Dict[str, Any]) -> None:
        try:
            conn = self._connect()
        except (sqlite3.Error, OSError) as e:
            raise StoreIOError(f"Failed to load store: {e}") from e
        try:
            conn.execute("BEGIN TRANSACTION")
            for key, value in values.items():
                conn.execute(
                    "INSERT OR REPLACE INTO kv_store (key, value) VALUES (?, ?)",
                    (key, json.dumps(value)),
                )
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StoreIOError(f"Failed to save store: {e}") from e
        finally:
            conn.close()


class InMemoryStore(KeyValueStore):
    """Process-local store with the same staging semantics as SQLiteStore.

    Used by tests and by callers that don't want anything written to disk.
    """

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        super().__init__()
        self.saved: Dict[str, Any] = copy.deepcopy(initial) if initial else {}
        self.save_count = 0

    def _read(self, key: str) -> Optional[Any]:
        return copy.deepcopy(self.saved.get(key))

    def _write(self, values: Dict[str, Any]) -> None:
        # Round-trip through JSON so tests see exactly what SQLiteStore would keep
        for key, value in values.items():
            self.saved[key] = json.loads(json.dumps(value))
        self.save_count += 1
