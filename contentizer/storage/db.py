"""
Database connection management.

Provides the SQLite connection backing the key-value store.
"""

import sqlite3
from pathlib import Path


def get_connection(db_path: str = "contentizer.db") -> sqlite3.Connection:
    """Create and return a SQLite connection for the key-value store.
    
    Parent directories are created so a fresh profile path works on first use.
    
    Args:
        db_path: Path to SQLite database file
        
    Returns:
        SQLite connection
    """
    path = Path(db_path)
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    return sqlite3.connect(str(path))


def initialize_schema(conn: sqlite3.Connection) -> None:
    """Create the kv_store table if it doesn't exist.
    
    Each row holds one logical document (settings, history, daily_quota)
    serialized as JSON.
    """
    conn.execute("""
        CREATE TABLE IF NOT EXISTS kv_store (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        )
    """)
    conn.commit()
