"""Shared SQLite connection setup for the local (non-Supabase) backends."""

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator


def open_connection(db_path: str) -> sqlite3.Connection:
    """Open a connection with WAL mode and a busy timeout."""
    # Ensure data directory exists
    Path(db_path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(
        db_path,
        check_same_thread=False,  # Jobs and request handlers share the connection
        timeout=10.0
    )
    conn.row_factory = sqlite3.Row

    # WAL lets the sweeper read while a request inserts
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA busy_timeout=5000")
    return conn


@contextmanager
def transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Connection]:
    """Commit on success, roll back on error."""
    try:
        yield conn
        conn.commit()
    except Exception:
        conn.rollback()
        raise
