"""SQLite connection and schema initialization."""

import os
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path

# Tracks which database paths have had schema applied (avoid running on every connection)
_schema_initialized: set[str] = set()
_schema_lock = threading.Lock()

SCHEMA_SQL = """
-- Claim owners (looked up for notifications and ownership checks)
CREATE TABLE IF NOT EXISTS owners (
    id TEXT PRIMARY KEY,
    name TEXT NOT NULL DEFAULT '',
    email TEXT,
    created_at TEXT DEFAULT (datetime('now'))
);

-- Claims table (main record)
CREATE TABLE IF NOT EXISTS claims (
    id TEXT PRIMARY KEY,
    owner_id TEXT NOT NULL,
    description TEXT NOT NULL,
    status TEXT NOT NULL DEFAULT 'pending',
    fraud_check_completed INTEGER NOT NULL DEFAULT 0,
    is_fraudulent INTEGER NOT NULL DEFAULT 0,
    fraud_confidence_score REAL,
    fraud_detection_data TEXT,
    verdict_data TEXT,
    created_at TEXT NOT NULL,
    updated_at TEXT NOT NULL
);
CREATE INDEX IF NOT EXISTS idx_claims_owner_id ON claims(owner_id);
CREATE INDEX IF NOT EXISTS idx_claims_status ON claims(status);
"""


def get_db_path() -> str:
    """Return path to SQLite database from CLAIMS_DB_PATH env or default data/claims.db."""
    path = os.environ.get("CLAIMS_DB_PATH", "data/claims.db")
    return path


def init_db(path: str | None = None) -> None:
    """Create tables if they do not exist."""
    db_path = path or get_db_path()
    p = Path(db_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    with sqlite3.connect(db_path) as conn:
        conn.executescript(SCHEMA_SQL)
    with _schema_lock:
        _schema_initialized.add(db_path)


def _ensure_schema(db_path: str) -> None:
    """Run schema once per path. Thread-safe."""
    with _schema_lock:
        if db_path in _schema_initialized:
            return
    init_db(db_path)


@contextmanager
def get_connection(path: str | None = None):
    """Context manager yielding a database connection. Ensures schema exists once per path."""
    db_path = path or get_db_path()
    p = Path(db_path)
    p.parent.mkdir(parents=True, exist_ok=True)
    _ensure_schema(db_path)
    conn = sqlite3.connect(db_path, timeout=30)
    conn.row_factory = sqlite3.Row
    try:
        yield conn
        conn.commit()
    finally:
        conn.close()
