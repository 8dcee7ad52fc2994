# ABOUTME: Opens the SQLite file that backs a bookdupes catalog.
# ABOUTME: Creates the file and schema on first use and configures every connection the same way.

import sqlite3
from pathlib import Path

from bookdupes.db.schema import SCHEMA_V1

DEFAULT_DB_PATH = Path.home() / ".bookdupes" / "library.db"


def _catalog_version(conn: sqlite3.Connection) -> int | None:
    """Schema version stored in the file, or None for a database never initialized."""
    initialized = conn.execute(
        "SELECT 1 FROM sqlite_master WHERE type = 'table' AND name = 'schema_version'"
    ).fetchone()
    if initialized is None:
        return None
    return conn.execute("SELECT MAX(version) FROM schema_version").fetchone()[0]


def open_library(path: Path | None = None) -> sqlite3.Connection:
    """Connect to a catalog database, creating it if needed.

    Every connection runs in WAL mode with foreign keys enforced, so deleting
    a library or book cascades to its roots and files. Rows come back as
    sqlite3.Row.

    Args:
        path: Database file. Defaults to DEFAULT_DB_PATH.
    """
    db_path = path or DEFAULT_DB_PATH
    db_path.parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(db_path))
    conn.row_factory = sqlite3.Row
    conn.execute("PRAGMA journal_mode=WAL")
    conn.execute("PRAGMA foreign_keys=ON")

    if _catalog_version(conn) is None:
        conn.executescript(SCHEMA_V1)

    return conn
