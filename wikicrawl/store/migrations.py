"""Page store initialisation.

``init_db(conn)`` is idempotent — safe to call on an existing database.
"""

from __future__ import annotations

import sqlite3

_SCHEMA = """
CREATE TABLE IF NOT EXISTS pages (
    title       TEXT PRIMARY KEY,
    document    TEXT NOT NULL,
    updated_at  INTEGER
);
"""


def init_db(conn: sqlite3.Connection) -> None:
    """Create the ``pages`` table if it does not exist yet.

    Args:
        conn: An open SQLite connection.
    """
    conn.executescript(_SCHEMA)
