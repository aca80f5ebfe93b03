"""SQLite connection factory for the page store.

Usage::

    from wikicrawl.store.connection import get_connection

    conn = get_connection()
    try:
        ...
    finally:
        conn.close()
"""

from __future__ import annotations

import sqlite3
from pathlib import Path
from typing import Optional, Union

from wikicrawl.config import settings


def get_connection(db_path: Optional[Union[Path, str]] = None) -> sqlite3.Connection:
    """Open and configure a SQLite connection.

    Steps performed on every new connection:
    1. Create the parent directory of an on-disk database.
    2. Switch to WAL journal mode so readers never block the crawler.

    Args:
        db_path: Override the DB path.  Defaults to ``settings.store_path``.

    Returns:
        A configured :class:`sqlite3.Connection` with ``row_factory`` set to
        :class:`sqlite3.Row` so columns can be accessed by name.
    """
    path = db_path or settings.store_path

    # Create parent directory if needed (no-op for `:memory:`)
    if str(path) != ":memory:":
        Path(path).parent.mkdir(parents=True, exist_ok=True)

    conn = sqlite3.connect(str(path))
    conn.row_factory = sqlite3.Row

    try:
        conn.execute("PRAGMA journal_mode = WAL")
    except sqlite3.Error:
        conn.close()
        raise

    return conn
