"""Keyed read/write operations for the ``pages`` table."""

from __future__ import annotations

import sqlite3
from time import time


def put_document(conn: sqlite3.Connection, title: str, document: str) -> None:
    """Store *document* under *title*, replacing any previous value."""
    with conn:
        conn.execute(
            """
            INSERT INTO pages (title, document, updated_at) VALUES (?, ?, ?)
            ON CONFLICT(title) DO UPDATE SET
                document = excluded.document,
                updated_at = excluded.updated_at
            """,
            (title, document, int(time())),
        )


def get_document(conn: sqlite3.Connection, title: str) -> str:
    """Return the document stored under *title*.

    Raises:
        KeyError: If no document exists for *title*.
    """
    row = conn.execute(
        "SELECT document FROM pages WHERE title = ?", (title,)
    ).fetchone()
    if row is None:
        raise KeyError(title)
    return row["document"]

