"""Page store package.

Public re-exports so callers can write::

    from wikicrawl.store import get_connection, init_db, put_document
"""

from wikicrawl.store.connection import get_connection
from wikicrawl.store.migrations import init_db
from wikicrawl.store.pages import get_document, put_document

__all__ = ["get_connection", "init_db", "put_document", "get_document"]
