"""Reconcile a title list against several page store shards.

Each title is looked up shard by shard in ascending index order.  The first
hit is appended to the output file; titles found in no shard are returned.
"""

from __future__ import annotations

import json
import sqlite3
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Union

from wikicrawl.config import settings
from wikicrawl.store.connection import get_connection
from wikicrawl.store.migrations import init_db
from wikicrawl.store.pages import get_document


def shard_paths(
    directory: Optional[Union[Path, str]] = None,
    start: Optional[int] = None,
    stop: Optional[int] = None,
    pattern: Optional[str] = None,
) -> List[Path]:
    """Return the shard file paths for indexes ``[start, stop)``.

    Unset arguments fall back to the ``shard_*`` settings.
    """
    directory = Path(directory if directory is not None else settings.shard_dir)
    start = settings.shard_start if start is None else start
    stop = settings.shard_stop if stop is None else stop
    pattern = pattern or settings.shard_pattern
    return [directory / pattern.format(index=index) for index in range(start, stop)]


def open_shards(paths: Iterable[Union[Path, str]]) -> List[sqlite3.Connection]:
    """Open every shard in order, creating an empty ``pages`` table if needed.

    If any shard fails to open, the ones already opened are closed before the
    error propagates.
    """
    shards: List[sqlite3.Connection] = []
    try:
        for path in paths:
            conn = get_connection(path)
            shards.append(conn)
            init_db(conn)
    except Exception:
        for shard in shards:
            shard.close()
        raise
    return shards


def load_titles(path: Union[Path, str]) -> List[str]:
    """Read the JSON array of titles to reconcile."""
    titles = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(titles, list):
        raise ValueError(f"Expected a JSON array of titles in {path}")
    return [str(t) for t in titles]


def _append(path: Path, content: str) -> None:
    with path.open("a", encoding="utf-8") as fh:
        fh.write(content + "\n")


def reconcile(
    titles: Iterable[str],
    shards: Sequence[sqlite3.Connection],
    output_path: Union[Path, str],
) -> List[str]:
    """Copy each title's stored document from the first shard that has it.

    A lookup miss or store error on one shard only moves the search on to
    the next shard.  Every shard is closed before returning.

    Args:
        titles: Titles to look up, in output order.
        shards: Open shard connections, in lookup order.
        output_path: File the found documents are appended to, one per line.

    Returns:
        The titles that no shard could provide, in input order.
    """
    output_path = Path(output_path)
    ledger: List[str] = []

    try:
        for title in titles:
            ledger.append(title)
            for shard in shards:
                try:
                    document = get_document(shard, title)
                except (KeyError, sqlite3.Error):
                    continue
                _append(output_path, document)
                ledger.pop()
                break
    finally:
        for shard in shards:
            shard.close()

    return ledger
