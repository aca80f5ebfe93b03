"""Crawl controller.

``crawl`` walks the title graph two levels deep, one seed at a time:

    seed → fetch → extract → persist → for each new link: fetch → extract → persist

Every call blocks until it completes, so fetches and writes never overlap.
"""

from __future__ import annotations

import sqlite3
from dataclasses import dataclass, field
from typing import Callable, Iterable, List, Optional, Set

from wikicrawl.config import settings
from wikicrawl.scraper.extractor import extract_content
from wikicrawl.scraper.fetcher import fetch_revision
from wikicrawl.scraper.models import ExtractedContent, PageDocument
from wikicrawl.store.pages import put_document

FetchFn = Callable[[str], str]
ExtractFn = Callable[[str], ExtractedContent]


@dataclass
class CrawlResult:
    """Outcome of a completed crawl run."""

    visited: Set[str] = field(default_factory=set)
    persisted: List[str] = field(default_factory=list)
    failed: List[str] = field(default_factory=list)


def _persist(
    conn: sqlite3.Connection,
    title: str,
    wiki: str,
    extract: ExtractFn,
    indent: str,
) -> PageDocument:
    content = extract(wiki)
    document = PageDocument.build(title, wiki, content)
    print(f"{indent}[CRAWL] Persisting info for: {title!r}")
    put_document(conn, title, document.to_json())
    return document


def crawl(
    conn: sqlite3.Connection,
    titles: Iterable[str],
    *,
    fetch: Optional[FetchFn] = None,
    extract: Optional[ExtractFn] = None,
    visited: Optional[Set[str]] = None,
    isolate_errors: Optional[bool] = None,
) -> CrawlResult:
    """Fetch, extract and persist every seed title and its direct links.

    Seeds are always (re)processed: each one is discarded from the visited
    ledger before it is fetched and added back once its links are done.  A
    seed with empty wikitext is skipped and left out of the ledger.  Link
    targets enter the ledger before they are fetched and are never fetched
    again in the same run.  Links found on link targets are not followed.

    The connection is closed when the loop ends, whether or not it raised.

    Args:
        conn: Open, initialised page store connection.  Owned by the crawl
            from here on.
        titles: Seed titles, processed in order.
        fetch: Title → wikitext.  Defaults to
            :func:`~wikicrawl.scraper.fetcher.fetch_revision`.
        extract: Wikitext → :class:`ExtractedContent`.  Defaults to
            :func:`~wikicrawl.scraper.extractor.extract_content`.
        visited: Ledger to start from; a new empty set when omitted.
        isolate_errors: When true, an extraction or store error is recorded
            in :attr:`CrawlResult.failed` instead of aborting the run.
            Defaults to ``settings.crawl_isolate_errors``.

    Returns:
        A :class:`CrawlResult` with the final ledger and persisted titles.
    """
    fetch = fetch or fetch_revision
    extract = extract or extract_content
    if isolate_errors is None:
        isolate_errors = settings.crawl_isolate_errors

    result = CrawlResult(visited=visited if visited is not None else set())
    ledger = result.visited

    def process(title: str, wiki: str, indent: str) -> Optional[PageDocument]:
        if not isolate_errors:
            document = _persist(conn, title, wiki, extract, indent)
        else:
            try:
                document = _persist(conn, title, wiki, extract, indent)
            except Exception as exc:  # noqa: BLE001
                print(f"{indent}[CRAWL] ✗ Failed {title!r}: {exc}")
                result.failed.append(title)
                return None
        result.persisted.append(title)
        return document

    try:
        for title in titles:
            ledger.discard(title)

            print(f"[CRAWL] Acquiring info for: {title!r}")
            wiki = fetch(title)
            if not wiki:
                continue

            document = process(title, wiki, indent="")
            if document is None:
                continue

            for item in document.link:
                if item in ledger:
                    continue
                ledger.add(item)

                print(f"  [CRAWL] Acquiring info for: {item!r}")
                sub_wiki = fetch(item)
                if not sub_wiki:
                    continue
                process(item, sub_wiki, indent="  ")

            ledger.add(title)
    finally:
        conn.close()

    return result
