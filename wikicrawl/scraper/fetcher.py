"""Revision fetcher for the MediaWiki action API."""

from __future__ import annotations

import re
import time
import uuid

import httpx

from wikicrawl.config import settings

_WHITESPACE = re.compile(r"\s+")

_QUERY_PARAMS = {
    "action": "query",
    "prop": "revisions",
    "rvprop": "content",
    "rvslots": "main",
    "rvlimit": "1",
    "redirects": "1",
    "format": "json",
    "formatversion": "2",
}


def _request_headers() -> dict[str, str]:
    """Build headers carrying a fresh request identifier."""
    request_id = uuid.uuid4().hex.upper()
    return {
        "User-Agent": f"wikicrawl/1.0 ({request_id})",
        "X-Request-ID": request_id,
    }


def _revision_content(payload: dict) -> str:
    """Return the collapsed main-slot content of the first page, or ``""``."""
    pages = payload.get("query", {}).get("pages", [])
    if not pages:
        return ""
    page = pages[0]
    if page.get("missing") or not page.get("revisions"):
        return ""
    content = page["revisions"][-1]["slots"]["main"].get("content", "")
    return _WHITESPACE.sub(" ", content)


def fetch_revision(title: str) -> str:
    """Fetch the latest wikitext of *title*.

    Redirects are resolved by the API.  A missing page, or a page without
    revisions, yields an empty string.

    A non-200 response is retried up to ``settings.fetch_retry_max`` times
    with exponential backoff.  Transport errors are not retried.

    Raises:
        httpx.TransportError: On a network-level failure.
        httpx.HTTPStatusError: If every attempt got a non-200 response.
    """
    base_delay = settings.fetch_retry_base_delay
    max_retries = max(0, settings.fetch_retry_max)
    max_delay = settings.fetch_retry_max_delay
    params = {**_QUERY_PARAMS, "titles": title}

    with httpx.Client(timeout=settings.request_timeout, follow_redirects=True) as client:
        for attempt in range(max_retries + 1):
            response = client.get(
                settings.api_endpoint, params=params, headers=_request_headers()
            )
            if response.status_code == 200:
                return _revision_content(response.json())

            if attempt < max_retries:
                delay = min(base_delay * (2 ** min(attempt, 20)), max_delay)
                print(
                    f"[FETCH] HTTP {response.status_code} for {title!r} "
                    f"(attempt {attempt + 1}/{max_retries}); retrying in {delay:.0f}s …"
                )
                time.sleep(delay)

    print(f"[FETCH] exhausted {max_retries} retries for {title!r}.")
    response.raise_for_status()
    # 1xx/2xx/3xx other than 200 do not raise above.
    raise httpx.HTTPStatusError(
        f"Unexpected status {response.status_code} for {title!r}",
        request=response.request,
        response=response,
    )
