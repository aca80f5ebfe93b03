"""Content extraction: turns raw wikitext into :class:`ExtractedContent`."""

from __future__ import annotations

import re
from typing import Callable, Dict, List, Optional

import httpx
import mwparserfromhell
from bs4 import BeautifulSoup

from wikicrawl.config import settings
from wikicrawl.scraper.models import ExtractedContent

_WHITESPACE = re.compile(r"\s+")


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------

def _collapse(text: str) -> str:
    return _WHITESPACE.sub(" ", text)


def _extract_infobox(wiki: str) -> Dict[str, str]:
    """Return the first top-level ``{{Infobox …}}`` as a name → value mapping.

    Values have their wiki markup stripped.  Pages without an infobox give
    an empty dict.
    """
    code = mwparserfromhell.parse(wiki)
    for template in code.filter_templates(recursive=False):
        name = str(template.name).strip()
        if not name.lower().startswith("infobox"):
            continue
        return {
            str(param.name).strip(): param.value.strip_code().strip()
            for param in template.params
        }
    return {}


def _extract_links(soup: BeautifulSoup) -> List[str]:
    """Return de-duplicated same-site link targets in document order.

    Only relative ``./Target`` hrefs are kept; anything carrying a fragment
    (``#``) is excluded.  The ``./`` prefix is stripped.
    """
    seen: set[str] = set()
    links: List[str] = []
    for anchor in soup.find_all("a", href=True):
        href = anchor["href"]
        if "#" in href or not href.startswith("./"):
            continue
        target = href[2:]
        if target not in seen:
            seen.add(target)
            links.append(target)
    return links


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def render_html(wiki: str) -> str:
    """Render *wiki* to HTML with the Parsoid transform endpoint.

    Raises:
        httpx.HTTPStatusError: If the endpoint returns a 4xx/5xx status code.
    """
    with httpx.Client(timeout=settings.request_timeout) as client:
        response = client.post(settings.transform_endpoint, json={"wikitext": wiki})
        response.raise_for_status()
        return response.text


def extract_content(
    wiki: str,
    render: Optional[Callable[[str], str]] = None,
) -> ExtractedContent:
    """Extract sanitized HTML, plaintext, infobox and links from *wiki*.

    ``render`` converts wikitext to HTML and defaults to :func:`render_html`.
    Any failure while rendering or parsing propagates to the caller.
    """
    render = render or render_html
    soup = BeautifulSoup(render(wiki), "html.parser")
    for tag in soup("style"):
        tag.decompose()

    return ExtractedContent(
        html=_collapse(str(soup)),
        text=_collapse(soup.get_text()),
        info=_extract_infobox(wiki),
        link=_extract_links(soup),
    )
