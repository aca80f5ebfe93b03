"""Scraper package — revision fetch & content extraction."""

from wikicrawl.scraper.extractor import extract_content, render_html
from wikicrawl.scraper.fetcher import fetch_revision
from wikicrawl.scraper.models import ExtractedContent, PageDocument

__all__ = [
    "fetch_revision",
    "render_html",
    "extract_content",
    "ExtractedContent",
    "PageDocument",
]
