"""Crawl package — seed generation and the crawl controller."""

from wikicrawl.crawl.controller import CrawlResult, crawl
from wikicrawl.crawl.seeds import generate_titles

__all__ = ["crawl", "CrawlResult", "generate_titles"]
