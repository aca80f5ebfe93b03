"""Data models for the scraper pipeline."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field
from typing import Dict, List


@dataclass
class ExtractedContent:
    """Structured fields extracted from one page's wikitext."""

    html: str
    text: str
    info: Dict[str, str] = field(default_factory=dict)
    link: List[str] = field(default_factory=list)


@dataclass
class PageDocument:
    """The record persisted for a single title.

    Field order is the key order of the stored JSON document.
    """

    title: str
    wiki: str
    html: str
    text: str
    info: Dict[str, str] = field(default_factory=dict)
    link: List[str] = field(default_factory=list)

    @classmethod
    def build(cls, title: str, wiki: str, content: ExtractedContent) -> PageDocument:
        return cls(
            title=title,
            wiki=wiki,
            html=content.html,
            text=content.text,
            info=content.info,
            link=content.link,
        )

    def to_json(self) -> str:
        """Serialise the document to the JSON text stored under its title."""
        return json.dumps(asdict(self), ensure_ascii=False)
