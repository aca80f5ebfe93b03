"""Seed title generation."""

from __future__ import annotations

from string import Formatter


def generate_titles(template: str, start: int, stop: int) -> list[str]:
    """Return ``template.format(count=i)`` for every *i* in ``[start, stop)``.

    >>> generate_titles("{count} in science", 1998, 2000)
    ['1998 in science', '1999 in science']

    Raises:
        ValueError: If *template* has no ``{count}`` field, since every seed
            would then be the same title.
    """
    fields = {name for _, name, _, _ in Formatter().parse(template) if name is not None}
    if "count" not in fields:
        raise ValueError(f"Title template {template!r} has no {{count}} field")
    return [template.format(count=index) for index in range(start, stop)]
