from __future__ import annotations

import re

# [[Exact Title]]; the inner text may not contain brackets or line breaks
WIKILINK_RE = re.compile(r"\[\[([^\[\]\n]+)\]\]")


def is_link_title(inner: str) -> bool:
    return bool(inner) and not inner.isspace()


def is_linkable_title(title: str) -> bool:
    """True when format_wikilink(title) extracts back to exactly title."""
    return is_link_title(title) and WIKILINK_RE.fullmatch(format_wikilink(title)) is not None


def extract_link_titles(content: str) -> list[str]:
    """
    Return every wiki-link title in document order, duplicates included.

    Titles are kept verbatim: link resolution is exact string equality
    against Note.title.
    """
    titles: list[str] = []
    for m in WIKILINK_RE.finditer(content or ""):
        inner = m.group(1)
        if is_link_title(inner):
            titles.append(inner)
    return titles


def unique_link_titles(content: str) -> list[str]:
    """Extracted titles with duplicates collapsed, first occurrence wins."""
    return list(dict.fromkeys(extract_link_titles(content)))


def format_wikilink(title: str) -> str:
    return f"[[{title}]]"
