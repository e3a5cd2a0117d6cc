from __future__ import annotations

import re

_MARKUP_RE = re.compile(r"[#*\[\]]")

PREVIEW_CHARS = 40


def strip_markup(text: str) -> str:
    """Drop heading, emphasis and link brackets for plain previews."""
    return _MARKUP_RE.sub("", text or "")


def note_preview(content: str, limit: int = PREVIEW_CHARS) -> str:
    return strip_markup((content or "")[:limit]) or "No content"
