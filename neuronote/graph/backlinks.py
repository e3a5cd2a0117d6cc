from __future__ import annotations

from typing import Iterable

from neuronote.core.models import Note
from neuronote.core.wikilinks import extract_link_titles


class BacklinkIndex:
    """Notes that link to a given note. Recomputed on demand, never cached."""

    @staticmethod
    def for_active_note(active: Note | None, notes: Iterable[Note]) -> list[Note]:
        if active is None:
            return []
        return [n for n in notes if active.title in extract_link_titles(n.content)]
