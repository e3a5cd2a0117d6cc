from __future__ import annotations

import logging
from typing import Sequence

from neuronote.core.models import Note

log = logging.getLogger(__name__)


class SuggestionService:
    """
    Link suggestions and summaries. No model is wired in: suggestions are
    always empty and linking stays manual.
    """

    def suggest_connections(self, note: Note, notes: Sequence[Note]) -> list[str]:
        log.info("Link suggestions are disabled; use [[note title]] to link manually")
        return []

    def summarize_note(self, content: str) -> str:
        log.info("Summaries are disabled")
        return "Summaries are not available; keep notes short and linked instead."
