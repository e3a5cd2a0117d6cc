"""
Client for the REST note store (see neuronote.server.api).

Same contract as NoteRepository: failures are logged and reported as []
or False, never raised.
"""
from __future__ import annotations

import logging
from typing import Iterable

import httpx

from neuronote.core.models import Note

log = logging.getLogger(__name__)


class RemoteNoteRepository:
    TIMEOUT = 5.0

    def __init__(self, base_url: str, *, transport: httpx.BaseTransport | None = None):
        self.base_url = base_url.rstrip("/")
        self._client = httpx.Client(base_url=self.base_url, timeout=self.TIMEOUT, transport=transport)

    def close(self) -> None:
        self._client.close()

    def load_all(self) -> list[Note]:
        try:
            response = self._client.get("/api/notes")
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPError as exc:
            log.warning("Failed to fetch notes from %s: %s", self.base_url, exc)
            return []
        except ValueError:
            log.exception("Notes response from %s is not JSON", self.base_url)
            return []

        if not isinstance(data, list):
            log.warning("Unexpected notes payload from %s: %r", self.base_url, type(data).__name__)
            return []
        try:
            return [Note.from_dict(item) for item in data]
        except (KeyError, TypeError, ValueError):
            log.exception("Malformed note in response from %s", self.base_url)
            return []

    def save_all(self, notes: Iterable[Note]) -> bool:
        try:
            response = self._client.post("/api/notes", json=[n.to_dict() for n in notes])
            response.raise_for_status()
        except httpx.HTTPError as exc:
            log.warning("Failed to save notes to %s: %s", self.base_url, exc)
            return False
        return True
