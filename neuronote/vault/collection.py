from __future__ import annotations

import logging
from typing import Iterable, Iterator

from neuronote.core.models import Note
from neuronote.errors import LastNoteError, NoteNotFoundError
from neuronote.settings import DEFAULT_NOTE_TITLE

log = logging.getLogger(__name__)


class NoteCollection:
    """
    Ordered in-memory note set. Order is the display order of the
    sidebar: new notes go first.
    """

    def __init__(self, notes: Iterable[Note] = ()):
        self._notes: list[Note] = list(notes)

    def __iter__(self) -> Iterator[Note]:
        return iter(self._notes)

    def __len__(self) -> int:
        return len(self._notes)

    def __contains__(self, note_id: object) -> bool:
        return any(n.id == note_id for n in self._notes)

    def snapshot(self) -> tuple[Note, ...]:
        return tuple(self._notes)

    def replace_all(self, notes: Iterable[Note]) -> None:
        self._notes = list(notes)

    # ───────────────────────── lookup ─────────────────────────

    def get(self, note_id: str) -> Note:
        for n in self._notes:
            if n.id == note_id:
                return n
        raise NoteNotFoundError(note_id)

    def find(self, note_id: str | None) -> Note | None:
        for n in self._notes:
            if n.id == note_id:
                return n
        return None

    def find_by_title(self, title: str) -> Note | None:
        """First note in collection order whose title matches exactly."""
        for n in self._notes:
            if n.title == title:
                return n
        return None

    def unique_title(self, base: str = DEFAULT_NOTE_TITLE) -> str:
        taken = {n.title for n in self._notes}
        if base not in taken:
            return base
        i = 2
        while f"{base} {i}" in taken:
            i += 1
        return f"{base} {i}"

    def search(self, query: str) -> list[Note]:
        """
        Empty query: every note sorted by title.
        Otherwise: notes whose title or content contains the query, any case,
        in collection order.
        """
        q = (query or "").strip().lower()
        if not q:
            return sorted(self._notes, key=lambda n: n.title.lower())
        return [n for n in self._notes if q in n.title.lower() or q in n.content.lower()]

    # ───────────────────────── mutation ─────────────────────────

    def add(self, note: Note, *, first: bool = True) -> Note:
        if first:
            self._notes.insert(0, note)
        else:
            self._notes.append(note)
        return note

    def create(self, title: str | None = None, content: str = "") -> Note:
        note = Note.new(title or self.unique_title(), content)
        log.info("Note created: id=%s title=%r", note.id, note.title)
        return self.add(note)

    def update(self, note_id: str, *, title: str | None = None, content: str | None = None) -> Note:
        for i, n in enumerate(self._notes):
            if n.id == note_id:
                updated = n.edited(title=title, content=content)
                self._notes[i] = updated
                return updated
        raise NoteNotFoundError(note_id)

    def delete(self, note_id: str) -> Note:
        note = self.get(note_id)
        if len(self._notes) <= 1:
            raise LastNoteError()
        self._notes = [n for n in self._notes if n.id != note_id]
        log.info("Note deleted: id=%s title=%r", note.id, note.title)
        return note
