# neuronote/services/workspace.py

from __future__ import annotations

import logging
from typing import Callable, Protocol, Sequence

from PySide6.QtCore import QObject, QTimer, Signal

from neuronote.core.models import Note
from neuronote.core.wikilinks import extract_link_titles, format_wikilink
from neuronote.graph.backlinks import BacklinkIndex
from neuronote.graph.service import GraphService
from neuronote.services.suggestions import SuggestionService
from neuronote.settings import AUTOSAVE_DEBOUNCE_MS, WELCOME_CONTENT, WELCOME_TITLE
from neuronote.vault.collection import NoteCollection

log = logging.getLogger(__name__)


class NoteStore(Protocol):
    def load_all(self) -> list[Note]: ...
    def save_all(self, notes: Sequence[Note]) -> bool: ...


class Workspace(QObject):
    """
    Application state behind the main window.

    Responsibilities:
    - own the note collection and the active note
    - debounce autosave and graph rebuilds
    - recompute backlinks on every change
    - hold link suggestions for the active note
    """

    notesChanged = Signal()
    activeNoteChanged = Signal(str)            # note_id
    activeContentChanged = Signal(str, str)    # note_id, markdown
    backlinksChanged = Signal(list)            # list[Note]
    graphChanged = Signal(object)              # GraphTopology
    suggestionsChanged = Signal(list)          # list[str]

    def __init__(
        self,
        *,
        store: NoteStore,
        graph: GraphService | None = None,
        suggestions: SuggestionService | None = None,
        autosave_ms: int = AUTOSAVE_DEBOUNCE_MS,
        parent=None,
    ):
        super().__init__(parent)

        self._store = store
        self._suggester = suggestions or SuggestionService()
        self.graph = graph or GraphService(parent=self)
        self.graph.topologyChanged.connect(self.graphChanged.emit)

        self.notes = NoteCollection()
        self.active_id: str | None = None
        self.search_query = ""
        self.suggestions: list[str] = []
        self._loaded = False

        self._autosave_timer = QTimer(self)
        self._autosave_timer.setSingleShot(True)
        self._autosave_timer.setInterval(autosave_ms)
        self._autosave_timer.timeout.connect(self.save_now)

    # ───────────────────────── loading / saving ─────────────────────────

    def load(self) -> None:
        notes = self._store.load_all()
        if notes:
            self.notes.replace_all(notes)
        else:
            welcome = Note.new(WELCOME_TITLE, WELCOME_CONTENT)
            self.notes.replace_all([welcome])
            self._store.save_all(self.notes.snapshot())
            log.info("Empty store: created welcome note")
        self._loaded = True

        self.active_id = None
        self.notesChanged.emit()
        self.set_active(self.notes.snapshot()[0].id)
        self.graph.request_build(self.notes.snapshot(), immediate=True)

    def save_now(self) -> bool:
        if self._autosave_timer.isActive():
            self._autosave_timer.stop()
        if not self._loaded or not len(self.notes):
            return False
        ok = self._store.save_all(self.notes.snapshot())
        if not ok:
            log.warning("Autosave failed; changes stay in memory until the next save")
        return ok

    # ───────────────────────── active note ─────────────────────────

    @property
    def active_note(self) -> Note | None:
        note = self.notes.find(self.active_id)
        if note is None and len(self.notes):
            return self.notes.snapshot()[0]
        return note

    def set_active(self, note_id: str) -> None:
        note = self.notes.get(note_id)
        if note.id == self.active_id:
            return
        self.active_id = note.id
        if self.suggestions:
            self._set_suggestions([])
        self.activeNoteChanged.emit(note.id)
        self.activeContentChanged.emit(note.id, note.content)
        self._refresh_backlinks()

    def update_active(self, *, title: str | None = None, content: str | None = None) -> Note | None:
        note = self.active_note
        if note is None:
            return None
        updated = self.notes.update(note.id, title=title, content=content)

        if content is not None:
            self.activeContentChanged.emit(updated.id, updated.content)
            if self.suggestions and extract_link_titles(updated.content):
                self._set_suggestions([])
        self._changed()
        return updated

    # ───────────────────────── note operations ─────────────────────────

    def create_note(self, title: str | None = None, content: str = "") -> Note:
        note = self.notes.create(title, content)
        self._changed()
        self.set_active(note.id)
        return note

    def delete_note(self, note_id: str) -> None:
        """Raises LastNoteError for the only remaining note."""
        self.notes.delete(note_id)
        was_active = note_id == self.active_id
        self._changed()
        if was_active:
            self.active_id = None
            self.set_active(self.notes.snapshot()[0].id)

    def open_link(self, title: str, *, confirm: Callable[[str], bool] = lambda title: True) -> Note | None:
        """
        Follow a [[title]] link. A missing target is created, linking back
        to the current note, once confirm(title) agrees.
        """
        target = self.notes.find_by_title(title)
        if target is not None:
            self.set_active(target.id)
            return target
        if not confirm(title):
            return None

        source = self.active_note
        content = f"Linked from {format_wikilink(source.title)}" if source is not None else ""
        return self.create_note(title, content)

    def filtered_notes(self) -> list[Note]:
        return self.notes.search(self.search_query)

    def set_search_query(self, query: str) -> None:
        if query == self.search_query:
            return
        self.search_query = query
        self.notesChanged.emit()

    def backlinks(self) -> list[Note]:
        return BacklinkIndex.for_active_note(self.active_note, self.notes)

    # ───────────────────────── suggestions ─────────────────────────

    def analyze_links(self) -> list[str]:
        note = self.active_note
        if note is None:
            return []
        self._set_suggestions([])
        try:
            found = self._suggester.suggest_connections(note, self.notes.snapshot())
        except Exception:
            log.exception("Link suggestion failed for note_id=%s", note.id)
            found = []
        self._set_suggestions(list(found))
        return self.suggestions

    def accept_suggestion(self, title: str) -> None:
        note = self.active_note
        if note is None:
            return
        self.update_active(content=f"{note.content} {format_wikilink(title)} ")

    def dismiss_suggestions(self) -> None:
        self._set_suggestions([])

    # ───────────────────────── internals ─────────────────────────

    def _changed(self) -> None:
        self.notesChanged.emit()
        self._refresh_backlinks()
        self.graph.request_build(self.notes.snapshot())
        self._autosave_timer.start()

    def _refresh_backlinks(self) -> None:
        self.backlinksChanged.emit(self.backlinks())

    def _set_suggestions(self, suggestions: list[str]) -> None:
        if suggestions == self.suggestions:
            return
        self.suggestions = suggestions
        self.suggestionsChanged.emit(suggestions)

