"""
Editor session: one structured document bound to one note's markdown.

Markdown is authoritative; the document is a projection that is only
rebuilt when the note changes or when markdown arrives through some other
channel than this session's own typing (see SyncState).
"""
from __future__ import annotations

import enum
import logging
from typing import Callable, Sequence

from neuronote.core import markdown_codec
from neuronote.core.document import (
    Document,
    LinkChip,
    Position,
    Selection,
    clamp_position,
    block_length,
    delete_backward,
    delete_forward,
    delete_selection,
    end_position,
    insert_text,
    move_position,
    split_block,
)
from neuronote.core.menus import CommandMenu, LinkCandidate
from neuronote.core.models import Note
from neuronote.core.mutator import DocumentMutator, EditResult
from neuronote.core.triggers import CaretGeometry, MenuKind, TriggerDetector, compute_anchor
from neuronote.errors import StaleRangeError, UnlinkableTitleError

log = logging.getLogger(__name__)


class SyncState(enum.Enum):
    """
    IDLE           document and markdown agree, nothing pending
    EDITING        a local edit was emitted and its echo has not come back yet
    EXTERNAL_SYNC  rebuilding the document from markdown written elsewhere
    """
    IDLE = "idle"
    EDITING = "editing"
    EXTERNAL_SYNC = "external_sync"


class EditorSession:
    def __init__(
        self,
        *,
        notes: Callable[[], Sequence[Note]] = tuple,
        on_change: Callable[[str], None] | None = None,
        on_render: Callable[[], None] | None = None,
        on_menu: Callable[[CommandMenu | None], None] | None = None,
        on_focus: Callable[[], None] | None = None,
        on_link_activated: Callable[[str], None] | None = None,
        detector: TriggerDetector | None = None,
        mutator: DocumentMutator | None = None,
    ):
        self._notes = notes
        self._on_change = on_change
        self._on_render = on_render
        self._on_menu = on_menu
        self._on_focus = on_focus
        self._on_link_activated = on_link_activated
        self._detector = detector or TriggerDetector()
        self._mutator = mutator or DocumentMutator()

        self.note_id: str | None = None
        self.document = Document()
        self.selection = Selection.caret(Position(0, 0))
        self.menu: CommandMenu | None = None
        self.state = SyncState.IDLE
        # last markdown this session reported upward (or loaded)
        self._last_emitted = ""

    @property
    def caret(self) -> Position:
        return self.selection.end

    # ───────────────────────── markdown sync ─────────────────────────

    def load(self, note_id: str, markdown: str) -> None:
        """Bind to a note, always rebuilding the document."""
        log.debug("Editor load: note_id=%s", note_id)
        self.note_id = note_id
        self._rebuild(markdown)
        self.state = SyncState.IDLE

    def sync(self, note_id: str, markdown: str) -> bool:
        """
        Offer the current markdown of the active note. Returns True when the
        document was rebuilt, False when it was preserved.
        """
        if note_id != self.note_id:
            self.load(note_id, markdown)
            return True
        if markdown == self._last_emitted:
            # our own typing coming back; rebuilding would lose the caret
            self.state = SyncState.IDLE
            return False

        log.debug("Editor external sync: note_id=%s", note_id)
        self.state = SyncState.EXTERNAL_SYNC
        self._rebuild(markdown)
        self.state = SyncState.IDLE
        return True

    def _rebuild(self, markdown: str) -> None:
        self._set_menu(None)
        self.document = markdown_codec.encode(markdown)
        self.selection = Selection.caret(end_position(self.document))
        self._last_emitted = markdown
        self._render()

    # ───────────────────────── typing ─────────────────────────

    def type_text(self, text: str, geometry: CaretGeometry | None = None) -> None:
        if not text:
            return
        if self.menu is not None:
            self.menu.set_query(self.menu.query + text)
            return

        doc, pos = self._delete_selection()
        lines = text.replace("\r\n", "\n").split("\n")
        for i, line in enumerate(lines):
            if i:
                doc, pos = split_block(doc, pos)
            if line:
                doc, pos = insert_text(doc, pos, line)
        self._apply(doc, Selection.caret(pos))

        kind = self._detector.detect(self.document, self.caret)
        if kind is not None:
            self._open_menu(kind, geometry)

    def backspace(self) -> None:
        if self.menu is not None and self.menu.query:
            self.menu.set_query(self.menu.query[:-1])
            return
        if not self.selection.is_collapsed:
            doc, pos = self._delete_selection()
        else:
            doc, pos = delete_backward(self.document, self.caret)
        self._apply(doc, Selection.caret(pos))

    def delete(self) -> None:
        """Forward delete."""
        if not self.selection.is_collapsed:
            doc, pos = self._delete_selection()
        else:
            doc, pos = delete_forward(self.document, self.caret)
        self._apply(doc, Selection.caret(pos))

    def press_enter(self) -> None:
        if self.menu is not None:
            self.commit_highlighted()
            return
        doc, pos = self._delete_selection()
        doc, pos = split_block(doc, pos)
        self._apply(doc, Selection.caret(pos))

    def handle_key(self, key: str) -> bool:
        """Navigation keys. Returns True when the key was consumed."""
        if self.menu is not None:
            if key == "ArrowDown":
                self.menu.move(1)
            elif key == "ArrowUp":
                self.menu.move(-1)
            elif key == "Enter":
                self.commit_highlighted()
            elif key == "Escape":
                self.dismiss_menu()
            else:
                return False
            return True

        if key == "ArrowLeft":
            self.move_caret(-1)
        elif key == "ArrowRight":
            self.move_caret(1)
        elif key == "ArrowUp":
            self.move_block(-1)
        elif key == "ArrowDown":
            self.move_block(1)
        elif key == "Home":
            self.move_to_block_edge(end=False)
        elif key == "End":
            self.move_to_block_edge(end=True)
        elif key == "Delete":
            self.delete()
        elif key == "Enter":
            self.press_enter()
        else:
            return False
        return True

    def move_caret(self, delta: int) -> None:
        pos = move_position(self.document, self.caret, delta)
        self.selection = Selection.caret(pos)
        self._render()

    def move_block(self, delta: int) -> None:
        """Jump to the neighbouring block, keeping the offset where possible."""
        pos = clamp_position(self.document, Position(self.caret.block + delta, self.caret.offset))
        self.selection = Selection.caret(pos)
        self._render()

    def move_to_block_edge(self, *, end: bool) -> None:
        """Home / End within the caret's block."""
        pos = clamp_position(self.document, self.caret)
        if self.document.blocks:
            pos = Position(pos.block, block_length(self.document.blocks[pos.block]) if end else 0)
        self.selection = Selection.caret(pos)
        self._render()

    def select(self, anchor: Position, head: Position) -> None:
        self._set_menu(None)
        self.selection = Selection(clamp_position(self.document, anchor), clamp_position(self.document, head))
        self._render()

    def select_all(self) -> None:
        self.select(Position(0, 0), end_position(self.document))

    def click(self, pos: Position, chip: LinkChip | None = None) -> None:
        """Pointer click: places the caret, closes menus, follows chips."""
        self._set_menu(None)
        self.selection = Selection.caret(clamp_position(self.document, pos))
        self._render()
        if chip is not None and self._on_link_activated is not None:
            self._on_link_activated(chip.title)

    # ───────────────────────── menus ─────────────────────────

    def set_query(self, query: str) -> None:
        if self.menu is not None:
            self.menu.set_query(query)

    def hover(self, index: int) -> None:
        if self.menu is not None:
            self.menu.hover(index)

    def dismiss_menu(self) -> None:
        if self.menu is None:
            return
        self._set_menu(None)
        self._focus()

    def commit_highlighted(self) -> None:
        if self.menu is None:
            return
        candidate = self.menu.current()
        if candidate is not None:
            self.commit(candidate)

    def commit(self, candidate) -> None:
        menu = self.menu
        if menu is None:
            return
        try:
            if menu.kind is MenuKind.LINK:
                title = candidate.title if isinstance(candidate, LinkCandidate) else str(candidate)
                result = self._mutator.commit_link(self.document, menu.captured, title)
            else:
                result = self._mutator.commit_command(self.document, menu.captured, candidate)
        except StaleRangeError:
            log.info("Menu closed: captured range is stale")
            self._set_menu(None)
            return
        except UnlinkableTitleError as exc:
            log.warning("Menu closed: %s", exc)
            self._set_menu(None)
            return
        self._apply_result(result)
        self._set_menu(None)
        self._focus()

    def _open_menu(self, kind: MenuKind, geometry: CaretGeometry | None) -> None:
        anchor = compute_anchor(geometry)
        captured = self._detector.capture(self.document, self.caret, kind)
        if kind is MenuKind.LINK:
            menu = CommandMenu.for_links(self._notes, anchor=anchor, captured=captured)
        else:
            menu = CommandMenu.for_commands(anchor=anchor, captured=captured)
        log.debug("Menu opened: kind=%s at=%s", kind.name, captured.position)
        self._set_menu(menu)

    def _set_menu(self, menu: CommandMenu | None) -> None:
        if menu is None and self.menu is None:
            return
        self.menu = menu
        if self._on_menu is not None:
            self._on_menu(menu)

    # ───────────────────────── internals ─────────────────────────

    def _delete_selection(self) -> tuple[Document, Position]:
        sel = self.selection
        if sel.is_collapsed:
            return self.document, clamp_position(self.document, sel.end)
        return delete_selection(self.document, sel.start, sel.end)

    def _apply(self, doc: Document, selection: Selection) -> None:
        if doc == self.document and selection == self.selection:
            return
        changed = doc != self.document
        self.document = doc
        self.selection = selection
        if self.menu is not None and not self.menu.captured.is_valid(doc):
            # the edit moved or removed the trigger; never commit into it
            self._set_menu(None)
        self._render()
        if changed:
            self._emit()

    def _apply_result(self, result: EditResult) -> None:
        self.document = result.document
        self.selection = result.selection
        self._render()
        self._emit(result.markdown)

    def _emit(self, markdown: str | None = None) -> None:
        if markdown is None:
            markdown = markdown_codec.decode(self.document)
        self.state = SyncState.EDITING
        if markdown == self._last_emitted:
            return
        self._last_emitted = markdown
        if self._on_change is not None:
            self._on_change(markdown)

    def _render(self) -> None:
        if self._on_render is not None:
            self._on_render()

    def _focus(self) -> None:
        if self._on_focus is not None:
            self._on_focus()
