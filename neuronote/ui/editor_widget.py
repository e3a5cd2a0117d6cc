from __future__ import annotations

import logging

from PySide6.QtCore import Qt, Signal
from PySide6.QtGui import QFont, QKeySequence, QTextBlockFormat, QTextCharFormat, QTextCursor
from PySide6.QtWidgets import QApplication, QFrame, QLabel, QListWidget, QListWidgetItem, QTextEdit, QVBoxLayout

from neuronote.core.document import Position
from neuronote.core.editor import EditorSession
from neuronote.core.menus import CommandMenu, LinkCandidate
from neuronote.core.triggers import CaretGeometry, MenuKind, Rect
from neuronote.ui.layout import BlockLayout, layout_document
from neuronote.ui.qt_utils import blocked_signals

log = logging.getLogger(__name__)

_KEY_NAMES = {
    Qt.Key_Up: "ArrowUp",
    Qt.Key_Down: "ArrowDown",
    Qt.Key_Left: "ArrowLeft",
    Qt.Key_Right: "ArrowRight",
    Qt.Key_Return: "Enter",
    Qt.Key_Enter: "Enter",
    Qt.Key_Escape: "Escape",
    Qt.Key_Delete: "Delete",
    Qt.Key_Home: "Home",
    Qt.Key_End: "End",
}

_HEADING_SIZES = {1: 22, 2: 18, 3: 15}


def _is_shortcut(mods) -> bool:
    # AltGr arrives as Ctrl+Alt on Windows and produces ordinary text (@ on many layouts)
    return bool(mods & Qt.ControlModifier) and not mods & Qt.AltModifier


class CommandPopup(QFrame):
    """
    Candidate list for an open menu. Never takes focus: keys keep going
    to the editor, which routes them to the session.
    """

    def __init__(self, session: EditorSession, parent=None):
        super().__init__(parent)
        self._session = session
        self._menu: CommandMenu | None = None
        self._shown: list | None = None

        self.setFrameShape(QFrame.StyledPanel)
        self.setFocusPolicy(Qt.NoFocus)
        self.setFixedWidth(280)

        self.header = QLabel(self)
        self.list = QListWidget(self)
        self.list.setFocusPolicy(Qt.NoFocus)
        self.list.setMouseTracking(True)
        self.list.setMaximumHeight(240)
        self.list.itemEntered.connect(lambda item: self._session.hover(self.list.row(item)))
        self.list.itemClicked.connect(self._on_clicked)

        lay = QVBoxLayout(self)
        lay.setContentsMargins(4, 4, 4, 4)
        lay.addWidget(self.header)
        lay.addWidget(self.list)
        self.hide()

    def show_menu(self, menu: CommandMenu | None, *, scroll_top: int = 0) -> None:
        self._menu = menu
        self._shown = None
        if menu is None:
            self.hide()
            return
        menu.on_highlight_changed(self._on_highlight)
        self._refresh()
        self.move(int(menu.anchor.left), int(menu.anchor.top) - scroll_top)
        self.show()
        self.raise_()

    def _on_highlight(self, index: int) -> None:
        if self._menu is None:
            return
        self._refresh()

    def _refresh(self) -> None:
        menu = self._menu
        label = "Link to note" if menu.kind is MenuKind.LINK else "Format"
        self.header.setText(f"{label}: {menu.kind.trigger}{menu.query}")

        if self._shown is not menu.candidates:
            with blocked_signals(self.list):
                self.list.clear()
                for candidate in menu.candidates:
                    self.list.addItem(QListWidgetItem(self._label(candidate)))
            self._shown = menu.candidates
            if not menu.candidates:
                self.list.addItem(QListWidgetItem("No matches"))

        if 0 <= menu.highlighted < len(menu.candidates):
            with blocked_signals(self.list):
                self.list.setCurrentRow(menu.highlighted)
            self.list.scrollToItem(self.list.item(menu.highlighted))

    @staticmethod
    def _label(candidate) -> str:
        if isinstance(candidate, LinkCandidate):
            return f'Create "{candidate.title}"' if candidate.is_create else candidate.title
        return f"{candidate.label}  ·  {candidate.description}"

    def _on_clicked(self, item: QListWidgetItem) -> None:
        if self._menu is None:
            return
        row = self.list.row(item)
        if 0 <= row < len(self._menu.candidates):
            self._session.commit(self._menu.candidates[row])


class EditorWidget(QTextEdit):
    """
    Renders an EditorSession and forwards input to it.

    The QTextDocument is a view only: every keystroke goes through the
    session, which owns the structured document and reports markdown.
    """

    markdownEdited = Signal(str)
    linkActivated = Signal(str)

    def __init__(self, notes_provider, parent=None):
        super().__init__(parent)
        self.setAcceptRichText(False)
        self.setAcceptDrops(False)
        self.setUndoRedoEnabled(False)
        self.setPlaceholderText("Start writing... type @ to link a note, / for formatting")

        self._layouts: list[BlockLayout] = []
        self.session = EditorSession(
            notes=notes_provider,
            on_change=self.markdownEdited.emit,
            on_render=self._render,
            on_menu=self._on_menu,
            on_focus=self.setFocus,
            on_link_activated=self.linkActivated.emit,
        )
        self.popup = CommandPopup(self.session, self.viewport())

    # ───────────────────────── public API ─────────────────────────

    def sync(self, note_id: str, markdown: str) -> bool:
        return self.session.sync(note_id, markdown)

    # ───────────────────────── rendering ─────────────────────────

    def _render(self) -> None:
        self._layouts = layout_document(self.session.document)
        with blocked_signals(self):
            self.clear()
            cursor = QTextCursor(self.document())
            for i, layout in enumerate(self._layouts):
                if i:
                    cursor.insertBlock()
                cursor.setBlockFormat(self._block_format(layout))
                for seg in layout.segments:
                    cursor.insertText(seg.text, self._char_format(layout, seg.style))
            self._apply_selection()

    def _apply_selection(self) -> None:
        sel = self.session.selection
        cursor = QTextCursor(self.document())
        cursor.setPosition(self._char_position(sel.start))
        cursor.setPosition(self._char_position(sel.end), QTextCursor.KeepAnchor)
        self.setTextCursor(cursor)
        self.ensureCursorVisible()

    def _char_position(self, pos: Position) -> int:
        if not self._layouts:
            return 0
        index = min(max(pos.block, 0), len(self._layouts) - 1)
        block = self.document().findBlockByNumber(index)
        return block.position() + self._layouts[index].char_for(pos.offset)

    def _position_at(self, char: int):
        block = self.document().findBlock(char)
        index = block.blockNumber()
        if not (0 <= index < len(self._layouts)):
            return Position(0, 0), None
        unit, chip = self._layouts[index].locate(char - block.position())
        return Position(index, unit), chip

    @staticmethod
    def _block_format(layout: BlockLayout) -> QTextBlockFormat:
        fmt = QTextBlockFormat()
        fmt.setBottomMargin(6)
        if layout.kind == "quote":
            fmt.setLeftMargin(12)
        elif layout.kind == "codeblock":
            fmt.setBackground(Qt.lightGray)
        elif layout.kind == "rule":
            fmt.setAlignment(Qt.AlignHCenter)
        return fmt

    def _char_format(self, layout: BlockLayout, style: str) -> QTextCharFormat:
        fmt = QTextCharFormat()
        if layout.kind == "heading":
            fmt.setFontPointSize(_HEADING_SIZES.get(layout.level, 14))
            fmt.setFontWeight(QFont.Bold)
        if style == "bold":
            fmt.setFontWeight(QFont.Bold)
        elif style == "italic":
            fmt.setFontItalic(True)
        elif style in ("code", "codeblock"):
            fmt.setFontFamilies(["monospace"])
        elif style == "chip":
            fmt.setForeground(Qt.darkBlue)
            fmt.setBackground(Qt.cyan)
            fmt.setFontUnderline(True)
        elif style in ("lead", "rule"):
            fmt.setForeground(Qt.gray)
        return fmt

    # ───────────────────────── menus ─────────────────────────

    def _on_menu(self, menu: CommandMenu | None) -> None:
        self.popup.show_menu(menu, scroll_top=self.verticalScrollBar().value())

    def _caret_geometry(self) -> CaretGeometry:
        r = self.cursorRect()
        vp = self.viewport().rect()
        return CaretGeometry(
            caret=Rect(r.left(), r.top(), r.right(), r.bottom()),
            editor=Rect(vp.left(), vp.top(), vp.right(), vp.bottom()),
            scroll_top=self.verticalScrollBar().value(),
        )

    # ───────────────────────── input ─────────────────────────

    def keyPressEvent(self, event):
        if event.matches(QKeySequence.Copy):
            self.copy()
            return
        if event.matches(QKeySequence.SelectAll):
            self.session.select_all()
            return
        if event.matches(QKeySequence.Paste):
            self.session.type_text(QApplication.clipboard().text(), self._caret_geometry())
            return

        key = event.key()
        if key == Qt.Key_Backspace:
            self.session.backspace()
            return
        name = _KEY_NAMES.get(key)
        if name is not None:
            self.session.handle_key(name)
            return

        text = event.text()
        if text and text.isprintable() and not _is_shortcut(event.modifiers()):
            self.session.type_text(text, self._caret_geometry())
            return
        event.ignore()

    def inputMethodEvent(self, event):
        # composed input (dead keys, IMEs) arrives here instead of keyPressEvent
        text = event.commitString()
        if text:
            self.session.type_text(text, self._caret_geometry())
        event.accept()

    def insertFromMimeData(self, source):
        if source.hasText():
            self.session.type_text(source.text(), self._caret_geometry())

    def mouseReleaseEvent(self, event):
        super().mouseReleaseEvent(event)
        if event.button() != Qt.LeftButton:
            return
        cursor = self.textCursor()
        if cursor.hasSelection():
            anchor, _ = self._position_at(cursor.anchor())
            head, _ = self._position_at(cursor.position())
            self.session.select(anchor, head)
            return
        pos, chip = self._position_at(self.cursorForPosition(event.position().toPoint()).position())
        self.session.click(pos, chip)
