from __future__ import annotations

import logging

from PySide6.QtCore import QSettings, Qt
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QListWidget,
    QListWidgetItem,
    QMainWindow,
    QMessageBox,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from neuronote.app_settings import SettingsKeys, get_bool, get_int, get_str, safe_set_setting
from neuronote.errors import LastNoteError
from neuronote.services.workspace import Workspace
from neuronote.settings import APP_NAME, RIGHT_PANEL_DEFAULT_WIDTH
from neuronote.ui.editor_widget import EditorWidget
from neuronote.ui.graph_view import GraphView
from neuronote.ui.qt_utils import blocked_signals
from neuronote.ui.resizer import PanelResizeHandle
from neuronote.ui.text import note_preview, strip_markup

log = logging.getLogger(__name__)


class MainWindow(QMainWindow):
    def __init__(self, workspace: Workspace, settings: QSettings | None = None):
        super().__init__()
        self.setWindowTitle("NeuroNote")
        self.ws = workspace
        self._settings = settings or QSettings(APP_NAME, APP_NAME)

        panel_width = get_int(self._settings, SettingsKeys.RIGHT_PANEL_WIDTH, RIGHT_PANEL_DEFAULT_WIDTH)

        # --- SIDEBAR ---
        self.sidebar = QWidget()
        self.sidebar.setFixedWidth(300)
        self.search = QLineEdit()
        self.search.setPlaceholderText("Search notes...")
        self.new_btn = QPushButton("+")
        self.new_btn.setToolTip("New Note")
        self.note_list = QListWidget()

        top = QHBoxLayout()
        top.addWidget(QLabel("NeuroNote"))
        top.addStretch(1)
        top.addWidget(self.new_btn)
        side = QVBoxLayout(self.sidebar)
        side.addLayout(top)
        side.addWidget(self.search)
        side.addWidget(self.note_list)

        # --- HEADER ---
        self.sidebar_btn = QPushButton("☰")
        self.title_edit = QLineEdit()
        self.title_edit.setPlaceholderText("Note title")
        self.delete_btn = QPushButton("Delete")
        self.graph_btn = QPushButton("Graph")
        self.graph_btn.setCheckable(True)
        self.analyze_btn = QPushButton("Suggest links")

        header = QHBoxLayout()
        header.addWidget(self.sidebar_btn)
        header.addWidget(self.title_edit, 1)
        header.addWidget(self.delete_btn)
        header.addWidget(self.analyze_btn)
        header.addWidget(self.graph_btn)

        # --- SUGGESTIONS + EDITOR ---
        self.suggestion_bar = QWidget()
        self._suggestion_layout = QHBoxLayout(self.suggestion_bar)
        self.suggestion_bar.hide()

        self.editor = EditorWidget(lambda: self.ws.notes.snapshot())

        center = QWidget()
        center_lay = QVBoxLayout(center)
        center_lay.addLayout(header)
        center_lay.addWidget(self.suggestion_bar)
        center_lay.addWidget(self.editor, 1)

        # --- RIGHT PANEL ---
        self.right_panel = QWidget()
        self.right_panel.setFixedWidth(panel_width)
        self.graph_view = GraphView(self._open_note)
        self.backlinks = QListWidget()
        right = QVBoxLayout(self.right_panel)
        right.addWidget(QLabel("Knowledge Graph"))
        right.addWidget(self.graph_view, 2)
        right.addWidget(QLabel("Backlinks"))
        right.addWidget(self.backlinks, 1)

        self.resize_handle = PanelResizeHandle(self, width=panel_width)
        self.resize_handle.widthChanged.connect(self._on_panel_width)

        root = QWidget()
        row = QHBoxLayout(root)
        row.setContentsMargins(0, 0, 0, 0)
        row.setSpacing(0)
        row.addWidget(self.sidebar)
        row.addWidget(center, 1)
        row.addWidget(self.resize_handle)
        row.addWidget(self.right_panel)
        self.setCentralWidget(root)

        self._wire()

        show_graph = get_bool(self._settings, SettingsKeys.SHOW_GRAPH, True)
        self.graph_btn.setChecked(show_graph)
        self._set_graph_visible(show_graph)
        self.sidebar.setVisible(get_bool(self._settings, SettingsKeys.SHOW_SIDEBAR, True))

        geo = self._settings.value(SettingsKeys.UI_GEOMETRY)
        if geo:
            self.restoreGeometry(geo)
        else:
            self.resize(1280, 800)

    # ───────────────────────── wiring ─────────────────────────

    def _wire(self) -> None:
        ws = self.ws
        ws.notesChanged.connect(self._refresh_list)
        ws.activeNoteChanged.connect(self._on_active_changed)
        ws.activeContentChanged.connect(self.editor.sync)
        ws.backlinksChanged.connect(self._refresh_backlinks)
        ws.graphChanged.connect(self.graph_view.set_topology)
        ws.suggestionsChanged.connect(self._refresh_suggestions)

        self.search.textChanged.connect(ws.set_search_query)
        self.new_btn.clicked.connect(lambda: ws.create_note())
        self.note_list.itemClicked.connect(lambda item: self._open_note(item.data(Qt.UserRole)))
        self.title_edit.textEdited.connect(lambda text: ws.update_active(title=text))
        self.delete_btn.clicked.connect(self._delete_active)
        self.graph_btn.toggled.connect(self._set_graph_visible)
        self.sidebar_btn.clicked.connect(self._toggle_sidebar)
        self.analyze_btn.clicked.connect(ws.analyze_links)

        self.editor.markdownEdited.connect(lambda md: ws.update_active(content=md))
        self.editor.linkActivated.connect(self._follow_link)
        self.backlinks.itemClicked.connect(self._on_backlink_clicked)

    def restore_last_note(self) -> None:
        last = get_str(self._settings, SettingsKeys.LAST_NOTE, "")
        if last and last in self.ws.notes:
            self.ws.set_active(last)

    # ───────────────────────── slots ─────────────────────────

    def _open_note(self, note_id: str) -> None:
        self.ws.set_active(note_id)

    def _follow_link(self, title: str) -> None:
        def confirm(t: str) -> bool:
            answer = QMessageBox.question(self, "Create note", f'Note "{t}" does not exist. Create it?')
            return answer == QMessageBox.Yes

        self.ws.open_link(title, confirm=confirm)

    def _delete_active(self) -> None:
        note = self.ws.active_note
        if note is None:
            return
        if len(self.ws.notes) <= 1:
            QMessageBox.information(self, "Delete note", str(LastNoteError()))
            return
        answer = QMessageBox.question(self, "Delete note", f'Are you sure you want to delete "{note.title}"?')
        if answer != QMessageBox.Yes:
            return
        try:
            self.ws.delete_note(note.id)
        except LastNoteError as exc:
            QMessageBox.information(self, "Delete note", str(exc))

    def _on_active_changed(self, note_id: str) -> None:
        note = self.ws.notes.find(note_id)
        if note is None:
            return
        with blocked_signals(self.title_edit):
            self.title_edit.setText(note.title)
        self.graph_view.highlight(note_id)
        self._refresh_list()
        safe_set_setting(self._settings, SettingsKeys.LAST_NOTE, note_id)

    def _refresh_list(self) -> None:
        active = self.ws.active_id
        with blocked_signals(self.note_list):
            self.note_list.clear()
            for note in self.ws.filtered_notes():
                item = QListWidgetItem(f"{note.title}\n{note_preview(note.content)}")
                item.setData(Qt.UserRole, note.id)
                self.note_list.addItem(item)
                if note.id == active:
                    item.setSelected(True)

    def _refresh_backlinks(self, notes: list) -> None:
        self.backlinks.clear()
        if not notes:
            self.backlinks.addItem(QListWidgetItem("No other notes link here yet."))
            return
        for note in notes:
            item = QListWidgetItem(f"{note.title}\n{strip_markup(note.content)[:120]}")
            item.setData(Qt.UserRole, note.id)
            self.backlinks.addItem(item)

    def _on_backlink_clicked(self, item: QListWidgetItem) -> None:
        note_id = item.data(Qt.UserRole)
        if note_id:
            self._open_note(note_id)

    def _refresh_suggestions(self, titles: list) -> None:
        while self._suggestion_layout.count():
            w = self._suggestion_layout.takeAt(0).widget()
            if w is not None:
                w.deleteLater()
        if not titles:
            self.suggestion_bar.hide()
            return
        self._suggestion_layout.addWidget(QLabel("Suggested Connections"))
        for title in titles:
            btn = QPushButton(f'+ Link to "{title}"')
            btn.clicked.connect(lambda _=False, t=title: self.ws.accept_suggestion(t))
            self._suggestion_layout.addWidget(btn)
        dismiss = QPushButton("✕")
        dismiss.clicked.connect(self.ws.dismiss_suggestions)
        self._suggestion_layout.addWidget(dismiss)
        self.suggestion_bar.show()

    def _set_graph_visible(self, visible: bool) -> None:
        self.right_panel.setVisible(visible)
        self.resize_handle.setVisible(visible)
        if visible:
            self.graph_view.set_topology(self.ws.graph.topology)
        safe_set_setting(self._settings, SettingsKeys.SHOW_GRAPH, visible)

    def _toggle_sidebar(self) -> None:
        visible = not self.sidebar.isVisible()
        self.sidebar.setVisible(visible)
        safe_set_setting(self._settings, SettingsKeys.SHOW_SIDEBAR, visible)

    def _on_panel_width(self, width: int) -> None:
        self.right_panel.setFixedWidth(width)
        safe_set_setting(self._settings, SettingsKeys.RIGHT_PANEL_WIDTH, width)

    def closeEvent(self, event):
        self.ws.graph.flush()
        self.ws.save_now()
        safe_set_setting(self._settings, SettingsKeys.UI_GEOMETRY, self.saveGeometry())
        super().closeEvent(event)
