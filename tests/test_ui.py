from PySide6.QtCore import QEvent, Qt
from PySide6.QtGui import QKeyEvent
from PySide6.QtWidgets import QApplication

from neuronote.core.document import BulletItem, LinkChip, Text
from neuronote.core.markdown_codec import encode
from neuronote.core.triggers import MenuKind
from neuronote.ui.editor_widget import EditorWidget
from neuronote.ui.layout import layout_block, layout_document
from neuronote.ui.resizer import PanelResizeHandle, next_panel_width
from neuronote.ui.text import note_preview, strip_markup


def test_panel_width_is_clamped():
    assert next_panel_width(1200, 700, 400) == 500
    assert next_panel_width(1200, 1100, 400) == 400
    assert next_panel_width(1200, 300, 400) == 400
    assert next_panel_width(1200, 950, 400) == 400


def test_resize_filter_only_lives_during_a_drag(qtbot):
    from PySide6.QtWidgets import QWidget

    window = QWidget()
    qtbot.addWidget(window)
    handle = PanelResizeHandle(window, width=500, parent=window)

    assert handle.eventFilter(window, QEvent(QEvent.MouseMove)) is False
    handle.start_drag()
    assert handle.dragging
    assert handle.eventFilter(window, QEvent(QEvent.MouseButtonRelease)) is True
    assert not handle.dragging


def test_layout_maps_units_and_chips():
    layout = layout_block(BulletItem((Text("a"), LinkChip("Moon"), Text("b"))))
    assert layout.text == "• aMoonb"
    assert layout.unit_chars == (2, 3, 7, 8)
    assert layout.locate(4) == (1, LinkChip("Moon"))
    assert layout.locate(6) == (2, LinkChip("Moon"))
    assert layout.locate(8) == (3, None)
    assert layout.locate(0) == (0, None)


def test_layout_numbers_runs():
    layouts = layout_document(encode("1. a\n1. b"))
    assert [lay.text for lay in layouts] == ["1. a", "2. b"]


def test_previews():
    assert strip_markup("# T [[x]] **b**") == " T x b"
    assert note_preview("") == "No content"
    assert len(note_preview("x" * 100)) == 40


def test_editor_widget_renders_and_routes_keys(qtbot):
    widget = EditorWidget(lambda: [])
    qtbot.addWidget(widget)
    widget.show()
    qtbot.waitExposed(widget)

    edited = []
    widget.markdownEdited.connect(edited.append)
    widget.sync("n1", "Hello")
    assert widget.toPlainText() == "Hello"

    qtbot.keyClicks(widget, " /")
    assert edited[-1] == "Hello /"
    assert widget.session.menu is not None
    assert not widget.popup.isHidden()

    qtbot.keyClick(widget, Qt.Key_Escape)
    assert widget.session.menu is None
    assert widget.popup.isHidden()
    assert widget.toPlainText() == "Hello /"


def _editor(qtbot, markdown=""):
    widget = EditorWidget(lambda: [])
    qtbot.addWidget(widget)
    widget.show()
    qtbot.waitExposed(widget)
    widget.sync("n1", markdown)
    return widget


def test_altgr_text_is_typed(qtbot):
    # AltGr+Q gives "@" on German layouts and reaches Qt as Ctrl+Alt on Windows
    widget = _editor(qtbot)
    event = QKeyEvent(QEvent.KeyPress, Qt.Key_At, Qt.ControlModifier | Qt.AltModifier, "@")
    QApplication.sendEvent(widget, event)

    assert widget.toPlainText() == "@"
    assert widget.session.menu is not None
    assert widget.session.menu.kind is MenuKind.LINK


def test_ctrl_shortcuts_do_not_type(qtbot):
    widget = _editor(qtbot, "note")
    QApplication.sendEvent(widget, QKeyEvent(QEvent.KeyPress, Qt.Key_B, Qt.ControlModifier, "b"))
    assert widget.toPlainText() == "note"


def test_delete_home_end_keys(qtbot):
    widget = _editor(qtbot, "Hello")
    qtbot.keyClick(widget, Qt.Key_Home)
    qtbot.keyClick(widget, Qt.Key_Delete)
    assert widget.toPlainText() == "ello"

    qtbot.keyClick(widget, Qt.Key_End)
    qtbot.keyClicks(widget, "!")
    assert widget.toPlainText() == "ello!"
