# neuronote/ui/resizer.py

from __future__ import annotations

import logging

from PySide6.QtCore import QEvent, QObject, QPoint, Qt, Signal
from PySide6.QtWidgets import QApplication, QWidget

from neuronote.settings import RIGHT_PANEL_MAX_WIDTH, RIGHT_PANEL_MIN_WIDTH

log = logging.getLogger(__name__)


def next_panel_width(
    window_width: int,
    cursor_x: int,
    current: int,
    *,
    minimum: int = RIGHT_PANEL_MIN_WIDTH,
    maximum: int = RIGHT_PANEL_MAX_WIDTH,
) -> int:
    """
    Width of a right-docked panel whose left edge follows the cursor.
    Out-of-range widths are ignored (the panel keeps its current width).
    """
    width = window_width - cursor_x
    if minimum < width < maximum:
        return width
    return current


class PanelResizeHandle(QWidget):
    """
    Thin drag strip on the left edge of the right panel.

    While a drag is in progress the handle filters mouse events for the
    whole application, so moving fast over other widgets keeps resizing.
    The filter is removed on release.
    """

    widthChanged = Signal(int)

    def __init__(self, window: QWidget, *, width: int, parent=None):
        super().__init__(parent)
        self._window = window
        self.panel_width = width
        self._dragging = False

        self.setFixedWidth(5)
        self.setCursor(Qt.SplitHCursor)

    @property
    def dragging(self) -> bool:
        return self._dragging

    # ───────────────────────── drag lifecycle ─────────────────────────

    def start_drag(self) -> None:
        if self._dragging:
            return
        self._dragging = True
        QApplication.instance().installEventFilter(self)
        log.debug("Panel resize started: width=%d", self.panel_width)

    def drag_to(self, global_x: int) -> None:
        x = global_x - self._window.mapToGlobal(QPoint(0, 0)).x()
        width = next_panel_width(self._window.width(), x, self.panel_width)
        if width != self.panel_width:
            self.panel_width = width
            self.widthChanged.emit(width)

    def end_drag(self) -> None:
        if not self._dragging:
            return
        self._dragging = False
        QApplication.instance().removeEventFilter(self)
        log.debug("Panel resize finished: width=%d", self.panel_width)

    # ───────────────────────── Qt events ─────────────────────────

    def mousePressEvent(self, event):
        if event.button() == Qt.LeftButton:
            self.start_drag()
            event.accept()
            return
        super().mousePressEvent(event)

    def eventFilter(self, obj: QObject, event: QEvent) -> bool:
        if not self._dragging:
            return False
        if event.type() == QEvent.MouseMove:
            self.drag_to(int(event.globalPosition().x()))
            return True
        if event.type() == QEvent.MouseButtonRelease:
            self.end_drag()
            return True
        return False
