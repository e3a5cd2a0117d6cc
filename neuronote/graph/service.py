# neuronote/graph/service.py

from __future__ import annotations

import logging
from typing import Sequence

from PySide6.QtCore import QObject, QTimer, Signal

from neuronote.core.models import Note
from neuronote.graph.topology import GraphTopology, GraphTopologyEngine
from neuronote.settings import GRAPH_DEBOUNCE_MS

log = logging.getLogger(__name__)


class GraphService(QObject):
    """
    Debounced graph recomputation.

    Responsibilities:
    - keep only the latest requested note snapshot
    - recompute once the edits have settled
    - emit topologyChanged only when the topology object changes
    """

    topologyChanged = Signal(object)

    def __init__(self, *, engine: GraphTopologyEngine | None = None, debounce_ms: int = GRAPH_DEBOUNCE_MS, parent=None):
        super().__init__(parent)

        self._engine = engine or GraphTopologyEngine()
        self._topology: GraphTopology | None = None

        self._debounce_timer = QTimer(self)
        self._debounce_timer.setSingleShot(True)
        self._debounce_timer.setInterval(debounce_ms)
        self._debounce_timer.timeout.connect(self._build_now)

        # last requested snapshot
        self._pending_snapshot: tuple[Note, ...] | None = None

    # ───────────────────────── public API ─────────────────────────

    @property
    def topology(self) -> GraphTopology | None:
        return self._topology

    def request_build(self, notes: Sequence[Note], *, immediate: bool = False) -> None:
        """
        Request graph rebuild.

        If immediate=False → debounced.
        If immediate=True  → build immediately.
        """
        self._pending_snapshot = tuple(notes)

        if immediate:
            if self._debounce_timer.isActive():
                self._debounce_timer.stop()
            self._build_now()
        else:
            self._debounce_timer.start()

    def flush(self) -> None:
        """Run a pending build now, if there is one."""
        if self._debounce_timer.isActive():
            self._debounce_timer.stop()
            self._build_now()

    def is_pending(self) -> bool:
        return self._debounce_timer.isActive()

    # ───────────────────────── internals ─────────────────────────

    def _build_now(self) -> None:
        if self._pending_snapshot is None:
            return

        snap = self._pending_snapshot
        self._pending_snapshot = None

        topology = self._engine.recompute(snap)
        if topology is self._topology:
            return
        self._topology = topology
        self.topologyChanged.emit(topology)
