from __future__ import annotations

import math
import random

from PySide6.QtCore import QPointF, Qt
from PySide6.QtGui import QBrush, QColor, QPainter, QPen
from PySide6.QtWidgets import (
    QGraphicsEllipseItem,
    QGraphicsLineItem,
    QGraphicsScene,
    QGraphicsSimpleTextItem,
    QGraphicsView,
)

from neuronote.graph.topology import GraphTopology

THEME = {
    "bg": QColor(15, 23, 42),
    "edge": QColor(148, 163, 184, 70),
    "edge_hi": QColor(125, 211, 252, 200),
    "node_fill": QColor(56, 189, 248, 180),
    "node_fill_hover": QColor(125, 211, 252, 230),
    "node_fill_current": QColor(250, 204, 21, 240),
    "node_pen": QColor(186, 230, 253, 160),
    "node_pen_hover": QColor(240, 249, 255, 230),
    "label": QColor(226, 232, 240, 220),
}


class NodeItem(QGraphicsEllipseItem):
    def __init__(self, note_id: str, label: str, x: float, y: float, degree: int, r_base: float = 8.0):
        r = r_base + min(10.0, degree * 1.6)
        super().__init__(-r, -r, 2 * r, 2 * r)
        self.note_id = note_id
        self.r = r

        self.setPos(x, y)
        self.setAcceptHoverEvents(True)
        self.setZValue(10)

        self.pen_default = QPen(THEME["node_pen"])
        self.pen_hover = QPen(THEME["node_pen_hover"])
        self.pen_hover.setWidth(2)
        self.brush_default = QBrush(THEME["node_fill"])
        self.brush_hover = QBrush(THEME["node_fill_hover"])
        self.brush_current = QBrush(THEME["node_fill_current"])
        self._current = False
        self._restyle()

        self.label = QGraphicsSimpleTextItem(label, self)
        self.label.setBrush(QBrush(THEME["label"]))
        self.label.setPos(r + 6, -8)

    def set_current(self, current: bool) -> None:
        self._current = current
        self._restyle()

    def _restyle(self) -> None:
        self.setPen(self.pen_default)
        self.setBrush(self.brush_current if self._current else self.brush_default)

    def hoverEnterEvent(self, event):
        self.setPen(self.pen_hover)
        self.setBrush(self.brush_hover)
        self.setScale(1.15)
        super().hoverEnterEvent(event)

    def hoverLeaveEvent(self, event):
        self._restyle()
        self.setScale(1.0)
        super().hoverLeaveEvent(event)


class GraphView(QGraphicsView):
    """
    Force-directed drawing of a GraphTopology.

    set_topology() redraws only when handed a different topology object;
    the engine returns the same object while the link structure is
    unchanged, so typing never re-lays out the graph.
    """

    def __init__(self, on_open_note, parent=None):
        super().__init__(parent)
        self.on_open_note = on_open_note
        self.setRenderHints(QPainter.Antialiasing)
        self._scene = QGraphicsScene(self)
        self.setScene(self._scene)
        self.setDragMode(QGraphicsView.ScrollHandDrag)
        self.setTransformationAnchor(QGraphicsView.AnchorUnderMouse)
        self.setBackgroundBrush(QBrush(THEME["bg"]))

        self.topology: GraphTopology | None = None
        self.nodes: dict[str, NodeItem] = {}
        self.edge_items: dict[tuple[str, str], QGraphicsLineItem] = {}
        self.build_count = 0
        self._current_id: str | None = None

        self._pen_edge = QPen(THEME["edge"])
        self._pen_edge_hi = QPen(THEME["edge_hi"])
        self._pen_edge_hi.setWidth(2)

    # ───────────────────────── public API ─────────────────────────

    def set_topology(self, topology: GraphTopology | None) -> bool:
        if topology is None or topology is self.topology:
            return False
        self.topology = topology
        self._build(topology)
        if self._current_id:
            self.highlight(self._current_id)
        return True

    def highlight(self, current_id: str | None) -> None:
        self._current_id = current_id
        for nid, node in self.nodes.items():
            node.set_current(nid == current_id)
        for (a, b), line in self.edge_items.items():
            line.setPen(self._pen_edge_hi if current_id in (a, b) else self._pen_edge)

    # ───────────────────────── Qt events ─────────────────────────

    def wheelEvent(self, event):
        factor = 1.15 if event.angleDelta().y() > 0 else (1 / 1.15)
        new_scale = self.transform().m11() * factor
        if new_scale < 0.2 or new_scale > 5.0:
            return
        self.scale(factor, factor)

    def mousePressEvent(self, event):
        item = self.itemAt(event.position().toPoint())
        if event.button() == Qt.LeftButton and item is not None:
            # itemAt() may return the label, walk up to the node
            cur = item
            while cur is not None and not isinstance(cur, NodeItem):
                cur = cur.parentItem()
            if cur is not None:
                self.on_open_note(cur.note_id)
                return
        super().mousePressEvent(event)

    # ───────────────────────── drawing ─────────────────────────

    def _build(self, topology: GraphTopology) -> None:
        prev_pos = {nid: node.pos() for nid, node in self.nodes.items()}
        self._scene.clear()
        self.nodes.clear()
        self.edge_items.clear()
        self.build_count += 1

        ids = [n.id for n in topology.nodes]
        edges = [(e.source, e.target) for e in topology.edges]

        deg = {nid: 0 for nid in ids}
        for a, b in edges:
            deg[a] = deg.get(a, 0) + 1
            deg[b] = deg.get(b, 0) + 1

        rng = random.Random(42)
        pos = {nid: prev_pos.get(nid, QPointF(rng.uniform(-250, 250), rng.uniform(-250, 250))) for nid in ids}
        pos = self._layout_force(ids, edges, pos, steps=min(250, max(30, len(ids) * 2)))

        for n in topology.nodes:
            p = pos[n.id]
            node = NodeItem(n.id, n.title, p.x(), p.y(), degree=deg.get(n.id, 0))
            self._scene.addItem(node)
            self.nodes[n.id] = node

        for a, b in edges:
            na, nb = self.nodes.get(a), self.nodes.get(b)
            if not na or not nb:
                continue
            line = QGraphicsLineItem(na.pos().x(), na.pos().y(), nb.pos().x(), nb.pos().y())
            line.setPen(self._pen_edge)
            line.setZValue(-10)
            self._scene.addItem(line)
            self.edge_items[(a, b)] = line

        self._scene.setSceneRect(self._scene.itemsBoundingRect().adjusted(-120, -120, 120, 120))
        self.fitInView(self._scene.sceneRect(), Qt.KeepAspectRatio)

    @staticmethod
    def _layout_force(nodes, edges, pos, steps=200):
        k_rep = 9000.0   # repulsion
        k_att = 0.020    # attraction along edges
        damp = 0.85

        vel = {n: QPointF(0, 0) for n in nodes}

        for _ in range(steps):
            force = {n: QPointF(0, 0) for n in nodes}

            # O(n^2), fine for personal note sets
            for i in range(len(nodes)):
                a = nodes[i]
                pa = pos[a]
                for j in range(i + 1, len(nodes)):
                    b = nodes[j]
                    pb = pos[b]
                    dx = pa.x() - pb.x()
                    dy = pa.y() - pb.y()
                    f = k_rep / (dx * dx + dy * dy + 0.01)
                    force[a] = force[a] + QPointF(f * dx, f * dy)
                    force[b] = force[b] + QPointF(-f * dx, -f * dy)

            for a, b in edges:
                if a not in pos or b not in pos:
                    continue
                dx = pos[b].x() - pos[a].x()
                dy = pos[b].y() - pos[a].y()
                force[a] = force[a] + QPointF(k_att * dx, k_att * dy)
                force[b] = force[b] + QPointF(-k_att * dx, -k_att * dy)

            for n in nodes:
                v = vel[n] * damp + force[n] * 0.0015
                # keep isolated pairs from flying apart
                speed = math.hypot(v.x(), v.y())
                if speed > 40.0:
                    v = v * (40.0 / speed)
                vel[n] = v
                pos[n] = pos[n] + v

        return pos
