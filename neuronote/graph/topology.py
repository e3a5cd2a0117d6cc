# neuronote/graph/topology.py

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import Sequence

from neuronote.core.models import Note
from neuronote.core.wikilinks import extract_link_titles, unique_link_titles

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class GraphNode:
    id: str
    title: str


@dataclass(frozen=True)
class GraphEdge:
    source: str
    target: str


@dataclass(frozen=True)
class GraphTopology:
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()

    def to_payload(self) -> dict:
        return {
            "nodes": [{"id": n.id, "title": n.title} for n in self.nodes],
            "edges": [{"source": e.source, "target": e.target} for e in self.edges],
        }


def fingerprint(notes: Sequence[Note]) -> str:
    """
    Identity of everything the graph depends on: ids, titles and the
    sorted link titles of each note, in input order. Body text outside
    links does not count, so ordinary typing keeps the same fingerprint.
    """
    return json.dumps(
        [[n.id, n.title, sorted(extract_link_titles(n.content))] for n in notes],
        ensure_ascii=False,
    )


def build_topology(notes: Sequence[Note]) -> GraphTopology:
    # first note wins on duplicate titles
    by_title: dict[str, str] = {}
    for n in notes:
        by_title.setdefault(n.title, n.id)

    nodes = tuple(GraphNode(n.id, n.title) for n in notes)
    edges: list[GraphEdge] = []
    for n in notes:
        for title in unique_link_titles(n.content):
            target = by_title.get(title)
            if target is None or target == n.id:
                continue
            edges.append(GraphEdge(n.id, target))

    return GraphTopology(nodes=nodes, edges=tuple(edges))


class GraphTopologyEngine:
    """
    Memoized graph builder.

    recompute() returns the very same GraphTopology object for as long as
    the fingerprint is unchanged, so views can compare by identity.
    """

    def __init__(self):
        self._cell: tuple[str, GraphTopology] | None = None

    # ───────────────────────── public API ─────────────────────────

    def recompute(self, notes: Sequence[Note]) -> GraphTopology:
        fp = fingerprint(notes)
        if self._cell is not None and self._cell[0] == fp:
            return self._cell[1]

        topology = build_topology(notes)
        self._cell = (fp, topology)
        log.debug("Graph rebuilt: nodes=%d edges=%d", len(topology.nodes), len(topology.edges))
        return topology

    @property
    def current(self) -> GraphTopology | None:
        return None if self._cell is None else self._cell[1]

    def reset(self) -> None:
        self._cell = None
