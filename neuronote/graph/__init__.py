from .backlinks import BacklinkIndex
from .topology import GraphEdge, GraphNode, GraphTopology, GraphTopologyEngine, build_topology, fingerprint

__all__ = ["BacklinkIndex",
           "GraphEdge",
           "GraphNode",
           "GraphTopology",
           "GraphTopologyEngine",
           "build_topology",
           "fingerprint",
           ]
