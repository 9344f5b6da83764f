"""
Adjacency view consumed by every algorithm.

``{node_id: [AdjacencyEntry, ...]}`` in node insertion order. An undirected
edge contributes an entry in both directions, sharing its edge id, so results
can always be projected back onto the live edges.
"""

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, TYPE_CHECKING

import networkx as nx

if TYPE_CHECKING:
    from graphboard.state import GraphState


@dataclass(frozen=True)
class AdjacencyEntry:
    src: str
    dst: str
    weight: float
    edge_id: Optional[str] = None


Adjacency = Dict[str, List[AdjacencyEntry]]


def adjacency_from_edges(nodes: Iterable[str], edges: Iterable[tuple], undirected: bool = False) -> Adjacency:
    """
    Build an adjacency view from plain ids.

    ``edges`` holds ``(src, dst, weight, directed)`` or ``(src, dst, weight, directed, edge_id)``
    tuples. With ``undirected=True`` every edge is walked both ways regardless
    of its own flag (components, spanning forests, colouring).
    """
    adj: Adjacency = {node: [] for node in nodes}
    for index, edge in enumerate(edges):
        src, dst, weight, directed = edge[:4]
        edge_id = edge[4] if len(edge) > 4 else f"e{index}"
        adj.setdefault(src, []).append(AdjacencyEntry(src, dst, weight, edge_id))
        adj.setdefault(dst, [])
        if undirected or not directed:
            adj[dst].append(AdjacencyEntry(dst, src, weight, edge_id))
    return adj


def build_adjacency(state: "GraphState", undirected: bool = False) -> Adjacency:
    """Adjacency view of the live graph, keyed by node id."""
    return adjacency_from_edges(
        (node.id for node in state.nodes),
        ((e.src.id, e.dst.id, e.weight, e.directed, e.id) for e in state.edges),
        undirected=undirected,
    )


def edge_count(adj: Adjacency) -> int:
    return len({entry.edge_id for entries in adj.values() for entry in entries})


def to_networkx(state: "GraphState") -> nx.MultiDiGraph:
    """
    Export the live graph for interop. Undirected edges become a pair of
    opposite arcs tagged ``directed=False``.
    """
    graph = nx.MultiDiGraph()
    for node in state.nodes:
        graph.add_node(node.id, label=node.label, x=node.x, y=node.y, r=node.r)
    for edge in state.edges:
        graph.add_edge(edge.src.id, edge.dst.id, key=edge.id, weight=edge.weight, directed=edge.directed)
        if not edge.directed:
            graph.add_edge(edge.dst.id, edge.src.id, key=edge.id, weight=edge.weight, directed=False)
    return graph
