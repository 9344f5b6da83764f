"""Kruskal minimum spanning forest."""

from dataclasses import dataclass, field
from typing import List

from graphboard.algorithms.adjacency import Adjacency, AdjacencyEntry


@dataclass
class SpanningForest:
    edges: List[AdjacencyEntry] = field(default_factory=list)
    total_weight: float = 0


def kruskal(adj: Adjacency) -> SpanningForest:
    """
    Minimum spanning forest, one tree per connected component.

    Candidates are the distinct edge ids sorted by weight (stable, so equal
    weights keep adjacency order). Components are tracked by merging
    member lists, every node pointing at its component's shared list.
    """
    seen = set()
    candidates = []
    for entries in adj.values():
        for entry in entries:
            if entry.edge_id in seen:
                continue
            seen.add(entry.edge_id)
            candidates.append(entry)
    candidates.sort(key=lambda e: e.weight)

    component = {node: [node] for node in adj}
    remaining_components = len(adj)
    forest = SpanningForest()

    for entry in candidates:
        if remaining_components <= 1:
            break
        src_comp = component[entry.src]
        dst_comp = component[entry.dst]
        if src_comp is dst_comp:
            continue
        forest.edges.append(entry)
        forest.total_weight += entry.weight
        merged = src_comp + dst_comp
        for node in merged:
            component[node] = merged
        remaining_components -= 1

    return forest
