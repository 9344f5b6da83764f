"""Dijkstra single-source shortest paths (non-negative weights)."""

import math
from dataclasses import dataclass
from typing import Dict, List, Optional, Set

from graphboard.algorithms.adjacency import Adjacency
from graphboard.algorithms.errors import AlgorithmError, StartNodeNotFoundError


@dataclass
class PathInfo:
    distance: float
    predecessor: Optional[str]


def dijkstra(adj: Adjacency, start: str) -> Dict[str, PathInfo]:
    """
    Shortest distance and predecessor of every node from ``start``.

    Unreachable nodes get ``math.inf`` and no predecessor. The next node is
    picked by a linear scan over unvisited nodes in insertion order, so ties
    resolve to the earliest node.
    """
    if start is None or start not in adj:
        raise StartNodeNotFoundError(start)

    distance = {node: math.inf for node in adj}
    predecessor: Dict[str, Optional[str]] = {node: None for node in adj}
    visited: Set[str] = set()
    distance[start] = 0

    while True:
        best, best_distance = None, math.inf
        for node in adj:
            if node not in visited and distance[node] < best_distance:
                best, best_distance = node, distance[node]
        if best is None:
            break
        visited.add(best)
        for entry in adj[best]:
            if entry.weight < 0:
                raise AlgorithmError(f"Negative weight {entry.weight} on edge {entry.src} -> {entry.dst}")
            if entry.dst in visited:
                continue
            candidate = distance[best] + entry.weight
            if candidate < distance[entry.dst]:
                distance[entry.dst] = candidate
                predecessor[entry.dst] = best

    return {node: PathInfo(distance[node], predecessor[node]) for node in adj}


def shortest_path(adj: Adjacency, start: str, end: str) -> Optional[List[str]]:
    """Node ids from ``start`` to ``end`` inclusive, or None if unreachable."""
    if end not in adj:
        raise StartNodeNotFoundError(end)
    paths = dijkstra(adj, start)
    if math.isinf(paths[end].distance):
        return None
    path = [end]
    while path[-1] != start:
        path.append(paths[path[-1]].predecessor)
    path.reverse()
    return path
