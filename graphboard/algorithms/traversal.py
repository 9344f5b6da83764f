"""Breadth-first and depth-first traversal, connected components."""

from collections import deque
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Set

from graphboard.algorithms.adjacency import Adjacency, AdjacencyEntry
from graphboard.algorithms.errors import StartNodeNotFoundError


@dataclass
class TraversalResult:
    order: List[str]
    visited: Set[str]
    # Root maps to None, unreached nodes are absent
    predecessors: Dict[str, Optional[str]]
    # Tree edges, in discovery order
    edges: List[AdjacencyEntry] = field(default_factory=list)


def _check_start(adj: Adjacency, start: str) -> None:
    if start is None or start not in adj:
        raise StartNodeNotFoundError(start)


def bfs(adj: Adjacency, start: str, visited: Optional[Set[str]] = None,
        skip: Optional[str] = None) -> TraversalResult:
    """
    Visit every node reachable from ``start`` in FIFO order.

    ``visited`` may be shared between calls (components). ``skip`` is never
    entered, as if it had been removed from the graph.
    """
    _check_start(adj, start)
    visited = set() if visited is None else visited
    visited.add(start)
    queue = deque([start])
    result = TraversalResult(order=[], visited=visited, predecessors={start: None})

    while queue:
        node = queue.popleft()
        result.order.append(node)
        for entry in adj.get(node, []):
            if entry.dst == skip or entry.dst in visited:
                continue
            visited.add(entry.dst)
            result.predecessors[entry.dst] = node
            result.edges.append(entry)
            queue.append(entry.dst)
    return result


def dfs(adj: Adjacency, start: str, visited: Optional[Set[str]] = None) -> TraversalResult:
    """
    Visit every node reachable from ``start`` depth first.

    Uses an explicit stack; neighbours are pushed in reverse so the visit
    order matches the recursive formulation.
    """
    _check_start(adj, start)
    visited = set() if visited is None else visited
    result = TraversalResult(order=[], visited=visited, predecessors={})
    stack = [(start, None)]

    while stack:
        node, entry = stack.pop()
        if node in visited and entry is not None:
            continue
        visited.add(node)
        result.order.append(node)
        result.predecessors[node] = entry.src if entry is not None else None
        if entry is not None:
            result.edges.append(entry)
        for neighbour in reversed(adj.get(node, [])):
            if neighbour.dst not in visited:
                stack.append((neighbour.dst, neighbour))
    return result


def connected_components(adj: Adjacency) -> List[List[str]]:
    """
    Repeated BFS over unvisited nodes, in insertion order.

    Pass an undirected view to get weakly connected components of a directed graph.
    """
    visited: Set[str] = set()
    components = []
    for node in adj:
        if node not in visited:
            components.append(bfs(adj, node, visited).order)
    return components
