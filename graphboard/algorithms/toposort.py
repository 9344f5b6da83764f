"""
Topological ordering: Kahn's algorithm and reverse post-order DFS.

Both return the same TopoResult shape. A cyclic graph is not an error here;
``has_cycle`` is set and ``remaining`` lists the nodes that could not be
ordered. Callers that need acyclicity (PERT) raise on it themselves.
"""

from collections import deque
from dataclasses import dataclass
from typing import Dict, List, Optional

from graphboard.algorithms.adjacency import Adjacency, AdjacencyEntry


@dataclass
class TopoResult:
    order: List[str]
    edges: List[AdjacencyEntry]
    has_cycle: bool
    remaining: List[str]
    # Longest-path depth from a source; None for nodes never ordered
    levels: Dict[str, Optional[int]]


def toposort_kahn(adj: Adjacency) -> TopoResult:
    """
    Kahn's algorithm. On a cyclic graph ``remaining`` holds every node that
    never reached in-degree zero: the cycle's nodes plus the nodes downstream
    of it.
    """
    in_degree = {node: 0 for node in adj}
    levels: Dict[str, Optional[int]] = {node: None for node in adj}
    for entries in adj.values():
        for entry in entries:
            in_degree[entry.dst] += 1

    queue = deque()
    for node, degree in in_degree.items():
        if degree == 0:
            queue.append(node)
            levels[node] = 0

    order: List[str] = []
    edges: List[AdjacencyEntry] = []
    while queue:
        node = queue.popleft()
        order.append(node)
        for entry in adj[node]:
            in_degree[entry.dst] -= 1
            level = levels[node] + 1
            if levels[entry.dst] is None or levels[entry.dst] < level:
                levels[entry.dst] = level
            if in_degree[entry.dst] == 0:
                queue.append(entry.dst)
            edges.append(entry)

    emitted = set(order)
    remaining = [node for node in adj if node not in emitted]
    for node in remaining:
        levels[node] = None
    return TopoResult(order, edges, bool(remaining), remaining, levels)


def toposort_dfs(adj: Adjacency) -> TopoResult:
    """
    Reverse post-order DFS. Nodes lying on a cycle (found through back edges)
    go to ``remaining`` and are left out of the order together with the
    nodes only reachable through them.
    """
    WHITE, GREY, BLACK = 0, 1, 2
    color = {node: WHITE for node in adj}
    postorder: List[str] = []
    on_cycle = set()

    for root in adj:
        if color[root] != WHITE:
            continue
        color[root] = GREY
        path = [root]
        stack = [iter(adj[root])]
        while stack:
            entry = next(stack[-1], None)
            if entry is None:
                stack.pop()
                node = path.pop()
                color[node] = BLACK
                postorder.append(node)
                continue
            if color[entry.dst] == GREY:
                # Back edge: everything on the path from dst onwards is a cycle
                on_cycle.update(path[path.index(entry.dst):])
            elif color[entry.dst] == WHITE:
                color[entry.dst] = GREY
                path.append(entry.dst)
                stack.append(iter(adj[entry.dst]))

    blocked = set(on_cycle)
    if blocked:
        # Downstream of a cycle cannot be ordered either
        frontier = list(blocked)
        while frontier:
            node = frontier.pop()
            for entry in adj[node]:
                if entry.dst not in blocked:
                    blocked.add(entry.dst)
                    frontier.append(entry.dst)

    order = [node for node in reversed(postorder) if node not in blocked]
    position = {node: i for i, node in enumerate(order)}
    edges = sorted(
        (entry for node in order for entry in adj[node] if entry.dst in position),
        key=lambda e: position[e.src],
    )

    levels: Dict[str, Optional[int]] = {node: None for node in adj}
    for node in order:
        if levels[node] is None:
            levels[node] = 0
        for entry in adj[node]:
            if entry.dst in position and (levels[entry.dst] is None or levels[entry.dst] < levels[node] + 1):
                levels[entry.dst] = levels[node] + 1

    remaining = [node for node in adj if node in blocked]
    return TopoResult(order, edges, bool(on_cycle), remaining, levels)
