"""Greedy graph colouring and the palettes used to show it."""

import random
from typing import Dict, List, Optional

from graphboard import constants
from graphboard.algorithms.adjacency import Adjacency
from graphboard.algorithms.errors import StartNodeNotFoundError


def _color_from(adj: Adjacency, node: str, groups: Dict[str, Optional[int]]) -> None:
    """Lowest colour unused by the neighbours, then recurse into uncoloured neighbours."""
    used = {groups[entry.dst] for entry in adj[node]}
    color = 0
    while color in used:
        color += 1
    groups[node] = color
    for entry in adj[node]:
        if groups[entry.dst] is None:
            _color_from(adj, entry.dst, groups)


def _color_all(adj: Adjacency, start: str) -> Dict[str, int]:
    groups: Dict[str, Optional[int]] = {node: None for node in adj}
    _color_from(adj, start, groups)
    # Other components, in insertion order
    for node in adj:
        if groups[node] is None:
            _color_from(adj, node, groups)
    return groups


def color_borders(adj: Adjacency, start: Optional[str] = None) -> Dict[str, int]:
    """
    Assign each node a colour index not used by any neighbour.

    Without ``start`` every node is tried as the starting point and the
    assignment with the fewest colours wins (first one on ties). Pass an
    undirected view so both ends of a directed edge see each other.
    """
    if not adj:
        return {}
    if start is not None:
        if start not in adj:
            raise StartNodeNotFoundError(start)
        return _color_all(adj, start)

    best, best_count = None, None
    for node in adj:
        groups = _color_all(adj, node)
        count = max(groups.values()) + 1
        if best_count is None or count < best_count:
            best, best_count = groups, count
    return best


def color_count(groups: Dict[str, int]) -> int:
    return max(groups.values()) + 1 if groups else 0


def color_palette(n: int, rng: Optional[random.Random] = None) -> List[str]:
    """
    ``n`` colours: the fixed palette first, then random hex colours.
    Always returns at least the whole fixed palette.
    """
    colors = list(constants.COLORS_PALETTE)
    rng = rng or random.Random()
    while len(colors) < n:
        colors.append("#" + "".join(rng.choice("0123456789ABCDEF") for _ in range(6)))
    return colors


def heatmap_palette(n: int) -> List[str]:
    """``n`` HSL colours going from green (first) to red (last)."""
    if n <= 0:
        return []
    if n == 1:
        return ["hsl(120, 100%, 50%)"]
    step = 120 / (n - 1)
    return [f"hsl({120 - i * step:g}, 100%, 50%)" for i in range(n)]
