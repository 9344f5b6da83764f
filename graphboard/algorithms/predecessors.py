"""Helpers turning a predecessor map (node -> parent or None) into tree structure."""

from typing import Dict, List, Optional, Tuple

Predecessors = Dict[str, Optional[str]]


def levels_from_predecessors(predecessors: Predecessors) -> Dict[str, Optional[int]]:
    """
    Depth of every node below its root. Nodes whose chain never reaches a
    root (broken or cyclic map) stay None.
    """
    levels: Dict[str, Optional[int]] = {}

    def level_of(node: str, seen: set) -> Optional[int]:
        if node in levels:
            return levels[node]
        if node not in predecessors or node in seen:
            return None
        parent = predecessors[node]
        if parent is None:
            levels[node] = 0
            return 0
        seen.add(node)
        parent_level = level_of(parent, seen)
        levels[node] = None if parent_level is None else parent_level + 1
        return levels[node]

    for node in predecessors:
        level_of(node, set())
    return levels


def successors_from_predecessors(predecessors: Predecessors) -> Dict[str, List[str]]:
    """Children of every node, in predecessor-map order."""
    successors: Dict[str, List[str]] = {node: [] for node in predecessors}
    for node, parent in predecessors.items():
        if parent is None:
            continue
        successors.setdefault(parent, []).append(node)
    return successors


def edges_from_predecessors(predecessors: Predecessors) -> List[Tuple[str, str]]:
    return [(parent, node) for node, parent in predecessors.items() if parent is not None]


def roots(predecessors: Predecessors) -> List[str]:
    return [node for node, parent in predecessors.items() if parent is None]
