"""
Critical nodes: nodes whose removal disconnects their component.

Brute force on purpose: for every node of a component, BFS the rest of the
component from a witness while skipping that node. O(V * (V + E)), fine for
interactive graph sizes. Pass an undirected adjacency view.
"""

from typing import List

from graphboard.algorithms.adjacency import Adjacency
from graphboard.algorithms.traversal import bfs, connected_components


def critical_nodes(adj: Adjacency) -> List[str]:
    critical = []
    for component in connected_components(adj):
        # Removing a node from a pair or a single leaves nothing to disconnect
        if len(component) < 3:
            continue
        for node in component:
            witness = component[1] if component[0] == node else component[0]
            reached = bfs(adj, witness, skip=node).visited
            if len(reached) < len(component) - 1:
                critical.append(node)

    # Report in adjacency (insertion) order
    found = set(critical)
    return [node for node in adj if node in found]
