"""
Named entry point for UI call sites.

``run_algorithm`` builds the right adjacency view, resolves the start node
(a Node, an id or a label) and turns AlgorithmError into an outcome with an
error kind, so a toolbar button can report "nothing to do" and "invalid
input" differently without catching exceptions itself.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional, TYPE_CHECKING

from graphboard.algorithms.adjacency import build_adjacency
from graphboard.algorithms.coloring import color_borders
from graphboard.algorithms.critical_nodes import critical_nodes
from graphboard.algorithms.errors import AlgorithmError
from graphboard.algorithms.hamiltonian import hamiltonian_cycle, hamiltonian_path
from graphboard.algorithms.pert import pert_cpm
from graphboard.algorithms.shortest_path import dijkstra
from graphboard.algorithms.spanning_tree import kruskal
from graphboard.algorithms.toposort import toposort_dfs, toposort_kahn
from graphboard.algorithms.traversal import bfs, connected_components, dfs
from graphboard.elements import Node

if TYPE_CHECKING:
    from graphboard.state import GraphState

logger = logging.getLogger(__name__)

EMPTY_GRAPH = "empty-graph"
NO_SOLUTION = "no-solution"
UNKNOWN_ALGORITHM = "unknown-algorithm"


@dataclass(frozen=True)
class AlgorithmEntry:
    func: Callable
    needs_start: bool = False
    # Takes an optional start node as a keyword
    accepts_start: bool = False
    # Walk every edge both ways regardless of its directed flag
    undirected: bool = False


ALGORITHMS: Dict[str, AlgorithmEntry] = {
    "bfs": AlgorithmEntry(bfs, needs_start=True),
    "dfs": AlgorithmEntry(dfs, needs_start=True),
    "dijkstra": AlgorithmEntry(dijkstra, needs_start=True),
    "toposort": AlgorithmEntry(toposort_kahn),
    "toposort-dfs": AlgorithmEntry(toposort_dfs),
    "kruskal": AlgorithmEntry(kruskal, undirected=True),
    "components": AlgorithmEntry(connected_components, undirected=True),
    "critical-nodes": AlgorithmEntry(critical_nodes, undirected=True),
    "hamiltonian-cycle": AlgorithmEntry(hamiltonian_cycle, needs_start=True),
    "hamiltonian-path": AlgorithmEntry(hamiltonian_path, needs_start=True),
    "coloring": AlgorithmEntry(color_borders, accepts_start=True, undirected=True),
    "pert": AlgorithmEntry(pert_cpm),
}


@dataclass
class AlgorithmOutcome:
    ok: bool
    value: Any = None
    error_kind: Optional[str] = None
    message: str = ""


def resolve_start(state: "GraphState", start) -> Optional[str]:
    """Node id for a Node, an id or a label; unknown values pass through unchanged."""
    if start is None:
        return None
    if isinstance(start, Node):
        return start.id
    if state.find_node_by_id(start) is not None:
        return start
    node = state.find_node_by_label(start)
    return node.id if node is not None else start


def run_algorithm(name: str, state: "GraphState", start=None, **options) -> AlgorithmOutcome:
    entry = ALGORITHMS.get(name)
    if entry is None:
        return AlgorithmOutcome(False, error_kind=UNKNOWN_ALGORITHM,
                                message=f"Unknown algorithm '{name}'. Valid: {list(ALGORITHMS)}")
    if not state.nodes:
        return AlgorithmOutcome(False, error_kind=EMPTY_GRAPH, message="The graph is empty")

    adj = build_adjacency(state, undirected=entry.undirected)
    args = [adj]
    if entry.needs_start:
        args.append(resolve_start(state, start))
    elif entry.accepts_start and start is not None:
        options["start"] = resolve_start(state, start)

    try:
        value = entry.func(*args, **options)
    except AlgorithmError as e:
        logger.warning(f"Algorithm '{name}' failed: {e}")
        return AlgorithmOutcome(False, error_kind=e.kind, message=str(e))

    if value is None:
        return AlgorithmOutcome(False, error_kind=NO_SOLUTION, message=f"No solution found for '{name}'")
    logger.info(f"Ran algorithm '{name}' on {len(state.nodes)} nodes")
    return AlgorithmOutcome(True, value=value)
