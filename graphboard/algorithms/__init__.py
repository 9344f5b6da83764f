"""
Graph algorithms over the adjacency view.

Every function takes an ``Adjacency`` (``{node_id: [AdjacencyEntry, ...]}``)
and returns results keyed by node id, so they can be projected back onto
the live graph with ``GraphState.find_node_by_id``.
"""

from graphboard.algorithms.adjacency import (
    Adjacency,
    AdjacencyEntry,
    adjacency_from_edges,
    build_adjacency,
    to_networkx,
)
from graphboard.algorithms.coloring import color_borders, color_palette, heatmap_palette
from graphboard.algorithms.critical_nodes import critical_nodes
from graphboard.algorithms.degree import node_degrees
from graphboard.algorithms.errors import (
    AlgorithmError,
    CycleError,
    InconsistentDurationError,
    StartNodeNotFoundError,
)
from graphboard.algorithms.hamiltonian import HamiltonianResult, hamiltonian_cycle, hamiltonian_path
from graphboard.algorithms.pert import PertNode, PertResult, pert_cpm
from graphboard.algorithms.runner import ALGORITHMS, AlgorithmOutcome, run_algorithm
from graphboard.algorithms.shortest_path import PathInfo, dijkstra, shortest_path
from graphboard.algorithms.spanning_tree import SpanningForest, kruskal
from graphboard.algorithms.toposort import TopoResult, toposort_dfs, toposort_kahn
from graphboard.algorithms.traversal import TraversalResult, bfs, connected_components, dfs
