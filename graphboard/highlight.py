"""
Projecting algorithm results back onto the live graph.

Results are keyed by node id and carry edge ids, so every helper resolves
them through the GraphState and only touches view attributes (bubble,
style, hidden). ``GraphState.reset_styles`` undoes all of it.
"""

import logging
import math
from typing import Dict, Iterable, List, TYPE_CHECKING

from graphboard.algorithms.coloring import color_palette, heatmap_palette
from graphboard.algorithms.hamiltonian import HamiltonianResult
from graphboard.algorithms.pert import PertResult
from graphboard.algorithms.shortest_path import PathInfo
from graphboard.algorithms.spanning_tree import SpanningForest
from graphboard.algorithms.toposort import TopoResult
from graphboard.algorithms.traversal import TraversalResult
from graphboard.elements import format_weight

if TYPE_CHECKING:
    from graphboard.state import GraphState

logger = logging.getLogger(__name__)

CRITICAL_COLOR = "#ff0000"


def _edges_by_id(state: "GraphState", edge_ids: Iterable[str]):
    wanted = set(edge_ids)
    return [e for e in state.edges if e.id in wanted]


def _label_order(state: "GraphState", order: List[str]) -> None:
    for i, node_id in enumerate(order):
        node = state.find_node_by_id(node_id)
        if node is not None:
            node.bubble = str(i)


def show_traversal(state: "GraphState", result: TraversalResult) -> None:
    """Visit order in the badges; only the traversal tree stays visible."""
    state.reset_styles()
    _label_order(state, result.order)
    edges = _edges_by_id(state, (entry.edge_id for entry in result.edges))
    state.hide_all_but([*state.nodes, *edges])


def show_distances(state: "GraphState", paths: Dict[str, PathInfo]) -> None:
    """Distance badges, shortest-path tree kept visible, unreachable nodes faded."""
    state.reset_styles()
    tree_edges = []
    for node_id, info in paths.items():
        node = state.find_node_by_id(node_id)
        if node is None:
            continue
        if math.isinf(info.distance):
            node.bubble = "∞"
            node.opacity = 0.4
            continue
        node.bubble = format_weight(info.distance)
        if info.predecessor is not None:
            pred = state.find_node_by_id(info.predecessor)
            tree_edges.extend(e for e in state.edges if e.connects(pred, node))
    state.hide_all_but([*state.nodes, *tree_edges])


def show_toposort(state: "GraphState", result: TopoResult) -> None:
    state.reset_styles()
    _label_order(state, result.order)
    for node_id in result.remaining:
        node = state.find_node_by_id(node_id)
        node.style["border_color"] = CRITICAL_COLOR
    state.trigger_graph_listeners()


def show_spanning_forest(state: "GraphState", forest: SpanningForest) -> None:
    state.reset_styles()
    edges = _edges_by_id(state, (entry.edge_id for entry in forest.edges))
    state.hide_all_but([*state.nodes, *edges])


def show_groups(state: "GraphState", groups: Dict[str, int]) -> None:
    """Fill every node with its group colour (colouring, components)."""
    state.reset_styles()
    palette = color_palette(max(groups.values(), default=-1) + 1)
    for node_id, group in groups.items():
        node = state.find_node_by_id(node_id)
        node.style["background_color"] = palette[group]
        node.bubble = str(group)
    state.trigger_graph_listeners()


def show_components(state: "GraphState", components: List[List[str]]) -> None:
    show_groups(state, {node_id: i for i, comp in enumerate(components) for node_id in comp})


def show_critical_nodes(state: "GraphState", node_ids: List[str]) -> None:
    state.reset_styles()
    for node_id in node_ids:
        state.find_node_by_id(node_id).style["border_color"] = CRITICAL_COLOR
    state.trigger_graph_listeners()


def show_hamiltonian(state: "GraphState", result: HamiltonianResult) -> None:
    """Step badges along the path and only the path edges visible."""
    state.reset_styles()
    path = result.path
    _label_order(state, path[:-1] if len(path) > 1 and path[0] == path[-1] else path)
    edges = []
    for a, b in zip(path, path[1:]):
        src, dst = state.find_node_by_id(a), state.find_node_by_id(b)
        edges.extend(e for e in state.edges if e.connects(src, dst))
    state.hide_all_but([*state.nodes, *edges])


def show_pert(state: "GraphState", result: PertResult) -> None:
    """Early start badges, slack as a green-to-red heatmap, critical borders."""
    state.reset_styles()
    slack_levels = sorted({data.float for data in result.nodes.values()}, reverse=True)
    palette = heatmap_palette(len(slack_levels))
    for node_id, data in result.nodes.items():
        node = state.find_node_by_id(node_id)
        node.bubble = format_weight(data.early_start)
        node.style["background_color"] = palette[slack_levels.index(data.float)]
        if data.critical:
            node.style["border_color"] = CRITICAL_COLOR
    state.trigger_graph_listeners()


HIGHLIGHTERS = {
    "bfs": show_traversal,
    "dfs": show_traversal,
    "dijkstra": show_distances,
    "toposort": show_toposort,
    "toposort-dfs": show_toposort,
    "kruskal": show_spanning_forest,
    "components": show_components,
    "critical-nodes": show_critical_nodes,
    "hamiltonian-cycle": show_hamiltonian,
    "hamiltonian-path": show_hamiltonian,
    "coloring": show_groups,
    "pert": show_pert,
}


def show_result(state: "GraphState", name: str, value) -> None:
    highlighter = HIGHLIGHTERS.get(name)
    if highlighter is None:
        logger.warning(f"No highlighter for algorithm '{name}'")
        return
    highlighter(state, value)


def _labels(state: "GraphState", node_ids: Iterable[str]) -> str:
    labels = []
    for node_id in node_ids:
        node = state.find_node_by_id(node_id)
        labels.append(str(node.label) if node is not None else node_id)
    return ", ".join(labels)


def describe_result(state: "GraphState", name: str, value) -> str:
    """One-line summary of an algorithm result for a notification."""
    if isinstance(value, TraversalResult):
        return f"{name.upper()} order: {_labels(state, value.order)}"
    if isinstance(value, TopoResult):
        if value.has_cycle:
            return f"Cycle detected, unordered nodes: {_labels(state, value.remaining)}"
        return f"Topological order: {_labels(state, value.order)}"
    if isinstance(value, SpanningForest):
        return f"Spanning forest: {len(value.edges)} edges, total weight {format_weight(value.total_weight)}"
    if isinstance(value, HamiltonianResult):
        found = f" ({len(value.all_paths)} found)" if value.all_paths else ""
        return f"Path: {_labels(state, value.path)}{found}"
    if isinstance(value, PertResult):
        return (f"Critical path: {_labels(state, value.critical_path)}, "
                f"duration {format_weight(value.project_duration)}")
    if name == "components":
        return f"{len(value)} connected components"
    if name == "critical-nodes":
        return f"Critical nodes: {_labels(state, value)}" if value else "No critical nodes"
    if name == "coloring":
        return f"Colored with {max(value.values()) + 1 if value else 0} colors"
    if name == "dijkstra":
        reachable = sum(1 for info in value.values() if not math.isinf(info.distance))
        return f"Shortest paths computed, {reachable} reachable nodes"
    return f"{name} done"
