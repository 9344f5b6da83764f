"""
Graphviz DOT export.

Graphs mixing directed and undirected edges are exported as a single
Digraph; undirected edges get ``dir=none``. Node positions are written as
pinned ``pos`` attributes (points, y flipped) so ``neato -n`` reproduces the
editor layout.
"""

from typing import TYPE_CHECKING

from graphviz import Digraph

from graphboard.elements import format_weight

if TYPE_CHECKING:
    from graphboard.state import GraphState

# Graphviz positions are in points, canvas units are pixels at 96 dpi
POINTS_PER_PIXEL = 72 / 96


def to_dot(state: "GraphState", name: str = "graphboard", show_weights: bool = None) -> Digraph:
    """Build a graphviz.Digraph of the live graph, keyed by node id."""
    show_weights = state.show_weights if show_weights is None else show_weights
    dot = Digraph(name=name, comment="GraphBoard export")
    dot.attr("node", shape="circle")
    for node in state.nodes:
        x = node.x * POINTS_PER_PIXEL
        y = -node.y * POINTS_PER_PIXEL
        dot.node(node.id, label=str(node.label), pos=f"{x:.1f},{y:.1f}!",
                 width=f"{2 * node.r / 96:.2f}")
    for edge in state.edges:
        attrs = {}
        if show_weights:
            attrs["label"] = format_weight(edge.weight)
        if not edge.directed:
            attrs["dir"] = "none"
        dot.edge(edge.src.id, edge.dst.id, **attrs)
    return dot


def to_dot_source(state: "GraphState", **kwargs) -> str:
    return to_dot(state, **kwargs).source
