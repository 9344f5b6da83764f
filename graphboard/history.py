"""
Snapshot-based undo/redo over a GraphState.

Callers performing a logical edit call ``record_memento`` BEFORE mutating so
the pre-edit state is captured. Snapshots are deep value copies; clones keep
element ids, and ``restore_snapshot`` re-links every edge to the restored node
with the same id. History operations never raise: undo/redo on an empty stack
do nothing.
"""

import logging
from dataclasses import dataclass
from typing import Optional, Tuple, TYPE_CHECKING

from graphboard.elements import Edge, Node

if TYPE_CHECKING:
    from graphboard.state import GraphState

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Snapshot:
    """Immutable copy of the graph: cloned nodes, cloned edges, selected ids."""
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]
    selected: Tuple[str, ...]


def generate_snapshot(state: "GraphState") -> Snapshot:
    return Snapshot(
        nodes=tuple(node.clone() for node in state.nodes),
        edges=tuple(edge.clone() for edge in state.edges),
        selected=tuple(e.id for e in state.selected),
    )


def snapshot_equals(a: Snapshot, b: Snapshot) -> bool:
    """Structural equality of nodes and edges, same order and count."""
    if len(a.nodes) != len(b.nodes) or len(a.edges) != len(b.edges):
        return False
    if not all(x.equals(y) for x, y in zip(a.nodes, b.nodes)):
        return False
    return all(x.equals(y) for x, y in zip(a.edges, b.edges))


def record_memento(state: "GraphState") -> bool:
    """
    Push a snapshot of the current state onto the undo stack.

    The snapshot is discarded when it equals the top of the stack. A successful
    push clears the redo stack. Returns True if a snapshot was pushed.
    """
    if not state.history_enabled:
        return False
    if state.prevent_memento:
        state.prevent_memento = False
        return False

    snapshot = generate_snapshot(state)
    if state.memento and snapshot_equals(snapshot, state.memento[-1]):
        return False

    state.memento.append(snapshot)
    state.memento_redo = []
    logger.debug(f"Recorded memento ({len(state.memento)} on stack)")
    return True


def has_undo(state: "GraphState") -> bool:
    return len(state.memento) > 0


def has_redo(state: "GraphState") -> bool:
    return len(state.memento_redo) > 0


def undo(state: "GraphState") -> None:
    if not state.history_enabled or not has_undo(state):
        return
    state.memento_redo.append(generate_snapshot(state))
    restore_snapshot(state, state.memento.pop())


def redo(state: "GraphState") -> None:
    if not state.history_enabled or not has_redo(state):
        return
    state.memento.append(generate_snapshot(state))
    restore_snapshot(state, state.memento_redo.pop())


def restore_snapshot(state: "GraphState", snapshot: Snapshot) -> None:
    """
    Replace nodes and edges wholesale with the snapshot's, then re-link edge
    endpoints by node id. Listeners fire once after the swap.

    The snapshot's elements become the live ones, so a snapshot is restored at
    most once (undo/redo pop it off its stack).
    """
    nodes = list(snapshot.nodes)
    by_id = {node.id: node for node in nodes}
    edges = []
    for edge in snapshot.edges:
        src = by_id.get(edge.src.id)
        dst = by_id.get(edge.dst.id)
        if src is None or dst is None:
            logger.warning(f"Dropping edge {edge.id}: endpoint missing from snapshot")
            continue
        edge.src = src
        edge.dst = dst
        edges.append(edge)

    selected_ids = set(snapshot.selected)
    with state.suppressed_listeners():
        state.selected = []
        state.nodes = nodes
        state.edges = edges
        for element in state.elements():
            element.selected = False
        state.selected = [e for e in state.elements() if e.id in selected_ids]
        state.reset_states()

    state.trigger_graph_listeners()
    state.trigger_selection_listeners()


def discard_last_snapshot(state: "GraphState") -> Optional[Snapshot]:
    """Drop the most recent snapshot (recorded optimistically, turned out to be a no-op)."""
    if not state.history_enabled or not state.memento:
        return None
    return state.memento.pop()
