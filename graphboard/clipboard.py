"""
Copy and paste of the selection.

A ClipboardRecord holds the selected nodes, the selected edges between them
(referencing node ids) and the anchor point, the mean position of the copied
nodes. Pasting shifts everything by the distance between the anchor and the
current pointer, so the copy lands under the pointer.
"""

import json
import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, List, TYPE_CHECKING

from graphboard import constants
from graphboard.elements import Edge, Element, Node
from graphboard.errors import GraphFormatError
from graphboard.history import record_memento

if TYPE_CHECKING:
    from graphboard.state import GraphState

logger = logging.getLogger(__name__)

COPY_SUFFIX = "_copy"


@dataclass
class ClipboardRecord:
    nodes: List[Dict[str, Any]] = field(default_factory=list)
    edges: List[Dict[str, Any]] = field(default_factory=list)
    pointer_x: float = 0.0
    pointer_y: float = 0.0

    def to_json(self) -> str:
        return json.dumps(asdict(self))

    @classmethod
    def from_json(cls, text: str) -> "ClipboardRecord":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise GraphFormatError(f"Clipboard content is not JSON: {e}") from e
        if not validate_clipboard(data):
            raise GraphFormatError("Invalid clipboard content")
        return cls(data["nodes"], data["edges"], data.get("pointer_x", 0.0), data.get("pointer_y", 0.0))


def validate_clipboard(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    nodes, edges = data.get("nodes"), data.get("edges")
    if not isinstance(nodes, list) or not isinstance(edges, list):
        return False
    for node in nodes:
        if not isinstance(node, dict) or not node.get("id"):
            return False
        if not all(isinstance(node.get(k), (int, float)) for k in ("x", "y")):
            return False
    for edge in edges:
        if not isinstance(edge, dict) or not edge.get("src") or not edge.get("dst"):
            return False
    return True


def copy_selection(state: "GraphState") -> ClipboardRecord:
    """
    Snapshot the selected nodes and edges. Returns an empty record when no
    node is selected.
    """
    nodes = state.selected_nodes()
    if not nodes:
        return ClipboardRecord()
    record = ClipboardRecord(
        nodes=[{"id": n.id, "x": n.x, "y": n.y, "r": n.r, "label": n.label} for n in nodes],
        edges=[
            {"id": e.id, "src": e.src.id, "dst": e.dst.id, "weight": e.weight, "directed": e.directed}
            for e in state.selected_edges()
        ],
        pointer_x=sum(n.x for n in nodes) / len(nodes),
        pointer_y=sum(n.y for n in nodes) / len(nodes),
    )
    return record


def unique_copy_id(state: "GraphState", element_id: str, taken: set) -> str:
    """``<id>_copy``, then ``<id>_copy2``, ``<id>_copy3``... until unused."""
    base = element_id + COPY_SUFFIX
    candidate = base
    i = 2
    while candidate in taken or state.find_element_by_id(candidate) is not None:
        candidate = f"{base}{i}"
        i += 1
    taken.add(candidate)
    return candidate


def paste(state: "GraphState", record: ClipboardRecord) -> List[Element]:
    """
    Add a copy of the record to the graph, offset to the pointer, and select it.

    Edges whose endpoints were not copied are dropped. Returns the pasted
    elements.
    """
    if not record.nodes:
        return []
    record_memento(state)

    dx = state.pointer[0] - record.pointer_x
    dy = state.pointer[1] - record.pointer_y
    taken: set = set()
    used_labels = {n.label for n in state.nodes}
    remap: Dict[str, Node] = {}
    nodes = []
    for data in record.nodes:
        label = str(data.get("label") or data["id"])
        if label in used_labels:
            label = _copy_label(label, used_labels)
        used_labels.add(label)
        node = Node(data["x"] + dx, data["y"] + dy, label, data.get("r", constants.NODE_RADIUS),
                    element_id=unique_copy_id(state, data["id"], taken))
        remap[data["id"]] = node
        nodes.append(node)

    edges = []
    for data in record.edges:
        src, dst = remap.get(data["src"]), remap.get(data["dst"])
        if src is None or dst is None or src is dst:
            continue
        edges.append(Edge(src, dst, data.get("weight", constants.DEFAULT_EDGE_WEIGHT), data.get("directed", False),
                          element_id=unique_copy_id(state, data.get("id", "Edge"), taken)))

    with state.suppressed_listeners():
        state.push_nodes(*nodes)
        state.push_edges(*edges)
        state.selected = [*nodes, *edges]
    state.trigger_graph_listeners()
    state.trigger_selection_listeners()
    logger.info(f"Pasted {len(nodes)} nodes and {len(edges)} edges")
    return [*nodes, *edges]


def _copy_label(label: str, used: set) -> str:
    candidate = f"{label}{COPY_SUFFIX}"
    i = 2
    while candidate in used:
        candidate = f"{label}{COPY_SUFFIX}{i}"
        i += 1
    return candidate
