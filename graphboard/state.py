"""
Graph State Container - single owner of the editing session's data.

Holds the node/edge collections, the selection, interaction flags and the two
history stacks. Every component (tools, history, algorithms, layout, the NiceGUI
shell) receives the container explicitly; there is no module-level graph.

Listener notification is synchronous. Assigning ``nodes`` or ``edges`` always
notifies graph listeners, assigning ``selected`` notifies selection listeners.
Notification is suppressed while ``listeners_disabled`` is set and does not
re-enter: a listener that mutates the container does not trigger a nested round.
"""

import logging
import re
from contextlib import contextmanager
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Iterable, Iterator, List, Optional, Set, Tuple

from graphboard import constants
from graphboard.config import EditorConfig
from graphboard.elements import Edge, EdgePreview, Element, Node
from graphboard.history import record_memento

logger = logging.getLogger(__name__)

Listener = Callable[["GraphState"], None]


class DragState(Enum):
    """Three-state drag flag of the select tool."""
    IDLE = "idle"        # not dragging
    ARMED = "armed"      # pressed on a selected element, not moved yet
    ACTIVE = "active"    # moving the selection


@dataclass
class SelectionBox:
    """Rubber-band rectangle; corners are kept as dragged (may be reversed)."""
    x1: float
    y1: float
    x2: float
    y2: float

    def normalized(self) -> Tuple[float, float, float, float]:
        return (min(self.x1, self.x2), min(self.y1, self.y2),
                max(self.x1, self.x2), max(self.y1, self.y2))

    def contains(self, x: float, y: float) -> bool:
        left, top, right, bottom = self.normalized()
        return left < x < right and top < y < bottom


class GraphState:
    """Owns nodes, edges, selection, flags and history stacks of one session."""

    def __init__(self, config: Optional[EditorConfig] = None):
        self.config = config or EditorConfig()

        self._nodes: List[Node] = []
        self._edges: List[Edge] = []
        self._selected: List[Element] = []
        self.selection_box: Optional[SelectionBox] = None

        # Tools
        self.tool: str = self.config.default_tool
        self.tools = None  # ToolController attached to this state

        # Grid / view config
        self.grid_size: int = self.config.grid_size
        self.snap_to_grid: bool = self.config.snap_to_grid
        self.show_weights: bool = self.config.show_weights

        # Input fed by the shell (pointer in canvas coordinates)
        self.pointer: Tuple[float, float] = (0.0, 0.0)
        self.keys_down: Set[str] = set()
        self.mouse_button: Optional[int] = None

        # In-progress interactions
        self.new_node: Optional[Node] = None
        self.new_edge: Optional[EdgePreview] = None
        self.drag_state: DragState = DragState.IDLE
        self.drag_origin: Optional[Tuple[float, float]] = None
        self.prevent_deselect: bool = False
        self.panning: bool = False
        self.cursor: str = "default"
        self.double_click_target: Optional[Element] = None

        # History
        self.memento: list = []
        self.memento_redo: list = []
        self.history_enabled: bool = self.config.history
        self.prevent_memento: bool = False

        # Listeners
        self.listeners_disabled: bool = False
        self._notifying: bool = False
        self._graph_listeners: List[Listener] = []
        self._selection_listeners: List[Listener] = []
        self._tool_listeners: List[Listener] = []

    # --- Collections ---

    @property
    def nodes(self) -> List[Node]:
        return self._nodes

    @nodes.setter
    def nodes(self, nodes: Iterable[Node]) -> None:
        self._nodes = list(nodes)
        for node in self._nodes:
            node.graph = self
        self.trigger_graph_listeners()

    @property
    def edges(self) -> List[Edge]:
        return self._edges

    @edges.setter
    def edges(self, edges: Iterable[Edge]) -> None:
        self._edges = list(edges)
        for edge in self._edges:
            edge.graph = self
        self.trigger_graph_listeners()

    @property
    def selected(self) -> List[Element]:
        return self._selected

    @selected.setter
    def selected(self, elements: Iterable[Element]) -> None:
        new = list(elements)
        keep = {id(e) for e in new}
        for element in self._selected:
            if id(element) not in keep:
                element.selected = False
        for element in new:
            element.selected = True
        self._selected = new
        self.trigger_selection_listeners()

    def push_selected(self, element: Element) -> None:
        if any(e is element for e in self._selected):
            return
        element.selected = True
        self._selected.append(element)
        self.trigger_selection_listeners()

    def remove_selected(self, element: Element) -> None:
        element.selected = False
        self._selected = [e for e in self._selected if e is not element]
        self.trigger_selection_listeners()

    def selected_nodes(self) -> List[Node]:
        return [e for e in self._selected if isinstance(e, Node)]

    def selected_edges(self) -> List[Edge]:
        return [e for e in self._selected if isinstance(e, Edge)]

    def push_nodes(self, *nodes: Node) -> None:
        """Append nodes without recording history (bulk loading)."""
        self.nodes = self._nodes + list(nodes)

    def push_edges(self, *edges: Edge) -> None:
        """Append edges without recording history (bulk loading)."""
        self.edges = self._edges + list(edges)

    def remove_node(self, node: Node) -> None:
        incident = [e for e in self._edges if e.src is node or e.dst is node]
        for edge in incident:
            edge.deselect()
        self._nodes = [n for n in self._nodes if n is not node]
        self._edges = [e for e in self._edges if e.src is not node and e.dst is not node]
        self.trigger_graph_listeners()

    def remove_edge(self, edge: Edge) -> None:
        self.edges = [e for e in self._edges if e is not edge]

    # --- Creation ---

    def add_node(self, x: float, y: float, r: Optional[float] = None,
                 label: Optional[str] = None) -> Node:
        """Record a snapshot, then append a new node at (x, y)."""
        record_memento(self)
        node = Node(x, y, label if label is not None else self.next_label(),
                    r if r is not None else constants.NODE_RADIUS,
                    element_id=self.generate_id("Node"))
        self.push_nodes(node)
        logger.debug(f"Added node {node.id} at ({x:.0f}, {y:.0f})")
        return node

    def add_edge(self, src: Optional[Node], dst: Optional[Node], weight: Optional[float] = None,
                 directed: bool = False) -> Optional[Edge]:
        """
        Record a snapshot, then connect src to dst.

        Missing endpoints, self-loops and duplicates are ignored (returns None).
        """
        if src is None or dst is None or src is dst:
            return None
        if self.find_edge(src, dst, directed) is not None:
            return None
        record_memento(self)
        edge = Edge(src, dst, weight if weight is not None else constants.DEFAULT_EDGE_WEIGHT,
                    directed, element_id=self.generate_id("Edge"))
        self.push_edges(edge)
        logger.debug(f"Added edge {edge.id}: {src.label} -> {dst.label}")
        return edge

    def find_edge(self, src: Node, dst: Node, directed: bool = False) -> Optional[Edge]:
        """Existing edge that already joins src to dst under the given direction mode."""
        for edge in self._edges:
            if edge.connects(src, dst):
                return edge
            if not directed and edge.connects(dst, src):
                return edge
        return None

    def generate_id(self, kind: str) -> str:
        """Next free id of the form ``Node7`` / ``Edge3``."""
        collection = self._nodes if kind == "Node" else self._edges
        index = len(collection) + 1
        pattern = re.compile(rf"^{kind}(\d+)$")
        for element in collection:
            match = pattern.match(element.id)
            if match:
                index = max(index, int(match.group(1)) + 1)
        while self.find_element_by_id(f"{kind}{index}") is not None:
            index += 1
        return f"{kind}{index}"

    def next_label(self) -> str:
        """First unused spreadsheet-style label: A, B, ..., Z, AA, AB..."""
        used = {n.label for n in self._nodes}
        i = 0
        while True:
            label = column_label(i)
            if label not in used:
                return label
            i += 1

    # --- Lookup ---

    def elements(self) -> List[Element]:
        return [*self._nodes, *self._edges]

    def find_element_by_id(self, element_id: str) -> Optional[Element]:
        for element in self.elements():
            if element.id == element_id:
                return element
        return None

    def find_node_by_id(self, node_id: str) -> Optional[Node]:
        return next((n for n in self._nodes if n.id == node_id), None)

    def find_node_by_label(self, label: str) -> Optional[Node]:
        return next((n for n in self._nodes if n.label == label), None)

    # --- View flags ---

    def hide_all_but(self, elements: Iterable[Element]) -> None:
        keep = {id(e) for e in elements}
        for element in self.elements():
            element.hidden = id(element) not in keep
        self.trigger_graph_listeners()

    def show_all(self) -> None:
        for element in self.elements():
            element.hidden = False
        self.trigger_graph_listeners()

    def reset_styles(self) -> None:
        """Clear algorithm highlights: style overrides, badges and hidden flags."""
        for element in self.elements():
            element.reset_style()
            element.hidden = False
            if isinstance(element, Node):
                element.bubble = None
        self.trigger_graph_listeners()

    # --- Lifecycle ---

    def reset_states(self) -> None:
        """Drop previews, drag markers and the selection box."""
        self.new_node = None
        self.new_edge = None
        self.selection_box = None
        self.drag_state = DragState.IDLE
        self.drag_origin = None
        self.prevent_deselect = False
        self.panning = False

    def reset(self) -> None:
        """Empty the graph and return to the default tool. History stacks are kept."""
        with self.suppressed_listeners():
            self.selected = []
            self.nodes = []
            self.edges = []
            self.reset_states()
        if self.tools is not None:
            self.tools.activate(self.config.default_tool)
        else:
            self.tool = self.config.default_tool
        self.trigger_graph_listeners()
        self.trigger_selection_listeners()

    # --- Listeners ---

    def add_graph_listener(self, listener: Listener) -> None:
        self._graph_listeners.append(listener)

    def add_selection_listener(self, listener: Listener) -> None:
        self._selection_listeners.append(listener)

    def add_tool_listener(self, listener: Listener) -> None:
        self._tool_listeners.append(listener)

    def remove_listener(self, listener: Listener) -> None:
        for registry in (self._graph_listeners, self._selection_listeners, self._tool_listeners):
            if listener in registry:
                registry.remove(listener)

    def trigger_graph_listeners(self) -> None:
        self._notify(self._graph_listeners)

    def trigger_selection_listeners(self) -> None:
        self._notify(self._selection_listeners)

    def trigger_tool_listeners(self) -> None:
        self._notify(self._tool_listeners)

    def _notify(self, listeners: List[Listener]) -> None:
        if self.listeners_disabled or self._notifying:
            return
        self._notifying = True
        try:
            for listener in list(listeners):
                listener(self)
        finally:
            self._notifying = False

    @contextmanager
    def suppressed_listeners(self) -> Iterator[None]:
        """Disable notification for a bulk mutation."""
        previous = self.listeners_disabled
        self.listeners_disabled = True
        try:
            yield
        finally:
            self.listeners_disabled = previous


def column_label(index: int) -> str:
    label = ""
    index += 1
    while index:
        index, rem = divmod(index - 1, 26)
        label = chr(ord("A") + rem) + label
    return label
