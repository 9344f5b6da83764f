"""
Node arrangement strategies.

Each arrangement writes coordinates straight into the nodes of a GraphState
and notifies graph listeners once at the end. By default a history snapshot
is recorded first so an arrangement can be undone.
"""

import logging
import math
import re
from typing import Dict, Iterable, List, Optional, Tuple, TYPE_CHECKING

from graphboard import constants
from graphboard.algorithms.adjacency import build_adjacency
from graphboard.algorithms.predecessors import Predecessors, successors_from_predecessors
from graphboard.algorithms.toposort import TopoResult, toposort_kahn
from graphboard.elements import Node
from graphboard.history import record_memento

if TYPE_CHECKING:
    from graphboard.state import GraphState
    from graphboard.tools.events import Viewport

logger = logging.getLogger(__name__)


def _commit(state: "GraphState", positions: Dict[Node, Tuple[float, float]], record: bool) -> None:
    if not positions:
        return
    if record:
        record_memento(state)
    for node, (x, y) in positions.items():
        node.x = x
        node.y = y
    state.trigger_graph_listeners()


def _nodes(state: "GraphState", nodes: Optional[Iterable[Node]]) -> List[Node]:
    return list(state.nodes if nodes is None else nodes)


def circular_arrange(state: "GraphState", nodes: Optional[Iterable[Node]] = None,
                     center: Optional[Tuple[float, float]] = None, record: bool = True) -> None:
    """Evenly on a circle, first node at the top, clockwise."""
    nodes = _nodes(state, nodes)
    n = len(nodes)
    if n == 0:
        return
    cx, cy = center or (constants.CANVAS_WIDTH / 2, constants.CANVAS_HEIGHT / 2)
    # Grow the circle so neighbours keep the same spacing on large graphs
    radius = max(constants.LAYOUT_MARGIN, n * constants.NODE_RADIUS * 3 / (2 * math.pi))
    step = 2 * math.pi / n
    offset = math.pi / 2 + math.pi
    positions = {
        node: (cx + math.cos(i * step + offset) * radius, cy + math.sin(i * step + offset) * radius)
        for i, node in enumerate(nodes)
    }
    _commit(state, positions, record)


def grid_arrange(state: "GraphState", nodes: Optional[Iterable[Node]] = None,
                 columns: Optional[int] = None, record: bool = True) -> None:
    """Row-major square-ish grid, ``LAYOUT_MARGIN`` apart."""
    nodes = _nodes(state, nodes)
    if not nodes:
        return
    columns = columns or math.ceil(math.sqrt(len(nodes)))
    margin = constants.LAYOUT_MARGIN
    positions = {
        node: (margin + (i % columns) * margin, margin + (i // columns) * margin)
        for i, node in enumerate(nodes)
    }
    _commit(state, positions, record)


def sequence_arrange(state: "GraphState", nodes: Optional[Iterable[Node]] = None,
                     record: bool = True) -> None:
    """A single horizontal row across the middle of the canvas."""
    nodes = _nodes(state, nodes)
    margin = constants.LAYOUT_MARGIN
    positions = {node: (margin + i * margin, constants.CANVAS_HEIGHT / 2) for i, node in enumerate(nodes)}
    _commit(state, positions, record)


def _natural_key(text: str):
    return [int(part) if part.isdigit() else part for part in re.split(r"(\d+)", text)]


def toposort_arrange(state: "GraphState", record: bool = True) -> TopoResult:
    """
    One column per topological level, rows by node id within a column.

    Returns the Kahn result; a cyclic graph is left where it is.
    """
    result = toposort_kahn(build_adjacency(state))
    if result.has_cycle:
        logger.warning(f"Toposort arrange skipped: {len(result.remaining)} nodes on a cycle")
        return result

    columns: Dict[int, List[str]] = {}
    for node_id, level in result.levels.items():
        columns.setdefault(level, []).append(node_id)

    margin = constants.LAYOUT_MARGIN
    positions = {}
    for level, node_ids in columns.items():
        for row, node_id in enumerate(sorted(node_ids, key=_natural_key)):
            node = state.find_node_by_id(node_id)
            positions[node] = (margin + level * constants.TREE_COLUMN_GAP,
                               margin + row * constants.TREE_ROW_GAP)
    _commit(state, positions, record)
    return result


def tree_cells(predecessors: Predecessors, root: Optional[str] = None) -> Dict[str, Tuple[int, int]]:
    """
    (row, column) of every node reachable from a root of the predecessor map.

    Column is the depth. A node's first child shares its row, later children
    take the lowest row not used so far, so subtrees never overlap. ``root``
    is laid out first; other roots follow, each starting on a fresh row.
    """
    successors = successors_from_predecessors(predecessors)
    roots = [node for node, parent in predecessors.items() if parent is None]
    if root is not None and root in roots:
        roots.remove(root)
        roots.insert(0, root)

    cells: Dict[str, Tuple[int, int]] = {}
    next_row = 0
    # Frames: [node, row, column, children iterator, first child still pending]
    stack: list = []

    def visit(node: str, row: int, column: int) -> None:
        nonlocal next_row
        cells[node] = (row, column)
        next_row = max(next_row, row + 1)
        stack.append([node, row, column, iter(successors.get(node, [])), True])

    for start in roots:
        if start in cells:
            continue
        visit(start, next_row, 0)
        while stack:
            frame = stack[-1]
            child = next(frame[3], None)
            if child is None:
                stack.pop()
                continue
            if child in cells:
                continue
            child_row = frame[1] if frame[4] else next_row
            frame[4] = False
            visit(child, child_row, frame[2] + 1)
    return cells


def tree_arrange(state: "GraphState", predecessors: Predecessors, root=None,
                 record: bool = True) -> Dict[str, Tuple[int, int]]:
    """
    Lay out a traversal tree left to right: depth gives the column, rows are
    assigned by ``tree_cells``. Nodes missing from the map keep their position.
    ``root`` may be a Node or a node id.
    """
    root_id = root.id if isinstance(root, Node) else root
    cells = tree_cells(predecessors, root_id)
    margin = constants.LAYOUT_MARGIN
    positions = {}
    for node_id, (row, column) in cells.items():
        node = state.find_node_by_id(node_id)
        if node is None:
            continue
        positions[node] = (margin + column * constants.TREE_COLUMN_GAP,
                           margin + row * constants.TREE_ROW_GAP)
    _commit(state, positions, record)
    return cells


def _spiral(anchor: Tuple[float, float]):
    """Candidate points around the anchor, ring by ring, starting with the anchor itself."""
    ax, ay = anchor
    yield ax, ay
    steps = max(1, round(360 / constants.ORGANIC_ANGLE_STEP))
    for ring in range(1, constants.ORGANIC_MAX_RINGS + 1):
        radius = ring * constants.ORGANIC_RING_STEP
        for i in range(steps):
            angle = math.radians(i * constants.ORGANIC_ANGLE_STEP)
            yield ax + radius * math.cos(angle), ay + radius * math.sin(angle)


def organic_arrange(state: "GraphState", record: bool = True) -> None:
    """
    Greedy spiral placement.

    Nodes are placed in insertion order, each around its first already
    placed neighbour (or the centroid of the graph when it has none), at the
    first spiral candidate farther than ``ORGANIC_MIN_DISTANCE`` from every
    node placed before it. Edge crossings are not considered.
    """
    nodes = list(state.nodes)
    if not nodes:
        return
    centroid = (sum(n.x for n in nodes) / len(nodes), sum(n.y for n in nodes) / len(nodes))
    adj = build_adjacency(state, undirected=True)
    placed: Dict[str, Tuple[float, float]] = {}
    min_distance = constants.ORGANIC_MIN_DISTANCE

    for node in nodes:
        anchor = next((placed[e.dst] for e in adj[node.id] if e.dst in placed), centroid)
        chosen = None
        for x, y in _spiral(anchor):
            chosen = (x, y)
            if all(math.hypot(x - px, y - py) > min_distance for px, py in placed.values()):
                break
        placed[node.id] = chosen

    _commit(state, {state.find_node_by_id(node_id): pos for node_id, pos in placed.items()}, record)
    logger.info(f"Organic arrange placed {len(placed)} nodes")


def bounding_box(nodes: Iterable[Node], padding: float = 2) -> Optional[Tuple[float, float, float, float]]:
    """(x1, y1, x2, y2) around the nodes, ``padding`` radii beyond each border."""
    nodes = list(nodes)
    if not nodes:
        return None
    return (min(n.x - n.r * padding for n in nodes), min(n.y - n.r * padding for n in nodes),
            max(n.x + n.r * padding for n in nodes), max(n.y + n.r * padding for n in nodes))


def focus_on_all(state: "GraphState", viewport: "Viewport",
                 width: float = constants.CANVAS_WIDTH, height: float = constants.CANVAS_HEIGHT) -> None:
    """Zoom and pan the viewport so every node fits in a ``width`` x ``height`` view."""
    box = bounding_box(state.nodes)
    if box is None:
        viewport.reset()
        return
    x1, y1, x2, y2 = box
    zoom = min(width / (x2 - x1), height / (y2 - y1))
    viewport.zoom = max(viewport.min_zoom, min(zoom, viewport.max_zoom))
    viewport.offset_x = (width - (x2 - x1) * viewport.zoom) / 2 - x1 * viewport.zoom
    viewport.offset_y = (height - (y2 - y1) * viewport.zoom) / 2 - y1 * viewport.zoom
