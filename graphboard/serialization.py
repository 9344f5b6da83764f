"""
Loading and saving graphs.

Two external formats:

- The persistence record ``{"nodes": [{x, y, r, label}], "edges": [{src, dst,
  weight, directed}]}``. Edges reference nodes by label, so labels must be
  unique.
- The plain-text edge list, one element per line::

      A            isolated node
      A-B          undirected edge, default weight
      A-{5}-B      undirected edge with weight 5
      A->B         directed edge
      A-{2.5}->B   directed edge with weight 2.5

Every loader validates its whole input before touching the graph: on
GraphFormatError the live graph is left exactly as it was. A successful load
records a history snapshot first, so it can be undone.
"""

import logging
import re
from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional, Sequence, TYPE_CHECKING
from urllib.parse import parse_qs, urlencode, urlsplit, urlunsplit

from graphboard import constants
from graphboard.elements import Edge, Node
from graphboard.errors import GraphFormatError
from graphboard.history import record_memento
from graphboard.layout import circular_arrange
from graphboard.state import column_label

if TYPE_CHECKING:
    from graphboard.state import GraphState

logger = logging.getLogger(__name__)

URL_PARAM = "graph"
URL_LINE_SEPARATOR = "_"

_LABEL = r"\w+"
_WEIGHT = r"-?\d+(?:[.,]\d+)?"
_EDGE_LINE = re.compile(rf"^({_LABEL})(?:-\{{({_WEIGHT})\}})?-(>?)({_LABEL})$")
_NODE_LINE = re.compile(rf"^({_LABEL})$")


@dataclass(frozen=True)
class ParsedLine:
    """One edge-list line. ``dst`` is None for an isolated node."""
    src: str
    dst: Optional[str] = None
    weight: Optional[float] = None
    directed: bool = False

    @property
    def is_node(self) -> bool:
        return self.dst is None


def _parse_weight(raw: str) -> float:
    if "." in raw or "," in raw:
        return float(raw.replace(",", "."))
    return int(raw)


def parse_edge_line(line: str, line_number: Optional[int] = None) -> ParsedLine:
    """Parse one non-empty line of the edge-list mini-language."""
    text = line.strip()
    match = _NODE_LINE.match(text)
    if match:
        return ParsedLine(match.group(1))
    match = _EDGE_LINE.match(text)
    if match is None:
        raise GraphFormatError(f"Invalid element '{text}'", line_number)
    src, weight, arrow, dst = match.groups()
    if src == dst:
        raise GraphFormatError(f"Self-loop on '{src}' is not allowed", line_number)
    return ParsedLine(src, dst, _parse_weight(weight) if weight is not None else None, arrow == ">")


def is_valid_line(line: str) -> bool:
    try:
        parse_edge_line(line)
    except GraphFormatError:
        return False
    return True


def parse_edge_list(text: str) -> List[ParsedLine]:
    """Parse every non-blank line; the first malformed line raises with its 1-based number."""
    parsed = []
    for number, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        parsed.append(parse_edge_line(line, number))
    return parsed


# --- Building the graph ---

def _replace_graph(state: "GraphState", nodes: List[Node], edges: List[Edge], append: bool) -> None:
    """Swap (or extend) the collections in one notification, after a history snapshot."""
    record_memento(state)
    with state.suppressed_listeners():
        if append:
            state.push_nodes(*nodes)
            state.push_edges(*edges)
        else:
            state.selected = []
            state.nodes = nodes
            state.edges = edges
            state.reset_states()
    state.trigger_graph_listeners()
    state.trigger_selection_listeners()


class _IdAllocator:
    """Hands out ``Node7`` style ids unique against the graph and each other."""

    def __init__(self, state: "GraphState", append: bool):
        self.taken = {e.id for e in state.elements()} if append else set()
        self.counters = {"Node": 1, "Edge": 1}

    def __call__(self, kind: str) -> str:
        while f"{kind}{self.counters[kind]}" in self.taken:
            self.counters[kind] += 1
        element_id = f"{kind}{self.counters[kind]}"
        self.taken.add(element_id)
        return element_id


def _add_unique_edge(edges: List[Edge], edge: Edge) -> bool:
    for other in edges:
        if other.connects(edge.src, edge.dst) or (not edge.directed and other.connects(edge.dst, edge.src)):
            return False
    edges.append(edge)
    return True


def load_edge_list(state: "GraphState", text: str, arrange: bool = True) -> None:
    """
    Replace the graph with the one described by an edge list.

    Nodes are created in first-seen order and circular-arranged. Repeated
    edges between the same pair are kept once.
    """
    parsed = parse_edge_list(text)
    new_id = _IdAllocator(state, append=False)
    nodes: Dict[str, Node] = {}
    edges: List[Edge] = []

    def node_for(label: str) -> Node:
        if label not in nodes:
            nodes[label] = Node(0, 0, label, constants.NODE_RADIUS, element_id=new_id("Node"))
        return nodes[label]

    for line in parsed:
        src = node_for(line.src)
        if line.is_node:
            continue
        dst = node_for(line.dst)
        weight = line.weight if line.weight is not None else constants.DEFAULT_EDGE_WEIGHT
        edge = Edge(src, dst, weight, line.directed, element_id=new_id("Edge"))
        if not _add_unique_edge(edges, edge):
            logger.warning(f"Skipping repeated edge {line.src} - {line.dst}")

    _replace_graph(state, list(nodes.values()), edges, append=False)
    if arrange:
        circular_arrange(state, record=False)
    logger.info(f"Loaded edge list: {len(nodes)} nodes, {len(edges)} edges")


def load_edge_array(state: "GraphState", rows: Iterable[Sequence], directed: bool = False,
                    arrange: bool = True) -> None:
    """Replace the graph from ``(src, dst)`` or ``(src, dst, weight)`` rows of labels."""
    lines = []
    for number, row in enumerate(rows, start=1):
        if len(row) not in (2, 3):
            raise GraphFormatError(f"Expected (src, dst[, weight]), got {row!r}", number)
        src, dst = str(row[0]), str(row[1])
        weight = f"-{{{row[2]}}}" if len(row) == 3 and row[2] is not None else ""
        lines.append(f"{src}{weight}-{'>' if directed else ''}{dst}")
    load_edge_list(state, "\n".join(lines), arrange=arrange)


def to_edge_list(state: "GraphState") -> str:
    """Edge-list text for the graph: one line per edge, then isolated nodes."""
    lines = []
    connected = set()
    for edge in state.edges:
        for node in (edge.src, edge.dst):
            _check_word_label(node)
            connected.add(node.id)
        weight = "" if edge.weight == constants.DEFAULT_EDGE_WEIGHT else f"-{{{_format_number(edge.weight)}}}"
        arrow = "->" if edge.directed else "-"
        lines.append(f"{edge.src.label}{weight}{arrow}{edge.dst.label}")
    for node in state.nodes:
        if node.id not in connected:
            _check_word_label(node)
            lines.append(str(node.label))
    _check_unique_labels(state.nodes)
    return "\n".join(lines)


def _check_word_label(node: Node) -> None:
    if not _NODE_LINE.match(str(node.label)):
        raise GraphFormatError(f"Label '{node.label}' cannot be written to an edge list")


def _format_number(value: float):
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return value


# --- Share URLs ---

def to_share_url(state: "GraphState", base: str) -> str:
    """``base`` with the edge list in the ``graph`` query parameter, lines joined by ``_``."""
    lines = to_edge_list(state).splitlines()
    if any(URL_LINE_SEPARATOR in line for line in lines):
        raise GraphFormatError("Labels containing '_' cannot be shared in a URL")
    parts = urlsplit(base)
    query = parse_qs(parts.query)
    query[URL_PARAM] = [URL_LINE_SEPARATOR.join(lines)]
    return urlunsplit(parts._replace(query=urlencode(query, doseq=True)))


def graph_param(url: str) -> Optional[str]:
    values = parse_qs(urlsplit(url).query).get(URL_PARAM)
    return values[0] if values else None


def load_from_url(state: "GraphState", url: str) -> bool:
    """Load the graph shared in ``url``. Returns False if the URL carries none."""
    shared = graph_param(url)
    if shared is None:
        return False
    load_edge_list(state, shared.replace(URL_LINE_SEPARATOR, "\n"))
    return True


# --- Persistence record ---

def _check_unique_labels(nodes: Iterable[Node]) -> None:
    seen = set()
    for node in nodes:
        if node.label in seen:
            raise GraphFormatError(f"Duplicate node label '{node.label}'")
        seen.add(node.label)


def to_record(state: "GraphState") -> Dict[str, List[Dict[str, Any]]]:
    _check_unique_labels(state.nodes)
    return {
        "nodes": [{"x": n.x, "y": n.y, "r": n.r, "label": n.label} for n in state.nodes],
        "edges": [
            {"src": e.src.label, "dst": e.dst.label, "weight": e.weight, "directed": e.directed}
            for e in state.edges
        ],
    }


def _number(value: Any, what: str) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise GraphFormatError(f"{what} must be a number, got {value!r}")
    return value


def validate_record(record: Any, existing_labels: Iterable[str] = ()) -> None:
    """Raise GraphFormatError describing the first problem found in the record."""
    if not isinstance(record, dict):
        raise GraphFormatError("Graph record must be an object with 'nodes' and 'edges'")
    nodes = record.get("nodes")
    edges = record.get("edges", [])
    if not isinstance(nodes, list) or not isinstance(edges, list):
        raise GraphFormatError("'nodes' and 'edges' must be lists")

    labels = set(existing_labels)
    for i, node in enumerate(nodes):
        if not isinstance(node, dict):
            raise GraphFormatError(f"Node #{i} must be an object")
        _number(node.get("x"), f"Node #{i} x")
        _number(node.get("y"), f"Node #{i} y")
        if "r" in node and _number(node["r"], f"Node #{i} r") <= 0:
            raise GraphFormatError(f"Node #{i} radius must be positive")
        label = node.get("label")
        if label is None:
            continue
        if label in labels:
            raise GraphFormatError(f"Duplicate node label '{label}'")
        labels.add(label)

    for i, edge in enumerate(edges):
        if not isinstance(edge, dict):
            raise GraphFormatError(f"Edge #{i} must be an object")
        src, dst = edge.get("src"), edge.get("dst")
        for end in (src, dst):
            if end not in labels:
                raise GraphFormatError(f"Edge #{i} references unknown node '{end}'")
        if src == dst:
            raise GraphFormatError(f"Edge #{i} is a self-loop on '{src}'")
        if "weight" in edge and edge["weight"] is not None:
            _number(edge["weight"], f"Edge #{i} weight")


def load_record(state: "GraphState", record: Any, append: bool = False) -> List[Node]:
    """
    Load a persistence record, replacing the graph unless ``append``.

    When appending, edges may also reference labels already in the graph.
    Returns the created nodes.
    """
    existing = {n.label: n for n in state.nodes} if append else {}
    validate_record(record, existing)

    new_id = _IdAllocator(state, append)
    by_label: Dict[str, Node] = dict(existing)
    # Explicit labels are reserved before any missing one is generated
    used_labels = set(existing) | {n["label"] for n in record["nodes"] if n.get("label") is not None}
    nodes = []
    for data in record["nodes"]:
        node = Node(data["x"], data["y"], data.get("label"), data.get("r", constants.NODE_RADIUS),
                    element_id=new_id("Node"))
        if data.get("label") is None:
            node.label = _free_label(used_labels)
        used_labels.add(node.label)
        by_label[node.label] = node
        nodes.append(node)

    edges: List[Edge] = list(state.edges) if append else []
    created = []
    for data in record.get("edges", []):
        weight = data.get("weight")
        edge = Edge(by_label[data["src"]], by_label[data["dst"]],
                    weight if weight is not None else constants.DEFAULT_EDGE_WEIGHT,
                    bool(data.get("directed", False)), element_id=new_id("Edge"))
        if _add_unique_edge(edges, edge):
            created.append(edge)
        else:
            logger.warning(f"Skipping repeated edge {data['src']} - {data['dst']}")

    _replace_graph(state, nodes, created if append else edges, append)
    logger.info(f"Loaded record: {len(nodes)} nodes, {len(created)} edges")
    return nodes


def _free_label(used: set) -> str:
    i = 0
    while column_label(i) in used:
        i += 1
    return column_label(i)
