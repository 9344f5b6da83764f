"""
Local graph cache.

The session graph is written to a JSON file in the data directory after
edits and restored on the next start. Unlike the persistence record it keeps
element ids and the selection, so the restored session is the same one.
View state (algorithm badges, hidden flags, style overrides) is not cached.
"""

import json
import logging
from pathlib import Path
from typing import Optional, TYPE_CHECKING

from graphboard import constants
from graphboard.elements import Edge, Node
from graphboard.paths import ensure_data_dir, get_cache_path

if TYPE_CHECKING:
    from graphboard.state import GraphState

logger = logging.getLogger(__name__)

CACHE_VERSION = 1


def cache_payload(state: "GraphState") -> dict:
    return {
        "version": CACHE_VERSION,
        "nodes": [
            {"id": n.id, "x": n.x, "y": n.y, "r": n.r, "label": n.label}
            for n in state.nodes
        ],
        "edges": [
            {"id": e.id, "src": e.src.id, "dst": e.dst.id, "weight": e.weight, "directed": e.directed}
            for e in state.edges
        ],
        "selected": [e.id for e in state.selected],
    }


def save_to_cache(state: "GraphState", path: Optional[Path] = None) -> bool:
    """Write the graph to the cache file. Returns False when caching is disabled."""
    if not state.config.cache:
        return False
    if path is None:
        ensure_data_dir()
        path = get_cache_path()
    with open(path, "w", encoding="utf-8") as f:
        json.dump(cache_payload(state), f, indent=2, ensure_ascii=False)
    logger.debug(f"Saved graph to cache {path}")
    return True


def load_from_cache(state: "GraphState", path: Optional[Path] = None) -> bool:
    """
    Replace the graph with the cached one.

    Returns False, leaving the graph untouched, when caching is disabled,
    the file is missing, or its content is corrupt.
    """
    if not state.config.cache:
        return False
    path = path or get_cache_path()
    if not path.exists():
        return False
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
        nodes, edges = _rebuild(data)
        selected = _selected_ids(data)
    except (json.JSONDecodeError, IOError, KeyError, TypeError, ValueError) as e:
        logger.warning(f"Ignoring corrupt graph cache {path}: {e}")
        return False

    with state.suppressed_listeners():
        state.selected = []
        state.nodes = nodes
        state.edges = edges
        state.reset_states()
        state.selected = [e for e in state.elements() if e.id in selected]
    state.trigger_graph_listeners()
    state.trigger_selection_listeners()
    logger.info(f"Loaded graph from cache: {len(nodes)} nodes, {len(edges)} edges")
    return True


def _selected_ids(data: dict) -> set:
    selected = data.get("selected", [])
    if not isinstance(selected, list) or not all(isinstance(i, str) for i in selected):
        raise ValueError("selected must be a list of element ids")
    return set(selected)


def _rebuild(data: dict):
    """Nodes and edges from a cache payload, edges re-linked to nodes by id."""
    if not isinstance(data, dict):
        raise TypeError(f"cache payload must be an object, got {type(data).__name__}")
    nodes = [
        Node(float(n["x"]), float(n["y"]), n.get("label"), n.get("r", constants.NODE_RADIUS), element_id=n["id"])
        for n in data["nodes"]
    ]
    by_id = {node.id: node for node in nodes}
    if len(by_id) != len(nodes):
        raise ValueError("duplicate node ids")
    edges = []
    for e in data["edges"]:
        # Unknown endpoints raise KeyError, self-loops raise SelfLoopError (a ValueError)
        edges.append(Edge(by_id[e["src"]], by_id[e["dst"]], e.get("weight", constants.DEFAULT_EDGE_WEIGHT),
                          bool(e.get("directed", False)), element_id=e["id"]))
    return nodes, edges
