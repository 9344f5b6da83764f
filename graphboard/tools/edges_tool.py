"""
Edges tool: press on a node to start an edge, release on another node to
connect them. Holding Shift makes the new edge directed.
"""

import logging

from graphboard.elements import EdgePreview
from graphboard.selection import closest_hover_node
from graphboard.tools.controller import Tool

logger = logging.getLogger(__name__)


def setup(state):
    state.reset_states()


def mouse_down(state, event):
    if event.button != 0 or state.panning:
        return False
    src = closest_hover_node(state, event.x, event.y)
    if src is None:
        logger.debug("Edge mode: press on a node to start an edge")
        return False
    state.new_edge = EdgePreview(src, event.x, event.y, directed=event.shift)
    return True


def mouse_move(state, event):
    if state.new_edge is None:
        return False
    state.new_edge.move_to(event.x, event.y)
    return True


def mouse_up(state, event):
    if event.button != 0 or state.new_edge is None:
        return False
    preview = state.new_edge
    state.new_edge = None
    dst = closest_hover_node(state, event.x, event.y)
    if dst is None:
        return True
    if dst is preview.src:
        logger.debug("Edge mode: source and destination must differ")
        return True
    state.add_edge(preview.src, dst, directed=preview.directed)
    return True


def key_down(state, event):
    if event.is_shift and state.new_edge is not None:
        state.new_edge.directed = True
        return True
    return False


def key_up(state, event):
    if event.is_shift and state.new_edge is not None:
        state.new_edge.directed = False
        return True
    return False


def clean(state):
    state.reset_states()


TOOL = Tool(
    name="edges",
    setup=setup,
    mouse_down=mouse_down,
    mouse_up=mouse_up,
    mouse_move=mouse_move,
    key_down=key_down,
    key_up=key_up,
    clean=clean,
)
