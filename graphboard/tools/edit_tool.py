"""
Edit tool: the keyboard-driven combination of the others.

N arms a node preview that the next left click drops, pressing on a node
starts an edge and releasing on another one commits it, Delete removes
the selection together with whatever is under the pointer.
"""

from graphboard import constants
from graphboard.elements import EdgePreview, Node
from graphboard.history import record_memento
from graphboard.selection import closest_hover_node, deselect_all, find_elements_by_hover
from graphboard.tools.controller import Tool


def setup(state):
    deselect_all(state)
    state.reset_states()


def mouse_down(state, event):
    if event.button != 0 or state.panning:
        return False
    if state.new_node is not None:
        state.add_node(event.x, event.y)
        state.new_node = None
        return True
    src = closest_hover_node(state, event.x, event.y)
    if src is not None:
        state.new_edge = EdgePreview(src, event.x, event.y, directed=event.shift)
        return True
    return False


def mouse_move(state, event):
    if state.new_node is not None:
        state.new_node.x = event.x
        state.new_node.y = event.y
        return True
    if state.new_edge is not None:
        state.new_edge.move_to(event.x, event.y)
        return True
    return False


def mouse_up(state, event):
    if event.button != 0 or state.new_edge is None:
        return False
    preview = state.new_edge
    state.new_edge = None
    dst = closest_hover_node(state, event.x, event.y)
    # add_edge ignores a missing or identical destination
    state.add_edge(preview.src, dst, directed=preview.directed)
    return True


def key_down(state, event):
    if event.code == constants.DELETE_KEY:
        targets = list(state.selected)
        for element in find_elements_by_hover(state, *state.pointer):
            if not any(element is t for t in targets):
                targets.append(element)
        if not targets:
            return False
        record_memento(state)
        # Edges first so deleting a node does not leave a stale edge in the list
        for element in sorted(targets, key=lambda e: e.kind != "edge"):
            element.delete()
        return True

    if event.code == constants.NODE_CREATION_KEY and not event.has_modifier:
        x, y = state.pointer
        preview = Node(x, y, "...")
        preview.opacity = constants.PREVIEW_NODE_OPACITY
        state.new_node = preview
        return True
    return False


def clean(state):
    state.new_node = None
    state.new_edge = None


TOOL = Tool(
    name="edit",
    setup=setup,
    mouse_down=mouse_down,
    mouse_up=mouse_up,
    mouse_move=mouse_move,
    key_down=key_down,
    clean=clean,
)
