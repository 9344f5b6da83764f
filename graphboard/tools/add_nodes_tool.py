"""Add-nodes tool: a translucent preview node follows the pointer, left click places it."""

from graphboard import constants
from graphboard.elements import Node
from graphboard.tools.controller import Tool


def snap(value: float, grid_size: int) -> float:
    return round(value / grid_size) * grid_size


def setup(state):
    state.reset_states()
    x, y = state.pointer
    preview = Node(x, y, "...")
    preview.opacity = constants.PREVIEW_NODE_OPACITY
    state.new_node = preview


def move_preview(state, event):
    x, y = event.x, event.y
    # Shift snaps the preview to the grid
    if event.shift:
        x = snap(x, state.grid_size)
        y = snap(y, state.grid_size)
    state.new_node.x = x
    state.new_node.y = y


def mouse_move(state, event):
    if state.new_node is None:
        return False
    move_preview(state, event)
    return True


def mouse_down(state, event):
    if event.button != 0 or state.new_node is None or state.panning:
        return False
    move_preview(state, event)
    preview = state.new_node
    state.add_node(preview.x, preview.y, preview.r)
    return True


def clean(state):
    state.reset_states()


TOOL = Tool(
    name="add-nodes",
    setup=setup,
    mouse_down=mouse_down,
    mouse_move=mouse_move,
    clean=clean,
)
