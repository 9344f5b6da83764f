"""
Default-shortcut layer.

One handler per event kind, evaluated by ToolController.dispatch before the
active tool's own callback. Each handler returns True when it consumed the
event (the shell then suppresses the browser default).
"""

import logging
from typing import TYPE_CHECKING

from graphboard import constants
from graphboard.clipboard import copy_selection, paste
from graphboard.history import record_memento, redo, undo
from graphboard.selection import deselect_all, select_all
from graphboard.tools.events import KeyEvent, PointerEvent, ScrollEvent

if TYPE_CHECKING:
    from graphboard.tools.controller import ToolController

logger = logging.getLogger(__name__)

ARROWS = {
    "ArrowUp": (0, -1),
    "ArrowDown": (0, 1),
    "ArrowLeft": (-1, 0),
    "ArrowRight": (1, 0),
}


def is_panning(controller: "ToolController") -> bool:
    state = controller.state
    return constants.PAN_KEY in state.keys_down or state.mouse_button == 1 or state.tool == "drag"


def handle_key_down(controller: "ToolController", event: KeyEvent) -> bool:
    state = controller.state
    code = event.code

    # Tool hotkeys only without modifiers, so Ctrl+1 etc. stay free
    if code in constants.TOOLS_KEYS and not event.has_modifier:
        controller.activate_by_key(code)
        return True

    if code == constants.PAN_KEY:
        if state.cursor != "grabbing":
            state.cursor = "grab"
        return True

    if code in ARROWS:
        dx, dy = ARROWS[code]
        if event.ctrl:
            # Ctrl+arrow pans the view the opposite way the content moves
            speed = constants.SHORTCUT_ARROWS_PAN_SPEED
            controller.viewport.pan_by(-dx * speed, -dy * speed)
            return True
        nodes = state.selected_nodes()
        if nodes:
            record_memento(state)
            for node in nodes:
                node.move_by(dx * constants.ARROW_NUDGE, dy * constants.ARROW_NUDGE)
            state.trigger_graph_listeners()
        return True

    if code == constants.RESET_KEY:
        deselect_all(state)
        state.reset_states()
        controller.viewport.reset()
        return True

    # The edit tool deletes the selection together with the hovered element
    if code == constants.DELETE_KEY and state.selected and state.tool != "edit":
        record_memento(state)
        for element in list(state.selected):
            element.delete()
        return True

    if not event.ctrl:
        return False

    if code == "KeyA":
        select_all(state)
        return True
    if code == "KeyZ" and not event.shift:
        undo(state)
        return True
    if code == "KeyY" or (code == "KeyZ" and event.shift):
        redo(state)
        return True
    if code == "KeyC":
        if state.selected_nodes():
            controller.clipboard = copy_selection(state)
            logger.debug(f"Copied {len(controller.clipboard.nodes)} nodes")
        return True
    if code == "KeyV":
        if controller.clipboard is not None:
            paste(state, controller.clipboard)
        return True
    return False


def handle_key_up(controller: "ToolController", event: KeyEvent) -> bool:
    if event.code == constants.PAN_KEY:
        controller.state.cursor = "grab" if controller.state.tool == "drag" else "default"
        controller.state.panning = False
        return True
    return False


def handle_mouse_down(controller: "ToolController", event: PointerEvent) -> bool:
    if is_panning(controller):
        controller.state.panning = True
        controller.state.cursor = "grabbing"
        return True
    return False


def handle_mouse_up(controller: "ToolController", event: PointerEvent) -> bool:
    state = controller.state
    if not state.panning:
        return False
    state.panning = False
    dragging_view = constants.PAN_KEY in state.keys_down or state.tool == "drag"
    state.cursor = "grab" if dragging_view else "default"
    return True


def handle_mouse_move(controller: "ToolController", event: PointerEvent) -> bool:
    if controller.state.panning:
        controller.viewport.pan_by(event.dx, event.dy)
        return True
    return False


def handle_scroll(controller: "ToolController", event: ScrollEvent) -> bool:
    if event.delta < 0:
        controller.viewport.zoom_in()
    elif event.delta > 0:
        controller.viewport.zoom_out()
    return True


def handle_blur(controller: "ToolController", event=None) -> bool:
    controller.state.panning = False
    controller.state.cursor = "default"
    return False


DEFAULT_LAYER = {
    "key_down": handle_key_down,
    "key_up": handle_key_up,
    "mouse_down": handle_mouse_down,
    "mouse_up": handle_mouse_up,
    "mouse_move": handle_mouse_move,
    "scroll": handle_scroll,
    "blur": handle_blur,
}
