"""Select tool: click / Shift-click selection, rubber-band box and dragging."""

from graphboard.history import record_memento
from graphboard.selection import (
    arm_drag,
    closest_hover_element,
    end_selection_box,
    handle_primary_button_down,
    handle_primary_button_up,
    handle_select_dragging,
    start_selection_box,
    stop_dragging,
    update_selection_box,
)
from graphboard.state import DragState
from graphboard.tools.controller import Tool


def mouse_down(state, event):
    if event.button != 0:
        return False
    if state.panning:
        # The release that ends a pan must leave the selection alone
        state.prevent_deselect = True
        return False
    recorded = record_memento(state)
    element = handle_primary_button_down(state, event.x, event.y, event.shift, recorded)
    if element is None:
        state.double_click_target = None
        start_selection_box(state, event.x, event.y)
    elif element.selected:
        arm_drag(state, event.x, event.y)
    return True


def mouse_up(state, event):
    if event.button != 0:
        return False
    if state.drag_state is not DragState.IDLE:
        state.cursor = "default"
        stop_dragging(state)
    handle_primary_button_up(state, event.x, event.y, event.shift)
    if state.selection_box is not None:
        end_selection_box(state)
    return True


def mouse_move(state, event):
    if state.mouse_button != 0 or state.panning:
        return False
    if handle_select_dragging(state, event.x, event.y):
        state.cursor = "grabbing"
        return True
    update_selection_box(state, event.x, event.y)
    return state.selection_box is not None


def mouse_double_click(state, event):
    state.double_click_target = closest_hover_element(state, event.x, event.y)
    return state.double_click_target is not None


def clean(state):
    if state.drag_state is not DragState.IDLE:
        stop_dragging(state)
    state.selection_box = None
    state.double_click_target = None


TOOL = Tool(
    name="select",
    mouse_down=mouse_down,
    mouse_up=mouse_up,
    mouse_move=mouse_move,
    mouse_double_click=mouse_double_click,
    clean=clean,
)
