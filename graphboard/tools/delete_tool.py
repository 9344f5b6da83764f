"""Delete tool: left click removes the hovered element."""

from graphboard.history import record_memento
from graphboard.selection import closest_hover_element
from graphboard.tools.controller import Tool


def mouse_down(state, event):
    if event.button != 0 or state.panning:
        return False
    element = closest_hover_element(state, event.x, event.y)
    if element is None:
        return False
    record_memento(state)
    element.delete()
    return True


TOOL = Tool(name="delete", mouse_down=mouse_down)
