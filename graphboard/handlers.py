"""
Canvas Handlers - NiceGUI event plumbing for app.py

Translates NiceGUI mouse / keyboard / wheel events into the editor's
PointerEvent / KeyEvent / ScrollEvent, feeds them to the ToolController and
asks the page to redraw afterwards. Kept out of app.py so the page function
stays focused on layout.
"""

import logging
from typing import Any, Callable, Dict, Optional, Tuple

from nicegui import ui

from graphboard.cache import save_to_cache
from graphboard.state import GraphState
from graphboard.tools import KeyEvent, PointerEvent, ScrollEvent, ToolController

logger = logging.getLogger(__name__)

# DOM event type -> controller event kind
MOUSE_EVENT_KINDS = {
    "mousedown": "mouse_down",
    "mouseup": "mouse_up",
    "mousemove": "mouse_move",
    "dblclick": "mouse_double_click",
}


def normalize_mouse_event(e: Any, controller: ToolController,
                          last_screen: Optional[Tuple[float, float]] = None) -> Tuple[Optional[str], PointerEvent]:
    """
    (kind, PointerEvent) for a NiceGUI MouseEventArguments.

    ``image_x``/``image_y`` are screen pixels inside the image; they are
    converted to canvas coordinates through the viewport. Movement is
    measured against ``last_screen`` since the image events carry none.
    """
    screen_x = float(getattr(e, "image_x", 0.0))
    screen_y = float(getattr(e, "image_y", 0.0))
    x, y = controller.viewport.to_canvas(screen_x, screen_y)
    dx = dy = 0.0
    if last_screen is not None:
        dx = screen_x - last_screen[0]
        dy = screen_y - last_screen[1]
    event = PointerEvent(
        x=x,
        y=y,
        button=int(getattr(e, "button", 0) or 0),
        shift=bool(getattr(e, "shift", False)),
        ctrl=bool(getattr(e, "ctrl", False) or getattr(e, "meta", False)),
        alt=bool(getattr(e, "alt", False)),
        dx=dx,
        dy=dy,
    )
    return MOUSE_EVENT_KINDS.get(getattr(e, "type", "")), event


def normalize_key_event(e: Any) -> Tuple[Optional[str], KeyEvent]:
    """(kind, KeyEvent) for a NiceGUI KeyEventArguments. Repeats count as key downs."""
    modifiers = getattr(e, "modifiers", None)
    code = getattr(e.key, "code", None) or str(e.key)
    event = KeyEvent(
        code=code,
        shift=bool(getattr(modifiers, "shift", False)),
        ctrl=bool(getattr(modifiers, "ctrl", False) or getattr(modifiers, "meta", False)),
        alt=bool(getattr(modifiers, "alt", False)),
    )
    action = e.action
    if getattr(action, "keydown", False) or getattr(action, "repeat", False):
        return "key_down", event
    if getattr(action, "keyup", False):
        return "key_up", event
    return None, event


def normalize_wheel_event(e: Any, controller: ToolController) -> ScrollEvent:
    args = e.args if hasattr(e, "args") else e
    args = args or {}
    x, y = controller.viewport.to_canvas(float(args.get("offsetX", 0)), float(args.get("offsetY", 0)))
    return ScrollEvent(delta=float(args.get("deltaY", 0)), x=x, y=y)


def setup_canvas_handlers(
    state: GraphState,
    controller: ToolController,
    redraw: Callable[[], None],
) -> Dict[str, Callable]:
    """
    Build the event handlers for the canvas page.

    Args:
        state: Session graph state
        controller: Tool controller bound to ``state``
        redraw: Re-renders the canvas content

    Returns:
        Dict with handler functions for binding to UI events
    """
    pointer: Dict[str, Optional[Tuple[float, float]]] = {"last": None}
    dirty = {"cache": False}

    def on_graph_change(_state: GraphState) -> None:
        dirty["cache"] = True
        redraw()

    def flush_cache() -> None:
        """Write the graph to the local cache if it changed since the last flush."""
        if dirty["cache"]:
            dirty["cache"] = False
            save_to_cache(state)

    state.add_graph_listener(on_graph_change)
    state.add_selection_listener(lambda _state: redraw())
    state.add_tool_listener(lambda _state: redraw())

    def handle_mouse(e) -> None:
        kind, event = normalize_mouse_event(e, controller, pointer["last"])
        pointer["last"] = (float(getattr(e, "image_x", 0.0)), float(getattr(e, "image_y", 0.0)))
        if kind is None:
            return
        controller.dispatch(kind, event)
        redraw()

    def handle_keyboard(e) -> None:
        kind, event = normalize_key_event(e)
        if kind is None:
            return
        controller.dispatch(kind, event)
        redraw()

    def handle_wheel(e) -> None:
        controller.dispatch("scroll", normalize_wheel_event(e, controller))
        redraw()

    def handle_blur(_e=None) -> None:
        controller.dispatch("blur")
        pointer["last"] = None
        redraw()

    def activate_tool(name: str) -> None:
        controller.activate(name)
        ui.notify(f"Tool: {name}", position="bottom", timeout=500)

    return {
        "handle_mouse": handle_mouse,
        "handle_keyboard": handle_keyboard,
        "handle_wheel": handle_wheel,
        "handle_blur": handle_blur,
        "activate_tool": activate_tool,
        "flush_cache": flush_cache,
    }
