"""
Tool Controller - the interaction state machine.

Exactly one named tool is active. Every input event goes through ``dispatch``:
the default-shortcut layer for that event kind runs first (undo/redo, select
all, delete, pan, tool hotkeys...), then the active tool's callback for the
event kind if it has one. The return value tells the shell whether the event
was handled, so it can suppress the UI's own default action.
"""

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, TYPE_CHECKING

from graphboard import constants
from graphboard.errors import UnknownToolError
from graphboard.tools.events import KeyEvent, PointerEvent, Viewport
from graphboard.tools import shortcuts

if TYPE_CHECKING:
    from graphboard.state import GraphState

logger = logging.getLogger(__name__)

EventCallback = Callable[["GraphState", Any], Optional[bool]]
LifecycleCallback = Callable[["GraphState"], None]

EVENT_KINDS = (
    "mouse_down",
    "mouse_up",
    "mouse_move",
    "mouse_double_click",
    "key_down",
    "key_up",
    "scroll",
    "resize",
    "focus",
    "blur",
)


@dataclass(frozen=True)
class Tool:
    """A named bundle of optional callbacks. Missing callbacks are skipped."""
    name: str
    setup: Optional[LifecycleCallback] = None
    mouse_down: Optional[EventCallback] = None
    mouse_up: Optional[EventCallback] = None
    mouse_move: Optional[EventCallback] = None
    mouse_double_click: Optional[EventCallback] = None
    key_down: Optional[EventCallback] = None
    key_up: Optional[EventCallback] = None
    scroll: Optional[EventCallback] = None
    resize: Optional[EventCallback] = None
    focus: Optional[EventCallback] = None
    blur: Optional[EventCallback] = None
    clean: Optional[LifecycleCallback] = None

    def callback(self, kind: str) -> Optional[EventCallback]:
        if kind not in EVENT_KINDS:
            raise ValueError(f"Unknown event kind '{kind}'. Valid: {EVENT_KINDS}")
        return getattr(self, kind)


class ToolController:
    """Registry of tools plus the active one, bound to a single GraphState."""

    def __init__(self, state: "GraphState", tools: Optional[List[Tool]] = None,
                 viewport: Optional[Viewport] = None):
        self.state = state
        self.viewport = viewport or Viewport()
        self.clipboard = None  # last ClipboardRecord copied with Ctrl+C
        self.active: Optional[Tool] = None
        self._tools: Dict[str, Tool] = {}
        state.tools = self
        for tool in tools or []:
            self.register(tool)

    @property
    def names(self) -> List[str]:
        return list(self._tools)

    def register(self, tool: Tool) -> None:
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool:
        try:
            return self._tools[name]
        except KeyError:
            raise UnknownToolError(f"Unknown tool '{name}'. Valid: {self.names}") from None

    def activate(self, name: str) -> Tool:
        """Clean the current tool, swap, set up the new one and notify tool listeners."""
        tool = self.get(name)
        if self.active is not None and self.active.clean is not None:
            self.active.clean(self.state)
        self.active = tool
        self.state.tool = name
        if tool.setup is not None:
            tool.setup(self.state)
        logger.debug(f"Activated tool '{name}'")
        self.state.trigger_tool_listeners()
        return tool

    def activate_by_key(self, code: str) -> Tool:
        if code not in constants.TOOLS_KEYS:
            raise UnknownToolError(f"Invalid tool key code '{code}'")
        return self.activate(constants.TOOLS_KEYS[code])

    def dispatch(self, kind: str, event: Any = None) -> bool:
        """
        Route an input event: default-shortcut layer first, then the active
        tool's callback for that kind. Returns True if either handled it.
        """
        self._track_input(kind, event)

        layer = shortcuts.DEFAULT_LAYER.get(kind)
        handled = bool(layer(self, event)) if layer is not None else False

        # Resolved after the layer: a hotkey may just have switched tools
        tool = self.active
        callback = tool.callback(kind) if tool is not None else None
        if callback is not None:
            handled = bool(callback(self.state, event)) or handled

        if kind == "mouse_up":
            self.state.mouse_button = None
        if kind == "key_up" and isinstance(event, KeyEvent):
            self.state.keys_down.discard(event.code)
        return handled

    def _track_input(self, kind: str, event: Any) -> None:
        state = self.state
        if isinstance(event, PointerEvent):
            state.pointer = (event.x, event.y)
            if kind == "mouse_down":
                state.mouse_button = event.button
        elif isinstance(event, KeyEvent) and kind == "key_down":
            state.keys_down.add(event.code)
        elif kind == "blur":
            state.keys_down.clear()
            state.mouse_button = None

    # Shorthands used by the shell

    def mouse_down(self, event: PointerEvent) -> bool:
        return self.dispatch("mouse_down", event)

    def mouse_up(self, event: PointerEvent) -> bool:
        return self.dispatch("mouse_up", event)

    def mouse_move(self, event: PointerEvent) -> bool:
        return self.dispatch("mouse_move", event)

    def key_down(self, event: KeyEvent) -> bool:
        return self.dispatch("key_down", event)

    def key_up(self, event: KeyEvent) -> bool:
        return self.dispatch("key_up", event)
