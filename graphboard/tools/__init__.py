"""
Interaction tools.

``create_tool_controller`` wires the six built-in tools to a GraphState and
activates the configured default tool.
"""

from typing import Optional

from graphboard.tools.controller import EVENT_KINDS, Tool, ToolController
from graphboard.tools.events import KeyEvent, PointerEvent, ResizeEvent, ScrollEvent, Viewport
from graphboard.tools import (
    add_nodes_tool,
    delete_tool,
    drag_tool,
    edges_tool,
    edit_tool,
    select_tool,
)

BUILTIN_TOOLS = [
    select_tool.TOOL,
    add_nodes_tool.TOOL,
    edges_tool.TOOL,
    delete_tool.TOOL,
    drag_tool.TOOL,
    edit_tool.TOOL,
]


def create_tool_controller(state, viewport: Optional[Viewport] = None) -> ToolController:
    controller = ToolController(state, BUILTIN_TOOLS, viewport)
    controller.activate(state.config.default_tool)
    return controller


__all__ = [
    "EVENT_KINDS",
    "BUILTIN_TOOLS",
    "KeyEvent",
    "PointerEvent",
    "ResizeEvent",
    "ScrollEvent",
    "Tool",
    "ToolController",
    "Viewport",
    "create_tool_controller",
]
