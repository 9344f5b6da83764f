"""
GraphBoard - interactive node/edge graph editor.

The editing engine (state container, selection, history, tools) lives in
this package; ``app.py`` at the repository root is the NiceGUI shell.
"""

from graphboard.config import EditorConfig, get_editor_config
from graphboard.elements import Edge, EdgePreview, Element, Node
from graphboard.errors import GraphboardError, GraphFormatError, SelfLoopError, UnknownToolError
from graphboard.state import DragState, GraphState, SelectionBox

__version__ = "0.1.0"

__all__ = [
    "DragState",
    "Edge",
    "EdgePreview",
    "EditorConfig",
    "Element",
    "GraphFormatError",
    "GraphState",
    "GraphboardError",
    "Node",
    "SelectionBox",
    "SelfLoopError",
    "UnknownToolError",
    "get_editor_config",
]
