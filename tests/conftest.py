import pytest

from graphboard.config import EditorConfig
from graphboard.serialization import load_edge_list
from graphboard.state import GraphState
from graphboard.tools import create_tool_controller


@pytest.fixture
def state():
    # Never touch the real cache file from tests
    return GraphState(EditorConfig(cache=False, snap_to_grid=False))


@pytest.fixture
def controller(state):
    return create_tool_controller(state)


def build(state, text):
    """Load an edge list without arranging and start with an empty history."""
    load_edge_list(state, text, arrange=False)
    state.memento = []
    state.memento_redo = []
    return {node.label: node for node in state.nodes}


def place(nodes, **positions):
    for label, (x, y) in positions.items():
        nodes[label].x = x
        nodes[label].y = y
