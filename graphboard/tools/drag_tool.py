"""Drag tool: every press pans the view (handled by the default layer); only the cursor lives here."""

from graphboard.tools.controller import Tool


def setup(state):
    state.reset_states()
    state.cursor = "grab"


def clean(state):
    state.panning = False
    state.cursor = "default"


TOOL = Tool(name="drag", setup=setup, clean=clean)
