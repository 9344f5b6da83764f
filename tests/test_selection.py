import pytest

from conftest import build, place

from graphboard.selection import (
    arm_drag,
    closest_hover_element,
    closest_hover_node,
    deselect_all,
    end_selection_box,
    find_elements_within,
    handle_primary_button_down,
    handle_primary_button_up,
    handle_select_dragging,
    select_all,
    start_selection_box,
    stop_dragging,
    update_selection_box,
)
from graphboard.state import DragState, SelectionBox


@pytest.fixture
def nodes(state):
    nodes = build(state, "A-B\nB-C")
    place(nodes, A=(0, 0), B=(200, 0), C=(200, 200))
    return nodes


def test_hover_prefers_nodes_over_edges(state, nodes):
    assert closest_hover_element(state, 5, 0) is nodes["A"]
    assert closest_hover_element(state, 100, 3) is state.edges[0]
    assert closest_hover_element(state, 100, 100) is None


def test_closest_hover_node_defaults_to_pointer(state, nodes):
    state.pointer = (198, 5)
    assert closest_hover_node(state) is nodes["B"]


def test_click_selects_only_the_clicked_element(state, nodes):
    nodes["B"].select()
    assert handle_primary_button_down(state, 0, 0, shift=False) is nodes["A"]
    assert state.selected == [nodes["A"]]


def test_click_on_selected_element_keeps_selection(state, nodes):
    select_all(state)
    handle_primary_button_down(state, 0, 0, shift=False)
    assert len(state.selected) == 5


def test_shift_click_toggles(state, nodes):
    nodes["A"].select()
    handle_primary_button_down(state, 200, 0, shift=True)
    assert state.selected == [nodes["A"], nodes["B"]]
    handle_primary_button_down(state, 0, 0, shift=True)
    assert state.selected == [nodes["B"]]


def test_click_on_empty_space_clears_and_drops_useless_snapshot(state, nodes):
    state.memento = ["previous"]
    handle_primary_button_down(state, 500, 500, shift=False, recorded=True)
    assert state.selected == []
    assert state.memento == []


def test_click_on_empty_space_keeps_snapshot_when_selection_changes(state, nodes):
    nodes["A"].select()
    state.memento = ["previous"]
    handle_primary_button_down(state, 500, 500, shift=False, recorded=True)
    assert state.selected == []
    assert state.memento == ["previous"]


def test_button_up_after_drag_keeps_selection(state, nodes):
    select_all(state)
    state.prevent_deselect = True
    handle_primary_button_up(state, 0, 0, shift=False)
    assert len(state.selected) == 5
    assert not state.prevent_deselect


def test_button_up_narrows_selection(state, nodes):
    select_all(state)
    handle_primary_button_up(state, 0, 0, shift=False)
    assert state.selected == [nodes["A"]]


class TestSelectionBox:
    def test_selects_nodes_by_centre_and_edges_by_midpoint(self, state, nodes):
        start_selection_box(state, -50, -50)
        update_selection_box(state, 250, 50)
        inside = end_selection_box(state)
        assert inside == [nodes["A"], nodes["B"], state.edges[0]]
        assert state.selection_box is None
        assert set(state.selected) == set(inside)

    def test_reversed_box(self, state, nodes):
        box = SelectionBox(250, 250, 150, 150)
        assert find_elements_within(state, box) == [nodes["C"]]

    def test_hidden_elements_are_skipped(self, state, nodes):
        nodes["C"].hidden = True
        assert find_elements_within(state, SelectionBox(150, 150, 250, 250)) == []

    def test_end_without_box(self, state, nodes):
        assert end_selection_box(state) == []


class TestDragging:
    def test_drag_moves_selected_nodes(self, state, nodes):
        nodes["A"].select()
        nodes["B"].select()
        arm_drag(state, 0, 0)
        assert state.drag_state is DragState.ARMED

        assert handle_select_dragging(state, 30, 10)
        assert state.drag_state is DragState.ACTIVE
        assert (nodes["A"].x, nodes["A"].y) == (30, 10)

        assert stop_dragging(state)
        assert (nodes["B"].x, nodes["B"].y) == (230, 10)
        assert nodes["B"].offset == (0.0, 0.0)
        assert state.prevent_deselect
        assert state.drag_state is DragState.IDLE

    def test_drag_snaps_first_selected_node_to_grid(self, state, nodes):
        state.snap_to_grid = True
        state.grid_size = 50
        nodes["A"].x, nodes["A"].y = 10, 10
        nodes["A"].select()
        arm_drag(state, 10, 10)
        handle_select_dragging(state, 60, 40)
        stop_dragging(state)
        assert (nodes["A"].x, nodes["A"].y) == (50, 50)

    def test_not_dragging_when_idle(self, state, nodes):
        assert not handle_select_dragging(state, 10, 10)
        assert not stop_dragging(state)
        assert not state.prevent_deselect


def test_deselect_all(state, nodes):
    select_all(state)
    deselect_all(state)
    assert state.selected == []
    assert not any(e.selected for e in state.elements())
