import pytest

from graphboard.config import EditorConfig
from graphboard.state import GraphState, SelectionBox, column_label


@pytest.mark.parametrize("index, label", [(0, "A"), (25, "Z"), (26, "AA"), (27, "AB"), (701, "ZZ"), (702, "AAA")])
def test_column_label(index, label):
    assert column_label(index) == label


def test_add_node_assigns_labels_and_ids(state):
    a = state.add_node(10, 20)
    b = state.add_node(30, 40)
    assert [n.label for n in state.nodes] == ["A", "B"]
    assert (a.id, b.id) == ("Node1", "Node2")
    assert a.graph is state
    assert (b.x, b.y) == (30, 40)


def test_next_label_fills_gaps(state):
    state.add_node(0, 0)
    b = state.add_node(0, 0)
    state.add_node(0, 0)
    b.delete()
    assert state.next_label() == "B"


def test_generate_id_never_reuses_live_ids(state):
    a = state.add_node(0, 0)
    state.add_node(0, 0)
    a.delete()
    c = state.add_node(0, 0)
    assert c.id == "Node3"


class TestAddEdge:
    """add_edge ignores missing endpoints, self-loops and duplicates."""

    @pytest.fixture
    def pair(self, state):
        return state.add_node(0, 0), state.add_node(100, 0)

    def test_creates_edge(self, state, pair):
        a, b = pair
        edge = state.add_edge(a, b, weight=4)
        assert edge in state.edges
        assert (edge.src, edge.dst, edge.weight, edge.directed) == (a, b, 4, False)
        assert edge.id == "Edge1"

    def test_default_weight(self, state, pair):
        assert state.add_edge(*pair).weight == 1

    def test_ignores_invalid(self, state, pair):
        a, b = pair
        assert state.add_edge(a, None) is None
        assert state.add_edge(None, b) is None
        assert state.add_edge(a, a) is None
        assert state.edges == []

    def test_ignores_duplicates(self, state, pair):
        a, b = pair
        state.add_edge(a, b)
        assert state.add_edge(a, b) is None
        assert state.add_edge(b, a) is None
        assert len(state.edges) == 1

    def test_opposite_directed_edges_coexist(self, state, pair):
        a, b = pair
        state.add_edge(a, b, directed=True)
        assert state.add_edge(b, a, directed=True) is not None
        assert len(state.edges) == 2


def test_deleting_node_removes_incident_edges(state):
    a, b, c = state.add_node(0, 0), state.add_node(100, 0), state.add_node(200, 0)
    state.add_edge(a, b)
    keep = state.add_edge(b, c)
    edge_ab = state.edges[0]
    edge_ab.select()

    a.delete()
    assert state.nodes == [b, c]
    assert state.edges == [keep]
    assert state.selected == []


def test_selection_tracks_element_flags(state):
    a, b = state.add_node(0, 0), state.add_node(100, 0)
    a.select()
    a.select()
    assert state.selected == [a]

    state.selected = [b]
    assert not a.selected and b.selected

    b.toggle_select()
    assert state.selected == []


def test_find_helpers(state):
    a = state.add_node(0, 0, label="Start")
    assert state.find_node_by_label("Start") is a
    assert state.find_node_by_id(a.id) is a
    assert state.find_element_by_id("missing") is None


class TestListeners:
    def test_graph_listener_fires_on_mutation(self, state):
        calls = []
        state.add_graph_listener(calls.append)
        state.add_node(0, 0)
        assert calls == [state]

    def test_suppressed_listeners(self, state):
        calls = []
        state.add_graph_listener(calls.append)
        with state.suppressed_listeners():
            state.add_node(0, 0)
            state.add_node(0, 0)
        assert calls == []
        assert not state.listeners_disabled

    def test_listener_does_not_reenter(self, state):
        calls = []

        def listener(s):
            calls.append(len(s.nodes))
            if len(s.nodes) < 3:
                s.add_node(0, 0)

        state.add_graph_listener(listener)
        state.add_node(0, 0)
        # The nested add_node did not trigger a second round
        assert calls == [1]
        assert len(state.nodes) == 2

    def test_selection_listener_and_removal(self, state):
        calls = []
        state.add_selection_listener(calls.append)
        node = state.add_node(0, 0)
        node.select()
        assert len(calls) == 1

        state.remove_listener(calls.append)
        node.deselect()
        assert len(calls) == 1


def test_reset_keeps_history(state, controller):
    state.add_node(0, 0)
    controller.activate("edges")
    state.reset()
    assert state.nodes == [] and state.edges == []
    assert state.tool == "select"
    assert len(state.memento) == 1


def test_reset_styles_clears_highlights(state):
    node = state.add_node(0, 0)
    node.bubble = "3"
    node.hidden = True
    node.style["border_color"] = "#ff0000"
    state.reset_styles()
    assert node.bubble is None
    assert not node.hidden
    assert node.style == {}


def test_selection_box_accepts_reversed_corners():
    box = SelectionBox(100, 100, 0, 0)
    assert box.normalized() == (0, 0, 100, 100)
    assert box.contains(50, 50)
    assert not box.contains(100, 50)


def test_state_reads_config():
    state = GraphState(EditorConfig(grid_size=25, show_weights=False, history=False))
    assert state.grid_size == 25
    assert not state.show_weights
    state.add_node(0, 0)
    assert state.memento == []
