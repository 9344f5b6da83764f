from urllib.parse import unquote

import pytest

from conftest import build

from graphboard import constants
from graphboard.errors import GraphFormatError
from graphboard.history import undo
from graphboard.serialization import (
    graph_param,
    is_valid_line,
    load_edge_array,
    load_edge_list,
    load_from_url,
    load_record,
    parse_edge_line,
    parse_edge_list,
    to_edge_list,
    to_record,
    to_share_url,
    validate_record,
)
from graphboard.state import GraphState


def edge_summary(state):
    return [(e.src.label, e.dst.label, e.weight, e.directed) for e in state.edges]


class TestParsing:
    @pytest.mark.parametrize("line, expected", [
        ("A", ("A", None, None, False)),
        ("A-B", ("A", "B", None, False)),
        ("A->B", ("A", "B", None, True)),
        ("A-{5}-B", ("A", "B", 5, False)),
        ("A-{2.5}->B", ("A", "B", 2.5, True)),
        ("A-{2,5}-B", ("A", "B", 2.5, False)),
        ("A-{-3}-B", ("A", "B", -3, False)),
        ("  node_1-{10}->n2  ", ("node_1", "n2", 10, True)),
    ])
    def test_valid_lines(self, line, expected):
        parsed = parse_edge_line(line)
        assert (parsed.src, parsed.dst, parsed.weight, parsed.directed) == expected

    @pytest.mark.parametrize("line", ["A--B", "A-", "A B", "A-{x}-B", "A<-B", "-B", "A-{5}B"])
    def test_invalid_lines(self, line):
        assert not is_valid_line(line)

    def test_self_loop(self):
        with pytest.raises(GraphFormatError):
            parse_edge_line("A-A")

    def test_error_carries_line_number(self):
        with pytest.raises(GraphFormatError) as info:
            parse_edge_list("A-B\n\nB-?C")
        assert info.value.line == 3
        assert str(info.value).startswith("Line 3:")

    def test_blank_lines_are_skipped(self):
        assert len(parse_edge_list("\nA-B\n   \nC\n")) == 2


class TestLoadEdgeList:
    def test_mixed_graph(self, state):
        load_edge_list(state, "A-{5}-B\nB-C\nC->A")
        assert [n.label for n in state.nodes] == ["A", "B", "C"]
        assert edge_summary(state) == [
            ("A", "B", 5, False),
            ("B", "C", constants.DEFAULT_EDGE_WEIGHT, False),
            ("C", "A", constants.DEFAULT_EDGE_WEIGHT, True),
        ]

    def test_nodes_are_arranged_in_a_circle(self, state):
        load_edge_list(state, "A-B\nB-C")
        assert len({(n.x, n.y) for n in state.nodes}) == 3

    def test_repeated_edges_are_kept_once(self, state):
        load_edge_list(state, "A-B\nB-A\nA-{3}-B")
        assert len(state.edges) == 1

    def test_invalid_text_leaves_graph_untouched(self, state):
        build(state, "X-Y")
        with pytest.raises(GraphFormatError):
            load_edge_list(state, "A-B\nnot valid")
        assert [n.label for n in state.nodes] == ["X", "Y"]
        assert state.memento == []

    def test_load_is_undoable(self, state):
        build(state, "X-Y")
        load_edge_list(state, "A-B\nB-C")
        undo(state)
        assert [n.label for n in state.nodes] == ["X", "Y"]

    def test_load_replaces_selection(self, state):
        nodes = build(state, "X-Y")
        nodes["X"].select()
        load_edge_list(state, "A")
        assert state.selected == []

    def test_edge_array(self, state):
        load_edge_array(state, [("A", "B", 2), ("B", "C")], directed=True)
        assert edge_summary(state) == [("A", "B", 2, True), ("B", "C", 1, True)]
        with pytest.raises(GraphFormatError):
            load_edge_array(state, [("A",)])


class TestToEdgeList:
    def test_text_round_trip(self, state):
        text = "A-{5}-B\nB-C\nC->A\nD-{2.5}->B\nE"
        load_edge_list(state, text)
        assert to_edge_list(state) == text

    def test_labels_that_cannot_be_written(self, state):
        state.add_node(0, 0, label="two words")
        with pytest.raises(GraphFormatError):
            to_edge_list(state)

    def test_duplicate_labels(self, state):
        state.add_node(0, 0, label="A")
        state.add_node(0, 0, label="A")
        with pytest.raises(GraphFormatError):
            to_edge_list(state)


class TestShareUrl:
    def test_round_trip(self, state):
        load_edge_list(state, "A-{5}-B\nB->C\nD")
        url = to_share_url(state, "http://localhost:8080/?theme=dark")
        assert url.startswith("http://localhost:8080/?")
        assert "theme=dark" in url
        assert unquote(graph_param(url)) == "A-{5}-B_B->C_D"

        other = GraphState(state.config)
        assert load_from_url(other, url)
        assert to_edge_list(other) == to_edge_list(state)

    def test_url_without_graph(self, state):
        assert graph_param("http://localhost:8080/") is None
        assert not load_from_url(state, "http://localhost:8080/?x=1")

    def test_underscore_labels_cannot_be_shared(self, state):
        load_edge_list(state, "a_b-c")
        with pytest.raises(GraphFormatError):
            to_share_url(state, "http://localhost/")


class TestRecord:
    def test_template_graph(self, state):
        created = load_record(state, constants.TEMPLATE_GRAPH)
        assert len(created) == 5
        assert len(state.edges) == 5
        assert (state.nodes[0].x, state.nodes[0].y) == (711, 372)

    def test_round_trip(self, state):
        load_edge_list(state, "A-{5}-B\nB->C")
        record = to_record(state)
        other = GraphState(state.config)
        load_record(other, record)
        assert to_record(other) == record
        assert edge_summary(other) == edge_summary(state)

    def test_missing_labels_are_generated(self, state):
        load_record(state, {"nodes": [{"x": 0, "y": 0, "label": "A"}, {"x": 1, "y": 1}], "edges": []})
        assert [n.label for n in state.nodes] == ["A", "B"]
        assert state.nodes[1].r == constants.NODE_RADIUS

    def test_generated_labels_skip_later_explicit_ones(self, state):
        load_record(state, {"nodes": [{"x": 0, "y": 0}, {"x": 50, "y": 0, "label": "A"}],
                            "edges": []})
        assert [n.label for n in state.nodes] == ["B", "A"]
        assert [n["label"] for n in to_record(state)["nodes"]] == ["B", "A"]

    def test_append_can_reference_existing_labels(self, state):
        load_edge_list(state, "A-B")
        created = load_record(state, {"nodes": [{"x": 0, "y": 0, "label": "C"}],
                                      "edges": [{"src": "A", "dst": "C", "weight": 4}]}, append=True)
        assert [n.label for n in created] == ["C"]
        assert [n.label for n in state.nodes] == ["A", "B", "C"]
        assert edge_summary(state)[-1] == ("A", "C", 4, False)
        assert len({e.id for e in state.elements()}) == 5

    @pytest.mark.parametrize("record", [
        [],
        {"nodes": "A"},
        {"nodes": [{"x": "0", "y": 0}]},
        {"nodes": [{"x": 0, "y": 0, "r": -1}]},
        {"nodes": [{"x": 0, "y": 0, "label": "A"}, {"x": 0, "y": 0, "label": "A"}]},
        {"nodes": [{"x": 0, "y": 0, "label": "A"}], "edges": [{"src": "A", "dst": "B"}]},
        {"nodes": [{"x": 0, "y": 0, "label": "A"}], "edges": [{"src": "A", "dst": "A"}]},
        {"nodes": [{"x": 0, "y": 0, "label": "A"}, {"x": 0, "y": 0, "label": "B"}],
         "edges": [{"src": "A", "dst": "B", "weight": True}]},
    ])
    def test_invalid_records(self, record):
        with pytest.raises(GraphFormatError):
            validate_record(record)

    def test_invalid_record_leaves_graph_untouched(self, state):
        build(state, "X-Y")
        with pytest.raises(GraphFormatError):
            load_record(state, {"nodes": [{"x": 0}]})
        assert [n.label for n in state.nodes] == ["X", "Y"]
