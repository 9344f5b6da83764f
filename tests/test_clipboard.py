import pytest

from conftest import build, place

from graphboard.clipboard import ClipboardRecord, copy_selection, paste, unique_copy_id, validate_clipboard
from graphboard.errors import GraphFormatError
from graphboard.history import undo


@pytest.fixture
def nodes(state):
    nodes = build(state, "A-{4}->B\nB-C")
    place(nodes, A=(0, 0), B=(100, 0), C=(100, 100))
    return nodes


def test_copy_without_nodes_is_empty(state, nodes):
    state.edges[0].select()
    record = copy_selection(state)
    assert record.nodes == [] and record.edges == []
    assert paste(state, record) == []


def test_copy_records_anchor(state, nodes):
    nodes["A"].select()
    nodes["B"].select()
    record = copy_selection(state)
    assert (record.pointer_x, record.pointer_y) == (50, 0)
    assert [n["label"] for n in record.nodes] == ["A", "B"]


def test_paste_lands_under_pointer(state, nodes):
    for element in (nodes["A"], nodes["B"], state.edges[0]):
        element.select()
    record = copy_selection(state)
    state.pointer = (550, 300)

    pasted = paste(state, record)
    new_a, new_b, new_edge = pasted
    assert (new_a.x, new_a.y) == (500, 300)
    assert (new_b.x, new_b.y) == (600, 300)
    assert (new_edge.src, new_edge.dst, new_edge.weight, new_edge.directed) == (new_a, new_b, 4, True)
    assert state.selected == pasted
    assert not nodes["A"].selected


def test_paste_ids_and_labels_are_unique(state, nodes):
    nodes["A"].select()
    record = copy_selection(state)
    first = paste(state, record)[0]
    second = paste(state, record)[0]
    assert (first.id, first.label) == (nodes["A"].id + "_copy", "A_copy")
    assert (second.id, second.label) == (nodes["A"].id + "_copy2", "A_copy2")


def test_dangling_edges_are_dropped(state, nodes):
    nodes["A"].select()
    state.edges[0].select()
    record = copy_selection(state)
    assert len(record.edges) == 1
    pasted = paste(state, record)
    assert len(pasted) == 1
    assert len(state.edges) == 2


def test_paste_is_undoable(state, nodes):
    nodes["C"].select()
    paste(state, copy_selection(state))
    assert len(state.nodes) == 4
    undo(state)
    assert len(state.nodes) == 3


def test_unique_copy_id_skips_taken(state, nodes):
    taken = {"x_copy"}
    assert unique_copy_id(state, "x", taken) == "x_copy2"
    assert "x_copy2" in taken


def test_json_round_trip(state, nodes):
    nodes["B"].select()
    record = copy_selection(state)
    assert ClipboardRecord.from_json(record.to_json()) == record


@pytest.mark.parametrize("text", ["not json", "[]", '{"nodes": [{"x": 0, "y": 0}], "edges": []}',
                                  '{"nodes": [], "edges": [{"src": "a"}]}'])
def test_invalid_json(text):
    with pytest.raises(GraphFormatError):
        ClipboardRecord.from_json(text)


def test_validate_clipboard():
    assert validate_clipboard({"nodes": [{"id": "n", "x": 1, "y": 2.5}], "edges": []})
    assert not validate_clipboard({"nodes": [{"id": "n", "x": "1", "y": 2}], "edges": []})
    assert not validate_clipboard({"nodes": []})
