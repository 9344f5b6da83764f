from conftest import build

from graphboard.history import (
    discard_last_snapshot,
    generate_snapshot,
    has_redo,
    has_undo,
    record_memento,
    redo,
    snapshot_equals,
    undo,
)


def test_undo_restores_the_exact_previous_state(state):
    nodes = build(state, "A-{2}-B\nB->C")
    nodes["A"].select()
    before = generate_snapshot(state)

    record_memento(state)
    nodes["A"].move_by(40, 40)
    nodes["C"].label = "Z"
    nodes["B"].delete()

    undo(state)
    after = generate_snapshot(state)
    assert snapshot_equals(after, before)
    assert after.selected == before.selected


def test_restored_edges_point_at_restored_nodes(state):
    build(state, "A-B")
    record_memento(state)
    state.nodes[0].move_by(10, 0)
    undo(state)

    edge = state.edges[0]
    assert edge.src is state.nodes[0]
    assert edge.dst is state.nodes[1]
    assert all(n.graph is state for n in state.nodes)


def test_undo_redo_walks_both_stacks(state):
    state.add_node(0, 0)
    state.add_node(100, 0)
    assert len(state.memento) == 2

    undo(state)
    assert [n.label for n in state.nodes] == ["A"]
    undo(state)
    assert state.nodes == []
    assert not has_undo(state)

    redo(state)
    redo(state)
    assert [n.label for n in state.nodes] == ["A", "B"]
    assert not has_redo(state)


def test_empty_stacks_are_no_ops(state):
    undo(state)
    redo(state)
    assert state.nodes == []
    assert state.memento == [] and state.memento_redo == []


def test_identical_snapshots_are_recorded_once(state):
    build(state, "A-B")
    assert record_memento(state)
    assert not record_memento(state)
    assert len(state.memento) == 1


def test_selection_changes_alone_are_not_recorded(state):
    nodes = build(state, "A-B")
    record_memento(state)
    nodes["A"].select()
    assert not record_memento(state)


def test_new_edit_clears_redo(state):
    state.add_node(0, 0)
    undo(state)
    assert has_redo(state)
    state.add_node(50, 50)
    assert not has_redo(state)


def test_prevent_memento_skips_one_recording(state):
    state.prevent_memento = True
    state.add_node(0, 0)
    assert state.memento == []
    assert not state.prevent_memento
    state.add_node(10, 0)
    assert len(state.memento) == 1


def test_history_disabled(state):
    state.history_enabled = False
    state.add_node(0, 0)
    undo(state)
    assert len(state.nodes) == 1
    assert state.memento == []


def test_discard_last_snapshot(state):
    state.add_node(0, 0)
    snapshot = state.memento[-1]
    assert discard_last_snapshot(state) is snapshot
    assert discard_last_snapshot(state) is None


def test_undo_notifies_listeners_once(state):
    state.add_node(0, 0)
    calls = []
    state.add_graph_listener(calls.append)
    undo(state)
    assert len(calls) == 1


def test_undo_resets_in_progress_interactions(state):
    state.add_node(0, 0)
    state.new_node = state.nodes[0].clone()
    undo(state)
    assert state.new_node is None
