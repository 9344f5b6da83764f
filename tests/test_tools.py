import pytest

from conftest import build, place

from graphboard.errors import UnknownToolError
from graphboard.history import undo
from graphboard.tools import BUILTIN_TOOLS, KeyEvent, PointerEvent, ScrollEvent, Tool, Viewport


def click(controller, x, y, **kwargs):
    controller.mouse_down(PointerEvent(x, y, **kwargs))
    controller.mouse_up(PointerEvent(x, y, **kwargs))


def press(controller, code, **modifiers):
    handled = controller.key_down(KeyEvent(code, **modifiers))
    controller.key_up(KeyEvent(code, **modifiers))
    return handled


@pytest.fixture
def nodes(state):
    nodes = build(state, "A-B")
    place(nodes, A=(0, 0), B=(200, 0))
    return nodes


class TestController:
    def test_default_tool(self, state, controller):
        assert state.tools is controller
        assert controller.active.name == "select"
        assert controller.names == [tool.name for tool in BUILTIN_TOOLS]

    def test_unknown_tool(self, controller):
        with pytest.raises(UnknownToolError):
            controller.activate("lasso")
        with pytest.raises(UnknownToolError):
            controller.activate_by_key("Digit9")

    def test_activation_runs_lifecycle_and_notifies(self, state, controller):
        calls = []
        cleaned = []
        controller.register(Tool(name="recorder", setup=lambda s: calls.append("setup"),
                                 clean=lambda s: cleaned.append("clean")))
        state.add_tool_listener(lambda s: calls.append(s.tool))
        controller.activate("recorder")
        controller.activate("select")
        assert calls == ["setup", "recorder", "select"]
        assert cleaned == ["clean"]

    def test_hotkeys_switch_tools_without_modifiers(self, state, controller):
        press(controller, "Digit3")
        assert state.tool == "edges"
        press(controller, "Digit2", ctrl=True)
        assert state.tool == "edges"

    def test_tool_callback_runs_after_default_layer(self, state, controller):
        seen = []
        controller.register(Tool(name="recorder", key_down=lambda s, e: seen.append(s.tool)))
        controller.activate("recorder")
        # The hotkey switched tools first, so the recorder callback is not reached
        press(controller, "Digit1")
        assert seen == []
        assert state.tool == "select"

    def test_unknown_event_kind(self):
        with pytest.raises(ValueError):
            Tool(name="x").callback("wheel")

    def test_input_tracking(self, state, controller):
        controller.mouse_down(PointerEvent(10, 20, button=2))
        assert state.pointer == (10, 20)
        assert state.mouse_button == 2
        controller.mouse_up(PointerEvent(10, 20, button=2))
        assert state.mouse_button is None

        controller.key_down(KeyEvent("KeyQ"))
        assert "KeyQ" in state.keys_down
        controller.dispatch("blur")
        assert state.keys_down == set()

    def test_unhandled_event(self, controller):
        assert not controller.dispatch("resize")


class TestSelectTool:
    def test_click_selects(self, state, controller, nodes):
        click(controller, 0, 0)
        assert state.selected == [nodes["A"]]
        click(controller, 500, 500)
        assert state.selected == []

    def test_drag_moves_node_and_is_undoable(self, state, controller, nodes):
        controller.mouse_down(PointerEvent(0, 0))
        controller.mouse_move(PointerEvent(30, 10))
        assert state.cursor == "grabbing"
        controller.mouse_up(PointerEvent(30, 10))

        a = state.find_node_by_label("A")
        assert (a.x, a.y) == (30, 10)
        assert state.selected == [a]
        assert state.cursor == "default"

        undo(state)
        a = state.find_node_by_label("A")
        assert (a.x, a.y) == (0, 0)

    def test_rubber_band(self, state, controller, nodes):
        controller.mouse_down(PointerEvent(-100, -100))
        controller.mouse_move(PointerEvent(300, 300))
        assert state.selection_box is not None
        controller.mouse_up(PointerEvent(300, 300))
        assert len(state.selected) == 3
        assert state.selection_box is None

    def test_double_click_target(self, state, controller, nodes):
        controller.dispatch("mouse_double_click", PointerEvent(200, 0))
        assert state.double_click_target is nodes["B"]


class TestAddNodesTool:
    def test_click_places_node(self, state, controller):
        controller.activate("add-nodes")
        assert state.new_node is not None
        controller.mouse_move(PointerEvent(120, 80))
        click(controller, 120, 80)
        assert len(state.nodes) == 1
        assert (state.nodes[0].x, state.nodes[0].y) == (120, 80)

    def test_shift_snaps_preview(self, state, controller):
        controller.activate("add-nodes")
        controller.mouse_move(PointerEvent(110, 90, shift=True))
        controller.mouse_down(PointerEvent(110, 90, shift=True))
        assert (state.nodes[0].x, state.nodes[0].y) == (100, 100)

    def test_click_without_move_places_at_pointer(self, state, controller):
        controller.activate("add-nodes")
        click(controller, 120, 80)
        controller.mouse_down(PointerEvent(190, 210, shift=True))
        assert [(n.x, n.y) for n in state.nodes] == [(120, 80), (200, 200)]

    def test_clean_drops_preview(self, state, controller):
        controller.activate("add-nodes")
        controller.activate("select")
        assert state.new_node is None


class TestEdgesTool:
    @pytest.fixture
    def pair(self, state, controller):
        controller.activate("edges")
        a, b = state.add_node(0, 0), state.add_node(200, 0)
        return a, b

    def test_drag_between_nodes(self, state, controller, pair):
        a, b = pair
        controller.mouse_down(PointerEvent(0, 0))
        controller.mouse_move(PointerEvent(120, 0))
        assert state.new_edge.x == 120
        controller.mouse_up(PointerEvent(200, 0))
        assert len(state.edges) == 1
        edge = state.edges[0]
        assert (edge.src, edge.dst, edge.directed) == (a, b, False)
        assert state.new_edge is None

    def test_shift_makes_directed_edge(self, state, controller, pair):
        controller.mouse_down(PointerEvent(0, 0, shift=True))
        controller.mouse_up(PointerEvent(200, 0))
        assert state.edges[0].directed

    def test_shift_key_toggles_preview_direction(self, state, controller, pair):
        controller.mouse_down(PointerEvent(0, 0))
        controller.key_down(KeyEvent("ShiftLeft", shift=True))
        assert state.new_edge.directed
        controller.key_up(KeyEvent("ShiftLeft"))
        assert not state.new_edge.directed

    def test_release_on_empty_space_or_source(self, state, controller, pair):
        controller.mouse_down(PointerEvent(0, 0))
        controller.mouse_up(PointerEvent(100, 300))
        controller.mouse_down(PointerEvent(0, 0))
        controller.mouse_up(PointerEvent(5, 5))
        assert state.edges == []

    def test_press_on_empty_space(self, state, controller, pair):
        assert not controller.mouse_down(PointerEvent(100, 300))
        assert state.new_edge is None


def test_delete_tool(state, controller, nodes):
    controller.activate("delete")
    click(controller, 0, 0)
    assert [n.label for n in state.nodes] == ["B"]
    assert state.edges == []
    undo(state)
    assert len(state.nodes) == 2 and len(state.edges) == 1


def test_delete_tool_removes_edges(state, controller, nodes):
    controller.activate("delete")
    click(controller, 100, 2)
    assert state.edges == []
    assert len(state.nodes) == 2


def test_drag_tool_pans(state, controller):
    controller.activate("drag")
    assert state.cursor == "grab"
    controller.mouse_down(PointerEvent(0, 0))
    assert state.panning
    controller.mouse_move(PointerEvent(10, 5, dx=10, dy=5))
    controller.mouse_up(PointerEvent(10, 5))
    assert (controller.viewport.offset_x, controller.viewport.offset_y) == (10, 5)
    assert not state.panning
    controller.activate("select")
    assert state.cursor == "default"


class TestEditTool:
    def test_key_arms_node_preview(self, state, controller):
        controller.activate("edit")
        controller.mouse_move(PointerEvent(40, 40))
        press(controller, "KeyN")
        assert state.new_node is not None
        controller.mouse_move(PointerEvent(60, 70))
        click(controller, 60, 70)
        assert [(n.x, n.y) for n in state.nodes] == [(60, 70)]
        assert state.new_node is None

    def test_press_drag_connects(self, state, controller, nodes):
        controller.activate("edit")
        controller.mouse_down(PointerEvent(200, 0))
        controller.mouse_up(PointerEvent(0, 0))
        # B-A duplicates the undirected A-B
        assert len(state.edges) == 1
        controller.mouse_down(PointerEvent(200, 0, shift=True))
        controller.mouse_up(PointerEvent(0, 0))
        assert len(state.edges) == 1

    def test_delete_key_removes_hovered(self, state, controller, nodes):
        controller.activate("edit")
        controller.mouse_move(PointerEvent(0, 0))
        press(controller, "Delete")
        assert [n.label for n in state.nodes] == ["B"]
        assert state.edges == []

    def test_delete_key_removes_selection_and_hovered_in_one_step(self, state, controller, nodes):
        controller.activate("edit")
        nodes["A"].select()
        controller.mouse_move(PointerEvent(200, 0))
        press(controller, "Delete")
        assert state.nodes == [] and state.edges == []
        undo(state)
        assert [n.label for n in state.nodes] == ["A", "B"]
        assert len(state.edges) == 1


class TestShortcuts:
    def test_undo_redo(self, state, controller):
        state.add_node(0, 0)
        press(controller, "KeyZ", ctrl=True)
        assert state.nodes == []
        press(controller, "KeyY", ctrl=True)
        assert len(state.nodes) == 1
        press(controller, "KeyZ", ctrl=True)
        press(controller, "KeyZ", ctrl=True, shift=True)
        assert len(state.nodes) == 1

    def test_select_all_and_delete(self, state, controller, nodes):
        press(controller, "KeyA", ctrl=True)
        assert len(state.selected) == 3
        press(controller, "Delete")
        assert state.nodes == [] and state.edges == []
        press(controller, "KeyZ", ctrl=True)
        assert len(state.nodes) == 2

    def test_escape_resets(self, state, controller, nodes):
        nodes["A"].select()
        controller.viewport.zoom = 3
        press(controller, "Escape")
        assert state.selected == []
        assert controller.viewport.zoom == 1.0

    def test_arrows_nudge_selection(self, state, controller, nodes):
        nodes["A"].select()
        press(controller, "ArrowRight")
        press(controller, "ArrowDown")
        assert (nodes["A"].x, nodes["A"].y) == (1, 1)
        assert (nodes["B"].x, nodes["B"].y) == (200, 0)

    def test_ctrl_arrows_pan(self, controller):
        press(controller, "ArrowRight", ctrl=True)
        assert controller.viewport.offset_x == -50

    def test_copy_paste(self, state, controller, nodes):
        nodes["A"].select()
        press(controller, "KeyC", ctrl=True)
        controller.mouse_move(PointerEvent(500, 400))
        press(controller, "KeyV", ctrl=True)

        pasted = state.nodes[-1]
        assert pasted.label == "A_copy"
        assert (pasted.x, pasted.y) == (500, 400)
        assert state.selected == [pasted]

    def test_paste_without_copy(self, state, controller, nodes):
        assert press(controller, "KeyV", ctrl=True)
        assert len(state.nodes) == 2

    def test_space_pans(self, state, controller, nodes):
        controller.key_down(KeyEvent("Space"))
        assert state.cursor == "grab"
        controller.mouse_down(PointerEvent(0, 0))
        assert state.cursor == "grabbing"
        controller.mouse_move(PointerEvent(10, 10, dx=-20, dy=15))
        controller.mouse_up(PointerEvent(10, 10))
        controller.key_up(KeyEvent("Space"))

        assert (controller.viewport.offset_x, controller.viewport.offset_y) == (-20, 15)
        # Panning never touches the selection
        assert state.selected == []
        assert state.cursor == "default"

    def test_middle_button_pans(self, state, controller):
        controller.mouse_down(PointerEvent(0, 0, button=1))
        assert state.panning
        controller.mouse_move(PointerEvent(0, 0, dx=7, dy=0))
        assert controller.viewport.offset_x == 7

    def test_scroll_zooms(self, controller):
        controller.dispatch("scroll", ScrollEvent(delta=-100))
        assert controller.viewport.zoom == pytest.approx(1.1)
        controller.dispatch("scroll", ScrollEvent(delta=100))
        controller.dispatch("scroll", ScrollEvent(delta=100))
        assert controller.viewport.zoom == pytest.approx(1 / 1.1)


def test_viewport_limits_and_conversion():
    viewport = Viewport(offset_x=100, offset_y=50, zoom=2)
    assert viewport.to_canvas(300, 250) == (100, 100)
    for _ in range(100):
        viewport.zoom_in()
    assert viewport.zoom == viewport.max_zoom
    viewport.reset()
    assert (viewport.offset_x, viewport.offset_y, viewport.zoom) == (0, 0, 1)
