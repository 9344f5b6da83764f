from conftest import build, place

from graphboard.render import SvgSurface, frame_snapshot, render_content, render_svg
from graphboard.state import SelectionBox
from graphboard.tools import Viewport


def test_render_svg_document(state):
    nodes = build(state, "A-B")
    place(nodes, A=(100, 100), B=(300, 100))
    svg = render_svg(state, 800, 600)
    assert svg.startswith('<svg xmlns="http://www.w3.org/2000/svg" width="800" height="600"')
    assert svg.count(">A</text>") == 1
    assert svg.count(">B</text>") == 1
    assert "<line" in svg


def test_content_applies_viewport(state):
    build(state, "A")
    content = render_content(state, 800, 600, Viewport(offset_x=10, offset_y=20, zoom=2))
    assert content.startswith('<g transform="translate(10.00 20.00) scale(2)">')


def test_hidden_elements_are_not_drawn(state):
    nodes = build(state, "A-B")
    nodes["B"].hidden = True
    state.edges[0].hidden = True
    svg = render_svg(state)
    assert ">B</text>" not in svg
    assert "<polygon" not in svg


def test_directed_edge_has_arrow_head(state):
    nodes = build(state, "A->B")
    place(nodes, A=(100, 100), B=(300, 100))
    assert "<polygon" in render_svg(state)


def test_weights_and_badges(state):
    nodes = build(state, "A-{7}-B")
    place(nodes, A=(100, 100), B=(300, 100))
    nodes["A"].bubble = "3"
    svg = render_svg(state)
    assert ">7</text>" in svg
    assert ">3</text>" in svg

    state.show_weights = False
    assert ">7</text>" not in render_svg(state)


def test_labels_are_escaped(state):
    state.add_node(50, 50, label="<b>")
    svg = render_svg(state)
    assert "&lt;b&gt;" in svg
    assert "<b>" not in svg


def test_previews_and_selection_box(state, controller):
    controller.activate("add-nodes")
    state.selection_box = SelectionBox(0, 0, 40, 30)
    svg = render_svg(state)
    assert ">...</text>" in svg
    assert 'width="40.00" height="30.00"' in svg


def test_frame_snapshot_copies_the_selection_box(state):
    state.selection_box = SelectionBox(0, 0, 10, 10)
    frame = frame_snapshot(state)
    state.selection_box.x2 = 99
    assert frame.selection_box.x2 == 10
    assert frame.tool == state.tool


def test_surface_primitives():
    surface = SvgSurface()
    surface.circle(1, 2, 3, fill="#fff", opacity=0.5)
    surface.line(0, 0, 10, 10, dashed=True)
    assert 'opacity="0.5"' in surface.parts[0]
    assert "stroke-dasharray" in surface.parts[1]
    assert surface.to_content().startswith("<g>")
