"""
Hit-testing and selection.

Translates pointer coordinates into elements and keeps the selection in sync.
Nodes are enumerated before edges, in insertion order, so ties on distance
resolve to the first node found.
"""

from typing import List, Optional, Tuple, TYPE_CHECKING

from graphboard.elements import Edge, Element, Node
from graphboard.history import discard_last_snapshot
from graphboard.state import DragState, SelectionBox

if TYPE_CHECKING:
    from graphboard.state import GraphState


# --- Hit-testing ---

def find_nodes_by_coords(state: "GraphState", x: float, y: float) -> List[Node]:
    return [n for n in state.nodes if n.contains(x, y)]


def find_nodes_by_hover(state: "GraphState", x: float, y: float) -> List[Node]:
    return [n for n in state.nodes if n.is_hover_at(x, y)]


def find_edges_by_hover(state: "GraphState", x: float, y: float) -> List[Edge]:
    return [e for e in state.edges if e.is_hover_at(x, y)]


def find_elements_by_hover(state: "GraphState", x: float, y: float) -> List[Element]:
    return [*find_nodes_by_hover(state, x, y), *find_edges_by_hover(state, x, y)]


def _closest(elements, x: float, y: float, distance):
    best, best_dist = None, float("inf")
    for element in elements:
        dist = distance(element)
        if dist < best_dist:
            best, best_dist = element, dist
    return best


def closest_hover_node(state: "GraphState", x: Optional[float] = None,
                       y: Optional[float] = None) -> Optional[Node]:
    """Hovered node whose centre is nearest to the point (defaults to the pointer)."""
    x, y = _point(state, x, y)
    return _closest(find_nodes_by_hover(state, x, y), x, y, lambda n: n.distance_to_center(x, y))


def closest_hover_edge(state: "GraphState", x: Optional[float] = None,
                       y: Optional[float] = None) -> Optional[Edge]:
    x, y = _point(state, x, y)
    return _closest(find_edges_by_hover(state, x, y), x, y, lambda e: e.distance_to(x, y))


def closest_hover_element(state: "GraphState", x: Optional[float] = None,
                          y: Optional[float] = None) -> Optional[Element]:
    """The single hovered element with the smallest ``distance_to``, or None."""
    x, y = _point(state, x, y)
    return _closest(find_elements_by_hover(state, x, y), x, y, lambda e: e.distance_to(x, y))


def find_elements_within(state: "GraphState", box: SelectionBox) -> List[Element]:
    """Visible elements inside the box: nodes by centre, edges by midpoint."""
    result = []
    for element in state.elements():
        if element.hidden:
            continue
        if isinstance(element, Edge):
            x, y = element.midpoint()
        else:
            x, y = element.x, element.y
        if box.contains(x, y):
            result.append(element)
    return result


def _point(state: "GraphState", x: Optional[float], y: Optional[float]) -> Tuple[float, float]:
    if x is None or y is None:
        return state.pointer
    return x, y


# --- Selection ---

def deselect_all(state: "GraphState") -> None:
    for element in list(state.selected):
        element.deselect()
    state.selected = []


def select_all(state: "GraphState") -> None:
    for element in state.elements():
        element.select()


def handle_primary_button_down(state: "GraphState", x: float, y: float, shift: bool,
                               recorded: bool = True) -> Optional[Element]:
    """
    Selection on left press.

    Shift toggles the element under the pointer; otherwise an unselected
    element becomes the only selection. Pressing on empty space clears the
    selection, and when nothing was selected the snapshot recorded for this
    press (``recorded``) is discarded since nothing will change.
    """
    element = closest_hover_element(state, x, y)
    if shift:
        if element is not None:
            element.toggle_select()
        return element

    if element is not None:
        if not element.selected:
            deselect_all(state)
            element.select()
        return element

    if recorded and not state.selected:
        discard_last_snapshot(state)
    deselect_all(state)
    return None


def handle_primary_button_up(state: "GraphState", x: float, y: float, shift: bool) -> None:
    """
    Selection on left release: a plain click leaves only the clicked element
    selected. Skipped once right after a drag, and with Shift (the press
    already toggled).
    """
    if state.prevent_deselect:
        state.prevent_deselect = False
        return
    if shift:
        return
    element = closest_hover_element(state, x, y)
    deselect_all(state)
    if element is not None:
        element.select()


# --- Selection box ---

def start_selection_box(state: "GraphState", x: float, y: float) -> None:
    state.selection_box = SelectionBox(x, y, x, y)


def update_selection_box(state: "GraphState", x: float, y: float) -> None:
    if state.selection_box is None:
        return
    state.selection_box.x2 = x
    state.selection_box.y2 = y
    state.trigger_selection_listeners()


def end_selection_box(state: "GraphState") -> List[Element]:
    """Select everything inside the box and clear it."""
    box = state.selection_box
    state.selection_box = None
    if box is None:
        return []
    inside = find_elements_within(state, box)
    for element in inside:
        element.select()
    return inside


# --- Dragging ---

def arm_drag(state: "GraphState", x: float, y: float) -> None:
    state.drag_state = DragState.ARMED
    state.drag_origin = (x, y)


def snapped_offset(state: "GraphState", dx: float, dy: float) -> Tuple[float, float]:
    """
    Snap a drag offset so the first selected node lands on the grid.
    Returns the offset unchanged when snapping is off or no node is selected.
    """
    reference = next(iter(state.selected_nodes()), None)
    if not state.snap_to_grid or reference is None:
        return dx, dy
    gs = state.grid_size
    target_x = round((reference._x + dx) / gs) * gs
    target_y = round((reference._y + dy) / gs) * gs
    return target_x - reference._x, target_y - reference._y


def handle_select_dragging(state: "GraphState", x: float, y: float) -> bool:
    """
    Move the selection preview with the pointer. Returns True if a drag is in progress.
    """
    if state.drag_state is DragState.IDLE or state.drag_origin is None:
        return False
    ox, oy = state.drag_origin
    offset = snapped_offset(state, x - ox, y - oy)
    state.drag_state = DragState.ACTIVE
    for node in state.selected_nodes():
        node.offset = offset
    state.trigger_graph_listeners()
    return True


def stop_dragging(state: "GraphState") -> bool:
    """Commit drag offsets. Returns True if something actually moved."""
    moved = state.drag_state is DragState.ACTIVE
    for node in state.selected_nodes():
        node.apply_offset()
    state.drag_state = DragState.IDLE
    state.drag_origin = None
    if moved:
        state.prevent_deselect = True
        state.trigger_graph_listeners()
    return moved
