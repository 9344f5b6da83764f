"""
SVG rendering of a GraphState.

The NiceGUI shell redraws by setting ``render_content`` as the canvas
content after each handled event. Rendering only reads the state:
``frame_snapshot`` captures what a frame shows and the elements draw
themselves onto an SvgSurface.
"""

from dataclasses import dataclass
from html import escape
from typing import List, Optional, Sequence, Tuple, TYPE_CHECKING

from graphboard import constants
from graphboard.elements import Edge, EdgePreview, Element, Node

if TYPE_CHECKING:
    from graphboard.state import GraphState, SelectionBox
    from graphboard.tools.events import Viewport


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of everything one frame draws."""
    nodes: Tuple[Node, ...]
    edges: Tuple[Edge, ...]
    selected: Tuple[Element, ...]
    selection_box: Optional["SelectionBox"]
    new_node: Optional[Node]
    new_edge: Optional[EdgePreview]
    pointer: Tuple[float, float]
    tool: str
    show_weights: bool


def frame_snapshot(state: "GraphState") -> FrameSnapshot:
    box = state.selection_box
    return FrameSnapshot(
        nodes=tuple(state.nodes),
        edges=tuple(state.edges),
        selected=tuple(state.selected),
        selection_box=type(box)(box.x1, box.y1, box.x2, box.y2) if box is not None else None,
        new_node=state.new_node,
        new_edge=state.new_edge,
        pointer=state.pointer,
        tool=state.tool,
        show_weights=state.show_weights,
    )


def _opacity(opacity: float) -> str:
    return f' opacity="{opacity:g}"' if opacity != 1 else ""


class SvgSurface:
    """Collects SVG elements. The drawing API is the one Element.draw uses."""

    def __init__(self, pointer: Optional[Tuple[float, float]] = None, tool: str = "",
                 show_weights: bool = True):
        self.pointer = pointer
        self.tool = tool
        self.show_weights = show_weights
        self.parts: List[str] = []

    def circle(self, x: float, y: float, r: float, fill: Optional[str] = None, stroke: Optional[str] = None,
               stroke_width: float = 0, opacity: float = 1.0) -> None:
        stroke_attr = f' stroke="{stroke}" stroke-width="{stroke_width:g}"' if stroke else ""
        self.parts.append(
            f'<circle cx="{x:.2f}" cy="{y:.2f}" r="{max(r, 0):.2f}" fill="{fill or "none"}"'
            f'{stroke_attr}{_opacity(opacity)} />'
        )

    def line(self, x1: float, y1: float, x2: float, y2: float, color: str = constants.EDGE_COLOR,
             width: float = 1, opacity: float = 1.0, dashed: bool = False) -> None:
        dash = f' stroke-dasharray="{width * 2:g} {width * 2:g}"' if dashed else ""
        self.parts.append(
            f'<line x1="{x1:.2f}" y1="{y1:.2f}" x2="{x2:.2f}" y2="{y2:.2f}" stroke="{color}"'
            f' stroke-width="{width:g}" stroke-linecap="round"{dash}{_opacity(opacity)} />'
        )

    def polygon(self, points: Sequence[Tuple[float, float]], fill: str = constants.EDGE_COLOR,
                opacity: float = 1.0) -> None:
        coords = " ".join(f"{x:.2f},{y:.2f}" for x, y in points)
        self.parts.append(f'<polygon points="{coords}" fill="{fill}"{_opacity(opacity)} />')

    def rect(self, x: float, y: float, width: float, height: float, fill: str = "none",
             stroke: Optional[str] = None, opacity: float = 1.0) -> None:
        stroke_attr = f' stroke="{stroke}"' if stroke else ""
        self.parts.append(
            f'<rect x="{x:.2f}" y="{y:.2f}" width="{width:.2f}" height="{height:.2f}" fill="{fill}"'
            f'{stroke_attr}{_opacity(opacity)} />'
        )

    def text(self, x: float, y: float, text, color: str = constants.NODE_LABEL_COLOR, size: float = 12,
             bold: bool = False, opacity: float = 1.0) -> None:
        weight = ' font-weight="bold"' if bold else ""
        self.parts.append(
            f'<text x="{x:.2f}" y="{y:.2f}" fill="{color}" font-size="{size:g}" font-family="sans-serif"'
            f' text-anchor="middle" dominant-baseline="central"{weight}{_opacity(opacity)}>'
            f'{escape(str(text))}</text>'
        )

    def grid(self, width: float, height: float, size: int, origin: Tuple[float, float] = (0, 0)) -> None:
        ox, oy = origin
        start_x = ox - ox % size
        start_y = oy - oy % size
        x = start_x
        while x <= ox + width:
            self.line(x, oy, x, oy + height, color="#dddddd", width=1)
            x += size
        y = start_y
        while y <= oy + height:
            self.line(ox, y, ox + width, y, color="#dddddd", width=1)
            y += size

    def to_content(self, transform: str = "") -> str:
        """The collected elements in one group, for embedding in an existing <svg>."""
        attr = f' transform="{transform}"' if transform else ""
        return f'<g{attr}>\n' + "\n".join(self.parts) + "\n</g>"

    def to_svg(self, width: float, height: float, transform: str = "") -> str:
        return (f'<svg xmlns="http://www.w3.org/2000/svg" width="{width:g}" height="{height:g}" '
                f'viewBox="0 0 {width:g} {height:g}">\n{self.to_content(transform)}\n</svg>')


def _draw_frame(state: "GraphState", width: float, height: float,
                viewport: Optional["Viewport"]) -> Tuple[SvgSurface, str]:
    frame = frame_snapshot(state)
    zoom = viewport.zoom if viewport is not None else 1.0
    offset_x = viewport.offset_x if viewport is not None else 0.0
    offset_y = viewport.offset_y if viewport is not None else 0.0
    # Visible canvas area
    origin = (-offset_x / zoom, -offset_y / zoom)
    visible = (width / zoom, height / zoom)

    surface = SvgSurface(frame.pointer, frame.tool, frame.show_weights)
    surface.rect(origin[0], origin[1], visible[0], visible[1], fill=constants.BACKGROUND_COLOR)
    if state.snap_to_grid:
        surface.grid(visible[0], visible[1], state.grid_size, origin)

    for edge in frame.edges:
        edge.draw(surface)
    if frame.new_edge is not None:
        frame.new_edge.draw(surface)
    for node in frame.nodes:
        node.draw(surface)
    if frame.new_node is not None:
        frame.new_node.draw(surface)

    if frame.selection_box is not None:
        left, top, right, bottom = frame.selection_box.normalized()
        surface.rect(left, top, right - left, bottom - top, fill=constants.SELECTED_BORDER_COLOR,
                     stroke=constants.SELECTED_BORDER_COLOR, opacity=0.2)

    transform = f"translate({offset_x:.2f} {offset_y:.2f}) scale({zoom:g})"
    return surface, transform


def render_content(state: "GraphState", width: float = constants.CANVAS_WIDTH,
                   height: float = constants.CANVAS_HEIGHT, viewport: Optional["Viewport"] = None) -> str:
    """SVG elements of the current frame, for ``ui.interactive_image(...).content``."""
    surface, transform = _draw_frame(state, width, height, viewport)
    return surface.to_content(transform)


def render_svg(state: "GraphState", width: float = constants.CANVAS_WIDTH,
               height: float = constants.CANVAS_HEIGHT, viewport: Optional["Viewport"] = None) -> str:
    """Standalone SVG document of the current frame, as seen through the viewport."""
    surface, transform = _draw_frame(state, width, height, viewport)
    return surface.to_svg(width, height, transform)
