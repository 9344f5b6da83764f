"""
Graph elements: the Node and Edge variants behind one Element interface.

Elements know their owning GraphState (``graph``) so that selection and
deletion keep the container in sync. Edges hold their endpoints by identity;
anything that clones nodes (history, clipboard, cache) must re-link edges by
node id afterwards.
"""

import math
import uuid
from typing import Any, Dict, List, Optional, Tuple

from graphboard import constants
from graphboard.errors import SelfLoopError

Point = Tuple[float, float]


class Element:
    """
    Common capabilities of every graph element.

    Not meant to be instantiated directly: draw, distance_to, is_hover_at,
    clone, equals and delete are provided by the concrete variants.
    """

    kind = "element"

    def __init__(self, element_id: Optional[str] = None):
        self.id: str = element_id or uuid.uuid4().hex[:10]
        self.selected: bool = False
        self.hidden: bool = False
        self.opacity: float = 1.0
        self.style: Dict[str, Any] = {}
        self.graph = None  # owning GraphState, set when added

    # --- Selection ---

    def select(self) -> None:
        """Mark as selected and append to the owner's selection. No-op if already selected."""
        if self.selected:
            return
        self.selected = True
        if self.graph is not None:
            self.graph.push_selected(self)

    def deselect(self) -> None:
        """Clear the selection flag and remove from the owner's selection. No-op if not selected."""
        if not self.selected:
            return
        self.selected = False
        if self.graph is not None:
            self.graph.remove_selected(self)

    def toggle_select(self) -> None:
        if self.selected:
            self.deselect()
        else:
            self.select()

    def reset_style(self) -> None:
        """Drop every style override and badge set by an algorithm highlight."""
        self.style = {}
        self.opacity = 1.0

    # --- Capabilities ---

    def draw(self, surface) -> None:
        raise NotImplementedError("Method not implemented.")

    def distance_to(self, x: float, y: float) -> float:
        raise NotImplementedError("Method not implemented.")

    def is_hover_at(self, x: float, y: float) -> bool:
        raise NotImplementedError("Method not implemented.")

    def clone(self) -> "Element":
        raise NotImplementedError("Method not implemented.")

    def equals(self, other: "Element") -> bool:
        raise NotImplementedError("Method not implemented.")

    def move_by(self, dx: float, dy: float) -> None:
        raise NotImplementedError("Method not implemented.")

    def delete(self) -> None:
        raise NotImplementedError("Method not implemented.")

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.id!r})"


class Node(Element):
    """
    A circular node.

    ``x``/``y`` include the drag ``offset`` so a node being dragged is drawn
    and hit-tested at its preview position; ``apply_offset`` commits it.
    """

    kind = "node"

    def __init__(self, x: float, y: float, label: Optional[str] = None,
                 r: float = constants.NODE_RADIUS, element_id: Optional[str] = None):
        super().__init__(element_id)
        self._x = x
        self._y = y
        self.r = r
        self.label = label if label is not None else self.id

        self.background_color = constants.NODE_BACKGROUND_COLOR
        self.label_color = constants.NODE_LABEL_COLOR
        self.border_color = constants.NODE_BORDER_COLOR
        self.border_width = constants.NODE_BORDER_WIDTH
        self.font_size = constants.NODE_LABEL_FONT_SIZE

        # Small badge drawn on the border (visit order, colour index...)
        self.bubble: Optional[str] = None
        self.offset: Point = (0.0, 0.0)

    @property
    def x(self) -> float:
        return self._x + self.offset[0]

    @x.setter
    def x(self, value: float) -> None:
        self._x = value

    @property
    def y(self) -> float:
        return self._y + self.offset[1]

    @y.setter
    def y(self, value: float) -> None:
        self._y = value

    def contains(self, x: float, y: float) -> bool:
        dx = x - self.x
        dy = y - self.y
        return dx * dx + dy * dy < self.r * self.r

    def distance_to_center(self, x: float, y: float) -> float:
        return math.hypot(x - self.x, y - self.y)

    def distance_to(self, x: float, y: float) -> float:
        """Distance from the point to the node border."""
        return abs(self.distance_to_center(x, y) - self.r)

    def is_hover_at(self, x: float, y: float) -> bool:
        if self.hidden:
            return False
        return self.distance_to_center(x, y) <= self.r

    def move_by(self, dx: float, dy: float) -> None:
        self._x += dx
        self._y += dy

    def apply_offset(self) -> None:
        self.move_by(*self.offset)
        self.offset = (0.0, 0.0)

    def clone(self) -> "Node":
        aux = Node(self._x, self._y, self.label, self.r, element_id=self.id)
        aux.background_color = self.background_color
        aux.label_color = self.label_color
        aux.border_color = self.border_color
        aux.border_width = self.border_width
        aux.font_size = self.font_size
        aux.bubble = self.bubble
        aux.offset = self.offset
        aux.style = dict(self.style)
        aux.opacity = self.opacity
        aux.hidden = self.hidden
        aux.selected = self.selected
        return aux

    def equals(self, other: Element) -> bool:
        if not isinstance(other, Node):
            return False
        return (self.x == other.x and self.y == other.y
                and self.r == other.r and self.label == other.label)

    def delete(self) -> None:
        """Remove the node and every edge touching it."""
        self.deselect()
        if self.graph is not None:
            self.graph.remove_node(self)

    def draw(self, surface) -> None:
        if self.hidden:
            return
        fill = self.style.get("background_color", self.background_color)
        border = self.style.get("border_color", self.border_color)
        surface.circle(self.x, self.y, self.r, fill=fill, opacity=self.opacity)
        if self.border_width > 0 and border is not None:
            surface.circle(self.x, self.y, self.r - self.border_width / 2, stroke=border,
                           stroke_width=self.border_width, opacity=self.opacity)
        surface.text(self.x, self.y, self.label, color=self.style.get("label_color", self.label_color),
                     size=self.font_size, bold=True, opacity=self.opacity)

        hover = surface.pointer is not None and self.is_hover_at(*surface.pointer)
        if self.selected or hover:
            color = constants.SELECTED_BORDER_COLOR if self.selected else constants.HOVER_BORDER_COLOR
            surface.circle(self.x, self.y, self.r + 2, stroke=color, stroke_width=2)

        if self.bubble is not None:
            d = math.sin(math.pi / 4) * self.r
            surface.circle(self.x + d, self.y + d, constants.NODE_BUBBLE_RADIUS,
                           fill=constants.NODE_BUBBLE_COLOR)
            surface.text(self.x + d, self.y + d, str(self.bubble),
                         color=constants.NODE_BUBBLE_TEXT_COLOR, size=12, bold=True)

    def __str__(self) -> str:
        return str(self.label)


class Edge(Element):
    """
    A connection between two nodes, held by identity.

    Edges are derived from their endpoints: ``move_by`` does nothing and the
    geometry is recomputed from the nodes on every query.
    """

    kind = "edge"

    def __init__(self, src: Node, dst: Node, weight: float = constants.DEFAULT_EDGE_WEIGHT,
                 directed: bool = False, points: Optional[List[Point]] = None,
                 element_id: Optional[str] = None):
        if src is dst:
            raise SelfLoopError(f"Edge endpoints must differ (got {src.id!r} twice)")
        super().__init__(element_id)
        self.src = src
        self.dst = dst
        self.weight = weight
        self.directed = directed
        self.points: List[Point] = list(points or [])

        self.color = constants.EDGE_COLOR
        self.weight_color = constants.EDGE_WEIGHT_COLOR
        self.weight_background_color = constants.EDGE_WEIGHT_BACKGROUND_COLOR

    @property
    def thickness(self) -> float:
        return min(self.src.r, self.dst.r) * constants.EDGE_THICKNESS_RATIO

    @property
    def hover_threshold(self) -> float:
        return self.thickness * constants.EDGE_HOVER_THRESHOLD_FACTOR

    def border_coords(self, offset_src: float = 0, offset_dst: float = 0) -> Tuple[Point, Point, float]:
        """
        Endpoints of the visible segment, from border to border of the nodes.

        Returns (border_src, border_dst, angle).
        """
        angle = math.atan2(self.dst.y - self.src.y, self.dst.x - self.src.x)
        rs = self.src.r + offset_src
        rd = self.dst.r + offset_dst
        border_src = (self.src.x + rs * math.cos(angle), self.src.y + rs * math.sin(angle))
        border_dst = (self.dst.x - rd * math.cos(angle), self.dst.y - rd * math.sin(angle))
        return border_src, border_dst, angle

    def midpoint(self) -> Point:
        (x1, y1), (x2, y2), _ = self.border_coords()
        return (x1 + x2) / 2, (y1 + y2) / 2

    def geometry_at(self, x: float, y: float) -> Tuple[float, bool]:
        """
        Distance from the point to the edge and whether the point lies inside
        the band swept by the segment (its rotated bounding box).

        Inside the band the distance is perpendicular to the line; outside it
        falls back to the closest border point.
        """
        (x1, y1), (x2, y2), _ = self.border_coords()
        dx, dy = x2 - x1, y2 - y1
        length_sq = dx * dx + dy * dy
        dist_src = math.hypot(x - x1, y - y1)
        dist_dst = math.hypot(x - x2, y - y2)
        if length_sq == 0:
            return min(dist_src, dist_dst), False

        t = ((x - x1) * dx + (y - y1) * dy) / length_sq
        inside = 0 < t < 1
        if not inside:
            return min(dist_src, dist_dst), False
        perpendicular = abs(dy * x - dx * y + x2 * y1 - y2 * x1) / math.sqrt(length_sq)
        return perpendicular, True

    def distance_to(self, x: float, y: float) -> float:
        return self.geometry_at(x, y)[0]

    def is_hover_at(self, x: float, y: float) -> bool:
        if self.hidden:
            return False
        # Node hover takes priority over the edge
        if self.src.is_hover_at(x, y) or self.dst.is_hover_at(x, y):
            return False
        dist, inside = self.geometry_at(x, y)
        return inside and dist <= self.hover_threshold

    def move_by(self, dx: float, dy: float) -> None:
        pass

    def clone(self) -> "Edge":
        aux = Edge(self.src, self.dst, self.weight, self.directed, self.points, element_id=self.id)
        aux.color = self.color
        aux.weight_color = self.weight_color
        aux.weight_background_color = self.weight_background_color
        aux.style = dict(self.style)
        aux.opacity = self.opacity
        aux.hidden = self.hidden
        aux.selected = self.selected
        return aux

    def equals(self, other: Element) -> bool:
        if not isinstance(other, Edge):
            return False
        return (self.src.id == other.src.id and self.dst.id == other.dst.id
                and self.weight == other.weight and self.directed == other.directed)

    def connects(self, a: Node, b: Node) -> bool:
        """True if the edge joins a to b (either way round when undirected)."""
        if self.src is a and self.dst is b:
            return True
        return not self.directed and self.src is b and self.dst is a

    def delete(self) -> None:
        self.deselect()
        if self.graph is not None:
            self.graph.remove_edge(self)

    def draw(self, surface) -> None:
        if self.hidden:
            return
        color = self.style.get("color", self.color)
        thickness = self.style.get("thickness", self.thickness)
        arrow_size = thickness * constants.EDGE_ARROW_SIZE_FACTOR
        border_src, border_dst, angle = self.border_coords(0, arrow_size * 0.8 if self.directed else 0)

        if self.directed:
            surface.line(self.src.x, self.src.y, *border_dst, color=color, width=thickness, opacity=self.opacity)
            tip = (self.dst.x - self.dst.r * math.cos(angle), self.dst.y - self.dst.r * math.sin(angle))
            spread = math.pi / 6
            surface.polygon([
                tip,
                (tip[0] - arrow_size * math.cos(angle - spread), tip[1] - arrow_size * math.sin(angle - spread)),
                (tip[0] - arrow_size * math.cos(angle + spread), tip[1] - arrow_size * math.sin(angle + spread)),
            ], fill=color, opacity=self.opacity)
        else:
            surface.line(self.src.x, self.src.y, self.dst.x, self.dst.y, color=color, width=thickness,
                         opacity=self.opacity)

        if surface.show_weights:
            cx, cy = self.midpoint()
            size = thickness * constants.EDGE_WEIGHT_CONTAINER_FACTOR
            surface.circle(cx, cy, size, fill=self.weight_background_color)
            surface.text(cx, cy, format_weight(self.weight), color=self.weight_color, size=size)

        hover = surface.pointer is not None and self.is_hover_at(*surface.pointer)
        if self.selected or hover:
            if self.selected:
                highlight = constants.SELECTED_BORDER_COLOR
            elif surface.tool == "delete":
                highlight = constants.DELETE_BORDER_COLOR
            else:
                highlight = constants.HOVER_BORDER_COLOR
            surface.line(self.src.x, self.src.y, self.dst.x, self.dst.y, color=highlight, width=2)


class EdgePreview:
    """
    The edge being drawn by the edges tool: a real source node and a fake
    destination point that follows the pointer.
    """

    def __init__(self, src: Node, x: float, y: float, directed: bool = False):
        self.src = src
        self.x = x
        self.y = y
        self.directed = directed

    def move_to(self, x: float, y: float) -> None:
        self.x = x
        self.y = y

    def draw(self, surface) -> None:
        surface.line(self.src.x, self.src.y, self.x, self.y, color=constants.EDGE_COLOR,
                     width=constants.PREVIEW_EDGE_THICKNESS, dashed=True)


def format_weight(weight: float) -> str:
    if isinstance(weight, float) and weight.is_integer():
        return str(int(weight))
    return str(weight)
