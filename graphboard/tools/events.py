"""
Input events delivered to the tool controller, and the viewport collaborator.

The shell translates raw NiceGUI events into these dataclasses; pointer
coordinates are already in canvas space.
"""

from dataclasses import dataclass


@dataclass
class PointerEvent:
    x: float
    y: float
    button: int = 0
    shift: bool = False
    ctrl: bool = False
    alt: bool = False
    # Pointer movement since the previous event, in screen pixels
    dx: float = 0.0
    dy: float = 0.0


@dataclass
class KeyEvent:
    code: str
    shift: bool = False
    ctrl: bool = False
    alt: bool = False

    @property
    def has_modifier(self) -> bool:
        return self.shift or self.ctrl or self.alt

    @property
    def is_shift(self) -> bool:
        return self.code in ("ShiftLeft", "ShiftRight", "Shift")


@dataclass
class ScrollEvent:
    delta: float
    x: float = 0.0
    y: float = 0.0


@dataclass
class ResizeEvent:
    width: float
    height: float


@dataclass
class Viewport:
    """
    Pan/zoom bookkeeping. Only the numbers live here; applying them to the
    drawing surface is the shell's job.
    """
    offset_x: float = 0.0
    offset_y: float = 0.0
    zoom: float = 1.0
    zoom_step: float = 1.1
    min_zoom: float = 0.1
    max_zoom: float = 10.0

    def pan_by(self, dx: float, dy: float) -> None:
        self.offset_x += dx
        self.offset_y += dy

    def zoom_in(self) -> None:
        self.zoom = min(self.zoom * self.zoom_step, self.max_zoom)

    def zoom_out(self) -> None:
        self.zoom = max(self.zoom / self.zoom_step, self.min_zoom)

    def reset(self) -> None:
        self.offset_x = 0.0
        self.offset_y = 0.0
        self.zoom = 1.0

    def to_canvas(self, screen_x: float, screen_y: float) -> tuple:
        """Convert a screen position into canvas coordinates."""
        return ((screen_x - self.offset_x) / self.zoom,
                (screen_y - self.offset_y) / self.zoom)
