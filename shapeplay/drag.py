"""
Pointer-driven direct manipulation of shapes.

The controller is a two-state machine::

    Idle --pointer_down on a handle--> Dragging(handle)
    Dragging --pointer_move--> Dragging   (shape replaced by an edited copy)
    Dragging --pointer_up / pointer_leave--> Idle

Hit-testing walks the handles in a fixed order and takes the *first* handle
within the hit radius rather than the nearest one.  The order is vertices
(by index), then edge midpoints (by index), then circle centre, then the
radius handle, so corner and centre handles win over edge and radius
handles when they overlap.

All transitions are pure functions of ``(DragState, shape, event)``;
``DragController`` is a thin stateful wrapper for hosts that prefer an
object.
"""

import logging
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Tuple

from shapeplay.config import PRESET_STANDARD
from shapeplay.geometry import clamp, clamp_circle_center, clamp_point, clamp_radius
from shapeplay.shapes._types import Circle, Point, Rectangle, Triangle

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Handles
# ---------------------------------------------------------------------------

class HandleKind(str, Enum):
    VERTEX = "vertex"
    EDGE_MIDPOINT = "edge_midpoint"
    CENTER = "center"
    RADIUS = "radius"


@dataclass(frozen=True)
class Handle:
    kind: HandleKind
    index: int = 0


def _midpoint(a: Point, b: Point) -> Point:
    return Point((a.x + b.x) / 2, (a.y + b.y) / 2)


def control_handles(shape, edge_handles=True) -> List[Tuple[Handle, Point]]:
    """Every grabbable handle of *shape* with its rendered position, in
    hit-test order."""
    if isinstance(shape, (Triangle, Rectangle)):
        verts = shape.vertices
        handles = [(Handle(HandleKind.VERTEX, i), v) for i, v in enumerate(verts)]
        if edge_handles:
            n = len(verts)
            handles += [
                (Handle(HandleKind.EDGE_MIDPOINT, i), _midpoint(verts[i], verts[(i + 1) % n]))
                for i in range(n)
            ]
        return handles
    if isinstance(shape, Circle):
        return [
            (Handle(HandleKind.CENTER), shape.center),
            (Handle(HandleKind.RADIUS), shape.radius_handle),
        ]
    raise TypeError(f"not a shape: {shape!r}")


def hit_test(shape, pos: Point, hit_radius: float, edge_handles=True) -> Optional[Tuple[Handle, Point]]:
    """First handle (in enumeration order) within *hit_radius* of *pos*."""
    for handle, location in control_handles(shape, edge_handles):
        if pos.distance_to(location) < hit_radius:
            return handle, location
    return None


# ---------------------------------------------------------------------------
# Per-handle mutation rules
# ---------------------------------------------------------------------------

def _move_rectangle_corner(rect: Rectangle, index: int, p: Point) -> Rectangle:
    # Moving a corner drags the shared coordinate of both neighbours;
    # the diagonally opposite corner stays put.
    tl, tr, br, bl = rect.vertices
    x, y = p.x, p.y
    if index == 0:
        verts = (Point(x, y), Point(tr.x, y), br, Point(x, bl.y))
    elif index == 1:
        verts = (Point(tl.x, y), Point(x, y), Point(x, br.y), bl)
    elif index == 2:
        verts = (tl, Point(x, tr.y), Point(x, y), Point(bl.x, y))
    else:
        verts = (Point(x, tl.y), tr, Point(br.x, y), Point(x, y))
    return rect.with_vertices(verts)


def _move_rectangle_edge(rect: Rectangle, index: int, p: Point) -> Rectangle:
    tl, tr, br, bl = rect.vertices
    if index == 0:      # top
        verts = (Point(tl.x, p.y), Point(tr.x, p.y), br, bl)
    elif index == 1:    # right
        verts = (tl, Point(p.x, tr.y), Point(p.x, br.y), bl)
    elif index == 2:    # bottom
        verts = (tl, tr, Point(br.x, p.y), Point(bl.x, p.y))
    else:               # left
        verts = (Point(p.x, tl.y), tr, br, Point(p.x, bl.y))
    return rect.with_vertices(verts)


def _translate_triangle_edge(tri: Triangle, index: int, target: Point, preset) -> Triangle:
    a = tri.vertices[index]
    b = tri.vertices[(index + 1) % 3]
    mid = _midpoint(a, b)
    m = preset.margin
    dx = clamp(target.x - mid.x, m - min(a.x, b.x), preset.width - m - max(a.x, b.x))
    dy = clamp(target.y - mid.y, m - min(a.y, b.y), preset.height - m - max(a.y, b.y))
    moved = tri.with_vertex(index, a.offset(dx, dy))
    return moved.with_vertex((index + 1) % 3, b.offset(dx, dy))


def apply_drag(shape, handle: Handle, target: Point, preset=PRESET_STANDARD):
    """Return *shape* edited so *handle* follows *target*, clamped to the
    canvas.  Handles that do not belong to the shape leave it unchanged."""
    if isinstance(shape, Triangle):
        if not 0 <= handle.index < 3:
            return shape
        if handle.kind is HandleKind.VERTEX:
            return shape.with_vertex(handle.index, clamp_point(target, preset))
        if handle.kind is HandleKind.EDGE_MIDPOINT:
            return _translate_triangle_edge(shape, handle.index, target, preset)
        return shape

    if isinstance(shape, Rectangle):
        if not 0 <= handle.index < 4:
            return shape
        if handle.kind is HandleKind.VERTEX:
            return _move_rectangle_corner(shape, handle.index, clamp_point(target, preset))
        if handle.kind is HandleKind.EDGE_MIDPOINT:
            return _move_rectangle_edge(shape, handle.index, clamp_point(target, preset))
        return shape

    if isinstance(shape, Circle):
        if handle.kind is HandleKind.CENTER:
            return shape.with_center(clamp_circle_center(target, shape.radius, preset))
        if handle.kind is HandleKind.RADIUS:
            # One-dimensional control: only the pointer's x matters
            radius = clamp_radius(abs(target.x - shape.center.x), shape.center, preset)
            return shape.with_radius(radius)
        return shape

    raise TypeError(f"not a shape: {shape!r}")


# ---------------------------------------------------------------------------
# Events & state
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class PointerDown:
    x: float
    y: float


@dataclass(frozen=True)
class PointerMove:
    x: float
    y: float


@dataclass(frozen=True)
class PointerUp:
    pass


@dataclass(frozen=True)
class PointerLeave:
    pass


POINTER_EVENTS = (PointerDown, PointerMove, PointerUp, PointerLeave)


@dataclass(frozen=True)
class DragState:
    handle: Optional[Handle] = None
    offset: Tuple[float, float] = (0.0, 0.0)
    hovered: Optional[Handle] = None

    @property
    def is_dragging(self) -> bool:
        return self.handle is not None


IDLE = DragState()


def pointer_down(state: DragState, shape, pos: Point, preset=PRESET_STANDARD,
                 edge_handles=True) -> DragState:
    hit = hit_test(shape, pos, preset.hit_radius, edge_handles)
    if hit is None:
        return replace(state, handle=None, offset=(0.0, 0.0), hovered=None)
    handle, location = hit
    if handle.kind is HandleKind.RADIUS:
        offset = (0.0, 0.0)
    else:
        offset = (pos.x - location.x, pos.y - location.y)
    logger.debug("drag start: %s at (%.1f, %.1f)", handle, pos.x, pos.y)
    return DragState(handle=handle, offset=offset, hovered=handle)


def pointer_move(state: DragState, shape, pos: Point, preset=PRESET_STANDARD,
                 edge_handles=True):
    """Returns ``(state, shape)``.  When idle only the hover is refreshed."""
    if not state.is_dragging:
        hit = hit_test(shape, pos, preset.hit_radius, edge_handles)
        hovered = hit[0] if hit else None
        if hovered != state.hovered:
            state = replace(state, hovered=hovered)
        return state, shape
    target = Point(pos.x - state.offset[0], pos.y - state.offset[1])
    return state, apply_drag(shape, state.handle, target, preset)


def pointer_release(state: DragState) -> DragState:
    if state.is_dragging:
        logger.debug("drag end: %s", state.handle)
    return IDLE


def transition(state: DragState, shape, event, preset=PRESET_STANDARD, edge_handles=True):
    """Apply one pointer event.  Returns ``(state, shape)``."""
    if isinstance(event, PointerDown):
        return pointer_down(state, shape, Point(event.x, event.y), preset, edge_handles), shape
    if isinstance(event, PointerMove):
        return pointer_move(state, shape, Point(event.x, event.y), preset, edge_handles)
    if isinstance(event, (PointerUp, PointerLeave)):
        return pointer_release(state), shape
    raise TypeError(f"unsupported pointer event: {event!r}")


# ---------------------------------------------------------------------------
# Stateful wrapper
# ---------------------------------------------------------------------------

class DragController:
    """Keeps the current ``DragState`` between pointer events."""

    def __init__(self, preset=PRESET_STANDARD, edge_handles=True):
        self.preset = preset
        self.edge_handles = edge_handles
        self.state = IDLE

    @property
    def is_dragging(self) -> bool:
        return self.state.is_dragging

    @property
    def active_handle(self) -> Optional[Handle]:
        return self.state.handle

    @property
    def hovered_handle(self) -> Optional[Handle]:
        return self.state.hovered

    def handles(self, shape):
        return control_handles(shape, self.edge_handles)

    def handle_event(self, shape, event):
        """Apply *event* and return the (possibly new) shape."""
        self.state, shape = transition(self.state, shape, event, self.preset, self.edge_handles)
        return shape

    def pointer_down(self, shape, x, y) -> bool:
        self.handle_event(shape, PointerDown(x, y))
        return self.is_dragging

    def pointer_move(self, shape, x, y):
        return self.handle_event(shape, PointerMove(x, y))

    def hover(self, shape, x, y) -> Optional[Handle]:
        """Refresh the hovered handle without touching an ongoing drag."""
        hit = hit_test(shape, Point(x, y), self.preset.hit_radius, self.edge_handles)
        self.state = replace(self.state, hovered=hit[0] if hit else None)
        return self.state.hovered

    def pointer_up(self):
        self.state = pointer_release(self.state)

    def pointer_leave(self):
        self.state = pointer_release(self.state)

    def reset(self):
        self.state = IDLE
