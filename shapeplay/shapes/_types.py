"""Shared dataclasses for the shapes package (avoids circular imports)."""

import math
from dataclasses import dataclass, replace
from enum import Enum
from typing import Tuple, Union

from shapeplay.config import MIN_RADIUS


class ShapeKind(str, Enum):
    TRIANGLE = "triangle"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"


@dataclass(frozen=True)
class Point:
    """Canvas-space position in pixels."""
    x: float
    y: float

    def __post_init__(self):
        object.__setattr__(self, "x", float(self.x))
        object.__setattr__(self, "y", float(self.y))

    def as_tuple(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def distance_to(self, other: "Point") -> float:
        return math.hypot(self.x - other.x, self.y - other.y)

    def offset(self, dx: float, dy: float) -> "Point":
        return Point(self.x + dx, self.y + dy)


def _as_points(vertices, count):
    pts = tuple(v if isinstance(v, Point) else Point(*v) for v in vertices)
    if len(pts) != count:
        raise ValueError(f"expected {count} vertices, got {len(pts)}")
    return pts


@dataclass(frozen=True)
class Triangle:
    """Three vertices in insertion order (winding is unconstrained)."""
    vertices: Tuple[Point, Point, Point]

    def __post_init__(self):
        object.__setattr__(self, "vertices", _as_points(self.vertices, 3))

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.TRIANGLE

    def with_vertex(self, index: int, point: Point) -> "Triangle":
        verts = list(self.vertices)
        verts[index] = point
        return Triangle(tuple(verts))


@dataclass(frozen=True)
class Rectangle:
    """Axis-aligned rectangle: top-left, top-right, bottom-right, bottom-left.

    Axis alignment is maintained by the drag rules, not checked here, so a
    host can still load whatever it saved.
    """
    vertices: Tuple[Point, Point, Point, Point]

    def __post_init__(self):
        object.__setattr__(self, "vertices", _as_points(self.vertices, 4))

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.RECTANGLE

    @property
    def width(self) -> float:
        return abs(self.vertices[1].x - self.vertices[0].x)

    @property
    def height(self) -> float:
        return abs(self.vertices[2].y - self.vertices[1].y)

    def is_axis_aligned(self) -> bool:
        tl, tr, br, bl = self.vertices
        return tl.y == tr.y and br.y == bl.y and tl.x == bl.x and tr.x == br.x

    def with_vertices(self, vertices) -> "Rectangle":
        return Rectangle(tuple(vertices))

    @classmethod
    def from_corners(cls, x0, y0, x1, y1) -> "Rectangle":
        return cls((Point(x0, y0), Point(x1, y0), Point(x1, y1), Point(x0, y1)))


@dataclass(frozen=True)
class Circle:
    center: Point
    radius: float

    def __post_init__(self):
        if not isinstance(self.center, Point):
            object.__setattr__(self, "center", Point(*self.center))
        # degenerate radius (<= 0 or NaN) clamps up to the floor
        radius = float(self.radius)
        if not radius > 0:
            radius = float(MIN_RADIUS)
        object.__setattr__(self, "radius", radius)

    @property
    def kind(self) -> ShapeKind:
        return ShapeKind.CIRCLE

    @property
    def radius_handle(self) -> Point:
        """Rendered location of the radius control point."""
        return Point(self.center.x + self.radius, self.center.y)

    def with_center(self, center: Point) -> "Circle":
        return replace(self, center=center)

    def with_radius(self, radius: float) -> "Circle":
        return replace(self, radius=radius)


Shape = Union[Triangle, Rectangle, Circle]
