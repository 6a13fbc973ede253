"""
Canonical shape factories.

Each factory returns the same shape at the same canvas position every time.
They seed a new session and back the "reset to shape kind" buttons.
"""

from shapeplay.shapes._types import Circle, Point, Rectangle, ShapeKind, Triangle


def create_triangle() -> Triangle:
    return Triangle((Point(150, 100), Point(250, 200), Point(50, 200)))


def create_rectangle() -> Rectangle:
    return Rectangle.from_corners(100, 100, 250, 200)


def create_circle() -> Circle:
    return Circle(Point(200, 150), 80)


FACTORIES = {
    ShapeKind.TRIANGLE: create_triangle,
    ShapeKind.RECTANGLE: create_rectangle,
    ShapeKind.CIRCLE: create_circle,
}


def create_shape(kind):
    """Build the canonical shape for *kind* (a ``ShapeKind`` or its name)."""
    try:
        kind = ShapeKind(kind)
    except ValueError:
        raise ValueError(f"unknown shape kind: {kind!r}") from None
    return FACTORIES[kind]()
