"""
Shape model package for shapeplay.

A shape is one of three frozen dataclasses (``Triangle``, ``Rectangle``,
``Circle``) discriminated by ``shape.kind``.  Shapes are never mutated in
place: every edit returns a new value, so the session can hand the current
shape to a renderer without copying it.

Usage::

    from shapeplay.shapes import create_shape
    from shapeplay.shapes.generators import random_shape
    shape = create_shape("triangle")
    other = random_shape()
"""

from shapeplay.shapes._types import (  # noqa: F401
    Circle, Point, Rectangle, Shape, ShapeKind, Triangle,
)
from shapeplay.shapes.factories import (  # noqa: F401
    FACTORIES, create_circle, create_rectangle, create_shape, create_triangle,
)

