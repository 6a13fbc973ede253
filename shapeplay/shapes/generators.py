"""
Random shape generators: triangles, rectangles, circles.

Every generator takes a numpy ``Generator`` and a ``CanvasPreset`` and
returns a shape that already satisfies the canvas clamp rules, so the drag
controller never has to repair a freshly generated shape.
"""

import numpy as np

from shapeplay.config import PRESET_STANDARD
from shapeplay.geometry import clamp_circle_center, clamp_point, max_radius_at
from shapeplay.shapes._types import Circle, Point, Rectangle, ShapeKind, Triangle


# ---------------------------------------------------------------------------
# Triangle: three points roughly 120 degrees apart around the canvas centre
# ---------------------------------------------------------------------------

def random_triangle(rng=None, preset=PRESET_STANDARD) -> Triangle:
    rng = rng or np.random.default_rng()
    cx, cy = preset.width / 2, preset.height / 2
    size = rng.uniform(50, 150)

    a1 = rng.uniform(0, 2 * np.pi)
    a2 = a1 + 2 * np.pi / 3 + (rng.random() - 0.5) * 0.5
    a3 = a2 + 2 * np.pi / 3 + (rng.random() - 0.5) * 0.5

    verts = [
        clamp_point(Point(cx + np.cos(a) * size, cy + np.sin(a) * size), preset)
        for a in (a1, a2, a3)
    ]
    return Triangle(tuple(verts))


# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------

def random_rectangle(rng=None, preset=PRESET_STANDARD) -> Rectangle:
    rng = rng or np.random.default_rng()
    width = rng.uniform(80, 200)
    height = rng.uniform(60, 160)
    x = preset.width / 3 + rng.random() * preset.width / 3
    y = preset.height * 3 / 8 + rng.random() * preset.height / 4

    top_left = clamp_point(Point(x, y), preset)
    bottom_right = clamp_point(Point(x + width, y + height), preset)
    return Rectangle.from_corners(top_left.x, top_left.y, bottom_right.x, bottom_right.y)


# ---------------------------------------------------------------------------
# Circle
# ---------------------------------------------------------------------------

def random_circle(rng=None, preset=PRESET_STANDARD) -> Circle:
    rng = rng or np.random.default_rng()
    centre = Point(preset.width / 2, preset.height / 2)
    radius = min(rng.uniform(40, 120), max_radius_at(centre, preset))
    radius = max(radius, preset.min_radius)

    x = preset.width / 4 + rng.random() * preset.width / 2
    y = preset.height * 3 / 8 + rng.random() * preset.height / 4
    return Circle(clamp_circle_center(Point(x, y), radius, preset), radius)


ALL_GENERATORS = [random_triangle, random_rectangle, random_circle]

GENERATOR_MAP = {
    ShapeKind.TRIANGLE: random_triangle,
    ShapeKind.RECTANGLE: random_rectangle,
    ShapeKind.CIRCLE: random_circle,
}


def random_shape(rng=None, preset=PRESET_STANDARD, kind=None):
    """Pick a random generator (or the one for *kind*) and produce a shape."""
    rng = rng or np.random.default_rng()
    if kind is None:
        gen = ALL_GENERATORS[rng.integers(len(ALL_GENERATORS))]
    else:
        gen = GENERATOR_MAP[ShapeKind(kind)]
    return gen(rng, preset)
