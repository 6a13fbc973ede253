"""
Geometry library: pure functions deriving properties from raw shape data.

All lengths are reported in display units (pixels * ``SCALE_FACTOR``) and
all areas in display units too (pixel area * ``SCALE_FACTOR``), which keeps
numbers human-sized relative to pixel-space coordinates.

Nothing here raises on degenerate input.  Collinear triangles produce a zero
area and clamped angles, coincident vertices produce zero-degree angles, and
zero-height rectangles produce a zero ratio.
"""

import math
from dataclasses import asdict, dataclass
from typing import Optional, Tuple

import numpy as np

from shapeplay.config import (
    EQUILATERAL_TOLERANCE, PRESET_STANDARD, RIGHT_ANGLE_TOLERANCE,
    SCALE_FACTOR, SQUARE_RATIO_TOLERANCE,
)
from shapeplay.shapes._types import Circle, Point, Rectangle, Triangle


def distance(p: Point, q: Point) -> float:
    return math.hypot(q.x - p.x, q.y - p.y)


# ---------------------------------------------------------------------------
# Triangle
# ---------------------------------------------------------------------------

def triangle_area(v0: Point, v1: Point, v2: Point) -> float:
    """Shoelace formula, absolute value, scaled."""
    doubled = v0.x * (v1.y - v2.y) + v1.x * (v2.y - v0.y) + v2.x * (v0.y - v1.y)
    return abs(doubled) / 2 * SCALE_FACTOR


def triangle_sides(v0: Point, v1: Point, v2: Point) -> Tuple[float, float, float]:
    """Scaled side lengths (v0-v1, v1-v2, v2-v0)."""
    return (
        distance(v0, v1) * SCALE_FACTOR,
        distance(v1, v2) * SCALE_FACTOR,
        distance(v2, v0) * SCALE_FACTOR,
    )


def triangle_perimeter(v0: Point, v1: Point, v2: Point) -> float:
    return (distance(v0, v1) + distance(v1, v2) + distance(v2, v0)) * SCALE_FACTOR


def _law_of_cosines(adjacent_a, adjacent_b, opposite):
    denom = 2 * adjacent_a * adjacent_b
    if denom == 0:
        return 0.0
    cos = (adjacent_a ** 2 + adjacent_b ** 2 - opposite ** 2) / denom
    # Near-collinear input drifts outside [-1, 1]
    return float(np.degrees(np.arccos(np.clip(cos, -1.0, 1.0))))


def triangle_angles(v0: Point, v1: Point, v2: Point) -> Tuple[float, float, float]:
    """Interior angles in degrees at v0, v1 and v2.

    The third angle is ``180 - (a + b)`` so the three always sum to 180.
    """
    ab = distance(v0, v1)
    bc = distance(v1, v2)
    ca = distance(v2, v0)
    angle_a = _law_of_cosines(ab, ca, bc)
    angle_b = _law_of_cosines(ab, bc, ca)
    return (angle_a, angle_b, 180.0 - (angle_a + angle_b))


def is_right_triangle(angles, tolerance=RIGHT_ANGLE_TOLERANCE) -> bool:
    return any(abs(a - 90.0) < tolerance for a in angles)


def is_equilateral(sides, tolerance=EQUILATERAL_TOLERANCE) -> bool:
    a, b, c = sides
    return abs(a - b) < tolerance and abs(b - c) < tolerance and abs(c - a) < tolerance


# ---------------------------------------------------------------------------
# Rectangle
# ---------------------------------------------------------------------------

def rectangle_dimensions(vertices) -> Tuple[float, float]:
    """Pixel (width, height) from top-right/top-left and bottom-right/top-right."""
    top_left, top_right, bottom_right = vertices[0], vertices[1], vertices[2]
    return abs(top_right.x - top_left.x), abs(bottom_right.y - top_right.y)


def rectangle_area(vertices) -> float:
    width, height = rectangle_dimensions(vertices)
    return width * height * SCALE_FACTOR


def rectangle_perimeter(vertices) -> float:
    width, height = rectangle_dimensions(vertices)
    return 2 * (width + height) * SCALE_FACTOR


def rectangle_ratio(vertices) -> float:
    width, height = rectangle_dimensions(vertices)
    if height == 0:
        return 0.0
    return width / height


def is_square(ratio, tolerance=SQUARE_RATIO_TOLERANCE) -> bool:
    return abs(ratio - 1.0) < tolerance


# ---------------------------------------------------------------------------
# Circle
# ---------------------------------------------------------------------------

def circle_area(radius: float) -> float:
    return math.pi * radius ** 2 * SCALE_FACTOR


def circle_circumference(radius: float) -> float:
    return 2 * math.pi * radius * SCALE_FACTOR


# ---------------------------------------------------------------------------
# Canvas clamping
# ---------------------------------------------------------------------------

def clamp(value, lo, hi):
    return max(lo, min(hi, value))


def clamp_point(point: Point, preset=PRESET_STANDARD) -> Point:
    m = preset.margin
    return Point(
        clamp(point.x, m, preset.width - m),
        clamp(point.y, m, preset.height - m),
    )


def max_radius_at(center: Point, preset=PRESET_STANDARD) -> float:
    """Largest radius that keeps a circle at *center* inside the margin."""
    m = preset.margin
    clearance = min(
        center.x - m,
        preset.width - m - center.x,
        center.y - m,
        preset.height - m - center.y,
    )
    return min(preset.max_radius, clearance)


def clamp_radius(radius: float, center: Point, preset=PRESET_STANDARD) -> float:
    return max(preset.min_radius, min(radius, max_radius_at(center, preset)))


def clamp_circle_center(center: Point, radius: float, preset=PRESET_STANDARD) -> Point:
    """Keep ``radius + margin <= center <= size - radius - margin`` per axis."""
    m = preset.margin

    def _axis(value, size):
        lo, hi = radius + m, size - radius - m
        if lo > hi:
            return size / 2
        return clamp(value, lo, hi)

    return Point(_axis(center.x, preset.width), _axis(center.y, preset.height))


# ---------------------------------------------------------------------------
# Derived properties
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class DerivedProperties:
    """Read-only projection of a shape.  Recomputed on every access."""
    kind: str
    area: float
    perimeter: Optional[float] = None
    circumference: Optional[float] = None
    angles: Optional[Tuple[float, float, float]] = None
    sides: Optional[Tuple[float, float, float]] = None
    is_right_triangle: Optional[bool] = None
    is_equilateral: Optional[bool] = None
    width: Optional[float] = None
    height: Optional[float] = None
    ratio: Optional[float] = None
    is_square: Optional[bool] = None
    radius: Optional[float] = None

    def as_dict(self) -> dict:
        """Only the fields that apply to this shape kind."""
        return {k: v for k, v in asdict(self).items() if v is not None}


def derive_properties(shape) -> DerivedProperties:
    if isinstance(shape, Triangle):
        v0, v1, v2 = shape.vertices
        angles = triangle_angles(v0, v1, v2)
        sides = triangle_sides(v0, v1, v2)
        return DerivedProperties(
            kind=shape.kind.value,
            area=triangle_area(v0, v1, v2),
            perimeter=triangle_perimeter(v0, v1, v2),
            angles=angles,
            sides=sides,
            is_right_triangle=is_right_triangle(angles),
            is_equilateral=is_equilateral(sides),
        )
    if isinstance(shape, Rectangle):
        width, height = rectangle_dimensions(shape.vertices)
        ratio = rectangle_ratio(shape.vertices)
        return DerivedProperties(
            kind=shape.kind.value,
            area=rectangle_area(shape.vertices),
            perimeter=rectangle_perimeter(shape.vertices),
            width=width * SCALE_FACTOR,
            height=height * SCALE_FACTOR,
            ratio=ratio,
            is_square=is_square(ratio),
        )
    if isinstance(shape, Circle):
        return DerivedProperties(
            kind=shape.kind.value,
            area=circle_area(shape.radius),
            circumference=circle_circumference(shape.radius),
            radius=shape.radius * SCALE_FACTOR,
        )
    raise TypeError(f"not a shape: {shape!r}")


def property_value(props: DerivedProperties, name: str) -> Optional[float]:
    """Look up a numeric property by target name, or None if inapplicable.

    A circle's perimeter is its circumference; ``angle`` resolves to the
    smallest interior angle.
    """
    if name == "area":
        return props.area
    if name == "perimeter":
        return props.perimeter if props.perimeter is not None else props.circumference
    if name == "circumference":
        return props.circumference
    if name == "angle":
        return min(props.angles) if props.angles is not None else None
    if name == "ratio":
        return props.ratio
    return None
