"""
Headless rendering backed by OpenCV.

All drawing functions operate on float32 numpy arrays in [0, 1] range,
either single-channel (H, W) or RGB (H, W, 3).  ``render_shape`` is the
renderer contract for the session: it redraws the whole canvas from the
shape and the hovered/active handle on every call and keeps no state.
"""

import cv2
import numpy as np

from shapeplay.config import CENTER_HANDLE_SIZE, PRESET_STANDARD, VERTEX_HANDLE_SIZE
from shapeplay.drag import HandleKind, control_handles
from shapeplay.shapes._types import Circle, Rectangle, Triangle

# RGB colours
SHAPE_STROKE = (0.23, 0.51, 0.96)
SHAPE_FILL = (0.23, 0.51, 0.96)
FILL_ALPHA = 0.2
VERTEX_COLOR = (0.94, 0.27, 0.27)
RADIUS_COLOR = (0.06, 0.73, 0.51)
EDGE_COLOR = (0.6, 0.6, 0.6)
ACTIVE_RING = (1.0, 1.0, 1.0)


def _color(color):
    if np.isscalar(color):
        return float(color)
    return tuple(float(c) for c in color)


def _px(p):
    return (int(round(p[0])), int(round(p[1])))


# ---------------------------------------------------------------------------
# Core primitives
# ---------------------------------------------------------------------------

def rasterize_line(img, p1, p2, color=1.0, thickness=1):
    """Draw an anti-aliased line segment."""
    cv2.line(img, _px(p1), _px(p2), _color(color), thickness, lineType=cv2.LINE_AA)
    return img


def rasterize_circle(img, center, radius, color=1.0, thickness=1):
    """Draw an anti-aliased circle outline."""
    cv2.circle(img, _px(center), int(max(round(radius), 1)), _color(color), thickness,
               lineType=cv2.LINE_AA)
    return img


def rasterize_filled_circle(img, center, radius, color=1.0):
    cv2.circle(img, _px(center), int(max(round(radius), 1)), _color(color), -1,
               lineType=cv2.LINE_AA)
    return img


def rasterize_polygon(img, vertices, color=1.0, thickness=1):
    """Draw a closed polygon outline through *vertices*."""
    n = len(vertices)
    for i in range(n):
        rasterize_line(img, vertices[i], vertices[(i + 1) % n], color, thickness)
    return img


def rasterize_filled_polygon(img, vertices, color=1.0):
    pts = np.array([_px(v) for v in vertices], dtype=np.int32)
    cv2.fillPoly(img, [pts], _color(color), lineType=cv2.LINE_AA)
    return img


def draw_cursor_np(img, cx, cy, size=8, color=1.0, thickness=1):
    """Draw a '+' crosshair cursor."""
    cx, cy = int(round(cx)), int(round(cy))
    c = _color(color)
    cv2.line(img, (cx, cy - size), (cx, cy + size), c, thickness, cv2.LINE_AA)
    cv2.line(img, (cx - size, cy), (cx + size, cy), c, thickness, cv2.LINE_AA)
    return img


def draw_handle(img, center, radius, color, active=False):
    """Filled dot for a control handle; active handles get a ring."""
    rasterize_filled_circle(img, center, radius, color)
    if active:
        rasterize_circle(img, center, radius + 4, ACTIVE_RING, 2)
    return img


# ---------------------------------------------------------------------------
# Shape rendering
# ---------------------------------------------------------------------------

def _outline_points(shape):
    if isinstance(shape, (Triangle, Rectangle)):
        return [v.as_tuple() for v in shape.vertices]
    return None


def render_shape(shape, handle=None, preset=PRESET_STANDARD, edge_handles=True,
                 cursor=None, background=0.0):
    """Render *shape* with its control handles onto a fresh RGB canvas.

    Parameters
    ----------
    shape : Triangle | Rectangle | Circle
    handle : Handle or None
        Hovered or dragged handle, drawn with a highlight ring.
    edge_handles : bool
        Also draw edge-midpoint handles.
    cursor : (x, y) or None
        Pointer position to mark with a crosshair.

    Returns
    -------
    ndarray, shape (H, W, 3), float32 in [0, 1]
    """
    img = np.full((preset.height, preset.width, 3), background, dtype=np.float32)

    fill = np.zeros_like(img)
    pts = _outline_points(shape)
    if pts is not None:
        rasterize_filled_polygon(fill, pts, SHAPE_FILL)
    elif isinstance(shape, Circle):
        rasterize_filled_circle(fill, shape.center.as_tuple(), shape.radius, SHAPE_FILL)
    else:
        raise TypeError(f"not a shape: {shape!r}")
    mask = fill.any(axis=-1, keepdims=True)
    img = np.where(mask, img * (1 - FILL_ALPHA) + fill * FILL_ALPHA, img).astype(np.float32)

    if pts is not None:
        rasterize_polygon(img, pts, SHAPE_STROKE, 3)
    else:
        rasterize_circle(img, shape.center.as_tuple(), shape.radius, SHAPE_STROKE, 3)

    for h, location in control_handles(shape, edge_handles):
        if h.kind is HandleKind.RADIUS:
            color, size = RADIUS_COLOR, VERTEX_HANDLE_SIZE
        elif h.kind is HandleKind.CENTER:
            color, size = VERTEX_COLOR, CENTER_HANDLE_SIZE
        elif h.kind is HandleKind.EDGE_MIDPOINT:
            color, size = EDGE_COLOR, CENTER_HANDLE_SIZE - 1
        else:
            color, size = VERTEX_COLOR, VERTEX_HANDLE_SIZE
        draw_handle(img, location.as_tuple(), size, color, active=(h == handle))

    if cursor is not None:
        draw_cursor_np(img, cursor[0], cursor[1], color=ACTIVE_RING)

    return np.clip(img, 0.0, 1.0)
