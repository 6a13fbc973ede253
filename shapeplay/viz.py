"""
Visualization helpers: frames, GIFs and the shape comparison chart.

Usage (notebook)::

    from shapeplay.viz import record_session, save_gif
    frames = record_session(session)      # one frame per committed change
    ...
    save_gif(frames, "outputs/drag.gif")
"""

import os

import matplotlib
matplotlib.use("Agg")
import matplotlib.pyplot as plt
import numpy as np
from PIL import Image, ImageDraw

from shapeplay.geometry import derive_properties, property_value
from shapeplay.raster import render_shape


# -----------------------------------------------------------------------
# Frames
# -----------------------------------------------------------------------

def frame_from_render(img, caption_lines=()):
    """Convert a float RGB render to a PIL image, with an optional caption
    strip underneath."""
    frame = Image.fromarray((np.clip(img, 0, 1) * 255).astype(np.uint8))
    if not caption_lines:
        return frame
    strip_h = 14 * len(caption_lines) + 6
    canvas = Image.new("RGB", (frame.width, frame.height + strip_h), (32, 32, 32))
    canvas.paste(frame, (0, 0))
    draw = ImageDraw.Draw(canvas)
    for i, line in enumerate(caption_lines):
        draw.text((6, frame.height + 3 + 14 * i), line, fill=(230, 230, 230))
    return canvas


def snapshot_caption(snapshot):
    props = snapshot.properties
    perimeter = property_value(props, "perimeter")
    lines = [f"{props.kind}: area {props.area:.1f}  perimeter {perimeter:.2f}"]
    if snapshot.challenge is not None:
        verdict = snapshot.verdict.message if snapshot.verdict is not None else ""
        lines.append(f"{snapshot.challenge.description}  {verdict}")
    return lines


def record_session(session, frames=None, edge_handles=None):
    """Subscribe to *session* and append a captioned frame per committed
    change.  Returns the (live) frame list."""
    frames = [] if frames is None else frames
    edge_handles = session.drag.edge_handles if edge_handles is None else edge_handles

    def _on_change(snapshot):
        img = render_shape(snapshot.shape, snapshot.handle, session.preset, edge_handles)
        frames.append(frame_from_render(img, snapshot_caption(snapshot)))

    session.subscribe(_on_change)
    return frames


def save_gif(frames, save_path="outputs/session.gif", duration=120):
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    if frames:
        frames[0].save(save_path, save_all=True, append_images=frames[1:],
                       duration=duration, loop=0)
    return save_path


# -----------------------------------------------------------------------
# Shape comparison chart
# -----------------------------------------------------------------------

def comparison_rows(current, history, last=3):
    """(label, kind, area, perimeter) for the current shape and the most
    recent *last* history entries."""
    rows = []
    for label, shape in [("Current Shape", current)] + [
        (f"Shape {len(history) - i}", s) for i, s in enumerate(reversed(list(history)[-last:]))
    ]:
        props = derive_properties(shape)
        rows.append((label, props.kind, round(props.area, 1),
                     round(property_value(props, "perimeter"), 1)))
    return rows


def plot_shape_comparison(current, history, save_path="outputs/shape_comparison.png"):
    """Grouped bar chart of area and perimeter for the current shape versus
    recent saved shapes."""
    rows = comparison_rows(current, history)
    labels = [f"{r[0]}\n({r[1]})" for r in rows]
    x = np.arange(len(rows))

    fig, ax = plt.subplots(figsize=(2.5 * len(rows) + 2, 4))
    ax.bar(x - 0.2, [r[2] for r in rows], width=0.4, color="#3b82f6", label="area")
    ax.bar(x + 0.2, [r[3] for r in rows], width=0.4, color="#10b981", label="perimeter")
    ax.set_xticks(x)
    ax.set_xticklabels(labels, fontsize=9)
    ax.grid(True, axis="y", alpha=0.3)
    ax.legend()
    ax.set_title("Shape Comparison")

    plt.tight_layout()
    os.makedirs(os.path.dirname(save_path) or ".", exist_ok=True)
    fig.savefig(save_path, dpi=120, bbox_inches="tight")
    plt.close(fig)
    return save_path
