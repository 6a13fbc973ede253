"""
Scripted playground demo.

Starts a challenge, then drives the pointer the way a player would: grab a
handle and bisect along a drag path until the verdict flips to success.
Every committed shape change is rendered into an animated GIF.

Usage (CLI):
    python -m shapeplay.demo --difficulty easy --save-path outputs/demo.gif

Or from a notebook:
    from shapeplay.demo import run_demo
    session, frames = run_demo(difficulty="medium", seed=3)
"""

import argparse
import logging

import numpy as np

from shapeplay.challenges import MAGNITUDE_TARGETS, EmptyCatalogError, Verdict
from shapeplay.config import CANVAS_PRESETS
from shapeplay.drag import PointerDown, PointerMove, PointerUp
from shapeplay.geometry import max_radius_at, property_value
from shapeplay.session import PlaygroundSession
from shapeplay.shapes import Circle, Rectangle, create_shape
from shapeplay.timers import Tick
from shapeplay.viz import plot_shape_comparison, record_session, save_gif


def _drag_path(shape, preset):
    """(grab point, path start, path end) for a handle whose drag grows the
    shape monotonically."""
    m = preset.margin
    if isinstance(shape, Circle):
        c = shape.center
        grab = shape.radius_handle.as_tuple()
        return grab, (c.x + preset.min_radius, c.y), (c.x + max_radius_at(c, preset), c.y)
    if isinstance(shape, Rectangle):
        tl, _, br, _ = shape.vertices
        return br.as_tuple(), (tl.x + 5, tl.y + 5), (preset.width - m, preset.height - m)
    apex, base, _ = shape.vertices
    return apex.as_tuple(), (apex.x, base.y - 1), (apex.x, m)


def solve_by_bisection(session, max_steps=24, seconds_per_step=1.0):
    """Bisect a drag along ``_drag_path`` until the challenge is solved.

    Only magnitude targets have a direction to follow; other targets are
    left unsolved.  Returns True on success.
    """
    challenge = session.challenge
    if challenge is None or challenge.target_property not in MAGNITUDE_TARGETS:
        return False

    grab, start, end = _drag_path(session.shape, session.preset)
    session.dispatch(PointerDown(*grab))
    lo, hi = 0.0, 1.0
    for _ in range(max_steps):
        t = (lo + hi) / 2
        x = start[0] + t * (end[0] - start[0])
        y = start[1] + t * (end[1] - start[1])
        session.dispatch(PointerMove(x, y))
        session.dispatch(Tick(seconds_per_step))
        if session.solved:
            break
        current = property_value(session.properties, challenge.target_property.value)
        if current is None:
            break
        if current < challenge.target_value:
            lo = t
        else:
            hi = t
    session.dispatch(PointerUp())
    return session.verdict is Verdict.SUCCESS


def run_demo(difficulty=None, category="basic", preset="standard", seed=None,
             save_path="outputs/demo.gif", chart_path=None):
    session = PlaygroundSession(preset=CANVAS_PRESETS[preset], rng=np.random.default_rng(seed))
    frames = record_session(session)

    challenge = session.start_challenge(difficulty, category)
    if challenge.shape_kind is not None and session.shape.kind.value != challenge.shape_kind:
        session.load_shape(create_shape(challenge.shape_kind))
    print(f"Challenge: {challenge.description} "
          f"(target {challenge.target_value:g} +/- {challenge.tolerance:g})")

    solved = solve_by_bisection(session)
    session.save_shape()

    save_gif(frames, save_path)
    print(f"Session GIF saved to {save_path} ({len(frames)} frames)")
    if chart_path:
        plot_shape_comparison(session.shape, session.history, chart_path)
        print(f"Comparison chart saved to {chart_path}")

    state = session.progression
    print(f"Verdict: {session.verdict.message if session.verdict else '-'}  "
          f"time {session.timer.format()}")
    if solved and session.last_result is not None:
        r = session.last_result
        print(f"Points: {r.points} (base {r.base_points}, streak {r.streak_bonus}, "
              f"time {r.time_bonus}) + achievements {r.achievement_points}")
    print(f"Score {state.score}  level {state.level}  xp {state.current_xp}/{state.xp_to_next_level}")
    for name in session.achievements_to_show():
        print(f"Achievement unlocked: {name}")
    return session, frames


def main():
    p = argparse.ArgumentParser(description="shapeplay scripted challenge demo")
    p.add_argument("--difficulty", choices=["easy", "medium", "hard"], default=None)
    p.add_argument("--category", choices=["basic", "advanced", "creative"], default="basic")
    p.add_argument("--preset", choices=sorted(CANVAS_PRESETS), default="standard")
    p.add_argument("--seed", type=int, default=None)
    p.add_argument("--save-path", default="outputs/demo.gif")
    p.add_argument("--chart-path", default=None,
                   help="Also save a shape comparison chart here")
    p.add_argument("--log-level", default="WARNING", help="Logging level (default: WARNING)")
    args = p.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.WARNING),
        format="%(levelname)s:%(name)s:%(message)s",
    )
    try:
        run_demo(
            difficulty=args.difficulty,
            category=args.category,
            preset=args.preset,
            seed=args.seed,
            save_path=args.save_path,
            chart_path=args.chart_path,
        )
    except EmptyCatalogError as e:
        p.error(str(e))


if __name__ == "__main__":
    main()
