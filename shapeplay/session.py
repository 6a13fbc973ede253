"""
Playground session: the single owner of all engine state.

Pointer events reshape the figure through the drag controller; every
committed shape change re-evaluates the active challenge and, on the first
success, scores it.  ``Tick`` events advance the virtual clock that drives
the challenge timer and power-up expiry.

Events are applied one at a time and fully (``dispatch``), so property
computation and challenge evaluation always see the shape *after* the
triggering mutation has committed.
"""

import logging
from collections import deque
from dataclasses import dataclass
from typing import Optional

import numpy as np

from shapeplay.challenges import CHALLENGE_CATALOG, ChallengeEngine, Verdict
from shapeplay.config import HISTORY_CAPACITY, PRESET_STANDARD
from shapeplay.drag import POINTER_EVENTS, DragController, Handle
from shapeplay.geometry import DerivedProperties, derive_properties
from shapeplay.progression import ProgressionTracker
from shapeplay.shapes import create_shape, create_triangle
from shapeplay.shapes.generators import random_shape
from shapeplay.timers import ChallengeTimer, Scheduler, Tick

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionSnapshot:
    """What a renderer receives after each committed change."""
    shape: object
    handle: Optional[Handle]
    properties: DerivedProperties
    verdict: Optional[Verdict]
    challenge: object


class PlaygroundSession:
    """Gym-like façade over the drag controller, challenge engine, timer
    and progression tracker."""

    def __init__(self, preset=PRESET_STANDARD, catalog=CHALLENGE_CATALOG, rng=None,
                 edge_handles=True, shape=None):
        self.preset = preset
        self.rng = rng or np.random.default_rng()
        self.scheduler = Scheduler()
        self.drag = DragController(preset, edge_handles)
        self.challenges = ChallengeEngine(catalog, self.rng)
        self.tracker = ProgressionTracker(
            self.scheduler, rng=self.rng, on_power_up_change=self._on_power_up_change,
        )
        self.timer = ChallengeTimer(self.scheduler)
        self.history = deque(maxlen=HISTORY_CAPACITY)
        self.shape = shape or create_triangle()

        self.challenge = None
        self.verdict = None
        self.solved = False
        self.last_result = None
        self._listeners = []

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def properties(self) -> DerivedProperties:
        return derive_properties(self.shape)

    @property
    def progression(self):
        return self.tracker.state

    @property
    def challenge_mode(self) -> bool:
        return self.challenge is not None

    def snapshot(self) -> SessionSnapshot:
        return SessionSnapshot(
            shape=self.shape,
            handle=self.drag.active_handle or self.drag.hovered_handle,
            properties=self.properties,
            verdict=self.verdict,
            challenge=self.challenge,
        )

    def subscribe(self, callback):
        """Register *callback(snapshot)*; returns a function that unsubscribes."""
        self._listeners.append(callback)

        def unsubscribe():
            if callback in self._listeners:
                self._listeners.remove(callback)
        return unsubscribe

    def achievements_to_show(self):
        return self.tracker.drain_achievements()

    # ------------------------------------------------------------------
    # Event dispatch
    # ------------------------------------------------------------------

    def dispatch(self, event):
        if isinstance(event, POINTER_EVENTS):
            shape = self.drag.handle_event(self.shape, event)
            if shape is not self.shape:
                self._commit(shape)
        elif isinstance(event, Tick):
            self.scheduler.advance(event.seconds)
        else:
            raise TypeError(f"unsupported event: {event!r}")

    def dispatch_all(self, events):
        for event in events:
            self.dispatch(event)

    def _commit(self, shape):
        self.shape = shape
        if self.challenge is not None:
            self._evaluate()
        snap = self.snapshot()
        for callback in list(self._listeners):
            callback(snap)

    def _evaluate(self):
        verdict = self.challenges.evaluate(
            self.shape, self.challenge, self.tracker.state.active_power_up,
        )
        if verdict is not self.verdict:
            logger.debug("verdict %s -> %s", self.verdict, verdict)
        self.verdict = verdict
        if verdict is Verdict.SUCCESS and not self.solved:
            self._complete()

    def _complete(self):
        self.solved = True
        self.timer.stop()
        self.last_result = self.tracker.on_challenge_success(
            self.challenge, self.timer.elapsed, shape_kind=self.shape.kind.value,
        )
        logger.info("challenge %s solved in %s for %d points",
                    self.challenge.id, self.timer.format(), self.last_result.total)

    # ------------------------------------------------------------------
    # Shapes
    # ------------------------------------------------------------------

    def select_shape(self, kind):
        """Reset to the canonical shape of *kind*; leaves challenge mode."""
        shape = create_shape(kind)
        self.exit_challenge()
        self.drag.reset()
        self._commit(shape)

    def load_shape(self, shape):
        self.drag.reset()
        self._commit(shape)

    def randomize_shape(self, kind=None):
        self.load_shape(random_shape(self.rng, self.preset, kind))

    def save_shape(self):
        """Retire the current shape into the bounded history."""
        self.history.append(self.shape)

    # ------------------------------------------------------------------
    # Challenges
    # ------------------------------------------------------------------

    def start_challenge(self, difficulty=None, category=None):
        challenge = self.challenges.select_challenge(difficulty, category)
        self._abandon()
        self.challenge = challenge
        self.solved = False
        self.last_result = None
        self.timer.reset()
        self.timer.start()
        if self.tracker.is_active("timeFreeze"):
            self.timer.pause()
        logger.info("challenge started: %s", challenge.description)
        self._evaluate()
        return challenge

    def skip_challenge(self):
        """Give up on the current challenge and draw another of the same
        difficulty."""
        difficulty = self.challenge.difficulty if self.challenge is not None else None
        return self.start_challenge(difficulty)

    def exit_challenge(self):
        self._abandon()
        self.timer.reset()

    def _abandon(self):
        if self.challenge is not None and not self.solved:
            self.tracker.on_challenge_failure()
        self.timer.stop()
        self.challenge = None
        self.verdict = None
        self.solved = False

    # ------------------------------------------------------------------
    # Power-ups
    # ------------------------------------------------------------------

    def use_power_up(self, kind) -> bool:
        return self.tracker.use_power_up(kind)

    def hint(self) -> Optional[str]:
        """Hint text while the hint power-up is active, else None."""
        if self.challenge is None or not self.tracker.is_active("hint"):
            return None
        return self.challenges.hint(self.shape, self.challenge)

    def _on_power_up_change(self, kind, active):
        in_play = self.challenge is not None and not self.solved
        if kind == "timeFreeze" and in_play:
            if active:
                self.timer.pause()
            else:
                self.timer.resume()
        elif kind == "precision" and self.challenge is not None:
            self._evaluate()
