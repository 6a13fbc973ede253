"""
Scoring and progression: points, XP, levels, streaks, achievements and
consumable power-ups.

The tracker is the only writer of ``ProgressionState``.  Power-up expiry is
a cancelable task on the session's ``Scheduler``; activating a new power-up
cancels the previous expiry so the last-activated power-up always wins.
"""

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Dict, Optional, Set, Tuple

import numpy as np

from shapeplay.config import (
    ACHIEVEMENT_POINTS, DIFFICULTY_POINTS, POWER_UP_MAP, POWER_UPS,
    SPECIALIST_ACHIEVEMENTS, SPECIALIST_THRESHOLD, SPEED_DEMON_SECONDS,
    STARTING_POWER_UPS, STREAK_BONUS, TIME_BONUS_TIERS, XP_PER_LEVEL,
)
from shapeplay.timers import Scheduler

logger = logging.getLogger(__name__)

DOUBLE_POINTS = "doublePoints"


@dataclass
class ProgressionState:
    score: int = 0
    level: int = 1
    current_xp: int = 0
    achievements: Set[str] = field(default_factory=set)
    streak: int = 0
    power_ups: Dict[str, int] = field(default_factory=lambda: dict(STARTING_POWER_UPS))
    active_power_up: Optional[str] = None
    challenges_completed: int = 0
    perfect_solutions: int = 0
    shape_successes: Dict[str, int] = field(default_factory=dict)

    @property
    def xp_to_next_level(self) -> int:
        return self.level * XP_PER_LEVEL

    @property
    def level_progress(self) -> float:
        return self.current_xp / self.xp_to_next_level


@dataclass(frozen=True)
class ScoreResult:
    points: int                 # challenge points after any multiplier
    base_points: int
    streak_bonus: int
    time_bonus: int
    multiplier: int = 1
    achievement_points: int = 0
    achievements: Tuple[str, ...] = ()
    leveled_up: bool = False

    @property
    def total(self) -> int:
        return self.points + self.achievement_points


def time_bonus(elapsed_time: float) -> int:
    for limit, bonus in TIME_BONUS_TIERS:
        if elapsed_time < limit:
            return bonus
    return 0


class ProgressionTracker:
    """Consumes challenge outcomes and power-up requests."""

    def __init__(self, scheduler: Optional[Scheduler] = None,
                 state: Optional[ProgressionState] = None, rng=None,
                 on_power_up_change=None):
        self.scheduler = scheduler or Scheduler()
        self.state = state or ProgressionState()
        self.rng = rng or np.random.default_rng()
        self.on_power_up_change = on_power_up_change
        self._expiry_task = None
        self._display_queue = deque()
        self._recent = []

    # ------------------------------------------------------------------
    # Achievements
    # ------------------------------------------------------------------

    def _unlock(self, name: str) -> bool:
        if name in self.state.achievements:
            return False
        self.state.achievements.add(name)
        self._display_queue.append(name)
        self._recent.append(name)
        logger.info("achievement unlocked: %s", name)
        return True

    def _unlock_all(self, names):
        unlocked = [n for n in names if self._unlock(n)]
        if unlocked:
            self.award_points(ACHIEVEMENT_POINTS * len(unlocked))
        return unlocked

    def drain_achievements(self):
        """Newly unlocked achievements for display, oldest first."""
        drained = list(self._display_queue)
        self._display_queue.clear()
        return drained

    # ------------------------------------------------------------------
    # Points & levels
    # ------------------------------------------------------------------

    def award_points(self, base_points: int) -> int:
        """Add points to score and XP; returns the points actually awarded."""
        s = self.state
        points = base_points * 2 if s.active_power_up == DOUBLE_POINTS else base_points
        s.score += points
        s.current_xp += points

        leveled = False
        while s.current_xp >= s.xp_to_next_level:
            s.current_xp -= s.xp_to_next_level
            s.level += 1
            leveled = True
            logger.info("level up: %d (xp carried %d)", s.level, s.current_xp)
            self._grant_level_reward()

        if leveled:
            earned = []
            if s.level >= 5:
                earned.append("Rising Star")
            if s.level >= 10:
                earned.append("Master")
            self._unlock_all(earned)
        return points

    def _grant_level_reward(self):
        kind = POWER_UPS[int(self.rng.integers(len(POWER_UPS)))].kind
        self.grant_power_up(kind)

    # ------------------------------------------------------------------
    # Challenge outcomes
    # ------------------------------------------------------------------

    def on_challenge_success(self, challenge, elapsed_time: float, streak: Optional[int] = None,
                             shape_kind: Optional[str] = None) -> ScoreResult:
        s = self.state
        streak = s.streak if streak is None else streak
        level_before = s.level
        score_before = s.score
        self._recent = []

        difficulty = getattr(challenge.difficulty, "value", challenge.difficulty)
        base = DIFFICULTY_POINTS[difficulty]
        streak_bonus = streak * STREAK_BONUS
        bonus = time_bonus(elapsed_time)
        multiplier = 2 if s.active_power_up == DOUBLE_POINTS else 1

        s.streak += 1
        s.challenges_completed += 1
        if difficulty == "hard":
            s.perfect_solutions += 1
        kind = shape_kind or challenge.shape_kind
        if kind is not None:
            s.shape_successes[kind] = s.shape_successes.get(kind, 0) + 1

        points = self.award_points(base + streak_bonus + bonus)

        earned = ["First Success"]
        if elapsed_time < SPEED_DEMON_SECONDS:
            earned.append("Speed Demon")
        if s.streak >= 5:
            earned.append("Streak Master")
        if s.challenges_completed >= 10:
            earned.append("Explorer")
        if s.perfect_solutions >= 5:
            earned.append("Perfectionist")
        if kind is not None and s.shape_successes.get(kind, 0) >= SPECIALIST_THRESHOLD:
            earned.append(SPECIALIST_ACHIEVEMENTS[kind])

        self._unlock_all(earned)
        achievements = tuple(self._recent)
        self._recent = []

        return ScoreResult(
            points=points,
            base_points=base,
            streak_bonus=streak_bonus,
            time_bonus=bonus,
            multiplier=multiplier,
            achievement_points=s.score - score_before - points,
            achievements=achievements,
            leveled_up=s.level > level_before,
        )

    def on_challenge_failure(self):
        if self.state.streak:
            logger.debug("streak of %d broken", self.state.streak)
        self.state.streak = 0

    # ------------------------------------------------------------------
    # Power-ups
    # ------------------------------------------------------------------

    def grant_power_up(self, kind: str, count: int = 1):
        if kind not in POWER_UP_MAP:
            raise ValueError(f"unknown power-up: {kind!r}")
        self.state.power_ups[kind] = self.state.power_ups.get(kind, 0) + count

    def is_active(self, kind: str) -> bool:
        return self.state.active_power_up == kind

    def use_power_up(self, kind: str) -> bool:
        """Activate *kind* if any are left.  Returns False (and does nothing)
        when the balance is zero."""
        if kind not in POWER_UP_MAP:
            raise ValueError(f"unknown power-up: {kind!r}")
        s = self.state
        if s.power_ups.get(kind, 0) <= 0:
            return False

        s.power_ups[kind] -= 1
        previous = s.active_power_up
        if self._expiry_task is not None:
            self._expiry_task.cancel()
        if previous is not None and previous != kind:
            self._notify(previous, False)

        s.active_power_up = kind
        duration = POWER_UP_MAP[kind].duration
        self._expiry_task = self.scheduler.call_later(duration, lambda: self._expire(kind))
        logger.info("power-up %s active for %.0fs", kind, duration)
        self._notify(kind, True)
        return True

    def _expire(self, kind: str):
        if self.state.active_power_up != kind:
            return
        self.state.active_power_up = None
        self._expiry_task = None
        logger.info("power-up %s expired", kind)
        self._notify(kind, False)

    def _notify(self, kind, active):
        if self.on_power_up_change is not None:
            self.on_power_up_change(kind, active)
