"""
Challenge catalog, random selection and verdicts.

A challenge asks the player to shape a figure so that one property lands on
a target value.  Magnitude targets (area, perimeter, circumference) report
which way the figure is off; angle and ratio targets are pass/fail checks
with no meaningful direction, so a miss reports ``IN_PROGRESS`` instead of
too big / too small.

Only magnitude targets are helped by the precision power-up.  Angle and
ratio checks use their own fixed thresholds and ignore it.
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Optional, Sequence

import numpy as np

from shapeplay.geometry import derive_properties, property_value

logger = logging.getLogger(__name__)

PRECISION_MULTIPLIER = 2.0


class EmptyCatalogError(LookupError):
    """No challenge matches the requested filters."""


class TargetProperty(str, Enum):
    AREA = "area"
    PERIMETER = "perimeter"
    CIRCUMFERENCE = "circumference"
    ANGLE = "angle"
    RATIO = "ratio"


MAGNITUDE_TARGETS = (TargetProperty.AREA, TargetProperty.PERIMETER, TargetProperty.CIRCUMFERENCE)


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class Category(str, Enum):
    BASIC = "basic"
    ADVANCED = "advanced"
    CREATIVE = "creative"


class Verdict(str, Enum):
    SUCCESS = "success"
    TOO_BIG = "too_big"
    TOO_SMALL = "too_small"
    IN_PROGRESS = "in_progress"

    @property
    def message(self) -> str:
        return _VERDICT_MESSAGES[self]


_VERDICT_MESSAGES = {
    Verdict.SUCCESS: "Correct! Well done!",
    Verdict.TOO_BIG: "Too big! Make it smaller.",
    Verdict.TOO_SMALL: "Too small! Make it bigger.",
    Verdict.IN_PROGRESS: "Keep going!",
}


@dataclass(frozen=True)
class Challenge:
    id: str
    description: str
    target_property: TargetProperty
    target_value: float
    tolerance: float
    difficulty: Difficulty = Difficulty.EASY
    category: Category = Category.BASIC
    shape_kind: Optional[str] = None    # None = any shape may solve it

    def __post_init__(self):
        object.__setattr__(self, "target_property", TargetProperty(self.target_property))
        object.__setattr__(self, "difficulty", Difficulty(self.difficulty))
        object.__setattr__(self, "category", Category(self.category))
        if self.tolerance < 0:
            raise ValueError(f"tolerance must be non-negative, got {self.tolerance}")


# ---------------------------------------------------------------------------
# Default catalog (values in display units)
# ---------------------------------------------------------------------------

CATALOG_VERSION = "1.0"

CHALLENGE_CATALOG = (
    Challenge("tri-area-150", "Create a triangle with an area of 150 square units",
              "area", 150, 10, "easy", "basic", "triangle"),
    Challenge("rect-perimeter-8", "Make a rectangle with a perimeter of 8 units",
              "perimeter", 8, 0.4, "easy", "basic", "rectangle"),
    Challenge("circle-area-300", "Create a circle with an area of 300 square units",
              "area", 300, 15, "easy", "basic", "circle"),
    Challenge("tri-perimeter-6", "Make a triangle with a perimeter of 6 units",
              "perimeter", 6, 0.3, "medium", "basic", "triangle"),
    Challenge("rect-area-250", "Create a rectangle with an area of 250 square units",
              "area", 250, 12, "medium", "basic", "rectangle"),
    Challenge("circle-circumference-6", "Make a circle with a circumference of 6 units",
              "circumference", 6, 0.2, "medium", "basic", "circle"),
    Challenge("right-triangle", "Make a right triangle",
              "angle", 90, 5, "medium", "advanced", "triangle"),
    Challenge("square", "Turn the rectangle into a square",
              "ratio", 1, 0.1, "medium", "advanced", "rectangle"),
    Challenge("equilateral", "Make all three sides of the triangle equal",
              "ratio", 1, 0.5, "hard", "advanced", "triangle"),
    Challenge("circle-circumference-8.5", "Make a circle with a circumference of exactly 8.5 units",
              "circumference", 8.5, 0.1, "hard", "advanced", "circle"),
    Challenge("golden-rectangle", "Build a golden rectangle (width / height = 1.618)",
              "ratio", 1.618, 0.05, "hard", "creative", "rectangle"),
    Challenge("sliver-triangle", "Make a triangle whose smallest angle is 20 degrees",
              "angle", 20, 2, "hard", "creative", "triangle"),
    Challenge("tiny-triangle", "Squeeze a triangle down to an area of 25 square units",
              "area", 25, 2, "hard", "creative", "triangle"),
)


# ---------------------------------------------------------------------------
# Evaluation
# ---------------------------------------------------------------------------

def effective_tolerance(challenge: Challenge, active_power_up: Optional[str] = None) -> float:
    if active_power_up == "precision" and challenge.target_property in MAGNITUDE_TARGETS:
        return challenge.tolerance * PRECISION_MULTIPLIER
    return challenge.tolerance


def _kind_matches(shape, challenge) -> bool:
    return challenge.shape_kind is None or shape.kind.value == challenge.shape_kind


def evaluate(shape, challenge: Challenge, active_power_up: Optional[str] = None) -> Verdict:
    """Judge *shape* against *challenge*.  Always returns a ``Verdict``."""
    if not _kind_matches(shape, challenge):
        return Verdict.IN_PROGRESS
    props = derive_properties(shape)
    target = challenge.target_value
    prop = challenge.target_property

    if prop in MAGNITUDE_TARGETS:
        current = property_value(props, prop.value)
        if current is None:
            return Verdict.IN_PROGRESS
        if abs(current - target) <= effective_tolerance(challenge, active_power_up):
            return Verdict.SUCCESS
        return Verdict.TOO_BIG if current > target else Verdict.TOO_SMALL

    if prop is TargetProperty.ANGLE:
        if props.angles is None:
            return Verdict.IN_PROGRESS
        if target == 90:
            passed = props.is_right_triangle
        else:
            passed = abs(min(props.angles) - target) <= challenge.tolerance
        return Verdict.SUCCESS if passed else Verdict.IN_PROGRESS

    if prop is TargetProperty.RATIO:
        if props.ratio is not None:
            if target == 1:
                passed = props.is_square
            else:
                passed = abs(props.ratio - target) <= challenge.tolerance
        elif props.sides is not None and target == 1:
            passed = props.is_equilateral
        else:
            passed = False
        return Verdict.SUCCESS if passed else Verdict.IN_PROGRESS

    return Verdict.IN_PROGRESS


def hint(shape, challenge: Challenge) -> str:
    """Text shown by the hint power-up."""
    if not _kind_matches(shape, challenge):
        return f"This challenge needs a {challenge.shape_kind}."
    props = derive_properties(shape)
    prop = challenge.target_property
    target = challenge.target_value

    if prop in MAGNITUDE_TARGETS:
        current = property_value(props, prop.value)
        if current is None:
            return f"A {props.kind} has no {prop.value}; try another shape."
        gap = target - current
        if abs(gap) <= challenge.tolerance:
            return f"{prop.value.capitalize()} is {current:.1f}. You are there!"
        direction = "increase" if gap > 0 else "decrease"
        return f"{prop.value.capitalize()} is {current:.1f}; {direction} it by about {abs(gap):.1f}."

    if prop is TargetProperty.ANGLE and props.angles is not None:
        if target == 90:
            closest = min(props.angles, key=lambda a: abs(a - 90))
            return f"Drag a vertex until one angle reaches 90 degrees (closest now {closest:.1f})."
        return f"Make the smallest angle {target:g} degrees (now {min(props.angles):.1f})."

    if prop is TargetProperty.RATIO:
        if props.ratio is not None:
            if target == 1:
                return f"Make the width and height equal (ratio now {props.ratio:.2f})."
            return f"Aim for a width / height ratio of {target:g} (now {props.ratio:.2f})."
        if props.sides is not None:
            sides = ", ".join(f"{s:.2f}" for s in props.sides)
            return f"Make all three sides the same length (now {sides})."

    return challenge.description


# ---------------------------------------------------------------------------
# Engine
# ---------------------------------------------------------------------------

class ChallengeEngine:
    """Read-only catalog plus random selection."""

    def __init__(self, catalog: Sequence[Challenge] = CHALLENGE_CATALOG, rng=None):
        self.catalog = tuple(catalog)
        self.rng = rng or np.random.default_rng()

    def candidates(self, difficulty=None, category=None):
        difficulty = Difficulty(difficulty) if difficulty is not None else None
        category = Category(category) if category is not None else None
        return [
            c for c in self.catalog
            if (difficulty is None or c.difficulty is difficulty)
            and (category is None or c.category is category)
        ]

    def select_challenge(self, difficulty=None, category=None) -> Challenge:
        pool = self.candidates(difficulty, category)
        if not pool:
            raise EmptyCatalogError(
                f"no challenge for difficulty={difficulty!r}, category={category!r}"
            )
        challenge = pool[int(self.rng.integers(len(pool)))]
        logger.debug("selected challenge %s from %d candidates", challenge.id, len(pool))
        return challenge

    def get(self, challenge_id: str) -> Challenge:
        for c in self.catalog:
            if c.id == challenge_id:
                return c
        raise KeyError(challenge_id)

    def evaluate(self, shape, challenge, active_power_up=None) -> Verdict:
        return evaluate(shape, challenge, active_power_up)

    def hint(self, shape, challenge) -> str:
        return hint(shape, challenge)
