"""
Global configuration: canvas presets, geometry thresholds, scoring tables,
power-up and achievement registries.

Every threshold here is a tuning constant rather than a derived value.  The
engine reads them through a ``CanvasPreset`` (for anything bounds-related)
or directly from this module (for scoring), so a host can swap presets
without touching engine code.
"""

from dataclasses import dataclass

# ---------------------------------------------------------------------------
# Display scale
# ---------------------------------------------------------------------------

SCALE_FACTOR = 0.01     # pixel-space -> human-sized units for every metric

# ---------------------------------------------------------------------------
# Canvas & handles
# ---------------------------------------------------------------------------

CANVAS_WIDTH = 600
CANVAS_HEIGHT = 400
CANVAS_MARGIN = 10      # clamp margin on all sides

HANDLE_HIT_RADIUS = 15  # pointer must land within this many px of a handle
VERTEX_HANDLE_SIZE = 8  # rendered radius of vertex / radius dots
CENTER_HANDLE_SIZE = 6

MIN_RADIUS = 20
MAX_RADIUS = 150        # absolute ceiling; canvas clearance may lower it

# ---------------------------------------------------------------------------
# Shape classification thresholds
# ---------------------------------------------------------------------------

RIGHT_ANGLE_TOLERANCE = 5.0     # degrees from 90
EQUILATERAL_TOLERANCE = 0.5     # scaled units between any two sides
SQUARE_RATIO_TOLERANCE = 0.1    # |width / height - 1|

# ---------------------------------------------------------------------------
# History
# ---------------------------------------------------------------------------

HISTORY_CAPACITY = 5

# ---------------------------------------------------------------------------
# Scoring
# ---------------------------------------------------------------------------

DIFFICULTY_POINTS = {"easy": 75, "medium": 100, "hard": 150}
STREAK_BONUS = 10                       # per streak step
TIME_BONUS_TIERS = ((30, 50), (60, 25))  # (elapsed below, bonus)
SPEED_DEMON_SECONDS = 10
ACHIEVEMENT_POINTS = 50
XP_PER_LEVEL = 100                      # xp_to_next_level = level * XP_PER_LEVEL

# ---------------------------------------------------------------------------
# Power-up registry
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PowerUpSpec:
    kind: str
    display_name: str
    duration: float     # seconds active after use


POWER_UPS = [
    PowerUpSpec("hint", "Hint", 10.0),
    PowerUpSpec("precision", "Precision", 10.0),
    PowerUpSpec("timeFreeze", "Time Freeze", 10.0),
    PowerUpSpec("doublePoints", "2x Points", 30.0),
]

POWER_UP_MAP = {spec.kind: spec for spec in POWER_UPS}
STARTING_POWER_UPS = {spec.kind: 1 for spec in POWER_UPS}

# ---------------------------------------------------------------------------
# Achievement registry (display order)
# ---------------------------------------------------------------------------

ACHIEVEMENTS = [
    "First Success",
    "Speed Demon",
    "Perfectionist",
    "Explorer",
    "Master",
    "Streak Master",
    "Rising Star",
    "Triangle Expert",
    "Rectangle Pro",
    "Circle Specialist",
]

SPECIALIST_ACHIEVEMENTS = {
    "triangle": "Triangle Expert",
    "rectangle": "Rectangle Pro",
    "circle": "Circle Specialist",
}
SPECIALIST_THRESHOLD = 5

# ---------------------------------------------------------------------------
# Canvas presets
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class CanvasPreset:
    name: str
    width: int
    height: int
    margin: int = CANVAS_MARGIN
    hit_radius: float = HANDLE_HIT_RADIUS
    min_radius: float = MIN_RADIUS
    max_radius: float = MAX_RADIUS


PRESET_STANDARD = CanvasPreset(
    name="standard",
    width=CANVAS_WIDTH,
    height=CANVAS_HEIGHT,
)

PRESET_COMPACT = CanvasPreset(
    name="compact",
    width=400,
    height=300,
    margin=12,
    hit_radius=12,
    min_radius=25,
    max_radius=120,
)

CANVAS_PRESETS = {"standard": PRESET_STANDARD, "compact": PRESET_COMPACT}
