"""shapeplay - interactive geometry playground engine: shapes, drag handles, challenges, progression."""

from shapeplay.challenges import Challenge, ChallengeEngine, EmptyCatalogError, Verdict
from shapeplay.drag import DragController, Handle, HandleKind
from shapeplay.geometry import DerivedProperties, derive_properties
from shapeplay.progression import ProgressionState, ProgressionTracker, ScoreResult
from shapeplay.session import PlaygroundSession
from shapeplay.shapes import Circle, Point, Rectangle, ShapeKind, Triangle, create_shape
