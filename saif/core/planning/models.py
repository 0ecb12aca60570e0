"""
Domain models for generated session plans.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from ..analytics.models import utc_now


class IntensityTechnique(Enum):
    DROP_SETS = "Drop Sets"
    REST_PAUSE = "Rest-Pause"
    SUPERSETS = "Supersets"


@dataclass(frozen=True)
class MuscleVolumeTarget:
    """How many sets a muscle group should get today, given the week so far."""
    muscle_group: str
    target_sets_today: int
    weekly_target: int
    completed_this_week: int
    reasoning: str


@dataclass(frozen=True)
class PlannedExercise:
    exercise_name: str
    muscle_group: str
    order_index: int
    is_compound: bool
    target_sets: int
    target_reps_min: int
    target_reps_max: int
    rest_seconds: int
    rationale: str
    intensity_technique: Optional[IntensityTechnique] = None
    safety_modification: Optional[str] = None


@dataclass
class SessionPlan:
    """A generated workout: ordered exercises plus the targets behind them."""
    user_id: UUID
    workout_type: str
    muscle_groups: list[str]
    exercises: list[PlannedExercise]
    volume_targets: list[MuscleVolumeTarget]
    safety_notes: list[str]
    estimated_duration: int  # minutes
    session_id: UUID = field(default_factory=uuid4)
    id: UUID = field(default_factory=uuid4)
    generated_at: datetime = field(default_factory=utc_now)
