"""
Domain models for logged workouts and the analytics derived from them.

These mirror the rows the workout backend stores (exercises, sessions,
sets, profiles). They carry no persistence logic; the backend
implementation translates to and from whatever it stores.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from ..knowledge.models import FitnessLevel, Goal, GymType


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(value: datetime) -> datetime:
    """Timestamps are compared in aware UTC; naive values are taken to be UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


class OverviewRange(Enum):
    """Time window for overview and balance statistics."""
    WEEK = "week"
    MONTH = "month"
    YEAR = "year"


@dataclass
class Exercise:
    """An entry in the exercise library."""
    id: UUID = field(default_factory=uuid4)
    name: str = ""
    muscle_group: str = ""
    workout_type: str = ""
    equipment: list[str] = field(default_factory=list)
    difficulty: FitnessLevel = FitnessLevel.BEGINNER
    is_compound: bool = False
    description: str = ""
    form_cues: list[str] = field(default_factory=list)


@dataclass
class WorkoutSession:
    """One training session. Incomplete until completed_at is set."""
    id: UUID = field(default_factory=uuid4)
    user_id: UUID = field(default_factory=uuid4)
    workout_type: str = ""
    started_at: datetime = field(default_factory=utc_now)
    completed_at: Optional[datetime] = None
    notes: Optional[str] = None

    @property
    def is_completed(self) -> bool:
        return self.completed_at is not None


@dataclass
class ExerciseSet:
    """A single logged set."""
    id: UUID = field(default_factory=uuid4)
    session_id: UUID = field(default_factory=uuid4)
    exercise_id: UUID = field(default_factory=uuid4)
    set_number: int = 1
    reps: int = 0
    weight: float = 0.0
    rpe: Optional[int] = None
    rest_seconds: Optional[int] = None
    completed_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.reps < 0:
            raise ValueError("Reps cannot be negative")
        if self.weight < 0:
            raise ValueError("Weight cannot be negative")


@dataclass
class UserProfile:
    """The parts of a user's profile that session planning reads."""
    id: UUID = field(default_factory=uuid4)
    fitness_level: FitnessLevel = FitnessLevel.BEGINNER
    primary_goal: Goal = Goal.MAINTAIN
    workout_frequency: int = 3
    gym_type: GymType = GymType.COMMERCIAL
    injuries_limitations: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class MuscleVolumeData:
    """Sets done this week for a muscle group against its weekly target."""
    muscle_group: str
    sets: int
    target_min: int
    target_max: int

    @property
    def status(self) -> str:
        if self.sets < self.target_min:
            return "below"
        if self.sets > self.target_max:
            return "above"
        return "within"


@dataclass(frozen=True)
class SplitBalanceData:
    """How often a push/pull/legs category was trained versus recommended."""
    category: str
    muscle_groups: tuple[str, ...]
    workout_count: int
    recommended_count: int


@dataclass(frozen=True)
class OverviewStats:
    """Headline numbers for the analytics overview."""
    total_workouts: int
    total_sets: int
    current_streak: int
    personal_records: int
    average_strength_increase: float
