"""
Domain models for the training knowledge base.

The knowledge base is reference data: it is read once from the bundled
dataset and never mutated afterwards, so every model here is frozen.
Derived values (scores, safety levels, numeric ranges) are computed from
the free text on access and always fall back to a fixed default instead
of failing.
"""

import re
from dataclasses import dataclass, field
from enum import Enum
from typing import Optional


class Goal(Enum):
    """The user's primary training goal."""
    BULK = "bulk"
    CUT = "cut"
    MAINTAIN = "maintain"


class FitnessLevel(Enum):
    """Training experience level."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class GymType(Enum):
    """What equipment the user has access to."""
    COMMERCIAL = "commercial"
    HOME = "home"
    MINIMAL = "minimal"


class ExerciseType(Enum):
    """Which exercise list to read from a muscle group."""
    COMPOUND = "compound"
    ACCESSORY = "accessory"
    ALL = "all"


class SafetyLevel(Enum):
    """Three-level classification of an exercise's injury risk."""
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


COMPOUND_KEYWORDS = (
    "squat", "press", "deadlift", "row", "pull-up",
    "chin-up", "dip", "lunge", "clean",
)

DEFAULT_SETS_PER_WEEK = (12, 18)
DEFAULT_EXERCISE_COUNT = 3

_INTEGER = re.compile(r"\d+")


def parse_range(text: str) -> Optional[tuple[int, int]]:
    """
    Pull the first two integers out of free text.

    "12-18 sets/week" -> (12, 18). Returns None when the text holds fewer
    than two integers or the pair is inverted.
    """
    numbers = [int(match) for match in _INTEGER.findall(text)]
    if len(numbers) < 2:
        return None
    low, high = numbers[0], numbers[1]
    if low > high:
        return None
    return low, high


def effectiveness_rating(text: str) -> int:
    """Map effectiveness text to an ordinal score from 1 to 4."""
    lowered = text.lower()
    if "very high" in lowered:
        return 4
    if "high" in lowered:
        return 3
    if "medium" in lowered:
        return 2
    return 1


@dataclass(frozen=True)
class Effectiveness:
    """How well an exercise serves each training quality."""
    hypertrophy: str
    strength: str
    power: str

    @property
    def hypertrophy_score(self) -> int:
        return effectiveness_rating(self.hypertrophy)

    @property
    def strength_score(self) -> int:
        return effectiveness_rating(self.strength)

    @property
    def power_score(self) -> int:
        return effectiveness_rating(self.power)


@dataclass(frozen=True)
class ExerciseDetail:
    """
    Research summary for a single exercise.

    The name is the identity: two details with the same name describe
    the same exercise.
    """
    name: str
    emg_activation: str
    effectiveness: Effectiveness
    injury_risk: str
    equipment: str
    prerequisites: str
    progression_path: str
    when_to_prioritize: Optional[str] = None

    @property
    def id(self) -> str:
        return self.name

    @property
    def is_compound(self) -> bool:
        """Multi-joint movement, judged by keywords in the name."""
        lowered = self.name.lower()
        return any(keyword in lowered for keyword in COMPOUND_KEYWORDS)

    @property
    def safety_level(self) -> SafetyLevel:
        risk = self.injury_risk.strip().lower()
        if "very low" in risk or risk == "low":
            return SafetyLevel.LOW
        if "low/medium" in risk or "medium" in risk:
            return SafetyLevel.MEDIUM
        return SafetyLevel.HIGH


@dataclass(frozen=True)
class ExerciseSubstitution:
    """A replacement exercise for a specific scenario (injury, equipment...)."""
    scenario: str
    substitute: str
    notes: str

    @property
    def id(self) -> str:
        return self.scenario


@dataclass(frozen=True)
class MuscleGroupExercises:
    """Ranked exercise lists and substitutions for one muscle group."""
    top_compound_exercises: tuple[ExerciseDetail, ...] = ()
    top_accessory_exercises: tuple[ExerciseDetail, ...] = ()
    exercise_substitutions: tuple[ExerciseSubstitution, ...] = ()

    @property
    def all_exercises(self) -> list[ExerciseDetail]:
        return list(self.top_compound_exercises) + list(self.top_accessory_exercises)


@dataclass(frozen=True)
class ExerciseOrderingResearch:
    """Research on how to order exercises within a session."""
    optimal_sequence: str
    fatigue_management: str
    compound_vs_isolation_timing: str


@dataclass(frozen=True)
class VolumeLandmarks:
    """
    Volume landmarks for one muscle group, goal and experience level.

    MV/MEV/MAV/MRV follow the maintenance / minimum effective / maximum
    adaptive / maximum recoverable volume framework. All values are the
    research text as written; numeric views are parsed on access.
    """
    mv: str
    mev: str
    mav: str
    mrv: str
    sets_per_session_range: str
    exercises_per_session: str
    frequency_recommendation: str
    rest_between_sets: str
    rep_range: str
    intensity_guidance: str
    progression_rate: str
    recovery_notes: str
    sources: tuple[str, ...] = ()
    notes: str = ""

    @property
    def sets_per_week_range(self) -> tuple[int, int]:
        """Weekly set target taken from the MAV text, e.g. (12, 18)."""
        return parse_range(self.mav) or DEFAULT_SETS_PER_WEEK

    @property
    def exercise_count(self) -> int:
        """Midpoint of the exercises-per-session range ("3-4 exercises" -> 3)."""
        parsed = parse_range(self.exercises_per_session)
        if parsed is None:
            return DEFAULT_EXERCISE_COUNT
        return (parsed[0] + parsed[1]) // 2


@dataclass(frozen=True)
class GoalVolume:
    """Landmarks per experience level for one goal."""
    beginner: VolumeLandmarks
    intermediate: VolumeLandmarks
    advanced: VolumeLandmarks

    def for_level(self, level: FitnessLevel) -> VolumeLandmarks:
        return getattr(self, level.value)


@dataclass(frozen=True)
class MuscleGroupVolume:
    """Landmarks per goal for one muscle group."""
    bulk: GoalVolume
    cut: GoalVolume
    maintain: GoalVolume

    def for_goal(self, goal: Goal) -> GoalVolume:
        return getattr(self, goal.value)


@dataclass(frozen=True)
class GeneralPrinciples:
    """Cross-cutting volume principles."""
    volume_progression: str
    deload_frequency: str
    individual_variation: str


@dataclass(frozen=True)
class TrainingKnowledge:
    """
    The whole knowledge base.

    This is the aggregate root: the service holds exactly one of these
    (or none, in fallback mode) and hands out its parts.
    """
    schema_version: str
    muscle_groups: dict[str, MuscleGroupExercises]
    exercise_ordering_research: ExerciseOrderingResearch
    volume_guidelines: dict[str, MuscleGroupVolume] = field(default_factory=dict)
    general_principles: Optional[GeneralPrinciples] = None

    def iter_exercises(self):
        """Every exercise, group by group, compound before accessory."""
        for group in self.muscle_groups.values():
            yield from group.all_exercises
