"""
Training knowledge lookup service.

Gives typed access to the bundled exercise and volume knowledge base.
The service is constructed explicitly by the application's composition
root (see saif.main) and initialized once; after that it only serves
reads.

If the dataset can't be read or doesn't match the schema, the service
switches to fallback mode: structured lookups return nothing and callers
use the static guidance in fallback.py instead. Load failures are logged
and surfaced through `is_using_fallback`, never raised to callers.
"""

import logging
import threading
from dataclasses import dataclass
from typing import Any, Optional, Protocol

from .fallback import fallback_text
from .models import (
    ExerciseDetail,
    ExerciseOrderingResearch,
    ExerciseSubstitution,
    ExerciseType,
    FitnessLevel,
    GeneralPrinciples,
    Goal,
    GymType,
    MuscleGroupExercises,
    TrainingKnowledge,
    VolumeLandmarks,
)
from .schema import KnowledgeSchemaError, parse_training_knowledge

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class KnowledgeLoadError(Exception):
    """Raised by a loader when the knowledge document can't be read."""
    pass


class KnowledgeLoader(Protocol):
    """
    Anything that can produce the decoded knowledge document.

    The service doesn't care whether the document comes from a packaged
    file, a test fixture or an inline dict.
    """

    def __call__(self) -> Any:
        """Return the decoded JSON document or raise KnowledgeLoadError."""
        ...


# ---------------------------------------------------------------------------
# Lookup tables
# ---------------------------------------------------------------------------

MUSCLE_GROUP_ALIASES = {
    "chest": "chest",
    "pecs": "chest",
    "pectorals": "chest",
    "back": "back",
    "lats": "back",
    "traps": "back",
    "shoulders": "shoulders",
    "delts": "shoulders",
    "deltoids": "shoulders",
    "quads": "quads",
    "legs": "quads",
    "quadriceps": "quads",
    "thighs": "quads",
}

HOME_EQUIPMENT = ("barbell", "dumbbell", "bench", "bodyweight", "band", "kettlebell")
MINIMAL_EQUIPMENT = ("bodyweight", "band", "dumbbell")
MINIMAL_EXCLUDED_EQUIPMENT = ("machine", "cable")


def _normalize_name(name: str) -> str:
    return " ".join(name.split()).casefold()


@dataclass(frozen=True)
class _LoadedState:
    """Published in a single assignment so readers never see half a load."""
    knowledge: Optional[TrainingKnowledge]
    using_fallback: bool


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------

class TrainingKnowledgeService:
    """
    Read-only access to the training knowledge base.

    Loading happens at most once per instance. Concurrent callers that
    arrive before the load finishes block on the lock and then see the
    fully loaded (or fully fallback) state.
    """

    def __init__(self, loader: KnowledgeLoader) -> None:
        self._loader = loader
        self._lock = threading.Lock()
        self._state: Optional[_LoadedState] = None

    # -- Loading ----------------------------------------------------------

    def initialize(self) -> None:
        """Load the dataset if that hasn't happened yet."""
        if self._state is not None:
            return

        with self._lock:
            if self._state is not None:
                return
            self._state = self._load()

    def _load(self) -> _LoadedState:
        try:
            document = self._loader()
            knowledge = parse_training_knowledge(document)
        except KnowledgeLoadError as e:
            logger.warning(
                "Knowledge dataset unavailable, using fallback",
                extra={"error": str(e)}
            )
            return _LoadedState(knowledge=None, using_fallback=True)
        except KnowledgeSchemaError as e:
            logger.error(
                "Knowledge dataset does not match schema, using fallback",
                extra={"error": str(e), "path": e.path}
            )
            return _LoadedState(knowledge=None, using_fallback=True)

        logger.info(
            "Loaded training knowledge",
            extra={
                "schema_version": knowledge.schema_version,
                "muscle_groups": list(knowledge.muscle_groups),
                "volume_groups": list(knowledge.volume_guidelines),
            }
        )
        return _LoadedState(knowledge=knowledge, using_fallback=False)

    def _knowledge(self) -> Optional[TrainingKnowledge]:
        self.initialize()
        return self._state.knowledge

    @property
    def is_loaded(self) -> bool:
        return self._state is not None

    @property
    def is_using_fallback(self) -> bool:
        self.initialize()
        return self._state.using_fallback

    @property
    def schema_version(self) -> Optional[str]:
        knowledge = self._knowledge()
        return knowledge.schema_version if knowledge else None

    # -- Queries ------------------------------------------------------------

    def muscle_groups(self) -> list[str]:
        knowledge = self._knowledge()
        return list(knowledge.muscle_groups) if knowledge else []

    def find_exercise(self, name: str) -> Optional[ExerciseDetail]:
        """
        Look up an exercise by name across every muscle group.

        Matching ignores case and repeated whitespace but is otherwise
        exact: "bench press" does not find "Barbell Bench Press".
        """
        knowledge = self._knowledge()
        if knowledge is None:
            return None

        wanted = _normalize_name(name)
        if not wanted:
            return None

        for exercise in knowledge.iter_exercises():
            if _normalize_name(exercise.name) == wanted:
                return exercise
        return None

    def get_exercises(
        self,
        muscle_group: str,
        exercise_type: ExerciseType = ExerciseType.ALL,
    ) -> list[ExerciseDetail]:
        group = self._muscle_group_exercises(muscle_group)
        if group is None:
            return []

        if exercise_type == ExerciseType.COMPOUND:
            return list(group.top_compound_exercises)
        if exercise_type == ExerciseType.ACCESSORY:
            return list(group.top_accessory_exercises)
        return group.all_exercises

    def get_exercises_ranked(self, muscle_group: str, goal: Goal) -> list[ExerciseDetail]:
        """Exercises for a group, best fit for the goal first."""
        return sorted(
            self.get_exercises(muscle_group),
            key=lambda exercise: self.effectiveness_score(exercise, goal),
            reverse=True,
        )

    def get_exercises_for_gym(self, muscle_group: str, gym_type: GymType) -> list[ExerciseDetail]:
        return [
            exercise for exercise in self.get_exercises(muscle_group)
            if self.is_equipment_available(exercise, gym_type)
        ]

    def get_substitutions(self, muscle_group: str) -> list[ExerciseSubstitution]:
        group = self._muscle_group_exercises(muscle_group)
        return list(group.exercise_substitutions) if group else []

    def get_ordering_principles(self) -> Optional[ExerciseOrderingResearch]:
        knowledge = self._knowledge()
        return knowledge.exercise_ordering_research if knowledge else None

    def get_general_principles(self) -> Optional[GeneralPrinciples]:
        knowledge = self._knowledge()
        return knowledge.general_principles if knowledge else None

    def get_volume_landmarks(
        self,
        muscle_group: str,
        goal: Goal,
        level: FitnessLevel,
    ) -> Optional[VolumeLandmarks]:
        knowledge = self._knowledge()
        if knowledge is None:
            return None

        volume = knowledge.volume_guidelines.get(self.normalize_muscle_group(muscle_group))
        if volume is None:
            return None
        return volume.for_goal(goal).for_level(level)

    def fallback_text(self) -> str:
        """Static guidance; available whether or not the dataset loaded."""
        return fallback_text()

    # -- Helpers --------------------------------------------------------------

    def _muscle_group_exercises(self, muscle_group: str) -> Optional[MuscleGroupExercises]:
        knowledge = self._knowledge()
        if knowledge is None:
            return None
        return knowledge.muscle_groups.get(self.normalize_muscle_group(muscle_group))

    @staticmethod
    def normalize_muscle_group(group: str) -> str:
        """Map common aliases ("pecs", "lats", "legs") to dataset group keys."""
        cleaned = group.strip().lower().replace("_", " ")
        return MUSCLE_GROUP_ALIASES.get(cleaned, cleaned)

    @staticmethod
    def effectiveness_score(exercise: ExerciseDetail, goal: Goal) -> int:
        """
        Score an exercise for a goal.

        Bulking cares about hypertrophy; cutting weights hypertrophy 2:1
        over power; maintenance averages strength and hypertrophy.
        """
        effectiveness = exercise.effectiveness
        if goal == Goal.BULK:
            return effectiveness.hypertrophy_score
        if goal == Goal.CUT:
            return (effectiveness.hypertrophy_score * 2 + effectiveness.power_score) // 3
        return (effectiveness.strength_score + effectiveness.hypertrophy_score) // 2

    @staticmethod
    def is_equipment_available(exercise: ExerciseDetail, gym_type: GymType) -> bool:
        equipment = exercise.equipment.lower()

        if gym_type == GymType.COMMERCIAL:
            return True
        if gym_type == GymType.HOME:
            return any(item in equipment for item in HOME_EQUIPMENT)
        return (
            any(item in equipment for item in MINIMAL_EQUIPMENT)
            and not any(item in equipment for item in MINIMAL_EXCLUDED_EQUIPMENT)
        )
