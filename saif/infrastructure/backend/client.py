"""
Workout backend clients.

The production app stores sessions, sets and the exercise library in a
hosted Postgres backend. This service only needs to read them, through
the WorkoutBackend protocol in core.analytics. The in-memory backend here
implements that protocol for local development and tests, optionally
seeded from a JSON fixture.
"""

import json
import logging
from dataclasses import replace
from datetime import datetime
from pathlib import Path
from typing import Any, Optional, Union
from uuid import UUID

from ...core.analytics.models import Exercise, ExerciseSet, WorkoutSession, as_utc
from ...core.analytics.service import WorkoutBackend
from ...core.knowledge.models import FitnessLevel

logger = logging.getLogger(__name__)


class BackendConfigurationError(Exception):
    """Raised when the workout backend can't be created from configuration."""
    pass


class InMemoryWorkoutBackend:
    """
    In-memory implementation of WorkoutBackend.

    All methods are async to match the protocol even though nothing here
    awaits. Data lives for the lifetime of the instance. Timestamps are
    stored as aware UTC, whatever form they arrive in.
    """

    def __init__(self) -> None:
        self._exercises: dict[UUID, Exercise] = {}
        self._sessions: dict[UUID, WorkoutSession] = {}
        self._sets: dict[UUID, ExerciseSet] = {}

        logger.info("Initialized in-memory workout backend")

    # -- Writes (used by fixtures and tests) ------------------------------

    def add_exercise(self, exercise: Exercise) -> Exercise:
        self._exercises[exercise.id] = exercise
        return exercise

    def add_session(self, session: WorkoutSession) -> WorkoutSession:
        session = replace(
            session,
            started_at=as_utc(session.started_at),
            completed_at=as_utc(session.completed_at) if session.completed_at else None,
        )
        self._sessions[session.id] = session
        return session

    def add_set(self, exercise_set: ExerciseSet) -> ExerciseSet:
        if exercise_set.session_id not in self._sessions:
            raise KeyError(f"Unknown session: {exercise_set.session_id}")
        exercise_set = replace(exercise_set, completed_at=as_utc(exercise_set.completed_at))
        self._sets[exercise_set.id] = exercise_set
        return exercise_set

    # -- Reads (WorkoutBackend) -------------------------------------------

    async def get_workout_sessions(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
    ) -> list[WorkoutSession]:
        sessions = [
            session for session in self._sessions.values()
            if session.user_id == user_id and as_utc(start) <= session.started_at <= as_utc(end)
        ]
        return sorted(sessions, key=lambda s: s.started_at, reverse=True)

    async def get_exercise_sets_for_session(self, session_id: UUID) -> list[ExerciseSet]:
        sets = [s for s in self._sets.values() if s.session_id == session_id]
        return sorted(sets, key=lambda s: s.completed_at)

    async def get_exercise_sets_for_sessions(self, session_ids: list[UUID]) -> list[ExerciseSet]:
        if not session_ids:
            return []
        wanted = set(session_ids)
        sets = [s for s in self._sets.values() if s.session_id in wanted]
        return sorted(sets, key=lambda s: s.completed_at)

    async def get_exercises_by_ids(self, exercise_ids: list[UUID]) -> list[Exercise]:
        return [self._exercises[i] for i in exercise_ids if i in self._exercises]

    # -- Fixtures -----------------------------------------------------------

    def load_fixture(self, document: dict[str, Any]) -> None:
        """
        Seed the backend from a decoded fixture document.

        The document uses the backend's column names:
        {"exercises": [...], "workout_sessions": [...], "exercise_sets": [...]}
        """
        if not isinstance(document, dict):
            raise TypeError(f"Fixture root must be an object, got {type(document).__name__}")

        for row in document.get("exercises", []):
            self.add_exercise(_exercise_from_row(row))
        for row in document.get("workout_sessions", []):
            self.add_session(_session_from_row(row))
        for row in document.get("exercise_sets", []):
            self.add_set(_set_from_row(row))

        logger.info(
            "Loaded workout fixture",
            extra={
                "exercises": len(self._exercises),
                "sessions": len(self._sessions),
                "sets": len(self._sets),
            }
        )


# ---------------------------------------------------------------------------
# Row Mapping
# ---------------------------------------------------------------------------

def _parse_datetime(value: Optional[str]) -> Optional[datetime]:
    if value is None:
        return None
    # fromisoformat only accepts a trailing "Z" from Python 3.11
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(value))


def _exercise_from_row(row: dict[str, Any]) -> Exercise:
    return Exercise(
        id=UUID(row["id"]),
        name=row["name"],
        muscle_group=row["muscle_group"],
        workout_type=row.get("workout_type", ""),
        equipment=list(row.get("equipment", [])),
        difficulty=FitnessLevel(row.get("difficulty", "beginner")),
        is_compound=bool(row.get("is_compound", False)),
        description=row.get("description", ""),
        form_cues=list(row.get("form_cues", [])),
    )


def _session_from_row(row: dict[str, Any]) -> WorkoutSession:
    return WorkoutSession(
        id=UUID(row["id"]),
        user_id=UUID(row["user_id"]),
        workout_type=row["workout_type"],
        started_at=_parse_datetime(row["started_at"]),
        completed_at=_parse_datetime(row.get("completed_at")),
        notes=row.get("notes"),
    )


def _set_from_row(row: dict[str, Any]) -> ExerciseSet:
    return ExerciseSet(
        id=UUID(row["id"]),
        session_id=UUID(row["session_id"]),
        exercise_id=UUID(row["exercise_id"]),
        set_number=int(row["set_number"]),
        reps=int(row["reps"]),
        weight=float(row["weight"]),
        rpe=row.get("rpe"),
        rest_seconds=row.get("rest_seconds"),
        completed_at=_parse_datetime(row["completed_at"]),
    )


# ---------------------------------------------------------------------------
# Factory Function
# ---------------------------------------------------------------------------

def create_workout_backend(
    mock_mode: bool = True,
    fixture_path: Optional[Union[str, Path]] = None,
) -> WorkoutBackend:
    """
    Create the workout backend based on configuration.

    Args:
        mock_mode: Must be True; only the in-memory backend is available
        fixture_path: Optional JSON fixture to seed the in-memory backend

    Raises:
        BackendConfigurationError: if mock mode is off or the fixture
            can't be read
    """
    if not mock_mode:
        raise BackendConfigurationError(
            "Only the in-memory workout backend is available; set BACKEND_MOCK_MODE=true"
        )

    backend = InMemoryWorkoutBackend()

    if fixture_path:
        try:
            with open(fixture_path, "r", encoding="utf-8") as f:
                document = json.load(f)
        except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise BackendConfigurationError(f"Could not load fixture {fixture_path}: {e}")

        try:
            backend.load_fixture(document)
        except (KeyError, TypeError, ValueError) as e:
            raise BackendConfigurationError(f"Malformed fixture {fixture_path}: {e}")

    return backend
