"""
Workout analytics over logged sessions.

Turns raw sessions and sets from the workout backend into the numbers the
app shows: weekly volume per muscle group against research targets,
push/pull/legs balance, and overview stats (streak, PRs, strength trend).

The backend is an opaque collaborator behind the WorkoutBackend protocol,
so this module works the same against the in-memory backend and a real
one.
"""

import logging
import math
from collections import defaultdict
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional, Protocol
from uuid import UUID

from ..knowledge.models import FitnessLevel, Goal
from ..knowledge.service import TrainingKnowledgeService
from .models import (
    Exercise,
    ExerciseSet,
    MuscleVolumeData,
    OverviewRange,
    OverviewStats,
    SplitBalanceData,
    WorkoutSession,
    as_utc,
    utc_now,
)

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Protocols (interfaces)
# ---------------------------------------------------------------------------

class WorkoutBackend(Protocol):
    """
    Interface for the backend that stores logged workouts.

    Only the read operations analytics needs are listed here.
    """

    async def get_workout_sessions(
        self,
        user_id: UUID,
        start: datetime,
        end: datetime,
    ) -> list[WorkoutSession]:
        """Sessions started within [start, end], newest first."""
        ...

    async def get_exercise_sets_for_session(self, session_id: UUID) -> list[ExerciseSet]:
        """Sets of one session in the order they were completed."""
        ...

    async def get_exercise_sets_for_sessions(self, session_ids: list[UUID]) -> list[ExerciseSet]:
        """Sets of many sessions in one round trip."""
        ...

    async def get_exercises_by_ids(self, exercise_ids: list[UUID]) -> list[Exercise]:
        """Library entries for the given exercise IDs. Unknown IDs are skipped."""
        ...


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

TRACKED_MUSCLE_GROUPS = (
    "chest", "back", "shoulders", "quads", "hamstrings",
    "glutes", "biceps", "triceps", "calves", "core",
)

DEFAULT_WEEKLY_TARGET = (10, 20)

RANGE_DAYS = {
    OverviewRange.WEEK: 7,
    OverviewRange.MONTH: 30,
    OverviewRange.YEAR: 365,
}

SPLIT_CATEGORIES = (
    ("push", "Push (Chest/Shoulders/Triceps)", ("chest", "shoulders", "triceps"),
     ("push", "chest", "shoulder")),
    ("pull", "Pull (Back/Biceps)", ("back", "biceps"),
     ("pull", "back", "bicep")),
    ("legs", "Legs (Quads/Hams/Glutes)", ("quads", "hamstrings", "glutes"),
     ("leg", "quad", "ham", "glute", "lower")),
)


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------

def estimated_one_rep_max(exercise_set: ExerciseSet) -> float:
    """Epley estimate. Zero-rep sets count as singles."""
    return exercise_set.weight * (1.0 + max(exercise_set.reps, 1) / 30.0)


def range_start(range_: OverviewRange, now: datetime) -> datetime:
    return now - timedelta(days=RANGE_DAYS[range_])


def group_sets_by_muscle(
    sets: Iterable[ExerciseSet],
    exercises: dict[UUID, Exercise],
    normalize: Callable[[str], str],
) -> dict[str, int]:
    """Count sets per normalized muscle group. Sets for unknown exercises are dropped."""
    volume: dict[str, int] = defaultdict(int)
    for exercise_set in sets:
        exercise = exercises.get(exercise_set.exercise_id)
        if exercise is None:
            continue
        volume[normalize(exercise.muscle_group)] += 1
    return dict(volume)


def classify_workout_type(workout_type: str) -> Optional[str]:
    """Map a session's workout type to "push", "pull", "legs" or None."""
    lowered = workout_type.lower()
    for key, _, _, keywords in SPLIT_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            return key
    return None


def current_streak(sessions: Iterable[WorkoutSession], now: datetime) -> int:
    """Consecutive days with a session, counting back from today."""
    days = {as_utc(session.started_at).date() for session in sessions}
    streak = 0
    cursor = as_utc(now).date()
    while cursor in days:
        streak += 1
        cursor -= timedelta(days=1)
    return streak


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def _best_per_exercise(sets: Iterable[ExerciseSet]) -> dict[UUID, float]:
    best: dict[UUID, float] = {}
    for exercise_set in sets:
        estimate = estimated_one_rep_max(exercise_set)
        if estimate > best.get(exercise_set.exercise_id, -math.inf):
            best[exercise_set.exercise_id] = estimate
    return best


# ---------------------------------------------------------------------------
# Analytics Service
# ---------------------------------------------------------------------------

class AnalyticsService:
    """
    Computes training analytics for one user at a time.

    Stateless apart from its collaborators, so one instance can serve
    every request.
    """

    def __init__(
        self,
        backend: WorkoutBackend,
        knowledge: TrainingKnowledgeService,
    ) -> None:
        self._backend = backend
        self._knowledge = knowledge

    async def weekly_volume_by_muscle(
        self,
        user_id: UUID,
        goal: Goal,
        level: FitnessLevel,
        now: Optional[datetime] = None,
    ) -> list[MuscleVolumeData]:
        """
        Sets per muscle group over the last seven days.

        Targets come from the volume landmarks for the user's goal and
        level; groups without landmarks get a generic 10-20 sets target.
        Groups with no sets this week are left out.
        """
        now = as_utc(now) if now else utc_now()
        week_ago = now - timedelta(days=7)

        sessions = await self._backend.get_workout_sessions(user_id, week_ago, now)
        completed = [s for s in sessions if s.is_completed]
        if not completed:
            return []

        sets = await self._backend.get_exercise_sets_for_sessions([s.id for s in completed])
        exercise_ids = list({s.exercise_id for s in sets})
        exercises = await self._backend.get_exercises_by_ids(exercise_ids) if exercise_ids else []

        volume = group_sets_by_muscle(
            sets,
            {exercise.id: exercise for exercise in exercises},
            self._knowledge.normalize_muscle_group,
        )

        results = []
        for group in TRACKED_MUSCLE_GROUPS:
            sets_this_week = volume.get(group, 0)
            if sets_this_week <= 0:
                continue

            landmarks = self._knowledge.get_volume_landmarks(group, goal, level)
            target_min, target_max = (
                landmarks.sets_per_week_range if landmarks else DEFAULT_WEEKLY_TARGET
            )
            results.append(MuscleVolumeData(
                muscle_group=group,
                sets=sets_this_week,
                target_min=target_min,
                target_max=target_max,
            ))

        logger.debug(
            "Computed weekly volume",
            extra={"user_id": str(user_id), "groups": len(results), "sessions": len(completed)}
        )

        return sorted(results, key=lambda item: item.sets, reverse=True)

    def split_balance(
        self,
        sessions: Iterable[WorkoutSession],
        workout_frequency: int,
        range_: OverviewRange = OverviewRange.MONTH,
        now: Optional[datetime] = None,
        multipliers: Optional[dict[str, float]] = None,
    ) -> list[SplitBalanceData]:
        """
        Push/pull/legs session counts against a recommendation.

        The recommendation spreads the user's weekly frequency over the
        range and splits it in thirds. Multipliers let a user tilt the
        split; missing or non-positive multipliers count as 1.0.
        """
        now = as_utc(now) if now else utc_now()
        start = range_start(range_, now)
        multipliers = multipliers or {}

        counts = {key: 0 for key, _, _, _ in SPLIT_CATEGORIES}
        for session in sessions:
            if as_utc(session.started_at) < start:
                continue
            category = classify_workout_type(session.workout_type)
            if category is not None:
                counts[category] += 1

        days = max((now - start).days, 1)
        weeks = days / 7.0
        recommended_total = max(_round_half_up(workout_frequency * weeks), 1)
        base_per_category = recommended_total / 3.0

        results = []
        for key, label, groups, _ in SPLIT_CATEGORIES:
            multiplier = multipliers.get(key, 1.0)
            if multiplier <= 0:
                multiplier = 1.0
            results.append(SplitBalanceData(
                category=label,
                muscle_groups=groups,
                workout_count=counts[key],
                recommended_count=max(_round_half_up(base_per_category * multiplier), 1),
            ))
        return results

    async def get_split_balance(
        self,
        user_id: UUID,
        workout_frequency: int,
        range_: OverviewRange = OverviewRange.MONTH,
        now: Optional[datetime] = None,
        multipliers: Optional[dict[str, float]] = None,
    ) -> list[SplitBalanceData]:
        now = as_utc(now) if now else utc_now()
        sessions = await self._backend.get_workout_sessions(
            user_id, range_start(range_, now), now
        )
        return self.split_balance(sessions, workout_frequency, range_, now, multipliers)

    async def overview_stats(
        self,
        user_id: UUID,
        range_: OverviewRange = OverviewRange.MONTH,
        now: Optional[datetime] = None,
    ) -> OverviewStats:
        """
        Headline stats for completed sessions in the range.

        Strength increase is the mean percentage change in best estimated
        1RM between an exercise's first and last session. A PR is a
        session whose best estimate beats every earlier session for that
        exercise; the first session for an exercise never counts.
        """
        now = as_utc(now) if now else utc_now()
        sessions = await self._backend.get_workout_sessions(
            user_id, range_start(range_, now), now
        )
        completed = sorted(
            (s for s in sessions if s.is_completed),
            key=lambda s: s.started_at,
        )

        sets = (
            await self._backend.get_exercise_sets_for_sessions([s.id for s in completed])
            if completed else []
        )
        sets_by_session: dict[UUID, list[ExerciseSet]] = defaultdict(list)
        for exercise_set in sets:
            sets_by_session[exercise_set.session_id].append(exercise_set)

        history: dict[UUID, list[float]] = defaultdict(list)
        all_time_best: dict[UUID, float] = {}
        personal_records = 0

        for session in completed:
            for exercise_id, estimate in _best_per_exercise(sets_by_session[session.id]).items():
                history[exercise_id].append(estimate)
                previous = all_time_best.get(exercise_id, -math.inf)
                if estimate > previous and previous > 0:
                    personal_records += 1
                all_time_best[exercise_id] = max(previous, estimate)

        increases = [
            (points[-1] - points[0]) / points[0] * 100.0
            for points in history.values()
            if points[0] > 0
        ]
        average_increase = sum(increases) / len(increases) if increases else 0.0

        return OverviewStats(
            total_workouts=len(completed),
            total_sets=len(sets),
            current_streak=current_streak(completed, now),
            personal_records=personal_records,
            average_strength_increase=average_increase,
        )
