"""
Session plan generation.

Builds a concrete workout for a set of muscle groups from the knowledge
base: exercises ranked for the user's goal, screened for their gym and
injuries, sized against what they have already done this week.

Per muscle group the plan takes up to two compounds (4 then 3 sets,
3 minutes rest) and up to two accessories that fill the rest of the
day's set target (at least 2 sets each, 90 seconds rest).
"""

import logging
from datetime import datetime, timedelta
from typing import Callable, Iterable, Optional
from uuid import UUID, uuid4

from ..analytics.models import UserProfile, WorkoutSession, as_utc, utc_now
from ..analytics.service import WorkoutBackend, group_sets_by_muscle
from ..knowledge.models import ExerciseDetail, FitnessLevel, Goal
from ..knowledge.recovery import RecoveryKnowledgeService
from ..knowledge.service import TrainingKnowledgeService
from ..sanitizer import sanitize
from .injuries import FilteredExercise, InjuryRuleEngine
from .models import IntensityTechnique, MuscleVolumeTarget, PlannedExercise, SessionPlan

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Constants
# ---------------------------------------------------------------------------

COMPOUND_REP_RANGES = {
    Goal.BULK: (6, 10),
    Goal.CUT: (8, 12),
    Goal.MAINTAIN: (6, 12),
}

ACCESSORY_REP_RANGES = {
    Goal.BULK: (10, 15),
    Goal.CUT: (12, 20),
    Goal.MAINTAIN: (10, 15),
}

MAX_COMPOUNDS = 2
MAX_ACCESSORIES = 2
COMPOUND_SETS = (4, 3)
COMPOUND_REST_SECONDS = 180
ACCESSORY_REST_SECONDS = 90
MIN_ACCESSORY_SETS = 2

DEFAULT_SETS_TODAY = 12
DEFAULT_WEEKLY_SETS = 16

# Days since last trained when a group has no session in the lookback window
RECOVERY_LOOKBACK_DAYS = 7

RATIONALE_RESEARCH_CHARS = 60

WARMUP_MINUTES = 5
COOLDOWN_MINUTES = 5
MINUTES_PER_SET = 2

# Checked in order; the first keyword found in the workout type wins.
WORKOUT_TYPE_GROUPS = (
    ("push", ("chest", "shoulders", "triceps")),
    ("pull", ("back", "biceps")),
    ("leg", ("quads", "hamstrings", "glutes")),
    ("upper", ("chest", "back", "shoulders", "biceps", "triceps")),
    ("lower", ("quads", "hamstrings", "glutes", "calves")),
    ("full", ("chest", "back", "shoulders", "quads", "hamstrings", "biceps", "triceps")),
)


def muscle_groups_for_workout_type(workout_type: str) -> tuple[str, ...]:
    """Groups a session of this type trains. Unknown types train themselves."""
    lowered = workout_type.lower()
    for keyword, groups in WORKOUT_TYPE_GROUPS:
        if keyword in lowered:
            return groups
    return (lowered,)


def estimate_session_duration(exercises: Iterable[PlannedExercise]) -> int:
    """Minutes: warm-up, work and rest for every set, cool-down."""
    total = WARMUP_MINUTES
    for exercise in exercises:
        total += exercise.target_sets * MINUTES_PER_SET
        total += (exercise.target_sets - 1) * (exercise.rest_seconds // 60)
    return total + COOLDOWN_MINUTES


def _intensity_technique(exercise: ExerciseDetail) -> IntensityTechnique:
    equipment = exercise.equipment.lower()
    if "machine" in equipment or "cable" in equipment:
        return IntensityTechnique.DROP_SETS
    if "dumbbell" in equipment or "barbell" in equipment:
        return IntensityTechnique.REST_PAUSE
    return IntensityTechnique.DROP_SETS


def _rationale(
    exercise: ExerciseDetail,
    position: str,
    muscle_group: str,
    technique: Optional[IntensityTechnique],
) -> str:
    if position == "primary":
        text = (
            f"Primary compound for {muscle_group}. "
            f"High effectiveness ({sanitize(exercise.effectiveness.hypertrophy)})."
        )
    elif position == "secondary":
        text = f"Secondary compound to hit {muscle_group} from a different angle."
    else:
        text = f"Accessory exercise for targeted {muscle_group} volume."

    research = sanitize(exercise.emg_activation)
    if research:
        text += f" Research: {research[:RATIONALE_RESEARCH_CHARS]}..."
    if technique is not None:
        text += f" Using {technique.value} on final set."
    return text


# ---------------------------------------------------------------------------
# Session Plan Generator
# ---------------------------------------------------------------------------

class SessionPlanGenerator:
    """
    Turns a user profile and a list of muscle groups into a session plan.

    Reads the user's last week of sessions from the workout backend to
    size today's volume and check recovery. Everything else comes from
    the knowledge base, so the generator degrades to empty exercise lists
    (but still returns a plan) when the knowledge base is in fallback.
    """

    def __init__(
        self,
        knowledge: TrainingKnowledgeService,
        backend: WorkoutBackend,
        injuries: Optional[InjuryRuleEngine] = None,
        recovery: Optional[RecoveryKnowledgeService] = None,
    ) -> None:
        self._knowledge = knowledge
        self._backend = backend
        self._injuries = injuries or InjuryRuleEngine()
        self._recovery = recovery or RecoveryKnowledgeService()

    async def generate_plan(
        self,
        profile: UserProfile,
        workout_type: str,
        muscle_groups: list[str],
        favorites: Iterable[str] = (),
        avoided: Iterable[str] = (),
        session_id: Optional[UUID] = None,
        now: Optional[datetime] = None,
    ) -> SessionPlan:
        """
        Generate a plan for one session.

        Args:
            profile: Goal, level, frequency, gym and injuries of the user
            workout_type: e.g. "Push", used for the plan label
            muscle_groups: Groups to train, in the order they should be trained
            favorites: Exercise names to put first when choosing
            avoided: Exercise names to skip unless nothing else is left
            session_id: Session the plan belongs to; a new ID if omitted
            now: Reference time for the weekly window
        """
        now = as_utc(now) if now else utc_now()
        week_ago = now - timedelta(days=RECOVERY_LOOKBACK_DAYS)

        sessions = await self._backend.get_workout_sessions(profile.id, week_ago, now)
        completed = [s for s in sessions if s.is_completed]

        recovery_days = self._days_since_trained(muscle_groups, completed, now)
        volume_targets = await self._volume_targets(muscle_groups, profile, completed)
        targets_by_group = {t.muscle_group: t for t in volume_targets}

        injuries = self._injuries.parse_injuries(", ".join(profile.injuries_limitations))
        preference = _preference_weights(favorites, avoided)

        planned: list[PlannedExercise] = []
        for group in muscle_groups:
            target_sets = targets_by_group[group].target_sets_today
            candidates = self._candidates(group, profile, injuries, preference)
            planned.extend(self._plan_group(
                group, candidates, target_sets, profile, start_index=len(planned)
            ))

        notes = self._safety_notes(injuries, planned)
        notes.extend(self._recovery_notes(muscle_groups, recovery_days))

        plan = SessionPlan(
            user_id=profile.id,
            workout_type=workout_type,
            muscle_groups=list(muscle_groups),
            exercises=planned,
            volume_targets=volume_targets,
            safety_notes=notes,
            estimated_duration=estimate_session_duration(planned),
            session_id=session_id or uuid4(),
        )

        logger.info(
            "Generated session plan",
            extra={
                "user_id": str(profile.id),
                "workout_type": workout_type,
                "exercises": len(planned),
                "injuries": injuries,
                "knowledge_fallback": self._knowledge.is_using_fallback,
            }
        )
        return plan

    # -- Selection ------------------------------------------------------------

    def _candidates(
        self,
        group: str,
        profile: UserProfile,
        injuries: list[str],
        preference: Callable[[str], int],
    ) -> list[FilteredExercise]:
        ranked = self._knowledge.get_exercises_ranked(group, profile.primary_goal)
        available = [
            exercise for exercise in ranked
            if self._knowledge.is_equipment_available(exercise, profile.gym_type)
        ]
        screened = self._injuries.filter_exercises(available, injuries)

        # Favorites first, then neutral, then avoided; stable within a tier
        screened.sort(key=lambda item: preference(item.exercise.name), reverse=True)

        preferred = [item for item in screened if preference(item.exercise.name) > 0]
        return preferred or screened

    def _plan_group(
        self,
        group: str,
        candidates: list[FilteredExercise],
        target_sets: int,
        profile: UserProfile,
        start_index: int,
    ) -> list[PlannedExercise]:
        compounds = [c for c in candidates if c.exercise.is_compound][:MAX_COMPOUNDS]
        accessories = [c for c in candidates if not c.exercise.is_compound][:MAX_ACCESSORIES]

        planned = []
        low, high = COMPOUND_REP_RANGES[profile.primary_goal]
        for position, item in enumerate(compounds):
            planned.append(PlannedExercise(
                exercise_name=item.exercise.name,
                muscle_group=group,
                order_index=start_index + len(planned),
                is_compound=True,
                target_sets=COMPOUND_SETS[position],
                target_reps_min=low,
                target_reps_max=high,
                rest_seconds=COMPOUND_REST_SECONDS,
                rationale=_rationale(
                    item.exercise, "primary" if position == 0 else "secondary", group, None
                ),
                safety_modification=item.note,
            ))

        compound_sets = sum(COMPOUND_SETS[:len(compounds)])
        remaining = max(target_sets - compound_sets, 0)
        sets_per_accessory = max(remaining // max(len(accessories), 1), MIN_ACCESSORY_SETS)

        low, high = ACCESSORY_REP_RANGES[profile.primary_goal]
        for position, item in enumerate(accessories):
            technique = None
            if profile.fitness_level != FitnessLevel.BEGINNER and position == len(accessories) - 1:
                technique = _intensity_technique(item.exercise)

            planned.append(PlannedExercise(
                exercise_name=item.exercise.name,
                muscle_group=group,
                order_index=start_index + len(planned),
                is_compound=False,
                target_sets=sets_per_accessory,
                target_reps_min=low,
                target_reps_max=high,
                rest_seconds=ACCESSORY_REST_SECONDS,
                rationale=_rationale(item.exercise, "accessory", group, technique),
                intensity_technique=technique,
                safety_modification=item.note,
            ))
        return planned

    # -- Volume and recovery --------------------------------------------------

    async def _volume_targets(
        self,
        muscle_groups: list[str],
        profile: UserProfile,
        sessions: list[WorkoutSession],
    ) -> list[MuscleVolumeTarget]:
        """
        Today's set target per group.

        The weekly target is the midpoint of the landmark range. Today gets
        what is left of it, capped at one session's share plus two.
        """
        done = await self._sets_this_week(sessions)
        sessions_per_week = 2 if profile.workout_frequency >= 5 else 1

        targets = []
        for group in muscle_groups:
            completed = done.get(self._knowledge.normalize_muscle_group(group), 0)
            landmarks = self._knowledge.get_volume_landmarks(
                group, profile.primary_goal, profile.fitness_level
            )
            if landmarks is None:
                targets.append(MuscleVolumeTarget(
                    muscle_group=group,
                    target_sets_today=DEFAULT_SETS_TODAY,
                    weekly_target=DEFAULT_WEEKLY_SETS,
                    completed_this_week=completed,
                    reasoning="Default volume target",
                ))
                continue

            low, high = landmarks.sets_per_week_range
            weekly = (low + high) // 2
            remaining = max(weekly - completed, 0)
            targets.append(MuscleVolumeTarget(
                muscle_group=group,
                target_sets_today=min(remaining, weekly // sessions_per_week + 2),
                weekly_target=weekly,
                completed_this_week=completed,
                reasoning=f"You've done {completed}/{weekly} sets this week for {group}",
            ))
        return targets

    async def _sets_this_week(self, sessions: list[WorkoutSession]) -> dict[str, int]:
        if not sessions:
            return {}
        sets = await self._backend.get_exercise_sets_for_sessions([s.id for s in sessions])
        exercise_ids = list({s.exercise_id for s in sets})
        exercises = await self._backend.get_exercises_by_ids(exercise_ids) if exercise_ids else []
        return group_sets_by_muscle(
            sets,
            {exercise.id: exercise for exercise in exercises},
            self._knowledge.normalize_muscle_group,
        )

    @staticmethod
    def _days_since_trained(
        muscle_groups: list[str],
        sessions: list[WorkoutSession],
        now: datetime,
    ) -> dict[str, int]:
        days = {}
        for group in muscle_groups:
            trained = [
                s.started_at for s in sessions
                if group.lower() in muscle_groups_for_workout_type(s.workout_type)
            ]
            days[group] = (now - max(trained)).days if trained else RECOVERY_LOOKBACK_DAYS
        return days

    # -- Notes ------------------------------------------------------------------

    def _safety_notes(self, injuries: list[str], planned: list[PlannedExercise]) -> list[str]:
        notes = []
        if injuries:
            areas = ", ".join(injury.replace("_", " ") for injury in injuries)
            notes.append(f"You have {areas} considerations. Exercises adjusted accordingly.")
            substitutes = self._injuries.safe_substitutes(injuries)
            if substitutes:
                notes.append(f"Safer options if needed: {', '.join(substitutes)}.")

        techniques = sum(1 for e in planned if e.intensity_technique is not None)
        if techniques:
            notes.append(f"{techniques} exercise(s) include intensity techniques. Maintain form.")

        if sum(1 for e in planned if e.is_compound) >= 3:
            notes.append("High compound volume: rest 3+ minutes between sets.")
        return notes

    def _recovery_notes(self, muscle_groups: list[str], recovery_days: dict[str, int]) -> list[str]:
        notes = []
        for group in muscle_groups:
            rest_days = self._recovery.recommended_rest_days(group)
            if recovery_days[group] < rest_days:
                notes.append(
                    f"{group} was trained {recovery_days[group]} day(s) ago; "
                    f"{rest_days} rest days are recommended."
                )
        return notes


def _preference_weights(favorites: Iterable[str], avoided: Iterable[str]) -> Callable[[str], int]:
    """2 for favorites, 0 for avoided, 1 otherwise. Names compare case-insensitively."""
    favorite_names = {name.lower() for name in favorites}
    avoided_names = {name.lower() for name in avoided}

    def weight(name: str) -> int:
        lowered = name.lower()
        if lowered in favorite_names:
            return 2
        if lowered in avoided_names:
            return 0
        return 1

    return weight
