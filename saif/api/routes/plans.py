"""
Session plan API endpoints.

The client sends the user's training profile with the request; this
service doesn't store profiles. Past sessions come from the workout
backend.
"""

import logging
from datetime import datetime
from typing import Optional
from uuid import UUID

from fastapi import APIRouter, status
from pydantic import BaseModel, Field

from ...core.analytics.models import UserProfile
from ...core.knowledge.models import FitnessLevel, Goal, GymType
from ...core.planning.models import SessionPlan
from ..dependencies import AuthenticatedUser, PlanGeneratorDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class PlanRequest(BaseModel):
    """What to train today, plus the profile fields planning needs."""
    workout_type: str = Field(min_length=1, max_length=100, description="e.g. Push, Pull, Legs")
    muscle_groups: list[str] = Field(min_length=1, description="Groups to train, in order")
    session_id: Optional[UUID] = None

    fitness_level: FitnessLevel = FitnessLevel.BEGINNER
    primary_goal: Goal = Goal.MAINTAIN
    workout_frequency: int = Field(3, ge=1, le=7)
    gym_type: GymType = GymType.COMMERCIAL
    injuries_limitations: list[str] = Field(default_factory=list)

    favorite_exercises: list[str] = Field(default_factory=list)
    avoided_exercises: list[str] = Field(default_factory=list)


class PlannedExerciseItem(BaseModel):
    exercise_name: str
    muscle_group: str
    order_index: int
    is_compound: bool
    target_sets: int
    target_reps_min: int
    target_reps_max: int
    rest_seconds: int
    intensity_technique: Optional[str] = None
    rationale: str
    safety_modification: Optional[str] = None


class VolumeTargetItem(BaseModel):
    muscle_group: str
    target_sets_today: int
    weekly_target: int
    completed_this_week: int
    reasoning: str


class SessionPlanResponse(BaseModel):
    id: UUID
    session_id: UUID
    user_id: UUID
    workout_type: str
    muscle_groups: list[str]
    generated_at: datetime
    exercises: list[PlannedExerciseItem]
    volume_targets: list[VolumeTargetItem]
    safety_notes: list[str]
    estimated_duration: int = Field(description="Minutes")


def _plan_response(plan: SessionPlan) -> SessionPlanResponse:
    return SessionPlanResponse(
        id=plan.id,
        session_id=plan.session_id,
        user_id=plan.user_id,
        workout_type=plan.workout_type,
        muscle_groups=plan.muscle_groups,
        generated_at=plan.generated_at,
        exercises=[
            PlannedExerciseItem(
                exercise_name=e.exercise_name,
                muscle_group=e.muscle_group,
                order_index=e.order_index,
                is_compound=e.is_compound,
                target_sets=e.target_sets,
                target_reps_min=e.target_reps_min,
                target_reps_max=e.target_reps_max,
                rest_seconds=e.rest_seconds,
                intensity_technique=e.intensity_technique.value if e.intensity_technique else None,
                rationale=e.rationale,
                safety_modification=e.safety_modification,
            )
            for e in plan.exercises
        ],
        volume_targets=[
            VolumeTargetItem(
                muscle_group=t.muscle_group,
                target_sets_today=t.target_sets_today,
                weekly_target=t.weekly_target,
                completed_this_week=t.completed_this_week,
                reasoning=t.reasoning,
            )
            for t in plan.volume_targets
        ],
        safety_notes=plan.safety_notes,
        estimated_duration=plan.estimated_duration,
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.post(
    "/{user_id}",
    response_model=SessionPlanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Generate a session plan",
)
async def create_plan(
    user_id: UUID,
    request: PlanRequest,
    generator: PlanGeneratorDep,
    api_key: AuthenticatedUser,
) -> SessionPlanResponse:
    """
    Generate a workout for the requested muscle groups.

    Exercises are ranked for the goal, limited to the gym's equipment and
    screened against the listed injuries. Set counts account for what the
    user already trained this week.
    """
    profile = UserProfile(
        id=user_id,
        fitness_level=request.fitness_level,
        primary_goal=request.primary_goal,
        workout_frequency=request.workout_frequency,
        gym_type=request.gym_type,
        injuries_limitations=request.injuries_limitations,
    )

    plan = await generator.generate_plan(
        profile,
        request.workout_type,
        request.muscle_groups,
        favorites=request.favorite_exercises,
        avoided=request.avoided_exercises,
        session_id=request.session_id,
    )
    return _plan_response(plan)
