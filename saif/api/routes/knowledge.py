"""
Training knowledge API endpoints.

Read-only views over the knowledge base. Research text is sanitized
before it leaves the service so clients never see citation or image
artifacts from the source export.

When the knowledge base runs in fallback mode, the structured endpoints
return empty results and /principles carries the static guidance.
"""

import logging
from typing import Optional

from fastapi import APIRouter, HTTPException, status
from pydantic import BaseModel, Field

from ...core.knowledge.models import (
    ExerciseDetail,
    ExerciseType,
    FitnessLevel,
    Goal,
    GymType,
    VolumeLandmarks,
)
from ...core.sanitizer import first_sentence, sanitize
from ..dependencies import AuthenticatedUser, KnowledgeServiceDep, RecoveryServiceDep

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Request/Response Models
# ---------------------------------------------------------------------------

class KnowledgeStatusResponse(BaseModel):
    """Which knowledge the service is running on."""
    using_fallback: bool = Field(description="True when serving static fallback text")
    schema_version: Optional[str] = Field(None, description="Dataset schema version if loaded")
    muscle_groups: list[str] = Field(description="Muscle groups with exercise data")


class EffectivenessItem(BaseModel):
    hypertrophy: str
    strength: str
    power: str
    hypertrophy_score: int = Field(ge=1, le=4)
    strength_score: int = Field(ge=1, le=4)
    power_score: int = Field(ge=1, le=4)


class ExerciseResponse(BaseModel):
    """One exercise with its research summary."""
    name: str
    is_compound: bool
    emg_activation: str = Field(description="Sanitized EMG research text")
    emg_summary: str = Field(description="First sentence of the EMG research text")
    effectiveness: EffectivenessItem
    injury_risk: str
    safety_level: str = Field(description="Low, Medium or High")
    equipment: str
    prerequisites: str
    progression_path: str
    when_to_prioritize: Optional[str] = None


class SubstitutionResponse(BaseModel):
    scenario: str
    substitute: str
    notes: str


class VolumeResponse(BaseModel):
    """Volume landmarks for a muscle group, goal and level."""
    muscle_group: str
    goal: str
    level: str
    mv: str
    mev: str
    mav: str
    mrv: str
    sets_per_week_min: int
    sets_per_week_max: int
    exercise_count: int
    sets_per_session_range: str
    rep_range: str
    rest_between_sets: str
    frequency_recommendation: str
    intensity_guidance: str
    progression_rate: str
    recovery_notes: str
    recommended_rest_days: int
    notes: str
    sources: list[str]


class PrinciplesResponse(BaseModel):
    """Ordering and volume principles, plus static fallback guidance."""
    using_fallback: bool
    ordering: Optional[dict[str, str]] = None
    general: Optional[dict[str, str]] = None
    fallback_text: str


# ---------------------------------------------------------------------------
# Translation
# ---------------------------------------------------------------------------

def _exercise_response(exercise: ExerciseDetail) -> ExerciseResponse:
    effectiveness = exercise.effectiveness
    return ExerciseResponse(
        name=exercise.name,
        is_compound=exercise.is_compound,
        emg_activation=sanitize(exercise.emg_activation),
        emg_summary=first_sentence(exercise.emg_activation),
        effectiveness=EffectivenessItem(
            hypertrophy=sanitize(effectiveness.hypertrophy),
            strength=sanitize(effectiveness.strength),
            power=sanitize(effectiveness.power),
            hypertrophy_score=effectiveness.hypertrophy_score,
            strength_score=effectiveness.strength_score,
            power_score=effectiveness.power_score,
        ),
        injury_risk=sanitize(exercise.injury_risk),
        safety_level=exercise.safety_level.value,
        equipment=sanitize(exercise.equipment),
        prerequisites=sanitize(exercise.prerequisites),
        progression_path=sanitize(exercise.progression_path),
        when_to_prioritize=(
            sanitize(exercise.when_to_prioritize) if exercise.when_to_prioritize else None
        ),
    )


def _volume_response(
    group: str,
    goal: Goal,
    level: FitnessLevel,
    landmarks: VolumeLandmarks,
    rest_days: int,
) -> VolumeResponse:
    low, high = landmarks.sets_per_week_range
    return VolumeResponse(
        muscle_group=group,
        goal=goal.value,
        level=level.value,
        mv=sanitize(landmarks.mv),
        mev=sanitize(landmarks.mev),
        mav=sanitize(landmarks.mav),
        mrv=sanitize(landmarks.mrv),
        sets_per_week_min=low,
        sets_per_week_max=high,
        exercise_count=landmarks.exercise_count,
        sets_per_session_range=sanitize(landmarks.sets_per_session_range),
        rep_range=sanitize(landmarks.rep_range),
        rest_between_sets=sanitize(landmarks.rest_between_sets),
        frequency_recommendation=sanitize(landmarks.frequency_recommendation),
        intensity_guidance=sanitize(landmarks.intensity_guidance),
        progression_rate=sanitize(landmarks.progression_rate),
        recovery_notes=sanitize(landmarks.recovery_notes),
        recommended_rest_days=rest_days,
        notes=sanitize(landmarks.notes),
        sources=list(landmarks.sources),
    )


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/status",
    response_model=KnowledgeStatusResponse,
    summary="Knowledge base status",
)
async def knowledge_status(
    knowledge: KnowledgeServiceDep,
    api_key: AuthenticatedUser,
) -> KnowledgeStatusResponse:
    return KnowledgeStatusResponse(
        using_fallback=knowledge.is_using_fallback,
        schema_version=knowledge.schema_version,
        muscle_groups=knowledge.muscle_groups(),
    )


@router.get(
    "/exercises/{name}",
    response_model=ExerciseResponse,
    summary="Look up an exercise by name",
    responses={404: {"description": "Exercise not found"}},
)
async def get_exercise(
    name: str,
    knowledge: KnowledgeServiceDep,
    api_key: AuthenticatedUser,
) -> ExerciseResponse:
    """
    Find an exercise by its exact name (case and spacing are ignored).
    """
    exercise = knowledge.find_exercise(name)
    if exercise is None:
        logger.info("Exercise not found", extra={"exercise_name": name[:100]})
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Exercise not found: {name}",
        )
    return _exercise_response(exercise)


@router.get(
    "/muscle-groups/{muscle_group}/exercises",
    response_model=list[ExerciseResponse],
    summary="Exercises for a muscle group",
)
async def list_exercises(
    muscle_group: str,
    knowledge: KnowledgeServiceDep,
    api_key: AuthenticatedUser,
    exercise_type: ExerciseType = ExerciseType.ALL,
    goal: Optional[Goal] = None,
    gym_type: Optional[GymType] = None,
) -> list[ExerciseResponse]:
    """
    List exercises for a muscle group.

    - goal: rank by effectiveness for the goal (best first)
    - gym_type: keep only exercises the gym's equipment supports
    """
    if goal is not None:
        exercises = knowledge.get_exercises_ranked(muscle_group, goal)
        if exercise_type != ExerciseType.ALL:
            wanted = {e.name for e in knowledge.get_exercises(muscle_group, exercise_type)}
            exercises = [e for e in exercises if e.name in wanted]
    else:
        exercises = knowledge.get_exercises(muscle_group, exercise_type)

    if gym_type is not None:
        exercises = [e for e in exercises if knowledge.is_equipment_available(e, gym_type)]

    return [_exercise_response(e) for e in exercises]


@router.get(
    "/muscle-groups/{muscle_group}/substitutions",
    response_model=list[SubstitutionResponse],
    summary="Exercise substitutions for a muscle group",
)
async def list_substitutions(
    muscle_group: str,
    knowledge: KnowledgeServiceDep,
    api_key: AuthenticatedUser,
) -> list[SubstitutionResponse]:
    return [
        SubstitutionResponse(
            scenario=s.scenario,
            substitute=s.substitute,
            notes=sanitize(s.notes),
        )
        for s in knowledge.get_substitutions(muscle_group)
    ]


@router.get(
    "/volume/{muscle_group}",
    response_model=VolumeResponse,
    summary="Volume landmarks for a muscle group",
    responses={404: {"description": "No volume guidance for this group"}},
)
async def get_volume(
    muscle_group: str,
    goal: Goal,
    level: FitnessLevel,
    knowledge: KnowledgeServiceDep,
    recovery: RecoveryServiceDep,
    api_key: AuthenticatedUser,
) -> VolumeResponse:
    landmarks = knowledge.get_volume_landmarks(muscle_group, goal, level)
    if landmarks is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"No volume guidance for muscle group: {muscle_group}",
        )

    group = knowledge.normalize_muscle_group(muscle_group)
    return _volume_response(
        group, goal, level, landmarks, recovery.recommended_rest_days(group)
    )


@router.get(
    "/principles",
    response_model=PrinciplesResponse,
    summary="Training principles",
)
async def get_principles(
    knowledge: KnowledgeServiceDep,
    api_key: AuthenticatedUser,
) -> PrinciplesResponse:
    ordering = knowledge.get_ordering_principles()
    general = knowledge.get_general_principles()

    return PrinciplesResponse(
        using_fallback=knowledge.is_using_fallback,
        ordering={
            "optimal_sequence": sanitize(ordering.optimal_sequence),
            "fatigue_management": sanitize(ordering.fatigue_management),
            "compound_vs_isolation_timing": sanitize(ordering.compound_vs_isolation_timing),
        } if ordering else None,
        general={
            "volume_progression": sanitize(general.volume_progression),
            "deload_frequency": sanitize(general.deload_frequency),
            "individual_variation": sanitize(general.individual_variation),
        } if general else None,
        fallback_text=knowledge.fallback_text(),
    )
