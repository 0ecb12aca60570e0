"""
Workout analytics API endpoints.

Numbers for the progress screens: weekly volume against research
targets, push/pull/legs balance and the overview card.
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from ...core.analytics.models import OverviewRange
from ...core.knowledge.models import FitnessLevel, Goal
from ..dependencies import AnalyticsServiceDep, AuthenticatedUser

logger = logging.getLogger(__name__)

router = APIRouter()


# ---------------------------------------------------------------------------
# Response Models
# ---------------------------------------------------------------------------

class MuscleVolumeItem(BaseModel):
    muscle_group: str
    sets: int
    target_min: int
    target_max: int
    status: str = Field(description="below, within or above the weekly target")


class SplitBalanceItem(BaseModel):
    category: str
    muscle_groups: list[str]
    workout_count: int
    recommended_count: int


class OverviewResponse(BaseModel):
    total_workouts: int
    total_sets: int
    current_streak: int
    personal_records: int
    average_strength_increase: float = Field(description="Mean % change in estimated 1RM")


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------

@router.get(
    "/{user_id}/volume",
    response_model=list[MuscleVolumeItem],
    summary="Weekly volume by muscle group",
)
async def weekly_volume(
    user_id: UUID,
    goal: Goal,
    level: FitnessLevel,
    analytics: AnalyticsServiceDep,
    api_key: AuthenticatedUser,
) -> list[MuscleVolumeItem]:
    results = await analytics.weekly_volume_by_muscle(user_id, goal, level)
    return [
        MuscleVolumeItem(
            muscle_group=r.muscle_group,
            sets=r.sets,
            target_min=r.target_min,
            target_max=r.target_max,
            status=r.status,
        )
        for r in results
    ]


@router.get(
    "/{user_id}/split-balance",
    response_model=list[SplitBalanceItem],
    summary="Push/pull/legs balance",
)
async def split_balance(
    user_id: UUID,
    analytics: AnalyticsServiceDep,
    api_key: AuthenticatedUser,
    workout_frequency: int = Query(3, ge=1, le=7, description="Planned workouts per week"),
    range_: OverviewRange = Query(OverviewRange.MONTH, alias="range"),
    push: float = Query(1.0, gt=0, description="Push multiplier"),
    pull: float = Query(1.0, gt=0, description="Pull multiplier"),
    legs: float = Query(1.0, gt=0, description="Legs multiplier"),
) -> list[SplitBalanceItem]:
    results = await analytics.get_split_balance(
        user_id,
        workout_frequency,
        range_,
        multipliers={"push": push, "pull": pull, "legs": legs},
    )
    return [
        SplitBalanceItem(
            category=r.category,
            muscle_groups=list(r.muscle_groups),
            workout_count=r.workout_count,
            recommended_count=r.recommended_count,
        )
        for r in results
    ]


@router.get(
    "/{user_id}/overview",
    response_model=OverviewResponse,
    summary="Overview stats",
)
async def overview(
    user_id: UUID,
    analytics: AnalyticsServiceDep,
    api_key: AuthenticatedUser,
    range_: OverviewRange = Query(OverviewRange.MONTH, alias="range"),
) -> OverviewResponse:
    stats = await analytics.overview_stats(user_id, range_)
    logger.debug(
        "Computed overview",
        extra={"user_id": str(user_id), "range": range_.value}
    )
    return OverviewResponse(
        total_workouts=stats.total_workouts,
        total_sets=stats.total_sets,
        current_streak=stats.current_streak,
        personal_records=stats.personal_records,
        average_strength_increase=round(stats.average_strength_increase, 2),
    )
