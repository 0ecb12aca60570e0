"""
Workout analytics.

Contains the workout domain models, the backend protocol and the
analytics service built on top of the knowledge base.
"""

from .models import (
    Exercise,
    ExerciseSet,
    MuscleVolumeData,
    OverviewRange,
    OverviewStats,
    SplitBalanceData,
    UserProfile,
    WorkoutSession,
)
from .service import AnalyticsService, WorkoutBackend, estimated_one_rep_max

__all__ = [
    "Exercise",
    "ExerciseSet",
    "MuscleVolumeData",
    "OverviewRange",
    "OverviewStats",
    "SplitBalanceData",
    "UserProfile",
    "WorkoutSession",
    "AnalyticsService",
    "WorkoutBackend",
    "estimated_one_rep_max",
]
