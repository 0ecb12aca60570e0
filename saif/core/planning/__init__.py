"""
Session planning.

Injury screening and the session plan generator built on the knowledge
base and the user's recent training.
"""

from .injuries import (
    ExerciseSafetyStatus,
    FilteredExercise,
    InjuryRule,
    InjuryRuleEngine,
)
from .models import IntensityTechnique, MuscleVolumeTarget, PlannedExercise, SessionPlan
from .planner import SessionPlanGenerator

__all__ = [
    "ExerciseSafetyStatus",
    "FilteredExercise",
    "InjuryRule",
    "InjuryRuleEngine",
    "IntensityTechnique",
    "MuscleVolumeTarget",
    "PlannedExercise",
    "SessionPlan",
    "SessionPlanGenerator",
]
