"""
Training knowledge base.

Typed models for the bundled dataset, the schema-aware parser that builds
them, and the lookup service with its static fallback.
"""

from .models import (
    Effectiveness,
    ExerciseDetail,
    ExerciseOrderingResearch,
    ExerciseSubstitution,
    ExerciseType,
    FitnessLevel,
    GeneralPrinciples,
    Goal,
    GymType,
    MuscleGroupExercises,
    SafetyLevel,
    TrainingKnowledge,
    VolumeLandmarks,
)
from .recovery import RecoveryKnowledgeService
from .schema import KnowledgeSchemaError, parse_training_knowledge
from .service import KnowledgeLoadError, KnowledgeLoader, TrainingKnowledgeService

__all__ = [
    "Effectiveness",
    "ExerciseDetail",
    "ExerciseOrderingResearch",
    "ExerciseSubstitution",
    "ExerciseType",
    "FitnessLevel",
    "GeneralPrinciples",
    "Goal",
    "GymType",
    "MuscleGroupExercises",
    "SafetyLevel",
    "TrainingKnowledge",
    "VolumeLandmarks",
    "RecoveryKnowledgeService",
    "KnowledgeSchemaError",
    "parse_training_knowledge",
    "KnowledgeLoadError",
    "KnowledgeLoader",
    "TrainingKnowledgeService",
]
