"""
Workout backend implementations.

Only the in-memory backend is available here; it backs local development
and tests.
"""

from .client import (
    BackendConfigurationError,
    InMemoryWorkoutBackend,
    create_workout_backend,
)

__all__ = [
    "BackendConfigurationError",
    "InMemoryWorkoutBackend",
    "create_workout_backend",
]
