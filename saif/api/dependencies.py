"""
FastAPI dependency injection.

Long-lived services (the knowledge service and the workout backend) are
built once in the application lifespan and parked on `app.state`. The
dependencies below hand them to route handlers, which keeps routes free
of construction logic and lets tests swap them out.
"""

import logging
from typing import Annotated

from fastapi import Depends, HTTPException, Request, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings, get_settings
from ..core.analytics.service import AnalyticsService, WorkoutBackend
from ..core.knowledge.recovery import RecoveryKnowledgeService
from ..core.knowledge.service import TrainingKnowledgeService
from ..core.planning.planner import SessionPlanGenerator

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: str = Security(api_key_header),
) -> str:
    """
    Validate API key from request header.

    Raises 403 if key is invalid or missing.
    """
    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.api_keys_list:
        logger.warning(
            "Invalid API key attempt",
            extra={"key_prefix": api_key[:8]}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_knowledge_service(request: Request) -> TrainingKnowledgeService:
    """Provide the knowledge service built at startup."""
    return request.app.state.knowledge_service


def get_workout_backend(request: Request) -> WorkoutBackend:
    """Provide the workout backend built at startup."""
    return request.app.state.workout_backend


def get_recovery_service() -> RecoveryKnowledgeService:
    """Recovery heuristics are a plain lookup table, so a new instance is fine."""
    return RecoveryKnowledgeService()


def get_analytics_service(
    backend: Annotated[WorkoutBackend, Depends(get_workout_backend)],
    knowledge: Annotated[TrainingKnowledgeService, Depends(get_knowledge_service)],
) -> AnalyticsService:
    """
    Provide AnalyticsService wired to the shared backend and knowledge base.

    The service is stateless, so we create a new instance per request.
    """
    return AnalyticsService(backend=backend, knowledge=knowledge)


def get_plan_generator(
    backend: Annotated[WorkoutBackend, Depends(get_workout_backend)],
    knowledge: Annotated[TrainingKnowledgeService, Depends(get_knowledge_service)],
    recovery: Annotated[RecoveryKnowledgeService, Depends(get_recovery_service)],
) -> SessionPlanGenerator:
    """Provide a SessionPlanGenerator over the shared backend and knowledge base."""
    return SessionPlanGenerator(knowledge=knowledge, backend=backend, recovery=recovery)


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
AuthenticatedUser = Annotated[str, Depends(verify_api_key)]
KnowledgeServiceDep = Annotated[TrainingKnowledgeService, Depends(get_knowledge_service)]
RecoveryServiceDep = Annotated[RecoveryKnowledgeService, Depends(get_recovery_service)]
AnalyticsServiceDep = Annotated[AnalyticsService, Depends(get_analytics_service)]
PlanGeneratorDep = Annotated[SessionPlanGenerator, Depends(get_plan_generator)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
