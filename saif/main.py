"""
FastAPI application entry point.

This module is the composition root: it creates the FastAPI application
and, in the lifespan, builds the long-lived services (knowledge base and
workout backend) exactly once.

For local development:
    uvicorn saif.main:app --reload
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from . import __version__
from .api.routes import analytics, health, knowledge, plans
from .config.settings import Settings, get_settings
from .core.knowledge.service import TrainingKnowledgeService
from .infrastructure.backend.client import create_workout_backend
from .infrastructure.knowledge.loader import BundledKnowledgeLoader

# Configure logging
logging.basicConfig(
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    level=logging.INFO,
)

logger = logging.getLogger(__name__)


def build_knowledge_service(settings: Settings) -> TrainingKnowledgeService:
    """Construct and initialize the knowledge service for this process."""
    service = TrainingKnowledgeService(
        loader=BundledKnowledgeLoader(settings.knowledge_data_path)
    )
    service.initialize()
    return service


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Startup builds the knowledge service and workout backend and stores
    them on app.state, where the dependencies pick them up.
    """
    settings = get_settings()
    logging.getLogger().setLevel(settings.log_level.upper())

    missing_fields = settings.validate_required_fields()
    if missing_fields:
        logger.error(
            "Missing required configuration",
            extra={"missing_fields": missing_fields}
        )

    app.state.knowledge_service = build_knowledge_service(settings)
    app.state.workout_backend = create_workout_backend(
        mock_mode=settings.backend_mock_mode,
        fixture_path=settings.backend_fixture_path,
    )

    logger.info(
        "Saif API starting",
        extra={
            "version": __version__,
            "knowledge_fallback": app.state.knowledge_service.is_using_fallback,
            "backend_mock_mode": settings.backend_mock_mode,
        }
    )

    yield

    logger.info("Saif API shutting down")


def create_app() -> FastAPI:
    """
    Application factory.

    Creates and configures the FastAPI application. Tests call this
    directly to get a fresh app per test.
    """
    settings = get_settings()

    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        description="""
        Training knowledge and workout analytics.

        ## Authentication

        All /api/v1 endpoints require an API key in the `X-API-Key` header.

        ## Endpoints

        - **Knowledge**: exercise lookup, per-muscle exercise lists,
          substitutions, volume landmarks and training principles
        - **Analytics**: weekly volume, push/pull/legs balance, overview stats
        - **Plans**: injury-aware session plans sized to the week's volume
        """,
        docs_url="/docs",
        redoc_url="/redoc",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(
        health.router,
        prefix="/health",
        tags=["Health"],
    )

    app.include_router(
        knowledge.router,
        prefix="/api/v1/knowledge",
        tags=["Knowledge"],
    )

    app.include_router(
        analytics.router,
        prefix="/api/v1/analytics",
        tags=["Analytics"],
    )

    app.include_router(
        plans.router,
        prefix="/api/v1/plans",
        tags=["Plans"],
    )

    @app.get("/", include_in_schema=False)
    async def root():
        """Root endpoint - point at the docs."""
        return {
            "message": settings.api_title,
            "version": settings.api_version,
            "docs": "/docs",
            "health": "/health",
        }

    @app.exception_handler(Exception)
    async def global_exception_handler(request, exc):
        """
        Catch-all exception handler.

        Logs the full error server-side but returns a generic message.
        """
        logger.error(
            "Unhandled exception",
            extra={
                "path": request.url.path,
                "method": request.method,
                "error": str(exc),
            },
            exc_info=exc,
        )

        return JSONResponse(
            status_code=500,
            content={
                "detail": "Internal server error. Please contact support if this persists."
            }
        )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()

    uvicorn.run(
        "saif.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        log_level=settings.log_level.lower(),
    )
