"""
FastAPI entrypoint for the code review service.

This module builds the FastAPI application, wires the settings, analysis
client and review store into it, and registers all routes.
"""

import logging
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.api import health, reviews
from app.config import Settings, get_settings
from app.llm.model import get_analysis_client
from app.observability.errors import setup_error_tracking
from app.observability.logging import setup_logging
from app.review.errors import PersistenceError, ReviewNotFoundError, SubmissionError
from app.storage.database import create_db_engine, create_session_factory, init_database
from app.storage.repository import ReviewRepository

logger = logging.getLogger(__name__)


async def submission_error_handler(request: Request, exc: SubmissionError):
    return JSONResponse(status_code=400, content={"error": str(exc)})


async def not_found_error_handler(request: Request, exc: ReviewNotFoundError):
    return JSONResponse(status_code=404, content={"error": "Review not found"})


async def persistence_error_handler(request: Request, exc: PersistenceError):
    return JSONResponse(status_code=500, content={"error": str(exc)})


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Explicit settings (tests); defaults to the environment

    Returns:
        Configured FastAPI app
    """
    settings = settings or get_settings()

    setup_logging(settings)
    setup_error_tracking(settings)

    app = FastAPI(
        title="Code Review Service",
        description="LLM-powered source file quality review",
        version=health.VERSION,
        docs_url="/docs" if settings.ENVIRONMENT != "production" else None,
        redoc_url="/redoc" if settings.ENVIRONMENT != "production" else None,
    )

    engine = create_db_engine(settings)
    app.state.settings = settings
    app.state.engine = engine
    app.state.review_repository = ReviewRepository(create_session_factory(engine))
    app.state.analysis_client = get_analysis_client(settings)

    # CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.allowed_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.add_exception_handler(SubmissionError, submission_error_handler)
    app.add_exception_handler(ReviewNotFoundError, not_found_error_handler)
    app.add_exception_handler(PersistenceError, persistence_error_handler)

    # Register routes
    app.include_router(health.router, prefix="/health", tags=["health"])
    app.include_router(reviews.router, prefix="/api/reviews", tags=["reviews"])

    @app.on_event("startup")
    async def startup_event():
        """Create the schema if needed and log the effective configuration."""
        init_database(engine)
        logger.info(
            "Code review service starting",
            extra={
                "environment": settings.ENVIRONMENT,
                "llm_provider": settings.LLM_PROVIDER,
                "llm_model": settings.LLM_MODEL,
            }
        )

    @app.on_event("shutdown")
    async def shutdown_event():
        """Release pooled database connections."""
        engine.dispose()
        logger.info("Code review service shutting down")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    _settings = get_settings()
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=_settings.PORT,
        reload=_settings.ENVIRONMENT == "development",
    )
