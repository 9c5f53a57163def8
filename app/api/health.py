"""
Health check endpoints.

Provides application health status and readiness checks.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends, status
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from app.config import Settings
from app.dependencies import get_app_settings, get_review_repository
from app.storage.repository import ReviewRepository

router = APIRouter()

VERSION = "1.0.0"


class HealthResponse(BaseModel):
    """Health check response model."""
    status: str
    timestamp: datetime
    environment: str
    version: str
    checks: Dict[str, Any]


@router.get(
    "/",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Basic health check",
    description="Returns basic application health status"
)
async def health_check(settings: Settings = Depends(get_app_settings)):
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now(timezone.utc),
        environment=settings.ENVIRONMENT,
        version=VERSION,
        checks={
            "api": "ok"
        }
    )


@router.get(
    "/ready",
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Readiness check",
    description="Returns application readiness status with dependency checks"
)
async def readiness_check(
    settings: Settings = Depends(get_app_settings),
    repository: ReviewRepository = Depends(get_review_repository),
):
    """
    Readiness check endpoint.

    Verifies that the provider credentials are configured and the
    database answers.
    """
    checks = {
        "llm_provider": settings.LLM_PROVIDER,
        "llm_api_key": "ok" if settings.provider_api_key else "missing",
        "database": "ok" if await run_in_threadpool(repository.ping) else "unavailable",
        "auth": "ok" if settings.JWT_SECRET else "not_configured",
    }

    # Missing provider key only degrades reviews to the fallback result
    critical_checks = [checks["database"]]
    overall_status = "ready" if all(c == "ok" for c in critical_checks) else "not_ready"

    return HealthResponse(
        status=overall_status,
        timestamp=datetime.now(timezone.utc),
        environment=settings.ENVIRONMENT,
        version=VERSION,
        checks=checks
    )


@router.get(
    "/live",
    status_code=status.HTTP_200_OK,
    summary="Liveness check",
    description="Simple liveness probe for container orchestration"
)
async def liveness_check():
    return {"status": "alive"}
