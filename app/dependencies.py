"""
Shared dependencies for dependency injection.

This module provides reusable dependencies for FastAPI routes: the settings,
analysis client and review store built at startup, the per-request review
pipeline, and verification of the caller's bearer token.
"""

import logging
from typing import Optional

import jwt
from fastapi import Depends, Header, HTTPException, Request

from app.config import Settings
from app.llm.model import AnalysisClient
from app.review.pipeline import ReviewPipeline
from app.storage.repository import ReviewRepository

logger = logging.getLogger(__name__)


# ============================================================================
# Application State
# ============================================================================

def get_app_settings(request: Request) -> Settings:
    """Settings the application was created with."""
    return request.app.state.settings


def get_analysis_client(request: Request) -> AnalysisClient:
    """Analysis client for the configured LLM provider."""
    return request.app.state.analysis_client


def get_review_repository(request: Request) -> ReviewRepository:
    """Review store backed by the configured database."""
    return request.app.state.review_repository


def get_review_pipeline(
    settings: Settings = Depends(get_app_settings),
    analysis_client: AnalysisClient = Depends(get_analysis_client),
    repository: ReviewRepository = Depends(get_review_repository),
) -> ReviewPipeline:
    """Review pipeline wired to the shared client and store."""
    return ReviewPipeline(
        settings=settings,
        analysis_client=analysis_client,
        repository=repository,
    )


# ============================================================================
# Authentication
# ============================================================================

def get_current_user_id(
    authorization: Optional[str] = Header(None),
    settings: Settings = Depends(get_app_settings),
) -> str:
    """
    Verifies the bearer token and returns the caller's user id.

    Tokens are issued by the upstream auth service; the user id is read
    from the "userId" claim, falling back to "sub".

    Raises:
        HTTPException: 401 if the token is missing or invalid,
            503 if no JWT secret is configured.
    """
    if not settings.JWT_SECRET:
        raise HTTPException(
            status_code=503,
            detail="Authentication is not configured"
        )

    scheme, _, token = (authorization or "").partition(" ")
    if scheme.lower() != "bearer" or not token:
        raise HTTPException(
            status_code=401,
            detail="Missing bearer token"
        )

    try:
        claims = jwt.decode(
            token.strip(),
            settings.JWT_SECRET,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except jwt.PyJWTError as e:
        logger.info(f"Rejected bearer token: {e}")
        raise HTTPException(
            status_code=401,
            detail="Invalid token"
        )

    user_id = claims.get("userId", claims.get("sub"))
    if user_id is None or str(user_id) == "":
        raise HTTPException(
            status_code=401,
            detail="Token has no user id"
        )

    return str(user_id)
