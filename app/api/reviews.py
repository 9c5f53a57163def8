"""
Review endpoints.

Upload a source file for review (authenticated or guest), list the caller's
review history, and fetch one stored review.
"""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import JSONResponse

from app.config import Settings
from app.dependencies import (
    get_app_settings,
    get_current_user_id,
    get_review_pipeline,
    get_review_repository,
)
from app.review.pipeline import ReviewPipeline
from app.storage.repository import ReviewRepository

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post(
    "/upload",
    status_code=status.HTTP_201_CREATED,
    summary="Review an uploaded source file",
    description="Analyzes the file in the codeFile field and stores the review for the caller"
)
async def upload_code(
    code_file: Optional[UploadFile] = File(None, alias="codeFile"),
    user_id: str = Depends(get_current_user_id),
    pipeline: ReviewPipeline = Depends(get_review_pipeline),
):
    """
    Authenticated upload.

    Returns:
        JSONResponse: The stored review (201)
    """
    record = await pipeline.review_upload(code_file, owner_id=user_id)

    return JSONResponse(
        status_code=status.HTTP_201_CREATED,
        content={
            "message": "Code analyzed successfully",
            "review": record.to_dict(),
        }
    )


@router.post(
    "/guest-upload",
    summary="Review an uploaded source file without an account",
    description="Analyzes the file in the codeFile field; the result is not stored"
)
async def upload_code_guest(
    code_file: Optional[UploadFile] = File(None, alias="codeFile"),
    settings: Settings = Depends(get_app_settings),
    pipeline: ReviewPipeline = Depends(get_review_pipeline),
):
    """
    Guest upload. The analysis is returned directly and is not listable
    or re-fetchable afterwards.
    """
    if not settings.GUEST_REVIEWS_ENABLED:
        raise HTTPException(status_code=404, detail="Not Found")

    guest_review = await pipeline.review_guest_upload(code_file)

    return {
        "message": "Code analyzed successfully",
        "review": guest_review.to_dict(),
    }


@router.get(
    "/history",
    summary="List the caller's reviews",
    description="Review summaries, newest first"
)
def get_review_history(
    user_id: str = Depends(get_current_user_id),
    repository: ReviewRepository = Depends(get_review_repository),
):
    summaries = repository.list_by_owner(user_id)
    return {"reviews": [summary.to_dict() for summary in summaries]}


@router.get(
    "/{review_id}",
    summary="Fetch one review",
    description="Full review including code and analysis; 404 unless owned by the caller"
)
def get_review(
    review_id: int,
    user_id: str = Depends(get_current_user_id),
    repository: ReviewRepository = Depends(get_review_repository),
):
    record = repository.get_by_id(review_id, owner_id=user_id)
    return {"review": record.to_dict()}
