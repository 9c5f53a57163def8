"""
Review pipeline orchestrator.

Coordinates one review per request: validate the upload, classify its
language, analyze it with the LLM (falling back to a neutral result on
provider failure), persist it, and hand back the stored review.
"""

import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from fastapi import UploadFile
from fastapi.concurrency import run_in_threadpool

from app.analysis.language import classify_language
from app.config import Settings
from app.llm.model import AnalysisClient
from app.llm.schemas import AnalysisResult
from app.observability.errors import ErrorSeverity, capture_exception
from app.observability.logging import LogContext
from app.review.errors import PersistenceError
from app.review.intake import SourceSubmission, read_upload, validate_submission
from app.storage.repository import ReviewRecord, ReviewRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GuestReview:
    """Analysis returned to an anonymous caller; never stored, so it has no id."""

    filename: str
    language: str
    analysis_result: Dict[str, Any]
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        return {
            'filename': self.filename,
            'language': self.language,
            'analysis_result': self.analysis_result,
            'created_at': self.created_at.isoformat(),
        }


class ReviewPipeline:
    """
    Per-request review workflow.

    Workflow:
    1. Validate the submission (before any external call)
    2. Classify the language from the filename
    3. Analyze (never fails; degrades to the fallback result)
    4. Persist (authenticated reviews only)
    """

    def __init__(
        self,
        settings: Settings,
        analysis_client: AnalysisClient,
        repository: ReviewRepository,
    ):
        """
        Initialize pipeline.

        Args:
            settings: Application settings
            analysis_client: Client for the configured LLM provider
            repository: Review store
        """
        self.settings = settings
        self.analysis_client = analysis_client
        self.repository = repository

    async def review_upload(self, upload: Optional[UploadFile], owner_id: str) -> ReviewRecord:
        """Read an uploaded file and run the authenticated pipeline on it."""
        submission = await read_upload(upload, self.settings.MAX_UPLOAD_SIZE_BYTES)
        return await self.run(submission, owner_id)

    async def review_guest_upload(self, upload: Optional[UploadFile]) -> GuestReview:
        """Read an uploaded file and run the guest pipeline on it."""
        submission = await read_upload(upload, self.settings.MAX_UPLOAD_SIZE_BYTES)
        return await self.run_guest(submission)

    async def run(self, submission: SourceSubmission, owner_id: str) -> ReviewRecord:
        """
        Review a submission and store the result under owner_id.

        Raises:
            SubmissionError: If the submission fails validation
            PersistenceError: If the review cannot be stored
        """
        language, code = self._prepare(submission)

        with LogContext(filename=submission.filename, language=language, owner_id=owner_id):
            result = await self._analyze(code, submission.filename, language)

            try:
                record = await run_in_threadpool(
                    self.repository.create,
                    owner_id,
                    submission.filename,
                    language,
                    code,
                    result,
                )
            except PersistenceError as e:
                capture_exception(
                    e,
                    severity=ErrorSeverity.ERROR,
                    context={"filename": submission.filename, "owner_id": owner_id},
                )
                raise

            logger.info(f"Review {record.id} stored")
        return record

    async def run_guest(self, submission: SourceSubmission) -> GuestReview:
        """
        Review a submission without storing it.

        Raises:
            SubmissionError: If the submission fails validation
        """
        language, code = self._prepare(submission)

        with LogContext(filename=submission.filename, language=language, guest=True):
            result = await self._analyze(code, submission.filename, language)

        return GuestReview(
            filename=submission.filename,
            language=language,
            analysis_result=result.to_wire(),
            created_at=datetime.now(timezone.utc),
        )

    def _prepare(self, submission: SourceSubmission):
        validate_submission(submission, self.settings.MAX_UPLOAD_SIZE_BYTES)
        return classify_language(submission.filename), submission.text()

    async def _analyze(self, code: str, filename: str, language: str) -> AnalysisResult:
        start_time = time.monotonic()
        result = await self.analysis_client.analyze(code, filename, language)
        logger.info(
            f"Analysis finished in {time.monotonic() - start_time:.2f}s "
            f"(overall score {result.overall_score})"
        )
        return result
