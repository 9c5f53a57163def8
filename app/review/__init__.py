"""
Review module for turning uploads into stored reviews.

This module provides:
- Upload intake (validation and scoped reading)
- Domain errors shared with the storage layer
- The review pipeline (app.review.pipeline)
"""

from app.review.errors import (
    ReviewServiceError,
    SubmissionError,
    PersistenceError,
    ReviewNotFoundError,
)
from app.review.intake import SourceSubmission, read_upload, validate_submission

__all__ = [
    "ReviewServiceError",
    "SubmissionError",
    "PersistenceError",
    "ReviewNotFoundError",
    "SourceSubmission",
    "read_upload",
    "validate_submission",
]
