"""
Errors raised by the review pipeline and the review store.

Provider failures are not listed here: they never leave the analysis
client (see app.llm.model.ProviderError).
"""


class ReviewServiceError(Exception):
    """Base exception for review service errors."""
    pass


class SubmissionError(ReviewServiceError):
    """Upload rejected before analysis: missing file, bad extension, too large."""
    pass


class PersistenceError(ReviewServiceError):
    """The review store could not write or read a review."""
    pass


class ReviewNotFoundError(ReviewServiceError):
    """No review with this id belongs to the requesting owner."""

    def __init__(self, review_id: int):
        super().__init__("Review not found")
        self.review_id = review_id
