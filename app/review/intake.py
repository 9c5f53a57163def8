"""
Upload intake: validation and scoped reading of the submitted file.
"""

import logging
from dataclasses import dataclass
from typing import FrozenSet, Optional

from fastapi import UploadFile

from app.analysis.language import file_extension
from app.review.errors import SubmissionError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS: FrozenSet[str] = frozenset(
    {"js", "jsx", "ts", "tsx", "py", "java", "cpp", "c", "go", "rs"}
)
MAX_UPLOAD_SIZE_BYTES = 5 * 1024 * 1024


@dataclass(frozen=True)
class SourceSubmission:
    """An uploaded file held in memory for the duration of one request."""

    filename: str
    content: bytes

    @property
    def size(self) -> int:
        return len(self.content)

    def text(self) -> str:
        """Content decoded as UTF-8; undecodable bytes become U+FFFD."""
        return self.content.decode("utf-8", errors="replace")


def validate_filename(filename: Optional[str]) -> str:
    """
    Check that a file was sent and that its extension is allowed.

    Extension matching is case-insensitive.

    Raises:
        SubmissionError: If no file or a disallowed extension
    """
    if not filename:
        raise SubmissionError("No file uploaded")
    if file_extension(filename) not in ALLOWED_EXTENSIONS:
        raise SubmissionError("Invalid file type")
    return filename


def validate_size(size: int, max_bytes: int = MAX_UPLOAD_SIZE_BYTES) -> None:
    """
    Raises:
        SubmissionError: If the file is larger than max_bytes
    """
    if size > max_bytes:
        raise SubmissionError(f"File too large (maximum {max_bytes} bytes)")


def validate_submission(submission: SourceSubmission, max_bytes: int = MAX_UPLOAD_SIZE_BYTES) -> None:
    """Full intake check on an already-read submission."""
    validate_filename(submission.filename)
    validate_size(submission.size, max_bytes)


async def read_upload(
    upload: Optional[UploadFile],
    max_bytes: int = MAX_UPLOAD_SIZE_BYTES,
) -> SourceSubmission:
    """
    Validate and read an uploaded file into memory.

    Reads at most max_bytes + 1 bytes, enough to detect an oversized file.
    The upload's spooled storage is closed on every exit path.

    Args:
        upload: The multipart file field, or None when absent
        max_bytes: Size limit in bytes (inclusive)

    Returns:
        SourceSubmission with the file content

    Raises:
        SubmissionError: If the upload is missing, of a disallowed type,
            or larger than max_bytes
    """
    if upload is None:
        raise SubmissionError("No file uploaded")

    try:
        filename = validate_filename(upload.filename)
        content = await upload.read(max_bytes + 1)
        validate_size(len(content), max_bytes)
    finally:
        await upload.close()

    logger.debug(f"Read upload {filename} ({len(content)} bytes)")
    return SourceSubmission(filename=filename, content=content)
