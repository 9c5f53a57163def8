"""
Repository abstraction for review persistence.

Provides a high-level interface for storing and retrieving review records,
hiding the SQLAlchemy session handling from the pipeline and the API.
"""

import logging
from dataclasses import dataclass, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from sqlalchemy import select, text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from app.llm.schemas import AnalysisResult
from app.review.errors import PersistenceError, ReviewNotFoundError
from app.storage.models import ReviewRow

logger = logging.getLogger(__name__)


def _as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


@dataclass(frozen=True)
class ReviewRecord:
    """
    Full stored review.

    Immutable: the scores are the ones copied out of analysis_result
    when the review was created.
    """

    id: int
    user_id: Optional[str]
    filename: str
    language: str
    code_content: str
    overall_score: int
    readability_score: int
    modularity_score: int
    bugs_count: int
    analysis_result: Dict[str, Any]
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat()
        return data

    @classmethod
    def from_row(cls, row: ReviewRow) -> 'ReviewRecord':
        return cls(
            id=row.id,
            user_id=row.user_id,
            filename=row.filename,
            language=row.language,
            code_content=row.code_content,
            overall_score=row.overall_score,
            readability_score=row.readability_score,
            modularity_score=row.modularity_score,
            bugs_count=row.bugs_count,
            analysis_result=row.analysis_result,
            created_at=_as_utc(row.created_at),
        )


@dataclass(frozen=True)
class ReviewSummary:
    """History entry: scores and file metadata, without code or analysis."""

    id: int
    filename: str
    language: str
    overall_score: int
    readability_score: int
    modularity_score: int
    bugs_count: int
    created_at: datetime

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        data = asdict(self)
        data['created_at'] = self.created_at.isoformat()
        return data


_SUMMARY_COLUMNS = (
    ReviewRow.id,
    ReviewRow.filename,
    ReviewRow.language,
    ReviewRow.overall_score,
    ReviewRow.readability_score,
    ReviewRow.modularity_score,
    ReviewRow.bugs_count,
    ReviewRow.created_at,
)


class ReviewRepository:
    """
    Repository for managing review records.

    Reviews are created once and never updated. Lookups are always scoped
    to the requesting owner.
    """

    def __init__(self, session_factory: sessionmaker):
        """
        Initialize repository.

        Args:
            session_factory: SQLAlchemy session factory
        """
        self.session_factory = session_factory

    def create(
        self,
        owner_id: Optional[str],
        filename: str,
        language: str,
        code: str,
        result: AnalysisResult,
    ) -> ReviewRecord:
        """
        Persist a completed review.

        Args:
            owner_id: Owning user
            filename: Declared filename
            language: Classified language
            code: Full text of the reviewed file
            result: Analysis to store

        Returns:
            The stored record, including its generated id and timestamp

        Raises:
            PersistenceError: If the write fails (nothing is stored)
        """
        row = ReviewRow(
            user_id=owner_id,
            filename=filename,
            language=language,
            code_content=code,
            overall_score=result.overall_score,
            readability_score=result.readability.score,
            modularity_score=result.modularity.score,
            bugs_count=result.bugs_count,
            analysis_result=result.to_wire(),
        )

        try:
            with self.session_factory() as session, session.begin():
                session.add(row)
                session.flush()
                record = ReviewRecord.from_row(row)
        except SQLAlchemyError as e:
            logger.error(f"Failed to store review for {filename}: {e}")
            raise PersistenceError("Failed to store review") from e

        logger.info(f"Created review {record.id} for {filename}")
        return record

    def list_by_owner(self, owner_id: str) -> List[ReviewSummary]:
        """
        List an owner's reviews, newest first.

        Raises:
            PersistenceError: If the query fails
        """
        stmt = (
            select(*_SUMMARY_COLUMNS)
            .where(ReviewRow.user_id == owner_id)
            .order_by(ReviewRow.created_at.desc(), ReviewRow.id.desc())
        )

        try:
            with self.session_factory() as session:
                rows = session.execute(stmt).all()
        except SQLAlchemyError as e:
            logger.error(f"Failed to list reviews: {e}")
            raise PersistenceError("Failed to fetch review history") from e

        return [
            ReviewSummary(
                id=r.id,
                filename=r.filename,
                language=r.language,
                overall_score=r.overall_score,
                readability_score=r.readability_score,
                modularity_score=r.modularity_score,
                bugs_count=r.bugs_count,
                created_at=_as_utc(r.created_at),
            )
            for r in rows
        ]

    def get_by_id(self, review_id: int, owner_id: str) -> ReviewRecord:
        """
        Fetch one review owned by owner_id.

        Raises:
            ReviewNotFoundError: If the review does not exist or has another owner
            PersistenceError: If the query fails
        """
        stmt = select(ReviewRow).where(
            ReviewRow.id == review_id,
            ReviewRow.user_id == owner_id,
        )

        try:
            with self.session_factory() as session:
                row = session.execute(stmt).scalar_one_or_none()
                record = ReviewRecord.from_row(row) if row is not None else None
        except SQLAlchemyError as e:
            logger.error(f"Failed to fetch review {review_id}: {e}")
            raise PersistenceError("Failed to fetch review") from e

        if record is None:
            raise ReviewNotFoundError(review_id)
        return record

    def ping(self) -> bool:
        """True when the database answers a trivial query."""
        try:
            with self.session_factory() as session:
                session.execute(text("SELECT 1"))
            return True
        except SQLAlchemyError as e:
            logger.warning(f"Database ping failed: {e}")
            return False
