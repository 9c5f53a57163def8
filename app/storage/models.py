"""
SQLAlchemy ORM models for review persistence.

reviews - one immutable row per completed review. Scores are copied out of
          the analysis result at write time so history listings never have
          to read the JSON column.
"""

from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Index, Integer, JSON, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class ReviewRow(Base):
    """A persisted code review."""
    __tablename__ = "reviews"

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_id = Column(String(255), nullable=True)
    filename = Column(String(255), nullable=False)
    language = Column(String(32), nullable=False)
    code_content = Column(Text, nullable=False)

    # Denormalized from analysis_result
    overall_score = Column(Integer, nullable=False)
    readability_score = Column(Integer, nullable=False)
    modularity_score = Column(Integer, nullable=False)
    bugs_count = Column(Integer, nullable=False, default=0)

    analysis_result = Column(JSON, nullable=False)
    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)

    __table_args__ = (
        Index("idx_reviews_user_created", "user_id", "created_at"),
    )

    def __repr__(self):
        return f"<ReviewRow {self.id} user={self.user_id} file={self.filename}>"
