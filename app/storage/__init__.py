"""
Storage module for persisting review data.

This module provides:
- SQLAlchemy model and engine setup for the reviews table
- Repository abstraction for review persistence
"""

from app.storage.database import create_db_engine, create_session_factory, init_database
from app.storage.repository import ReviewRepository, ReviewRecord, ReviewSummary

__all__ = [
    "create_db_engine",
    "create_session_factory",
    "init_database",
    "ReviewRepository",
    "ReviewRecord",
    "ReviewSummary",
]
