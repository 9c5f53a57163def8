"""
Observability module for logging and error tracking.

This module provides:
- Structured logging setup
- Error tracking and reporting
"""

from app.observability.logging import setup_logging, LogContext
from app.observability.errors import (
    ErrorSeverity,
    ErrorTracker,
    capture_exception,
    get_error_tracker,
    setup_error_tracking,
)

__all__ = [
    "setup_logging",
    "LogContext",
    "ErrorSeverity",
    "ErrorTracker",
    "capture_exception",
    "get_error_tracker",
    "setup_error_tracking",
]
