"""
Error tracking for the review pipeline.

Captures provider and persistence failures with their diagnostic context
(raw provider text, filename, owner) so they can be inspected after the
request that hit them has already answered.
"""

import logging
import traceback
import uuid
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Deque, Dict, List, Optional

from app.config import Settings

logger = logging.getLogger(__name__)

# Captured records kept in memory per process
MAX_ERROR_RECORDS = 500


class ErrorSeverity(str, Enum):
    """Error severity levels."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


_LOG_LEVELS = {
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


@dataclass
class ErrorRecord:
    """Record of a captured error."""

    error_id: str
    timestamp: datetime
    severity: ErrorSeverity
    exception_type: str
    exception_message: str
    traceback: str
    context: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            'error_id': self.error_id,
            'timestamp': self.timestamp.isoformat(),
            'severity': self.severity.value,
            'exception_type': self.exception_type,
            'exception_message': self.exception_message,
            'traceback': self.traceback,
            'context': self.context,
        }


class ErrorTracker:
    """
    Error tracker for capturing and reporting errors.

    Records are logged immediately and kept in a bounded in-memory buffer.
    """

    def __init__(self, settings: Settings):
        self.enabled = settings.ERROR_TRACKING_ENABLED
        self.errors: Deque[ErrorRecord] = deque(maxlen=MAX_ERROR_RECORDS)
        logger.info(f"Error tracker initialized (enabled: {self.enabled})")

    def capture_exception(
        self,
        exception: BaseException,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: Optional[Dict[str, Any]] = None,
    ) -> str:
        """
        Capture an exception.

        Args:
            exception: The exception to capture
            severity: Error severity level
            context: Additional diagnostic data

        Returns:
            Error ID ("" when tracking is disabled)
        """
        if not self.enabled:
            return ""

        record = ErrorRecord(
            error_id=str(uuid.uuid4()),
            timestamp=datetime.now(timezone.utc),
            severity=severity,
            exception_type=type(exception).__name__,
            exception_message=str(exception),
            traceback=''.join(traceback.format_exception(
                type(exception), exception, exception.__traceback__
            )),
            context=context or {},
        )
        self.errors.append(record)

        logger.log(
            _LOG_LEVELS[severity],
            f"Error captured: {record.exception_type}: {record.exception_message}",
            extra={'error_id': record.error_id, 'error_context': record.context},
        )
        return record.error_id

    def get_errors(
        self,
        severity: Optional[ErrorSeverity] = None,
        limit: int = 100,
    ) -> List[ErrorRecord]:
        """Most recent errors first, optionally filtered by severity."""
        filtered = [e for e in self.errors if severity is None or e.severity == severity]
        filtered.sort(key=lambda e: e.timestamp, reverse=True)
        return filtered[:limit]


# Global error tracker instance
_error_tracker: Optional[ErrorTracker] = None


def setup_error_tracking(settings: Settings) -> ErrorTracker:
    """Initialize the global error tracker."""
    global _error_tracker
    _error_tracker = ErrorTracker(settings)
    return _error_tracker


def get_error_tracker() -> Optional[ErrorTracker]:
    """The global error tracker, or None before setup_error_tracking()."""
    return _error_tracker


def capture_exception(
    exception: BaseException,
    severity: ErrorSeverity = ErrorSeverity.ERROR,
    context: Optional[Dict[str, Any]] = None,
) -> str:
    """
    Convenience function to capture an exception.

    Falls back to plain logging when the tracker has not been set up.
    """
    tracker = get_error_tracker()
    if tracker is not None:
        return tracker.capture_exception(exception, severity=severity, context=context)

    logger.log(
        _LOG_LEVELS[severity],
        f"{type(exception).__name__}: {exception}",
        extra={'error_context': context or {}},
    )
    return ""
