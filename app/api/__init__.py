"""
API package for the code review service.

This package contains all API route handlers.
"""

from app.api import health, reviews

__all__ = ["health", "reviews"]
