"""
Analysis package for the code review service.

This package contains modules for inspecting submitted files before review:
- Language classification from the filename extension
"""

from app.analysis.language import classify_language, file_extension, UNKNOWN_LANGUAGE

__all__ = ["classify_language", "file_extension", "UNKNOWN_LANGUAGE"]
