"""
Source language classification by filename extension.
"""

from typing import Dict

UNKNOWN_LANGUAGE = "unknown"

EXTENSION_LANGUAGES: Dict[str, str] = {
    "js": "javascript",
    "jsx": "javascript",
    "ts": "typescript",
    "tsx": "typescript",
    "py": "python",
    "java": "java",
    "cpp": "c++",
    "c": "c",
    "go": "go",
    "rs": "rust",
}


def file_extension(filename: str) -> str:
    """Lower-cased text after the last dot, or "" when there is none."""
    if "." not in filename:
        return ""
    return filename.rsplit(".", 1)[1].lower()


def classify_language(filename: str) -> str:
    """
    Map a filename to its declared source language.

    Unrecognized extensions are not an error; they classify as "unknown".

    Args:
        filename: Declared name of the uploaded file

    Returns:
        Language label such as "python" or "rust"
    """
    return EXTENSION_LANGUAGES.get(file_extension(filename), UNKNOWN_LANGUAGE)
