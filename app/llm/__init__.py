"""
LLM integration module for code quality analysis.

This module provides:
- Structured schemas for LLM outputs
- The review prompt
- Analysis client abstraction (Gemini/OpenAI/Anthropic)
- The neutral fallback result
"""

from app.llm.fallback import fallback_result
from app.llm.model import AnalysisClient, ProviderError, get_analysis_client, parse_analysis
from app.llm.prompts import build_review_prompt
from app.llm.schemas import (
    AnalysisResult,
    PotentialBug,
    QualityAspect,
    Severity,
)

__all__ = [
    "AnalysisClient",
    "ProviderError",
    "get_analysis_client",
    "parse_analysis",
    "build_review_prompt",
    "fallback_result",
    "AnalysisResult",
    "PotentialBug",
    "QualityAspect",
    "Severity",
]
