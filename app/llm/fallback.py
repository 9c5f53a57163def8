"""
Neutral analysis used when the provider cannot produce one.
"""

from app.llm.schemas import AnalysisResult, QualityAspect

FALLBACK_SCORE = 5
UNAVAILABLE_ISSUE = "Automated analysis is currently unavailable."
UNAVAILABLE_SUGGESTION = "Please try again later or review the code manually."
UNAVAILABLE_PRACTICE = "Analysis temporarily unavailable"
FALLBACK_SUMMARY = (
    "The code analysis service could not be reached or returned an unreadable "
    "response, so neutral scores were assigned. Please resubmit the file later "
    "for a full review."
)


def _unavailable_aspect() -> QualityAspect:
    return QualityAspect(
        score=FALLBACK_SCORE,
        issues=[UNAVAILABLE_ISSUE],
        suggestions=[UNAVAILABLE_SUGGESTION],
    )


def fallback_result() -> AnalysisResult:
    """Build the fixed neutral AnalysisResult (a fresh instance per call)."""
    return AnalysisResult(
        overall_score=FALLBACK_SCORE,
        readability=_unavailable_aspect(),
        modularity=_unavailable_aspect(),
        potential_bugs=[],
        best_practices=[UNAVAILABLE_PRACTICE],
        summary=FALLBACK_SUMMARY,
    )
