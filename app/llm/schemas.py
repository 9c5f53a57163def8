"""
Structured schemas for LLM-based code quality analysis.

These Pydantic models define the expected structure of LLM responses,
ensuring constrained, parseable outputs. Field names are snake_case in
Python and camelCase on the wire (the shape the prompt asks for).
"""

from enum import Enum
from typing import Any, Dict, List, Optional
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    """Bug severity levels."""
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


class _WireModel(BaseModel):
    """Base model accepting both camelCase and snake_case keys."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class QualityAspect(_WireModel):
    """Score plus findings for one quality dimension (readability, modularity)."""

    score: int = Field(
        ...,
        ge=1,
        le=10,
        description="Score from 1 (poor) to 10 (excellent)"
    )
    issues: List[str] = Field(
        default_factory=list,
        description="Problems found, most important first"
    )
    suggestions: List[str] = Field(
        default_factory=list,
        description="Concrete improvements"
    )

    @field_validator("issues", "suggestions", mode="before")
    @classmethod
    def null_list_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class PotentialBug(_WireModel):
    """A bug candidate reported by the model."""

    line: Optional[int] = Field(
        None,
        ge=1,
        description="Line number in the submitted file, if known"
    )
    severity: Severity = Field(
        ...,
        description="Severity level of the bug"
    )
    description: str = Field(
        ...,
        description="What is wrong"
    )
    suggestion: Optional[str] = Field(
        None,
        description="How to fix it"
    )

    @field_validator("severity", mode="before")
    @classmethod
    def normalize_severity(cls, v: Any) -> Any:
        """Accept "High" / " LOW " as well as the canonical lower-case values."""
        if isinstance(v, str):
            return v.strip().lower()
        return v


class AnalysisResult(_WireModel):
    """Complete structured code quality analysis."""

    overall_score: int = Field(
        ...,
        ge=1,
        le=10,
        description="Overall quality score from 1 to 10"
    )
    readability: QualityAspect
    modularity: QualityAspect
    potential_bugs: List[PotentialBug] = Field(
        default_factory=list,
        description="Bug candidates, in the order reported"
    )
    best_practices: List[str] = Field(
        default_factory=list,
        description="Best-practice violations"
    )
    summary: str = Field(
        ...,
        description="Overall summary for the end user"
    )

    @property
    def bugs_count(self) -> int:
        """Number of bug candidates."""
        return len(self.potential_bugs)

    @field_validator("potential_bugs", "best_practices", mode="before")
    @classmethod
    def null_list_is_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys; fields the provider left out stay out."""
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)
