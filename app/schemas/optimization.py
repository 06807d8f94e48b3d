from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from app.schemas.common import CamelModel
from app.schemas.resume import OptimizedContent, Suggestion


def _clamp_score(value: Any) -> Any:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return max(0, min(100, round(value)))
    if isinstance(value, str):
        try:
            return max(0, min(100, round(float(value.strip().rstrip("%")))))
        except ValueError:
            return value
    return value


class OptimizationResult(CamelModel):
    optimized_resume: OptimizedContent
    score: int = Field(ge=0, le=100)
    suggestions: list[Suggestion] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)

    @field_validator("score", mode="before")
    @classmethod
    def _score_in_range(cls, value: Any) -> Any:
        return _clamp_score(value)


class JobAnalysis(CamelModel):
    skills: list[str] = Field(default_factory=list)
    requirements: list[str] = Field(default_factory=list)
    keywords: list[str] = Field(default_factory=list)
    summary: str = ""

    @field_validator("skills", "requirements", "keywords", mode="before")
    @classmethod
    def _null_list(cls, value: Any) -> Any:
        return [] if value is None else value


class AnalyzeJobRequest(CamelModel):
    job_description: str | None = None


class GenerateResumeRequest(CamelModel):
    user_info: dict[str, Any] | None = None
    job_description: str | None = None
