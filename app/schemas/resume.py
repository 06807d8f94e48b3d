from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field, field_validator

from app.schemas.common import CamelModel


class PersonalInfo(CamelModel):
    name: str | None = None
    email: str | None = None
    phone: str | None = None
    location: str | None = None
    linkedin: str | None = None
    github: str | None = None


class ExperienceEntry(CamelModel):
    title: str | None = None
    company: str | None = None
    location: str | None = None
    start_date: str | None = None
    end_date: str | None = None
    current: bool = False
    description: list[str] = Field(default_factory=list)

    @field_validator("description", mode="before")
    @classmethod
    def _split_description(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, str):
            return [line.strip() for line in value.splitlines() if line.strip()]
        return value


class EducationEntry(CamelModel):
    degree: str | None = None
    institution: str | None = None
    location: str | None = None
    graduation_date: str | None = None
    gpa: str | None = None


class SkillCategory(CamelModel):
    category: str | None = None
    items: list[str] = Field(default_factory=list)


class Project(CamelModel):
    title: str | None = None
    description: str | None = None
    technologies: list[str] = Field(default_factory=list)


class ResumeContent(CamelModel):
    personal_info: PersonalInfo | None = None
    summary: str | None = None
    experience: list[ExperienceEntry] = Field(default_factory=list)
    education: list[EducationEntry] = Field(default_factory=list)
    skills: list[SkillCategory] = Field(default_factory=list)
    projects: list[Project] = Field(default_factory=list)


class OptimizedContent(CamelModel):
    """Provider output. Experience and skills may come back either as the
    structured entries of the original resume or as plain rewritten lines."""

    personal_info: PersonalInfo | None = None
    summary: str | None = None
    experience: list[ExperienceEntry | str] | None = None
    education: list[EducationEntry] | None = None
    skills: list[SkillCategory | str] | None = None
    projects: list[Project] | None = None

    @classmethod
    def from_content(cls, content: ResumeContent) -> "OptimizedContent":
        return cls.model_validate(content.model_dump())


class Suggestion(CamelModel):
    section: str = "general"
    original: str = ""
    optimized: str = ""
    reason: str = ""

    @field_validator("section", "original", "optimized", "reason", mode="before")
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        if value is None:
            return ""
        if isinstance(value, (list, tuple)):
            return "\n".join(str(item) for item in value)
        return value


class ResumeSummary(CamelModel):
    id: str
    owner: str
    title: str
    original_content: ResumeContent | None = None
    job_description: str | None = None
    optimization_score: int | None = Field(default=None, ge=0, le=100)
    keywords: list[str] = Field(default_factory=list)
    created_at: datetime
    updated_at: datetime

    @field_validator("title")
    @classmethod
    def _title_required(cls, value: str) -> str:
        if not value or not value.strip():
            raise ValueError("Resume title is required")
        return value.strip()


class Resume(ResumeSummary):
    optimized_content: OptimizedContent | None = None
    ai_suggestions: list[Suggestion] = Field(default_factory=list)

    def summary_view(self) -> ResumeSummary:
        return ResumeSummary.model_validate(self.model_dump(exclude={"optimized_content", "ai_suggestions"}))


class ResumeCreate(CamelModel):
    title: str | None = None
    original_content: ResumeContent | None = None
    job_description: str | None = None
    keywords: list[str] = Field(default_factory=list)


class ResumeUpdate(CamelModel):
    title: str | None = None
    original_content: ResumeContent | None = None
    optimized_content: OptimizedContent | None = None
    job_description: str | None = None
    optimization_score: int | None = None
    ai_suggestions: list[Suggestion] | None = None
    keywords: list[str] | None = None


class OptimizeRequest(CamelModel):
    job_description: str | None = None
