"""Analysis records — key points and study points extracted from content."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator

from ..types import Importance
from ._base import StudyRecord, as_importance, as_str_list, as_text


class StudyPoint(StudyRecord):
    """A structured study note with exam relevance and a memory aid.

    Every field is optional at the source; missing values default to empty
    strings and ``"medium"`` levels.
    """

    title: str = ""
    description: str = ""
    importance: Importance = "medium"
    tnpsc_relevance: str = ""
    tnpsc_priority: Importance = "medium"
    memory_tip: str = ""

    @field_validator("importance", "tnpsc_priority", mode="before")
    @classmethod
    def coerce_level(cls, value: Any) -> str:
        return as_importance(value)

    @field_validator("title", "description", "tnpsc_relevance", "memory_tip", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return as_text(value)


class _KeyPointsMixin(StudyRecord):
    """Fields shared by whole-content and per-page analyses."""

    key_points: list[str] = Field(default_factory=list)
    summary: str = ""
    tnpsc_relevance: str = ""

    @field_validator("key_points", mode="before")
    @classmethod
    def coerce_key_points(cls, value: Any) -> list[str]:
        return as_str_list(value)

    @field_validator("summary", "tnpsc_relevance", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return as_text(value)


def _as_study_points(value: Any) -> list:
    if isinstance(value, dict):
        return [value]
    if isinstance(value, list):
        return [item for item in value if isinstance(item, (dict, StudyPoint))]
    return []


class AnalysisResult(_KeyPointsMixin):
    """Output of one image or whole-document analysis call."""

    study_points: list[StudyPoint] = Field(default_factory=list)
    tnpsc_categories: list[str] = Field(default_factory=list)
    main_topic: str = ""
    difficulty: str = ""

    @field_validator("study_points", mode="before")
    @classmethod
    def coerce_study_points(cls, value: Any) -> list:
        return _as_study_points(value)

    @field_validator("tnpsc_categories", mode="before")
    @classmethod
    def coerce_categories(cls, value: Any) -> list[str]:
        return as_str_list(value)

    @field_validator("main_topic", "difficulty", mode="before")
    @classmethod
    def coerce_extra_text(cls, value: Any) -> str:
        return as_text(value)


class PageAnalysis(_KeyPointsMixin):
    """Analysis of one page of a document."""

    page_number: int = Field(ge=1)
    study_points: list[StudyPoint] = Field(default_factory=list)

    @field_validator("study_points", mode="before")
    @classmethod
    def coerce_study_points(cls, value: Any) -> list:
        return _as_study_points(value)

    def as_analysis(self) -> AnalysisResult:
        """View this page as a plain analysis (for question generation)."""
        return AnalysisResult(
            key_points=list(self.key_points),
            summary=self.summary,
            tnpsc_relevance=self.tnpsc_relevance,
            study_points=list(self.study_points),
        )


class PagePreview(_KeyPointsMixin):
    """Quick single-page analysis taken straight from a PDF."""

    page: int = Field(ge=1)
    importance: Importance = "medium"

    @field_validator("importance", mode="before")
    @classmethod
    def coerce_level(cls, value: Any) -> str:
        return as_importance(value)


class DocumentAnalysis(StudyRecord):
    """Aggregate of a page-by-page document analysis.

    Pages below the content threshold land in ``skipped_pages``; pages whose
    Gemini call or reply failed land in ``failed_pages``.
    """

    page_analyses: list[PageAnalysis] = Field(default_factory=list)
    overall_summary: str = ""
    total_key_points: list[str] = Field(default_factory=list)
    tnpsc_categories: list[str] = Field(default_factory=list)
    skipped_pages: list[int] = Field(default_factory=list)
    failed_pages: list[int] = Field(default_factory=list)
