"""Quiz records — generated questions and the page range they cover."""

from __future__ import annotations

from typing import Any

from pydantic import Field, field_validator, model_validator

from ._base import StudyRecord, as_str_list, as_text

PLACEHOLDER_OPTIONS = ["Option A", "Option B", "Option C", "Option D"]


class Question(StudyRecord):
    """A single quiz question.

    ``type`` is normally ``"mcq"`` or ``"assertion_reason"`` and ``answer`` a
    letter A-D, but neither is enforced: whatever the model sends is kept.
    """

    question: str = ""
    options: list[str] = Field(default_factory=lambda: list(PLACEHOLDER_OPTIONS))
    answer: str = "A"
    type: str = "mcq"
    difficulty: str = ""
    tnpsc_group: str = ""
    explanation: str = ""

    @field_validator("options", mode="before")
    @classmethod
    def coerce_options(cls, value: Any) -> list[str]:
        return as_str_list(value)

    @field_validator("question", "answer", "type", "difficulty", "tnpsc_group", "explanation", mode="before")
    @classmethod
    def coerce_text(cls, value: Any) -> str:
        return as_text(value)


class QuestionResult(StudyRecord):
    """Output of question generation; ``total_questions`` tracks ``questions``."""

    questions: list[Question] = Field(default_factory=list)
    summary: str = ""
    key_points: list[str] = Field(default_factory=list)
    difficulty: str = "medium"
    total_questions: int = 0

    @model_validator(mode="after")
    def count_questions(self) -> QuestionResult:
        self.total_questions = len(self.questions)
        return self


class QuizRange(StudyRecord):
    """Validated, inclusive page range for a practice quiz."""

    start_page: int = Field(ge=1)
    end_page: int = Field(ge=1)

    @property
    def page_count(self) -> int:
        return self.end_page - self.start_page + 1

    def __contains__(self, page_number: int) -> bool:
        return self.start_page <= page_number <= self.end_page
