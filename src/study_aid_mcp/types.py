"""Shared type aliases for records and tool parameters."""

from __future__ import annotations

from typing import Annotated, Literal

from pydantic import Field

# ── Literal enums ────────────────────────────────────────────────────────────

Language = Literal["english", "tamil"]
Difficulty = Literal["easy", "medium", "hard"]
Importance = Literal["high", "medium", "low"]

# ── Annotated aliases ────────────────────────────────────────────────────────

PageNumber = Annotated[int, Field(ge=1, description="1-based page number")]
QuestionCount = Annotated[int, Field(ge=1, le=50, description="Number of questions to generate")]
FilePath = Annotated[str, Field(min_length=1, description="Local file path")]
