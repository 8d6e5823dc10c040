"""Base record with camelCase aliases and best-effort field repair.

Gemini fills the JSON shapes in the prompts only loosely: keys go missing,
come back as ``null``, or a list arrives as a single string. Records built
on :class:`StudyRecord` absorb all of that into type defaults instead of
failing validation.
"""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel

IMPORTANCE_LEVELS = ("high", "medium", "low")


class StudyRecord(BaseModel):
    """Shared config: camelCase wire names, snake_case attributes, nulls dropped."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_validator(mode="before")
    @classmethod
    def drop_nulls(cls, data: Any) -> Any:
        if isinstance(data, dict):
            return {k: v for k, v in data.items() if v is not None}
        return data


def as_str_list(value: Any) -> list[str]:
    """Coerce a loosely typed reply value into a list of strings."""
    if isinstance(value, str):
        return [value] if value.strip() else []
    if isinstance(value, (list, tuple)):
        return [item if isinstance(item, str) else str(item) for item in value if item is not None]
    return []


def as_text(value: Any) -> str:
    """Coerce a scalar reply value into a string."""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return " ".join(as_str_list(value))
    return str(value)


def as_importance(value: Any) -> str:
    """Lower-case an importance level, falling back to ``"medium"``."""
    if isinstance(value, str):
        level = value.strip().lower()
        if level in IMPORTANCE_LEVELS:
            return level
    return "medium"
