"""Response normalizer — Gemini reply text to typed records.

Pure text-to-record transforms with no HTTP knowledge. Failures are limited
to :class:`EmptyResponse` (no text) and :class:`MalformedJson` (unparseable
or wrong top-level shape); missing fields are filled by the record defaults.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from .errors import EmptyResponse, MalformedJson
from .models._base import as_str_list
from .models.analysis import AnalysisResult, PageAnalysis, PagePreview
from .models.quiz import PLACEHOLDER_OPTIONS, Question

logger = logging.getLogger(__name__)

_LEADING_FENCE = re.compile(r"^```(?:json)?\s*", flags=re.IGNORECASE)
_TRAILING_FENCE = re.compile(r"\s*```$")


def strip_code_fences(text: str) -> str:
    """Remove a leading ```` ```json ```` marker, a trailing ```` ``` ```` and whitespace."""
    s = text.strip()
    s = _LEADING_FENCE.sub("", s)
    s = _TRAILING_FENCE.sub("", s)
    return s.strip()


def parse_reply(text: str | None) -> Any:
    """Parse the model's reply text as JSON.

    Raises:
        EmptyResponse: If *text* is None or blank.
        MalformedJson: If the fence-stripped text is not valid JSON.
    """
    if text is None or not text.strip():
        raise EmptyResponse("No content received from Gemini API")
    cleaned = strip_code_fences(text)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise MalformedJson(f"Gemini reply is not valid JSON: {exc}", raw=text) from exc


def _require_object(data: Any, raw: str) -> dict:
    if not isinstance(data, dict):
        raise MalformedJson(
            f"Expected a JSON object, got {type(data).__name__}", raw=raw,
        )
    return data


def normalize_analysis(text: str | None) -> AnalysisResult:
    data = _require_object(parse_reply(text), text or "")
    return AnalysisResult.model_validate(data)


def _page_analysis(data: dict, page_number: int) -> PageAnalysis:
    data = {k: v for k, v in data.items() if k not in ("pageNumber", "page_number")}
    return PageAnalysis.model_validate({**data, "pageNumber": page_number})


def normalize_page_analysis(text: str | None, page_number: int) -> PageAnalysis:
    return _page_analysis(_require_object(parse_reply(text), text or ""), page_number)


def normalize_batch_page(text: str | None, page_number: int) -> tuple[PageAnalysis, list[str]]:
    """Parse one batch page reply into its record plus the categories it names."""
    data = _require_object(parse_reply(text), text or "")
    return _page_analysis(data, page_number), as_str_list(data.get("tnpscCategories"))


def normalize_page_preview(text: str | None, page: int) -> PagePreview:
    data = _require_object(parse_reply(text), text or "")
    data.pop("page", None)
    return PagePreview.model_validate({**data, "page": page})


def format_question(raw: dict) -> Question:
    """Apply the question formatting pass to one raw question object.

    ``"short"`` questions become ``"mcq"``, a non-list ``options`` gets the
    four placeholder options, and a missing answer becomes ``"A"``. Anything
    else is kept as sent.
    """
    item = dict(raw)
    if item.get("type") == "short":
        item["type"] = "mcq"
    if not isinstance(item.get("options"), list):
        item["options"] = list(PLACEHOLDER_OPTIONS)
    if not item.get("answer"):
        item["answer"] = "A"
    return Question.model_validate(item)


def normalize_questions(text: str | None) -> list[Question]:
    """Parse a question-generation reply into formatted questions.

    Accepts a bare JSON array or an object wrapping it under ``questions``.
    Items that are not JSON objects are dropped.
    """
    data = parse_reply(text)
    if isinstance(data, dict) and isinstance(data.get("questions"), list):
        data = data["questions"]
    if not isinstance(data, list):
        raise MalformedJson(
            f"Expected a JSON array of questions, got {type(data).__name__}", raw=text or "",
        )
    dropped = sum(1 for item in data if not isinstance(item, dict))
    if dropped:
        logger.warning("Dropped %d non-object question item(s)", dropped)
    return [format_question(item) for item in data if isinstance(item, dict)]
