"""Request builder — prompt text plus Gemini request envelope.

Builders here are pure: they assemble the instruction string (task framing,
language directive, embedded content, JSON shape) and the generation
parameters, but never touch the network.
"""

from __future__ import annotations

import base64
from collections.abc import Sequence
from dataclasses import dataclass

from google.genai import types

from .models.analysis import AnalysisResult
from .prompts.study import (
    ANALYSIS_BLOCK,
    DOCUMENT_ANALYSIS,
    IMAGE_ANALYSIS,
    LANGUAGE_INSTRUCTIONS,
    PAGE_ANALYSIS,
    PAGE_DETAIL,
    PAGE_PREVIEW,
    QUESTION_GENERATION,
    QUESTION_LANGUAGE_INSTRUCTIONS,
    TAMIL_SCRIPT_SUFFIX,
)

DEFAULT_TEMPERATURE = 0.7

DOCUMENT_CHAR_LIMIT = 8000
PAGE_CHAR_LIMIT = 4000

IMAGE_MAX_TOKENS = 2048
DOCUMENT_MAX_TOKENS = 2048
PAGE_PREVIEW_MAX_TOKENS = 1500
PAGE_MAX_TOKENS = 2000
PAGE_DETAIL_MAX_TOKENS = 3000
QUESTION_MAX_TOKENS = 3000

DEFAULT_QUESTION_COUNT = "15-20"


@dataclass(frozen=True)
class InlineData:
    """Binary attachment sent inline with the prompt (e.g. an image)."""

    mime_type: str
    data: bytes


@dataclass(frozen=True)
class GeminiRequest:
    """One instruction string plus at most one inline attachment."""

    prompt: str
    max_output_tokens: int
    attachment: InlineData | None = None
    temperature: float = DEFAULT_TEMPERATURE

    def contents(self) -> types.Content:
        """Build the SDK content object: text part first, then the attachment."""
        parts = [types.Part(text=self.prompt)]
        if self.attachment is not None:
            parts.append(
                types.Part.from_bytes(data=self.attachment.data, mime_type=self.attachment.mime_type)
            )
        return types.Content(role="user", parts=parts)

    def generation_config(self) -> types.GenerateContentConfig:
        return types.GenerateContentConfig(
            temperature=self.temperature,
            max_output_tokens=self.max_output_tokens,
        )

    def to_payload(self) -> dict:
        """Render the REST ``generateContent`` body this request corresponds to."""
        parts: list[dict] = [{"text": self.prompt}]
        if self.attachment is not None:
            parts.append({
                "inline_data": {
                    "mime_type": self.attachment.mime_type,
                    "data": base64.b64encode(self.attachment.data).decode("ascii"),
                }
            })
        return {
            "contents": [{"parts": parts}],
            "generationConfig": {
                "temperature": self.temperature,
                "maxOutputTokens": self.max_output_tokens,
            },
        }


def language_instruction(language: str, *, script: bool = False) -> str:
    """Return the response-language directive for *language*.

    ``script=True`` adds the explicit Tamil-script sentence used by the
    whole-content prompts.
    """
    if language == "tamil":
        text = LANGUAGE_INSTRUCTIONS["tamil"]
        return text + TAMIL_SCRIPT_SUFFIX if script else text
    return LANGUAGE_INSTRUCTIONS["english"]


def build_image_request(
    data: bytes,
    mime_type: str,
    language: str = "english",
    *,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GeminiRequest:
    prompt = IMAGE_ANALYSIS.format(language_instruction=language_instruction(language, script=True))
    return GeminiRequest(
        prompt=prompt,
        max_output_tokens=IMAGE_MAX_TOKENS,
        attachment=InlineData(mime_type=mime_type, data=data),
        temperature=temperature,
    )


def build_document_request(
    text: str,
    language: str = "english",
    *,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GeminiRequest:
    prompt = DOCUMENT_ANALYSIS.format(
        language_instruction=language_instruction(language, script=True),
        content=text[:DOCUMENT_CHAR_LIMIT],
    )
    return GeminiRequest(prompt=prompt, max_output_tokens=DOCUMENT_MAX_TOKENS, temperature=temperature)


def build_page_preview_request(
    text: str,
    language: str = "english",
    *,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GeminiRequest:
    """Quick page analysis; the page text is sent whole."""
    prompt = PAGE_PREVIEW.format(language_instruction=language_instruction(language), content=text)
    return GeminiRequest(prompt=prompt, max_output_tokens=PAGE_PREVIEW_MAX_TOKENS, temperature=temperature)


def build_page_request(
    text: str,
    page_number: int,
    language: str = "english",
    *,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GeminiRequest:
    """Per-page request used by the page-by-page document analysis."""
    prompt = PAGE_ANALYSIS.format(
        language_instruction=language_instruction(language),
        page_number=page_number,
        content=text[:PAGE_CHAR_LIMIT],
    )
    return GeminiRequest(prompt=prompt, max_output_tokens=PAGE_MAX_TOKENS, temperature=temperature)


def build_page_detail_request(
    text: str,
    page_number: int,
    language: str = "english",
    *,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GeminiRequest:
    prompt = PAGE_DETAIL.format(
        language_instruction=language_instruction(language),
        page_number=page_number,
        content=text[:PAGE_CHAR_LIMIT],
    )
    return GeminiRequest(prompt=prompt, max_output_tokens=PAGE_DETAIL_MAX_TOKENS, temperature=temperature)


def build_question_request(
    analyses: Sequence[AnalysisResult],
    difficulty: str = "medium",
    language: str = "english",
    *,
    count: int | None = None,
    temperature: float = DEFAULT_TEMPERATURE,
) -> GeminiRequest:
    """Ask for quiz questions grounded in one or more prior analyses."""
    blocks = "\n".join(
        ANALYSIS_BLOCK.format(
            index=i,
            key_points="\n".join(analysis.key_points),
            summary=analysis.summary,
            tnpsc_relevance=analysis.tnpsc_relevance,
        )
        for i, analysis in enumerate(analyses, start=1)
    )
    prompt = QUESTION_GENERATION.format(
        count=count if count is not None else DEFAULT_QUESTION_COUNT,
        analyses=blocks,
        difficulty=difficulty,
        language_instruction=QUESTION_LANGUAGE_INSTRUCTIONS.get(
            language, QUESTION_LANGUAGE_INSTRUCTIONS["english"]
        ),
    )
    return GeminiRequest(prompt=prompt, max_output_tokens=QUESTION_MAX_TOKENS, temperature=temperature)
