"""Error kinds raised by the service, plus the structured tool error model."""

from __future__ import annotations

from enum import Enum

import httpx
from pydantic import BaseModel


class StudyAidError(Exception):
    """Base class for failures surfaced by the study service."""


class TransportError(StudyAidError):
    """The Gemini call failed: non-2xx status, or no response at all."""

    def __init__(self, message: str, *, status: int | None = None) -> None:
        super().__init__(message)
        self.status = status


class EmptyResponse(StudyAidError):
    """The reply envelope carried no text content."""


class MalformedJson(StudyAidError):
    """The cleaned reply text is not JSON of the expected shape."""

    def __init__(self, message: str, *, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw


class InvalidPageRange(StudyAidError):
    """A page number or page range does not fit the document."""


class NoImagesError(StudyAidError):
    """A multi-image request contained no image files."""


class ErrorCategory(str, Enum):
    """Categories of errors for diagnostics."""

    TRANSPORT_ERROR = "TRANSPORT_ERROR"
    EMPTY_RESPONSE = "EMPTY_RESPONSE"
    MALFORMED_JSON = "MALFORMED_JSON"
    INVALID_PAGE_RANGE = "INVALID_PAGE_RANGE"
    NO_IMAGES = "NO_IMAGES"
    API_PERMISSION_DENIED = "API_PERMISSION_DENIED"
    API_QUOTA_EXCEEDED = "API_QUOTA_EXCEEDED"
    API_INVALID_ARGUMENT = "API_INVALID_ARGUMENT"
    NETWORK_ERROR = "NETWORK_ERROR"
    FILE_NOT_FOUND = "FILE_NOT_FOUND"
    FILE_UNSUPPORTED = "FILE_UNSUPPORTED"
    UNKNOWN = "UNKNOWN"


class ToolError(BaseModel):
    """Structured error returned from any tool."""

    error: str
    category: str
    hint: str
    retryable: bool = False
    retry_after_seconds: int | None = None
    status: int | None = None


def _categorize_transport(error: TransportError) -> tuple[ErrorCategory, str]:
    status = error.status
    if status is None:
        return (
            ErrorCategory.NETWORK_ERROR,
            "Gemini could not be reached — check connectivity and try again",
        )
    if status in (401, 403):
        return (
            ErrorCategory.API_PERMISSION_DENIED,
            "API key rejected — check GEMINI_API_KEY",
        )
    if status == 429:
        return (
            ErrorCategory.API_QUOTA_EXCEEDED,
            "Rate limit hit — wait a minute before analysing more pages",
        )
    if status == 400:
        return (
            ErrorCategory.API_INVALID_ARGUMENT,
            "Bad request — the content or image may be unsupported",
        )
    return (
        ErrorCategory.TRANSPORT_ERROR,
        f"Gemini returned HTTP {status}",
    )


def categorize_error(error: Exception) -> tuple[ErrorCategory, str]:
    """Map an exception to an ErrorCategory + human-readable hint."""
    if isinstance(error, TransportError):
        return _categorize_transport(error)
    if isinstance(error, EmptyResponse):
        return (
            ErrorCategory.EMPTY_RESPONSE,
            "Gemini returned no text — the content may have been blocked",
        )
    if isinstance(error, MalformedJson):
        return (
            ErrorCategory.MALFORMED_JSON,
            "Gemini reply was not valid JSON — try again",
        )
    if isinstance(error, InvalidPageRange):
        return (ErrorCategory.INVALID_PAGE_RANGE, str(error))
    if isinstance(error, NoImagesError):
        return (
            ErrorCategory.NO_IMAGES,
            "Provide at least one image file (png, jpg, webp, gif, heic)",
        )
    if isinstance(error, FileNotFoundError):
        return (ErrorCategory.FILE_NOT_FOUND, "File not found — check the path")
    if isinstance(error, (TimeoutError, httpx.TimeoutException, httpx.NetworkError)):
        return (
            ErrorCategory.NETWORK_ERROR,
            "Request timed out — try again or check connectivity",
        )

    s = str(error).lower()
    if "unsupported file type" in s:
        return (
            ErrorCategory.FILE_UNSUPPORTED,
            "File type not supported — use a PDF or a png, jpg, webp, gif or heic image",
        )
    if "no gemini api key" in s:
        return (
            ErrorCategory.API_PERMISSION_DENIED,
            "Set GEMINI_API_KEY in the environment or ~/.config/study-aid-mcp/.env",
        )
    if "invalid language" in s or "invalid difficulty" in s:
        return (
            ErrorCategory.API_INVALID_ARGUMENT,
            "Invalid input parameter — check language and difficulty values",
        )

    return (ErrorCategory.UNKNOWN, str(error))


def make_tool_error(error: Exception) -> dict:
    """Create a serialisable ToolError dict from an exception."""
    cat, hint = categorize_error(error)
    retryable = cat in {
        ErrorCategory.API_QUOTA_EXCEEDED,
        ErrorCategory.NETWORK_ERROR,
    }
    return ToolError(
        error=str(error) or error.__class__.__name__,
        category=cat.value,
        hint=hint,
        retryable=retryable,
        retry_after_seconds=60 if cat == ErrorCategory.API_QUOTA_EXCEEDED else None,
        status=error.status if isinstance(error, TransportError) else None,
    ).model_dump(mode="json")
