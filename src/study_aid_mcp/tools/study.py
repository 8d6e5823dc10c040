"""Study tools — analysis and quiz generation on a FastMCP sub-server."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Annotated

from fastmcp import FastMCP
from mcp.types import ToolAnnotations
from pydantic import Field

from ..config import get_config
from ..errors import make_tool_error
from ..models.analysis import AnalysisResult, PageAnalysis
from ..pdf import PdfDocument
from ..service import StudyService
from ..types import Difficulty, FilePath, Language, PageNumber, QuestionCount

logger = logging.getLogger(__name__)
study_server = FastMCP("study")

IMAGE_MIME_TYPES: dict[str, str] = {
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".webp": "image/webp",
    ".gif": "image/gif",
    ".heic": "image/heic",
    ".heif": "image/heif",
}

_READ_ONLY = ToolAnnotations(readOnlyHint=True, openWorldHint=True)


def _service() -> StudyService:
    return StudyService(get_config())


def _read_file(file_path: str) -> tuple[bytes, str]:
    """Read a local file and return ``(data, mime_type)``.

    Unknown suffixes get ``application/octet-stream``.
    """
    p = Path(file_path).expanduser()
    if not p.is_file():
        raise FileNotFoundError(f"File not found: {file_path}")
    mime = IMAGE_MIME_TYPES.get(p.suffix.lower(), "application/octet-stream")
    return p.read_bytes(), mime


def _read_image(file_path: str) -> tuple[bytes, str]:
    data, mime = _read_file(file_path)
    if not mime.startswith("image/"):
        raise ValueError(
            f"Unsupported file type '{Path(file_path).suffix}' — expected png, jpg, webp, gif or heic"
        )
    return data, mime


@study_server.tool(annotations=_READ_ONLY)
async def study_analyze_image(
    file_path: FilePath,
    language: Language | None = None,
) -> dict:
    """Extract TNPSC key points and study points from one image.

    Args:
        file_path: Path to a png, jpg, webp, gif or heic image.
        language: Response language — "english" or "tamil".

    Returns:
        Dict matching AnalysisResult (camelCase keys), or a ToolError dict.
    """
    try:
        data, mime = _read_image(file_path)
        result = await _service().analyze_image(data, mime, language)
        return result.model_dump(by_alias=True)
    except Exception as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=_READ_ONLY)
async def study_analyze_images(
    file_paths: Annotated[list[str], Field(min_length=1, description="Image file paths")],
    difficulty: Difficulty | None = None,
    language: Language | None = None,
) -> dict:
    """Analyze several images one after another, then generate a quiz from all of them.

    Files that are not images are skipped.

    Returns:
        Dict matching QuestionResult, or a ToolError dict.
    """
    try:
        images = [_read_file(fp) for fp in file_paths]
        result = await _service().analyze_images(images, difficulty, language)
        return result.model_dump(by_alias=True)
    except Exception as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=_READ_ONLY)
async def study_analyze_pdf_page(
    file_path: FilePath,
    page_number: PageNumber,
    language: Language | None = None,
) -> dict:
    """Quick key-point analysis of a single PDF page.

    Returns:
        Dict matching PagePreview, or a ToolError dict.
    """
    try:
        document = PdfDocument.from_path(file_path)
        result = await _service().analyze_pdf_page(document, page_number, language)
        return result.model_dump(by_alias=True)
    except Exception as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=_READ_ONLY)
async def study_analyze_text(
    text: Annotated[str | None, Field(description="Extracted document text")] = None,
    file_path: Annotated[str | None, Field(description="PDF to extract text from")] = None,
    language: Language | None = None,
) -> dict:
    """Analyze a whole document's text (only the first 8000 characters are sent).

    Provide exactly one of text or file_path.

    Returns:
        Dict matching AnalysisResult, or a ToolError dict.
    """
    try:
        if bool(text) == bool(file_path):
            raise ValueError("Provide exactly one of: text or file_path")
        if file_path:
            document = PdfDocument.from_path(file_path)
            text = "\n".join(body for _, body in document.pages())
        result = await _service().analyze_text(text or "", language)
        return result.model_dump(by_alias=True)
    except Exception as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=_READ_ONLY)
async def study_analyze_page_text(
    text: Annotated[str, Field(min_length=1, description="Text of one page")],
    page_number: PageNumber,
    language: Language | None = None,
) -> dict:
    """Detailed analysis of one page's text (first 4000 characters).

    Returns:
        Dict matching PageAnalysis, or a ToolError dict.
    """
    try:
        result = await _service().analyze_page_text(text, page_number, language)
        return result.model_dump(by_alias=True)
    except Exception as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=_READ_ONLY)
async def study_analyze_document(
    ocr_text: Annotated[str | None, Field(
        description="Text with '==Start of OCR for page N==' / '==End of OCR for page N==' markers"
    )] = None,
    file_path: Annotated[str | None, Field(description="PDF to analyze page by page")] = None,
    start_page: Annotated[int | None, Field(ge=1, description="First page to analyze")] = None,
    end_page: Annotated[int | None, Field(ge=1, description="Last page to analyze")] = None,
    language: Language | None = None,
) -> dict:
    """Analyze a document page by page with a pause between Gemini calls.

    Pages with too little text are skipped; pages whose analysis fails are
    reported in failedPages without aborting the rest.

    Returns:
        Dict matching DocumentAnalysis, or a ToolError dict.
    """
    try:
        if bool(ocr_text) == bool(file_path):
            raise ValueError("Provide exactly one of: ocr_text or file_path")
        if file_path:
            document = PdfDocument.from_path(file_path)
            ocr_text = document.to_ocr_text(start_page or 1, end_page)
        result = await _service().analyze_document(
            ocr_text or "", language, first_page=start_page, last_page=end_page,
        )
        return result.model_dump(by_alias=True)
    except Exception as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=_READ_ONLY)
async def study_generate_questions(
    analyses: Annotated[list[dict], Field(
        min_length=1, description="AnalysisResult dicts from earlier study_* calls"
    )],
    difficulty: Difficulty | None = None,
    language: Language | None = None,
    count: QuestionCount | None = None,
) -> dict:
    """Generate MCQ and assertion-reason questions from prior analyses.

    Returns:
        Dict matching QuestionResult, or a ToolError dict.
    """
    try:
        parsed = [AnalysisResult.model_validate(a) for a in analyses]
        result = await _service().generate_questions(parsed, difficulty, language, count=count)
        return result.model_dump(by_alias=True)
    except Exception as exc:
        return make_tool_error(exc)


@study_server.tool(annotations=_READ_ONLY)
async def study_generate_quiz(
    page_analyses: Annotated[list[dict], Field(
        min_length=1, description="PageAnalysis dicts (from study_analyze_document or study_analyze_page_text)"
    )],
    total_pages: Annotated[int, Field(ge=1, description="Number of pages in the document")],
    start_page: Annotated[int | None, Field(description="First page of the quiz range")] = None,
    end_page: Annotated[int | None, Field(description="Last page of the quiz range")] = None,
    difficulty: Difficulty | None = None,
    language: Language | None = None,
    count: QuestionCount = 5,
) -> dict:
    """Generate a practice quiz for a page range of an analysed document.

    The range is checked before anything is sent: a start page after the
    end page is rejected.

    Returns:
        Dict with quizRange and quiz (QuestionResult), or a ToolError dict.
    """
    try:
        pages = [PageAnalysis.model_validate(p) for p in page_analyses]
        quiz_range, result = await _service().generate_quiz(
            pages,
            total_pages=total_pages,
            start_page=start_page,
            end_page=end_page,
            difficulty=difficulty,
            language=language,
            count=count,
        )
        return {
            "quizRange": {**quiz_range.model_dump(by_alias=True), "pageCount": quiz_range.page_count},
            "quiz": result.model_dump(by_alias=True),
        }
    except Exception as exc:
        return make_tool_error(exc)
