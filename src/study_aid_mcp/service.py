"""Study service — the analysis and quiz operations behind the tools.

Every operation is one await chain: build a request, send it, normalize the
reply. Single-shot operations fail fast with the error kinds in
:mod:`study_aid_mcp.errors`. :meth:`StudyService.analyze_document` is the
exception: it walks pages strictly one at a time, pausing between calls, and
records failed pages instead of aborting.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

from .client import GeminiClient
from .config import ServerConfig
from .errors import InvalidPageRange, NoImagesError
from .models.analysis import AnalysisResult, DocumentAnalysis, PageAnalysis, PagePreview
from .models.quiz import QuestionResult, QuizRange
from .normalize import (
    normalize_analysis,
    normalize_batch_page,
    normalize_page_analysis,
    normalize_page_preview,
    normalize_questions,
)
from .pacing import FixedDelay, PacingPolicy, pause
from .pdf import PageSource, split_ocr_pages
from .request import (
    GeminiRequest,
    build_document_request,
    build_image_request,
    build_page_detail_request,
    build_page_preview_request,
    build_page_request,
    build_question_request,
)

logger = logging.getLogger(__name__)

QUIZ_QUESTION_COUNT = 5


def resolve_quiz_range(start: int | None, end: int | None, total_pages: int) -> QuizRange:
    """Resolve the quiz page range the way the page navigator form does.

    Blank bounds default to the first/last page, bounds are clamped into
    ``[1, total_pages]``, and a start after the end is rejected.

    Raises:
        InvalidPageRange: If ``total_pages < 1`` or start > end.
    """
    if total_pages < 1:
        raise InvalidPageRange("Document has no pages")
    first = 1 if start is None else max(1, min(start, total_pages))
    last = total_pages if end is None else max(1, min(end, total_pages))
    if first > last:
        raise InvalidPageRange("Start page cannot be greater than end page")
    return QuizRange(start_page=first, end_page=last)


class StudyService:
    """Gemini-backed study analysis with an explicitly injected config."""

    def __init__(self, config: ServerConfig, *, pacing: PacingPolicy | None = None) -> None:
        self.config = config
        self.pacing = pacing if pacing is not None else FixedDelay(config.page_delay_seconds)

    def _language(self, language: str | None) -> str:
        return language or self.config.default_language

    async def _send(self, request: GeminiRequest) -> str:
        return await GeminiClient.generate(
            request,
            api_key=self.config.gemini_api_key,
            model=self.config.model,
        )

    async def analyze_image(
        self, data: bytes, mime_type: str, language: str | None = None,
    ) -> AnalysisResult:
        request = build_image_request(
            data, mime_type, self._language(language), temperature=self.config.temperature,
        )
        return normalize_analysis(await self._send(request))

    async def analyze_images(
        self,
        images: Sequence[tuple[bytes, str]],
        difficulty: str | None = None,
        language: str | None = None,
    ) -> QuestionResult:
        """Analyze each ``(data, mime_type)`` image in turn, then generate one quiz.

        Non-image MIME types are skipped.

        Raises:
            NoImagesError: If no image remains to analyze.
        """
        results: list[AnalysisResult] = []
        for data, mime_type in images:
            if not mime_type.startswith("image/"):
                logger.info("Skipping non-image attachment (%s)", mime_type)
                continue
            results.append(await self.analyze_image(data, mime_type, language))
        if not results:
            raise NoImagesError("No valid images found for analysis")
        return await self.generate_questions(results, difficulty, language)

    async def analyze_pdf_page(
        self, source: PageSource, page_number: int, language: str | None = None,
    ) -> PagePreview:
        """Quick analysis of one page taken from a page source."""
        text = source.page_text(page_number)
        if not text.strip():
            raise ValueError("No text content found on this page")
        request = build_page_preview_request(
            text, self._language(language), temperature=self.config.temperature,
        )
        return normalize_page_preview(await self._send(request), page_number)

    async def analyze_text(self, text: str, language: str | None = None) -> AnalysisResult:
        """Whole-document analysis of extracted text (first 8000 characters)."""
        request = build_document_request(
            text, self._language(language), temperature=self.config.temperature,
        )
        return normalize_analysis(await self._send(request))

    async def analyze_page_text(
        self, text: str, page_number: int, language: str | None = None,
    ) -> PageAnalysis:
        """Detailed analysis of one page's text (first 4000 characters)."""
        request = build_page_detail_request(
            text, page_number, self._language(language), temperature=self.config.temperature,
        )
        return normalize_page_analysis(await self._send(request), page_number)

    async def analyze_document(
        self,
        ocr_text: str,
        language: str | None = None,
        *,
        first_page: int | None = None,
        last_page: int | None = None,
    ) -> DocumentAnalysis:
        """Analyze OCR-delimited text page by page.

        Pages shorter than ``min_page_chars`` are skipped without a call.
        A page whose call or reply fails for any reason is logged and
        recorded in ``failed_pages``; the batch itself never fails. The pacing
        policy runs after every attempted page.

        Raises:
            InvalidPageRange: If ``first_page`` is after ``last_page``.
        """
        if first_page is not None and last_page is not None and first_page > last_page:
            raise InvalidPageRange("Start page cannot be greater than end page")
        language = self._language(language)
        pages = split_ocr_pages(ocr_text)
        if first_page is not None or last_page is not None:
            lo = first_page or 1
            hi = last_page if last_page is not None else max((n for n, _ in pages), default=lo)
            pages = [(n, body) for n, body in pages if lo <= n <= hi]
        logger.info("Found %d pages to analyze", len(pages))

        analyses: list[PageAnalysis] = []
        key_points: list[str] = []
        categories: dict[str, None] = {}
        skipped: list[int] = []
        failed: list[int] = []

        attempt = 0
        for page_number, body in pages:
            if len(body) < self.config.min_page_chars:
                skipped.append(page_number)
                continue
            request = build_page_request(
                body, page_number, language, temperature=self.config.temperature,
            )
            try:
                reply = await self._send(request)
                analysis, page_categories = normalize_batch_page(reply, page_number)
            except Exception as exc:
                logger.warning("Error analyzing page %d: %s", page_number, exc)
                failed.append(page_number)
            else:
                analyses.append(analysis)
                key_points.extend(analysis.key_points)
                for category in page_categories:
                    categories.setdefault(category, None)
            await pause(self.pacing, attempt)
            attempt += 1

        return DocumentAnalysis(
            page_analyses=analyses,
            overall_summary=(
                f"Comprehensive analysis of {len(analyses)} pages with "
                f"{len(key_points)} total key points identified."
            ),
            total_key_points=key_points,
            tnpsc_categories=list(categories),
            skipped_pages=skipped,
            failed_pages=failed,
        )

    async def generate_questions(
        self,
        analyses: Sequence[AnalysisResult],
        difficulty: str | None = None,
        language: str | None = None,
        *,
        count: int | None = None,
    ) -> QuestionResult:
        """Generate quiz questions from one or more prior analyses."""
        difficulty = difficulty or self.config.default_difficulty
        request = build_question_request(
            analyses,
            difficulty,
            self._language(language),
            count=count,
            temperature=self.config.temperature,
        )
        questions = normalize_questions(await self._send(request))
        return QuestionResult(
            questions=questions,
            summary=" ".join(a.summary for a in analyses),
            key_points=[point for a in analyses for point in a.key_points],
            difficulty=difficulty,
        )

    async def generate_quiz(
        self,
        page_analyses: Sequence[PageAnalysis],
        *,
        total_pages: int,
        start_page: int | None = None,
        end_page: int | None = None,
        difficulty: str | None = None,
        language: str | None = None,
        count: int = QUIZ_QUESTION_COUNT,
    ) -> tuple[QuizRange, QuestionResult]:
        """Generate a practice quiz from the analysed pages inside a page range.

        The range is validated before any network call.

        Raises:
            InvalidPageRange: Bad range, or no analysed page falls inside it.
        """
        quiz_range = resolve_quiz_range(start_page, end_page, total_pages)
        selected = [p.as_analysis() for p in page_analyses if p.page_number in quiz_range]
        if not selected:
            raise InvalidPageRange(
                f"No analysed pages between {quiz_range.start_page} and {quiz_range.end_page}"
            )
        result = await self.generate_questions(selected, difficulty, language, count=count)
        return quiz_range, result

