"""Tests for the study service — batch analysis, quiz ranges, question generation."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from study_aid_mcp.config import ServerConfig
from study_aid_mcp.errors import (
    EmptyResponse,
    InvalidPageRange,
    MalformedJson,
    NoImagesError,
    TransportError,
)
from study_aid_mcp.models.analysis import AnalysisResult, PageAnalysis
from study_aid_mcp.pacing import FixedDelay, NoDelay
from study_aid_mcp.service import StudyService, resolve_quiz_range
from tests.conftest import ocr_page, reply

PAGE_ONE = "The Chola dynasty ruled from Thanjavur and built the Brihadeeswarar temple."
PAGE_THREE = "The Government of India Act 1935 introduced provincial autonomy in British India."


def _service(**overrides) -> StudyService:
    return StudyService(ServerConfig(gemini_api_key="k", **overrides), pacing=NoDelay())


class TestAnalyzeDocument:
    async def test_skipped_and_failed_pages_excluded(self, mock_gemini_client):
        ocr = "\n".join([
            ocr_page(1, PAGE_ONE),
            ocr_page(2, "too short!"),
            ocr_page(3, PAGE_THREE),
        ])

        async def fake_generate(request, **kwargs):
            if "Page 3 Content" in request.prompt:
                raise TransportError("HTTP error! status: 500", status=500)
            return reply({
                "keyPoints": ["Cholas ruled from Thanjavur", "Brihadeeswarar temple"],
                "summary": "Chola rule",
                "tnpscCategories": ["History"],
            })

        mock_gemini_client["generate"].side_effect = fake_generate
        result = await _service().analyze_document(ocr)

        assert [p.page_number for p in result.page_analyses] == [1]
        assert result.total_key_points == ["Cholas ruled from Thanjavur", "Brihadeeswarar temple"]
        assert result.skipped_pages == [2]
        assert result.failed_pages == [3]
        assert result.tnpsc_categories == ["History"]
        assert mock_gemini_client["generate"].await_count == 2
        assert result.overall_summary == (
            "Comprehensive analysis of 1 pages with 2 total key points identified."
        )

    async def test_pages_sent_in_order(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply({"keyPoints": ["k"]})
        ocr = "\n".join(ocr_page(n, PAGE_ONE) for n in (1, 2, 3))

        result = await _service().analyze_document(ocr)

        prompts = [c.args[0].prompt for c in mock_gemini_client["generate"].await_args_list]
        assert [f"Page {n} Content" in p for n, p in zip((1, 2, 3), prompts)] == [True] * 3
        assert result.total_key_points == ["k", "k", "k"]

    async def test_malformed_and_empty_replies_do_not_abort(self, mock_gemini_client):
        mock_gemini_client["generate"].side_effect = [
            "not json",
            EmptyResponse("No content received from Gemini API"),
            reply({"keyPoints": ["ok"]}),
        ]
        ocr = "\n".join(ocr_page(n, PAGE_ONE) for n in (1, 2, 3))

        result = await _service().analyze_document(ocr)

        assert [p.page_number for p in result.page_analyses] == [3]
        assert result.failed_pages == [1, 2]

    async def test_unexpected_error_does_not_abort(self, mock_gemini_client):
        mock_gemini_client["generate"].side_effect = [
            RuntimeError("boom"),
            reply({"keyPoints": ["k"]}),
        ]
        ocr = "\n".join(ocr_page(n, PAGE_ONE) for n in (1, 2))

        result = await _service().analyze_document(ocr)

        assert [p.page_number for p in result.page_analyses] == [2]
        assert result.failed_pages == [1]
        assert result.total_key_points == ["k"]

    async def test_reversed_page_range_rejected(self, mock_gemini_client):
        ocr = "\n".join(ocr_page(n, PAGE_ONE) for n in range(1, 6))
        with pytest.raises(InvalidPageRange, match="Start page cannot be greater than end page"):
            await _service().analyze_document(ocr, first_page=5, last_page=3)
        mock_gemini_client["generate"].assert_not_awaited()

    async def test_page_range_filter(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply({"keyPoints": ["k"]})
        ocr = "\n".join(ocr_page(n, PAGE_ONE) for n in range(1, 6))

        result = await _service().analyze_document(ocr, first_page=2, last_page=3)

        assert [p.page_number for p in result.page_analyses] == [2, 3]

    async def test_categories_deduplicated_in_order(self, mock_gemini_client):
        mock_gemini_client["generate"].side_effect = [
            reply({"tnpscCategories": ["History", "Polity"]}),
            reply({"tnpscCategories": ["Polity", "Geography"]}),
        ]
        ocr = "\n".join(ocr_page(n, PAGE_ONE) for n in (1, 2))

        result = await _service().analyze_document(ocr)

        assert result.tnpsc_categories == ["History", "Polity", "Geography"]

    async def test_pacing_runs_after_each_attempted_page(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply({})
        ocr = "\n".join([ocr_page(1, PAGE_ONE), ocr_page(2, "short"), ocr_page(3, PAGE_ONE)])
        service = StudyService(ServerConfig(gemini_api_key="k"), pacing=FixedDelay(0.5))

        with patch("study_aid_mcp.pacing.asyncio.sleep") as mock_sleep:
            await service.analyze_document(ocr)

        assert mock_sleep.await_count == 2
        mock_sleep.assert_awaited_with(0.5)

    async def test_no_markers_means_no_pages(self, mock_gemini_client):
        result = await _service().analyze_document("plain text with no markers")
        assert result.page_analyses == []
        mock_gemini_client["generate"].assert_not_awaited()

    async def test_min_page_chars_is_configurable(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply({})
        result = await _service(min_page_chars=5).analyze_document(ocr_page(1, "short page"))
        assert [p.page_number for p in result.page_analyses] == [1]


class TestQuizRange:
    def test_blank_bounds_default_to_whole_document(self):
        quiz_range = resolve_quiz_range(None, None, 12)
        assert (quiz_range.start_page, quiz_range.end_page) == (1, 12)
        assert quiz_range.page_count == 12

    def test_bounds_are_clamped(self):
        quiz_range = resolve_quiz_range(0, 40, 10)
        assert (quiz_range.start_page, quiz_range.end_page) == (1, 10)

    def test_start_after_end_rejected(self):
        with pytest.raises(InvalidPageRange, match="Start page cannot be greater than end page"):
            resolve_quiz_range(5, 3, 10)

    def test_empty_document_rejected(self):
        with pytest.raises(InvalidPageRange):
            resolve_quiz_range(None, None, 0)

    async def test_rejected_before_any_call(self, mock_gemini_client):
        pages = [PageAnalysis(page_number=n, key_points=["k"]) for n in range(1, 8)]
        with pytest.raises(InvalidPageRange):
            await _service().generate_quiz(pages, total_pages=7, start_page=5, end_page=3)
        mock_gemini_client["generate"].assert_not_awaited()

    async def test_quiz_uses_only_pages_in_range(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply([{"question": "Q"}])
        pages = [
            PageAnalysis(page_number=n, key_points=[f"point {n}"], summary=f"page {n}")
            for n in range(1, 6)
        ]

        quiz_range, result = await _service().generate_quiz(
            pages, total_pages=5, start_page=2, end_page=3,
        )

        assert quiz_range.page_count == 2
        assert result.key_points == ["point 2", "point 3"]
        prompt = mock_gemini_client["generate"].await_args.args[0].prompt
        assert "generate 5 comprehensive questions" in prompt
        assert "point 4" not in prompt

    async def test_no_analysed_pages_in_range(self, mock_gemini_client):
        pages = [PageAnalysis(page_number=1)]
        with pytest.raises(InvalidPageRange):
            await _service().generate_quiz(pages, total_pages=5, start_page=3, end_page=5)
        mock_gemini_client["generate"].assert_not_awaited()


class TestGenerateQuestions:
    async def test_result_aggregates_analyses(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply([
            {"question": "Q1", "type": "short"},
            {"question": "Q2", "options": "none", "answer": "C"},
        ])
        analyses = [
            AnalysisResult(key_points=["a"], summary="First."),
            AnalysisResult(key_points=["b", "c"], summary="Second."),
        ]

        result = await _service().generate_questions(analyses, "hard", "tamil")

        assert result.total_questions == 2
        assert result.summary == "First. Second."
        assert result.key_points == ["a", "b", "c"]
        assert result.difficulty == "hard"
        assert result.questions[0].type == "mcq"
        assert len(result.questions[1].options) == 4
        prompt = mock_gemini_client["generate"].await_args.args[0].prompt
        assert "Tamil" in prompt
        assert "Analysis 2:" in prompt

    async def test_defaults_from_config(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply([])
        service = _service(default_difficulty="easy")
        result = await service.generate_questions([AnalysisResult()])
        assert result.difficulty == "easy"
        assert result.total_questions == 0

    async def test_malformed_reply_propagates(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = "{broken"
        with pytest.raises(MalformedJson):
            await _service().generate_questions([AnalysisResult()])


class TestSingleShot:
    async def test_analyze_image_attaches_inline_data(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply({"mainTopic": "Rivers"})

        result = await _service().analyze_image(b"\x89PNG", "image/png", "english")

        request = mock_gemini_client["generate"].await_args.args[0]
        assert request.attachment.mime_type == "image/png"
        assert request.attachment.data == b"\x89PNG"
        assert result.main_topic == "Rivers"

    async def test_transport_error_propagates(self, mock_gemini_client):
        mock_gemini_client["generate"].side_effect = TransportError("HTTP error! status: 403", status=403)
        with pytest.raises(TransportError) as exc_info:
            await _service().analyze_text("some text")
        assert exc_info.value.status == 403

    async def test_analyze_images_skips_non_images(self, mock_gemini_client):
        mock_gemini_client["generate"].side_effect = [
            reply({"keyPoints": ["from image"], "summary": "img"}),
            reply([{"question": "Q"}]),
        ]
        images = [(b"%PDF", "application/pdf"), (b"img", "image/jpeg")]

        result = await _service().analyze_images(images)

        assert mock_gemini_client["generate"].await_count == 2
        assert result.key_points == ["from image"]
        assert result.total_questions == 1

    async def test_analyze_images_without_images(self, mock_gemini_client):
        with pytest.raises(NoImagesError):
            await _service().analyze_images([(b"txt", "text/plain")])
        mock_gemini_client["generate"].assert_not_awaited()

    async def test_analyze_pdf_page_blank_text(self, mock_gemini_client):
        class BlankSource:
            page_count = 1

            def page_text(self, page_number: int) -> str:
                return "   "

        with pytest.raises(ValueError, match="No text content"):
            await _service().analyze_pdf_page(BlankSource(), 1)
        mock_gemini_client["generate"].assert_not_awaited()

    async def test_analyze_page_text_sets_page_number(self, mock_gemini_client):
        mock_gemini_client["generate"].return_value = reply({"keyPoints": ["x"]})
        result = await _service().analyze_page_text(PAGE_ONE, 6)
        assert result.page_number == 6
