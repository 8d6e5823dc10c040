"""Tests for PDF page access and OCR page markers."""

from __future__ import annotations

import io

import pytest
from pypdf import PdfWriter

from study_aid_mcp.errors import InvalidPageRange
from study_aid_mcp.pdf import PdfDocument, render_ocr_text, split_ocr_pages
from tests.conftest import ocr_page


def _blank_pdf(pages: int) -> bytes:
    writer = PdfWriter()
    for _ in range(pages):
        writer.add_blank_page(width=595, height=842)
    buf = io.BytesIO()
    writer.write(buf)
    return buf.getvalue()


@pytest.fixture()
def pdf_path(tmp_path):
    path = tmp_path / "notes.pdf"
    path.write_bytes(_blank_pdf(3))
    return path


class TestPdfDocument:
    def test_page_count(self, pdf_path):
        assert PdfDocument.from_path(pdf_path).page_count == 3

    def test_blank_page_text_is_empty(self, pdf_path):
        assert PdfDocument.from_path(pdf_path).page_text(2).strip() == ""

    @pytest.mark.parametrize("page", [0, 4])
    def test_out_of_range_page(self, pdf_path, page):
        with pytest.raises(InvalidPageRange):
            PdfDocument.from_path(pdf_path).page_text(page)

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            PdfDocument.from_path(tmp_path / "missing.pdf")

    def test_non_pdf_suffix(self, tmp_path):
        path = tmp_path / "notes.txt"
        path.write_text("hello")
        with pytest.raises(ValueError, match="Unsupported file type"):
            PdfDocument.from_path(path)

    def test_pages_range(self, pdf_path):
        pages = PdfDocument.from_path(pdf_path).pages(2, 3)
        assert [n for n, _ in pages] == [2, 3]

    def test_reversed_pages_range(self, pdf_path):
        with pytest.raises(InvalidPageRange):
            PdfDocument.from_path(pdf_path).pages(3, 2)

    def test_ocr_text_has_markers_per_page(self, pdf_path):
        text = PdfDocument.from_path(pdf_path).to_ocr_text()
        assert [n for n, _ in split_ocr_pages(text)] == [1, 2, 3]


class TestOcrMarkers:
    def test_split(self):
        text = "header\n" + ocr_page(1, "first page") + "\nnoise\n" + ocr_page(2, "  second  ")
        assert split_ocr_pages(text) == [(1, "first page"), (2, "second")]

    def test_mismatched_end_marker_not_a_page(self):
        text = "==Start of OCR for page 1==\nbody\n==End of OCR for page 2=="
        assert split_ocr_pages(text) == []

    def test_multiline_body(self):
        assert split_ocr_pages(ocr_page(5, "line one\nline two")) == [(5, "line one\nline two")]

    def test_render_is_readable_by_split(self):
        pages = [(1, "alpha"), (2, "beta")]
        assert split_ocr_pages(render_ocr_text(pages)) == pages
