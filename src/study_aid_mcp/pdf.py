"""PDF page access and OCR page-delimiter handling."""

from __future__ import annotations

import io
import re
from collections.abc import Iterable
from pathlib import Path
from typing import Protocol

from pypdf import PdfReader

from .errors import InvalidPageRange

_OCR_PAGE = re.compile(
    r"==Start of OCR for page (\d+)==(.*?)==End of OCR for page \1==",
    flags=re.DOTALL,
)


class PageSource(Protocol):
    """Anything that can hand out the text of a numbered page."""

    @property
    def page_count(self) -> int: ...

    def page_text(self, page_number: int) -> str: ...


class PdfDocument:
    """Read-only, 1-based page view over a PDF file."""

    def __init__(self, data: bytes, *, name: str = "document.pdf") -> None:
        self.name = name
        self._reader = PdfReader(io.BytesIO(data))

    @classmethod
    def from_path(cls, path: str | Path) -> PdfDocument:
        p = Path(path).expanduser()
        if not p.exists():
            raise FileNotFoundError(f"File not found: {path}")
        if p.suffix.lower() != ".pdf":
            raise ValueError(f"Unsupported file type '{p.suffix}' — expected a .pdf file")
        return cls(p.read_bytes(), name=p.name)

    @property
    def page_count(self) -> int:
        return len(self._reader.pages)

    def _check(self, page_number: int) -> None:
        if not 1 <= page_number <= self.page_count:
            raise InvalidPageRange(
                f"Page {page_number} is outside the document (1-{self.page_count})"
            )

    def page_text(self, page_number: int) -> str:
        self._check(page_number)
        return self._reader.pages[page_number - 1].extract_text() or ""

    def pages(self, start: int = 1, end: int | None = None) -> list[tuple[int, str]]:
        """Return ``(page_number, text)`` pairs for the inclusive range."""
        last = self.page_count if end is None else end
        if start > last:
            raise InvalidPageRange("Start page cannot be greater than end page")
        self._check(start)
        self._check(last)
        return [(n, self.page_text(n)) for n in range(start, last + 1)]

    def to_ocr_text(self, start: int = 1, end: int | None = None) -> str:
        """Render a page range in the OCR-delimited text format."""
        return render_ocr_text(self.pages(start, end))


def split_ocr_pages(text: str) -> list[tuple[int, str]]:
    """Split OCR output into ``(page_number, page_text)`` pairs.

    Pages are recognised between ``==Start of OCR for page N==`` and the
    matching ``==End of OCR for page N==`` marker. Text outside markers is
    ignored; page text is stripped.
    """
    return [(int(m.group(1)), m.group(2).strip()) for m in _OCR_PAGE.finditer(text)]


def render_ocr_text(pages: Iterable[tuple[int, str]]) -> str:
    """Join pages back into the OCR-delimited format read by :func:`split_ocr_pages`."""
    return "\n".join(
        f"==Start of OCR for page {n}==\n{body}\n==End of OCR for page {n}=="
        for n, body in pages
    )
