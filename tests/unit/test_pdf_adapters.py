import io

import pytest
from reportlab.lib.pagesizes import letter
from reportlab.pdfgen import canvas

from docintel.pdf.base import BasePdfExtractor
from docintel.pdf.exceptions import PdfExtractionError
from docintel.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docintel.pdf.pymupdf_adapter import PyMuPdfAdapter

ENGINES = [PdfPlumberAdapter, PyMuPdfAdapter]


def _make_pdf(*pages: str) -> bytes:
    buf = io.BytesIO()
    c = canvas.Canvas(buf, pagesize=letter)
    for text in pages:
        c.drawString(72, 720, text)
        c.showPage()
    c.save()
    return buf.getvalue()


@pytest.mark.parametrize("engine_cls", ENGINES)
class TestPdfEngines:
    def test_extracts_text(
        self, engine_cls: type[BasePdfExtractor], sample_pdf_bytes: bytes
    ) -> None:
        assert "Hello PDF World" in engine_cls().extract_text(sample_pdf_bytes)

    def test_pages_are_separated_by_blank_line(
        self, engine_cls: type[BasePdfExtractor], multi_page_pdf_bytes: bytes
    ) -> None:
        result = engine_cls().extract_text(multi_page_pdf_bytes)

        assert result.index("Page one content") < result.index("Page two content")
        assert "\n\n" in result

    def test_page_cap_limits_extraction(self, engine_cls: type[BasePdfExtractor]) -> None:
        content = _make_pdf("First page", "Second page", "Third page")

        result = engine_cls(max_pages=2).extract_text(content)

        assert "Second page" in result
        assert "Third page" not in result

    def test_blank_pdf_returns_empty_string(
        self, engine_cls: type[BasePdfExtractor], empty_pdf_bytes: bytes
    ) -> None:
        assert engine_cls().extract_text(empty_pdf_bytes) == ""

    def test_invalid_bytes_raise(self, engine_cls: type[BasePdfExtractor]) -> None:
        with pytest.raises(PdfExtractionError):
            engine_cls().extract_text(b"not a pdf")

    def test_lease_text_is_stripped(
        self, engine_cls: type[BasePdfExtractor], lease_pdf_bytes: bytes
    ) -> None:
        result = engine_cls().extract_text(lease_pdf_bytes)

        assert result == result.strip()
        assert "Late Fee" in result
