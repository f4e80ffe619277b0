import io
import zipfile

import pytest

from docintel.extraction.exceptions import ExtractionError
from docintel.extraction.fallback import FALLBACK_CONFIDENCE, LocalTextExtractor
from docintel.pdf.pdfplumber_adapter import PdfPlumberAdapter

DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"


def _make_docx(*paragraphs: str) -> bytes:
    body = "".join(
        f'<w:p><w:r><w:t>{text}</w:t></w:r></w:p>' for text in paragraphs
    )
    xml = (
        '<?xml version="1.0" encoding="UTF-8"?>'
        '<w:document xmlns:w="http://schemas.openxmlformats.org/wordprocessingml/2006/main">'
        f"<w:body>{body}</w:body></w:document>"
    )
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as archive:
        archive.writestr("word/document.xml", xml)
    return buf.getvalue()


class TestLocalTextExtractor:
    @pytest.mark.asyncio
    async def test_extracts_pdf_with_configured_engine(self, lease_pdf_bytes: bytes) -> None:
        result = await LocalTextExtractor(PdfPlumberAdapter()).extract(
            lease_pdf_bytes, "application/pdf"
        )
        assert "Late Fee" in result.text
        assert result.confidence == FALLBACK_CONFIDENCE
        assert result.entities == []

    @pytest.mark.asyncio
    async def test_extracts_docx_paragraphs(self) -> None:
        content = _make_docx("Lease Agreement", "Rent is due monthly.")
        result = await LocalTextExtractor(PdfPlumberAdapter()).extract(content, DOCX_MIME)
        assert result.text == "Lease Agreement\nRent is due monthly."

    @pytest.mark.asyncio
    async def test_extracts_printable_runs_from_doc(self) -> None:
        content = b"\xd0\xcf\x11\xe0\x00\x01Tenant shall pay rent\x00\x02ok\x00"
        result = await LocalTextExtractor(PdfPlumberAdapter()).extract(
            content, "application/msword"
        )
        assert result.text == "Tenant shall pay rent"

    @pytest.mark.asyncio
    async def test_images_yield_empty_text(self) -> None:
        result = await LocalTextExtractor(PdfPlumberAdapter()).extract(b"\x89PNG", "image/png")
        assert result.text == ""

    @pytest.mark.asyncio
    async def test_broken_pdf_raises_extraction_error(self) -> None:
        with pytest.raises(ExtractionError, match="Local PDF extraction failed"):
            await LocalTextExtractor(PdfPlumberAdapter()).extract(b"not a pdf", "application/pdf")

    @pytest.mark.asyncio
    async def test_broken_docx_raises_extraction_error(self) -> None:
        with pytest.raises(ExtractionError, match="Local DOCX extraction failed"):
            await LocalTextExtractor(PdfPlumberAdapter()).extract(b"PK broken", DOCX_MIME)
