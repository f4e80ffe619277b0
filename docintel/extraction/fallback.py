"""Degraded local text extraction used when the structuring service is unavailable."""

import asyncio
import io
import re
import zipfile
from xml.etree import ElementTree

from docintel.extraction.base import BaseStructuringClient
from docintel.extraction.exceptions import ExtractionError
from docintel.extraction.models import ExtractedText
from docintel.logging.logger import Log
from docintel.pdf.base import BasePdfExtractor
from docintel.pdf.exceptions import PdfExtractionError

FALLBACK_CONFIDENCE = 0.5

_WORD_NS = "{http://schemas.openxmlformats.org/wordprocessingml/2006/main}"
_PRINTABLE_RUN = re.compile(rb"[\x20-\x7e]{4,}")


class LocalTextExtractor(BaseStructuringClient):
    """Recovers raw text without any external call.

    PDF goes through the configured PDF engine, DOCX through its XML body,
    legacy DOC through printable byte runs; images yield empty text.
    """

    def __init__(self, pdf_extractor: BasePdfExtractor) -> None:
        self._pdf_extractor = pdf_extractor

    async def extract(self, content: bytes, mime_type: str) -> ExtractedText:
        if mime_type == "application/pdf":
            text = await self._extract_pdf(content)
        elif mime_type.endswith("wordprocessingml.document"):
            text = _extract_docx(content)
        elif mime_type == "application/msword":
            text = _extract_printable_runs(content)
        else:
            text = ""
        Log.info(f"Local extraction recovered {len(text)} chars from {mime_type}")
        return ExtractedText(text=text, confidence=FALLBACK_CONFIDENCE)

    async def _extract_pdf(self, content: bytes) -> str:
        try:
            return await asyncio.to_thread(self._pdf_extractor.extract_text, content)
        except PdfExtractionError as exc:
            raise ExtractionError(f"Local PDF extraction failed: {exc}") from exc


def _extract_docx(content: bytes) -> str:
    try:
        with zipfile.ZipFile(io.BytesIO(content)) as archive:
            xml_body = archive.read("word/document.xml")
        root = ElementTree.fromstring(xml_body)
    except (zipfile.BadZipFile, KeyError, ElementTree.ParseError) as exc:
        raise ExtractionError(f"Local DOCX extraction failed: {exc}") from exc
    paragraphs = []
    for paragraph in root.iter(f"{_WORD_NS}p"):
        runs = [node.text or "" for node in paragraph.iter(f"{_WORD_NS}t")]
        if runs:
            paragraphs.append("".join(runs))
    return "\n".join(paragraphs).strip()


def _extract_printable_runs(content: bytes) -> str:
    runs = [match.decode("ascii") for match in _PRINTABLE_RUN.findall(content)]
    return " ".join(runs).strip()
