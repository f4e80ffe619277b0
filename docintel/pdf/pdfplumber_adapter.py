import io

import pdfplumber

from docintel.pdf.base import BasePdfExtractor
from docintel.pdf.exceptions import PdfExtractionError


class PdfPlumberAdapter(BasePdfExtractor):
    """Text layer extraction with pdfplumber."""

    def extract_text(self, content: bytes) -> str:
        try:
            with pdfplumber.open(io.BytesIO(content)) as pdf:
                pages = pdf.pages[: self._max_pages]
                return self.join_pages(page.extract_text() or "" for page in pages)
        except Exception as exc:
            raise PdfExtractionError(f"pdfplumber could not read the PDF: {exc}") from exc
