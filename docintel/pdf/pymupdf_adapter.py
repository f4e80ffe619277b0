import pymupdf

from docintel.pdf.base import BasePdfExtractor
from docintel.pdf.exceptions import PdfExtractionError


class PyMuPdfAdapter(BasePdfExtractor):
    """Text layer extraction with PyMuPDF."""

    def extract_text(self, content: bytes) -> str:
        try:
            doc = pymupdf.open(stream=content, filetype="pdf")  # type: ignore[no-untyped-call]
        except Exception as exc:
            raise PdfExtractionError(f"pymupdf could not read the PDF: {exc}") from exc
        with doc:
            if doc.needs_pass:
                raise PdfExtractionError("PDF is password protected")
            page_count = doc.page_count
            if self._max_pages is not None:
                page_count = min(page_count, self._max_pages)
            return self.join_pages(doc[index].get_text() for index in range(page_count))
