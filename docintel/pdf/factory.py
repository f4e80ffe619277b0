from typing import ClassVar

from docintel.config.settings import Settings
from docintel.pdf.base import BasePdfExtractor
from docintel.pdf.pdfplumber_adapter import PdfPlumberAdapter
from docintel.pdf.pymupdf_adapter import PyMuPdfAdapter


class PdfExtractorFactory:
    """Picks the local PDF engine named by ``pdf_engine``."""

    ENGINES: ClassVar[dict[str, type[BasePdfExtractor]]] = {
        "pdfplumber": PdfPlumberAdapter,
        "pymupdf": PyMuPdfAdapter,
    }

    @classmethod
    def create(cls, settings: Settings) -> BasePdfExtractor:
        engine = settings.pdf_engine.strip().lower()
        engine_cls = cls.ENGINES.get(engine)
        if engine_cls is None:
            raise ValueError(f"Unknown PDF engine '{engine}'. Choose from: {list(cls.ENGINES)}")
        return engine_cls(max_pages=settings.pdf_max_pages or None)
