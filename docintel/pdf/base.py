from abc import ABC, abstractmethod
from collections.abc import Iterable


class BasePdfExtractor(ABC):
    """Contract for local PDF text extraction engines.

    Engines read at most *max_pages* pages so a long exhibit bundle cannot
    stall the validation path; ``None`` reads every page.
    """

    def __init__(self, max_pages: int | None = None) -> None:
        self._max_pages = max_pages

    @abstractmethod
    def extract_text(self, content: bytes) -> str:
        """Extract the text layer of a PDF.

        Args:
            content: Raw PDF file content.

        Returns:
            Page texts separated by blank lines, or "" for a scanned PDF.

        Raises:
            PdfExtractionError: if the PDF is unreadable or password protected.
        """

    @staticmethod
    def join_pages(pages: Iterable[str]) -> str:
        return "\n\n".join(text.strip() for text in pages if text and text.strip())
