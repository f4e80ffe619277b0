from abc import ABC, abstractmethod

from docintel.extraction.models import ExtractedText


class BaseStructuringClient(ABC):
    """Contract for all document text extraction adapters."""

    @abstractmethod
    async def extract(self, content: bytes, mime_type: str) -> ExtractedText:
        """Extract text and entities from raw document bytes.

        Args:
            content: Raw file content.
            mime_type: Canonical MIME type of the content.

        Raises:
            ExtractionError: if extraction fails for any reason.
        """
