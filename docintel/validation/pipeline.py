from abc import ABC, abstractmethod
from dataclasses import dataclass

from docintel.extraction.models import ExtractedText
from docintel.validation.formats import SupportedFormat
from docintel.validation.models import Classification


@dataclass(slots=True)
class ValidationContext:
    content: bytes
    filename: str
    declared_mime_type: str
    format: SupportedFormat | None = None
    extracted: ExtractedText | None = None
    classification: Classification | None = None


class ValidationStep(ABC):
    @abstractmethod
    async def run(self, context: ValidationContext) -> ValidationContext:
        raise NotImplementedError
