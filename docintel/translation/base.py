from abc import ABC, abstractmethod

from docintel.translation.models import LanguageDetection, TranslationResult


class BaseTranslationClient(ABC):
    """Contract for all translation service adapters."""

    @abstractmethod
    async def translate(
        self, text: str, target_language: str, source_language: str | None = None
    ) -> TranslationResult:
        """Translate one text.

        Raises:
            TranslationError: if the service call fails.
        """

    @abstractmethod
    async def detect(self, text: str) -> LanguageDetection:
        """Detect the language of *text*.

        Raises:
            TranslationError: if the service call fails.
        """

    async def probe(self) -> None:
        """Cheap reachability check used by the health report."""
