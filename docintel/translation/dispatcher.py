"""Fans translation work out to the translation service."""

import asyncio
from collections.abc import Sequence

from docintel.credentials.exceptions import CredentialError
from docintel.errors import ExternalServiceError
from docintel.logging.logger import Log
from docintel.translation.base import BaseTranslationClient
from docintel.translation.exceptions import TranslationError
from docintel.translation.languages import SUPPORTED_LANGUAGES, require_supported
from docintel.translation.models import (
    LanguageDetection,
    SummaryContent,
    TranslatedSummary,
    TranslationResult,
)


class TranslationDispatcher:
    """Translates single texts, batches and structured summaries.

    Batch items run as independent tasks bounded by *max_concurrency*; the
    output keeps input order and length, and a failed item carries an
    ``error`` marker instead of failing the batch.
    """

    def __init__(self, client: BaseTranslationClient, max_concurrency: int = 8) -> None:
        self._client = client
        self._semaphore = asyncio.Semaphore(max(1, max_concurrency))

    async def translate_text(
        self, text: str, target_language: str, source_language: str | None = None
    ) -> TranslationResult:
        """Translate one text.

        *source_language* is passed to the service as given.

        Raises:
            UnsupportedLanguageError: if the target language is unsupported.
            TranslationError: if the service call fails.
        """
        require_supported(target_language)
        async with self._semaphore:
            return await self._client.translate(text, target_language, source_language)

    async def translate_texts(
        self,
        texts: Sequence[str],
        target_language: str,
        source_language: str | None = None,
    ) -> list[TranslationResult]:
        require_supported(target_language)
        results = await asyncio.gather(
            *(self._translate_item(text, target_language, source_language) for text in texts)
        )
        failed = sum(1 for result in results if result.error is not None)
        Log.info(
            f"Translated {len(texts) - failed}/{len(texts)} text(s) to {target_language}"
        )
        return list(results)

    async def translate_summary(
        self,
        summary: SummaryContent,
        target_language: str,
        source_language: str | None = None,
    ) -> TranslatedSummary:
        """Translate every field of a summary, keeping its structure.

        UI label values are translated; their keys are kept.

        Raises:
            UnsupportedLanguageError: if the target language is unsupported.
            TranslationError: if any field fails to translate.
        """
        optional_lists = {
            "key_risks": summary.key_risks,
            "obligations": summary.obligations,
            "rights": summary.rights,
        }
        texts = [summary.summary, summary.risk_level, *summary.key_points, *summary.recommendations]
        for values in optional_lists.values():
            texts.extend(values or [])
        labels = summary.ui_labels or {}
        label_keys = list(labels)
        texts.extend(labels[key] for key in label_keys)

        results = await self.translate_texts(texts, target_language, source_language)
        errors = [result.error for result in results if result.error is not None]
        if errors:
            raise TranslationError(f"Summary translation failed: {errors[0]}")
        translated = iter(result.translated_text for result in results)

        translated_summary = next(translated)
        risk_level = next(translated)
        key_points = [next(translated) for _ in summary.key_points]
        recommendations = [next(translated) for _ in summary.recommendations]
        extras = {
            name: [next(translated) for _ in values] if values is not None else None
            for name, values in optional_lists.items()
        }
        ui_labels = None
        if summary.ui_labels is not None:
            ui_labels = {key: next(translated) for key in label_keys}
        return TranslatedSummary(
            summary=translated_summary,
            key_points=key_points,
            risk_level=risk_level,
            recommendations=recommendations,
            key_risks=extras["key_risks"],
            obligations=extras["obligations"],
            rights=extras["rights"],
            ui_labels=ui_labels,
            language=target_language,
        )

    async def detect_language(self, text: str) -> LanguageDetection:
        async with self._semaphore:
            return await self._client.detect(text)

    @staticmethod
    def get_supported_languages() -> dict[str, str]:
        return dict(SUPPORTED_LANGUAGES)

    async def _translate_item(
        self, text: str, target_language: str, source_language: str | None
    ) -> TranslationResult:
        if not text.strip():
            return TranslationResult(
                original_text=text,
                translated_text=text,
                target_language=target_language,
                source_language=source_language,
            )
        try:
            async with self._semaphore:
                return await self._client.translate(text, target_language, source_language)
        except CredentialError:
            raise
        except ExternalServiceError as exc:
            Log.warning(f"Translation of one item to {target_language} failed: {exc}")
            return TranslationResult(
                original_text=text,
                translated_text="",
                target_language=target_language,
                source_language=source_language,
                error=str(exc),
            )
