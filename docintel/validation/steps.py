from docintel.errors import ExternalServiceError
from docintel.extraction.base import BaseStructuringClient
from docintel.extraction.exceptions import ExtractionError
from docintel.extraction.models import ExtractedText
from docintel.logging.logger import Log
from docintel.validation.classifier import LegalClassifier
from docintel.validation.exceptions import EmptyFileError, TooLargeError
from docintel.validation.formats import resolve_format
from docintel.validation.pipeline import ValidationContext, ValidationStep


class CheckSizeStep(ValidationStep):
    def __init__(self, max_bytes: int) -> None:
        self._max_bytes = max_bytes

    async def run(self, context: ValidationContext) -> ValidationContext:
        size = len(context.content)
        if size == 0:
            raise EmptyFileError(f"File '{context.filename}' is empty")
        if size > self._max_bytes:
            raise TooLargeError(
                f"File '{context.filename}' is {size} bytes, the limit is {self._max_bytes}"
            )
        return context


class ResolveFormatStep(ValidationStep):
    async def run(self, context: ValidationContext) -> ValidationContext:
        context.format = resolve_format(
            context.declared_mime_type, context.filename, context.content
        )
        Log.debug(f"Resolved '{context.filename}' as {context.format.name}")
        return context


class ExtractTextStep(ValidationStep):
    """Extracts text with the structuring service, degrading to local extraction."""

    def __init__(
        self,
        structuring_client: BaseStructuringClient | None,
        fallback_extractor: BaseStructuringClient,
    ) -> None:
        self._structuring_client = structuring_client
        self._fallback_extractor = fallback_extractor

    async def run(self, context: ValidationContext) -> ValidationContext:
        if context.format is None:
            raise ValueError("ValidationContext.format must be set before extraction")
        mime_type = context.format.mime_type
        if self._structuring_client is not None:
            try:
                context.extracted = await self._structuring_client.extract(
                    context.content, mime_type
                )
                return context
            except ExternalServiceError as exc:
                Log.warning(f"Structuring service failed for '{context.filename}': {exc}")
        try:
            context.extracted = await self._fallback_extractor.extract(context.content, mime_type)
        except ExtractionError as exc:
            Log.warning(f"Local extraction failed for '{context.filename}', no text recovered: {exc}")
            context.extracted = ExtractedText(text="", confidence=0.0)
        return context


class ClassifyStep(ValidationStep):
    def __init__(self, classifier: LegalClassifier) -> None:
        self._classifier = classifier

    async def run(self, context: ValidationContext) -> ValidationContext:
        if context.extracted is None:
            raise ValueError("ValidationContext.extracted must be set before classification")
        context.classification = await self._classifier.classify(
            context.extracted.text,
            filename=context.filename,
            entities=context.extracted.entities,
        )
        Log.info(
            f"Classified '{context.filename}' as {context.classification.document_type} "
            f"(legal={context.classification.is_legal}, "
            f"confidence={context.classification.confidence:.2f}, "
            f"via {context.classification.source})"
        )
        return context
