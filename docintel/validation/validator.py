from docintel.extraction.base import BaseStructuringClient
from docintel.logging.logger import Log
from docintel.validation.classifier import LegalClassifier
from docintel.validation.models import ValidationResult
from docintel.validation.pipeline import ValidationContext, ValidationStep
from docintel.validation.steps import (
    CheckSizeStep,
    ClassifyStep,
    ExtractTextStep,
    ResolveFormatStep,
)


class ValidationPipeline:
    """Decides whether an upload is a legal document worth analyzing.

    Pipeline: size -> format -> extract text -> classify. Input rejections
    are raised by the first two steps, before any external call. Nothing is
    persisted.
    """

    def __init__(self, steps: list[ValidationStep], confidence_threshold: float) -> None:
        self._steps = steps
        self._confidence_threshold = confidence_threshold

    async def validate(self, content: bytes, filename: str, mime_type: str) -> ValidationResult:
        """Run all validation steps over the upload.

        Raises:
            EmptyFileError: if the content is zero bytes.
            TooLargeError: if the content exceeds the upload limit.
            UnsupportedFormatError: if the format is not in the allow-list.
        """
        Log.info(f"Validating '{filename}' ({len(content)} bytes, {mime_type or 'no type'})")
        context = ValidationContext(
            content=content, filename=filename, declared_mime_type=mime_type
        )
        for step in self._steps:
            context = await step.run(context)
        return self._build_result(context)

    def _build_result(self, context: ValidationContext) -> ValidationResult:
        if context.format is None or context.extracted is None or context.classification is None:
            raise ValueError("ValidationContext is incomplete after all steps ran")
        classification = context.classification
        confident = classification.confidence >= self._confidence_threshold
        is_valid = classification.is_legal and confident

        if is_valid:
            message = f"Valid {classification.document_type} document"
        elif not classification.is_legal:
            message = "The document does not appear to be a legal document"
        else:
            message = (
                f"Classification confidence {classification.confidence:.2f} is below "
                f"the threshold {self._confidence_threshold:.2f}"
            )
        Log.info(f"Validation of '{context.filename}': valid={is_valid} ({message})")
        return ValidationResult(
            is_valid=is_valid,
            is_legal=classification.is_legal,
            document_type=classification.document_type,
            confidence=classification.confidence,
            message=message,
            format=context.format.name,
            extracted_text=context.extracted.text,
        )


def build_validation_pipeline(
    *,
    max_upload_bytes: int,
    confidence_threshold: float,
    structuring_client: BaseStructuringClient | None,
    fallback_extractor: BaseStructuringClient,
    classifier: LegalClassifier,
) -> ValidationPipeline:
    steps: list[ValidationStep] = [
        CheckSizeStep(max_upload_bytes),
        ResolveFormatStep(),
        ExtractTextStep(structuring_client, fallback_extractor),
        ClassifyStep(classifier),
    ]
    return ValidationPipeline(steps, confidence_threshold)
