import asyncio
import hashlib
from collections.abc import Mapping
from typing import Any

from docintel.chat.engine import ChatQueryEngine
from docintel.chat.models import ChatExchange
from docintel.documents.exceptions import NotFoundError
from docintel.documents.models import Document
from docintel.documents.store import DocumentStore
from docintel.logging.logger import Log
from docintel.service.analysis_runner import AnalysisRunner
from docintel.service.exceptions import InvalidRequestError
from docintel.service.health import HealthChecker
from docintel.service.models import HealthReport, SubmitResult
from docintel.speech.models import Transcription
from docintel.speech.transcriber import SpeechTranscriber
from docintel.translation.dispatcher import TranslationDispatcher
from docintel.translation.languages import require_supported
from docintel.translation.models import SummaryContent
from docintel.validation.exceptions import ValidationError
from docintel.validation.formats import SUPPORTED_FORMATS
from docintel.validation.models import ValidationResult
from docintel.validation.validator import ValidationPipeline


class DocumentIntelligenceService:
    """Boundary surface of the service.

    Upload -> validate -> store -> analyze (background task) -> chat, plus
    translation, transcription and health reporting.
    """

    TRANSLATE_ACTIONS = (
        "translateText",
        "translateTexts",
        "translateSummary",
        "detectLanguage",
        "getSupportedLanguages",
    )

    def __init__(
        self,
        *,
        store: DocumentStore,
        validation: ValidationPipeline,
        analysis_runner: AnalysisRunner,
        chat: ChatQueryEngine,
        translation: TranslationDispatcher,
        transcriber: SpeechTranscriber,
        health_checker: HealthChecker,
    ) -> None:
        self._store = store
        self._validation = validation
        self._analysis_runner = analysis_runner
        self._chat = chat
        self._translation = translation
        self._transcriber = transcriber
        self._health_checker = health_checker
        self._analysis_tasks: dict[str, asyncio.Task[Document]] = {}

    async def submit(self, content: bytes, filename: str, mime_type: str) -> SubmitResult:
        """Validate an upload and, when valid, store it and start its analysis.

        Input rejections come back as an invalid result tagged with the
        error kind instead of raising.
        """
        try:
            result = await self._validation.validate(content, filename, mime_type)
        except ValidationError as exc:
            Log.warning(f"Upload '{filename}' rejected: {exc}")
            return SubmitResult(validation=ValidationResult.rejected(exc))
        if not result.is_valid:
            return SubmitResult(validation=result)

        existing = self._store.find_by_hash(hashlib.sha256(content).hexdigest())
        if existing is not None:
            Log.info(f"Upload '{filename}' duplicates document {existing.id}")
            return SubmitResult(validation=result, document_id=existing.id, duplicate=True)

        document_id = self._store.create(
            content,
            filename=filename,
            mime_type=_mime_for(result),
            extracted_text=result.extracted_text,
        )
        self._schedule_analysis(document_id, result)
        return SubmitResult(validation=result, document_id=document_id)

    async def wait_for_analysis(self, document_id: str) -> Document:
        """Wait until the document leaves 'uploaded' and return it.

        Raises:
            NotFoundError: if the document id is unknown.
        """
        task = self._analysis_tasks.get(document_id)
        if task is not None:
            await task
        return self.get_document(document_id)

    def get_document(self, document_id: str) -> Document:
        document = self._store.get(document_id)
        if document is None:
            raise NotFoundError(f"Document {document_id} not found")
        return document

    def list_documents(self) -> list[Document]:
        return self._store.list_documents()

    async def query(self, document_id: str, text: str) -> ChatExchange:
        return await self._chat.query(document_id, text)

    async def translate(self, action: str, payload: Mapping[str, Any]) -> Any:
        """Dispatch one translation request in the boundary's payload format.

        Raises:
            InvalidRequestError: on an unknown action or a missing field.
            UnsupportedLanguageError: if the target language is unsupported.
            TranslationError: if the translation service fails.
        """
        if action not in self.TRANSLATE_ACTIONS:
            raise InvalidRequestError(
                f"Invalid action '{action}'. Supported actions: {', '.join(self.TRANSLATE_ACTIONS)}"
            )
        if action == "getSupportedLanguages":
            return self._translation.get_supported_languages()
        if action == "detectLanguage":
            return await self._translation.detect_language(_require(payload, "text", str))

        target = require_supported(_require(payload, "targetLanguage", str))
        source = payload.get("sourceLanguage") or None
        if action == "translateText":
            return await self._translation.translate_text(
                _require(payload, "text", str), target, source
            )
        if action == "translateTexts":
            texts = _require(payload, "texts", list)
            if not all(isinstance(text, str) for text in texts):
                raise InvalidRequestError("'texts' must contain only strings")
            return await self._translation.translate_texts(texts, target, source)
        summary = _summary_from_payload(_require(payload, "summary", Mapping))
        return await self._translation.translate_summary(summary, target, source)

    async def transcribe(
        self,
        audio: bytes,
        language_code: str = "en-US",
        mime_type: str = "",
        filename: str = "",
    ) -> Transcription:
        return await self._transcriber.transcribe(audio, language_code, mime_type, filename)

    async def health(self) -> HealthReport:
        return await self._health_checker.check()

    def create_test_document(self) -> str:
        return self._store.create_test_document()

    async def aclose(self) -> None:
        """Wait for all analyses still in flight."""
        if self._analysis_tasks:
            await asyncio.gather(*self._analysis_tasks.values(), return_exceptions=True)

    def _schedule_analysis(self, document_id: str, result: ValidationResult) -> None:
        task = asyncio.create_task(
            self._analysis_runner.run(document_id, result.extracted_text, result.document_type),
            name=f"analysis-{document_id}",
        )
        self._analysis_tasks[document_id] = task
        task.add_done_callback(lambda _: self._analysis_tasks.pop(document_id, None))
        Log.info(f"Scheduled analysis for document {document_id}")


def _require(payload: Mapping[str, Any], key: str, expected: type) -> Any:
    value = payload.get(key)
    if not isinstance(value, expected) or (isinstance(value, str) and not value.strip()):
        raise InvalidRequestError(f"'{key}' is required")
    return value


def _summary_from_payload(raw: Mapping[str, Any]) -> SummaryContent:
    def string_list(key: str) -> list[str] | None:
        value = raw.get(key)
        if value is None:
            return None
        if not isinstance(value, list):
            raise InvalidRequestError(f"'summary.{key}' must be a list")
        return [str(item) for item in value]

    ui_labels = raw.get("uiLabels")
    if ui_labels is not None and not isinstance(ui_labels, Mapping):
        raise InvalidRequestError("'summary.uiLabels' must be an object")

    return SummaryContent(
        summary=str(raw.get("summary") or ""),
        key_points=string_list("keyPoints") or [],
        risk_level=str(raw.get("riskLevel") or ""),
        recommendations=string_list("recommendations") or [],
        key_risks=string_list("keyRisks"),
        obligations=string_list("obligations"),
        rights=string_list("rights"),
        ui_labels={str(key): str(value) for key, value in ui_labels.items()}
        if ui_labels is not None
        else None,
    )


def _mime_for(result: ValidationResult) -> str:
    for fmt in SUPPORTED_FORMATS:
        if fmt.name == result.format:
            return fmt.mime_type
    return "application/octet-stream"
