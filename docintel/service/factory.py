from docintel.analysis.analyzer import AnalysisPipeline
from docintel.chat.engine import ChatQueryEngine
from docintel.completion import CompletionClientFactory
from docintel.config.settings import Settings
from docintel.credentials.cache import CredentialCache
from docintel.credentials.token_provider import ServiceAccountTokenProvider
from docintel.documents.store import DocumentStore
from docintel.extraction.documentai_client import DocumentAiClient
from docintel.extraction.fallback import LocalTextExtractor
from docintel.pdf.factory import PdfExtractorFactory
from docintel.service.analysis_runner import AnalysisRunner
from docintel.service.health import HealthChecker
from docintel.service.orchestrator import DocumentIntelligenceService
from docintel.speech.transcriber import SpeechTranscriber
from docintel.translation.dispatcher import TranslationDispatcher
from docintel.translation.google_client import GoogleTranslateClient
from docintel.validation.classifier import LegalClassifier
from docintel.validation.validator import build_validation_pipeline


def build_service(settings: Settings) -> DocumentIntelligenceService:
    """Build the service with all required adapters.

    One CredentialCache is shared by every adapter that talks to Google.
    """
    credential_cache = CredentialCache(
        ServiceAccountTokenProvider(
            project_id=settings.gcp_project_id,
            service_account_key=settings.google_service_account_key,
            service_account_key_file=settings.google_service_account_key_file,
            scope=settings.token_scope,
            timeout_seconds=settings.token_timeout_seconds,
        ),
        refresh_margin_seconds=settings.token_refresh_margin_seconds,
    )
    token_source = credential_cache.get_access_token

    completion_client = CompletionClientFactory.create(settings, token_source)
    structuring_client = None
    if settings.document_ai_processor_id:
        structuring_client = DocumentAiClient(
            project_id=settings.gcp_project_id,
            location=settings.document_ai_location,
            processor_id=settings.document_ai_processor_id,
            token_source=token_source,
            timeout_seconds=settings.structuring_timeout_seconds,
        )
    fallback_extractor = LocalTextExtractor(PdfExtractorFactory.create(settings))
    validation = build_validation_pipeline(
        max_upload_bytes=settings.max_upload_bytes,
        confidence_threshold=settings.validation_confidence_threshold,
        structuring_client=structuring_client,
        fallback_extractor=fallback_extractor,
        classifier=LegalClassifier(
            client=completion_client, timeout_seconds=settings.completion_timeout_seconds
        ),
    )

    store = DocumentStore()
    analysis = AnalysisPipeline(
        client=completion_client,
        temperature=settings.analysis_temperature,
        timeout_seconds=settings.completion_timeout_seconds,
        retry_backoff_seconds=settings.analysis_retry_backoff_seconds,
    )
    chat = ChatQueryEngine(
        store=store,
        client=completion_client,
        temperature=settings.chat_temperature,
        timeout_seconds=settings.completion_timeout_seconds,
        max_sections=settings.chat_max_sections,
        max_context_chars=settings.chat_max_context_chars,
    )
    translation_client = GoogleTranslateClient(
        base_url=settings.translation_base_url,
        token_source=token_source,
        timeout_seconds=settings.translation_timeout_seconds,
    )
    transcriber = SpeechTranscriber(
        base_url=settings.speech_base_url,
        token_source=token_source,
        timeout_seconds=settings.speech_timeout_seconds,
        max_audio_bytes=settings.speech_max_audio_bytes,
    )
    health_checker = HealthChecker(
        settings=settings,
        credential_cache=credential_cache,
        structuring_client=structuring_client,
        translation_client=translation_client,
    )
    return DocumentIntelligenceService(
        store=store,
        validation=validation,
        analysis_runner=AnalysisRunner(analysis, store),
        chat=chat,
        translation=TranslationDispatcher(
            translation_client, settings.translation_max_concurrency
        ),
        transcriber=transcriber,
        health_checker=health_checker,
    )
