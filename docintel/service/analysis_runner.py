from docintel.analysis.analyzer import AnalysisPipeline
from docintel.documents.exceptions import AlreadyAnalyzedError
from docintel.documents.models import Document
from docintel.documents.store import DocumentStore
from docintel.errors import classify_error
from docintel.logging.logger import Log


class AnalysisRunner:
    """Run one analysis job and record its outcome in the store."""

    def __init__(self, pipeline: AnalysisPipeline, store: DocumentStore) -> None:
        self._pipeline = pipeline
        self._store = store

    async def run(self, document_id: str, extracted_text: str, document_type: str) -> Document:
        """Analyze a stored document and move it to 'analyzed' or 'failed'."""
        Log.info(f"Running analysis for document {document_id}")
        try:
            processing = await self._pipeline.analyze(
                document_id, extracted_text, document_type=document_type
            )
            document = self._store.attach_processing(document_id, processing)
            Log.info(f"Analysis for document {document_id} completed successfully")
            return document
        except AlreadyAnalyzedError as exc:
            Log.warning(f"Analysis result for {document_id} discarded: {exc}")
            return self._current(document_id)
        except Exception as exc:
            return self._handle_failure(document_id, exc)

    def _handle_failure(self, document_id: str, exc: Exception) -> Document:
        category = classify_error(exc)
        Log.error(f"Analysis for document {document_id} failed ({category}): {exc}")
        try:
            return self._store.mark_failed(document_id, f"{category}: {exc}")
        except AlreadyAnalyzedError:
            return self._current(document_id)

    def _current(self, document_id: str) -> Document:
        document = self._store.get(document_id)
        if document is None:
            raise RuntimeError(f"Document {document_id} vanished from the store")
        return document
