from unittest.mock import AsyncMock, MagicMock

import pytest

from docintel.analysis.exceptions import AnalysisUnavailableError
from docintel.completion.exceptions import CompletionError
from docintel.credentials.exceptions import CredentialError
from docintel.documents.models import DocumentProcessing, DocumentState, Summary
from docintel.documents.store import DocumentStore
from docintel.service.analysis_runner import AnalysisRunner


def _make_pipeline(result: object) -> MagicMock:
    pipeline = MagicMock()
    if isinstance(result, Exception):
        pipeline.analyze = AsyncMock(side_effect=result)
    else:
        pipeline.analyze = AsyncMock(return_value=result)
    return pipeline


def _make_processing() -> DocumentProcessing:
    return DocumentProcessing(document_type="lease", summary=Summary(text="A lease"))


def _store_with_document() -> tuple[DocumentStore, str]:
    store = DocumentStore()
    document_id = store.create(
        b"lease", filename="lease.pdf", mime_type="application/pdf", extracted_text="lease"
    )
    return store, document_id


class TestAnalysisRunner:
    @pytest.mark.asyncio
    async def test_success_moves_document_to_analyzed(self) -> None:
        store, document_id = _store_with_document()
        pipeline = _make_pipeline(_make_processing())

        document = await AnalysisRunner(pipeline, store).run(document_id, "lease", "lease")

        assert document.state is DocumentState.ANALYZED
        assert document.processing is not None
        pipeline.analyze.assert_awaited_once_with(document_id, "lease", document_type="lease")

    @pytest.mark.asyncio
    async def test_unavailable_marks_document_failed(self) -> None:
        store, document_id = _store_with_document()
        error = AnalysisUnavailableError("failed", CompletionError("quota exceeded"))

        document = await AnalysisRunner(_make_pipeline(error), store).run(
            document_id, "lease", "lease"
        )

        assert document.state is DocumentState.FAILED
        assert document.error_message is not None
        assert document.error_message.startswith("quota:")

    @pytest.mark.asyncio
    async def test_credential_error_marks_document_failed(self) -> None:
        store, document_id = _store_with_document()

        document = await AnalysisRunner(
            _make_pipeline(CredentialError("token endpoint rejected the credentials")), store
        ).run(document_id, "lease", "lease")

        assert document.state is DocumentState.FAILED
        assert document.error_message is not None
        assert document.error_message.startswith("credential:")

    @pytest.mark.asyncio
    async def test_late_result_for_finished_document_is_discarded(self) -> None:
        store, document_id = _store_with_document()
        store.mark_failed(document_id, "unavailable: earlier failure")

        document = await AnalysisRunner(_make_pipeline(_make_processing()), store).run(
            document_id, "lease", "lease"
        )

        assert document.state is DocumentState.FAILED
        assert document.processing is None
