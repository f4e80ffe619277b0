import json
from unittest.mock import AsyncMock

import pytest

from docintel.chat.engine import ChatQueryEngine, estimate_confidence, resolve_citations
from docintel.chat.exceptions import ChatUnavailableError, DocumentNotReadyError, EmptyQueryError
from docintel.chat.models import ContextSection
from docintel.completion.exceptions import CompletionError
from docintel.documents.exceptions import NotFoundError
from docintel.documents.store import DocumentStore
from docintel.errors import ErrorCategory


def _make_client(response: object) -> AsyncMock:
    client = AsyncMock()
    client.complete = AsyncMock(side_effect=[response])
    return client


def _make_engine(store: DocumentStore, client: AsyncMock) -> ChatQueryEngine:
    return ChatQueryEngine(store=store, client=client, timeout_seconds=5)


class TestChatQueryEngine:
    @pytest.mark.asyncio
    async def test_answers_with_cited_clause(self) -> None:
        store = DocumentStore()
        document_id = store.create_test_document()
        client = _make_client(
            json.dumps(
                {
                    "answer": "A $50 late fee applies after the due date.",
                    "confidence": 0.85,
                    "citations": ["clause-2", "clause-99"],
                }
            )
        )

        exchange = await _make_engine(store, client).query(document_id, "What is the late fee?")

        assert exchange.response == "A $50 late fee applies after the due date."
        assert exchange.confidence == 0.85
        assert "clause-2" in exchange.sources
        assert "clause-99" not in exchange.sources
        assert exchange.timestamp is not None
        context = client.complete.call_args.kwargs["context"]
        assert "[clause-2] Late Fee" in context

    @pytest.mark.asyncio
    async def test_unstructured_answer_uses_raw_text(self) -> None:
        store = DocumentStore()
        document_id = store.create_test_document()
        client = _make_client("According to clause-2 the late fee is $50 per late payment.")

        exchange = await _make_engine(store, client).query(document_id, "late fee?")

        assert exchange.response.startswith("According to clause-2")
        assert exchange.sources == ["clause-2"]
        assert exchange.confidence == 0.7

    @pytest.mark.asyncio
    async def test_empty_query_is_rejected_before_any_call(self) -> None:
        store = DocumentStore()
        client = _make_client("unused")

        with pytest.raises(EmptyQueryError):
            await _make_engine(store, client).query(store.create_test_document(), "   ")
        client.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_document_raises_not_found(self) -> None:
        client = _make_client("unused")

        with pytest.raises(NotFoundError):
            await _make_engine(DocumentStore(), client).query("doc_missing", "late fee?")
        client.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_unanalyzed_document_is_not_ready(self) -> None:
        store = DocumentStore()
        document_id = store.create(
            b"lease", filename="lease.pdf", mime_type="application/pdf", extracted_text="lease"
        )
        client = _make_client("unused")

        with pytest.raises(DocumentNotReadyError):
            await _make_engine(store, client).query(document_id, "late fee?")
        client.complete.assert_not_called()

    @pytest.mark.asyncio
    async def test_completion_failure_is_unavailable(self) -> None:
        store = DocumentStore()
        client = _make_client(CompletionError("quota exceeded"))

        with pytest.raises(ChatUnavailableError) as exc_info:
            await _make_engine(store, client).query(store.create_test_document(), "late fee?")
        assert exc_info.value.category is ErrorCategory.QUOTA

    @pytest.mark.asyncio
    async def test_out_of_range_confidence_is_clamped(self) -> None:
        store = DocumentStore()
        client = _make_client(json.dumps({"answer": "Rent is $1,500.", "confidence": 3}))

        exchange = await _make_engine(store, client).query(store.create_test_document(), "rent?")

        assert exchange.confidence == 1.0


class TestResolveCitations:
    SECTIONS = [
        ContextSection(id="summary", title="Summary", text=""),
        ContextSection(id="clause-1", title="Rent", text=""),
        ContextSection(id="clause-2", title="Late Fee", text=""),
    ]

    def test_titles_map_to_ids(self) -> None:
        assert resolve_citations(["Late Fee"], "", self.SECTIONS) == ["clause-2"]

    def test_bracketed_ids_are_accepted(self) -> None:
        assert resolve_citations(["[clause-1]"], "", self.SECTIONS) == ["clause-1"]

    def test_answer_mentions_are_collected_once(self) -> None:
        sources = resolve_citations(["clause-2"], "The late fee (clause-2) is $50.", self.SECTIONS)

        assert sources == ["clause-2"]

    def test_ids_outside_context_are_dropped(self) -> None:
        assert resolve_citations(["risk-4"], "See clause-7.", self.SECTIONS) == []


class TestEstimateConfidence:
    def test_hedged_short_answer_scores_low(self) -> None:
        assert estimate_confidence("I don't know") == 0.4

    def test_grounded_long_answer_scores_high(self) -> None:
        answer = "The lease specifically states that the tenant pays $1,500 by the 5th."

        assert estimate_confidence(answer) == 0.9
