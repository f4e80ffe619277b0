"""Grounded question answering over one analyzed document."""

import asyncio
import json
import re
from datetime import datetime, timezone

from docintel.chat.exceptions import ChatUnavailableError, DocumentNotReadyError, EmptyQueryError
from docintel.chat.models import ChatExchange, ContextSection
from docintel.chat.retrieval import build_sections, render_context, select_sections
from docintel.completion.client_base import BaseCompletionClient
from docintel.completion.exceptions import CompletionError
from docintel.completion.json_response import clamp_unit, parse_json_object
from docintel.completion.prompt_loader import load_json_schema, load_prompt_template
from docintel.documents.exceptions import NotFoundError
from docintel.documents.models import DocumentState
from docintel.documents.store import DocumentStore
from docintel.logging.logger import Log

_SECTION_ID = re.compile(r"\b(summary|(?:clause|risk|obligation|right)-\d+)\b", re.IGNORECASE)
_MIN_TITLE_LENGTH = 4


class ChatQueryEngine:
    """Answers questions about a document with confidence and cited sections.

    Stateless per call: every query rebuilds its context from the store.
    """

    def __init__(
        self,
        *,
        store: DocumentStore,
        client: BaseCompletionClient,
        temperature: float = 0.3,
        timeout_seconds: float = 30.0,
        max_sections: int = 6,
        max_context_chars: int = 6000,
        system_prompt: str = (
            "You are a legal expert helping users understand their legal documents."
        ),
    ) -> None:
        self._store = store
        self._client = client
        self._temperature = temperature
        self._timeout_seconds = timeout_seconds
        self._max_sections = max_sections
        self._max_context_chars = max_context_chars
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template("chat")
        self._json_schema = load_json_schema("chat")

    async def query(self, document_id: str, text: str) -> ChatExchange:
        """Answer *text* from the analyzed content of *document_id*.

        Raises:
            EmptyQueryError: if the question is blank.
            NotFoundError: if the document id is unknown.
            DocumentNotReadyError: if the document has not been analyzed.
            ChatUnavailableError: if the completion service fails.
            CredentialError: if no access token can be obtained.
        """
        question = text.strip()
        if not question:
            raise EmptyQueryError("Query must not be empty")
        document = self._store.get(document_id)
        if document is None:
            raise NotFoundError(f"Document {document_id} not found")
        if document.state is not DocumentState.ANALYZED or document.processing is None:
            raise DocumentNotReadyError(
                f"Document {document_id} is {document.state.value}, not analyzed"
            )

        sections = select_sections(
            build_sections(document.processing),
            question,
            max_sections=self._max_sections,
            max_chars=self._max_context_chars,
        )
        Log.info(
            f"Chat on {document_id}: {len(sections)} section(s) selected "
            f"({', '.join(section.id for section in sections)})"
        )
        raw = await self._complete(document_id, question, sections)
        answer, confidence, cited = self._parse(raw)
        sources = resolve_citations(cited, answer, sections)
        return ChatExchange(
            query=question,
            response=answer,
            confidence=confidence,
            sources=sources,
            timestamp=datetime.now(timezone.utc),
        )

    async def _complete(
        self, document_id: str, question: str, sections: list[ContextSection]
    ) -> str:
        prompt = self._prompt_template.format(
            query=question, json_schema=json.dumps(self._json_schema, indent=2)
        )
        try:
            raw = await asyncio.wait_for(
                self._client.complete(
                    prompt=prompt,
                    context=render_context(sections),
                    system_prompt=self._system_prompt,
                    temperature=self._temperature,
                    json_schema=self._json_schema,
                ),
                timeout=self._timeout_seconds,
            )
        except TimeoutError as exc:
            raise ChatUnavailableError(
                f"Chat on {document_id} timed out after {self._timeout_seconds}s", exc
            ) from exc
        except CompletionError as exc:
            raise ChatUnavailableError(f"Chat on {document_id} failed: {exc}", exc) from exc
        Log.debug(f"Chat raw response for {document_id}:\n{raw}")
        return raw

    @staticmethod
    def _parse(raw: str) -> tuple[str, float, list[str]]:
        try:
            data = parse_json_object(raw)
        except CompletionError:
            data = {}
        answer = data.get("answer")
        if not isinstance(answer, str) or not answer.strip():
            Log.warning("Chat response is not structured, using raw text as the answer")
            answer = raw.strip()
            return answer, estimate_confidence(answer), []

        confidence, out_of_range = clamp_unit(data.get("confidence"), estimate_confidence(answer))
        if out_of_range:
            Log.warning(f"Chat confidence {data.get('confidence')!r} clamped to {confidence}")
        citations = data.get("citations")
        cited = [c for c in citations if isinstance(c, str)] if isinstance(citations, list) else []
        return answer.strip(), confidence, cited


def resolve_citations(
    cited: list[str], answer: str, sections: list[ContextSection]
) -> list[str]:
    """Map model citations and answer mentions onto the sections actually provided.

    Structured citations may be ids or titles; ids and titles are also
    picked up from the answer text. Anything not among *sections* is dropped.
    """
    by_id = {section.id: section for section in sections}
    by_title = {section.title.lower(): section.id for section in sections}
    sources: list[str] = []

    def add(section_id: str | None) -> None:
        if section_id is not None and section_id in by_id and section_id not in sources:
            sources.append(section_id)

    for citation in cited:
        key = citation.strip().strip("[]").strip()
        add(key.lower() if key.lower() in by_id else by_title.get(key.lower()))

    for match in _SECTION_ID.finditer(answer):
        add(match.group(1).lower())

    lowered = answer.lower()
    for section in sections:
        title = section.title.lower()
        if section.id != "summary" and len(title) >= _MIN_TITLE_LENGTH and title in lowered:
            add(section.id)
    return sources


def estimate_confidence(answer: str) -> float:
    """Heuristic confidence for an answer the model did not score itself."""
    confidence = 0.7
    if "I don't know" in answer or "not specified" in answer:
        confidence -= 0.2
    if "specifically states" in answer or "according to" in answer:
        confidence += 0.2
    if len(answer) < 50:
        confidence -= 0.1
    return round(min(max(confidence, 0.0), 1.0), 2)
