import base64
import json
from unittest.mock import AsyncMock

import httpx
import pytest

from docintel.errors import ErrorCategory
from docintel.extraction.documentai_client import DocumentAiClient
from docintel.extraction.exceptions import ExtractionError


def _make_client(
    handler: httpx.MockTransport, processor_id: str = "proc-1"
) -> DocumentAiClient:
    return DocumentAiClient(
        project_id="legal-assist",
        location="us",
        processor_id=processor_id,
        token_source=AsyncMock(return_value="tok"),
        timeout_seconds=5,
        http_client=httpx.AsyncClient(transport=handler),
    )


class TestDocumentAiClient:
    @pytest.mark.asyncio
    async def test_sends_raw_document_and_parses_response(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "document": {
                        "text": "Lease agreement",
                        "entities": [{"type": "MONEY", "mentionText": "$50", "confidence": 0.8}],
                        "pages": [{"tokens": [{"detectedBreak": {"confidence": 0.6}}]}],
                    }
                },
            )

        result = await _make_client(httpx.MockTransport(handler)).extract(
            b"%PDF", "application/pdf"
        )

        request = seen[0]
        body = json.loads(request.content)
        assert request.url.path.endswith("/processors/proc-1:process")
        assert request.headers["Authorization"] == "Bearer tok"
        assert base64.b64decode(body["rawDocument"]["content"]) == b"%PDF"
        assert result.text == "Lease agreement"
        assert result.entities[0].type == "MONEY"
        assert result.confidence == pytest.approx(0.6)

    @pytest.mark.asyncio
    async def test_default_confidence_without_token_scores(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(
                200, json={"document": {"text": "Lease", "pages": [{"tokens": []}]}}
            )
        )
        result = await _make_client(transport).extract(b"%PDF", "application/pdf")
        assert result.confidence == 0.85

    @pytest.mark.asyncio
    async def test_empty_text_raises(self) -> None:
        transport = httpx.MockTransport(
            lambda request: httpx.Response(200, json={"document": {"text": ""}})
        )
        with pytest.raises(ExtractionError, match="no text"):
            await _make_client(transport).extract(b"%PDF", "application/pdf")

    @pytest.mark.asyncio
    async def test_not_configured_raises_without_request(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, json={})

        client = _make_client(httpx.MockTransport(handler), processor_id="")
        with pytest.raises(ExtractionError, match="not configured"):
            await client.extract(b"%PDF", "application/pdf")
        assert calls == []

    @pytest.mark.asyncio
    async def test_permission_denied_is_classified(self) -> None:
        transport = httpx.MockTransport(lambda request: httpx.Response(403, json={}))
        with pytest.raises(ExtractionError) as exc_info:
            await _make_client(transport).extract(b"%PDF", "application/pdf")
        assert exc_info.value.category is ErrorCategory.PERMISSION

    @pytest.mark.asyncio
    async def test_probe_fetches_processor(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"name": "proc-1"})

        await _make_client(httpx.MockTransport(handler)).probe()
        assert seen[0].method == "GET"
        assert seen[0].url.path.endswith("/processors/proc-1")
