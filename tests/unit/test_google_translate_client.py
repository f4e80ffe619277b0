import json
from collections.abc import Callable
from unittest.mock import AsyncMock

import httpx
import pytest

from docintel.errors import ErrorCategory
from docintel.translation.exceptions import TranslationError
from docintel.translation.google_client import GoogleTranslateClient

BASE_URL = "https://translation.googleapis.com/language/translate/v2"


def _make_client(handler: Callable[[httpx.Request], httpx.Response]) -> GoogleTranslateClient:
    return GoogleTranslateClient(
        base_url=BASE_URL,
        token_source=AsyncMock(return_value="tok"),
        timeout_seconds=5,
        http_client=httpx.AsyncClient(transport=httpx.MockTransport(handler)),
    )


class TestGoogleTranslateClient:
    @pytest.mark.asyncio
    async def test_translate_posts_text_and_unescapes(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(
                200,
                json={
                    "data": {
                        "translations": [
                            {"translatedText": "Tarifa &quot;tard&iacute;a&quot;", "detectedSourceLanguage": "en"}
                        ]
                    }
                },
            )

        result = await _make_client(handler).translate("Late fee", "es")

        body = json.loads(seen[0].content)
        assert body == {"q": ["Late fee"], "target": "es", "format": "text"}
        assert seen[0].headers["Authorization"] == "Bearer tok"
        assert result.translated_text == 'Tarifa "tardía"'
        assert result.source_language == "en"

    @pytest.mark.asyncio
    async def test_translate_sends_source_language(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, json={"data": {"translations": [{"translatedText": "Hallo"}]}})

        result = await _make_client(handler).translate("Hello", "de", "en")

        assert json.loads(seen[0].content)["source"] == "en"
        assert result.source_language == "en"

    @pytest.mark.asyncio
    async def test_detect(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            assert request.url.path.endswith("/detect")
            return httpx.Response(
                200, json={"data": {"detections": [[{"language": "fr", "confidence": 0.98}]]}}
            )

        detection = await _make_client(handler).detect("bonjour")

        assert detection.language == "fr"
        assert detection.confidence == 0.98

    @pytest.mark.asyncio
    async def test_quota_error_is_classified(self) -> None:
        with pytest.raises(TranslationError) as exc_info:
            await _make_client(lambda request: httpx.Response(429)).translate("a", "es")
        assert exc_info.value.category is ErrorCategory.QUOTA

    @pytest.mark.asyncio
    async def test_malformed_response_raises(self) -> None:
        with pytest.raises(TranslationError, match="Unexpected translation response"):
            await _make_client(lambda request: httpx.Response(200, json={"data": {}})).translate(
                "a", "es"
            )

    @pytest.mark.asyncio
    async def test_transport_failure_is_unavailable(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("connection refused")

        with pytest.raises(TranslationError, match="unreachable"):
            await _make_client(handler).probe()
