import html
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from docintel.errors import category_for_status
from docintel.translation.base import BaseTranslationClient
from docintel.translation.exceptions import TranslationError
from docintel.translation.models import LanguageDetection, TranslationResult


class GoogleTranslateClient(BaseTranslationClient):
    """Cloud Translation v2 over REST, authorized with the shared access token."""

    def __init__(
        self,
        *,
        base_url: str,
        token_source: Callable[[], Awaitable[str]],
        timeout_seconds: int,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token_source = token_source
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client

    async def translate(
        self, text: str, target_language: str, source_language: str | None = None
    ) -> TranslationResult:
        body: dict[str, Any] = {"q": [text], "target": target_language, "format": "text"}
        if source_language:
            body["source"] = source_language
        payload = await self._request("POST", self._base_url, json=body)
        try:
            translation = payload["data"]["translations"][0]
            translated = html.unescape(translation["translatedText"])
        except (KeyError, IndexError, TypeError) as exc:
            raise TranslationError(f"Unexpected translation response: {exc}") from exc
        return TranslationResult(
            original_text=text,
            translated_text=translated,
            target_language=target_language,
            source_language=translation.get("detectedSourceLanguage") or source_language,
        )

    async def detect(self, text: str) -> LanguageDetection:
        payload = await self._request("POST", f"{self._base_url}/detect", json={"q": [text]})
        try:
            detection = payload["data"]["detections"][0][0]
            return LanguageDetection(
                language=detection["language"],
                confidence=float(detection.get("confidence") or 0.0),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise TranslationError(f"Unexpected detection response: {exc}") from exc

    async def probe(self) -> None:
        await self._request("GET", f"{self._base_url}/languages")

    async def _request(self, method: str, url: str, **kwargs: Any) -> dict[str, Any]:
        token = await self._token_source()
        headers = {"Authorization": f"Bearer {token}"}
        try:
            if self._http_client is not None:
                response = await self._http_client.request(
                    method, url, headers=headers, timeout=self._timeout_seconds, **kwargs
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.request(method, url, headers=headers, **kwargs)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TranslationError(
                f"Translation request failed with status {status}", category_for_status(status)
            ) from exc
        except httpx.TimeoutException as exc:
            raise TranslationError(f"Translation request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TranslationError(f"Translation service unreachable: {exc}") from exc
        except ValueError as exc:
            raise TranslationError(f"Translation service returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise TranslationError("Translation response must be an object")
        return payload
