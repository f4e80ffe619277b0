import base64
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from docintel.errors import category_for_status
from docintel.extraction.base import BaseStructuringClient
from docintel.extraction.exceptions import ExtractionError
from docintel.extraction.models import Entity, ExtractedText
from docintel.logging.logger import Log

_DEFAULT_CONFIDENCE = 0.85


class DocumentAiClient(BaseStructuringClient):
    """Document AI processor called over its REST interface."""

    BASE_URL = "https://{location}-documentai.googleapis.com/v1"

    def __init__(
        self,
        *,
        project_id: str,
        location: str,
        processor_id: str,
        token_source: Callable[[], Awaitable[str]],
        timeout_seconds: int,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._project_id = project_id
        self._location = location
        self._processor_id = processor_id
        self._token_source = token_source
        self._timeout_seconds = timeout_seconds
        self._http_client = http_client

    @property
    def is_configured(self) -> bool:
        return bool(self._project_id and self._processor_id)

    @property
    def processor_url(self) -> str:
        return (
            f"{self.BASE_URL.format(location=self._location)}/projects/{self._project_id}"
            f"/locations/{self._location}/processors/{self._processor_id}"
        )

    async def extract(self, content: bytes, mime_type: str) -> ExtractedText:
        if not self.is_configured:
            raise ExtractionError("Document AI processor is not configured")
        body = {
            "rawDocument": {
                "content": base64.b64encode(content).decode("ascii"),
                "mimeType": mime_type,
            }
        }
        payload = await self._request("POST", f"{self.processor_url}:process", json=body)
        document = payload.get("document") or {}
        text = document.get("text") or ""
        if not text.strip():
            raise ExtractionError("Document AI returned no text")
        entities = _parse_entities(document.get("entities"))
        confidence = _overall_confidence(document.get("pages"))
        Log.info(
            f"Document AI extracted {len(text)} chars, {len(entities)} entities "
            f"(confidence {confidence:.2f})"
        )
        return ExtractedText(text=text, confidence=confidence, entities=entities)

    async def probe(self) -> None:
        """Fetch the processor resource to check reachability and permissions.

        Raises:
            ExtractionError: if the processor is unreachable or not configured.
        """
        if not self.is_configured:
            raise ExtractionError("Document AI processor is not configured")
        await self._request("GET", self.processor_url)

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
            raise ExtractionError(
                f"Document AI request failed with status {status}", category_for_status(status)
            ) from exc
        except httpx.TimeoutException as exc:
            raise ExtractionError(f"Document AI request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise ExtractionError(f"Document AI unreachable: {exc}") from exc
        except ValueError as exc:
            raise ExtractionError(f"Document AI returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise ExtractionError("Document AI response must be an object")
        return payload


def _parse_entities(raw: Any) -> list[Entity]:
    if not isinstance(raw, list):
        return []
    entities: list[Entity] = []
    for item in raw:
        if not isinstance(item, dict):
            continue
        entities.append(
            Entity(
                type=str(item.get("type") or ""),
                mention_text=str(item.get("mentionText") or ""),
                confidence=float(item.get("confidence") or 0.0),
            )
        )
    return entities


def _overall_confidence(pages: Any) -> float:
    """Mean token break confidence across pages; 0.85 when none is reported."""
    if not isinstance(pages, list) or not pages:
        return 0.0
    scores = [
        token["detectedBreak"]["confidence"]
        for page in pages
        if isinstance(page, dict)
        for token in page.get("tokens") or []
        if isinstance(token, dict)
        and isinstance(token.get("detectedBreak"), dict)
        and token["detectedBreak"].get("confidence")
    ]
    if not scores:
        return _DEFAULT_CONFIDENCE
    return sum(float(score) for score in scores) / len(scores)
