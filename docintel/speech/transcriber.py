import base64
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from docintel.errors import category_for_status
from docintel.logging.logger import Log
from docintel.speech.audio_format import detect_audio_format
from docintel.speech.exceptions import AudioTooLargeError, EmptyAudioError, TranscriptionError
from docintel.speech.models import Transcription


class SpeechTranscriber:
    """Turns recorded questions into text through Speech-to-Text v1."""

    def __init__(
        self,
        *,
        base_url: str,
        token_source: Callable[[], Awaitable[str]],
        timeout_seconds: int,
        max_audio_bytes: int,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._token_source = token_source
        self._timeout_seconds = timeout_seconds
        self._max_audio_bytes = max_audio_bytes
        self._http_client = http_client

    async def transcribe(
        self,
        audio: bytes,
        language_code: str = "en-US",
        mime_type: str = "",
        filename: str = "",
    ) -> Transcription:
        """Transcribe *audio*; an empty transcript means no speech was detected.

        Raises:
            EmptyAudioError: if the audio is zero bytes.
            AudioTooLargeError: if the audio exceeds the size limit.
            TranscriptionError: if the speech service fails.
        """
        if not audio:
            raise EmptyAudioError("Audio payload is empty")
        if len(audio) > self._max_audio_bytes:
            raise AudioTooLargeError(
                f"Audio is {len(audio)} bytes, the limit is {self._max_audio_bytes}"
            )
        audio_format = detect_audio_format(audio, mime_type, filename)
        config: dict[str, Any] = {
            "encoding": audio_format.encoding,
            "languageCode": language_code,
            "enableAutomaticPunctuation": True,
            "model": "latest_short",
        }
        if audio_format.sends_sample_rate:
            config["sampleRateHertz"] = audio_format.sample_rate_hertz
        body = {"config": config, "audio": {"content": base64.b64encode(audio).decode("ascii")}}

        Log.info(f"Transcribing {len(audio)} bytes of {audio_format.encoding} audio")
        payload = await self._recognize(body)

        transcripts: list[str] = []
        confidence = 0.0
        for result in payload.get("results") or []:
            alternatives = result.get("alternatives") if isinstance(result, dict) else None
            if not alternatives:
                continue
            best = alternatives[0]
            confidence = max(confidence, float(best.get("confidence") or 0.0))
            transcripts.append(best.get("transcript") or "")
        transcript = " ".join(transcripts).strip()
        if not transcript:
            Log.warning("No speech detected in audio")
        return Transcription(
            transcript=transcript, confidence=confidence, encoding=audio_format.encoding
        )

    async def _recognize(self, body: dict[str, Any]) -> dict[str, Any]:
        token = await self._token_source()
        headers = {"Authorization": f"Bearer {token}"}
        url = f"{self._base_url}/speech:recognize"
        try:
            if self._http_client is not None:
                response = await self._http_client.post(
                    url, json=body, headers=headers, timeout=self._timeout_seconds
                )
            else:
                async with httpx.AsyncClient(timeout=self._timeout_seconds) as client:
                    response = await client.post(url, json=body, headers=headers)
            response.raise_for_status()
            payload = response.json()
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise TranscriptionError(
                f"Speech request failed with status {status}", category_for_status(status)
            ) from exc
        except httpx.TimeoutException as exc:
            raise TranscriptionError(f"Speech request timed out: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TranscriptionError(f"Speech service unreachable: {exc}") from exc
        except ValueError as exc:
            raise TranscriptionError(f"Speech service returned invalid JSON: {exc}") from exc
        if not isinstance(payload, dict):
            raise TranscriptionError("Speech response must be an object")
        return payload
