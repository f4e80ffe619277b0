"""Full-document structure extraction through the completion service."""

import asyncio
import json
from collections.abc import Callable

from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from docintel.analysis.builder import build_processing, fallback_processing
from docintel.analysis.exceptions import AnalysisUnavailableError
from docintel.completion.client_base import BaseCompletionClient
from docintel.completion.exceptions import CompletionError, CompletionNetworkError
from docintel.completion.json_response import parse_json_object
from docintel.completion.prompt_loader import load_json_schema, load_prompt_template
from docintel.documents.models import DocumentProcessing
from docintel.logging.logger import Log

_MAX_ATTEMPTS = 2


class AnalysisPipeline:
    """Turns extracted document text into a DocumentProcessing.

    Network, timeout and server failures are retried once with exponential
    backoff. A CredentialError is never retried and propagates as is.
    """

    def __init__(
        self,
        *,
        client: BaseCompletionClient,
        temperature: float = 0.2,
        timeout_seconds: float = 30.0,
        retry_backoff_seconds: float = 1.0,
        system_prompt: str = "You are an expert legal analyst. Respond only with valid JSON.",
    ) -> None:
        self._client = client
        self._temperature = temperature
        self._timeout_seconds = timeout_seconds
        self._retry_backoff_seconds = retry_backoff_seconds
        self._system_prompt = system_prompt
        self._prompt_template = load_prompt_template("analysis")
        self._json_schema = load_json_schema("analysis")

    async def analyze(
        self,
        document_id: str,
        extracted_text: str,
        *,
        document_type: str = "general_legal",
    ) -> DocumentProcessing:
        """Analyze the document text.

        Raises:
            AnalysisUnavailableError: if the completion service keeps failing.
            CredentialError: if no access token can be obtained.
        """
        prompt = self._prompt_template.format(
            document_type=document_type.replace("_", " "),
            document_text=extracted_text,
            json_schema=json.dumps(self._json_schema, indent=2),
        )
        Log.debug(f"Analysis prompt for {document_id}:\n{prompt}")

        raw = await self._complete_with_retry(document_id, prompt)
        Log.debug(f"Analysis raw response for {document_id}:\n{raw}")

        try:
            data = parse_json_object(raw)
        except CompletionError as exc:
            Log.warning(f"Analysis response for {document_id} is not JSON, keeping raw text: {exc}")
            return fallback_processing(raw, document_type)

        processing = build_processing(data, document_type)
        Log.info(
            f"Analysis of {document_id} complete: {len(processing.clauses)} clauses, "
            f"{len(processing.risks)} risks, risk score {processing.risk_score}"
        )
        return processing

    async def _complete_with_retry(self, document_id: str, prompt: str) -> str:
        retrying = AsyncRetrying(
            stop=stop_after_attempt(_MAX_ATTEMPTS),
            wait=wait_exponential(multiplier=self._retry_backoff_seconds),
            retry=retry_if_exception_type((CompletionNetworkError, TimeoutError)),
            before_sleep=_log_retry(document_id),
            reraise=True,
        )
        try:
            async for attempt in retrying:
                with attempt:
                    return await asyncio.wait_for(
                        self._client.complete(
                            prompt=prompt,
                            system_prompt=self._system_prompt,
                            temperature=self._temperature,
                            json_schema=self._json_schema,
                        ),
                        timeout=self._timeout_seconds,
                    )
        except TimeoutError as exc:
            raise AnalysisUnavailableError(
                f"Analysis of {document_id} timed out after {self._timeout_seconds}s", exc
            ) from exc
        except CompletionError as exc:
            raise AnalysisUnavailableError(f"Analysis of {document_id} failed: {exc}", exc) from exc
        raise AnalysisUnavailableError(f"Analysis of {document_id} produced no response")


def _log_retry(document_id: str) -> Callable[[RetryCallState], None]:
    def before_sleep(retry_state: RetryCallState) -> None:
        outcome = retry_state.outcome
        error = outcome.exception() if outcome is not None else None
        Log.warning(
            f"Analysis of {document_id} failed (attempt {retry_state.attempt_number}), "
            f"retrying: {error}"
        )

    return before_sleep
