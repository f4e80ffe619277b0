from collections.abc import Awaitable, Callable

import httpx
import openai

from docintel.completion.client_base import BaseCompletionClient
from docintel.completion.exceptions import CompletionError, CompletionNetworkError
from docintel.errors import ErrorCategory, category_for_status

TokenSource = Callable[[], Awaitable[str]]


class OpenAIClientAdapter(BaseCompletionClient):
    """Completion client built on the OpenAI-compatible chat API.

    The bearer token is fetched per call from *token_source*, which is the
    shared credential cache for Google-hosted models.
    """

    def __init__(
        self,
        *,
        model: str,
        token_source: TokenSource,
        timeout_seconds: int,
        base_url: str | None = None,
        client: openai.AsyncOpenAI | None = None,
    ) -> None:
        self._model = model
        self._token_source = token_source
        self._client = client or openai.AsyncOpenAI(
            api_key="pending",
            timeout=timeout_seconds,
            base_url=base_url,
            max_retries=0,
        )

    async def complete(
        self,
        *,
        prompt: str,
        context: str = "",
        system_prompt: str = "",
        temperature: float = 0.0,
        json_schema: dict[str, object] | None = None,
    ) -> str:
        token = await self._token_source()
        client = self._client.with_options(api_key=token)
        messages = []
        if system_prompt:
            messages.append({"role": "system", "content": system_prompt})
        user_content = f"Context:\n{context}\n\n{prompt}" if context else prompt
        messages.append({"role": "user", "content": user_content})

        kwargs: dict[str, object] = {}
        if json_schema is not None:
            kwargs["response_format"] = {
                "type": "json_schema",
                "json_schema": {
                    "name": str(json_schema.get("title", "response")),
                    "schema": json_schema,
                },
            }

        try:
            response = await client.chat.completions.create(
                model=self._model,
                temperature=temperature,
                messages=messages,
                **kwargs,
            )
        except (openai.APITimeoutError, httpx.TimeoutException) as exc:
            raise CompletionNetworkError(
                f"AI provider timeout: {exc}", ErrorCategory.TIMEOUT
            ) from exc
        except (openai.APIConnectionError, httpx.ConnectError) as exc:
            raise CompletionNetworkError(
                f"AI provider network error: {exc}", ErrorCategory.UNAVAILABLE
            ) from exc
        except (openai.AuthenticationError, openai.PermissionDeniedError) as exc:
            raise CompletionError(
                f"AI provider rejected credentials: {exc}",
                category_for_status(exc.status_code),
            ) from exc
        except openai.APIStatusError as exc:
            raise CompletionNetworkError(
                f"AI provider API error: {exc}", category_for_status(exc.status_code)
            ) from exc
        except openai.APIError as exc:
            raise CompletionNetworkError(f"AI provider API error: {exc}") from exc

        if not response.choices:
            raise CompletionError("AI returned no choices")
        content = response.choices[0].message.content
        if content is None:
            raise CompletionError("AI returned empty response")
        return content
