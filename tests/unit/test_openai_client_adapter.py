from unittest.mock import AsyncMock, MagicMock

import httpx
import openai
import pytest

from docintel.completion.exceptions import CompletionError, CompletionNetworkError
from docintel.completion.openai_client_adapter import OpenAIClientAdapter
from docintel.errors import ErrorCategory


def _make_mock_response(content: str | None) -> MagicMock:
    choice = MagicMock()
    choice.message.content = content
    response = MagicMock()
    response.choices = [choice]
    return response


def _make_adapter(create: AsyncMock) -> tuple[OpenAIClientAdapter, MagicMock]:
    mock_client = MagicMock()
    mock_client.with_options.return_value = mock_client
    mock_client.chat.completions.create = create
    adapter = OpenAIClientAdapter(
        model="google/gemini-1.5-pro",
        token_source=AsyncMock(return_value="access-token"),
        timeout_seconds=30,
        client=mock_client,
    )
    return adapter, mock_client


def _api_response(status_code: int) -> httpx.Response:
    return httpx.Response(status_code, request=httpx.Request("POST", "https://ai.example.test"))


class TestOpenAIClientAdapter:
    @pytest.mark.asyncio
    async def test_returns_content(self) -> None:
        adapter, _ = _make_adapter(AsyncMock(return_value=_make_mock_response('{"ok": true}')))
        content = await adapter.complete(prompt="user", json_schema={"title": "t"})
        assert content == '{"ok": true}'

    @pytest.mark.asyncio
    async def test_applies_fresh_token_per_call(self) -> None:
        adapter, mock_client = _make_adapter(AsyncMock(return_value=_make_mock_response("x")))
        await adapter.complete(prompt="user")
        mock_client.with_options.assert_called_once_with(api_key="access-token")

    @pytest.mark.asyncio
    async def test_sends_context_and_schema(self) -> None:
        create = AsyncMock(return_value=_make_mock_response("x"))
        adapter, _ = _make_adapter(create)

        await adapter.complete(
            prompt="What is the fee?",
            context="[clause-2] Late Fee",
            system_prompt="system",
            temperature=0.3,
            json_schema={"title": "chat_answer", "type": "object"},
        )

        kwargs = create.call_args.kwargs
        assert kwargs["temperature"] == 0.3
        assert kwargs["messages"][0] == {"role": "system", "content": "system"}
        assert kwargs["messages"][1]["content"].startswith("Context:\n[clause-2] Late Fee")
        assert kwargs["response_format"]["json_schema"]["name"] == "chat_answer"

    @pytest.mark.asyncio
    async def test_raises_error_for_empty_content(self) -> None:
        adapter, _ = _make_adapter(AsyncMock(return_value=_make_mock_response(None)))
        with pytest.raises(CompletionError, match="empty response"):
            await adapter.complete(prompt="user")

    @pytest.mark.asyncio
    async def test_raises_network_error_on_connection_failure(self) -> None:
        adapter, _ = _make_adapter(
            AsyncMock(side_effect=openai.APIConnectionError(request=MagicMock()))
        )
        with pytest.raises(CompletionNetworkError, match="network error") as exc_info:
            await adapter.complete(prompt="user")
        assert exc_info.value.category is ErrorCategory.UNAVAILABLE

    @pytest.mark.asyncio
    async def test_raises_network_error_on_timeout(self) -> None:
        adapter, _ = _make_adapter(AsyncMock(side_effect=httpx.TimeoutException("timeout")))
        with pytest.raises(CompletionNetworkError, match="timeout") as exc_info:
            await adapter.complete(prompt="user")
        assert exc_info.value.category is ErrorCategory.TIMEOUT

    @pytest.mark.asyncio
    async def test_rejected_credentials_are_not_network_errors(self) -> None:
        error = openai.AuthenticationError("bad key", response=_api_response(401), body=None)
        adapter, _ = _make_adapter(AsyncMock(side_effect=error))
        with pytest.raises(CompletionError) as exc_info:
            await adapter.complete(prompt="user")
        assert not isinstance(exc_info.value, CompletionNetworkError)
        assert exc_info.value.category is ErrorCategory.CREDENTIAL

    @pytest.mark.asyncio
    async def test_quota_error_is_classified(self) -> None:
        error = openai.RateLimitError("slow down", response=_api_response(429), body=None)
        adapter, _ = _make_adapter(AsyncMock(side_effect=error))
        with pytest.raises(CompletionNetworkError) as exc_info:
            await adapter.complete(prompt="user")
        assert exc_info.value.category is ErrorCategory.QUOTA
