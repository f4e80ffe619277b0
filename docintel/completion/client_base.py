from abc import ABC, abstractmethod


class BaseCompletionClient(ABC):
    """Contract for provider-specific generative completion clients.

    Classification, analysis and chat grounding all go through this single
    capability so each can be swapped or mocked independently.
    """

    @abstractmethod
    async def complete(
        self,
        *,
        prompt: str,
        context: str = "",
        system_prompt: str = "",
        temperature: float = 0.0,
        json_schema: dict[str, object] | None = None,
    ) -> str:
        """Return the provider response as plain text.

        Raises:
            CompletionError: on an unusable response or a rejected request.
            CompletionNetworkError: on network, timeout or server failures.
            CredentialError: if no access token can be obtained.
        """
