from abc import ABC, abstractmethod

from docintel.credentials.models import AccessToken


class BaseTokenProvider(ABC):
    """Contract for all credential provider adapters."""

    @abstractmethod
    async def fetch_token(self) -> AccessToken:
        """Request a new access token from the provider.

        Raises:
            CredentialError: if configuration is missing or the provider call fails.
        """
