from typing import ClassVar

from docintel.completion.client_base import BaseCompletionClient
from docintel.completion.example_client_adapter import ExampleClientAdapter
from docintel.completion.openai_client_adapter import OpenAIClientAdapter, TokenSource
from docintel.config.settings import Settings


class CompletionClientFactory:
    """Creates the configured completion client adapter."""

    VERTEX_BASE_URL: ClassVar[str] = (
        "https://{location}-aiplatform.googleapis.com/v1beta1/projects/{project}"
        "/locations/{location}/endpoints/openapi"
    )

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }

    @classmethod
    def create(
        cls,
        settings: Settings,
        token_source: TokenSource | None = None,
    ) -> BaseCompletionClient:
        """Create a completion client from application settings.

        Args:
            settings: Application settings.
            token_source: Coroutine function returning a bearer token. Required
                for the "vertex" provider, where it is the shared credential cache.
        """
        provider = settings.completion_provider.lower()
        if provider == "example":
            return ExampleClientAdapter()
        return OpenAIClientAdapter(
            model=settings.completion_model_name,
            token_source=cls._resolve_token_source(provider, settings, token_source),
            timeout_seconds=settings.completion_timeout_seconds,
            base_url=cls._resolve_base_url(provider, settings),
        )

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "vertex":
            if not settings.gcp_project_id:
                raise ValueError("gcp_project_id is required for completion_provider=vertex")
            return cls.VERTEX_BASE_URL.format(
                location=settings.gcp_location, project=settings.gcp_project_id
            )
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = (settings.completion_base_url or "").strip()
            if not url:
                raise ValueError(
                    "completion_base_url is required for "
                    "completion_provider=openai_compatible"
                )
            return url
        default_base_url = cls.OPENAI_COMPATIBLE_BASE_URLS.get(provider)
        if default_base_url is not None:
            return default_base_url
        supported = [
            "example",
            "vertex",
            "openai",
            "openai_compatible",
            *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS),
        ]
        raise ValueError(
            f"Unknown completion provider '{provider}'. Choose from: {supported}"
        )

    @classmethod
    def _resolve_token_source(
        cls,
        provider: str,
        settings: Settings,
        token_source: TokenSource | None,
    ) -> TokenSource:
        if provider == "vertex":
            if token_source is None:
                raise ValueError("A credential token source is required for completion_provider=vertex")
            return token_source
        api_key = settings.completion_api_key

        async def static_token() -> str:
            return api_key

        return static_token
