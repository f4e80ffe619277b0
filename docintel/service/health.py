"""Dependency health report. Never contains token material."""

from collections.abc import Awaitable, Callable
from datetime import datetime, timezone

from docintel.config.settings import Settings
from docintel.credentials.cache import CredentialCache
from docintel.errors import ExternalServiceError, classify_error
from docintel.extraction.documentai_client import DocumentAiClient
from docintel.logging.logger import Log
from docintel.service.models import HealthReport, ServiceHealth
from docintel.translation.base import BaseTranslationClient


class HealthChecker:
    """Reports configuration and reachability of every external dependency.

    The credential provider, the structuring processor and the translation
    service are probed; completion and speech are only checked for
    configuration because probing them costs a billable request.
    """

    def __init__(
        self,
        *,
        settings: Settings,
        credential_cache: CredentialCache,
        structuring_client: DocumentAiClient | None,
        translation_client: BaseTranslationClient,
    ) -> None:
        self._settings = settings
        self._credential_cache = credential_cache
        self._structuring_client = structuring_client
        self._translation_client = translation_client

    async def check(self) -> HealthReport:
        settings = self._settings
        credentials_configured = bool(
            settings.gcp_project_id
            and (settings.google_service_account_key or settings.google_service_account_key_file)
        )
        credentials = await self._probe(
            "credentials", credentials_configured, self._credential_cache.get_access_token
        )
        credentials_ok = credentials.reachable is True

        services = {
            "credentials": credentials,
            "completion": ServiceHealth(configured=self._completion_configured()),
            "structuring": await self._probe(
                "structuring",
                self._structuring_client is not None and credentials_ok,
                self._structuring_client.probe if self._structuring_client else None,
            ),
            "translation": await self._probe(
                "translation", credentials_ok, self._translation_client.probe
            ),
            "speech": ServiceHealth(configured=credentials_configured),
        }
        report = HealthReport(
            status=_overall_status(services),
            services=services,
            checked_at=datetime.now(timezone.utc),
        )
        Log.info(f"Health check: {report.status}")
        return report

    def _completion_configured(self) -> bool:
        provider = self._settings.completion_provider.lower()
        if provider == "example":
            return True
        if provider == "vertex":
            return bool(self._settings.gcp_project_id)
        return bool(self._settings.completion_api_key or provider == "ollama")

    @staticmethod
    async def _probe(
        name: str,
        configured: bool,
        probe: Callable[[], Awaitable[object]] | None,
    ) -> ServiceHealth:
        if not configured or probe is None:
            return ServiceHealth(configured=configured)
        try:
            await probe()
        except ExternalServiceError as exc:
            category = classify_error(exc)
            Log.warning(f"Health probe for {name} failed ({category}): {exc}")
            return ServiceHealth(
                configured=True, reachable=False, error_category=category.value, error=str(exc)
            )
        return ServiceHealth(configured=True, reachable=True)


def _overall_status(services: dict[str, ServiceHealth]) -> str:
    if services["credentials"].reachable is not True:
        return "unhealthy"
    if all(health.configured and health.reachable is not False for health in services.values()):
        return "healthy"
    return "degraded"
