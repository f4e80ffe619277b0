import asyncio
import json
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2 import service_account

from docintel.credentials.base import BaseTokenProvider
from docintel.credentials.exceptions import CredentialError
from docintel.credentials.models import AccessToken

_DEFAULT_LIFETIME = timedelta(hours=1)


class ServiceAccountTokenProvider(BaseTokenProvider):
    """Obtains access tokens for a Google service account.

    The key is the JSON document downloaded from the cloud console, given
    either inline or as a file path. Signing the JWT assertion and exchanging
    it is left to google-auth; the blocking refresh runs in a worker thread.
    """

    def __init__(
        self,
        *,
        project_id: str,
        service_account_key: str,
        service_account_key_file: str,
        scope: str,
        timeout_seconds: int,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._project_id = project_id
        self._service_account_key = service_account_key
        self._service_account_key_file = service_account_key_file
        self._scope = scope
        self._timeout_seconds = timeout_seconds
        self._clock = clock or (lambda: datetime.now(timezone.utc))

    async def fetch_token(self) -> AccessToken:
        self._require_configuration()
        info = self._load_key_info()
        try:
            credentials = service_account.Credentials.from_service_account_info(
                info, scopes=[self._scope]
            )
            await asyncio.wait_for(
                asyncio.to_thread(credentials.refresh, Request()),
                timeout=self._timeout_seconds,
            )
        except asyncio.TimeoutError as exc:
            raise CredentialError(
                f"Token refresh timed out after {self._timeout_seconds}s"
            ) from exc
        except GoogleAuthError as exc:
            raise CredentialError(f"Token refresh failed: {exc}") from exc
        except ValueError as exc:
            raise CredentialError(f"Service account key is malformed: {exc}") from exc

        return self._build_token(credentials.token, credentials.expiry)

    def _require_configuration(self) -> None:
        missing = []
        if not self._project_id:
            missing.append("gcp_project_id")
        if not (self._service_account_key or self._service_account_key_file):
            missing.append("google_service_account_key or google_service_account_key_file")
        if missing:
            raise CredentialError(
                f"Missing credential configuration: {', '.join(missing)}"
            )

    def _load_key_info(self) -> dict[str, Any]:
        try:
            if self._service_account_key:
                info = json.loads(self._service_account_key)
            else:
                info = json.loads(Path(self._service_account_key_file).read_text(encoding="utf-8"))
        except OSError as exc:
            raise CredentialError(f"Service account key file is unreadable: {exc}") from exc
        except ValueError as exc:
            raise CredentialError(f"Service account key is not valid JSON: {exc}") from exc
        if not isinstance(info, dict):
            raise CredentialError("Service account key must be a JSON object")
        return info

    def _build_token(self, token: str | None, expiry: datetime | None) -> AccessToken:
        if not token:
            raise CredentialError("Token refresh returned no access token")
        if expiry is None:
            expires_at = self._clock() + _DEFAULT_LIFETIME
        elif expiry.tzinfo is None:
            # google-auth reports expiry as naive UTC
            expires_at = expiry.replace(tzinfo=timezone.utc)
        else:
            expires_at = expiry
        return AccessToken(token=token, expires_at=expires_at)
