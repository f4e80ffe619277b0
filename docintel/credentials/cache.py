"""Process-wide access token cache with single-flight refresh."""

import asyncio
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

from docintel.credentials.base import BaseTokenProvider
from docintel.credentials.models import AccessToken
from docintel.logging.logger import Log


class CredentialCache:
    """Hands out a valid access token, refreshing it at most once at a time.

    Concurrent callers that find the token missing or about to expire queue
    on one lock; the first performs the refresh and the rest re-check the
    cache after acquiring it, so N waiters cost one provider round trip.
    """

    def __init__(
        self,
        provider: BaseTokenProvider,
        *,
        refresh_margin_seconds: int = 300,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._provider = provider
        self._margin = timedelta(seconds=refresh_margin_seconds)
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        self._token: AccessToken | None = None
        self._lock = asyncio.Lock()

    async def get_access_token(self) -> str:
        """Return a token string that is valid beyond the safety margin.

        Raises:
            CredentialError: if the refresh fails or configuration is missing.
        """
        cached = self._token
        if cached is not None and cached.is_fresh(self._clock(), self._margin):
            return cached.token

        async with self._lock:
            cached = self._token
            if cached is not None and cached.is_fresh(self._clock(), self._margin):
                return cached.token
            Log.info("Refreshing access token")
            fresh = await self._provider.fetch_token()
            self._token = fresh
            Log.info(f"Access token refreshed, expires at {fresh.expires_at.isoformat()}")
            return fresh.token

    def invalidate(self) -> None:
        """Drop the cached token so the next caller refreshes it."""
        self._token = None
