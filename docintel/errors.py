"""Shared classification for failures of external AI services.

Every adapter error derives from ExternalServiceError so the boundary layer
can present an actionable message (credential vs. quota vs. permission ...)
without parsing raw error text.
"""

from enum import StrEnum

import httpx
import openai


class ErrorCategory(StrEnum):
    CREDENTIAL = "credential"
    QUOTA = "quota"
    PERMISSION = "permission"
    TIMEOUT = "timeout"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"


class ExternalServiceError(Exception):
    """Base exception for failures of an external dependency."""

    def __init__(self, message: str, category: ErrorCategory | None = None) -> None:
        super().__init__(message)
        self.category = category if category is not None else _category_from_text(message)


_KEYWORD_CATEGORIES: tuple[tuple[ErrorCategory, tuple[str, ...]], ...] = (
    (ErrorCategory.CREDENTIAL, ("credential", "authentication", "unauthenticated")),
    (ErrorCategory.QUOTA, ("quota", "rate limit", "too many requests")),
    (ErrorCategory.PERMISSION, ("permission", "forbidden", "access denied")),
    (ErrorCategory.TIMEOUT, ("timeout", "timed out")),
)


def _category_from_text(message: str) -> ErrorCategory:
    lowered = message.lower()
    for category, keywords in _KEYWORD_CATEGORIES:
        if any(keyword in lowered for keyword in keywords):
            return category
    return ErrorCategory.UNKNOWN


def category_for_status(status_code: int) -> ErrorCategory:
    """Map an HTTP status code returned by an external service to a category."""
    if status_code == 401:
        return ErrorCategory.CREDENTIAL
    if status_code == 403:
        return ErrorCategory.PERMISSION
    if status_code == 429:
        return ErrorCategory.QUOTA
    if status_code in (408, 504):
        return ErrorCategory.TIMEOUT
    if status_code >= 500:
        return ErrorCategory.UNAVAILABLE
    return ErrorCategory.UNKNOWN


def classify_error(exc: BaseException) -> ErrorCategory:
    """Classify any exception raised while talking to an external service."""
    if isinstance(exc, ExternalServiceError):
        return exc.category
    if isinstance(exc, openai.AuthenticationError):
        return ErrorCategory.CREDENTIAL
    if isinstance(exc, openai.PermissionDeniedError):
        return ErrorCategory.PERMISSION
    if isinstance(exc, openai.RateLimitError):
        return ErrorCategory.QUOTA
    if isinstance(exc, (openai.APITimeoutError, httpx.TimeoutException, TimeoutError)):
        return ErrorCategory.TIMEOUT
    if isinstance(exc, httpx.HTTPStatusError):
        return category_for_status(exc.response.status_code)
    if isinstance(exc, (openai.APIConnectionError, httpx.TransportError)):
        return ErrorCategory.UNAVAILABLE
    return _category_from_text(str(exc))
