from docintel.errors import ExternalServiceError


class UnsupportedLanguageError(Exception):
    """Raised when a language code is outside the supported matrix."""


class TranslationError(ExternalServiceError):
    """Raised when the translation service fails."""
