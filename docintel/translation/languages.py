from docintel.translation.exceptions import UnsupportedLanguageError

SUPPORTED_LANGUAGES: dict[str, str] = {
    "en": "English",
    "es": "Spanish",
    "fr": "French",
    "de": "German",
    "it": "Italian",
    "pt": "Portuguese",
    "ru": "Russian",
    "zh": "Chinese (Simplified)",
    "ja": "Japanese",
    "ko": "Korean",
    "ar": "Arabic",
    "hi": "Hindi",
    "nl": "Dutch",
    "sv": "Swedish",
    "da": "Danish",
    "no": "Norwegian",
    "fi": "Finnish",
    "pl": "Polish",
    "cs": "Czech",
    "hu": "Hungarian",
}


def is_supported(code: str) -> bool:
    return code in SUPPORTED_LANGUAGES


def require_supported(code: str) -> str:
    """Return *code* if it is supported.

    Raises:
        UnsupportedLanguageError: otherwise.
    """
    if not is_supported(code):
        raise UnsupportedLanguageError(
            f"Unsupported language '{code}'. Choose from: {sorted(SUPPORTED_LANGUAGES)}"
        )
    return code
