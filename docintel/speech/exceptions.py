from docintel.errors import ExternalServiceError


class SpeechInputError(Exception):
    """Base exception for audio rejected before any external call."""


class EmptyAudioError(SpeechInputError):
    pass


class AudioTooLargeError(SpeechInputError):
    pass


class TranscriptionError(ExternalServiceError):
    """Raised when the speech recognition service fails."""
