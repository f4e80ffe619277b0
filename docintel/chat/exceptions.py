from docintel.errors import ExternalServiceError, classify_error


class ChatError(Exception):
    """Base exception for rejected chat queries."""


class EmptyQueryError(ChatError):
    pass


class DocumentNotReadyError(ChatError):
    """Raised when a query targets a document that has not been analyzed."""


class ChatUnavailableError(ExternalServiceError):
    """Raised when the completion service cannot answer a query."""

    def __init__(self, message: str, cause: BaseException) -> None:
        super().__init__(message, classify_error(cause))
