class DocumentStoreError(Exception):
    """Base exception for document state-machine misuse."""


class NotFoundError(DocumentStoreError):
    """Raised when a document identifier is unknown to the store."""


class AlreadyAnalyzedError(DocumentStoreError):
    """Raised when a document already reached a terminal analysis state."""
