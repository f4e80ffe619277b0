from docintel.errors import ExternalServiceError


class ExtractionError(ExternalServiceError):
    """Raised when the structuring service cannot extract text from a document."""
