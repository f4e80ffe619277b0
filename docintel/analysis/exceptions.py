from docintel.errors import ErrorCategory, ExternalServiceError, classify_error


class AnalysisUnavailableError(ExternalServiceError):
    """Raised when the completion service cannot produce an analysis."""

    def __init__(self, message: str, cause: BaseException | None = None) -> None:
        category = classify_error(cause) if cause is not None else ErrorCategory.UNAVAILABLE
        super().__init__(message, category)
