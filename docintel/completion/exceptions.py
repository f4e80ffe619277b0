from docintel.errors import ExternalServiceError


class CompletionError(ExternalServiceError):
    """Raised when the generative completion service fails or answers unusably."""


class CompletionNetworkError(CompletionError):
    """Raised when the completion call fails due to network/infrastructure issues."""
